import pytest

from core.exceptions import DatabaseError, DuplicateError, NotFoundError
from db import AdminRepository, CustomerRepository, EstimateRepository, PartnerRepository
from db.connection import create_supabase_client
from estimates.pricing import build_estimate_record, calculate_estimate


def _record(name="홍길동", phone="01012345678", status_type="가견적", total=1000000):
    return build_estimate_record(
        customer_name=name,
        customer_phone=phone,
        total_sum=total,
        calculation=calculate_estimate(total_sum=total, supply_cost=total),
        items=[],
        status_type=status_type,
        discount_rate=8,
        extra_discount=0,
        price_multiplier=1.35,
        date="2026-03-01"
    )


def test_save_and_get(fake_supabase):
    repo = EstimateRepository(fake_supabase)

    row = repo.save(_record())

    assert row["id"]
    assert row["created_at"] > 0
    assert repo.get(row["id"])["customer_name"] == "홍길동"


def test_get_public_returns_newest_match(fake_supabase):
    repo = EstimateRepository(fake_supabase)
    old = _record(total=1000000)
    old.created_at = 1000
    new = _record(total=2000000)
    new.created_at = 2000
    repo.save(old)
    repo.save(new)
    repo.save(_record(status_type="최종견적"))

    estimate = repo.get_public("홍길동", "01012345678", "가견적")

    assert estimate["total_sum"] == 2000000
    assert repo.get_public("홍길동", "01099999999", "가견적") is None


def test_update_remark(fake_supabase):
    repo = EstimateRepository(fake_supabase)
    row = repo.save(_record())

    repo.update_remark(row["id"], "2차 실측 필요")

    assert repo.get(row["id"])["remark"] == "2차 실측 필요"
    with pytest.raises(NotFoundError):
        repo.update_remark("missing", "x")


def test_list_newest_first(fake_supabase):
    fake_supabase.seed("customers", [
        {"name": "A", "created_at": "2026-01-01"},
        {"name": "B", "created_at": "2026-03-01"},
    ])
    rows = CustomerRepository(fake_supabase).list()
    assert [row["name"] for row in rows] == ["B", "A"]


def test_client_failures_become_database_errors(fake_supabase):
    fake_supabase.fail = True
    with pytest.raises(DatabaseError) as exc_info:
        CustomerRepository(fake_supabase).list()
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_partner_lifecycle(fake_supabase):
    repo = PartnerRepository(fake_supabase)

    created = repo.create("window1", "창호나라", "pw1234", ceo_name="김대표")
    assert created["status"] == "승인대기"

    with pytest.raises(DuplicateError):
        repo.create("window1", "다른이름", "pw")

    assert repo.update_by_uid("window1", {"status": "승인"})["status"] == "승인"
    assert repo.update_by_uid("nobody", {"status": "승인"}) is None
    assert repo.delete_by_uid("window1") is True
    assert repo.get_by_uid("window1") is None
    assert repo.delete_by_uid("window1") is False


def test_initial_admin_created_once(fake_supabase):
    repo = AdminRepository(fake_supabase)
    assert repo.create_initial_admin() is True
    assert repo.create_initial_admin() is False
    assert repo.get_by_uid("admin")["name"] == "최고관리자"


def test_unconfigured_client(monkeypatch):
    from config import settings

    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    with pytest.raises(DatabaseError):
        create_supabase_client()
