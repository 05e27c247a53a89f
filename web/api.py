"""FastAPI application"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Cookie, Depends, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from auth import (
    ADMIN_COOKIE, PARTNER_COOKIE, AdminSession, AuthService, LoginRequest,
    UserRole, cookie_name, dump_session_cookie, read_session_cookie
)
from config import settings
from core.enums import EstimateStatusType, PartnerStatus
from core.exceptions import (
    AuthError, DatabaseError, DuplicateError, ExportError, FileParseError,
    FileReadError, NotFoundError, UnsupportedFileError, ValidationError,
    WindeskError
)
from core.models import (
    DashboardSummary, EstimateCalculation, ExtractedEstimate,
    FixedPackageOption, LineItem
)
from dashboard.aggregator import customer_record, date_range, partner_record, summarize
from db import (
    AdminRepository, CustomerRepository, EstimateRepository,
    PartnerRepository, get_supabase_client
)
from estimates import EstimateReceiver, build_estimate_record, calculate_estimate, fixed_package_table
from exports import export_csv, export_date_range, export_filename, export_xlsx
from utils.links import public_estimate_url
from utils.log import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    setup_logging()
    logger.info("Windesk API starting")
    yield
    logger.info("Windesk API stopped")


app = FastAPI(
    title="Windesk API",
    description="Window installation sales operations API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

receiver = EstimateReceiver()

EXPORT_TABLES = {
    "customers": ("신청일", CustomerRepository),
    "estimates": ("date", EstimateRepository),
    "partners": ("created_at", PartnerRepository),
}


# ─────────────────────────────────────────────────────────────
# Error mapping
# ─────────────────────────────────────────────────────────────

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"success": False, "message": message}, status_code=status_code)


@app.exception_handler(WindeskError)
async def windesk_error_handler(request, exc: WindeskError):
    if isinstance(exc, AuthError):
        return _error(exc.status_code, exc.message)
    if isinstance(exc, (UnsupportedFileError, ValidationError, ExportError)):
        return _error(400, str(exc))
    if isinstance(exc, (FileParseError, FileReadError)):
        return _error(422, str(exc))
    if isinstance(exc, NotFoundError):
        return _error(404, str(exc))
    if isinstance(exc, DuplicateError):
        return _error(409, str(exc))
    if isinstance(exc, DatabaseError):
        logger.error("Database error: %s", exc)
        return _error(500, "데이터베이스 처리 중 오류가 발생했습니다.")
    logger.exception("Unhandled application error")
    return _error(500, str(exc))


# ─────────────────────────────────────────────────────────────
# Dependencies
# ─────────────────────────────────────────────────────────────

def get_client():
    return get_supabase_client()


def get_estimate_repo(client=Depends(get_client)) -> EstimateRepository:
    return EstimateRepository(client)


def get_customer_repo(client=Depends(get_client)) -> CustomerRepository:
    return CustomerRepository(client)


def get_partner_repo(client=Depends(get_client)) -> PartnerRepository:
    return PartnerRepository(client)


def get_admin_repo(client=Depends(get_client)) -> AdminRepository:
    return AdminRepository(client)


def get_auth_service(
    admins: AdminRepository = Depends(get_admin_repo),
    partners: PartnerRepository = Depends(get_partner_repo)
) -> AuthService:
    return AuthService(admins, partners)


def get_admin_session(admin_session: Optional[str] = Cookie(None)) -> AdminSession:
    """Require a logged-in administrator"""
    session = read_session_cookie(admin_session, UserRole.ADMIN)
    if session is None:
        raise AuthError("관리자 로그인이 필요합니다.", status_code=401)
    return session


# ─────────────────────────────────────────────────────────────
# Request models
# ─────────────────────────────────────────────────────────────

class CalculateRequest(BaseModel):
    total_sum: int = 0
    supply_cost: int = 0
    total_etc: int = 0
    price_multiplier: float = Field(default_factory=lambda: settings.PRICE_MULTIPLIER)
    discount_rate: float = Field(default_factory=lambda: settings.DEFAULT_DISCOUNT_RATE)
    extra_discount: int = 0


class SaveEstimateRequest(CalculateRequest):
    customer_name: str
    customer_phone: str
    address: Optional[str] = None
    branch: Optional[str] = None
    status_type: EstimateStatusType = EstimateStatusType.PRELIMINARY
    items: List[LineItem] = []


class RemarkUpdate(BaseModel):
    remark: str


class PartnerApplication(BaseModel):
    """Partner sign-up form"""
    id: str = ""
    name: str = ""
    ceo_name: str = Field(default="", alias="ceoName")
    contact: str = ""
    address: str = ""
    password: str = ""
    business_number: Optional[str] = Field(default=None, alias="businessNumber")
    email: Optional[str] = None
    account_number: Optional[str] = Field(default=None, alias="accountNumber")
    parent_partner_id: Optional[str] = Field(default=None, alias="parentPartnerId")

    class Config:
        populate_by_name = True


class PartnerIdRequest(BaseModel):
    id: str = ""


class PartnerUpdate(PartnerIdRequest):
    """Partner fields an administrator may change; unset fields are left alone"""
    name: Optional[str] = None
    ceo_name: Optional[str] = Field(default=None, alias="ceoName")
    contact: Optional[str] = None
    address: Optional[str] = None
    status: Optional[PartnerStatus] = None
    business_number: Optional[str] = Field(default=None, alias="businessNumber")
    email: Optional[str] = None
    account_number: Optional[str] = Field(default=None, alias="accountNumber")
    password: Optional[str] = None

    class Config:
        populate_by_name = True


def _require_partner_id(partner_id: str) -> str:
    if not partner_id:
        raise ValidationError("파트너 ID가 필요합니다.", "id")
    return partner_id


# ─────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────

@app.get("/api/health")
async def health():
    return {"status": "ok", "time": datetime.now().isoformat()}


@app.post("/api/auth/login")
def login(login_data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Check credentials and store the session as a JSON cookie"""
    session = service.login(login_data.id, login_data.password, login_data.is_admin)
    key = "admin" if login_data.is_admin else "partner"
    response = JSONResponse({"success": True, key: session.model_dump(mode="json", exclude={"role"})})
    response.set_cookie(
        cookie_name(session),
        dump_session_cookie(session),
        max_age=settings.SESSION_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax"
    )
    return response


@app.get("/api/auth/session")
def current_session(
    admin_session: Optional[str] = Cookie(None),
    partner_session: Optional[str] = Cookie(None)
):
    """Who is logged in, from the session cookies"""
    session = (
        read_session_cookie(admin_session, UserRole.ADMIN)
        or read_session_cookie(partner_session, UserRole.PARTNER)
    )
    if session is None:
        raise AuthError("로그인이 필요합니다.", status_code=401)
    return {"success": True, session.role.value: session.model_dump(mode="json", exclude={"role"})}


@app.post("/api/auth/logout")
def logout():
    response = JSONResponse({"success": True})
    response.delete_cookie(ADMIN_COOKIE)
    response.delete_cookie(PARTNER_COOKIE)
    return response


@app.post("/api/admin/init")
def init_admin(repo: AdminRepository = Depends(get_admin_repo)):
    """Seed the default administrator account if missing"""
    return {"success": True, "created": repo.create_initial_admin()}


@app.post("/api/partners/apply")
def apply_partner(form: PartnerApplication, repo: PartnerRepository = Depends(get_partner_repo)):
    """Register a partner awaiting approval"""
    required = (form.name, form.ceo_name, form.contact, form.address, form.id, form.password)
    if not all(required):
        raise ValidationError("업체명, 대표자명, 연락처, 주소, 아이디, 비밀번호는 필수입니다.")

    repo.create(
        form.id,
        form.name,
        form.password,
        ceo_name=form.ceo_name,
        contact=form.contact,
        address=form.address,
        business_number=form.business_number or "",
        email=form.email or "",
        account_number=form.account_number or "",
        parent_id=form.parent_partner_id or ""
    )
    logger.info("Partner application received from %s", form.id)
    return {"success": True}


@app.post("/api/partners/approve")
def approve_partner(
    body: PartnerIdRequest,
    repo: PartnerRepository = Depends(get_partner_repo),
    admin: AdminSession = Depends(get_admin_session)
):
    partner_id = _require_partner_id(body.id)
    if repo.update_by_uid(partner_id, {"status": PartnerStatus.APPROVED.value}) is None:
        raise NotFoundError("파트너를 찾을 수 없습니다.")
    logger.info("Partner %s approved by %s", partner_id, admin.id)
    return {"success": True}


@app.post("/api/partners/update")
def update_partner(
    body: PartnerUpdate,
    repo: PartnerRepository = Depends(get_partner_repo),
    admin: AdminSession = Depends(get_admin_session)
):
    partner_id = _require_partner_id(body.id)
    updates = body.model_dump(mode="json", exclude={"id"}, exclude_unset=True)
    if not updates:
        raise ValidationError("수정할 항목이 없습니다.")
    row = repo.update_by_uid(partner_id, updates)
    if row is None:
        raise NotFoundError("파트너를 찾을 수 없습니다.")
    return {"success": True, "partner": {k: v for k, v in row.items() if k != "password"}}


@app.post("/api/partners/delete")
def delete_partner(
    body: PartnerIdRequest,
    repo: PartnerRepository = Depends(get_partner_repo),
    admin: AdminSession = Depends(get_admin_session)
):
    partner_id = _require_partner_id(body.id)
    if not repo.delete_by_uid(partner_id):
        raise NotFoundError("파트너를 찾을 수 없습니다.")
    logger.info("Partner %s deleted by %s", partner_id, admin.id)
    return {"success": True, "message": "삭제되었습니다."}


@app.post("/api/estimates/parse", response_model=ExtractedEstimate)
async def parse_estimate(file: UploadFile = File(...)):
    """Extract an estimate from an uploaded workbook"""
    file_name = file.filename or ""
    if not receiver.supports(file_name):
        raise HTTPException(status_code=400, detail=f"Unsupported file type: {file_name}")
    try:
        data = await file.read()
    except Exception as e:
        raise FileReadError(f"Failed to read upload: {e}", file_name) from e
    return await receiver.parse_upload(data, file_name)


@app.post("/api/estimates/calculate", response_model=EstimateCalculation)
async def calculate(request: CalculateRequest):
    return calculate_estimate(
        total_sum=request.total_sum,
        supply_cost=request.supply_cost,
        total_etc=request.total_etc,
        price_multiplier=request.price_multiplier,
        discount_rate=request.discount_rate,
        extra_discount=request.extra_discount
    )


@app.post("/api/estimates")
def save_estimate(request: SaveEstimateRequest, repo: EstimateRepository = Depends(get_estimate_repo)):
    """Calculate and store an estimate, returning its public link"""
    calculation = calculate_estimate(
        total_sum=request.total_sum,
        supply_cost=request.supply_cost,
        total_etc=request.total_etc,
        price_multiplier=request.price_multiplier,
        discount_rate=request.discount_rate,
        extra_discount=request.extra_discount
    )
    record = build_estimate_record(
        customer_name=request.customer_name,
        customer_phone=request.customer_phone,
        total_sum=request.total_sum,
        calculation=calculation,
        items=request.items,
        status_type=request.status_type.value,
        discount_rate=request.discount_rate,
        extra_discount=request.extra_discount,
        price_multiplier=request.price_multiplier,
        address=request.address,
        branch=request.branch
    )
    row = repo.save(record)
    return {
        "success": True,
        "id": row.get("id"),
        "url": public_estimate_url(record.customer_name, record.customer_phone, record.status_type)
    }


@app.get("/api/estimates")
def list_estimates(repo: EstimateRepository = Depends(get_estimate_repo)) -> List[Dict[str, Any]]:
    return repo.list()


@app.get("/api/estimates/public")
def public_estimate(
    n: str = Query(..., description="Customer name"),
    p: str = Query(..., description="Customer phone"),
    t: str = Query(..., description="Estimate status type"),
    repo: EstimateRepository = Depends(get_estimate_repo)
):
    estimate = repo.get_public(n, p, t)
    if estimate is None:
        raise NotFoundError("견적서를 찾을 수 없습니다.")
    return estimate


@app.patch("/api/estimates/{estimate_id}/remark")
def update_remark(estimate_id: str, body: RemarkUpdate, repo: EstimateRepository = Depends(get_estimate_repo)):
    repo.update_remark(estimate_id, body.remark)
    return {"success": True}


@app.get("/api/estimates/{estimate_id}/fixed-packages", response_model=List[FixedPackageOption])
def fixed_packages(estimate_id: str, repo: EstimateRepository = Depends(get_estimate_repo)):
    estimate = repo.get(estimate_id)
    return fixed_package_table(estimate.get("final_benefit") or 0)


@app.get("/api/dashboard", response_model=DashboardSummary)
def dashboard(
    filter: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    customers: CustomerRepository = Depends(get_customer_repo),
    partners: PartnerRepository = Depends(get_partner_repo)
):
    """Customer status and partner counts for a date range"""
    range_start, range_end = date_range(filter, custom_start=start, custom_end=end)
    return summarize(
        [customer_record(row) for row in customers.list()],
        [partner_record(row) for row in partners.list()],
        range_start,
        range_end
    )


@app.get("/api/export/{table}")
def export_table(
    table: str,
    filter: str = "currentMonth",
    format: str = "xlsx",
    date_field: Optional[str] = None,
    client=Depends(get_client)
):
    """Download a table's rows for a date range as XLSX or CSV"""
    if table not in EXPORT_TABLES:
        raise HTTPException(status_code=404, detail=f"Unknown table: {table}")
    if format not in ("xlsx", "csv"):
        raise HTTPException(status_code=400, detail=f"Unsupported format: {format}")

    default_field, repo_cls = EXPORT_TABLES[table]
    date_field = date_field or default_field
    rows = repo_cls(client).list()
    if table == "customers":
        rows = [{**row, "신청일": customer_record(row)["신청일"]} for row in rows]

    start, end = export_date_range(filter)
    if format == "xlsx":
        content = export_xlsx(rows, date_field, start, end)
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    else:
        content = export_csv(rows, date_field, start, end)
        media_type = "text/csv; charset=utf-8"

    file_name = export_filename(table, start, end, format)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'}
    )
