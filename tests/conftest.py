"""Shared fixtures: in-memory Supabase client and estimate workbooks"""

import copy
import itertools
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest
from openpyxl import Workbook


class FakeQuery:
    """Chainable query builder mimicking supabase-py's table API"""

    def __init__(self, db: "FakeSupabase", table_name: str):
        self.db = db
        self.table_name = table_name
        self.action = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.desc = False
        self.row_limit = None

    def select(self, *columns):
        self.action = "select"
        return self

    def insert(self, data):
        self.action = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.action = "update"
        self.payload = data
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = column
        self.desc = desc
        return self

    def limit(self, count: int):
        self.row_limit = count
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        if self.db.fail:
            raise RuntimeError("connection refused")

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.action == "insert":
            records = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for record in records:
                row = dict(record)
                row.setdefault("id", str(next(self.db.ids)))
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return SimpleNamespace(data=inserted)

        matched = [row for row in rows if self._matches(row)]

        if self.action == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=copy.deepcopy(matched))

        if self.action == "delete":
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(matched))

        if self.order_by:
            matched = sorted(
                matched,
                key=lambda row: (row.get(self.order_by) is not None, row.get(self.order_by) or 0),
                reverse=self.desc
            )
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        return SimpleNamespace(data=copy.deepcopy(matched))


class FakeSupabase:
    """In-memory stand-in for supabase.Client"""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.ids = itertools.count(1)
        self.fail = False

    def table(self, table_name: str) -> FakeQuery:
        return FakeQuery(self, table_name)

    def seed(self, table_name: str, rows: List[Dict[str, Any]]):
        for row in rows:
            self.table(table_name).insert(row).execute()


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


def build_estimate_rows(items, total=None, address="서울시 강남구 테헤란로 1", phone="010-9876-5432"):
    """
    Rows shaped like the supplier estimate template

    items: (loc, prod, model, price) tuples; price lands in column 18.
    """
    width = 20

    def blank():
        return [None] * width

    rows = []
    header = blank()
    header[0] = "견적서"
    rows.append(header)

    info = blank()
    info[0] = "현장주소"
    info[2] = address
    info[6] = "연락처"
    info[10] = phone
    rows.append(info)

    table_header = blank()
    table_header[0] = "순번"
    table_header[1] = "설치위치"
    table_header[2] = "품명"
    table_header[3] = "모델"
    table_header[18] = "금액"
    rows.append(table_header)

    for no, (loc, prod, model, price) in enumerate(items, start=1):
        row = blank()
        row[0] = no
        row[1] = loc
        row[2] = prod
        row[3] = model
        row[18] = price
        rows.append(row)

    if total is not None:
        total_row = blank()
        total_row[1] = "합계"
        total_row[5] = total
        rows.append(total_row)

    return rows


def save_workbook(rows, path: Path) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "견적서"
    for r, row in enumerate(rows, start=1):
        for c, value in enumerate(row, start=1):
            if value is not None:
                sheet.cell(row=r, column=c, value=value)
    workbook.save(path)
    return path


@pytest.fixture
def estimate_rows():
    return build_estimate_rows


@pytest.fixture
def estimate_workbook(tmp_path: Path):
    """Factory writing an estimate workbook into tmp_path"""
    def _build(file_name="홍길동_01012345678.xlsx", **kwargs):
        items = kwargs.pop("items", [
            ("거실", "시스템창호", "KCC-100", 450000),
            ("안방", "시스템창호", "KCC-200", 380000),
        ])
        return save_workbook(build_estimate_rows(items, **kwargs), tmp_path / file_name)
    return _build
