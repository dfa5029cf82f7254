# src/api/server.py

"""FastAPI server for the fleet revenue back office.

Endpoints:
    GET    /daily-statistics/by-date/{date}         daily report, computed if missing
    GET    /daily-statistics?start_date&end_date    stored rows, newest first
    POST   /daily-statistics/recalculate/{date}     recompute one day
    POST   /daily-statistics/batch-recalculate      recompute a date range
    GET    /monthly-statistics/by-month/{year}/{month}
    GET    /monthly-statistics/vehicle/{vehicle_id}/by-month/{year}/{month}
    GET    /monthly-statistics/revenue-matrix/{year}/{month}
    GET    /daily-incomes/by-date/{date}
    POST   /daily-incomes
    POST   /daily-incomes/batch
    PUT    /daily-incomes/{income_id}
    DELETE /daily-incomes/{income_id}               always refused
    GET    /payment-balance/by-month/{year}/{month}  saved snapshot or live calculation
    POST   /payment-balance/preview                 calculate with given salary, no save
    POST   /payment-balance                         save the month as a snapshot

Every response uses the envelope {"code", "message", "data"}.
Authentication sits in front of this app and only passes the operator name
through the X-Operator-Name header.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from fastapi import FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.application.services.daily_report_service import DailyReportService
from src.application.services.income_entry_service import (
    IncomeDeletionForbiddenError,
    IncomeDraft,
    IncomeEntryError,
    IncomeEntryService,
    IncomeNotFoundError,
)
from src.application.services.monthly_statistics_service import MonthlyStatisticsService
from src.application.services.payment_balance_service import (
    PaymentBalanceError,
    PaymentBalanceService,
)
from src.application.services.statistics_service import StatisticsService
from src.domain.date_range import parse_date

logger = logging.getLogger(__name__)

DEFAULT_OPERATOR = "system"


@dataclass
class ApiServices:
    statistics_service: StatisticsService
    daily_report_service: DailyReportService
    monthly_statistics_service: MonthlyStatisticsService
    income_entry_service: IncomeEntryService
    payment_balance_service: PaymentBalanceService


# ═══════════════════════════════════════════════════════════════════════════
# Request models
# ═══════════════════════════════════════════════════════════════════════════

class IncomeDraftIn(BaseModel):
    vehicle_id: str
    conductor_id: str
    turn1_amount: Optional[float] = None
    turn2_amount: Optional[float] = None
    turn3_amount: Optional[float] = None
    turn4_amount: Optional[float] = None
    turn5_amount: Optional[float] = None
    wechat_amount: Optional[float] = None
    fuel_subsidy: Optional[float] = None
    reward_penalty: Optional[float] = None
    is_overtime: bool = False
    remark: Optional[str] = None

    def to_draft(self) -> IncomeDraft:
        return IncomeDraft(**self.model_dump())


class IncomeCreateIn(IncomeDraftIn):
    date: str


class IncomeBatchIn(BaseModel):
    date: str
    incomes: List[IncomeDraftIn] = Field(default_factory=list)


class IncomeUpdateIn(BaseModel):
    """Only the fields sent by the client are applied."""
    conductor_id: Optional[str] = None
    turn1_amount: Optional[float] = None
    turn2_amount: Optional[float] = None
    turn3_amount: Optional[float] = None
    turn4_amount: Optional[float] = None
    turn5_amount: Optional[float] = None
    wechat_amount: Optional[float] = None
    fuel_subsidy: Optional[float] = None
    reward_penalty: Optional[float] = None
    is_overtime: Optional[bool] = None
    remark: Optional[str] = None


class PaymentBalanceIn(BaseModel):
    year: int
    month: int
    manager_salary: Optional[float] = None
    manual_average_income: Optional[float] = None


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def to_jsonable(value: Any) -> Any:
    """Convert domain objects (dataclasses, Decimal, date, Enum) to JSON types."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if hasattr(value, "to_dict"):
            return value.to_dict()
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    return value


def _envelope(data: Any = None, message: str = "ok", code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=code,
        content={"code": code, "message": message, "data": to_jsonable(data)},
    )


def _parse_date_param(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Tarih formatı hatalı")


def _check_month(month: int) -> None:
    if month < 1 or month > 12:
        raise HTTPException(status_code=400, detail="Ay formatı hatalı")


# ═══════════════════════════════════════════════════════════════════════════
# App factory
# ═══════════════════════════════════════════════════════════════════════════

def create_app(services: ApiServices) -> FastAPI:
    app = FastAPI(
        title="Fleet Revenue Back Office API",
        version="1.0",
        description="Daily income entry and daily/monthly statistics for the bus fleet.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error mapping ──────────────────────────────────────────────────────

    # Starlette raises its own 404/405 with the base class
    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return _envelope(message=str(exc.detail), code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": [str(part) for part in e.get("loc", ())], "msg": e.get("msg"), "type": e.get("type")}
            for e in exc.errors()
        ]
        return _envelope(data=errors, message="Doğrulama başarısız", code=422)

    @app.exception_handler(IncomeDeletionForbiddenError)
    async def _deletion_forbidden(request: Request, exc: IncomeDeletionForbiddenError):
        return _envelope(message=str(exc), code=403)

    @app.exception_handler(IncomeEntryError)
    async def _income_entry_error(request: Request, exc: IncomeEntryError):
        return _envelope(data=exc.errors or None, message=str(exc), code=422)

    @app.exception_handler(IncomeNotFoundError)
    async def _income_not_found(request: Request, exc: IncomeNotFoundError):
        return _envelope(message=str(exc), code=404)

    @app.exception_handler(PaymentBalanceError)
    async def _payment_balance_error(request: Request, exc: PaymentBalanceError):
        return _envelope(data=exc.errors or None, message=str(exc), code=422)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _envelope(message="Sunucu hatası", code=500)

    # ── Health ─────────────────────────────────────────────────────────────

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    # ── Daily statistics ───────────────────────────────────────────────────

    @app.get("/daily-statistics/by-date/{stat_date}")
    def daily_statistics_by_date(stat_date: str):
        day = _parse_date_param(stat_date)
        report = services.daily_report_service.get_daily_report(day)
        return _envelope(report)

    @app.get("/daily-statistics")
    def daily_statistics_range(
        start_date: str = Query(..., description="YYYY-MM-DD, inclusive"),
        end_date: str = Query(..., description="YYYY-MM-DD, inclusive"),
    ):
        start = _parse_date_param(start_date)
        end = _parse_date_param(end_date)
        rows = services.statistics_service.get_by_date_range(start, end)
        return _envelope(rows)

    @app.post("/daily-statistics/recalculate/{stat_date}")
    def recalculate(stat_date: str):
        day = _parse_date_param(stat_date)
        statistics = services.statistics_service.recalculate(day)
        return _envelope(statistics, message="Yeniden hesaplandı")

    @app.post("/daily-statistics/batch-recalculate")
    def batch_recalculate(
        start_date: str = Query(...),
        end_date: str = Query(...),
    ):
        start = _parse_date_param(start_date)
        end = _parse_date_param(end_date)
        count = services.statistics_service.batch_recalculate(start, end)
        return _envelope({"count": count}, message="Yeniden hesaplandı")

    # ── Monthly statistics ─────────────────────────────────────────────────

    @app.get("/monthly-statistics/by-month/{year}/{month}")
    def monthly_by_month(year: int, month: int):
        _check_month(month)
        return _envelope(services.monthly_statistics_service.get_by_month(year, month))

    @app.get("/monthly-statistics/vehicle/{vehicle_id}/by-month/{year}/{month}")
    def monthly_vehicle_detail(vehicle_id: str, year: int, month: int):
        _check_month(month)
        records = services.monthly_statistics_service.get_vehicle_detail_by_month(vehicle_id, year, month)
        return _envelope({
            "vehicle_id": vehicle_id,
            "year": year,
            "month": month,
            "records": records,
        })

    @app.get("/monthly-statistics/revenue-matrix/{year}/{month}")
    def monthly_revenue_matrix(year: int, month: int):
        _check_month(month)
        return _envelope(services.monthly_statistics_service.get_revenue_matrix(year, month))

    # ── Daily incomes ──────────────────────────────────────────────────────

    @app.get("/daily-incomes/by-date/{income_date}")
    def incomes_by_date(income_date: str):
        day = _parse_date_param(income_date)
        slots = services.income_entry_service.get_by_date(day)
        return _envelope({"date": day, "vehicles": slots})

    @app.post("/daily-incomes")
    def create_income(
        payload: IncomeCreateIn,
        x_operator_name: str = Header(default=DEFAULT_OPERATOR),
    ):
        day = _parse_date_param(payload.date)
        draft = IncomeDraft(**payload.model_dump(exclude={"date"}))
        income = services.income_entry_service.create_income(day, draft, x_operator_name)
        return _envelope(income, message="Oluşturuldu", code=201)

    @app.post("/daily-incomes/batch")
    def batch_save_incomes(
        payload: IncomeBatchIn,
        x_operator_name: str = Header(default=DEFAULT_OPERATOR),
    ):
        day = _parse_date_param(payload.date)
        drafts = [item.to_draft() for item in payload.incomes]
        incomes = services.income_entry_service.batch_save(day, drafts, x_operator_name)
        return _envelope(incomes, message="Toplu kayıt başarılı", code=201)

    @app.put("/daily-incomes/{income_id}")
    def update_income(
        income_id: int,
        payload: IncomeUpdateIn,
        x_operator_name: str = Header(default=DEFAULT_OPERATOR),
    ):
        changes = payload.model_dump(exclude_unset=True)
        income = services.income_entry_service.update_income(income_id, changes, x_operator_name)
        return _envelope(income, message="Güncellendi")

    @app.delete("/daily-incomes/{income_id}")
    def delete_income(income_id: int):
        services.income_entry_service.delete_income(income_id)
        return _envelope(message="Silindi")

    # ── Payment balance ────────────────────────────────────────────────────

    @app.get("/payment-balance/by-month/{year}/{month}")
    def payment_balance_by_month(year: int, month: int):
        _check_month(month)
        return _envelope(services.payment_balance_service.get_by_month(year, month))

    @app.post("/payment-balance/preview")
    def payment_balance_preview(payload: PaymentBalanceIn):
        balance = services.payment_balance_service.preview(
            payload.year, payload.month, payload.manager_salary, payload.manual_average_income,
        )
        return _envelope(balance)

    @app.post("/payment-balance")
    def save_payment_balance(
        payload: PaymentBalanceIn,
        x_operator_name: str = Header(default=DEFAULT_OPERATOR),
    ):
        snapshot = services.payment_balance_service.save(
            payload.year,
            payload.month,
            payload.manager_salary,
            payload.manual_average_income,
            x_operator_name,
        )
        return _envelope(
            {"id": snapshot.id, "year": snapshot.year, "month": snapshot.month},
            message="Kaydedildi",
        )

    return app
