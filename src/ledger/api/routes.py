"""JSON endpoints mirroring the bot commands: upload, total, breakdown, clear, help."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ledger.exceptions import NoRecordsError, SourceUnavailable
from ledger.logging import get_logger
from ledger.models import TransactionKind
from ledger.service import LedgerService

log = get_logger(__name__)

router = APIRouter()

CALCULATION_ERROR = "An error occurred while calculating."

HELP_STEPS = [
    "PUT your Stake deposit CSV to /users/{user_id}/records/deposit.",
    "PUT your Stake withdrawal CSV to /users/{user_id}/records/withdrawal.",
    "GET /users/{user_id}/total for total deposits, withdrawals and profit/loss.",
    "GET /users/{user_id}/breakdown for the per-currency view.",
    "DELETE /users/{user_id}/records to remove your uploaded files.",
]


def _decimal_to_str(obj: Any) -> Any:
    """Recursively convert Decimal values to strings for JSON serialization."""
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, dict):
        return {k: _decimal_to_str(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_decimal_to_str(item) for item in obj]
    return obj


def _service(request: Request) -> LedgerService:
    return request.app.state.ledger_service


def _calculation_failed(user_id: str, error: Exception) -> JSONResponse:
    log.error("calculation_failed", user_id=user_id, error=str(error))
    return JSONResponse(content={"error": CALCULATION_ERROR}, status_code=500)


@router.get("/help")
async def get_help() -> JSONResponse:
    """Usage instructions."""
    return JSONResponse(content={"title": "How to use the ledger", "steps": HELP_STEPS})


@router.put("/users/{user_id}/records/{kind}")
async def upload_records(user_id: str, kind: TransactionKind, request: Request) -> JSONResponse:
    """Store the request body as the user's deposit or withdrawal CSV."""
    data = await request.body()
    if not data:
        return JSONResponse(content={"error": "No file attachment provided."}, status_code=400)
    if len(data) > request.app.state.max_upload_bytes:
        return JSONResponse(content={"error": "File too large."}, status_code=400)

    try:
        await _service(request).upload(user_id, kind, data)
    except ValueError as e:
        return JSONResponse(content={"error": str(e)}, status_code=400)

    return JSONResponse(
        content={"message": f"{kind.value.capitalize()} file uploaded successfully!"},
        status_code=201,
    )


@router.get("/users/{user_id}/aggregate/{kind}")
async def get_aggregate(user_id: str, kind: TransactionKind, request: Request) -> JSONResponse:
    """Per-currency valuation of one record set."""
    try:
        result = await _service(request).compute_aggregate(user_id, kind)
    except NoRecordsError as e:
        return JSONResponse(content={"error": str(e)}, status_code=404)
    except SourceUnavailable as e:
        return _calculation_failed(user_id, e)

    return JSONResponse(content=_decimal_to_str({
        currency: {"amount": v.amount, "rate": v.rate, "value": v.value}
        for currency, v in result.items()
    }))


@router.get("/users/{user_id}/total")
async def get_total(user_id: str, request: Request) -> JSONResponse:
    """Total deposits, withdrawals and profit/loss in the reference currency."""
    try:
        summary = await _service(request).compute_summary(user_id)
    except NoRecordsError as e:
        return JSONResponse(content={"error": str(e)}, status_code=404)
    except SourceUnavailable as e:
        return _calculation_failed(user_id, e)

    return JSONResponse(content=_decimal_to_str({
        "total_deposited": summary.total_deposited,
        "total_withdrawn": summary.total_withdrawn,
        "profit_or_loss": summary.profit_or_loss,
        "status": summary.status.value,
    }))


@router.get("/users/{user_id}/breakdown")
async def get_breakdown(user_id: str, request: Request) -> JSONResponse:
    """Per-currency deposits, withdrawals and profit."""
    try:
        lines = await _service(request).compute_breakdown(user_id)
    except NoRecordsError as e:
        return JSONResponse(content={"error": str(e)}, status_code=404)
    except SourceUnavailable as e:
        return _calculation_failed(user_id, e)

    return JSONResponse(content=_decimal_to_str([
        {
            "currency": line.currency,
            "deposited": line.deposited,
            "withdrawn": line.withdrawn,
            "profit_or_loss": line.profit_or_loss,
        }
        for line in lines
    ]))


@router.delete("/users/{user_id}/records")
async def clear_records(user_id: str, request: Request) -> JSONResponse:
    """Delete both uploaded record sets of a user."""
    removed = await _service(request).clear(user_id)
    if removed:
        message = "Successfully deleted your deposit and withdrawal files."
    else:
        message = "No files were found to delete."
    return JSONResponse(content={"removed": removed, "message": message})
