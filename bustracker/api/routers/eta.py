"""ETA endpoint — the single remote-callable command.

Routes
------
POST /eta    Body: {"stop": "...", "route": "..."}

Returns ``{"ok": <minutes>}`` on success or ``{"error": "<message>"}`` with a
non-2xx status on failure.
"""

from __future__ import annotations

from typing import Union

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from bustracker.errors import (
    EtaError,
    LockAcquisitionFailure,
    NoEtaFound,
    PermissionDenied,
    RouteNotFound,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class EtaRequest(BaseModel):
    stop: str = Field(..., min_length=1)
    route: str = Field(..., min_length=1)


class EtaOk(BaseModel):
    ok: int


class EtaErrorBody(BaseModel):
    error: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status_for(exc: EtaError) -> int:
    if isinstance(exc, PermissionDenied):
        return 403
    if isinstance(exc, (RouteNotFound, NoEtaFound)):
        return 404
    if isinstance(exc, LockAcquisitionFailure):
        return 503
    # TransportError, UnparseableEta
    return 502


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=EtaOk,
    responses={
        403: {"model": EtaErrorBody},
        404: {"model": EtaErrorBody},
        502: {"model": EtaErrorBody},
        503: {"model": EtaErrorBody},
    },
)
async def fetch_eta(body: EtaRequest, request: Request) -> Union[EtaOk, JSONResponse]:
    """Return minutes until ``route`` arrives at ``stop``."""
    service = request.app.state.eta_service
    try:
        eta = await service.query_eta(body.stop, body.route)
    except EtaError as exc:
        return JSONResponse(status_code=_status_for(exc), content={"error": str(exc)})
    return EtaOk(ok=eta)
