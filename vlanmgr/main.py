"""
Entry point for the VLAN Configuration API.

Run locally:
    VLANMGR_STORE_BACKEND=memory uvicorn vlanmgr.main:app --reload

Interactive docs available at:
    http://localhost:8000/docs  (Swagger UI)
"""

import logging

from botocore.exceptions import ClientError
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from vlanmgr.apis.auth import router as auth_router
from vlanmgr.apis.vlan import router as vlan_router
from vlanmgr.config import settings
from vlanmgr.dao.base import StoreError
from vlanmgr.exceptions import AlreadyExists, InvalidArgs, NotFound, Unsupported, VlanError

# ── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)

logger = logging.getLogger(__name__)

# ── FastAPI app ───────────────────────────────────────────────────────────────
app = FastAPI(
    title="VLAN Configuration API",
    description=(
        "Create, read and delete VLANs and their port memberships in the configuration "
        "store. All endpoints (except `/auth/token` and `/health`) require a valid JWT "
        "Bearer token."
    ),
    version="1.0.0",
    contact={"name": "Network Engineering"},
    license_info={"name": "MIT"},
)

# ── Error mapping ─────────────────────────────────────────────────────────────
ERROR_STATUS = {
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidArgs: status.HTTP_400_BAD_REQUEST,
    AlreadyExists: status.HTTP_409_CONFLICT,
    Unsupported: status.HTTP_405_METHOD_NOT_ALLOWED,
}


@app.exception_handler(VlanError)
async def vlan_error_handler(request: Request, exc: VlanError) -> JSONResponse:
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.info("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(StoreError)
@app.exception_handler(ClientError)
async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s store failure: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"Store error: {exc}"},
    )


# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(auth_router)
app.include_router(vlan_router)


# ── Health check ──────────────────────────────────────────────────────────────
@app.get("/health", tags=["Health"], summary="Health check")
def health() -> dict:
    """Returns 200 OK when the service is running."""
    return {"status": "ok"}
