"""
VLAN router: every path under /vlan.

FastAPI only receives the request here; the path is matched against the VLAN
templates and handed to the request router, which owns the dispatch table.
Unknown paths therefore surface as 405 Unsupported, not as FastAPI's own 404.

Endpoints
─────────
  POST   /vlan                        Create VLANs            body: [10, 20]
  GET    /vlan                        List all VLANs
  GET    /vlan/{id}                   Get one VLAN
  DELETE /vlan/{id}                   Delete a VLAN and its members
  POST   /vlan/{id}/member            Add members             body: [{"port": "Ethernet0", "mode": "tagged"}]
  DELETE /vlan/{id}/member/{port}     Remove one member

PATCH and PUT are accepted by FastAPI and rejected by the request router.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from vlanmgr.dao.base import ConfigStore
from vlanmgr.dependencies.auth import get_current_user
from vlanmgr.dependencies.store import get_config_store
from vlanmgr.services.paths import match_path
from vlanmgr.services.router import Operation, dispatch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vlan", tags=["VLAN Management"])

HTTP_OPERATIONS = {
    "POST": Operation.CREATE,
    "GET": Operation.READ,
    "PATCH": Operation.UPDATE,
    "PUT": Operation.REPLACE,
    "DELETE": Operation.DELETE,
}


async def _handle(request: Request, subpath: str, current_user: str, store: ConfigStore) -> Response:
    path = f"{router.prefix}/{subpath}" if subpath else router.prefix
    operation = HTTP_OPERATIONS[request.method]
    template, variables = match_path(path)
    logger.info("%s %s called by '%s'", request.method, path, current_user)

    body = await request.body()
    # store calls block on I/O
    result = await run_in_threadpool(dispatch, store, template, operation, variables, body)

    if operation is Operation.CREATE:
        return Response(status_code=status.HTTP_201_CREATED)
    if operation is Operation.DELETE:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return JSONResponse(content=result)


@router.api_route(
    "",
    methods=list(HTTP_OPERATIONS),
    summary="Create or list VLANs",
)
async def vlan_collection(
    request: Request,
    current_user: str = Depends(get_current_user),
    store: ConfigStore = Depends(get_config_store),
) -> Response:
    return await _handle(request, "", current_user, store)


@router.api_route(
    "/{subpath:path}",
    methods=list(HTTP_OPERATIONS),
    summary="Read, delete or change the members of one VLAN",
)
async def vlan_resource(
    subpath: str,
    request: Request,
    current_user: str = Depends(get_current_user),
    store: ConfigStore = Depends(get_config_store),
) -> Response:
    return await _handle(request, subpath.strip("/"), current_user, store)
