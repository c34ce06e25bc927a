"""
Request router: maps a (path template, operation) pair to one VLAN service call.

The dispatch table is a plain module-level dict, fixed at import time.  Any
pair missing from it, including every pair whose template is unknown, raises
``Unsupported``.

Routes
──────
  /vlan                      CREATE (batch of ids), READ (all VLANs)
  /vlan/{id}                 READ, DELETE
  /vlan/{id}/member          CREATE (batch of members)
  /vlan/{id}/member/{port}   DELETE
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional

from vlanmgr.dao.base import ConfigStore
from vlanmgr.exceptions import InvalidArgs, Unsupported
from vlanmgr.schemas.vlan import AddMembersRequest, CreateVlansRequest, parse_payload
from vlanmgr.services import vlan as vlan_service

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    REPLACE = "REPLACE"
    DELETE = "DELETE"
    SUBSCRIBE = "SUBSCRIBE"


Handler = Callable[[ConfigStore, dict[str, str], bytes], Any]


def _vlan_id(variables: dict[str, str]) -> int:
    raw = variables.get("id", "")
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgs(f"VLAN id '{raw}' is not an integer.") from None


# ── Handlers ──────────────────────────────────────────────────────────────────

def _create_vlans(store: ConfigStore, variables: dict[str, str], body: bytes) -> None:
    request = parse_payload(CreateVlansRequest, body)
    vlan_service.create_vlans(store, request.root)


def _read_all_vlans(store: ConfigStore, variables: dict[str, str], body: bytes) -> list[dict]:
    return [view.model_dump(exclude_none=True) for view in vlan_service.get_all_vlans(store)]


def _read_vlan(store: ConfigStore, variables: dict[str, str], body: bytes) -> dict:
    return vlan_service.get_vlan(store, _vlan_id(variables)).model_dump(exclude_none=True)


def _delete_vlan(store: ConfigStore, variables: dict[str, str], body: bytes) -> None:
    vlan_service.delete_vlan(store, _vlan_id(variables))


def _add_members(store: ConfigStore, variables: dict[str, str], body: bytes) -> None:
    vlan_id = _vlan_id(variables)
    request = parse_payload(AddMembersRequest, body)
    vlan_service.add_members(store, vlan_id, request.root)


def _remove_member(store: ConfigStore, variables: dict[str, str], body: bytes) -> None:
    vlan_service.remove_member(store, _vlan_id(variables), variables["port"])


ROUTES: dict[tuple[str, Operation], Handler] = {
    ("/vlan", Operation.CREATE): _create_vlans,
    ("/vlan", Operation.READ): _read_all_vlans,
    ("/vlan/{id}", Operation.READ): _read_vlan,
    ("/vlan/{id}", Operation.DELETE): _delete_vlan,
    ("/vlan/{id}/member", Operation.CREATE): _add_members,
    ("/vlan/{id}/member/{port}", Operation.DELETE): _remove_member,
}


def dispatch(
    store: ConfigStore,
    template: str,
    operation: Operation,
    variables: Optional[dict[str, str]] = None,
    body: bytes = b"",
) -> Any:
    """
    Run the service call registered for *template* and *operation*.

    Returns a JSON-compatible tree for reads and ``None`` for writes.
    """
    handler = ROUTES.get((template, operation))
    if handler is None:
        raise Unsupported(template, operation.value)
    logger.debug("Dispatching %s %s %s", operation.value, template, variables)
    return handler(store, variables or {}, body)
