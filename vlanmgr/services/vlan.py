"""
VLAN service layer: reads and writes the VLAN and VLAN_MEMBER tables.

Each function receives a `ConfigStore` (injected by the caller).  The VLAN row
carries a denormalized ``members`` list that must stay equal to the set of
VLAN_MEMBER rows for that VLAN.  The store cannot commit several keys at
once, so every write touching both tables runs its steps in a fixed order:

  add members     member rows first, then the VLAN row's list
  remove member   VLAN row's list first, then the member row
  delete VLAN     member rows first, then the VLAN row

A crash between two steps therefore leaves an orphan member row, never a list
entry pointing at a row that is gone.  Steps already committed are not rolled
back when a later one fails.
"""

import logging
from enum import Enum
from typing import Iterable

from vlanmgr.config import settings
from vlanmgr.dao.base import ConfigStore, EntryExistsError, EntryNotFoundError
from vlanmgr.exceptions import AlreadyExists, InvalidArgs, NotFound
from vlanmgr.schemas.vlan import MemberRequest, VlanMemberView, VlanView
from vlanmgr.services import keys

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    MEMBER_ROWS = "member_rows"
    MEMBER_LIST = "member_list"
    VLAN_ROW = "vlan_row"


ADD_MEMBERS_PHASES = (Phase.MEMBER_ROWS, Phase.MEMBER_LIST)
REMOVE_MEMBER_PHASES = (Phase.MEMBER_LIST, Phase.MEMBER_ROWS)
DELETE_VLAN_PHASES = (Phase.MEMBER_ROWS, Phase.VLAN_ROW)


# ── Internal helpers ──────────────────────────────────────────────────────────

def _load_vlan(store: ConfigStore, vlan_id: int) -> tuple[str, dict]:
    """Return ``(name, row)`` for *vlan_id*; raise ``NotFound`` if absent."""
    name = keys.vlan_name(vlan_id)
    try:
        row = store.get_entry(settings.vlan_table, name)
    except EntryNotFoundError as exc:
        raise NotFound(f"VLAN {vlan_id} not found.", vlan_id=vlan_id) from exc
    return name, row


def _members_of(row: dict) -> list[str]:
    return list(row.get("members") or [])


def _vlan_row(vlan_id: int, members: list[str]) -> dict:
    return {"vlanid": vlan_id, "members": members}


def _delete_member_row(store: ConfigStore, name: str, port: str) -> None:
    """Delete one VLAN_MEMBER row; a row that is already gone counts as deleted."""
    key = keys.member_key(name, port)
    try:
        store.delete_entry(settings.vlan_member_table, key)
    except EntryNotFoundError:
        logger.warning("Member row '%s' was already absent.", key)


def _run_phases(phases: Iterable[Phase], steps: dict) -> None:
    for phase in phases:
        steps[phase]()


# ── Reads ─────────────────────────────────────────────────────────────────────

def get_vlan(store: ConfigStore, vlan_id: int) -> VlanView:
    """
    Build the view of one VLAN.

    A port listed in ``members`` whose VLAN_MEMBER row is missing is still
    reported, without a mode.  Any other store error aborts the read.
    """
    name, row = _load_vlan(store, vlan_id)
    members: list[VlanMemberView] = []
    for port in _members_of(row):
        key = keys.member_key(name, port)
        try:
            member_row = store.get_entry(settings.vlan_member_table, key)
        except EntryNotFoundError:
            logger.warning("VLAN %s lists port '%s' but row '%s' is missing.", vlan_id, port, key)
            members.append(VlanMemberView(port=port))
            continue
        members.append(VlanMemberView(port=port, mode=member_row.get("tagging_mode")))
    return VlanView(id=int(row.get("vlanid", vlan_id)), name=name, members=members)


def get_all_vlans(store: ConfigStore) -> list[VlanView]:
    """
    Return every VLAN in the store's key enumeration order.

    Keys that are not VLAN names, and VLANs deleted between the key listing
    and their own read, are left out of the result.
    """
    names = store.get_keys(settings.vlan_table)
    logger.info("Listing %d VLAN(s).", len(names))
    views: list[VlanView] = []
    for name in names:
        try:
            vlan_id = keys.vlan_id(name)
        except InvalidArgs:
            logger.warning("Skipping '%s' in %s: not a VLAN name.", name, settings.vlan_table)
            continue
        try:
            views.append(get_vlan(store, vlan_id))
        except NotFound:
            logger.warning("VLAN %s was deleted while listing.", vlan_id)
    return views


# ── Writes ────────────────────────────────────────────────────────────────────

def create_vlans(store: ConfigStore, vlan_ids: list[int]) -> None:
    """
    Create one VLAN row per id, in input order.

    Creation is not atomic across ids: if id N already exists, the VLANs
    created for ids before N stay committed and ``AlreadyExists`` is raised.
    """
    for vlan_id in vlan_ids:
        name = keys.vlan_name(vlan_id)
        try:
            store.create_entry(settings.vlan_table, name, {"vlanid": vlan_id})
        except EntryExistsError as exc:
            raise AlreadyExists(f"VLAN {vlan_id} already exists.") from exc
        logger.info("Created VLAN %s ('%s').", vlan_id, name)


def add_members(store: ConfigStore, vlan_id: int, requested: list[MemberRequest]) -> None:
    """
    Add ports to a VLAN.

    Member rows are created one by one; a port that already has a row raises
    ``AlreadyExists`` and stops processing without undoing earlier rows.  The
    VLAN's list is only rewritten once every row has been created.
    """
    name, row = _load_vlan(store, vlan_id)
    members = _members_of(row)

    def write_member_rows() -> None:
        for member in requested:
            key = keys.member_key(name, member.port)
            try:
                store.create_entry(
                    settings.vlan_member_table, key, {"tagging_mode": member.tagging_mode}
                )
            except EntryExistsError as exc:
                raise AlreadyExists(f"Port '{member.port}' is already a member of VLAN {vlan_id}.") from exc
            members.append(member.port)

    def write_member_list() -> None:
        store.mod_entry(settings.vlan_table, name, _vlan_row(vlan_id, members))

    _run_phases(
        ADD_MEMBERS_PHASES,
        {Phase.MEMBER_ROWS: write_member_rows, Phase.MEMBER_LIST: write_member_list},
    )
    logger.info("Added %d member(s) to VLAN %s.", len(requested), vlan_id)


def delete_vlan(store: ConfigStore, vlan_id: int) -> None:
    """
    Delete a VLAN and, before it, all of its member rows.

    Deleting a VLAN that does not exist is a successful no-op.  The first
    failing member delete aborts the operation; rows deleted before it stay
    deleted and the VLAN row is kept.
    """
    try:
        name, row = _load_vlan(store, vlan_id)
    except NotFound:
        logger.info("VLAN %s does not exist; nothing to delete.", vlan_id)
        return

    def delete_member_rows() -> None:
        for port in _members_of(row):
            _delete_member_row(store, name, port)

    def delete_vlan_row() -> None:
        try:
            store.delete_entry(settings.vlan_table, name)
        except EntryNotFoundError:
            logger.warning("VLAN row '%s' vanished during delete.", name)

    _run_phases(
        DELETE_VLAN_PHASES,
        {Phase.MEMBER_ROWS: delete_member_rows, Phase.VLAN_ROW: delete_vlan_row},
    )
    logger.info("Deleted VLAN %s.", vlan_id)


def remove_member(store: ConfigStore, vlan_id: int, port: str) -> None:
    """
    Remove one port from a VLAN.

    Removing a port that is not a member is a successful no-op.  The list
    on the VLAN row is rewritten before the member row is deleted.
    """
    name, row = _load_vlan(store, vlan_id)
    members = _members_of(row)
    remaining = [p for p in members if p != port]
    if len(remaining) == len(members):
        logger.info("Port '%s' is not a member of VLAN %s; nothing to remove.", port, vlan_id)
        return

    def write_member_list() -> None:
        store.mod_entry(settings.vlan_table, name, _vlan_row(vlan_id, remaining))

    def delete_member_rows() -> None:
        _delete_member_row(store, name, port)

    _run_phases(
        REMOVE_MEMBER_PHASES,
        {Phase.MEMBER_LIST: write_member_list, Phase.MEMBER_ROWS: delete_member_rows},
    )
    logger.info("Removed port '%s' from VLAN %s.", port, vlan_id)
