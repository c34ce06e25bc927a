import pytest

from vlanmgr.dao.base import StoreError
from vlanmgr.exceptions import AlreadyExists, NotFound
from vlanmgr.schemas.vlan import MemberRequest
from vlanmgr.services import keys
from vlanmgr.services import vlan as svc

VLAN = "VLAN"
MEMBER = "VLAN_MEMBER"


def _members(*pairs):
    return [MemberRequest(port=port, mode=mode) for port, mode in pairs]


def _member_keys(store, name):
    return [k for k in store.get_keys(MEMBER) if keys.split_member_key(k)[0] == name]


# ── Reads ─────────────────────────────────────────────────────────────────────

def test_get_vlan_not_found(store):
    with pytest.raises(NotFound) as exc_info:
        svc.get_vlan(store, 42)
    assert exc_info.value.vlan_id == 42


def test_get_vlan_tolerates_missing_member_row(store):
    store.mod_entry(VLAN, "Vlan5", {"vlanid": 5, "members": ["Ethernet0", "Ethernet4"]})
    store.mod_entry(MEMBER, "Vlan5|Ethernet4", {"tagging_mode": "untagged"})

    view = svc.get_vlan(store, 5)

    assert view.model_dump(exclude_none=True) == {
        "id": 5,
        "name": "Vlan5",
        "members": [{"port": "Ethernet0"}, {"port": "Ethernet4", "mode": "untagged"}],
    }


def test_get_vlan_propagates_other_store_errors(store, monkeypatch):
    svc.create_vlans(store, [7])
    svc.add_members(store, 7, _members(("Ethernet0", None)))

    real_get = store.get_entry

    def _failing_get(table, key):
        if table == MEMBER:
            raise StoreError("connection reset")
        return real_get(table, key)

    monkeypatch.setattr(store, "get_entry", _failing_get)
    with pytest.raises(StoreError):
        svc.get_vlan(store, 7)


def test_get_all_vlans_follows_key_order(store):
    svc.create_vlans(store, [30, 10, 20])
    assert [v.id for v in svc.get_all_vlans(store)] == [30, 10, 20]


def test_get_all_vlans_empty(store):
    assert svc.get_all_vlans(store) == []


def test_get_all_vlans_skips_vlan_deleted_while_listing(store, monkeypatch):
    svc.create_vlans(store, [10, 20])
    real_get_keys = store.get_keys

    def _stale_keys(table):
        names = real_get_keys(table)
        if table == VLAN:
            svc.delete_vlan(store, 10)
        return names

    monkeypatch.setattr(store, "get_keys", _stale_keys)
    assert [v.id for v in svc.get_all_vlans(store)] == [20]


def test_get_all_vlans_skips_foreign_keys(store):
    svc.create_vlans(store, [10])
    store.mod_entry(VLAN, "default", {"vlanid": 1})

    assert [v.name for v in svc.get_all_vlans(store)] == ["Vlan10"]


def test_add_members_empty_request_keeps_list(store):
    svc.create_vlans(store, [10])
    svc.add_members(store, 10, _members(("Ethernet0", None)))

    svc.add_members(store, 10, [])

    assert store.get_entry(VLAN, "Vlan10")["members"] == ["Ethernet0"]
    assert _member_keys(store, "Vlan10") == ["Vlan10|Ethernet0"]


def test_create_vlans_empty_is_noop(store):
    svc.create_vlans(store, [])
    assert store.calls == []


# ── create_vlans ──────────────────────────────────────────────────────────────

def test_create_vlans_then_list_has_empty_members(store):
    svc.create_vlans(store, [10, 20, 30])

    views = svc.get_all_vlans(store)

    assert [(v.id, v.name, v.members) for v in views] == [
        (10, "Vlan10", []),
        (20, "Vlan20", []),
        (30, "Vlan30", []),
    ]


def test_create_vlans_existing_aborts_without_rollback(store):
    svc.create_vlans(store, [20])

    with pytest.raises(AlreadyExists):
        svc.create_vlans(store, [10, 20, 30])

    assert store.get_keys(VLAN) == ["Vlan20", "Vlan10"]


# ── add_members ───────────────────────────────────────────────────────────────

def test_add_members_defaults_mode_and_keeps_order(store):
    svc.create_vlans(store, [10])
    svc.add_members(store, 10, _members(("Ethernet8", "untagged")))

    svc.add_members(store, 10, _members(("Ethernet0", None), ("Ethernet4", "priority_tagged")))

    view = svc.get_vlan(store, 10)
    assert [(m.port, m.mode) for m in view.members] == [
        ("Ethernet8", "untagged"),
        ("Ethernet0", "tagged"),
        ("Ethernet4", "priority_tagged"),
    ]
    assert store.get_entry(VLAN, "Vlan10")["members"] == ["Ethernet8", "Ethernet0", "Ethernet4"]


def test_add_members_writes_rows_before_list(store):
    svc.create_vlans(store, [10])
    store.calls.clear()

    svc.add_members(store, 10, _members(("Ethernet0", None), ("Ethernet1", None)))

    assert store.calls == [
        ("create", MEMBER, "Vlan10|Ethernet0"),
        ("create", MEMBER, "Vlan10|Ethernet1"),
        ("mod", VLAN, "Vlan10"),
    ]


def test_add_members_unknown_vlan(store):
    with pytest.raises(NotFound):
        svc.add_members(store, 10, _members(("Ethernet0", None)))
    assert store.calls == []


def test_add_members_duplicate_aborts_before_list_update(store):
    svc.create_vlans(store, [10])
    svc.add_members(store, 10, _members(("Ethernet1", None)))

    with pytest.raises(AlreadyExists):
        svc.add_members(store, 10, _members(("Ethernet0", None), ("Ethernet1", None), ("Ethernet2", None)))

    # Ethernet0's row stays as an orphan, the list is untouched
    assert store.get_entry(VLAN, "Vlan10")["members"] == ["Ethernet1"]
    assert _member_keys(store, "Vlan10") == ["Vlan10|Ethernet1", "Vlan10|Ethernet0"]


# ── delete_vlan ───────────────────────────────────────────────────────────────

def test_delete_vlan_cascades_to_members(store):
    svc.create_vlans(store, [10, 20])
    svc.add_members(store, 10, _members(("Ethernet0", None), ("Ethernet1", "untagged")))
    svc.add_members(store, 20, _members(("Ethernet0", None)))
    store.calls.clear()

    svc.delete_vlan(store, 10)

    assert store.calls == [
        ("delete", MEMBER, "Vlan10|Ethernet0"),
        ("delete", MEMBER, "Vlan10|Ethernet1"),
        ("delete", VLAN, "Vlan10"),
    ]
    assert _member_keys(store, "Vlan10") == []
    assert store.get_keys(VLAN) == ["Vlan20"]
    assert _member_keys(store, "Vlan20") == ["Vlan20|Ethernet0"]


def test_delete_vlan_missing_is_noop(store):
    svc.create_vlans(store, [20])
    store.calls.clear()

    svc.delete_vlan(store, 10)
    svc.delete_vlan(store, 10)

    assert store.calls == []
    assert store.get_keys(VLAN) == ["Vlan20"]


def test_delete_vlan_with_missing_member_row(store):
    store.mod_entry(VLAN, "Vlan5", {"vlanid": 5, "members": ["Ethernet0"]})

    svc.delete_vlan(store, 5)

    assert store.get_keys(VLAN) == []


def test_delete_vlan_member_failure_keeps_vlan_row(store, monkeypatch):
    svc.create_vlans(store, [10])
    svc.add_members(store, 10, _members(("Ethernet0", None), ("Ethernet1", None)))

    real_delete = store.delete_entry

    def _failing_delete(table, key):
        if key == "Vlan10|Ethernet1":
            raise StoreError("throttled")
        real_delete(table, key)

    monkeypatch.setattr(store, "delete_entry", _failing_delete)
    with pytest.raises(StoreError):
        svc.delete_vlan(store, 10)

    assert store.get_keys(VLAN) == ["Vlan10"]
    assert _member_keys(store, "Vlan10") == ["Vlan10|Ethernet1"]


# ── remove_member ─────────────────────────────────────────────────────────────

def test_remove_member_updates_list_before_row(store):
    svc.create_vlans(store, [10])
    svc.add_members(store, 10, _members(("Ethernet0", None), ("Ethernet1", None)))
    store.calls.clear()

    svc.remove_member(store, 10, "Ethernet0")

    assert store.calls == [
        ("mod", VLAN, "Vlan10"),
        ("delete", MEMBER, "Vlan10|Ethernet0"),
    ]
    assert store.get_entry(VLAN, "Vlan10")["members"] == ["Ethernet1"]


def test_remove_member_is_idempotent(store):
    svc.create_vlans(store, [10])
    svc.add_members(store, 10, _members(("Ethernet0", None), ("Ethernet1", "untagged")))

    svc.remove_member(store, 10, "Ethernet0")
    once = (store.get_entry(VLAN, "Vlan10"), _member_keys(store, "Vlan10"))
    store.calls.clear()
    svc.remove_member(store, 10, "Ethernet0")

    assert store.calls == []
    assert (store.get_entry(VLAN, "Vlan10"), _member_keys(store, "Vlan10")) == once


def test_remove_member_unknown_vlan(store):
    with pytest.raises(NotFound):
        svc.remove_member(store, 10, "Ethernet0")


# ── End to end ────────────────────────────────────────────────────────────────

def test_vlan_lifecycle(store):
    svc.create_vlans(store, [10])
    assert svc.get_vlan(store, 10).model_dump(exclude_none=True) == {
        "id": 10,
        "name": "Vlan10",
        "members": [],
    }

    svc.add_members(store, 10, _members(("Ethernet0", None), ("Ethernet1", "untagged")))
    assert svc.get_vlan(store, 10).model_dump(exclude_none=True)["members"] == [
        {"port": "Ethernet0", "mode": "tagged"},
        {"port": "Ethernet1", "mode": "untagged"},
    ]

    svc.remove_member(store, 10, "Ethernet0")
    assert svc.get_vlan(store, 10).model_dump(exclude_none=True)["members"] == [
        {"port": "Ethernet1", "mode": "untagged"},
    ]

    svc.delete_vlan(store, 10)
    with pytest.raises(NotFound):
        svc.get_vlan(store, 10)
    assert store.get_keys(MEMBER) == []
