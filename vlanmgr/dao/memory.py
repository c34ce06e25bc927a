"""
In-memory implementation of ConfigStore.

Used for local runs (``VLANMGR_STORE_BACKEND=memory``) and by the test suite.
Tables are plain dicts, so keys enumerate in insertion order.  Rows are copied
on the way in and out; callers can never mutate stored state by accident.
"""

import copy

from vlanmgr.dao.base import ConfigStore, EntryExistsError, EntryNotFoundError


class InMemoryConfigStore(ConfigStore):
    """ConfigStore keeping every table in a process-local dict."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict]] = {}

    def _table(self, table: str) -> dict[str, dict]:
        return self._tables.setdefault(table, {})

    def get_entry(self, table: str, key: str) -> dict:
        rows = self._table(table)
        if key not in rows:
            raise EntryNotFoundError(table, key)
        return copy.deepcopy(rows[key])

    def get_keys(self, table: str) -> list[str]:
        return list(self._table(table))

    def create_entry(self, table: str, key: str, fields: dict) -> None:
        rows = self._table(table)
        if key in rows:
            raise EntryExistsError(table, key)
        rows[key] = copy.deepcopy(fields)

    def mod_entry(self, table: str, key: str, fields: dict) -> None:
        self._table(table)[key] = copy.deepcopy(fields)

    def delete_entry(self, table: str, key: str) -> None:
        rows = self._table(table)
        if key not in rows:
            raise EntryNotFoundError(table, key)
        del rows[key]
