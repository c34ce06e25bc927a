"""
Abstract configuration store.

`ConfigStore` is the key-value contract the VLAN services depend on.  Rows are
flat dicts addressed by a logical table name and a string key.  The store only
offers single-entry operations: there is no way to commit writes to several
keys atomically, which is why the services order their steps explicitly.

Concrete implementations: DynamoDB (production) and an in-memory store.
"""

from abc import ABC, abstractmethod


class StoreError(Exception):
    """Generic failure reported by a configuration store backend."""


class EntryNotFoundError(StoreError):
    """No row is stored under the requested key."""

    def __init__(self, table: str, key: str):
        self.table = table
        self.key = key
        super().__init__(f"Entry '{key}' not found in table '{table}'.")


class EntryExistsError(StoreError):
    """A row is already stored under the key passed to ``create_entry``."""

    def __init__(self, table: str, key: str):
        self.table = table
        self.key = key
        super().__init__(f"Entry '{key}' already exists in table '{table}'.")


class ConfigStore(ABC):
    """Persistence interface for configuration tables."""

    @abstractmethod
    def get_entry(self, table: str, key: str) -> dict:
        """
        Return the row stored under *key*.

        Raises ``EntryNotFoundError`` when there is none.
        """

    @abstractmethod
    def get_keys(self, table: str) -> list[str]:
        """Return every key of *table*, in the backend's enumeration order."""

    @abstractmethod
    def create_entry(self, table: str, key: str, fields: dict) -> None:
        """
        Store a new row.

        Raises ``EntryExistsError`` if *key* is already present; the stored
        row is left untouched in that case.
        """

    @abstractmethod
    def mod_entry(self, table: str, key: str, fields: dict) -> None:
        """Create or completely replace the row stored under *key*."""

    @abstractmethod
    def delete_entry(self, table: str, key: str) -> None:
        """
        Remove the row stored under *key*.

        Raises ``EntryNotFoundError`` when there is nothing to delete.
        """
