"""
Explicit construction of the configuration store.

Routes declare `store: ConfigStore = Depends(get_config_store)`.  Tests swap the
backend by overriding that single dependency:

    app.dependency_overrides[get_config_store] = lambda: InMemoryConfigStore()
"""

from vlanmgr.config import Settings, settings
from vlanmgr.dao.base import ConfigStore
from vlanmgr.dao.dynamodb import DynamoDBConfigStore
from vlanmgr.dao.memory import InMemoryConfigStore


def build_config_store(config: Settings) -> ConfigStore:
    """Return the ConfigStore selected by ``config.store_backend``."""
    backend = config.store_backend.lower()
    if backend == "dynamodb":
        return DynamoDBConfigStore(table_name=config.dynamodb_table_name)
    if backend == "memory":
        return InMemoryConfigStore()
    raise ValueError(f"Unknown store backend '{config.store_backend}'.")


_store = build_config_store(settings)


def get_config_store() -> ConfigStore:
    """Return the active ConfigStore implementation."""
    return _store
