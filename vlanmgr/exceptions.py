"""Error kinds raised by the VLAN handler.

Each kind maps to one HTTP status in ``vlanmgr.main``.  Store-level failures
live in ``vlanmgr.dao.base`` and are propagated as they are.
"""

from typing import Optional


class VlanError(Exception):
    """Base exception for every error the handler raises on purpose."""


class NotFound(VlanError):
    """The referenced VLAN does not exist."""

    def __init__(self, message: str, vlan_id: Optional[int] = None):
        self.vlan_id = vlan_id
        super().__init__(message)


class InvalidArgs(VlanError):
    """The request payload or a path variable is malformed."""


class AlreadyExists(VlanError):
    """A VLAN or VLAN member row with the same key is already stored."""


class Unsupported(VlanError):
    """Unknown path template, or an operation the template does not allow."""

    def __init__(self, template: str, operation: str):
        self.template = template
        self.operation = operation
        super().__init__(f"Operation {operation} is not supported on '{template}'.")
