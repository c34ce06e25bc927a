"""Key construction for the VLAN and VLAN_MEMBER tables."""

from vlanmgr.exceptions import InvalidArgs

VLAN_NAME_PREFIX = "Vlan"
KEY_SEPARATOR = "|"


def vlan_name(vlan_id: int) -> str:
    """``10`` -> ``"Vlan10"``."""
    return f"{VLAN_NAME_PREFIX}{vlan_id}"


def vlan_id(name: str) -> int:
    """Inverse of :func:`vlan_name`."""
    suffix = name[len(VLAN_NAME_PREFIX):]
    if not name.startswith(VLAN_NAME_PREFIX) or not suffix.isdigit():
        raise InvalidArgs(f"'{name}' is not a VLAN name.")
    return int(suffix)


def member_key(name: str, port: str) -> str:
    """Composite VLAN_MEMBER key, VLAN first: ``"Vlan10|Ethernet0"``."""
    return f"{name}{KEY_SEPARATOR}{port}"


def split_member_key(key: str) -> tuple[str, str]:
    name, sep, port = key.partition(KEY_SEPARATOR)
    if not sep:
        raise InvalidArgs(f"'{key}' is not a VLAN member key.")
    return name, port
