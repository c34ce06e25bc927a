"""
Match a concrete request path against the known VLAN path templates.

  "/vlan/10/member/Ethernet0"  ->  ("/vlan/{id}/member/{port}", {"id": "10", "port": "Ethernet0"})

Port names are free-form and may contain "/" (``Ethernet1/1``), so a port
variable ending its template takes the rest of the path.  Every other
variable matches a single segment.

A path that fits no template is returned unchanged with no variables; the
router rejects it as unsupported.
"""

import re

TEMPLATES = (
    "/vlan",
    "/vlan/{id}",
    "/vlan/{id}/member",
    "/vlan/{id}/member/{port}",
)

FREE_FORM_VARIABLES = frozenset({"port"})

_VARIABLE = re.compile(r"\{(\w+)\}")


def _compile(template: str) -> re.Pattern:
    def group(match: re.Match) -> str:
        name = match.group(1)
        if name in FREE_FORM_VARIABLES and match.end() == len(template):
            return f"(?P<{name}>.+?)"
        return f"(?P<{name}>[^/]+)"

    return re.compile(f"^{_VARIABLE.sub(group, template)}/?$")


_PATTERNS = [(template, _compile(template)) for template in TEMPLATES]


def match_path(path: str) -> tuple[str, dict[str, str]]:
    """Return ``(template, variables)`` for *path*."""
    for template, pattern in _PATTERNS:
        match = pattern.match(path)
        if match:
            return template, match.groupdict()
    return path, {}
