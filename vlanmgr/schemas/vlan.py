"""
Pydantic schemas for VLAN request payloads and response views.

Request bodies arrive as raw bytes and are validated eagerly: a payload that
does not match its schema never reaches the store.  Two payload shapes exist:

  CreateVlansRequest   [10, 20, 30]
  AddMembersRequest    [{"port": "Ethernet0", "mode": "untagged"}, {"port": "Ethernet4"}]
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, StrictInt, StrictStr, ValidationError

from vlanmgr.exceptions import InvalidArgs

DEFAULT_TAGGING_MODE = "tagged"

VlanId = Annotated[StrictInt, Field(ge=1)]


# ── Request models ────────────────────────────────────────────────────────────

class CreateVlansRequest(RootModel[list[VlanId]]):
    """Request body for CREATE on /vlan: an array of VLAN ids, possibly empty."""

    root: list[VlanId] = Field(..., examples=[[10, 20]])


class MemberRequest(BaseModel):
    """A single port to add to a VLAN."""

    model_config = ConfigDict(extra="forbid")

    port: StrictStr = Field(
        ...,
        min_length=1,
        examples=["Ethernet0"],
        description="Port name, stored as given.",
    )
    mode: Optional[StrictStr] = Field(
        None,
        examples=["untagged"],
        description=f"Tagging mode; '{DEFAULT_TAGGING_MODE}' when omitted.",
    )

    @property
    def tagging_mode(self) -> str:
        return self.mode if self.mode is not None else DEFAULT_TAGGING_MODE


class AddMembersRequest(RootModel[list[MemberRequest]]):
    """Request body for CREATE on /vlan/{id}/member."""

    root: list[MemberRequest]


def parse_payload(model, raw: bytes):
    """
    Decode and validate *raw* JSON against *model*.

    Raises ``InvalidArgs`` on undecodable JSON or a shape mismatch.
    """
    if not raw:
        raise InvalidArgs("Request body is required.")
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidArgs(f"Invalid payload: {errors}") from exc


# ── Response models ───────────────────────────────────────────────────────────

class VlanMemberView(BaseModel):
    port: str
    # None when the member row is missing from VLAN_MEMBER
    mode: Optional[str] = None


class VlanView(BaseModel):
    """Public view of one VLAN and its members."""

    id: int
    name: str
    members: list[VlanMemberView] = Field(default_factory=list)
