"""Multi-tenancy: organization-scoped isolation.

Every repository call receives an explicit OrganizationContext instead of
reading ambient request state.

Key components:
  - OrgRole                    roles a member of an organization can hold
  - OrganizationContext        organization id + role (+ user id) for one caller
  - validate_organization_id() rejects malformed ids before they reach a query
"""

import enum
import re
import uuid
from dataclasses import dataclass

from app.middleware.exceptions import OrganizationContextError


class OrgRole(str, enum.Enum):
    ADMIN = "admin"
    EXTENSION_OFFICER = "extension_officer"
    FARMER = "farmer"


# ── Validation ──────────────────────────────────────────────

_ORG_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def validate_organization_id(organization_id: str) -> str:
    """Ensure organization ids are non-empty opaque tokens.

    Only allows letters, digits, `-` and `_` (UUIDs pass).
    """
    if not isinstance(organization_id, str) or not _ORG_ID_RE.match(organization_id):
        raise OrganizationContextError(f"Invalid organization id: {organization_id!r}")
    return organization_id


# ── Caller context ──────────────────────────────────────────

@dataclass(frozen=True)
class OrganizationContext:
    """Scope for every tenant read and write."""

    organization_id: str
    role: OrgRole = OrgRole.ADMIN
    user_id: str | None = None

    def __post_init__(self):
        validate_organization_id(self.organization_id)
        if not isinstance(self.role, OrgRole):
            try:
                object.__setattr__(self, "role", OrgRole(self.role))
            except ValueError:
                raise OrganizationContextError(f"Unknown role: {self.role!r}")

    @classmethod
    def new(cls, role: OrgRole = OrgRole.ADMIN) -> "OrganizationContext":
        """Context for a freshly generated organization id (CLI / tests)."""
        return cls(organization_id=str(uuid.uuid4()), role=role)
