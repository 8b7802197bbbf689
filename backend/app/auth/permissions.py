"""Role-based permissions for AgriDesk.

Design:
  - Each role has a fixed set of DEFAULT permissions (defined here, not in DB).
  - Optional per-member overrides ({perm: True/False}) are applied on top
    by `resolve_permissions(role, custom_overrides)`.
  - Checks happen twice: at the HTTP boundary (require_permission) and in
    repositories for writes, using the role in the OrganizationContext.

Permission naming: `<resource>.<action>`
  Resources: organization, farmers, livestock, crops, financial_services,
             extension_services, applications, growth_records,
             uploads, geocoding
  Actions:   read, write, delete, manage
"""

from __future__ import annotations


# ── All known permissions ───────────────────────────────────

_DATA_RESOURCES = (
    "farmers",
    "livestock",
    "crops",
    "financial_services",
    "extension_services",
    "applications",
    "growth_records",
)

ALL_PERMISSIONS: set[str] = {
    # Organization settings
    "organization.read",
    "organization.manage",     # edit name, contact details, farm location

    # Tenant data
    *(f"{resource}.{action}" for resource in _DATA_RESOURCES for action in ("read", "write", "delete")),

    # Integrations
    "uploads.write",
    "geocoding.read",
}


# ── Role → default permissions ──────────────────────────────

ROLE_DEFAULTS: dict[str, set[str]] = {
    "admin": ALL_PERMISSIONS.copy(),

    # Field staff: full read / write on tenant data, no deletes, no settings
    "extension_officer": {
        "organization.read",
        *(f"{resource}.{action}" for resource in _DATA_RESOURCES for action in ("read", "write")),
        "uploads.write",
        "geocoding.read",
    },

    # Farmers browse their organization's data read-only
    "farmer": {
        "organization.read",
        *(f"{resource}.read" for resource in _DATA_RESOURCES),
        "geocoding.read",
    },
}


# ── Resolution ──────────────────────────────────────────────

def resolve_permissions(
    role: str,
    custom_overrides: dict[str, bool] | None = None,
) -> list[str]:
    """Compute effective permissions for a member.

    1. Start with the role's defaults.
    2. Apply custom_overrides: {perm: True} adds, {perm: False} removes.
    3. Return a sorted list (for stable JWT claims).
    """
    base = ROLE_DEFAULTS.get(role, set()).copy()

    if custom_overrides:
        for perm, granted in custom_overrides.items():
            if perm not in ALL_PERMISSIONS:
                continue  # ignore unknown permissions
            if granted:
                base.add(perm)
            else:
                base.discard(perm)

    return sorted(base)


def has_permission(user_permissions: list[str] | set[str], required: str) -> bool:
    """Check whether a permission set satisfies a requirement."""
    return required in user_permissions
