"""FastAPI dependencies for authentication and authorization.

Dependencies:
  get_token_payload       → decode the bearer JWT (401 if invalid)
  get_org_context         → OrganizationContext built from the claims
  require_role(...)       → restrict to specific roles
  require_permission(...) → restrict to specific granular permissions

No database lookup happens here; the token is the whole identity.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.auth.jwt import decode_token
from app.auth.permissions import has_permission
from app.middleware.exceptions import OrganizationContextError
from app.tenancy import OrganizationContext, OrgRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


# ── Token ───────────────────────────────────────────────────

async def get_token_payload(token: str = Depends(oauth2_scheme)) -> dict:
    payload = decode_token(token)
    if not payload.get("sub") or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


# ── Organization context from JWT ───────────────────────────

async def get_org_context(payload: dict = Depends(get_token_payload)) -> OrganizationContext:
    """Return the caller's OrganizationContext.

    Raises 403 if the token carries no organization.
    """
    organization_id = payload.get("organization_id")
    if not organization_id:
        raise OrganizationContextError("No organization context; join an organization first")
    return OrganizationContext(
        organization_id=organization_id,
        role=payload.get("role", OrgRole.FARMER.value),
        user_id=payload.get("sub"),
    )


# ── Role-based access control ───────────────────────────────

def require_role(*roles: OrgRole):
    """Dependency factory: restrict to one or more roles.

    Usage:
        @router.get("/admin-only")
        async def admin_view(ctx: OrganizationContext = Depends(require_role(OrgRole.ADMIN))):
            ...
    """
    async def _check(ctx: OrganizationContext = Depends(get_org_context)) -> OrganizationContext:
        if ctx.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(r.value for r in roles)}",
            )
        return ctx

    return _check


# ── Permission-based access control ─────────────────────────

def require_permission(*perms: str):
    """Dependency factory: restrict to callers who hold ALL listed permissions.

    Reads permissions from the JWT claims, so this is a zero-DB-hit check.

    Usage:
        @router.post("/farmers")
        async def create_farmer(ctx: OrganizationContext = Depends(require_permission("farmers.write"))):
            ...
    """
    async def _check(
        payload: dict = Depends(get_token_payload),
        ctx: OrganizationContext = Depends(get_org_context),
    ) -> OrganizationContext:
        user_perms: list[str] = payload.get("permissions", [])

        missing = [p for p in perms if not has_permission(user_perms, p)]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permissions: {', '.join(missing)}",
            )
        return ctx

    return _check
