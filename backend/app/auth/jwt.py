"""JWT token creation and decoding.

Identity is issued elsewhere; AgriDesk only needs a signed token that
names the caller's organization and role.

Token claims:
  - sub:              user ID
  - organization_id:  tenant the caller belongs to
  - role:             admin | extension_officer | farmer
  - permissions:      effective permission strings for the role
  - type:             "access"
  - exp:              expiry timestamp
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.auth.permissions import resolve_permissions
from app.config import settings

ALGORITHM = settings.jwt_algorithm


def create_access_token(
    user_id: str,
    organization_id: str,
    role: str,
    permissions: list[str] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {
        "sub": user_id,
        "organization_id": organization_id,
        "role": role,
        "permissions": permissions if permissions is not None else resolve_permissions(role),
        "type": "access",
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT. Returns empty dict on failure."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return {}
