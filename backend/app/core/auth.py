"""
Authentication for the storefront backend

- Admin back office: username/password login that issues a signed JWT
  with role "admin"; admin routes depend on require_admin.
- Shoppers: optional bearer token identifying the user that owns a cart.
"""
from typing import Optional
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel

from app.core.config import settings


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Password hashing context for the admin credential
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

JWT_ALGORITHM = "HS256"


class TokenUser(BaseModel):
    """User data extracted from JWT token"""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str = "user"


def hash_password(password: str) -> str:
    """Hash a password for ADMIN_PASSWORD_HASH"""
    return pwd_context.hash(password)


def verify_admin_credentials(username: str, password: str) -> bool:
    """Check username/password against the configured admin credential"""
    if not settings.ADMIN_PASSWORD_HASH:
        return False
    if username != settings.ADMIN_USERNAME:
        return False
    try:
        return pwd_context.verify(password, settings.ADMIN_PASSWORD_HASH)
    except ValueError:
        # Malformed hash in configuration
        return False


def create_access_token(subject: str, role: str = "user", expires_minutes: Optional[int] = None,
                        extra_claims: Optional[dict] = None) -> str:
    """
    Create a signed HS256 token.

    Payload:
    {
        "sub": "admin",
        "id": "admin",
        "role": "admin",
        "iat": 1234567890,
        "exp": 1234567890
    }
    """
    now = datetime.now(timezone.utc)
    ttl = expires_minutes if expires_minutes is not None else settings.ADMIN_TOKEN_TTL_MINUTES
    payload = {
        "sub": subject,
        "id": subject,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=ttl)).timestamp()),
    }
    if extra_claims:
        payload.update(extra_claims)
    return jwt.encode(payload, settings.AUTH_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a token issued by create_access_token."""
    try:
        return jwt.decode(
            token,
            settings.AUTH_SECRET,
            algorithms=[JWT_ALGORITHM],
            options={"verify_aud": False}
        )
    except JWTError as e:
        error_msg = str(e).lower()
        if "expired" in error_msg:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"}
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"}
        )


def _user_from_payload(payload: dict) -> Optional[TokenUser]:
    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        return None
    return TokenUser(
        id=str(user_id),
        email=payload.get("email"),
        name=payload.get("name"),
        role=payload.get("role", "user")
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from JWT.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.id}"}
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user = _user_from_payload(decode_token(credentials.credentials))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenUser]:
    """
    Optional authentication - returns None if no valid token provided.

    Shopper endpoints use this: a valid token selects the user's cart,
    anything else falls back to the anonymous cart session.
    """
    if not credentials:
        return None

    try:
        return _user_from_payload(decode_token(credentials.credentials))
    except HTTPException:
        return None


async def require_admin(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    """Dependency guarding the admin back office."""
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied. Required role: admin, your role: {user.role}"
        )
    return user
