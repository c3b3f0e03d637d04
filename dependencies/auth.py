from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.logging_config import logger
from core.session import Principal, Session
from core.supabase_client import get_supabase_client


# auto_error=False: anonymous callers reach the gate, which decides redirect vs 401
bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# AUTH DECODING (Supabase: validates JWT)
# ============================================================
async def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Principal]:
    """
    Returns the Principal for a valid bearer token, None otherwise.
    Does not raise for missing or invalid tokens.
    """
    if not credentials:
        return None

    client = await get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = await client.auth.get_user(credentials.credentials)
    except Exception as e:
        logger.warning(f"Bearer token rejected by Supabase: {type(e).__name__}")
        return None

    auth_user = auth_resp.user if auth_resp else None
    if not auth_user:
        return None

    return Principal(id=auth_user.id, email=auth_user.email)


async def get_current_principal(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


# ============================================================
# PER-REQUEST SESSION
# ============================================================
async def get_session(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Session:
    """A fresh Session per request; nothing is carried between requests."""
    return Session(principal)
