from fastapi import APIRouter, Depends, HTTPException

from core.config import settings
from core.logging_config import logger
from core.session import Principal
from core.supabase_client import get_supabase_client
from dependencies.auth import get_current_principal
from models.auth import MagicLinkRequest, PrincipalRead


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# MAGIC LINK SIGN-IN (SUPABASE OTP)
# ============================================================
@router.post("/magic-link", summary="Email a sign-in link")
async def send_magic_link(payload: MagicLinkRequest):

    email = payload.email.strip().lower()

    client = await get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    credentials = {"email": email}
    if settings.MAGIC_LINK_REDIRECT_URL:
        credentials["options"] = {"email_redirect_to": settings.MAGIC_LINK_REDIRECT_URL}

    try:
        await client.auth.sign_in_with_otp(credentials)
    except Exception as e:
        # Log the error for debugging but don't expose details to user
        logger.warning(f"Magic link request failed for {email}: {type(e).__name__}")
        raise HTTPException(
            status_code=400,
            detail="Could not send a sign-in link to this address",
        )

    return {"status": "sent", "email": email}


# ============================================================
# CURRENT PRINCIPAL
# ============================================================
@router.get("/me", response_model=PrincipalRead, summary="Current authenticated principal")
async def read_me(principal: Principal = Depends(get_current_principal)):
    return PrincipalRead(id=principal.id, email=principal.email)
