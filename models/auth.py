from typing import Optional
from pydantic import BaseModel, EmailStr


# -----------------------------------------------------
# MAGIC LINK REQUEST (Supabase passwordless sign-in)
# -----------------------------------------------------
class MagicLinkRequest(BaseModel):
    email: EmailStr


# -----------------------------------------------------
# CURRENT PRINCIPAL
# -----------------------------------------------------
class PrincipalRead(BaseModel):
    id: str
    email: Optional[str] = None
