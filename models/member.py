from typing import Optional
from datetime import datetime
from pydantic import BaseModel


# ===============================================================
# MEMBER REGISTRATION RECORDS (members table)
# ===============================================================
class MemberRead(BaseModel):
    id: str
    user_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    registration_status: Optional[str] = None
    created_at: Optional[datetime] = None


class MemberDecision(BaseModel):
    member_id: str
    registration_status: str
    decided_by: str
