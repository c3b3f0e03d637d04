from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Club Access API"
    ENV: str = "development"

    # -------------------------------------------------
    # Frontend Domains
    # -------------------------------------------------
    FRONTEND_DOMAIN: Optional[str] = None

    CLUB_SITE_DOMAINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Auth, tables, RPC)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    ROLES_TABLE: str = Field("user_roles", description="Table holding one row per (user_id, role)")
    MEMBERS_TABLE: str = Field("members", description="Member registration records")

    # -------------------------------------------------
    # Access gate
    # -------------------------------------------------
    # Unauthenticated visitors of protected routes are sent here with ?next=<path>
    SIGN_IN_PATH: str = Field("/login", description="Sign-in destination for protected routes")
    MAGIC_LINK_REDIRECT_URL: Optional[str] = None

    # -------------------------------------------------
    # Dashboard
    # -------------------------------------------------
    DASHBOARD_VIEW_COOKIE: str = "dashboard_view"
    DASHBOARD_VIEW_COOKIE_MAX_AGE: int = Field(60 * 60 * 24 * 180, description="Seconds the stored dashboard view lives")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) add the configured club frontend
if settings.FRONTEND_DOMAIN:
    domain = settings.FRONTEND_DOMAIN
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

# 2) add the known club site domains
cors_origins.extend([d.rstrip("/") for d in settings.CLUB_SITE_DOMAINS])

# 3) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
