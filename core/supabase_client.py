# core/supabase_client.py

from typing import Optional

from supabase import AsyncClient, acreate_client

from core.config import settings
from core.logging_config import logger


_client: Optional[AsyncClient] = None


# ============================================================
# Supabase Client Factory (ALWAYS service role)
# ============================================================

async def get_supabase_client() -> Optional[AsyncClient]:
    """
    Returns the shared async Supabase client, built with the SERVICE ROLE KEY.
    REQUIRED for:
        - auth.get_user (bearer token validation)
        - reading user_roles / members for any principal
        - approve_member RPC
    Returns None when credentials are missing or the client cannot be built.
    """
    global _client
    if _client is not None:
        return _client

    try:
        supabase_url = settings.SUPABASE_URL
        supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY  # MUST be service-role

        if not supabase_url or not supabase_key:
            logger.error("Missing Supabase credentials")
            logger.error(f"   URL: {supabase_url}")
            logger.error(f"   SERVICE ROLE KEY: {'SET' if supabase_key else 'MISSING'}")
            return None

        _client = await acreate_client(supabase_url, supabase_key)
        return _client

    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


# ============================================================
# Ping Supabase for health checks
# ============================================================

async def ping_supabase() -> dict:
    """
    Simple connectivity check against the tables access decisions read.
    Does NOT query auth tables.
    """
    client = await get_supabase_client()
    if client is None:
        return {"service": "Supabase", "status": "not_configured"}

    results = {}
    for table in (settings.ROLES_TABLE, settings.MEMBERS_TABLE):
        try:
            res = await client.table(table).select("*").limit(1).execute()
            results[table] = {
                "status": "ok",
                "rows_found": len(res.data or []),
            }
        except Exception as err:
            logger.warning(f"Supabase ping failed for {table}: {err}")
            results[table] = {"status": "error", "detail": str(err)}

    overall = "ok" if all(r["status"] == "ok" for r in results.values()) else "degraded"
    return {
        "service": "Supabase",
        "status": overall,
        "tables": results,
    }
