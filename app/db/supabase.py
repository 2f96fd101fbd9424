import logging
from typing import Optional

from supabase import AsyncClient, acreate_client

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[AsyncClient] = None

async def get_supabase_client() -> AsyncClient:
    """Create the process-wide async client on first use."""
    global _client
    if _client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set")
        try:
            _client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        except Exception as e:
            logger.error("Error connecting to Supabase: %s", e)
            raise
    return _client
