"""
Supabase client configuration for the land registry service.

Provides the single async client handle shared by the gateway.
"""

from typing import Optional

from supabase import AsyncClient, acreate_client

from .config import Settings, settings
from .logging_config import get_logger

logger = get_logger(__name__)


class SupabaseConfig:
    """
    Supabase configuration class.

    Loads Supabase URL and service role key from settings.
    """

    def __init__(self, app_settings: Optional[Settings] = None) -> None:
        app_settings = app_settings or settings
        self.url: str = app_settings.SUPABASE_URL
        self.key: str = app_settings.SUPABASE_SERVICE_ROLE_KEY

        if not self.is_configured:
            logger.warning(
                "supabase_not_configured",
                url_set=bool(self.url),
                key_set=bool(self.key),
            )

    @property
    def is_configured(self) -> bool:
        """Check if Supabase is properly configured."""
        return bool(self.url and self.key)


_supabase_client: Optional[AsyncClient] = None


async def get_supabase_client(config: Optional[SupabaseConfig] = None) -> AsyncClient:
    """
    Get or create the async Supabase client instance.

    Raises:
        ValueError: If Supabase is not properly configured
    """
    global _supabase_client

    config = config or SupabaseConfig()
    if not config.is_configured:
        raise ValueError(
            "Supabase not configured. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
        )

    if _supabase_client is None:
        logger.info("supabase_client_initializing", url=config.url)
        _supabase_client = await acreate_client(config.url, config.key)
        logger.info("supabase_client_initialized")

    return _supabase_client


def reset_supabase_client() -> None:
    """Forget the cached client so the next call creates a new one."""
    global _supabase_client
    _supabase_client = None
