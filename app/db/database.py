import logging
from typing import Optional

from supabase import Client, create_client

from app.core.config import settings, validate_supabase_config
from app.core.exceptions import DependencyConfigError

logger = logging.getLogger(__name__)


class DBSupabase:
    client: Optional[Client] = None


db = DBSupabase()


def _service_key() -> str:
    return settings.SUPABASE_SERVICE_ROLE_KEY or settings.SUPABASE_ANON_KEY


def get_supabase() -> Client:
    """Return the process-wide Supabase client, creating it on first use.

    Raises DependencyConfigError when the Supabase settings are missing or
    still hold template values.
    """
    if db.client is not None:
        return db.client

    check = validate_supabase_config()
    if not check.ok:
        logger.error("Supabase client unavailable: %s", check.error)
        raise DependencyConfigError(check.error)

    db.client = create_client(settings.SUPABASE_URL, _service_key())
    logger.info("Supabase client initialised for %s", settings.SUPABASE_URL)
    return db.client


def new_auth_client() -> Client:
    """Build a throwaway client for session refreshes.

    Refreshing a session stores it on the client, so it must not happen on the
    shared client used for table queries.
    """
    check = validate_supabase_config()
    if not check.ok:
        raise DependencyConfigError(check.error)
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY or _service_key())


def close_supabase() -> None:
    db.client = None
