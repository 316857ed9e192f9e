import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from app.core.config import settings, validate_analytics_config

logger = logging.getLogger(__name__)

CAPTURE_TIMEOUT_SECONDS = 3


def capture_event(event: str, distinct_id: str, properties: Optional[Dict[str, Any]] = None) -> bool:
    """Send one event to the analytics capture endpoint.

    Fire-and-forget: meant to run as a background task. Returns False when
    analytics is not configured or the request failed; never raises.
    """
    if not validate_analytics_config().ok:
        logger.debug("Analytics not configured; dropping %s", event)
        return False

    payload = {
        "api_key": settings.ANALYTICS_API_KEY,
        "event": event,
        "distinct_id": distinct_id,
        "properties": properties or {},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    url = settings.ANALYTICS_HOST.rstrip("/") + "/capture/"
    try:
        r = requests.post(url, json=payload, timeout=CAPTURE_TIMEOUT_SECONDS)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Analytics capture of %s failed: %s", event, e)
        return False
    return True
