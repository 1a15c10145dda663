from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

import httpx

from ..config.settings import ClickUpSettings


logger = logging.getLogger(__name__)

MAX_CONTEXT_LINES = 5
FRESHNESS_WINDOW_MS = 24 * 60 * 60 * 1000


def format_task(task: dict[str, Any]) -> str:
    title = task.get("name") or "Untitled"
    status = task.get("status")
    status = status.get("status") if isinstance(status, dict) else None
    status = status or "unknown"
    return f'Task "{title}" — status: {status}'


async def fetch_task_context(
    settings: ClickUpSettings,
    http_client: httpx.AsyncClient,
    now: datetime | None = None,
) -> list[str]:
    """
    Summarise tasks updated in the last 24 hours (closed ones included) as
    short context lines, newest activity first as ClickUp returns them.

    Returns [] when credentials are missing or the request fails in any way.
    """
    if not settings.enabled:
        return []

    now = now or datetime.now(timezone.utc)
    since = int(now.timestamp() * 1000) - FRESHNESS_WINDOW_MS
    url = f"{settings.api_url}/team/{settings.team_id}/task"

    try:
        response = await http_client.get(
            url,
            params={"date_updated_gt": since, "include_closed": "true"},
            headers={"Authorization": settings.token},
        )
        response.raise_for_status()
        tasks = response.json().get("tasks") or []
        lines = [format_task(t) for t in tasks[:MAX_CONTEXT_LINES]]
    except Exception as e:  # noqa: BLE001
        logger.warning("ClickUp fetch error: %s", e)
        return []

    logger.info("Loaded %d ClickUp task(s) as quote context", len(lines))
    return lines
