from __future__ import annotations

import logging
import re
from typing import Any, Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler


JOB_ID = "daily_quote"

# Crontab weekday numbering (0 and 7 are Sunday); APScheduler counts from Monday.
_CRON_WEEKDAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat", "sun")
_SUNDAY_RANGE = re.compile(r"^0-([0-7])(?:/(\d+))?$")


def _day_names(item: str) -> str:
    # Step values ("*/2") stay numeric.
    return re.sub(r"(?<!/)\b([0-7])\b", lambda m: _CRON_WEEKDAYS[int(m.group(1))], item)


def _weekday_item(item: str) -> str:
    match = _SUNDAY_RANGE.match(item)
    if match is None:
        return _day_names(item)
    # "sun-fri" would run backwards in APScheduler, so split Sunday off.
    last, step = int(match.group(1)), match.group(2)
    if step or last <= 1:
        days = range(0, last + 1, int(step or 1))
        return ",".join(dict.fromkeys(_CRON_WEEKDAYS[d] for d in days))
    return f"sun,mon-{_CRON_WEEKDAYS[last]}"


def _weekday_names(field: str) -> str:
    return ",".join(_weekday_item(item) for item in field.split(","))


def parse_cron(expr: str) -> dict[str, Any]:
    parts = expr.split()
    if len(parts) != 5:
        raise ValueError(f"Invalid cron: {expr}")
    minute, hour, day, month, dow = parts
    kwargs = {"second": 0}
    if minute != "*": kwargs["minute"] = minute
    if hour != "*": kwargs["hour"] = hour
    if day != "*": kwargs["day"] = day
    if month != "*": kwargs["month"] = month
    if dow != "*": kwargs["day_of_week"] = _weekday_names(dow)
    return kwargs


def create_scheduler(timezone: str) -> AsyncIOScheduler:
    return AsyncIOScheduler(timezone=timezone)


def schedule_daily_quote(
    scheduler: AsyncIOScheduler,
    job: Callable[[], Awaitable[Any]],
    cron: str,
    timezone: str,
) -> None:
    scheduler.add_job(job, "cron", id=JOB_ID, replace_existing=True, timezone=timezone, **parse_cron(cron))
    logging.info(f"Daily quote scheduled: '{cron}' ({timezone})")
