"""Aggregations behind the reporting dashboard.

Everything here works on rows that were already fetched, so the functions
stay pure and can be exercised without a database.
"""
import logging
import math
from collections.abc import Iterable
from datetime import date, datetime, timezone

from onboarding_hub.schemas.reporting import (
    EngagementStats,
    MonthlyGrowth,
    RiskStats,
    SeverityBreakdown,
    StepStats,
)
from onboarding_hub.schemas.status import (
    EngagementStatus,
    RiskSeverity,
    RiskStatus,
    StepStatus,
)

logger = logging.getLogger(__name__)

_ENGAGEMENT_KEYS = {s.value for s in EngagementStatus}
_STEP_KEYS = {s.value for s in StepStatus}
_RISK_STATUS_KEYS = {s.value for s in RiskStatus}
_SEVERITY_KEYS = {s.value for s in RiskSeverity}


def _count(values: Iterable[str | None], keys: set[str]) -> tuple[dict[str, int], int]:
    counts = dict.fromkeys(keys, 0)
    total = 0
    for value in values:
        total += 1
        # Unknown values still count toward the total but not any bucket.
        if value in counts:
            counts[value] += 1
    return counts, total


def engagement_stats(statuses: Iterable[str | None]) -> EngagementStats:
    counts, total = _count(statuses, _ENGAGEMENT_KEYS)
    return EngagementStats(**counts, total=total)


def step_stats(statuses: Iterable[str | None]) -> StepStats:
    counts, total = _count(statuses, _STEP_KEYS)
    return StepStats(**counts, total=total)


def risk_stats(rows: Iterable[tuple[str | None, str | None]]) -> RiskStats:
    """Count risks by status and by severity at once. Rows are (status, severity)."""
    by_status = dict.fromkeys(_RISK_STATUS_KEYS, 0)
    by_severity = dict.fromkeys(_SEVERITY_KEYS, 0)
    total = 0
    for status, severity in rows:
        total += 1
        if status in by_status:
            by_status[status] += 1
        if severity in by_severity:
            by_severity[severity] += 1
    return RiskStats(**by_status, total=total, by_severity=SeverityBreakdown(**by_severity))


def _parse_moment(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def average_onboarding_days(rows: Iterable[tuple[str | None, str | None, str | None]]) -> int:
    """Mean completed-step duration in whole days.

    Rows are (status, start_date, end_date). Only completed steps with both
    dates count; partial days round up per step and the mean rounds half up.
    Rows whose dates cannot be parsed are skipped. Returns 0 when nothing
    qualifies.
    """
    durations = []
    for status, start, end in rows:
        if status != StepStatus.COMPLETED.value or not start or not end:
            continue
        try:
            delta = _parse_moment(end) - _parse_moment(start)
        except (TypeError, ValueError):
            logger.warning("Skipping step with unparseable dates: %r to %r", start, end)
            continue
        durations.append(math.ceil(delta.total_seconds() / 86400))

    if not durations:
        return 0
    return math.floor(sum(durations) / len(durations) + 0.5)


def trailing_months(today: date, count: int = 12) -> list[tuple[int, int]]:
    """(year, month) pairs for the last `count` months, oldest first, ending at today's month."""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    months.reverse()
    return months


def monthly_growth(
    client_created: Iterable[str],
    engagement_created: Iterable[str],
    today: date | None = None,
) -> list[MonthlyGrowth]:
    """Bucket creation timestamps into the trailing 12 calendar months.

    Always returns 12 entries; anything outside the window is dropped.
    """
    today = today or datetime.now(timezone.utc).date()
    buckets = {f"{y:04d}-{m:02d}": [0, 0] for y, m in trailing_months(today)}

    for ts in client_created:
        key = (ts or "")[:7]
        if key in buckets:
            buckets[key][0] += 1
    for ts in engagement_created:
        key = (ts or "")[:7]
        if key in buckets:
            buckets[key][1] += 1

    return [
        MonthlyGrowth(
            month=key,
            label=date(int(key[:4]), int(key[5:]), 1).strftime("%b %Y"),
            client_count=clients,
            engagement_count=engagements,
        )
        for key, (clients, engagements) in buckets.items()
    ]
