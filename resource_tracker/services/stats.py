"""Statistics over a resource collection, as shown on the dashboard."""
from typing import Dict, List, Sequence, Tuple

from resource_tracker.models.resource import RESOURCE_CATEGORIES, RESOURCE_STATUSES
from resource_tracker.schemas.resource import MonthlyCount, Resource, ResourceStats

RECENT_ACTIVITY_LIMIT = 5


def count_by(resources: Sequence[Resource], attribute: str, keys: List[str]) -> Dict[str, int]:
    """Count resources per key; keys outside the given list are not enumerated."""
    counts = {key: 0 for key in keys}
    for resource in resources:
        value = getattr(resource, attribute)
        if value in counts:
            counts[value] += 1
    return counts


def recent_activity(resources: Sequence[Resource], limit: int = RECENT_ACTIVITY_LIMIT) -> List[Resource]:
    """Most recently modified resources first, ties keeping collection order."""
    return sorted(resources, key=lambda r: r.last_modified, reverse=True)[:limit]


def resources_by_month(resources: Sequence[Resource]) -> List[MonthlyCount]:
    """Creation counts per calendar month, oldest month first."""
    months: Dict[Tuple[int, int], int] = {}
    for resource in resources:
        key = (resource.created_at.year, resource.created_at.month)
        months[key] = months.get(key, 0) + 1

    result = []
    for year, month in sorted(months):
        label = f"{_MONTH_ABBREVIATIONS[month - 1]} {year}"
        result.append(MonthlyCount(date=label, resources=months[(year, month)]))
    return result


_MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def compute_stats(resources: Sequence[Resource]) -> ResourceStats:
    """Aggregate statistics, recomputed from scratch on every call."""
    return ResourceStats(
        total=len(resources),
        by_category=count_by(resources, "category", RESOURCE_CATEGORIES),
        by_status=count_by(resources, "status", RESOURCE_STATUSES),
        recent_activity=recent_activity(resources),
        by_month=resources_by_month(resources),
    )
