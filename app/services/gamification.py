"""
Points and badge tiers.

A badge is a step function of cumulative points; thresholds are inclusive.
"""

from typing import List, Optional, Tuple

from app.core.settings import settings

# (minimum points, badge, emoji), ascending
BADGE_TIERS: List[Tuple[int, str, str]] = [
    (0, "Guardian", "🌱"),
    (1000, "Protector", "🌳"),
    (2000, "Master", "👑"),
]


def report_award() -> int:
    return settings.REPORT_POINTS_AWARD


def badge_for_points(points: int) -> Tuple[str, str]:
    """Return (badge, emoji) for a point total."""
    badge, emoji = BADGE_TIERS[0][1], BADGE_TIERS[0][2]
    for threshold, name, tier_emoji in BADGE_TIERS:
        if points >= threshold:
            badge, emoji = name, tier_emoji
        else:
            break
    return badge, emoji


def next_badge(points: int) -> Optional[Tuple[int, str, str]]:
    """The next tier above the current one, or None at the top tier."""
    for tier in BADGE_TIERS:
        if points < tier[0]:
            return tier
    return None


def progress_percentage(points: int) -> float:
    """Progress through the current tier towards the next one (100 at the top)."""
    upcoming = next_badge(points)
    if upcoming is None:
        return 100.0

    floor = 0
    for threshold, _, _ in BADGE_TIERS:
        if points >= threshold:
            floor = threshold
    span = upcoming[0] - floor
    return round(max(points - floor, 0) / span * 100, 2)
