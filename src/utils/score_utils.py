"""GAA score notation helpers ("G-PP": goals worth 3, points worth 1)."""

import re
from typing import Optional, Tuple

SCORE_PATTERN = re.compile(r"^(\d+)-(\d+)$")


def parse_gaa_score(score: Optional[str]) -> Optional[Tuple[int, int]]:
    """
    Parse a G-PP score string.

    Args:
        score: Score text such as "1-05"

    Returns:
        Tuple (goals, points), or None if the text is not a valid score

    Example:
        parse_gaa_score("1-05")  # (1, 5)
    """
    if not score:
        return None

    match = SCORE_PATTERN.match(score.strip())
    if not match:
        return None

    return int(match.group(1)), int(match.group(2))


def score_to_points(score: Optional[str]) -> int:
    """Total points for a G-PP score (goals x 3 + points), 0 if invalid."""
    parsed = parse_gaa_score(score)
    if parsed is None:
        return 0

    goals, points = parsed
    return goals * 3 + points


def format_gaa_score(total_points: int) -> str:
    """
    Format a points total as canonical G-PP notation.

    Example:
        format_gaa_score(6)  # "2-00"
    """
    goals, points = divmod(total_points, 3)
    return f"{goals}-{points:02d}"
