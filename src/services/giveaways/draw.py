"""
Giveaway Draw
=============

Entry calculation and weighted winner selection.

DESIGN:
    Each participant holds 1 entry plus the bonus entries of every bonus
    role they have, capped at 10 per user when drawing. The draw builds
    a pool with one slot per entry, shuffles it and takes the first
    distinct users in pool order, so more entries means a better chance
    but never a second win. At most five winners are drawn.

Author: حَـــــنَّـــــا
"""

import random
from typing import Dict, Iterable, List, Optional

from src.core.constants import GIVEAWAY_MAX_ENTRIES_PER_USER, GIVEAWAY_MAX_WINNERS


def calculate_entries(role_ids: Iterable[int], bonus_roles: List[dict]) -> int:
    held = set(role_ids)
    return 1 + sum(int(bonus["entries"]) for bonus in bonus_roles if int(bonus["role_id"]) in held)


def capped_entries(entries: int) -> int:
    return max(1, min(int(entries), GIVEAWAY_MAX_ENTRIES_PER_USER))


def total_entries(participants: Dict[int, int]) -> int:
    return sum(capped_entries(entries) for entries in participants.values())


def draw_winners(
    participants: Dict[int, int],
    winners: int,
    rng: Optional[random.Random] = None,
    exclude: Iterable[int] = (),
) -> List[int]:
    """
    Pick up to ``min(winners, 5)`` distinct users, weighted by entries.

    Args:
        participants: {user_id: entries}.
        winners: Requested winner count.
        rng: Random source (seeded in tests).
        exclude: Users that may not win (previous winners on reroll).
    """
    rng = rng or random.Random()
    excluded = set(exclude)

    pool: List[int] = []
    for user_id, entries in participants.items():
        if user_id not in excluded:
            pool.extend([user_id] * capped_entries(entries))
    rng.shuffle(pool)

    limit = max(0, min(winners, GIVEAWAY_MAX_WINNERS))
    chosen: List[int] = []
    for user_id in pool:
        if len(chosen) >= limit:
            break
        if user_id not in chosen:
            chosen.append(user_id)
    return chosen


__all__ = ["calculate_entries", "capped_entries", "total_entries", "draw_winners"]
