"""Derived quest views for presentation.

Stateless functions of the quest collection, recomputed on every read.
Storage order is preserved in every list.
"""

from typing import Dict, Iterable, List

from questboard.progression import total_xp


def active_quests(quests: Iterable) -> List:
    return [quest for quest in quests if not quest.completed]


def completed_quests(quests: Iterable) -> List:
    return [quest for quest in quests if quest.completed]


def quest_counts(quests: Iterable) -> Dict[str, int]:
    """Aggregate counters for the stats row.
    
    Returns:
        Dict with total, completed, active and total_xp keys, where
        completed + active == total
    """
    quests = list(quests)
    completed = len(completed_quests(quests))
    return {
        "total": len(quests),
        "completed": completed,
        "active": len(quests) - completed,
        "total_xp": total_xp(quests),
    }
