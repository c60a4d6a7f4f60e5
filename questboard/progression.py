"""Progression logic for QuestBoard.

Pure functions that turn a quest collection into total XP, player level
and progress within the current level. Nothing here is cached; callers
recompute from the collection they hold.
"""

from typing import Iterable

XP_PER_LEVEL = 100


def total_xp(quests: Iterable) -> int:
    """Sum the XP reward of every completed quest.
    
    Args:
        quests: Sequence of Quest records
    
    Returns:
        Total XP earned (non-negative)
    """
    return sum(quest.xp_reward for quest in quests if quest.completed)


def player_level(xp: int) -> int:
    """Calculate player level from XP.
    
    Levels start at 1 and every 100 XP adds one level, with no cap.
    
    Args:
        xp: Total experience points (non-negative)
    
    Returns:
        Level calculated as XP // 100 + 1
    """
    return xp // XP_PER_LEVEL + 1


def progress_percent(xp: int, level: int) -> float:
    """Percentage of the current level's 100 XP band already earned.
    
    Args:
        xp: Total experience points
        level: Player level consistent with xp (see player_level)
    
    Returns:
        Percentage in [0, 100)
    """
    level_floor = (level - 1) * XP_PER_LEVEL
    xp_in_level = xp - level_floor
    return xp_in_level * 100 / XP_PER_LEVEL


def xp_to_next_level(xp: int) -> int:
    """XP still needed to reach the next level (1 to 100)."""
    return player_level(xp) * XP_PER_LEVEL - xp


def progression_summary(quests: Iterable) -> dict:
    """Build the stats header values for a quest collection.
    
    Returns:
        Dict with total_xp, level, progress and xp_to_next keys
    """
    xp = total_xp(quests)
    level = player_level(xp)
    return {
        "total_xp": xp,
        "level": level,
        "progress": progress_percent(xp, level),
        "xp_to_next": xp_to_next_level(xp),
    }
