"""Quest model and input validation for QuestBoard.

This module provides the Quest record, conversion to and from storage
records, create-input validation and construction of the create payload.
"""

from dataclasses import asdict, dataclass
from typing import Tuple

from questboard.registry import (
    CATEGORIES,
    DIFFICULTIES,
    is_valid_category,
    is_valid_difficulty,
    xp_for_difficulty,
)

MAX_TITLE_LENGTH = 200


@dataclass(frozen=True)
class Quest:
    """A task record with difficulty, category, XP reward and completion state.
    
    Quests are immutable in memory. The storage collaborator assigns id and
    created_at, and xp_reward is frozen at creation time.
    """
    id: str
    title: str
    category: str
    difficulty: str
    xp_reward: int
    completed: bool = False
    description: str = ""
    created_at: str = ""

    @classmethod
    def from_record(cls, record: dict) -> "Quest":
        """Build a Quest from a storage record.
        
        Accepts spreadsheet-style values: "TRUE"/"FALSE" strings for
        completed and numeric strings for xp_reward. Missing xp_reward
        reads as 0.
        """
        return cls(
            id=str(record.get("id", "")),
            title=str(record.get("title", "")),
            description=record.get("description") or "",
            category=record.get("category", ""),
            difficulty=record.get("difficulty", ""),
            xp_reward=_parse_int(record.get("xp_reward")),
            completed=_parse_bool(record.get("completed")),
            created_at=record.get("created_at") or "",
        )

    def to_record(self) -> dict:
        return asdict(self)


def _parse_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().upper() in ("TRUE", "1", "YES")
    return bool(value)


def _parse_int(value) -> int:
    if value is None or value == "":
        return 0
    return int(value)


def validate_quest_input(title: str, category: str, difficulty: str) -> Tuple[bool, str]:
    """Validate create-quest input.
    
    Args:
        title: Quest title (required, non-blank)
        category: Category tag (Daily, Main, Side, Achievement)
        difficulty: Difficulty tag (Easy, Medium, Hard, Epic)
    
    Returns:
        Tuple of (is_valid, error_message)
        - is_valid: True if validation passes, False otherwise
        - error_message: Empty string if valid, error description if invalid
    """
    if not title or not title.strip():
        return False, "Quest title is required"
    
    if len(title) > MAX_TITLE_LENGTH:
        return False, f"Quest title must be at most {MAX_TITLE_LENGTH} characters (current: {len(title)})"
    
    if not is_valid_category(category):
        return False, f"Unknown category '{category}' (expected one of: {', '.join(CATEGORIES)})"
    
    if not is_valid_difficulty(difficulty):
        return False, f"Unknown difficulty '{difficulty}' (expected one of: {', '.join(DIFFICULTIES)})"
    
    return True, ""


def build_quest_data(title: str, description: str | None, category: str, difficulty: str) -> dict:
    """Build the payload submitted to storage when creating a quest.
    
    The XP reward is looked up once here and stored with the quest, so
    later changes to the XP table never touch existing quests.
    """
    return {
        "title": title.strip(),
        "description": (description or "").strip(),
        "category": category,
        "difficulty": difficulty,
        "completed": False,
        "xp_reward": xp_for_difficulty(difficulty),
    }
