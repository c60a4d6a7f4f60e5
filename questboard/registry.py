"""Difficulty and category registry for QuestBoard.

This module holds the static tables that drive quest scoring and display:
- XP reward per difficulty
- Color, icon and label per difficulty and category

Lookups never raise on unknown tags. XP falls back to the Easy value and
display metadata falls back to a neutral style.
"""

from typing import Dict

DEFAULT_XP = 10

# Difficulty configuration, in the order shown on the quest form
DIFFICULTY_CONFIG = {
    "Easy": {"xp": 10, "color": "#52c41a", "icon": "⭐"},
    "Medium": {"xp": 25, "color": "#faad14", "icon": "🔥"},
    "Hard": {"xp": 50, "color": "#f5222d", "icon": "⚡"},
    "Epic": {"xp": 100, "color": "#722ed1", "icon": "🏆"},
}

# Category configuration, in the order shown on the quest form
CATEGORY_CONFIG = {
    "Daily": {"color": "#1890ff", "icon": "📅", "label": "Daily Quest"},
    "Main": {"color": "#f5222d", "icon": "⚔️", "label": "Main Quest"},
    "Side": {"color": "#52c41a", "icon": "🗺️", "label": "Side Quest"},
    "Achievement": {"color": "#722ed1", "icon": "🏅", "label": "Achievement"},
}

DIFFICULTIES = tuple(DIFFICULTY_CONFIG)
CATEGORIES = tuple(CATEGORY_CONFIG)

NEUTRAL_COLOR = "#8c8c8c"
NEUTRAL_ICON = "❔"


def xp_for_difficulty(difficulty) -> int:
    """Return the XP reward for a difficulty tag.
    
    Args:
        difficulty: Difficulty tag (Easy, Medium, Hard, Epic)
    
    Returns:
        XP value for the tag, or DEFAULT_XP (10) for unknown or missing tags
    """
    config = DIFFICULTY_CONFIG.get(difficulty)
    if config is None:
        return DEFAULT_XP
    return config["xp"]


def is_valid_difficulty(difficulty) -> bool:
    return difficulty in DIFFICULTY_CONFIG


def is_valid_category(category) -> bool:
    return category in CATEGORY_CONFIG


def difficulty_style(difficulty) -> Dict[str, str]:
    """Return display metadata for a difficulty tag.
    
    Returns:
        Dict with color, icon and label keys. Unknown tags get the
        neutral style with the raw tag (or "Unknown") as label.
    """
    config = DIFFICULTY_CONFIG.get(difficulty)
    if config is None:
        return {
            "color": NEUTRAL_COLOR,
            "icon": NEUTRAL_ICON,
            "label": str(difficulty) if difficulty else "Unknown",
        }
    return {"color": config["color"], "icon": config["icon"], "label": difficulty}


def category_style(category) -> Dict[str, str]:
    """Return display metadata for a category tag.
    
    Returns:
        Dict with color, icon and label keys. Unknown tags get the
        neutral style with the raw tag (or "Unknown") as label.
    """
    config = CATEGORY_CONFIG.get(category)
    if config is None:
        return {
            "color": NEUTRAL_COLOR,
            "icon": NEUTRAL_ICON,
            "label": str(category) if category else "Unknown",
        }
    return dict(config)


def difficulty_option_label(difficulty: str) -> str:
    """Form label for a difficulty, e.g. "Epic (100 XP)"."""
    return f"{difficulty} ({xp_for_difficulty(difficulty)} XP)"
