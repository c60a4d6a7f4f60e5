"""UI components module for QuestBoard.

This module provides Streamlit UI rendering functions for the quest board:
- Player stats header with level progress bar
- Quest creation form
- Aggregate quest counters
- Quest log with active and completed sections

Form submissions are stored in session state and processed by app.py.
"""

import streamlit as st

from questboard.registry import (
    CATEGORIES,
    DIFFICULTIES,
    category_style,
    difficulty_option_label,
    difficulty_style,
)
from questboard.views import active_quests, completed_quests

COMPLETE_SUBMISSION_KEY = "complete_submission"
CREATE_SUBMISSION_KEY = "create_submission"


def render_player_stats(summary: dict) -> None:
    """Render the player stats header.
    
    Args:
        summary: Dict from progression_summary with total_xp, level,
            progress and xp_to_next keys
    """
    st.header("🎮 Quest Log")
    
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Level", summary["level"])
    with col2:
        st.metric("Experience Points", f"{summary['total_xp']} XP")
    
    st.progress(min(int(summary["progress"]), 100) / 100)
    st.caption(
        f"{int(summary['progress'])}% to Level {summary['level'] + 1} "
        f"({summary['xp_to_next']} XP to go)"
    )


def render_quest_form() -> None:
    """Render the quest creation form.
    
    Stores the submitted values in session state under
    CREATE_SUBMISSION_KEY for processing by the main app.
    """
    st.subheader("📜 New Quest")
    
    with st.form(key="create_quest_form", clear_on_submit=True):
        title = st.text_input(
            "Quest Title:",
            placeholder="Enter your quest...",
            key="quest_title_input"
        )
        
        category = st.selectbox(
            "Category:",
            CATEGORIES,
            index=0,
            format_func=lambda c: category_style(c)["label"],
            key="quest_category_input"
        )
        
        description = st.text_area(
            "Quest Description:",
            placeholder="Describe your quest objective...",
            height=80,
            key="quest_description_input"
        )
        
        difficulty = st.selectbox(
            "Difficulty:",
            DIFFICULTIES,
            index=0,
            format_func=difficulty_option_label,
            key="quest_difficulty_input"
        )
        
        submit_button = st.form_submit_button("➕ Add Quest")
        
        if submit_button:
            st.session_state[CREATE_SUBMISSION_KEY] = {
                "title": title,
                "description": description,
                "category": category,
                "difficulty": difficulty
            }


def render_quest_counts(counts: dict) -> None:
    """Render total/completed/active/XP counters in one row."""
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Quests", counts["total"])
    with col2:
        st.metric("Completed", counts["completed"])
    with col3:
        st.metric("Active", counts["active"])
    with col4:
        st.metric("Experience", counts["total_xp"])


def render_quest_card(quest, disabled: bool = False) -> None:
    """Render a single quest with its badges and completion control.
    
    Args:
        quest: Quest record
        disabled: Disable the complete button (operation in progress)
    """
    difficulty = difficulty_style(quest.difficulty)
    category = category_style(quest.category)
    
    with st.container(border=True):
        st.markdown(
            f":gray-background[{difficulty['icon']} {difficulty['label']}] "
            f":gray-background[{category['icon']} {category['label']}] "
            f"**+{quest.xp_reward} XP**"
        )
        
        if quest.completed:
            st.markdown(f"~~{quest.title}~~")
        else:
            st.markdown(f"**{quest.title}**")
        
        if quest.description:
            st.caption(quest.description)
        
        if quest.completed:
            st.success("✓ COMPLETED")
        elif st.button("Complete Quest", key=f"complete_{quest.id}", disabled=disabled):
            st.session_state[COMPLETE_SUBMISSION_KEY] = quest.id


def render_quest_log(quests, disabled: bool = False) -> None:
    """Render active quests followed by completed quests.
    
    Args:
        quests: Quest collection in storage order
        disabled: Disable completion buttons
    """
    if not quests:
        st.info("🏆 No quests yet! Create your first quest to begin your adventure!")
        return
    
    active = active_quests(quests)
    completed = completed_quests(quests)
    
    if active:
        st.subheader(f"🔥 Active Quests ({len(active)})")
        for quest in active:
            render_quest_card(quest, disabled=disabled)
    
    if completed:
        st.divider()
        st.subheader(f"✅ Completed Quests ({len(completed)})")
        for quest in completed:
            render_quest_card(quest, disabled=disabled)
