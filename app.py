"""
QuestBoard - Main Streamlit Application

Entry point for the QuestBoard gamified task tracker.
Wires configuration, the quest lifecycle manager and UI rendering.
"""

import asyncio
import logging

import streamlit as st

from questboard.analytics import send_quest_metric
from questboard.errors import (
    CreateError,
    InvalidStateError,
    LoadError,
    NotFoundError,
    OperationInProgressError,
    UpdateError,
    ValidationError,
)
from questboard.lifecycle import QuestLifecycleManager, QuestSession
from questboard.progression import progression_summary
from questboard.storage import InMemoryQuestStorage, SheetsQuestStorage
from questboard.ui_components import (
    COMPLETE_SUBMISSION_KEY,
    CREATE_SUBMISSION_KEY,
    render_player_stats,
    render_quest_counts,
    render_quest_form,
    render_quest_log,
)
from questboard.views import quest_counts

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="QuestBoard",
    page_icon="🎮",
    layout="wide"
)


def get_secret(name: str):
    """Read an optional Streamlit secret.
    
    Returns None when the key is absent or no secrets file exists.
    """
    try:
        return st.secrets.get(name)
    except FileNotFoundError:
        logger.warning(f"No secrets file found while reading {name}")
        return None


def get_sheets_worksheet():
    """Load the Google Sheets worksheet from Streamlit secrets.
    
    Returns:
        gspread worksheet object, or None if Sheets is not configured
        
    Raises:
        Exception: If secrets are present but the connection fails
    """
    credentials_dict = get_secret("gcp_service_account")
    spreadsheet_id = get_secret("google_sheets_id")
    if not credentials_dict or not spreadsheet_id:
        return None
    
    try:
        import gspread
        from google.oauth2.service_account import Credentials
        
        scopes = [
            "https://www.googleapis.com/auth/spreadsheets",
            "https://www.googleapis.com/auth/drive"
        ]
        credentials = Credentials.from_service_account_info(
            credentials_dict,
            scopes=scopes
        )
        
        client = gspread.authorize(credentials)
        spreadsheet = client.open_by_key(spreadsheet_id)
        
        return spreadsheet.sheet1
        
    except Exception as e:
        logger.error(f"Failed to connect to Google Sheets: {e}")
        raise


def get_datadog_api_key() -> str | None:
    """Load the optional Datadog API key from Streamlit secrets."""
    return get_secret("datadog_api_key")


def get_manager() -> QuestLifecycleManager:
    """Return the session's lifecycle manager, creating it on first run.
    
    The manager and its QuestSession live in st.session_state for the
    duration of the browser session.
    """
    if "quest_manager" not in st.session_state:
        worksheet = get_sheets_worksheet()
        if worksheet is None:
            logger.warning("Google Sheets not configured; quests are kept in memory for this session")
            storage = InMemoryQuestStorage()
        else:
            storage = SheetsQuestStorage(worksheet)
        
        st.session_state.quest_manager = QuestLifecycleManager(storage, QuestSession())
        st.session_state.quests_loaded = False
    
    return st.session_state.quest_manager


def handle_initial_load(manager: QuestLifecycleManager):
    """Load the quest log once per session."""
    if st.session_state.get("quests_loaded"):
        return
    
    try:
        asyncio.run(manager.load())
        st.session_state.quests_loaded = True
    except LoadError as e:
        st.error(f"Error loading quests: {e}")


def handle_quest_creation(manager: QuestLifecycleManager):
    """Process a pending quest creation form submission."""
    if CREATE_SUBMISSION_KEY not in st.session_state:
        return
    
    values = st.session_state.pop(CREATE_SUBMISSION_KEY)
    
    try:
        asyncio.run(manager.create_quest(
            values["title"],
            values["description"],
            values["category"],
            values["difficulty"]
        ))
        st.success(
            f"Quest Added! New {values['difficulty']} quest "
            f"\"{values['title'].strip()}\" has been added to your quest log!"
        )
    except ValidationError as e:
        st.error(str(e))
    except CreateError:
        st.error("Quest Creation Failed: unable to add quest to your log.")
    except LoadError:
        st.warning("Quest added, but the quest log could not be refreshed. Please reload.")
    except OperationInProgressError:
        st.warning("Another quest action is still running. Please try again.")


def handle_quest_completion(manager: QuestLifecycleManager, datadog_api_key: str | None):
    """Process a pending Complete Quest click."""
    if COMPLETE_SUBMISSION_KEY not in st.session_state:
        return
    
    quest_id = st.session_state.pop(COMPLETE_SUBMISSION_KEY)
    quest = manager.get_quest(quest_id)
    
    try:
        awarded_xp = asyncio.run(manager.complete_quest(quest_id))
    except NotFoundError:
        logger.warning(f"Quest {quest_id} missing locally; forcing a reload")
        st.session_state.quests_loaded = False
        st.rerun()
    except InvalidStateError:
        st.info("That quest is already completed.")
        return
    except UpdateError:
        st.error("Quest Update Failed: unable to complete quest.")
        return
    except LoadError:
        st.warning("Quest completed, but the quest log could not be refreshed. Please reload.")
        return
    except OperationInProgressError:
        st.warning("Another quest action is still running. Please try again.")
        return
    
    st.success(f"Quest Completed! 🎉 You earned {awarded_xp} XP! Total XP: {manager.total_xp}")
    st.balloons()
    
    if datadog_api_key:
        send_quest_metric(quest, datadog_api_key)


def main():
    """Main application entry point.
    
    Orchestrates:
    - Storage and manager setup from secrets
    - Initial quest log load
    - Form and button submission handling
    - Stats, form and quest log rendering
    """
    st.title("🎮 QuestBoard")
    
    try:
        manager = get_manager()
        datadog_api_key = get_datadog_api_key()
    except Exception as e:
        st.error("Configuration error. Please contact the administrator.")
        logger.error(f"Failed to load configuration: {e}")
        return
    
    handle_initial_load(manager)
    handle_quest_creation(manager)
    handle_quest_completion(manager, datadog_api_key)
    
    quests = manager.quests
    
    render_player_stats(progression_summary(quests))
    st.divider()
    render_quest_form()
    st.divider()
    render_quest_counts(quest_counts(quests))
    render_quest_log(quests, disabled=manager.is_busy)

    # Submissions are recorded while rendering; rerun so the handlers see them
    if CREATE_SUBMISSION_KEY in st.session_state or COMPLETE_SUBMISSION_KEY in st.session_state:
        st.rerun()


if __name__ == "__main__":
    main()
