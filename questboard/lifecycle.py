"""Quest lifecycle manager for QuestBoard.

The manager owns the canonical in-memory quest collection (held in a
QuestSession) and is the only code that changes it. Every mutating
operation goes to the storage collaborator first and then reloads the full
collection from storage. Storage is the source of truth, so there are no
optimistic local edits.

Only one operation may be in flight at a time. An overlapping call raises
OperationInProgressError instead of queuing.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from questboard.errors import (
    CreateError,
    InvalidStateError,
    LoadError,
    NotFoundError,
    OperationInProgressError,
    UpdateError,
    ValidationError,
)
from questboard.progression import player_level, progress_percent, total_xp
from questboard.quests import Quest, build_quest_data, validate_quest_input
from questboard.storage import QuestStorage

logger = logging.getLogger(__name__)


@dataclass
class QuestSession:
    """Session-scoped quest state.
    
    Fields:
    - quests: list[Quest] - Collection as last loaded from storage
    - total_xp: int - XP recomputed from quests on every load
    - pending: str | None - Name of the in-flight operation, None when idle
    """
    quests: List[Quest] = field(default_factory=list)
    total_xp: int = 0
    pending: Optional[str] = None


class QuestLifecycleManager:
    """Create, complete and reload quests against a storage collaborator.
    
    Args:
        storage: Quest storage service (list/create/update)
        session: State object to operate on; a fresh one is created if omitted
    """

    def __init__(self, storage: QuestStorage, session: QuestSession | None = None):
        self.storage = storage
        self.session = session if session is not None else QuestSession()

    @property
    def quests(self) -> Tuple[Quest, ...]:
        """Snapshot of the loaded quests in storage order."""
        return tuple(self.session.quests)

    @property
    def total_xp(self) -> int:
        """XP from completed quests as of the last load."""
        return self.session.total_xp

    @property
    def level(self) -> int:
        """Player level derived from total_xp."""
        return player_level(self.session.total_xp)

    @property
    def progress(self) -> float:
        """Percent of the current level already earned."""
        return progress_percent(self.session.total_xp, self.level)

    @property
    def is_busy(self) -> bool:
        """True while a load/create/complete is in flight."""
        return self.session.pending is not None

    def get_quest(self, quest_id: str) -> Quest | None:
        """Find a quest in the local collection by id, or None."""
        for quest in self.session.quests:
            if quest.id == quest_id:
                return quest
        return None

    @contextmanager
    def _operation(self, name: str):
        # Check-and-set happens before any await, so it is atomic on the event loop
        if self.session.pending is not None:
            logger.warning(f"Rejected {name}: {self.session.pending} already in progress")
            raise OperationInProgressError(
                f"Cannot {name} while {self.session.pending} is in progress"
            )
        self.session.pending = name
        try:
            yield
        finally:
            self.session.pending = None

    async def load(self) -> List[Quest]:
        """Replace the local collection with the one held by storage.
        
        Returns:
            The reloaded quest list
        
        Raises:
            LoadError: If storage fails; the previous collection is kept
            OperationInProgressError: If another operation is in flight
        """
        with self._operation("load"):
            return await self._reload()

    async def create_quest(
        self,
        title: str,
        description: str | None,
        category: str,
        difficulty: str
    ) -> Quest:
        """Validate, store and reload a new quest.
        
        Args:
            title: Quest title (required)
            description: Optional quest description
            category: Daily, Main, Side or Achievement
            difficulty: Easy, Medium, Hard or Epic
        
        Returns:
            The quest as stored (with its storage-assigned id)
        
        Raises:
            ValidationError: If input is malformed; nothing is sent to storage
            CreateError: If storage rejects the write; local state unchanged
            LoadError: If the write succeeded but the reload failed
            OperationInProgressError: If another operation is in flight
        """
        is_valid, error_message = validate_quest_input(title, category, difficulty)
        if not is_valid:
            logger.warning(f"Rejected quest creation: {error_message}")
            raise ValidationError(error_message)
        
        quest_data = build_quest_data(title, description, category, difficulty)
        
        with self._operation("create_quest"):
            try:
                response = await self.storage.create(quest_data)
            except Exception as e:
                logger.error(f"Quest creation failed for '{quest_data['title']}': {e}")
                raise CreateError("Unable to add quest to your log") from e
            
            if not response.success:
                logger.error(f"Storage rejected quest '{quest_data['title']}': {response.error}")
                raise CreateError(response.error or "Unable to add quest to your log")
            
            created = response.data
            logger.info(
                f"Created {difficulty} quest '{quest_data['title']}' "
                f"({quest_data['xp_reward']} XP)"
            )
            
            await self._reload()
            return created

    async def complete_quest(self, quest_id: str) -> int:
        """Mark a quest completed in storage and reload.
        
        Args:
            quest_id: Id of a quest in the local collection
        
        Returns:
            XP awarded, taken from the local quest before the update
        
        Raises:
            NotFoundError: If quest_id is not in the local collection
            InvalidStateError: If the quest is already completed
            UpdateError: If storage rejects the update; local state unchanged
            LoadError: If the update succeeded but the reload failed
            OperationInProgressError: If another operation is in flight
        """
        with self._operation("complete_quest"):
            quest = self.get_quest(quest_id)
            if quest is None:
                logger.warning(f"Cannot complete quest {quest_id}: not in local collection")
                raise NotFoundError(f"Quest '{quest_id}' not found; reload and try again")
            
            if quest.completed:
                logger.warning(f"Cannot complete quest {quest_id}: already completed")
                raise InvalidStateError(f"Quest '{quest.title}' is already completed")
            
            awarded_xp = quest.xp_reward
            
            try:
                response = await self.storage.update(quest_id, {"completed": True})
            except Exception as e:
                logger.error(f"Quest completion failed for {quest_id}: {e}")
                raise UpdateError("Unable to complete quest") from e
            
            if not response.success:
                logger.error(f"Storage rejected completion of {quest_id}: {response.error}")
                raise UpdateError(response.error or "Unable to complete quest")
            
            logger.info(f"Completed quest '{quest.title}' (+{awarded_xp} XP)")
            
            await self._reload()
            return awarded_xp

    async def _reload(self) -> List[Quest]:
        try:
            response = await self.storage.list()
        except Exception as e:
            logger.error(f"Failed to load quests: {e}")
            raise LoadError("Failed to load your quest log") from e
        
        if not response.success:
            logger.error(f"Storage failed to list quests: {response.error}")
            raise LoadError(response.error or "Failed to load your quest log")
        
        quests = list(response.data)
        self.session.quests = quests
        self.session.total_xp = total_xp(quests)
        logger.info(f"Loaded {len(quests)} quests ({self.session.total_xp} XP)")
        return quests
