"""
Quest storage collaborators for QuestBoard.

Defines the storage contract used by the lifecycle manager and two
implementations:
- InMemoryQuestStorage: process-local store for development and tests
- SheetsQuestStorage: Google Sheets worksheet with retry logic for rate limits

Every storage call reports its outcome as a StorageResponse instead of
raising, so the lifecycle manager sees a plain success/failure result.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any, Callable, List, Protocol

from questboard.quests import Quest

logger = logging.getLogger(__name__)

# Sheet header row, in column order
SHEET_COLUMNS = [
    'ID',
    'Title',
    'Description',
    'Category',
    'Difficulty',
    'Completed',
    'XP_Reward',
    'Created_At',
]

# Fields a partial update may touch, mapped to 1-indexed sheet columns.
# id, xp_reward and created_at are fixed at creation.
UPDATABLE_FIELDS = {
    'title': 2,
    'description': 3,
    'category': 4,
    'difficulty': 5,
    'completed': 6,
}


class RateLimitError(Exception):
    """Raised when Google Sheets API returns a rate limit error."""
    pass


class PersistenceError(Exception):
    """Raised when Google Sheets operations fail."""
    pass


@dataclass
class StorageResponse:
    """Outcome of a storage call.
    
    data holds a list of Quest for list(), a single Quest for create()
    and update(), and None on failure.
    """
    success: bool
    data: Any = None
    error: str = ""


class QuestStorage(Protocol):
    """Contract of the quest storage service."""

    async def list(self) -> StorageResponse:
        """Return every stored quest in insertion order."""
        ...

    async def create(self, quest_data: dict) -> StorageResponse:
        """Store a new quest; assigns id and created_at."""
        ...

    async def update(self, quest_id: str, fields: dict) -> StorageResponse:
        """Apply a partial update to one quest."""
        ...


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace('+00:00', 'Z')


def retry_with_backoff(func: Callable, max_attempts: int = 3) -> Any:
    """
    Retry a function with exponential backoff for rate limit errors.
    
    Implements exponential backoff: 1s, 2s, 4s between attempts.
    
    Args:
        func: The function to retry (should be a callable with no arguments)
        max_attempts: Maximum number of retry attempts (default: 3)
        
    Returns:
        The return value of the successful function call
        
    Raises:
        RateLimitError: If all retry attempts fail with rate limit errors
        PersistenceError: If the function fails with a non-rate-limit error
    """
    for attempt in range(max_attempts):
        try:
            return func()
        except PersistenceError:
            raise
        except Exception as e:
            error_msg = str(e).lower()
            is_rate_limit = ('rate limit' in error_msg or 
                           'quota' in error_msg or 
                           '429' in error_msg)
            
            if is_rate_limit:
                if attempt == max_attempts - 1:
                    raise RateLimitError(f"Rate limit exceeded after {max_attempts} attempts") from e
                
                wait_time = 2 ** attempt
                logger.warning(f"Sheets rate limit hit, retrying in {wait_time}s (attempt {attempt + 1}/{max_attempts})")
                time.sleep(wait_time)
            else:
                raise PersistenceError(f"Database operation failed: {e}") from e
    
    # Unreachable for max_attempts >= 1
    raise RateLimitError(f"Rate limit exceeded after {max_attempts} attempts")


class InMemoryQuestStorage:
    """Process-local quest store.
    
    Quests are kept as plain records in insertion order, the way a durable
    store would hold them. Every call returns freshly built Quest objects.
    """

    def __init__(self, quests: List[Quest] | None = None):
        self._records: List[dict] = [quest.to_record() for quest in quests or []]

    async def list(self) -> StorageResponse:
        return StorageResponse(
            success=True,
            data=[Quest.from_record(record) for record in self._records]
        )

    async def create(self, quest_data: dict) -> StorageResponse:
        record = dict(quest_data)
        record['id'] = uuid.uuid4().hex
        record['created_at'] = _utc_timestamp()
        quest = Quest.from_record(record)
        self._records.append(quest.to_record())
        return StorageResponse(success=True, data=quest)

    async def update(self, quest_id: str, fields: dict) -> StorageResponse:
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            return StorageResponse(success=False, error=f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        
        for idx, record in enumerate(self._records):
            if record['id'] == quest_id:
                updated = Quest.from_record({**record, **fields})
                self._records[idx] = updated.to_record()
                return StorageResponse(success=True, data=updated)
        
        return StorageResponse(success=False, error=f"Quest '{quest_id}' not found")


def _row_to_record(row: dict) -> dict:
    return {
        'id': str(row.get('ID', '')),
        'title': row.get('Title', ''),
        'description': row.get('Description', ''),
        'category': row.get('Category', ''),
        'difficulty': row.get('Difficulty', ''),
        'completed': row.get('Completed', False),
        'xp_reward': row.get('XP_Reward', 0),
        'created_at': row.get('Created_At', ''),
    }


def _sheet_value(value: Any) -> Any:
    # Sheets renders booleans as TRUE/FALSE
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    return value


class SheetsQuestStorage:
    """
    Quest storage backed by a Google Sheets worksheet.
    
    The worksheet's first row must hold SHEET_COLUMNS. gspread calls are
    blocking, so each operation runs in a worker thread via asyncio.to_thread
    and goes through retry_with_backoff.
    
    Args:
        worksheet: gspread worksheet object (or any object exposing
            get_all_records, append_row and update_cell)
        max_attempts: Retry attempts for rate-limited calls
    """

    def __init__(self, worksheet, max_attempts: int = 3):
        self.worksheet = worksheet
        self.max_attempts = max_attempts

    async def list(self) -> StorageResponse:
        return await self._run('list', self._list_quests)

    async def create(self, quest_data: dict) -> StorageResponse:
        return await self._run('create', lambda: self._create_quest(quest_data))

    async def update(self, quest_id: str, fields: dict) -> StorageResponse:
        return await self._run('update', lambda: self._update_quest(quest_id, fields))

    async def _run(self, operation: str, func: Callable) -> StorageResponse:
        try:
            data = await asyncio.to_thread(retry_with_backoff, func, self.max_attempts)
        except (PersistenceError, RateLimitError) as e:
            logger.error(f"Sheets {operation} failed: {e}")
            return StorageResponse(success=False, error=str(e))
        return StorageResponse(success=True, data=data)

    def _list_quests(self) -> List[Quest]:
        # Cells stay text; Quest.from_record parses XP_Reward and Completed
        records = self.worksheet.get_all_records(numericise_ignore=['all'])
        return [Quest.from_record(_row_to_record(row)) for row in records]

    def _create_quest(self, quest_data: dict) -> Quest:
        record = dict(quest_data)
        record['id'] = uuid.uuid4().hex
        record['created_at'] = _utc_timestamp()
        
        new_row = [
            record['id'],                       # ID
            record.get('title', ''),            # Title
            record.get('description') or '',    # Description
            record.get('category', ''),         # Category
            record.get('difficulty', ''),       # Difficulty
            _sheet_value(bool(record.get('completed', False))),  # Completed
            record.get('xp_reward', 0),         # XP_Reward
            record['created_at'],               # Created_At
        ]
        self.worksheet.append_row(new_row)
        
        return Quest.from_record(record)

    def _update_quest(self, quest_id: str, fields: dict) -> Quest:
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise PersistenceError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        
        records = self.worksheet.get_all_records(numericise_ignore=['all'])
        
        # Row number: +2 for header row and 1-indexing
        row_num = None
        current = None
        for idx, row in enumerate(records):
            if str(row.get('ID')) == quest_id:
                row_num = idx + 2
                current = _row_to_record(row)
                break
        
        if row_num is None:
            raise PersistenceError(f"Quest '{quest_id}' not found")
        
        for field, value in fields.items():
            self.worksheet.update_cell(row_num, UPDATABLE_FIELDS[field], _sheet_value(value))
        
        current.update(fields)
        return Quest.from_record(current)
