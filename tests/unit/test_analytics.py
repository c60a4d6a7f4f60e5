"""Unit tests for quest completion analytics."""

from unittest.mock import Mock, patch

import pytest
import requests

from questboard.analytics import (
    COMPLETED_METRIC,
    XP_METRIC,
    build_completion_series,
    send_quest_metric,
)
from questboard.quests import Quest


@pytest.fixture
def epic_quest():
    return Quest(
        id="q1",
        title="Slay dragon",
        category="Main",
        difficulty="Epic",
        xp_reward=100,
        completed=True
    )


@pytest.fixture
def mock_post():
    with patch('questboard.analytics.requests.post') as post:
        post.return_value = Mock()
        yield post


class TestBuildCompletionSeries:
    """Test series construction for a completed quest."""
    
    def test_completion_count(self, epic_quest):
        """The completion series counts one quest with its tags."""
        completed, _ = build_completion_series(epic_quest, 1700000000)
        
        assert completed["metric"] == COMPLETED_METRIC
        assert completed["type"] == "count"
        assert completed["points"] == [[1700000000, 1]]
        assert completed["tags"] == ["difficulty:Epic", "category:Main"]
    
    def test_xp_series_carries_reward(self, epic_quest):
        """The XP series reports the quest's frozen XP reward."""
        _, awarded = build_completion_series(epic_quest, 1700000000)
        
        assert awarded["metric"] == XP_METRIC
        assert awarded["points"] == [[1700000000, 100]]
        assert awarded["tags"] == ["difficulty:Epic", "category:Main"]
    
    def test_unknown_difficulty_uses_stored_reward(self):
        """A quest stored with fallback XP reports that XP, not a table value."""
        quest = Quest(id="q2", title="Odd", category="Side", difficulty="Mythic", xp_reward=10)
        
        _, awarded = build_completion_series(quest, 1)
        
        assert awarded["points"] == [[1, 10]]
        assert "difficulty:Mythic" in awarded["tags"]


class TestSendQuestMetric:
    """Test the Datadog request and fail-open behavior."""
    
    @patch('questboard.analytics.time.time')
    def test_successful_send(self, mock_time, mock_post, epic_quest):
        """Both series go out in a single authenticated request."""
        mock_time.return_value = 1234567890
        
        assert send_quest_metric(epic_quest, "test-api-key") is True
        
        mock_post.assert_called_once()
        kwargs = mock_post.call_args.kwargs
        assert [s["metric"] for s in kwargs['json']['series']] == [COMPLETED_METRIC, XP_METRIC]
        assert kwargs['json']['series'][1]['points'] == [[1234567890, 100]]
        assert kwargs['headers']['DD-API-KEY'] == 'test-api-key'
        assert kwargs['timeout'] == 5
    
    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("Network error"),
        requests.exceptions.Timeout("Request timeout"),
        Exception("Unexpected error"),
    ])
    def test_request_failures_return_false(self, mock_post, epic_quest, error):
        """Transport and unexpected errors are logged, not raised."""
        mock_post.side_effect = error
        
        assert send_quest_metric(epic_quest, "test-api-key") is False
    
    def test_http_error_returns_false(self, mock_post, epic_quest):
        """A rejected API key does not raise."""
        mock_post.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("403 Forbidden")
        
        assert send_quest_metric(epic_quest, "invalid-api-key") is False
