"""Unit tests for progression calculations."""

import pytest
from questboard.progression import (
    player_level,
    progress_percent,
    progression_summary,
    total_xp,
    xp_to_next_level,
)
from questboard.quests import Quest


def make_quest(xp_reward, completed, quest_id="q"):
    return Quest(
        id=quest_id,
        title="Quest",
        category="Daily",
        difficulty="Easy",
        xp_reward=xp_reward,
        completed=completed
    )


class TestTotalXp:
    """Test XP summation."""
    
    def test_empty_collection(self):
        """Test no quests means no XP."""
        assert total_xp([]) == 0
    
    def test_only_completed_quests_count(self):
        """Test active quests contribute nothing."""
        quests = [
            make_quest(10, True),
            make_quest(100, False),
            make_quest(25, True),
        ]
        assert total_xp(quests) == 35
    
    def test_matches_sum_over_completed(self):
        """Test total equals the sum of completed rewards."""
        quests = [make_quest(xp, i % 2 == 0, str(i)) for i, xp in enumerate([10, 25, 50, 100, 10, 50])]
        assert total_xp(quests) == sum(q.xp_reward for q in quests if q.completed)


class TestPlayerLevel:
    """Test level calculation logic."""
    
    def test_level_one(self):
        """Test level 1 for XP less than 100."""
        assert player_level(0) == 1
        assert player_level(50) == 1
        assert player_level(99) == 1
    
    def test_level_two(self):
        """Test level 2 for XP 100-199."""
        assert player_level(100) == 2
        assert player_level(199) == 2
    
    def test_level_high_xp(self):
        """Test levels are uncapped."""
        assert player_level(1000) == 11
        assert player_level(9999) == 100
    
    def test_level_formula(self):
        """Test level equals xp // 100 + 1 and is at least 1."""
        for xp in range(0, 1001, 7):
            assert player_level(xp) == xp // 100 + 1
            assert player_level(xp) >= 1


class TestProgressPercent:
    """Test progress within the current level."""
    
    def test_start_of_level(self):
        """Test progress is 0 exactly at a level boundary."""
        assert progress_percent(0, 1) == 0
        assert progress_percent(100, 2) == 0
    
    def test_mid_level(self):
        """Test progress tracks XP within the band."""
        assert progress_percent(85, 1) == 85
        assert progress_percent(250, 3) == 50
    
    def test_always_in_range(self):
        """Test progress stays in [0, 100) for consistent level."""
        for xp in range(0, 1001):
            progress = progress_percent(xp, player_level(xp))
            assert 0 <= progress < 100


class TestXpToNextLevel:
    """Test remaining XP calculation."""
    
    def test_remaining_xp(self):
        """Test remaining XP counts down to the next boundary."""
        assert xp_to_next_level(0) == 100
        assert xp_to_next_level(85) == 15
        assert xp_to_next_level(100) == 100
        assert xp_to_next_level(199) == 1


class TestProgressionSummary:
    """Test the stats header summary."""
    
    def test_three_completed_quests(self):
        """Test 10 + 25 + 50 XP gives level 1 at 85%."""
        quests = [make_quest(10, True, "a"), make_quest(25, True, "b"), make_quest(50, True, "c")]
        summary = progression_summary(quests)
        assert summary == {"total_xp": 85, "level": 1, "progress": 85, "xp_to_next": 15}
    
    def test_accepts_generator(self):
        """Test the summary works on a one-shot iterable."""
        summary = progression_summary(make_quest(100, True, str(i)) for i in range(2))
        assert summary["total_xp"] == 200
        assert summary["level"] == 3
