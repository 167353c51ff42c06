"""
Unit tests for the timer service.
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from timetracker.domain.models.base import ConflictError, NotFoundError, ValidationError
from timetracker.domain.models.time_entry import TimeEntryChanges
from timetracker.domain.services.timer_service import TimerService


class TestStart:
    """Test cases for starting timers."""
    
    @pytest.mark.asyncio
    async def test_start_creates_running_timer(self, timer_service, time_entry_repository, clock):
        """Test start creates a running timer."""
        entry = await timer_service.start("u1", "p1", "Coding")
        
        assert entry.is_active
        assert entry.start_time == clock.now
        assert time_entry_repository.entries[entry.id] is entry
    
    @pytest.mark.asyncio
    async def test_unknown_project(self, timer_service, time_entry_repository):
        """Test start with unknown project."""
        with pytest.raises(NotFoundError):
            await timer_service.start("u1", "missing")
        assert time_entry_repository.entries == {}
    
    @pytest.mark.asyncio
    async def test_second_start_conflicts(self, timer_service):
        """Test second start conflicts."""
        await timer_service.start("u1", "p1")
        
        with pytest.raises(ConflictError) as exc_info:
            await timer_service.start("u1", "p2")
        assert exc_info.value.message == "An active entry already exists for this user"
    
    @pytest.mark.asyncio
    async def test_other_users_are_independent(self, timer_service):
        """Test other users' timers are independent."""
        await timer_service.start("u1", "p1")
        entry = await timer_service.start("u2", "p1")
        assert entry.is_active
    
    @pytest.mark.asyncio
    async def test_start_after_stop(self, timer_service, clock):
        """Test start after stop."""
        await timer_service.start("u1", "p1")
        clock.advance(minutes=5)
        await timer_service.stop("u1")
        
        entry = await timer_service.start("u1", "p2")
        assert entry.is_active
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("attempts", [2, 5, 20])
    async def test_concurrent_starts_allow_exactly_one(self, timer_service, time_entry_repository, attempts):
        """Test concurrent starts allow exactly one timer."""
        time_entry_repository.latency = True
        
        results = await asyncio.gather(
            *[timer_service.start("u1", "p1", f"attempt {i}") for i in range(attempts)],
            return_exceptions=True
        )
        
        started = [r for r in results if not isinstance(r, Exception)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(started) == 1
        assert len(conflicts) == attempts - 1
        assert sum(1 for e in time_entry_repository.entries.values() if e.is_active) == 1
    
    @pytest.mark.asyncio
    async def test_repository_conflict_propagates(self, project_repository, clock):
        """Test repository conflict propagates."""
        repository = AsyncMock()
        repository.find_active.return_value = None
        repository.add.side_effect = ConflictError("An active entry already exists for this user")
        service = TimerService(repository, project_repository, clock=clock)
        
        with pytest.raises(ConflictError):
            await service.start("u1", "p1")


class TestStopAndPause:
    """Test cases for stopping and pausing timers."""
    
    @pytest.mark.asyncio
    async def test_stop_records_duration(self, timer_service, clock):
        """Test stop records duration."""
        started = await timer_service.start("u1", "p1")
        clock.advance(minutes=42, seconds=30)
        
        stopped = await timer_service.stop("u1")
        
        assert stopped.id == started.id
        assert stopped.is_active is False
        assert stopped.end_time == clock.now
        assert stopped.duration_minutes == 43
    
    @pytest.mark.asyncio
    async def test_stop_without_running_timer(self, timer_service):
        """Test stop without running timer."""
        with pytest.raises(NotFoundError) as exc_info:
            await timer_service.stop("u1")
        assert exc_info.value.message == "No active time entry found"
    
    @pytest.mark.asyncio
    async def test_stop_with_wrong_entry_id(self, timer_service):
        """Test stop with wrong entry ID."""
        await timer_service.start("u1", "p1")
        with pytest.raises(NotFoundError):
            await timer_service.stop("u1", "not-this-one")
    
    @pytest.mark.asyncio
    async def test_stop_specific_entry(self, timer_service, clock):
        """Test stop with specific entry ID."""
        started = await timer_service.start("u1", "p1")
        clock.advance(minutes=10)
        
        stopped = await timer_service.stop("u1", started.id)
        assert stopped.duration_minutes == 10
    
    @pytest.mark.asyncio
    async def test_pause_is_the_same_as_stop(self, timer_service, clock):
        """Test pause behaves like stop."""
        await timer_service.start("u1", "p1")
        clock.advance(minutes=15)
        
        paused = await timer_service.pause("u1")
        
        assert paused.is_active is False
        assert paused.duration_minutes == 15
        assert await timer_service.get_active_entry("u1") is None
    
    @pytest.mark.asyncio
    async def test_pause_without_running_timer(self, timer_service):
        """Test pause without running timer."""
        with pytest.raises(NotFoundError):
            await timer_service.pause("u1")


class TestManualEntries:
    """Test cases for manual entries."""
    
    @pytest.mark.asyncio
    async def test_add_manual_entry(self, timer_service, clock):
        """Test adding a manual entry."""
        start = clock.now - timedelta(hours=3)
        entry = await timer_service.add_manual_entry("u1", "p1", "Meeting", start, start + timedelta(minutes=90))
        
        assert entry.is_active is False
        assert entry.duration_minutes == 90
    
    @pytest.mark.asyncio
    async def test_manual_entry_while_timer_runs(self, timer_service, clock):
        """Test manual entry while a timer runs."""
        await timer_service.start("u1", "p1")
        start = clock.now - timedelta(hours=3)
        entry = await timer_service.add_manual_entry("u1", "p1", "", start, start + timedelta(hours=1))
        assert entry.duration_minutes == 60
    
    @pytest.mark.asyncio
    async def test_end_must_follow_start(self, timer_service, clock):
        """Test end time must follow start time."""
        with pytest.raises(ValidationError) as exc_info:
            await timer_service.add_manual_entry("u1", "p1", "", clock.now, clock.now)
        assert exc_info.value.message == "end time must be after start time"
    
    @pytest.mark.asyncio
    async def test_unknown_project(self, timer_service, clock):
        """Test manual entry with unknown project."""
        with pytest.raises(NotFoundError):
            await timer_service.add_manual_entry(
                "u1", "nope", "", clock.now - timedelta(hours=1), clock.now
            )


class TestUpdateAndDelete:
    """Test cases for updating and deleting entries."""
    
    @pytest.mark.asyncio
    async def test_update_recomputes_duration(self, timer_service, clock):
        """Test update recomputes duration."""
        start = clock.now - timedelta(hours=2)
        entry = await timer_service.add_manual_entry("u1", "p1", "", start, start + timedelta(hours=1))
        
        updated = await timer_service.update_entry(
            "u1", entry.id, TimeEntryChanges(end_time=start + timedelta(minutes=75))
        )
        assert updated.duration_minutes == 75
    
    @pytest.mark.asyncio
    async def test_update_allows_negative_duration(self, timer_service, clock):
        """Test update allows negative duration."""
        start = clock.now - timedelta(hours=2)
        entry = await timer_service.add_manual_entry("u1", "p1", "", start, start + timedelta(hours=1))
        
        updated = await timer_service.update_entry(
            "u1", entry.id, TimeEntryChanges(start_time=start + timedelta(hours=2))
        )
        assert updated.duration_minutes == -60
    
    @pytest.mark.asyncio
    async def test_update_other_users_entry_returns_none(self, timer_service, clock):
        """Test update of another user's entry returns None."""
        start = clock.now - timedelta(hours=2)
        entry = await timer_service.add_manual_entry("u1", "p1", "", start, start + timedelta(hours=1))
        
        assert await timer_service.update_entry("u2", entry.id, TimeEntryChanges(description="x")) is None
        assert await timer_service.update_entry("u1", "missing", TimeEntryChanges(description="x")) is None
    
    @pytest.mark.asyncio
    async def test_description_only_update(self, timer_service, clock):
        """Test description-only update."""
        start = clock.now - timedelta(hours=2)
        entry = await timer_service.add_manual_entry("u1", "p1", "x", start, start + timedelta(hours=1))

        updated = await timer_service.update_entry("u1", entry.id, TimeEntryChanges(description="y"))

        assert updated.description == "y"
        assert updated.duration_minutes == 60

    @pytest.mark.asyncio
    async def test_empty_update_leaves_entry_untouched(self, timer_service, clock):
        """Test empty update leaves entry untouched."""
        start = clock.now - timedelta(hours=2)
        entry = await timer_service.add_manual_entry("u1", "p1", "Review", start, start + timedelta(hours=1))
        clock.advance(minutes=5)

        same = await timer_service.update_entry("u1", entry.id, TimeEntryChanges())

        assert same.description == "Review"
        assert same.duration_minutes == 60
        assert same.updated_at == entry.updated_at

    @pytest.mark.asyncio
    async def test_update_checks_new_project(self, timer_service, clock):
        """Test update checks the new project."""
        start = clock.now - timedelta(hours=2)
        entry = await timer_service.add_manual_entry("u1", "p1", "", start, start + timedelta(hours=1))
        
        with pytest.raises(NotFoundError):
            await timer_service.update_entry("u1", entry.id, TimeEntryChanges(project_id="nope"))
        
        moved = await timer_service.update_entry("u1", entry.id, TimeEntryChanges(project_id="p2"))
        assert moved.project_id == "p2"
    
    @pytest.mark.asyncio
    async def test_delete(self, timer_service, clock):
        """Test deleting entries."""
        entry = await timer_service.start("u1", "p1")
        
        assert await timer_service.delete_entry("u2", entry.id) is False
        assert await timer_service.delete_entry("u1", entry.id) is True
        assert await timer_service.delete_entry("u1", entry.id) is False
        assert await timer_service.get_active_entry("u1") is None
    
    @pytest.mark.asyncio
    async def test_get_active_entry_does_not_modify(self, timer_service, time_entry_repository):
        """Test active entry lookup does not modify it."""
        entry = await timer_service.start("u1", "p1")
        
        found = await timer_service.get_active_entry("u1")
        assert found.id == entry.id
        assert found.is_active
