"""Tests for the session engine guards."""

from modules.session.guards import EventDeduplicator, InFlightGuard, OverlapGuard


class TestInFlightGuard:
    def test_acquire_and_release(self, clock):
        """The guard is held between acquire and release."""
        guard = InFlightGuard(timeout=3.0, clock=clock)
        assert guard.try_acquire() is True
        assert guard.active is True
        guard.release()
        assert guard.active is False

    def test_second_acquire_fails(self, clock):
        """Only one holder at a time."""
        guard = InFlightGuard(timeout=3.0, clock=clock)
        assert guard.try_acquire() is True
        assert guard.try_acquire() is False

    def test_expires_after_timeout(self, clock):
        """A holder that never releases stops blocking after the timeout."""
        guard = InFlightGuard(timeout=3.0, clock=clock)
        guard.try_acquire()
        clock.advance(2.9)
        assert guard.active is True
        clock.advance(0.2)
        assert guard.active is False
        assert guard.try_acquire() is True


class TestOverlapGuard:
    def test_inactive_until_acquired(self):
        assert OverlapGuard().active is False

    def test_stays_active_until_last_release(self):
        """Overlapping holders keep the guard active until all have released."""
        guard = OverlapGuard()
        guard.acquire()
        guard.acquire()
        guard.release()
        assert guard.active is True
        guard.release()
        assert guard.active is False

    def test_extra_release_is_harmless(self):
        guard = OverlapGuard()
        guard.release()
        guard.acquire()
        assert guard.active is True


class TestEventDeduplicator:
    def test_first_occurrence_passes(self, clock):
        """A new key is not a duplicate."""
        dedupe = EventDeduplicator(window=2.0, clock=clock)
        assert dedupe.is_duplicate(("SIGNED_IN", "a@b.c")) is False

    def test_repeat_within_window_dropped(self, clock):
        """The same key within the window is a duplicate."""
        dedupe = EventDeduplicator(window=2.0, clock=clock)
        dedupe.is_duplicate(("SIGNED_IN", "a@b.c"))
        clock.advance(1.5)
        assert dedupe.is_duplicate(("SIGNED_IN", "a@b.c")) is True

    def test_repeat_after_window_passes(self, clock):
        """The same key after the window is accepted again."""
        dedupe = EventDeduplicator(window=2.0, clock=clock)
        dedupe.is_duplicate(("SIGNED_IN", "a@b.c"))
        clock.advance(2.0)
        assert dedupe.is_duplicate(("SIGNED_IN", "a@b.c")) is False

    def test_different_keys_independent(self, clock):
        """Different events or emails are tracked separately."""
        dedupe = EventDeduplicator(window=2.0, clock=clock)
        dedupe.is_duplicate(("SIGNED_IN", "a@b.c"))
        assert dedupe.is_duplicate(("SIGNED_IN", "x@y.z")) is False
        assert dedupe.is_duplicate(("TOKEN_REFRESHED", "a@b.c")) is False

    def test_clear(self, clock):
        """Clearing forgets every recorded key."""
        dedupe = EventDeduplicator(window=2.0, clock=clock)
        dedupe.is_duplicate("key")
        dedupe.clear()
        assert dedupe.is_duplicate("key") is False
