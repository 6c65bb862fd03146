"""Contract tests for SessionStore, run against every implementation."""

import asyncio
from dataclasses import replace
from datetime import timedelta

import pytest

from sessionstore.domain import ID_MAX, NotFoundError
from sessionstore.stores import InMemorySessionStore

pytestmark = pytest.mark.asyncio


class TestSaveAndLoad:
    async def test_save_assigns_id(self, session_store, session_factory):
        session = session_factory()
        assert session.id is None

        saved = await session_store.save(session)

        assert saved is session
        assert session.id is not None

    async def test_load_returns_saved_session(self, session_store, session_factory):
        session = session_factory()
        original = replace(session)

        await session_store.save(session)
        loaded = await session_store.load(session.id)

        assert loaded == replace(original, id=session.id)
        assert loaded.encrypted_credentials == b"\x00encrypted\xff"

    async def test_ids_are_unique(self, session_store, session_factory):
        ids = set()
        for _ in range(5):
            session = await session_store.save(session_factory())
            ids.add(session.id)

        assert len(ids) == 5

    async def test_save_overwrites_existing_id(self, session_store, session_factory):
        first = await session_store.save(session_factory())
        again = session_factory()
        again.id = first.id

        await session_store.save(again)

        assert again.id != first.id

    async def test_load_unknown_id_raises_not_found(self, session_store):
        with pytest.raises(NotFoundError):
            await session_store.load(424242)

    async def test_loaded_session_is_a_copy(self, session_store, session_factory):
        session = await session_store.save(session_factory())
        loaded = await session_store.load(session.id)

        loaded.expires_at += timedelta(days=30)

        assert (await session_store.load(session.id)).expires_at == session.expires_at


class TestTerminate:
    async def test_terminate_removes_session(self, session_store, session_factory):
        session = await session_store.save(session_factory())

        await session_store.terminate(session.id)

        with pytest.raises(NotFoundError):
            await session_store.load(session.id)

    async def test_terminate_is_idempotent(self, session_store, session_factory):
        session = await session_store.save(session_factory())

        await session_store.terminate(session.id)
        await session_store.terminate(session.id)

    async def test_terminate_unknown_id_is_noop(self, session_store, session_factory):
        keep = await session_store.save(session_factory())

        await session_store.terminate(999999)

        assert (await session_store.load(keep.id)).id == keep.id


class TestExtend:
    async def test_extend_moves_expiry_from_store_time(self, session_store, session_factory, clock):
        session = await session_store.save(session_factory(idle=timedelta(minutes=10)))
        clock.advance(timedelta(minutes=5))

        await session_store.extend(session.id, timedelta(minutes=30))

        loaded = await session_store.load(session.id)
        assert loaded.expires_at == clock() + timedelta(minutes=30)

    async def test_extend_never_touches_end_of_life(self, session_store, session_factory, clock):
        session = await session_store.save(session_factory())

        await session_store.extend(session.id, timedelta(days=7))

        loaded = await session_store.load(session.id)
        assert loaded.end_of_life == session.end_of_life

    async def test_extend_unknown_id_is_noop(self, session_store):
        await session_store.extend(777, timedelta(minutes=30))

        with pytest.raises(NotFoundError):
            await session_store.load(777)

    async def test_extend_only_affects_target(self, session_store, session_factory):
        target = await session_store.save(session_factory())
        other = await session_store.save(session_factory())

        await session_store.extend(target.id, timedelta(hours=3))

        assert (await session_store.load(other.id)).expires_at == other.expires_at

    async def test_successive_extends_last_write_wins(self, session_store, session_factory, clock):
        session = await session_store.save(session_factory())
        durations = [timedelta(minutes=m) for m in (10, 20, 30)]

        for duration in durations:
            await session_store.extend(session.id, duration)

        loaded = await session_store.load(session.id)
        assert loaded.expires_at == clock() + durations[-1]


class TestSweepExpired:
    async def test_sweep_empty_store_returns_zero(self, session_store):
        assert await session_store.sweep_expired() == 0

    async def test_sweep_keeps_live_sessions(self, session_store, session_factory):
        session = await session_store.save(session_factory())

        for _ in range(3):
            assert await session_store.sweep_expired() == 0

        assert (await session_store.load(session.id)).id == session.id

    async def test_sweep_removes_idle_expired(self, session_store, session_factory, clock):
        session = await session_store.save(session_factory(idle=timedelta(hours=1)))
        clock.advance(timedelta(hours=1))

        assert await session_store.sweep_expired() == 1
        with pytest.raises(NotFoundError):
            await session_store.load(session.id)

    async def test_sweep_removes_past_end_of_life(self, session_store, session_factory, clock):
        session = await session_store.save(
            session_factory(idle=timedelta(hours=1), lifetime=timedelta(hours=2))
        )
        clock.advance(timedelta(minutes=90))
        await session_store.extend(session.id, timedelta(hours=10))
        clock.advance(timedelta(minutes=30))

        assert await session_store.sweep_expired() == 1

    async def test_sweep_removes_only_reclaimable(self, session_store, session_factory, clock):
        short = await session_store.save(session_factory(idle=timedelta(minutes=5)))
        long = await session_store.save(session_factory(idle=timedelta(hours=5)))
        clock.advance(timedelta(minutes=10))

        assert await session_store.sweep_expired() == 1

        with pytest.raises(NotFoundError):
            await session_store.load(short.id)
        assert (await session_store.load(long.id)).id == long.id

    async def test_sweep_twice_never_double_counts(self, session_store, session_factory, clock):
        for _ in range(3):
            await session_store.save(session_factory(idle=timedelta(minutes=1)))
        clock.advance(timedelta(minutes=2))

        assert await session_store.sweep_expired() == 3
        assert await session_store.sweep_expired() == 0


class TestLifecycleScenarios:
    async def test_idle_session_is_swept_after_two_hours(
        self, session_store, session_factory, clock
    ):
        session = await session_store.save(
            session_factory(idle=timedelta(hours=1), lifetime=timedelta(hours=24))
        )
        assert (await session_store.load(session.id)).id == session.id

        clock.advance(timedelta(hours=2))

        assert await session_store.sweep_expired() == 1
        with pytest.raises(NotFoundError):
            await session_store.load(session.id)

    async def test_repeated_extension_cannot_outlive_end_of_life(
        self, session_store, session_factory, clock
    ):
        session = await session_store.save(
            session_factory(idle=timedelta(minutes=30), lifetime=timedelta(hours=4))
        )

        for _ in range(9):
            clock.advance(timedelta(minutes=20))
            await session_store.extend(session.id, timedelta(minutes=30))
            assert await session_store.sweep_expired() == 0

        # Three hours in: well past the original idle expiry, still live
        assert (await session_store.load(session.id)).id == session.id

        clock.advance(timedelta(hours=1))
        await session_store.extend(session.id, timedelta(minutes=30))

        assert await session_store.sweep_expired() == 1
        with pytest.raises(NotFoundError):
            await session_store.load(session.id)


class TestOutOfRangeIds:
    """Ids no store could have assigned behave like unknown ids."""

    @pytest.mark.parametrize("session_id", [2**31, 2**64, 0, -1])
    async def test_load_raises_not_found(self, session_store, session_id):
        with pytest.raises(NotFoundError) as exc_info:
            await session_store.load(session_id)

        assert exc_info.value.key == session_id

    async def test_terminate_and_extend_are_noops(self, session_store, session_factory):
        session = await session_store.save(session_factory())

        await session_store.terminate(2**64)
        await session_store.extend(2**64, timedelta(hours=1))

        assert await session_store.load(session.id) == session

    async def test_largest_valid_id_is_queried(self, session_store):
        with pytest.raises(NotFoundError):
            await session_store.load(ID_MAX)


async def test_concurrent_saves_get_distinct_ids(clock, session_factory):
    """Concurrent saves from many callers never share an id."""
    store = InMemorySessionStore(clock=clock)

    sessions = await asyncio.gather(*(store.save(session_factory()) for _ in range(20)))

    assert len({s.id for s in sessions}) == 20
