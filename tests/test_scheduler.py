"""Pytest tests for the state store and poll scheduler."""

import asyncio
import threading
import pytest

from src.bandix_client.models import BandwidthSnapshot, STATUS_UNAVAILABLE, TotalsSnapshot
from src.telemetry.scheduler import PollScheduler, SchedulerState
from src.telemetry.store import DashboardState, StateStore


class TestStateStore:
    """Test cases for StateStore commits."""

    @pytest.mark.unit
    def test_initial_state(self):
        state = StateStore().state
        assert isinstance(state, DashboardState)
        assert state.devices == ()
        assert state.poll_count == 0
        assert state.status == STATUS_UNAVAILABLE

    @pytest.mark.unit
    def test_commit_server_history(self, sample_devices, sample_history, running_status):
        store = StateStore(capacity=60)
        reported = TotalsSnapshot(1, 2, 3)

        state = store.commit(sample_devices, sample_history, running_status,
                             reported_totals=reported, timestamp=100.0)

        assert state is store.state
        assert state.devices == tuple(sample_devices)
        assert [p.timestamp for p in state.history] == [1000, 2000, 3000]
        assert state.totals.combined == 2600
        assert state.rates.upload == 350
        assert state.reported_totals == reported
        assert state.poll_count == 1
        assert state.last_poll == 100.0

    @pytest.mark.unit
    def test_commit_derived_history(self, sample_devices, running_status):
        store = StateStore(capacity=2, history_source='derived')

        for second in (1, 2, 3):
            state = store.commit(sample_devices, [], running_status, timestamp=float(second))

        assert [p.timestamp for p in state.history] == [2000, 3000]
        assert state.history[-1] == BandwidthSnapshot(timestamp=3000, download=300, upload=350)

    @pytest.mark.unit
    def test_derived_history_skips_same_millisecond(self, sample_devices, running_status):
        store = StateStore(history_source='derived')

        store.commit(sample_devices, [], running_status, timestamp=5.0)
        state = store.commit(sample_devices, [], running_status, timestamp=5.0)

        assert [p.timestamp for p in state.history] == [5000]
        assert state.poll_count == 2

    @pytest.mark.unit
    def test_previous_state_untouched(self, sample_devices, sample_history, running_status):
        store = StateStore()
        first = store.commit([], [], STATUS_UNAVAILABLE)
        store.commit(sample_devices, sample_history, running_status)

        assert first.devices == ()
        assert first.history == ()
        assert first.poll_count == 1

    @pytest.mark.unit
    def test_consecutive_failures(self, running_status):
        store = StateStore()
        store.commit([], [], running_status, failures=1)
        store.commit([], [], running_status, failures=4)
        assert store.state.consecutive_failures == 2

        store.commit([], [], running_status, failures=0)
        assert store.state.consecutive_failures == 0


class TestPollScheduler:
    """Test cases for PollScheduler cycles and reentrancy."""

    @pytest.mark.unit
    def test_trigger_runs_one_cycle(self, mock_client):
        store = StateStore()
        scheduler = PollScheduler(mock_client, store, interval=1)
        seen = []
        scheduler.add_listener(seen.append)

        assert asyncio.run(scheduler.trigger()) is True

        assert scheduler.state is SchedulerState.IDLE
        assert store.state.poll_count == 1
        assert store.state.status.running is True
        assert store.state.reported_totals.combined == 2600
        assert seen == [store.state]
        for read in (mock_client.fetch_clients, mock_client.fetch_history,
                     mock_client.fetch_status, mock_client.fetch_totals):
            read.assert_called_once()

    @pytest.mark.unit
    def test_overlapping_tick_dropped(self, mock_client, sample_devices):
        """Test a tick during a slow cycle is dropped, not queued."""
        gate = threading.Event()

        def slow_clients():
            gate.wait(5)
            return sample_devices

        mock_client.fetch_clients.side_effect = slow_clients
        store = StateStore()
        scheduler = PollScheduler(mock_client, store, interval=1)

        async def scenario():
            first = asyncio.create_task(scheduler.trigger())
            while not scheduler.is_refreshing:
                await asyncio.sleep(0)

            dropped = await scheduler.trigger()
            gate.set()
            ran = await first
            return dropped, ran

        dropped, ran = asyncio.run(scenario())

        assert dropped is False
        assert ran is True
        assert scheduler.dropped_ticks == 1
        assert store.state.poll_count == 1
        assert mock_client.fetch_clients.call_count == 1
        assert scheduler.state is SchedulerState.IDLE

    @pytest.mark.unit
    def test_refresh_request_during_cycle_runs_follow_up(self, mock_client, sample_devices):
        gate = threading.Event()

        def slow_clients():
            gate.wait(5)
            return sample_devices

        mock_client.fetch_clients.side_effect = slow_clients
        store = StateStore()
        scheduler = PollScheduler(mock_client, store, interval=1)

        async def scenario():
            first = asyncio.create_task(scheduler.trigger())
            while not scheduler.is_refreshing:
                await asyncio.sleep(0)

            queued = await scheduler.request_refresh()
            gate.set()
            await first
            return queued

        assert asyncio.run(scenario()) is False
        assert store.state.poll_count == 2
        assert scheduler.dropped_ticks == 0

    @pytest.mark.unit
    def test_refresh_request_when_idle_runs_now(self, mock_client):
        store = StateStore()
        scheduler = PollScheduler(mock_client, store, interval=1)
        assert asyncio.run(scheduler.request_refresh()) is True
        assert store.state.poll_count == 1

    @pytest.mark.unit
    def test_failed_reads_counted(self, mock_client):
        def failing_status():
            mock_client.read_errors['status'] = 'timeout'
            return STATUS_UNAVAILABLE

        mock_client.fetch_status.side_effect = failing_status
        store = StateStore()
        scheduler = PollScheduler(mock_client, store, interval=1)

        asyncio.run(scheduler.trigger())
        asyncio.run(scheduler.trigger())

        assert store.state.consecutive_failures == 2
        assert store.state.status == STATUS_UNAVAILABLE
        # The other reads still land
        assert len(store.state.devices) == 2

    @pytest.mark.unit
    def test_listener_error_does_not_stop_cycle(self, mock_client):
        store = StateStore()
        scheduler = PollScheduler(mock_client, store, interval=1)
        seen = []

        def broken(state):
            raise RuntimeError("render failed")

        scheduler.add_listener(broken)
        scheduler.add_listener(seen.append)

        assert asyncio.run(scheduler.trigger()) is True
        assert len(seen) == 1
        assert scheduler.state is SchedulerState.IDLE

    @pytest.mark.unit
    def test_cycle_error_resets_state(self, mock_client):
        mock_client.fetch_history.side_effect = RuntimeError("unexpected")
        scheduler = PollScheduler(mock_client, StateStore(), interval=1)

        with pytest.raises(RuntimeError):
            asyncio.run(scheduler.trigger())
        assert scheduler.state is SchedulerState.IDLE

    @pytest.mark.slow
    def test_start_and_stop(self, mock_client):
        store = StateStore()
        scheduler = PollScheduler(mock_client, store, interval=0.01)

        async def scenario():
            scheduler.start()
            assert scheduler.is_running
            await asyncio.sleep(0.1)
            await scheduler.stop()

        asyncio.run(scenario())

        assert scheduler.is_running is False
        assert store.state.poll_count >= 2
