"""Tests for command fan-out and lazy cache invalidation in core/dispatcher.py"""

import threading
from unittest.mock import MagicMock

import pytest

from core.dispatcher import Dispatcher
from core.errors import ProtocolError, UnreachableError
from core.resolver import ResolvedTargets, TargetSource
from tests.conftest import InMemoryCacheStore


def targets(lights, source=TargetSource.CACHE):
    return ResolvedTargets(tuple(lights), source)


class TestDispatch:
    """Per-light execution and aggregation."""

    def test_runs_command_for_every_light(self, two_lights):
        client = MagicMock()
        dispatcher = Dispatcher(client, InMemoryCacheStore(two_lights))

        report = dispatcher.dispatch(targets(two_lights), lambda c, light: c.set_power(light, True))

        assert report.ok
        assert len(report.succeeded) == 2
        assert client.set_power.call_count == 2

    def test_one_failure_does_not_abort_others(self, light_a, light_b):
        def command(client, light):
            if light == light_a:
                raise UnreachableError(light, "timed out")
            return 'done'

        report = Dispatcher(MagicMock(), InMemoryCacheStore()).dispatch(
            targets([light_a, light_b], TargetSource.EXPLICIT), command)

        assert report.ok
        assert [r.light for r in report.failed] == [light_a]
        assert report.succeeded[0].value == 'done'

    def test_results_follow_target_order(self, light_a, light_b):
        """The first light finishing last must still be reported first."""
        b_done = threading.Event()

        def command(client, light):
            if light == light_a:
                b_done.wait(timeout=5)
                return 'a'
            b_done.set()
            return 'b'

        report = Dispatcher(MagicMock(), InMemoryCacheStore()).dispatch(
            targets([light_a, light_b]), command)

        assert [r.value for r in report.results] == ['a', 'b']

    def test_all_failed(self, two_lights):
        def command(client, light):
            raise UnreachableError(light, "no route to host")

        report = Dispatcher(MagicMock(), InMemoryCacheStore()).dispatch(
            targets(two_lights, TargetSource.ENVIRONMENT), command)

        assert not report.ok
        assert report.all_unreachable

    def test_mixed_failures_are_not_all_unreachable(self, light_a, light_b):
        def command(client, light):
            if light == light_a:
                raise UnreachableError(light, "timed out")
            raise ProtocolError(light, "invalid JSON")

        report = Dispatcher(MagicMock(), InMemoryCacheStore()).dispatch(
            targets([light_a, light_b], TargetSource.EXPLICIT), command)

        assert not report.ok
        assert not report.all_unreachable

    def test_unexpected_errors_propagate(self, light_a):
        def command(client, light):
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            Dispatcher(MagicMock(), InMemoryCacheStore()).dispatch(targets([light_a]), command)

    def test_no_targets(self):
        report = Dispatcher(MagicMock(), InMemoryCacheStore()).dispatch(targets([]), lambda c, l: None)

        assert report.results == []
        assert not report.ok


class TestCacheInvalidation:
    """Unreachable cached lights clear the cache exactly once."""

    def test_clears_once_when_several_cached_lights_unreachable(self, two_lights):
        cache = InMemoryCacheStore(two_lights)

        def command(client, light):
            raise UnreachableError(light, "timed out")

        report = Dispatcher(MagicMock(), cache).dispatch(targets(two_lights), command)

        assert cache.clear_calls == 1
        assert cache.result is None
        assert report.cache_invalidated

    def test_clears_when_only_some_cached_lights_unreachable(self, two_lights, light_a):
        cache = InMemoryCacheStore(two_lights)

        def command(client, light):
            if light == light_a:
                raise UnreachableError(light, "timed out")

        report = Dispatcher(MagicMock(), cache).dispatch(targets(two_lights), command)

        assert report.ok
        assert cache.clear_calls == 1

    @pytest.mark.parametrize('source', [
        TargetSource.EXPLICIT,
        TargetSource.ENVIRONMENT,
        TargetSource.DISCOVERY,
    ])
    def test_non_cached_sources_never_clear(self, two_lights, source):
        cache = InMemoryCacheStore(two_lights)

        def command(client, light):
            raise UnreachableError(light, "timed out")

        report = Dispatcher(MagicMock(), cache).dispatch(targets(two_lights, source), command)

        assert cache.clear_calls == 0
        assert not report.cache_invalidated

    def test_protocol_errors_do_not_clear(self, two_lights):
        cache = InMemoryCacheStore(two_lights)

        def command(client, light):
            raise ProtocolError(light, "bad response")

        Dispatcher(MagicMock(), cache).dispatch(targets(two_lights), command)

        assert cache.clear_calls == 0

    def test_success_does_not_clear(self, two_lights):
        cache = InMemoryCacheStore(two_lights)

        Dispatcher(MagicMock(), cache).dispatch(targets(two_lights), lambda c, l: None)

        assert cache.clear_calls == 0
