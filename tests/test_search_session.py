"""Tests for the paginated, query-scoped search controller."""

from __future__ import annotations

import asyncio

import pytest

from job_match_ai.errors import ErrorKind, FetchError
from job_match_ai.schemas.session_state import SearchPhase
from job_match_ai.session.search_session import SearchSessionController

from conftest import FakeJobIndex, make_postings


def _ids(state):
    return [job.id for job in state.accumulated_jobs]


def test_second_query_discards_first_query_results() -> None:
    async def scenario():
        index = FakeJobIndex({("first", 1): make_postings("a", 10), ("second", 1): make_postings("b", 3)})
        gate = index.hold("first", 1)
        controller = SearchSessionController(index)

        first = asyncio.create_task(controller.set_query("first"))
        await asyncio.sleep(0)
        await controller.set_query("second")
        gate.set()
        await first
        return controller.state

    state = asyncio.run(scenario())
    assert state.query == "second"
    assert _ids(state) == ["b0", "b1", "b2"]
    assert state.has_more is False
    assert state.loading is False


def test_stale_response_does_not_end_live_loading() -> None:
    async def scenario():
        index = FakeJobIndex({("first", 1): make_postings("a", 10), ("second", 1): make_postings("b", 10)})
        gate_first = index.hold("first", 1)
        gate_second = index.hold("second", 1)
        controller = SearchSessionController(index)

        first = asyncio.create_task(controller.set_query("first"))
        await asyncio.sleep(0)
        second = asyncio.create_task(controller.set_query("second"))
        await asyncio.sleep(0)

        gate_first.set()
        await first
        mid = controller.state

        gate_second.set()
        await second
        return mid, controller.state

    mid, final = asyncio.run(scenario())
    assert mid.loading is True
    assert mid.accumulated_jobs == ()
    assert final.loading is False
    assert _ids(final) == [f"b{i}" for i in range(10)]


def test_set_query_clears_results_before_fetch_resolves() -> None:
    async def scenario():
        index = FakeJobIndex({("one", 1): make_postings("a", 10), ("two", 1): make_postings("b", 10)})
        controller = SearchSessionController(index)
        await controller.set_query("one")
        gate = index.hold("two", 1)
        task = asyncio.create_task(controller.set_query("two"))
        await asyncio.sleep(0)
        during = controller.state
        gate.set()
        await task
        return during

    during = asyncio.run(scenario())
    assert during.accumulated_jobs == ()
    assert during.current_page == 1
    assert during.has_more is True
    assert during.phase == SearchPhase.LOADING


def test_golang_backend_pagination_scenario() -> None:
    async def scenario():
        index = FakeJobIndex(
            {
                ("golang backend", 1): make_postings("g", 10),
                ("golang backend", 2): make_postings("g", 4, start=10),
            }
        )
        controller = SearchSessionController(index)
        await controller.set_query("golang backend")
        after_first = controller.state
        await controller.load_more()
        return after_first, controller.state, index.calls

    after_first, final, calls = asyncio.run(scenario())
    assert after_first.has_more is True
    assert len(final.accumulated_jobs) == 14
    assert final.has_more is False
    assert final.current_page == 2
    assert final.phase == SearchPhase.TERMINAL
    assert calls == [("golang backend", 1), ("golang backend", 2)]


@pytest.mark.parametrize("page_length,expected", [(0, False), (1, False), (9, False), (10, True)])
def test_has_more_tracks_page_length(page_length: int, expected: bool) -> None:
    async def scenario():
        index = FakeJobIndex({("q", 1): make_postings("x", page_length)})
        controller = SearchSessionController(index)
        await controller.set_query("q")
        return controller.state

    assert asyncio.run(scenario()).has_more is expected


def test_load_more_is_noop_while_loading() -> None:
    async def scenario():
        index = FakeJobIndex({("q", 1): make_postings("x", 10)})
        gate = index.hold("q", 1)
        controller = SearchSessionController(index)
        task = asyncio.create_task(controller.set_query("q"))
        await asyncio.sleep(0)
        await controller.load_more()
        gate.set()
        await task
        return index.calls

    assert asyncio.run(scenario()) == [("q", 1)]


def test_load_more_is_noop_after_last_page() -> None:
    async def scenario():
        index = FakeJobIndex({("q", 1): make_postings("x", 3)})
        controller = SearchSessionController(index)
        await controller.set_query("q")
        await controller.load_more()
        await controller.on_near_end_of_list()
        return index.calls

    assert asyncio.run(scenario()) == [("q", 1)]


def test_concurrent_load_more_issues_one_fetch() -> None:
    async def scenario():
        index = FakeJobIndex({("q", 1): make_postings("x", 10), ("q", 2): make_postings("x", 10, start=10)})
        controller = SearchSessionController(index)
        await controller.set_query("q")
        gate = index.hold("q", 2)
        tasks = [asyncio.create_task(controller.load_more()) for _ in range(3)]
        await asyncio.sleep(0)
        gate.set()
        await asyncio.gather(*tasks)
        return index.calls, controller.state

    calls, state = asyncio.run(scenario())
    assert calls == [("q", 1), ("q", 2)]
    assert len(state.accumulated_jobs) == 20


def test_fetch_error_keeps_previous_jobs() -> None:
    async def scenario():
        index = FakeJobIndex({("q", 1): make_postings("x", 10), ("q", 2): FetchError("upstream timeout")})
        controller = SearchSessionController(index)
        await controller.set_query("q")
        await controller.load_more()
        errored = controller.state

        index.pages[("q", 2)] = make_postings("x", 5, start=10)
        await controller.load_more()
        return errored, controller.state

    errored, recovered = asyncio.run(scenario())
    assert errored.error is not None
    assert errored.error.kind == ErrorKind.FETCH
    assert errored.loading is False
    assert errored.phase == SearchPhase.ERRORED
    assert len(errored.accumulated_jobs) == 10
    assert errored.current_page == 1

    assert recovered.error is None
    assert len(recovered.accumulated_jobs) == 15
    assert recovered.has_more is False


def test_unexpected_client_error_becomes_fetch_error() -> None:
    async def scenario():
        index = FakeJobIndex({("q", 1): RuntimeError("boom")})
        controller = SearchSessionController(index)
        await controller.set_query("q")
        return controller.state

    state = asyncio.run(scenario())
    assert state.error is not None
    assert state.error.kind == ErrorKind.FETCH
    assert state.loading is False


def test_failure_of_stale_fetch_is_ignored() -> None:
    async def scenario():
        index = FakeJobIndex({("old", 1): FetchError("late failure"), ("new", 1): make_postings("n", 2)})
        gate = index.hold("old", 1)
        controller = SearchSessionController(index)
        task = asyncio.create_task(controller.set_query("old"))
        await asyncio.sleep(0)
        await controller.set_query("new")
        gate.set()
        await task
        return controller.state

    state = asyncio.run(scenario())
    assert state.error is None
    assert _ids(state) == ["n0", "n1"]


def test_duplicate_ids_across_pages_last_write_wins() -> None:
    async def scenario():
        page_two = make_postings("x", 9, start=10) + [
            make_postings("x", 1, start=9)[0].model_copy(update={"title": "updated"})
        ]
        index = FakeJobIndex({("q", 1): make_postings("x", 10), ("q", 2): page_two})
        controller = SearchSessionController(index)
        await controller.set_query("q")
        await controller.load_more()
        return controller.state

    state = asyncio.run(scenario())
    ids = _ids(state)
    assert len(ids) == len(set(ids)) == 19
    assert ids.index("x9") == 9
    assert state.accumulated_jobs[9].title == "updated"


def test_blank_query_returns_to_idle_without_fetch() -> None:
    async def scenario():
        index = FakeJobIndex({("q", 1): make_postings("x", 10)})
        controller = SearchSessionController(index)
        await controller.set_query("q")
        await controller.set_query("   ")
        await controller.load_more()
        return index.calls, controller.state

    calls, state = asyncio.run(scenario())
    assert calls == [("q", 1)]
    assert state.accumulated_jobs == ()
    assert state.has_more is False
    assert state.phase == SearchPhase.IDLE


def test_load_more_retries_first_page_after_it_failed() -> None:
    async def scenario():
        index = FakeJobIndex({("q", 1): FetchError("upstream timeout")})
        controller = SearchSessionController(index)
        await controller.set_query("q")
        errored = controller.state

        index.pages[("q", 1)] = make_postings("x", 10)
        index.pages[("q", 2)] = make_postings("x", 10, start=10)
        await controller.load_more()
        return errored, controller.state, index.calls

    errored, recovered, calls = asyncio.run(scenario())
    assert errored.phase == SearchPhase.ERRORED
    assert errored.has_more is True
    assert calls == [("q", 1), ("q", 1)]
    assert _ids(recovered) == [f"x{i}" for i in range(10)]
    assert recovered.current_page == 1
    assert recovered.error is None


def test_repeating_query_while_first_page_loads_does_not_refetch() -> None:
    async def scenario():
        index = FakeJobIndex({("q", 1): make_postings("x", 10)})
        gate = index.hold("q", 1)
        controller = SearchSessionController(index)
        first = asyncio.create_task(controller.set_query("q"))
        await asyncio.sleep(0)
        await controller.set_query("  q ")
        gate.set()
        await first
        return index.calls, controller.state

    calls, state = asyncio.run(scenario())
    assert calls == [("q", 1)]
    assert len(state.accumulated_jobs) == 10
    assert state.loading is False
