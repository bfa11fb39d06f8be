"""
Tests for the SearchOrchestrator state machine.

Searches are dispatched into a list instead of threads so tests decide
when (and in which order) each job completes. Time comes from FakeClock.
"""

import threading
import time

import pytest

from fex.search.provider import Package, Provider, SearchResult
from fex.services.orchestrator import (
    IDLE_MESSAGE,
    NO_RESULTS_MESSAGE,
    SEARCHING_MESSAGE,
    Action,
    Key,
    KeyEvent,
    SearchOrchestrator,
    SearchState,
)


class RecordingProvider(Provider):
    """Returns one package per query and records every query it saw."""

    name = "stub"

    def __init__(self, results=None):
        self.queries = []
        self.results = results or {}

    def is_available(self):
        return True

    def search(self, query):
        self.queries.append(query)
        if query in self.results:
            return self.results[query]
        return SearchResult(packages=[Package(name=query, source="test")])

    def install_command(self, package):
        return f"install {package.name}"


class FailingProvider(RecordingProvider):
    def search(self, query):
        raise RuntimeError("backend exploded")


def type_text(orch, text):
    for ch in text:
        orch.handle_key(KeyEvent(Key.CHAR, ch))


def packages(n):
    return SearchResult(packages=[Package(name=f"pkg{i}") for i in range(n)])


@pytest.fixture
def jobs():
    return []


@pytest.fixture
def provider():
    return RecordingProvider()


@pytest.fixture
def orch(provider, clock, jobs):
    return SearchOrchestrator(provider, debounce_ms=400, clock=clock, dispatch=jobs.append)


def settle(orch, clock, jobs):
    """Let the debounce elapse, run every pending job and adopt results."""
    clock.advance(500)
    orch.tick()
    while jobs:
        jobs.pop(0)()
    orch.tick()


class TestInitialState:

    def test_starts_idle(self, orch):
        assert orch.query == ""
        assert orch.packages == []
        assert orch.state is SearchState.IDLE
        assert orch.status_message == IDLE_MESSAGE
        assert orch.selected_package is None


class TestDebounce:

    def test_typing_enters_searching_without_dispatch(self, orch, jobs):
        type_text(orch, "rip")
        orch.tick()
        assert orch.state is SearchState.SEARCHING
        assert orch.status_message == SEARCHING_MESSAGE
        assert jobs == []

    def test_dispatch_after_quiet_period(self, orch, clock, jobs, provider):
        type_text(orch, "rip")
        clock.advance(399)
        orch.tick()
        assert jobs == []

        clock.advance(2)
        orch.tick()
        assert len(jobs) == 1
        jobs[0]()
        assert provider.queries == ["rip"]

    def test_burst_of_keys_dispatches_once(self, orch, clock, jobs, provider):
        for ch in "ripgrep":
            orch.handle_key(KeyEvent(Key.CHAR, ch))
            clock.advance(100)
            orch.tick()
        assert jobs == []

        clock.advance(500)
        orch.tick()
        orch.tick()
        assert len(jobs) == 1
        jobs[0]()
        assert provider.queries == ["ripgrep"]

    def test_each_key_restarts_window(self, orch, clock, jobs):
        type_text(orch, "a")
        clock.advance(300)
        orch.tick()
        type_text(orch, "b")
        clock.advance(300)
        orch.tick()
        assert jobs == []
        clock.advance(150)
        orch.tick()
        assert len(jobs) == 1

    def test_custom_debounce(self, provider, clock, jobs):
        orch = SearchOrchestrator(provider, debounce_ms=50, clock=clock, dispatch=jobs.append)
        type_text(orch, "x")
        clock.advance(60)
        orch.tick()
        assert len(jobs) == 1

    def test_navigation_does_not_restart_window(self, orch, clock, jobs):
        type_text(orch, "rip")
        clock.advance(300)
        orch.handle_key(KeyEvent(Key.DOWN))
        clock.advance(150)
        orch.tick()
        assert len(jobs) == 1


class TestResults:

    def test_adopts_current_results(self, orch, clock, jobs):
        type_text(orch, "ripgrep")
        settle(orch, clock, jobs)
        assert [p.name for p in orch.packages] == ["ripgrep"]
        assert orch.state is SearchState.DONE
        assert orch.status_message == "Found 1 result."

    def test_plural_status(self, provider, orch, clock, jobs):
        provider.results["rip"] = packages(3)
        type_text(orch, "rip")
        settle(orch, clock, jobs)
        assert orch.status_message == "Found 3 results."

    def test_no_results_message(self, provider, orch, clock, jobs):
        provider.results["zzz"] = SearchResult()
        type_text(orch, "zzz")
        settle(orch, clock, jobs)
        assert orch.packages == []
        assert orch.state is SearchState.DONE
        assert orch.status_message == NO_RESULTS_MESSAGE

    def test_error_message(self, provider, orch, clock, jobs):
        provider.results["a"] = SearchResult(error="Too many results! Try a more specific search.")
        type_text(orch, "a")
        settle(orch, clock, jobs)
        assert orch.packages == []
        assert orch.status_message == "Error: Too many results! Try a more specific search."

    def test_provider_exception_becomes_error(self, clock, jobs):
        orch = SearchOrchestrator(FailingProvider(), clock=clock, dispatch=jobs.append)
        type_text(orch, "boom")
        settle(orch, clock, jobs)
        assert orch.state is SearchState.DONE
        assert orch.status_message == "Error: backend exploded"

    def test_new_results_reset_selection(self, provider, orch, clock, jobs):
        provider.results["aa"] = packages(10)
        provider.results["aab"] = packages(4)
        type_text(orch, "aa")
        settle(orch, clock, jobs)
        orch.navigate(5, visible_rows=3)
        assert orch.selected == 5
        assert orch.scroll_offset > 0

        type_text(orch, "b")
        settle(orch, clock, jobs)
        assert orch.selected == 0
        assert orch.scroll_offset == 0

    def test_tick_without_results_never_blocks(self, orch):
        start = time.monotonic()
        for _ in range(100):
            orch.tick()
        assert time.monotonic() - start < 1


class TestStaleResults:

    def test_out_of_order_completion(self, provider, orch, clock, jobs):
        # "fi" dispatched, then "fir"; "fir" finishes first, "fi" after
        type_text(orch, "fi")
        clock.advance(500)
        orch.tick()
        type_text(orch, "r")
        clock.advance(500)
        orch.tick()
        assert len(jobs) == 2
        first, second = jobs

        second()
        orch.tick()
        assert [p.name for p in orch.packages] == ["fir"]

        first()
        orch.tick()
        assert [p.name for p in orch.packages] == ["fir"]
        assert orch.state is SearchState.DONE

    def test_older_generation_dropped_after_newer_dispatch(self, provider, orch, clock, jobs):
        # generation 3 dispatched after generation 2 was sent but not received
        orch.generation = 1
        type_text(orch, "fi")
        clock.advance(500)
        orch.tick()
        type_text(orch, "r")
        clock.advance(500)
        orch.tick()
        assert orch.generation == 3

        jobs.pop(0)()
        orch.tick()
        assert orch.packages == []
        assert orch.state is SearchState.SEARCHING

        jobs.pop(0)()
        orch.tick()
        assert [p.name for p in orch.packages] == ["fir"]

    def test_result_during_debounce_is_adopted_then_replaced(self, orch, clock, jobs):
        type_text(orch, "fi")
        clock.advance(500)
        orch.tick()
        type_text(orch, "r")
        jobs.pop(0)()
        orch.tick()
        assert [p.name for p in orch.packages] == ["fi"]

        clock.advance(500)
        orch.tick()
        jobs.pop(0)()
        orch.tick()
        assert [p.name for p in orch.packages] == ["fir"]

    def test_escape_invalidates_in_flight_search(self, orch, clock, jobs):
        type_text(orch, "rip")
        clock.advance(500)
        orch.tick()
        orch.handle_key(KeyEvent(Key.ESCAPE))
        jobs.pop()()
        orch.tick()
        assert orch.query == ""
        assert orch.packages == []
        assert orch.state is SearchState.IDLE
        assert orch.status_message == IDLE_MESSAGE

    def test_backspace_to_empty_invalidates(self, orch, clock, jobs):
        type_text(orch, "r")
        clock.advance(500)
        orch.tick()
        orch.handle_key(KeyEvent(Key.BACKSPACE))
        assert orch.state is SearchState.IDLE

        jobs.pop()()
        clock.advance(500)
        orch.tick()
        assert orch.packages == []
        assert orch.state is SearchState.IDLE
        assert jobs == []

    def test_generation_increases_per_dispatch(self, orch, clock, jobs):
        before = orch.generation
        type_text(orch, "a")
        settle(orch, clock, jobs)
        type_text(orch, "b")
        settle(orch, clock, jobs)
        assert orch.generation == before + 2


class TestEditing:

    def test_backspace_on_empty_query_is_noop(self, orch):
        orch.handle_key(KeyEvent(Key.BACKSPACE))
        assert orch.query == ""
        assert orch.state is SearchState.IDLE

    def test_backspace_removes_last_character(self, orch):
        type_text(orch, "rip")
        orch.handle_key(KeyEvent(Key.BACKSPACE))
        assert orch.query == "ri"
        assert orch.state is SearchState.SEARCHING

    def test_escape_clears_results(self, orch, clock, jobs):
        type_text(orch, "rip")
        settle(orch, clock, jobs)
        orch.handle_key(KeyEvent(Key.ESCAPE))
        assert orch.query == ""
        assert orch.packages == []
        assert orch.selected == 0

    @pytest.fixture
    def scrolled(self, provider, orch, clock, jobs):
        provider.results["pkg"] = packages(10)
        type_text(orch, "pkg")
        settle(orch, clock, jobs)
        for _ in range(7):
            orch.handle_key(KeyEvent(Key.DOWN), visible_rows=3)
        assert orch.selected == 7
        assert orch.scroll_offset == 5
        return orch

    def test_escape_resets_selection_and_scroll(self, scrolled):
        scrolled.handle_key(KeyEvent(Key.ESCAPE), visible_rows=3)
        assert scrolled.state is SearchState.IDLE
        assert scrolled.packages == []
        assert scrolled.selected == 0
        assert scrolled.scroll_offset == 0

    def test_backspace_to_empty_resets_selection_and_scroll(self, scrolled):
        for _ in range(3):
            scrolled.handle_key(KeyEvent(Key.BACKSPACE), visible_rows=3)
        assert scrolled.query == ""
        assert scrolled.state is SearchState.IDLE
        assert scrolled.packages == []
        assert scrolled.selected == 0
        assert scrolled.scroll_offset == 0

    def test_unicode_characters_appended(self, orch):
        type_text(orch, "café")
        assert orch.query == "café"


class TestNavigation:

    @pytest.fixture
    def loaded(self, provider, orch, clock, jobs):
        provider.results["pkg"] = packages(10)
        type_text(orch, "pkg")
        settle(orch, clock, jobs)
        return orch

    def test_down_and_up(self, loaded):
        loaded.handle_key(KeyEvent(Key.DOWN), visible_rows=3)
        loaded.handle_key(KeyEvent(Key.DOWN), visible_rows=3)
        assert loaded.selected == 2
        loaded.handle_key(KeyEvent(Key.UP), visible_rows=3)
        assert loaded.selected == 1

    def test_clamped_at_both_ends(self, loaded):
        loaded.handle_key(KeyEvent(Key.UP), visible_rows=3)
        assert loaded.selected == 0
        for _ in range(20):
            loaded.handle_key(KeyEvent(Key.DOWN), visible_rows=3)
        assert loaded.selected == 9

    def test_minimal_scrolling(self, loaded):
        for _ in range(3):
            loaded.handle_key(KeyEvent(Key.DOWN), visible_rows=3)
        assert loaded.selected == 3
        assert loaded.scroll_offset == 1

        loaded.handle_key(KeyEvent(Key.UP), visible_rows=3)
        loaded.handle_key(KeyEvent(Key.UP), visible_rows=3)
        assert loaded.selected == 1
        assert loaded.scroll_offset == 1

        loaded.handle_key(KeyEvent(Key.UP), visible_rows=3)
        assert loaded.scroll_offset == 0

    def test_page_down_and_up(self, loaded):
        loaded.handle_key(KeyEvent(Key.PAGE_DOWN), visible_rows=4)
        assert loaded.selected == 4
        loaded.handle_key(KeyEvent(Key.PAGE_DOWN), visible_rows=4)
        loaded.handle_key(KeyEvent(Key.PAGE_DOWN), visible_rows=4)
        assert loaded.selected == 9
        loaded.handle_key(KeyEvent(Key.PAGE_UP), visible_rows=4)
        assert loaded.selected == 5

    def test_home_and_end(self, loaded):
        loaded.handle_key(KeyEvent(Key.END), visible_rows=4)
        assert loaded.selected == 9
        assert loaded.scroll_offset == 6
        loaded.handle_key(KeyEvent(Key.HOME), visible_rows=4)
        assert loaded.selected == 0
        assert loaded.scroll_offset == 0

    def test_selection_always_visible(self, loaded):
        moves = [Key.DOWN] * 7 + [Key.PAGE_UP, Key.END, Key.UP, Key.PAGE_UP, Key.HOME]
        for key in moves:
            loaded.handle_key(KeyEvent(key), visible_rows=3)
            assert loaded.scroll_offset <= loaded.selected < loaded.scroll_offset + 3

    def test_navigation_on_empty_list(self, orch):
        for key in (Key.DOWN, Key.UP, Key.PAGE_DOWN, Key.END, Key.HOME):
            orch.handle_key(KeyEvent(key), visible_rows=3)
        assert orch.selected == 0
        assert orch.scroll_offset == 0


class TestActions:

    def test_quit(self, orch):
        assert orch.handle_key(KeyEvent(Key.QUIT)) is Action.QUIT

    def test_enter_without_selection(self, orch):
        assert orch.handle_key(KeyEvent(Key.ENTER)) is None

    def test_enter_with_selection(self, orch, clock, jobs):
        type_text(orch, "ripgrep")
        settle(orch, clock, jobs)
        assert orch.handle_key(KeyEvent(Key.ENTER)) is Action.INSTALL
        assert orch.selected_package.name == "ripgrep"

    def test_other_keys_return_none(self, orch):
        assert orch.handle_key(KeyEvent(Key.CHAR, "a")) is None
        assert orch.handle_key(KeyEvent(Key.DOWN)) is None

    def test_record_install_success(self, orch, clock, jobs):
        type_text(orch, "ripgrep")
        settle(orch, clock, jobs)
        package = orch.selected_package
        orch.record_install(package, True)
        assert package.installed is True
        assert orch.status_message == "Successfully installed ripgrep"

    def test_record_install_failure(self, orch, clock, jobs):
        type_text(orch, "ripgrep")
        settle(orch, clock, jobs)
        package = orch.selected_package
        orch.record_install(package, False)
        assert package.installed is False
        assert orch.status_message == "Installation of ripgrep may have failed"


class TestWorkerThreads:

    def test_default_dispatch_uses_background_thread(self, clock):
        started = threading.Event()
        release = threading.Event()

        class SlowProvider(RecordingProvider):
            def search(self, query):
                started.set()
                release.wait(5)
                return super().search(query)

        orch = SearchOrchestrator(SlowProvider(), clock=clock)
        type_text(orch, "rip")
        clock.advance(500)
        orch.tick()

        assert started.wait(5)
        orch.tick()
        assert orch.state is SearchState.SEARCHING

        release.set()
        deadline = time.monotonic() + 5
        while orch.state is not SearchState.DONE and time.monotonic() < deadline:
            orch.tick()
            time.sleep(0.01)
        assert [p.name for p in orch.packages] == ["rip"]
