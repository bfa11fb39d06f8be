"""
Search Orchestrator - Turns keystrokes into debounced background searches.

State machine:
  IDLE       No query, no results
  SEARCHING  A search is pending (debounce window) or in flight
  DONE       The latest dispatched search's results are displayed

Each dispatched search is stamped with a generation number. Results come
back through a queue as (generation, SearchResult) pairs and are adopted
only if their generation is still current; anything older is dropped on
arrival. Backend processes are never killed, a superseded search just
runs to completion and is ignored.

All orchestrator state belongs to the control loop. Search workers only
read the provider and put one item on the result queue.
"""

import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from ..search.provider import Package, Provider, SearchResult

DEBOUNCE_MS = 400

IDLE_MESSAGE = "Start typing to search."
SEARCHING_MESSAGE = "Searching..."
NO_RESULTS_MESSAGE = "No results found."
ERROR_PREFIX = "Error: "


class SearchState(Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    DONE = "done"


class Action(Enum):
    """Reason the interactive loop hands control back to its caller."""
    QUIT = "quit"
    INSTALL = "install"


class Key(Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESCAPE = "escape"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    QUIT = "quit"  # Ctrl-C / Ctrl-Q / Ctrl-X


@dataclass(frozen=True)
class KeyEvent:
    """A discrete key press delivered by the input layer."""
    key: Key
    char: str = ""


def _start_thread(job: Callable[[], None]) -> None:
    threading.Thread(target=job, name="fex-search", daemon=True).start()


class SearchOrchestrator:
    """
    Owns the query, the displayed results and the selection.

    Args:
        provider: Backend every search is sent to
        debounce_ms: Input quiet time before a search is dispatched
        clock: Monotonic time source in seconds
        dispatch: Runs a search job off the control thread (default:
            a new daemon thread per search)
    """

    def __init__(
        self,
        provider: Provider,
        debounce_ms: int = DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
        dispatch: Optional[Callable[[Callable[[], None]], None]] = None,
    ):
        self.provider = provider
        self.debounce = debounce_ms / 1000
        self._clock = clock
        self._dispatch = dispatch or _start_thread
        self._results: "queue.Queue[tuple[int, SearchResult]]" = queue.Queue()

        self.query = ""
        self.packages: list[Package] = []
        self.selected = 0
        self.scroll_offset = 0
        self.state = SearchState.IDLE
        self.status_message = IDLE_MESSAGE
        self.generation = 0

        self._query_changed = False
        self._last_input = clock()

    @property
    def selected_package(self) -> Optional[Package]:
        if 0 <= self.selected < len(self.packages):
            return self.packages[self.selected]
        return None

    def handle_key(self, event: KeyEvent, visible_rows: int = 1) -> Optional[Action]:
        """
        Apply one key press.

        Args:
            event: The key press
            visible_rows: Result rows currently on screen (page size)

        Returns:
            Action.QUIT or Action.INSTALL when the loop should return to
            its caller, otherwise None
        """
        key = event.key

        if key is Key.QUIT:
            return Action.QUIT
        if key is Key.ENTER:
            return Action.INSTALL if self.selected_package else None

        if key is Key.ESCAPE:
            self.clear()
        elif key is Key.UP:
            self.navigate(-1, visible_rows)
        elif key is Key.DOWN:
            self.navigate(1, visible_rows)
        elif key is Key.PAGE_UP:
            self.navigate(-max(visible_rows, 1), visible_rows)
        elif key is Key.PAGE_DOWN:
            self.navigate(max(visible_rows, 1), visible_rows)
        elif key is Key.HOME:
            self.home()
        elif key is Key.END:
            self.end(visible_rows)
        elif key is Key.BACKSPACE:
            if self.query:
                self._set_query(self.query[:-1])
        elif key is Key.CHAR and event.char:
            self._set_query(self.query + event.char)

        return None

    def clear(self) -> None:
        """Empty the query and results and invalidate any in-flight search."""
        self.query = ""
        self.packages = []
        self.selected = 0
        self.scroll_offset = 0
        self.state = SearchState.IDLE
        self.status_message = IDLE_MESSAGE
        self._query_changed = False
        self.generation += 1

    def _set_query(self, query: str) -> None:
        if not query:
            self.clear()
            return
        self.query = query
        self._query_changed = True
        self._last_input = self._clock()
        self.state = SearchState.SEARCHING
        self.status_message = SEARCHING_MESSAGE

    def tick(self) -> None:
        """
        Run one iteration of background bookkeeping. Never blocks.

        Adopts any finished search for the current generation, then
        dispatches a new search once the debounce window has elapsed.
        """
        while True:
            try:
                generation, result = self._results.get_nowait()
            except queue.Empty:
                break
            self._receive(generation, result)

        if self._query_changed and self._clock() - self._last_input >= self.debounce:
            self._query_changed = False
            if self.query:
                self._dispatch_search()

    def _dispatch_search(self) -> None:
        self.generation += 1
        generation = self.generation
        query = self.query
        provider = self.provider
        results = self._results

        self.state = SearchState.SEARCHING
        self.status_message = SEARCHING_MESSAGE
        logger.debug(f"Dispatching search #{generation} for {query!r} via {provider.name}")

        def job():
            try:
                result = provider.search(query)
            except Exception as e:
                logger.exception(f"{provider.name} search for {query!r} failed")
                result = SearchResult(error=str(e) or type(e).__name__)
            results.put((generation, result))

        self._dispatch(job)

    def _receive(self, generation: int, result: SearchResult) -> None:
        if generation != self.generation:
            logger.debug(f"Discarding stale result #{generation} (current #{self.generation})")
            return

        self.packages = result.packages
        self.selected = 0
        self.scroll_offset = 0
        self.state = SearchState.DONE

        if result.error:
            self.status_message = ERROR_PREFIX + result.error
        elif not self.packages:
            self.status_message = NO_RESULTS_MESSAGE
        else:
            n = len(self.packages)
            self.status_message = f"Found {n} result{'' if n == 1 else 's'}."

    def navigate(self, delta: int, visible_rows: int = 1) -> None:
        """Move the selection by delta, clamped to the result list."""
        if not self.packages:
            return
        self.selected = max(0, min(self.selected + delta, len(self.packages) - 1))
        self._adjust_scroll(visible_rows)

    def home(self) -> None:
        self.selected = 0
        self.scroll_offset = 0

    def end(self, visible_rows: int = 1) -> None:
        if not self.packages:
            return
        visible = max(visible_rows, 1)
        self.selected = len(self.packages) - 1
        self.scroll_offset = max(0, len(self.packages) - visible)
        self._adjust_scroll(visible)

    def _adjust_scroll(self, visible_rows: int) -> None:
        """Scroll only as far as needed to keep the selection on screen."""
        visible = max(visible_rows, 1)
        if self.selected < self.scroll_offset:
            self.scroll_offset = self.selected
        elif self.selected >= self.scroll_offset + visible:
            self.scroll_offset = self.selected - visible + 1

    def record_install(self, package: Package, success: bool) -> None:
        """Reflect the outcome of an install command in the displayed state."""
        if success:
            package.installed = True
            self.status_message = f"Successfully installed {package.name}"
        else:
            self.status_message = f"Installation of {package.name} may have failed"
