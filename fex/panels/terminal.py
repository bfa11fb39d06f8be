"""
Terminal Panel - curses front-end for the search orchestrator.

Layout:
  - Search box (top, bordered): the query with a block cursor
  - Status line: provider, result count and search state, or a message
  - Results: two lines per package, [source] badge, installed marker,
    name and version, then the indented description

The panel only reads orchestrator state when drawing. Key presses are
translated to KeyEvents and handed to the orchestrator; an INSTALL
action suspends curses while the install command runs in the terminal.
"""

import curses
import os
from typing import Optional, Union

from loguru import logger

from ..search.provider import SourceColor
from ..services.orchestrator import (
    ERROR_PREFIX,
    IDLE_MESSAGE,
    NO_RESULTS_MESSAGE,
    Action,
    Key,
    KeyEvent,
    SearchOrchestrator,
    SearchState,
)
from ..utils.helpers import run_install

SEARCH_BOX_HEIGHT = 3
STATUS_HEIGHT = 1
LINES_PER_PACKAGE = 2
DESC_INDENT = 9

# Control characters (raw mode delivers Ctrl-C etc. as characters)
_CHAR_KEYS = {
    "\x1b": Key.ESCAPE,
    "\n": Key.ENTER,
    "\r": Key.ENTER,
    "\x7f": Key.BACKSPACE,
    "\b": Key.BACKSPACE,
    "\x03": Key.QUIT,  # Ctrl-C
    "\x11": Key.QUIT,  # Ctrl-Q
    "\x18": Key.QUIT,  # Ctrl-X
}

_SPECIAL_KEYS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    curses.KEY_ENTER: Key.ENTER,
}

# SourceColor -> (curses color, bright)
_COLORS = {
    SourceColor.CYAN: (curses.COLOR_CYAN, False),
    SourceColor.GREEN: (curses.COLOR_GREEN, False),
    SourceColor.YELLOW: (curses.COLOR_YELLOW, False),
    SourceColor.MAGENTA: (curses.COLOR_MAGENTA, False),
    SourceColor.BLUE: (curses.COLOR_BLUE, False),
    SourceColor.LIGHT_BLUE: (curses.COLOR_BLUE, True),
    SourceColor.LIGHT_GREEN: (curses.COLOR_GREEN, True),
    SourceColor.RED: (curses.COLOR_RED, False),
    SourceColor.WHITE: (curses.COLOR_WHITE, False),
}


def translate_key(ch: Union[str, int]) -> Optional[KeyEvent]:
    """
    Map a curses get_wch() value to a KeyEvent.

    Args:
        ch: A character (str) or a curses key code (int)

    Returns:
        KeyEvent, or None for keys fex doesn't use
    """
    if isinstance(ch, str):
        if ch in _CHAR_KEYS:
            return KeyEvent(_CHAR_KEYS[ch])
        if ch.isprintable():
            return KeyEvent(Key.CHAR, ch)
        return None

    key = _SPECIAL_KEYS.get(ch)
    return KeyEvent(key) if key else None


def truncate(text: str, width: int) -> str:
    """Cut text to width characters, ending in "..." when shortened."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    return text[:width - 3] + "..."


def visible_rows_for(height: int) -> int:
    """Number of packages that fit in a terminal of the given height."""
    return max(height - SEARCH_BOX_HEIGHT - STATUS_HEIGHT, 0) // LINES_PER_PACKAGE


def status_text(orchestrator: SearchOrchestrator) -> str:
    """Text of the status line."""
    message = orchestrator.status_message
    if message.startswith(ERROR_PREFIX) or message in (NO_RESULTS_MESSAGE, IDLE_MESSAGE):
        return f" {message}"

    indicator = {
        SearchState.SEARCHING: " Searching...",
        SearchState.DONE: " Ready",
    }.get(orchestrator.state, "")
    return f" provider: {orchestrator.provider.name} │ {len(orchestrator.packages)} results{indicator}"


class TerminalPanel:
    """
    Full-screen curses UI around a SearchOrchestrator.

    Args:
        orchestrator: Search state to display and drive
        poll_interval_ms: Input poll timeout per loop iteration
    """

    def __init__(self, orchestrator: SearchOrchestrator, poll_interval_ms: int = 16):
        self.orchestrator = orchestrator
        self.poll_interval_ms = poll_interval_ms
        self.stdscr = None
        self._pairs: dict[SourceColor, int] = {}

    def run(self) -> None:
        """Take over the terminal until the user quits."""
        # Esc should clear the query immediately, not after curses' 1s escape delay
        os.environ.setdefault("ESCDELAY", "25")
        curses.wrapper(self._main)

    def _main(self, stdscr) -> None:
        self.stdscr = stdscr
        self._init_screen()

        while True:
            self.draw()

            try:
                ch = stdscr.get_wch()
            except curses.error:
                ch = None  # poll timeout
            except KeyboardInterrupt:
                return

            event = translate_key(ch) if ch is not None else None
            if event is not None:
                action = self.orchestrator.handle_key(event, self.visible_rows())
                if action is Action.QUIT:
                    return
                if action is Action.INSTALL:
                    self._install_selected()

            self.orchestrator.tick()

    def _init_screen(self) -> None:
        curses.raw()
        curses.curs_set(0)
        self.stdscr.keypad(True)
        self.stdscr.timeout(self.poll_interval_ms)

        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
            for pair, color in enumerate(SourceColor, start=1):
                curses.init_pair(pair, _COLORS[color][0], -1)
                self._pairs[color] = pair

    def _color(self, color: SourceColor) -> int:
        pair = self._pairs.get(color)
        if pair is None:
            return curses.A_NORMAL
        attr = curses.color_pair(pair)
        return attr | curses.A_BOLD if _COLORS[color][1] else attr

    def visible_rows(self) -> int:
        height, _ = self.stdscr.getmaxyx()
        return visible_rows_for(height)

    # -- drawing -------------------------------------------------------

    def draw(self) -> None:
        self.stdscr.erase()
        height, width = self.stdscr.getmaxyx()
        if height < SEARCH_BOX_HEIGHT + STATUS_HEIGHT or width < 4:
            self.stdscr.refresh()
            return

        self._draw_search(width)
        self._draw_status(width)
        self._draw_results(height, width)
        self.stdscr.refresh()

    def _put(self, y: int, x: int, text: str, attr: int = curses.A_NORMAL) -> int:
        """Write text clipped to the screen; returns the next column."""
        _, width = self.stdscr.getmaxyx()
        room = width - x
        if room <= 0 or not text:
            return x
        try:
            self.stdscr.addnstr(y, x, text, room, attr)
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen
            pass
        return x + min(len(text), room)

    def _draw_search(self, width: int) -> None:
        box = self.stdscr.derwin(SEARCH_BOX_HEIGHT, width, 0, 0)
        box.box()
        box.addnstr(0, 1, " Search ", width - 2)
        self._put(1, 1, truncate(self.orchestrator.query + "█", width - 2), curses.A_BOLD)

    def _draw_status(self, width: int) -> None:
        orch = self.orchestrator
        attr = curses.A_NORMAL
        if orch.status_message.startswith(ERROR_PREFIX):
            attr = self._color(SourceColor.RED)
        elif orch.state is SearchState.SEARCHING:
            attr = self._color(SourceColor.YELLOW)
        elif orch.state is SearchState.DONE and orch.packages:
            attr = self._color(SourceColor.GREEN)
        self._put(SEARCH_BOX_HEIGHT, 0, truncate(status_text(orch), width), attr)

    def _draw_results(self, height: int, width: int) -> None:
        orch = self.orchestrator
        top = SEARCH_BOX_HEIGHT + STATUS_HEIGHT
        rows = visible_rows_for(height)
        window = orch.packages[orch.scroll_offset:orch.scroll_offset + rows]

        for i, package in enumerate(window):
            y = top + i * LINES_PER_PACKAGE
            selected = orch.scroll_offset + i == orch.selected
            rev = curses.A_REVERSE if selected else curses.A_NORMAL

            if selected:
                self._put(y, 0, " " * width, rev)
                self._put(y + 1, 0, " " * width, rev)

            x = self._put(y, 0, f"[{package.source}]", self._color(orch.provider.source_color(package.source)) | rev)
            if package.installed:
                x = self._put(y, x, " *", self._color(SourceColor.GREEN) | rev)
            else:
                x = self._put(y, x, "  ", rev)
            x = self._put(y, x, f" {package.name}", curses.A_BOLD | rev)
            if package.version:
                self._put(y, x, f" {package.version}", rev)

            desc = truncate(package.description, width - DESC_INDENT)
            self._put(y + 1, DESC_INDENT, desc, rev)

    # -- install -------------------------------------------------------

    def _install_selected(self) -> None:
        """Leave curses, run the install command, wait for Enter, come back."""
        orch = self.orchestrator
        package = orch.selected_package
        if package is None:
            return

        command = orch.provider.install_command(package)
        curses.endwin()

        print(f"\nInstalling {package.name} from {package.source}...\n", flush=True)
        success = run_install(command)
        print("\nPress Enter to return...", flush=True)
        try:
            input()
        except EOFError:
            logger.debug("stdin closed while waiting for acknowledgement")

        self.stdscr.clear()
        self.stdscr.refresh()
        orch.record_install(package, success)
