"""
SearchForm and SearchResults: query and browse log entries.

SearchForm fields: start timestamp, end timestamp, comma-separated tags.
All are optional; timestamps that are given must be RFC 3339.  Results are
shown by SearchResults, which keeps a reference to the form so ``esc``
returns to it with the fields as they were.

SearchResults keybindings:
  up/k, down/j         move
  pageup/pagedown      move by a page
  home/g, end/G        first / last entry
  /                    filter by entry text (enter accepts, esc clears)
  esc                  clear an active filter, else back to the form
  q                    quit
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from tinyhatchet.api.models import LogEntry, parse_rfc3339
from tinyhatchet.core.events import Event, Failure, KeyPress, LogEntries
from tinyhatchet.core.session import SessionContext
from tinyhatchet.ui import commands
from tinyhatchet.ui.screens.base import FormScreen, Screen, Transition
from tinyhatchet.ui.state import BACK_KEY, QUIT_KEYS, TextField, Viewport

logger = structlog.get_logger()

TIMESTAMP_CHAR_LIMIT = 20
INVALID_TIMESTAMP = "not an RFC 3339 timestamp (2021-06-01T11:22:33Z)"
RESULTS_TITLE = "Found Log Entries:"

# Lines used by the title, status and filter rows of the listing.
_LIST_CHROME = 4
# Each entry takes a title line, a description line and a spacer.
_ROWS_PER_ENTRY = 3


class SearchForm(FormScreen):
    def __init__(self, session: SessionContext) -> None:
        self.start_input = TextField(
            placeholder="Start (2021-06-01T11:22:33Z)", char_limit=TIMESTAMP_CHAR_LIMIT
        )
        self.end_input = TextField(
            placeholder="End (2021-06-01T11:22:33Z)", char_limit=TIMESTAMP_CHAR_LIMIT
        )
        self.tags_input = TextField(placeholder="Tags (comma separated)")
        super().__init__(session, [self.start_input, self.end_input, self.tags_input])

    def on_key(self, event: KeyPress) -> Transition:
        if event.key == BACK_KEY:
            from tinyhatchet.ui.screens.home import HomeMenu

            return self.go(HomeMenu(self.session))
        return super().on_key(event)

    def activate(self, action: int) -> Transition:
        self.clear_errors()
        start = self.start_input.value.strip()
        end = self.end_input.value.strip()
        tags = ",".join(t.strip() for t in self.tags_input.value.split(",") if t.strip())

        invalid = False
        for value, f in ((start, self.start_input), (end, self.end_input)):
            if not value:
                continue
            try:
                parse_rfc3339(value)
            except ValueError:
                f.errors = [INVALID_TIMESTAMP]
                invalid = True
        if invalid:
            return self.stay()

        return self.submit(commands.get_entries(self.session, start=start, end=end, tags=tags))

    def on_outcome(self, event: Event) -> Transition:
        if isinstance(event, LogEntries):
            self.busy = False
            results = SearchResults(self.session, self, list(event.entries))
            return self.go(results)
        if isinstance(event, Failure):
            logger.warning("search_failed", detail=event.detail)
        return super().on_outcome(event)


# ---------------------------------------------------------------------------
# Result listing
# ---------------------------------------------------------------------------


@dataclass
class EntryList:
    """Scrollable, filterable listing of log entries."""

    entries: list[LogEntry] = field(default_factory=list)
    height: int = 24
    cursor: int = 0
    offset: int = 0
    filter_text: str = ""
    filtering: bool = False

    @property
    def visible(self) -> list[LogEntry]:
        if not self.filter_text:
            return self.entries
        needle = self.filter_text.lower()
        return [e for e in self.entries if needle in e.text.lower()]

    @property
    def page_size(self) -> int:
        return max(1, (self.height - _LIST_CHROME) // _ROWS_PER_ENTRY)

    @property
    def selected(self) -> LogEntry | None:
        items = self.visible
        if not items:
            return None
        return items[self.cursor]

    def move(self, delta: int) -> None:
        self.cursor += delta
        self._settle()

    def first(self) -> None:
        self.cursor = 0
        self._settle()

    def last(self) -> None:
        self.cursor = len(self.visible) - 1
        self._settle()

    def set_height(self, height: int) -> None:
        self.height = height
        self._settle()

    def set_filter(self, text: str) -> None:
        self.filter_text = text
        self.cursor = 0
        self.offset = 0
        self._settle()

    def _settle(self) -> None:
        count = len(self.visible)
        self.cursor = max(0, min(self.cursor, count - 1))
        size = self.page_size
        if self.cursor < self.offset:
            self.offset = self.cursor
        elif self.cursor >= self.offset + size:
            self.offset = self.cursor - size + 1
        self.offset = max(0, min(self.offset, max(0, count - size)))

    def render(self) -> str:
        items = self.visible
        lines = [RESULTS_TITLE, ""]
        if self.filtering:
            lines.append(f"Filter: {self.filter_text}█")
        elif self.filter_text:
            lines.append(f'Filter: "{self.filter_text}"  {len(items)}/{len(self.entries)} items')
        else:
            lines.append(f"{len(items)} items" if items else "No items.")
        lines.append("")

        for i, entry in enumerate(items[self.offset : self.offset + self.page_size]):
            marker = ">" if self.offset + i == self.cursor else " "
            lines.append(f"{marker} {entry.title}")
            lines.append(f"  {entry.description}")
            lines.append("")
        return "\n".join(lines)


class SearchResults(Screen):
    def __init__(self, session: SessionContext, form: SearchForm, entries: list[LogEntry]) -> None:
        super().__init__(session)
        self.form = form
        self.listing = EntryList(entries, height=form.viewport.height)
        self.viewport = form.viewport

    def enter(self, viewport: Viewport) -> list[commands.Command]:
        super().enter(viewport)
        self.listing.set_height(viewport.height)
        return []

    def transition(self, event: Event) -> Transition:
        result = super().transition(event)
        self.listing.set_height(self.viewport.height)
        return result

    def on_key(self, event: KeyPress) -> Transition:
        listing = self.listing
        key = event.key

        if listing.filtering:
            if key == "ctrl+c":
                return self.exit()
            if key == BACK_KEY:
                listing.filtering = False
                listing.set_filter("")
            elif key == "enter":
                listing.filtering = False
            elif key == "backspace":
                listing.set_filter(listing.filter_text[:-1])
            elif event.is_printable:
                listing.set_filter(listing.filter_text + (event.character or ""))
            return self.stay()

        if key == BACK_KEY:
            if listing.filter_text:
                listing.set_filter("")
                return self.stay()
            return self.go(self.form)
        if key in QUIT_KEYS:
            return self.exit()
        if key in ("up", "k"):
            listing.move(-1)
        elif key in ("down", "j"):
            listing.move(1)
        elif key == "pageup":
            listing.move(-listing.page_size)
        elif key == "pagedown":
            listing.move(listing.page_size)
        elif key in ("home", "g"):
            listing.first()
        elif key in ("end", "G"):
            listing.last()
        elif key == "slash" or event.character == "/":
            listing.filtering = True
        return self.stay()

    def render(self) -> str:
        return self.listing.render()
