"""
State models and the session controller for the dossier workflow.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Deque, Iterator, List, Optional, Tuple
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10
LABEL_MAX_LENGTH = 30
UNNAMED_LABEL = "Unnamed Analysis"
UNTITLED_SOURCE = "Source Link"
GENERIC_ERROR_MESSAGE = "An unexpected error occurred during analysis."


@dataclass(frozen=True, slots=True)
class Source:
    """A single web citation reported by the grounded model."""

    uri: str
    title: str = ""

    @property
    def hostname(self) -> str:
        return urlparse(self.uri).hostname or self.uri

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED_SOURCE


@dataclass(frozen=True, slots=True)
class DossierResult:
    """Normalized dossier text plus its de-duplicated citations."""

    text: str
    sources: Tuple[Source, ...] = ()


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    label: str
    timestamp: str
    result: DossierResult


def history_label(text: str) -> str:
    """Label a submission by the first line of its input."""

    first_line = text.split("\n", 1)[0].strip()
    return first_line[:LABEL_MAX_LENGTH] or UNNAMED_LABEL


class DossierHistory:
    """Newest-first list of finished analyses, capped at ``HISTORY_LIMIT``."""

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        self._entries: Deque[HistoryEntry] = deque(maxlen=limit)

    def push(self, entry: HistoryEntry) -> None:
        self._entries.appendleft(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)


class ViewState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    RESULT = "result"
    ERROR = "error"


@dataclass(slots=True)
class DossierSession:
    """
    Session state for one browser tab or console run.

    The methods below are the only places the state changes.  At most one
    analysis is in flight: ``request_analysis`` refuses to start while
    ``is_analyzing`` is set.  A request is split in two steps so a page can
    render the analyzing state between them: ``request_analysis`` captures the
    input and ``run_pending`` makes the call.
    """

    input_text: str = ""
    is_analyzing: bool = False
    result: Optional[DossierResult] = None
    error: Optional[str] = None
    history: DossierHistory = field(default_factory=DossierHistory)
    scroll_to_result: bool = False
    pending_input: Optional[str] = None

    @property
    def can_submit(self) -> bool:
        return bool(self.input_text.strip()) and not self.is_analyzing

    @property
    def view_state(self) -> ViewState:
        if self.is_analyzing:
            return ViewState.ANALYZING
        if self.error is not None:
            return ViewState.ERROR
        if self.result is not None:
            return ViewState.RESULT
        return ViewState.IDLE

    def request_analysis(self) -> bool:
        """Move to the analyzing state for the current input. Returns False if the guard refused."""

        if not self.can_submit:
            return False
        self.pending_input = self._begin()
        return True

    def run_pending(self, analyze: Callable[[str], DossierResult]) -> bool:
        """Make the call for a requested analysis. Returns False when nothing is pending."""

        submitted = self._take_pending()
        if submitted is None:
            return False
        try:
            result = analyze(submitted)
        except Exception as exc:
            self._fail(exc)
        else:
            self._succeed(submitted, result)
        finally:
            self.is_analyzing = False
        return True

    async def run_pending_async(self, analyze: Callable[[str], Awaitable[DossierResult]]) -> bool:
        submitted = self._take_pending()
        if submitted is None:
            return False
        try:
            result = await analyze(submitted)
        except Exception as exc:
            self._fail(exc)
        else:
            self._succeed(submitted, result)
        finally:
            self.is_analyzing = False
        return True

    def submit(self, analyze: Callable[[str], DossierResult]) -> bool:
        """Request and run one analysis of the current input."""

        return self.request_analysis() and self.run_pending(analyze)

    async def submit_async(self, analyze: Callable[[str], Awaitable[DossierResult]]) -> bool:
        return self.request_analysis() and await self.run_pending_async(analyze)

    def select_history_entry(self, entry: HistoryEntry) -> None:
        self.result = entry.result
        self.error = None

    def clear_input(self) -> None:
        self.input_text = ""

    def consume_scroll_request(self) -> bool:
        requested = self.scroll_to_result
        self.scroll_to_result = False
        return requested

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _begin(self) -> str:
        self.is_analyzing = True
        self.error = None
        logger.info("Starting analysis (%d characters of input).", len(self.input_text))
        return self.input_text

    def _take_pending(self) -> Optional[str]:
        submitted, self.pending_input = self.pending_input, None
        return submitted

    def _succeed(self, submitted: str, result: DossierResult) -> None:
        self.result = result
        self.history.push(
            HistoryEntry(
                label=history_label(submitted),
                timestamp=datetime.now().strftime("%H:%M:%S"),
                result=result,
            )
        )
        self.scroll_to_result = True
        logger.info("Analysis finished with %d sources; history size %d.", len(result.sources), len(self.history))

    def _fail(self, exc: Exception) -> None:
        self.error = str(exc) or GENERIC_ERROR_MESSAGE
        logger.warning("Analysis failed: %s", self.error)
