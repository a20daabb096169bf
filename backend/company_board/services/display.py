"""Display-page rendering: preference ordering, 12-hour times and the live
subscription lifecycle of a single viewer."""
from __future__ import annotations

import logging
import unicodedata
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Callable, Iterable, Iterator, List, Optional

from starlette.concurrency import run_in_threadpool

from company_board.schemas.company import CompanyCard, CompanyRecord
from company_board.services.company_store import CompanyStore

logger = logging.getLogger(__name__)

PREFERRED_ORDER = ["Lucky Day", "Lucky Night", "Kalyan", "Main Bazar"]
_PREFERRED_KEYS = [name.lower() for name in PREFERRED_ORDER]

GRADIENT_COUNT = 6


def _preference_index(name: str) -> int:
    try:
        return _PREFERRED_KEYS.index(name.strip().lower())
    except ValueError:
        return -1


def _collation_key(name: str) -> tuple[str, str, str]:
    # Accent- and case-insensitive first, then lower case before upper case.
    base = "".join(
        ch for ch in unicodedata.normalize("NFKD", name) if not unicodedata.combining(ch)
    )
    return base.casefold(), name.casefold(), name.swapcase()


def sort_for_display(records: Iterable[CompanyRecord]) -> List[CompanyRecord]:
    """Preferred names first in list order, everything else alphabetically."""

    def key(record: CompanyRecord):
        index = _preference_index(record.name)
        if index >= 0:
            return (0, index, ("", "", ""))
        return (1, 0, _collation_key(record.name))

    return sorted(records, key=key)


def format_time(raw: Optional[str]) -> str:
    """'13:30' -> '01:30 PM'. Empty input gives ''; unparseable input is returned as-is."""
    if not raw:
        return ""
    hours, sep, minutes = raw.partition(":")
    if not sep:
        return raw
    try:
        hour = int(hours)
    except ValueError:
        return raw
    if not 0 <= hour <= 23:
        return raw
    hour12 = hour % 12 or 12
    ampm = "PM" if hour >= 12 else "AM"
    return f"{hour12:02d}:{minutes} {ampm}"


def render_cards(records: Iterable[CompanyRecord]) -> List[CompanyCard]:
    return [
        CompanyCard(
            id=record.id,
            name=record.name,
            ticket_number=record.ticket_number,
            opening_time=format_time(record.opening_time),
            closing_time=format_time(record.closing_time),
            jodi_info=record.jodi_info or "",
            panel_info=record.panel_info or "",
            gradient=index % GRADIENT_COUNT,
        )
        for index, record in enumerate(sort_for_display(records))
    ]


class DisplayRenderer:
    """Live view of the company list for one viewer.

    ``loading`` stays True until the first notification arrives. Every
    notification replaces ``companies`` wholesale and, when ``on_render`` is
    set, hands it the freshly sorted cards.
    """

    def __init__(self, store: CompanyStore, on_render: Optional[Callable[[List[CompanyCard]], None]] = None) -> None:
        self.store = store
        self.on_render = on_render
        self.companies: List[CompanyRecord] = []
        self.loading = True

    @property
    def cards(self) -> List[CompanyCard]:
        return render_cards(self.companies)

    def _on_change(self, records: List[CompanyRecord]) -> None:
        self.companies = list(records)
        self.loading = False
        logger.debug("Display received %d companies", len(records))
        if self.on_render is not None:
            self.on_render(self.cards)

    @contextmanager
    def subscribe(self) -> Iterator["DisplayRenderer"]:
        subscription = self.store.subscribe(self._on_change)
        try:
            yield self
        finally:
            subscription.close()

    @asynccontextmanager
    async def live(self) -> AsyncIterator["DisplayRenderer"]:
        """``subscribe`` for coroutines: the store's blocking fetch and lock
        happen on a worker thread, never on the event loop."""
        subscription = await run_in_threadpool(self.store.subscribe, self._on_change)
        try:
            yield self
        finally:
            await run_in_threadpool(subscription.close)
