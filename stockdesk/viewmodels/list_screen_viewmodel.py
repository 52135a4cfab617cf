# Rev 1.0.0

"""List-screen ViewModel tying search, filters and paged fetching together."""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Type

from PySide6.QtCore import QObject, Signal

from stockdesk.models.filter_spec import FilterSpec
from stockdesk.models.request_descriptor import RequestDescriptor, build_request
from stockdesk.viewmodels.debouncer import Debouncer
from stockdesk.viewmodels.filter_store import FilterStateStore
from stockdesk.viewmodels.page_fetch import FetchState, ListSource, PageFetchCoordinator
from stockdesk.viewmodels.scroll_tracker import ScrollPositionTracker

logger = logging.getLogger(__name__)


class ListScreenViewModel(QObject):
    """Coordinates one list screen between user input and the remote list API.

    The view calls :meth:`set_search_text`, :meth:`apply_filters`,
    :meth:`clear_filters`, :meth:`load_more` and :meth:`refresh`, and listens
    to the signals below. Fetches are triggered only from the named
    ``on_*`` handlers.
    """

    itemsChanged = Signal(list)
    loadingChanged = Signal(bool)
    errorChanged = Signal(object)
    pageInfoChanged = Signal(int, int, int)      # page, pages, total
    filtersChanged = Signal(object)
    searchTextChanged = Signal(str)
    activeFilterCountChanged = Signal(int)
    scrollToTopVisibleChanged = Signal(bool)

    def __init__(
        self,
        source: ListSource,
        spec_cls: Type[FilterSpec],
        *,
        limit: int = 50,
        debounce_ms: int = 500,
        dispatcher: Any = None,
        scroll_threshold_px: int = 200,
        end_margin_px: int = 200,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self._limit = limit
        self._debounced_search = ""

        self._store = FilterStateStore(spec_cls, parent=self)
        self._debouncer = Debouncer(debounce_ms, initial="", parent=self)
        self._fetch = PageFetchCoordinator(source, dispatcher=dispatcher, parent=self)
        self._scroll = ScrollPositionTracker(
            scroll_threshold_px,
            end_margin_px=end_margin_px,
            parent=self,
        )

        self._store.filtersChanged.connect(self.filtersChanged)
        self._store.searchChanged.connect(self.searchTextChanged)
        self._store.activeCountChanged.connect(self.activeFilterCountChanged)
        self._debouncer.settled.connect(self.on_search_settled)
        self._fetch.itemsChanged.connect(self.itemsChanged)
        self._fetch.loadingChanged.connect(self.loadingChanged)
        self._fetch.errorChanged.connect(self.errorChanged)
        self._fetch.pageInfoChanged.connect(self.pageInfoChanged)
        self._scroll.pastThresholdChanged.connect(self.scrollToTopVisibleChanged)

    # ---- view operations ----------------------------------------------
    def start(self) -> bool:
        """Initial load with whatever filters are set (normally none)."""
        return self.on_filter_change()

    def set_search_text(self, text: Optional[str]) -> None:
        if self._store.set_search(text):
            self._debouncer.observe(self._store.search)

    def apply_filters(self, partial: Optional[Mapping[str, Any]] = None, **fields: Any) -> bool:
        if self._store.apply(partial, **fields):
            return self.on_filter_change()
        return False

    def toggle_filter(self, name: str, value: Any) -> bool:
        """Quick-filter chip: select ``value`` or clear it if already selected."""
        if self._store.toggle(name, value):
            return self.on_filter_change()
        return False

    def clear_filters(self) -> bool:
        """Reset every filter and the search text, skipping the debounce."""
        self._store.clear()
        self._debouncer.reset("")
        self._debounced_search = ""
        return self.on_filter_change()

    def load_more(self) -> bool:
        return self.on_load_more_requested()

    def refresh(self) -> bool:
        """Reload page 1 of the filters and settled search held right now."""
        return self._fetch.refresh(self.current_request())

    def on_scroll(
        self,
        offset: float,
        viewport_height: Optional[float] = None,
        content_height: Optional[float] = None,
    ) -> bool:
        """Feed a scroll offset; returns True when it triggered a next-page fetch."""
        self._scroll.on_scroll(offset)
        if viewport_height is None or content_height is None:
            return False
        if self._scroll.near_end(offset, viewport_height, content_height):
            return self.on_load_more_requested()
        return False

    def teardown(self) -> None:
        self._debouncer.teardown()
        self._fetch.shutdown()

    # ---- named triggers -----------------------------------------------
    def on_filter_change(self) -> bool:
        return self._fetch.request(self.current_request())

    def on_search_settled(self, text: Any) -> bool:
        settled = str(text or "").strip()
        if settled == self._debounced_search:
            return False
        self._debounced_search = settled
        logger.debug("Search settled on %r", settled)
        return self.on_filter_change()

    def on_load_more_requested(self) -> bool:
        return self._fetch.load_more()

    # ---- accessors ----------------------------------------------------
    def current_request(self, page: int = 1) -> RequestDescriptor:
        return build_request(self._store.filters, self._debounced_search, page, self._limit)

    @property
    def items(self) -> List[Any]:
        return self._fetch.items

    @property
    def active_filter_count(self) -> int:
        return self._store.active_count()

    @property
    def loading(self) -> bool:
        return self._fetch.loading

    @property
    def error(self) -> Optional[str]:
        return self._fetch.error

    @property
    def page(self) -> int:
        return self._fetch.page

    @property
    def pages(self) -> int:
        return self._fetch.pages

    @property
    def total(self) -> int:
        return self._fetch.total

    @property
    def has_more(self) -> bool:
        return self._fetch.has_more()

    @property
    def filters(self) -> FilterSpec:
        return self._store.filters

    @property
    def search_text(self) -> str:
        return self._store.search

    @property
    def debounced_search(self) -> str:
        return self._debounced_search

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def scroll_to_top_visible(self) -> bool:
        return self._scroll.past_threshold

    def fetch_state(self) -> FetchState:
        return self._fetch.state()

    def search_debouncer(self) -> Debouncer:
        return self._debouncer
