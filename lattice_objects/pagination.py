"""Forward-only iteration over paged listings."""

import logging
from collections import deque
from typing import Callable, Deque, Optional

from lattice_objects.exceptions import ObjectStoreError, with_context
from lattice_objects.models import ListResponse, PathMetadata

logger = logging.getLogger(__name__)

FetchPage = Callable[[Optional[str]], ListResponse]


class PageIterator:
    """Lazily walks every page of a listing, in the order the server returns them.

    ``fetch_page`` is called with ``None`` for the first page and with the
    previous page's token afterwards. Iteration ends when a page carries no
    next token. A failed fetch raises :class:`ObjectStoreError` and leaves the
    iterator exhausted; start a new listing to try again.
    """

    def __init__(self, fetch_page: FetchPage) -> None:
        self._fetch_page = fetch_page
        self._items: Deque[PathMetadata] = deque()
        self._next_token: Optional[str] = None
        self._started = False
        self._done = False
        self.pages_fetched = 0

    def __iter__(self) -> "PageIterator":
        return self

    def __next__(self) -> PathMetadata:
        while not self._items:
            if self._done:
                raise StopIteration
            if self._started and not self._next_token:
                self._done = True
                raise StopIteration
            self._load_page()
        return self._items.popleft()

    def _load_page(self) -> None:
        token = self._next_token
        self._started = True
        try:
            page = self._fetch_page(token)
        except ObjectStoreError as e:
            self._done = True
            raise with_context(e, f"unable to list page {self.pages_fetched + 1}") from e

        self.pages_fetched += 1
        logger.debug(
            "Fetched page %d with %d entries", self.pages_fetched, len(page.path_metadatas)
        )
        self._items = deque(page.path_metadatas)
        self._next_token = page.next_page_token
