"""
Asynchronous catalog search.

Every query suspends for a simulated backing-store latency before it reads
the catalog, so searches never hold up other requests on the event loop.
Callers bound a search with their own timeout; nothing here cancels one.
"""

import asyncio
from typing import List

import structlog

from catalog.models import (
    AuthorSearchResult, Book, BookListing, ErrorKind, MatchQuality,
    NotFoundCause, Result, TitleMatch, TitleSearchResult
)
from catalog.store import CatalogStore

logger = structlog.get_logger(__name__)

DEFAULT_SEARCH_DELAY_SECONDS = 1.0


def normalize_text(text: str) -> str:
    """Lowercase, trim and collapse runs of whitespace to one space."""
    return " ".join(text.lower().split())


class SearchEngine:
    """Non-blocking lookups by ISBN, author and title."""

    def __init__(self, store: CatalogStore, delay_seconds: float = DEFAULT_SEARCH_DELAY_SECONDS):
        """
        Initialize the search engine.

        Args:
            store: Catalog to search
            delay_seconds: Simulated latency applied before each lookup
        """
        self.store = store
        self.delay_seconds = delay_seconds
        self.logger = logger.bind(component="search_engine")

    async def _simulate_latency(self) -> None:
        await asyncio.sleep(self.delay_seconds)

    def _internal_failure(self, operation: str, error: Exception) -> Result:
        self.logger.error("Search failed", operation=operation, error=str(error), exc_info=True)
        return Result.failure(ErrorKind.INTERNAL_FAILURE, f"Error occurred during {operation}")

    async def fetch_all(self) -> Result[BookListing]:
        """Retrieve the whole catalog in seed order."""
        await self._simulate_latency()
        try:
            books = self.store.list_books()
        except Exception as e:
            return self._internal_failure("fetch_all", e)

        return Result.success(BookListing(total_books=len(books), books=books))

    async def find_by_isbn(self, isbn: str) -> Result[Book]:
        """Look up a single book by ISBN."""
        await self._simulate_latency()
        try:
            result = self.store.get_book(isbn)
        except Exception as e:
            return self._internal_failure("find_by_isbn", e)

        if not result.ok:
            return Result.failure(
                ErrorKind.NOT_FOUND,
                f"Book with ISBN {isbn} not found",
                cause=NotFoundCause.UNKNOWN_BOOK
            )
        return result

    async def find_by_author(self, name: str) -> Result[AuthorSearchResult]:
        """
        Find books whose author contains ``name``, ignoring case.

        Blank names are rejected before the catalog is touched.
        """
        if not name or not name.strip():
            return Result.failure(ErrorKind.INVALID_INPUT, "Author name cannot be empty")

        await self._simulate_latency()
        try:
            needle = name.lower()
            matches = [book for book in self.store.list_books() if needle in book.author.lower()]
        except Exception as e:
            return self._internal_failure("find_by_author", e)

        self.logger.debug("Author search", query=name, matches=len(matches))
        if not matches:
            return Result.failure(
                ErrorKind.NOT_FOUND,
                f"No books found for author: {name}",
                cause=NotFoundCause.NO_MATCHES
            )

        return Result.success(AuthorSearchResult(author_query=name, count=len(matches), books=matches))

    async def find_by_title(self, title: str) -> Result[TitleSearchResult]:
        """
        Find books whose normalized title contains the normalized query.

        Exact matches are listed before partial ones; within each group the
        catalog order is kept.
        """
        if not title or not title.strip():
            return Result.failure(ErrorKind.INVALID_INPUT, "Search title cannot be empty")

        await self._simulate_latency()
        try:
            search_term = normalize_text(title)
            hits: List[TitleMatch] = []
            for book in self.store.list_books():
                book_title = normalize_text(book.title)
                if search_term not in book_title:
                    continue
                quality = MatchQuality.EXACT if book_title == search_term else MatchQuality.PARTIAL
                hits.append(TitleMatch(**book.model_dump(), match_quality=quality))

            # sorted() is stable, so catalog order survives within a group
            hits = sorted(hits, key=lambda hit: hit.match_quality != MatchQuality.EXACT)
        except Exception as e:
            return self._internal_failure("find_by_title", e)

        self.logger.debug("Title search", query=title, matches=len(hits))
        if not hits:
            return Result.failure(
                ErrorKind.NOT_FOUND,
                f'No books found with title containing: "{title}"',
                cause=NotFoundCause.NO_MATCHES
            )

        return Result.success(TitleSearchResult(search_term=title, total_matches=len(hits), books=hits))
