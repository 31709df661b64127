"""
In-memory catalog store.

Owns the authoritative ISBN -> book mapping. Books are seeded once at
startup; afterwards only each book's review map changes.
"""

import threading
from typing import Any, Dict, List, Mapping

import structlog

from catalog.models import Book, ErrorKind, NotFoundCause, Result

logger = structlog.get_logger(__name__)


class CatalogStore:
    """
    Thread-safe map of books keyed by ISBN.

    Every read hands out a deep copy, so callers never observe a record
    while it is being written.
    """

    def __init__(self, seed: Mapping[str, Mapping[str, Any]]):
        """
        Initialize the store from seed data.

        Args:
            seed: Mapping of ISBN to ``{"title": ..., "author": ...}``,
                iterated in insertion order
        """
        self._lock = threading.RLock()
        self._books: Dict[str, Book] = {}
        self.logger = logger.bind(component="catalog_store")

        for isbn, entry in seed.items():
            self._books[str(isbn)] = Book(
                isbn=str(isbn),
                title=entry["title"],
                author=entry["author"],
                reviews=dict(entry.get("reviews") or {})
            )

        self.logger.info("Catalog seeded", total_books=len(self._books))

    def __len__(self) -> int:
        return len(self._books)

    def get_book(self, isbn: str) -> Result[Book]:
        """Look up a single book by ISBN."""
        with self._lock:
            book = self._books.get(isbn)
            if book is None:
                return _unknown_book(isbn)
            return Result.success(book.model_copy(deep=True))

    def list_books(self) -> List[Book]:
        """Return every book in seed order."""
        with self._lock:
            return [book.model_copy(deep=True) for book in self._books.values()]

    def upsert_review(self, isbn: str, username: str, text: str) -> Result[Book]:
        """
        Add or replace ``username``'s review of a book.

        Returns:
            The book as it stands after the write
        """
        with self._lock:
            book = self._books.get(isbn)
            if book is None:
                return _unknown_book(isbn)

            replaced = username in book.reviews
            book.reviews[username] = text
            self.logger.debug("Review stored", isbn=isbn, username=username, replaced=replaced)
            return Result.success(book.model_copy(deep=True))

    def delete_review(self, isbn: str, username: str) -> Result[Book]:
        """
        Remove ``username``'s review of a book.

        Fails with one of three not-found causes: the book is unknown, the
        book has no reviews at all, or none of its reviews is by ``username``.
        """
        with self._lock:
            book = self._books.get(isbn)
            if book is None:
                return _unknown_book(isbn)

            if not book.reviews:
                return Result.failure(
                    ErrorKind.NOT_FOUND,
                    "No reviews found for this book",
                    cause=NotFoundCause.NO_REVIEWS
                )

            if username not in book.reviews:
                return Result.failure(
                    ErrorKind.NOT_FOUND,
                    "You haven't reviewed this book yet",
                    cause=NotFoundCause.NO_USER_REVIEW
                )

            del book.reviews[username]
            self.logger.debug("Review removed", isbn=isbn, username=username)
            return Result.success(book.model_copy(deep=True))


def _unknown_book(isbn: str) -> Result:
    return Result.failure(
        ErrorKind.NOT_FOUND,
        f"Book not found with ISBN: {isbn}",
        cause=NotFoundCause.UNKNOWN_BOOK
    )
