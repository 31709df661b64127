"""
Review creation, replacement and removal.

Identity is resolved before these calls; each mutation receives the
acting username explicitly and never suspends.
"""

from typing import Optional

import structlog

from catalog.models import ErrorKind, Result, ReviewConfirmation, ReviewListing
from catalog.store import CatalogStore

logger = structlog.get_logger(__name__)


class ReviewManager:
    """Manages the single review each user may hold per book."""

    def __init__(self, store: CatalogStore):
        self.store = store
        self.logger = logger.bind(component="review_manager")

    def put_review(
        self,
        session_username: Optional[str],
        isbn: Optional[str],
        text: Optional[str]
    ) -> Result[ReviewConfirmation]:
        """
        Add or overwrite ``session_username``'s review of a book.

        Args:
            session_username: Username resolved from the caller's session
            isbn: Book to review
            text: Review content

        Returns:
            Result carrying the confirmation, or an unauthenticated,
            invalid_input or not_found failure
        """
        if not session_username:
            return Result.failure(ErrorKind.UNAUTHENTICATED, "Please login first")

        if not isbn or not text or not text.strip():
            return Result.failure(ErrorKind.INVALID_INPUT, "ISBN and review text are required")

        stored = self.store.upsert_review(isbn, session_username, text)
        if not stored.ok:
            return stored

        self.logger.info("Review added/updated", isbn=isbn, username=session_username)
        return Result.success(ReviewConfirmation(isbn=isbn, book_title=stored.value.title, review=text))

    def delete_review(self, session_username: Optional[str], isbn: str) -> Result[ReviewConfirmation]:
        """
        Remove ``session_username``'s review of a book.

        The not_found failure names which precondition was unmet: unknown
        book, a book without reviews, or no review from this user.
        """
        if not session_username:
            return Result.failure(ErrorKind.UNAUTHENTICATED, "Please login first to delete a review")

        removed = self.store.delete_review(isbn, session_username)
        if not removed.ok:
            self.logger.info(
                "Review deletion rejected",
                isbn=isbn,
                username=session_username,
                cause=removed.error.cause
            )
            return removed

        self.logger.info("Review deleted", isbn=isbn, username=session_username)
        return Result.success(ReviewConfirmation(isbn=isbn, book_title=removed.value.title))

    def get_reviews(self, isbn: str) -> Result[ReviewListing]:
        """List a book's reviews; a book with none yields an empty listing."""
        found = self.store.get_book(isbn)
        if not found.ok:
            return found

        book = found.value
        return Result.success(ReviewListing(
            isbn=isbn,
            book_title=book.title,
            review_count=len(book.reviews),
            reviews=book.reviews
        ))
