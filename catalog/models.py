"""
Pydantic models for the bookstore catalog.

Defines the book, user and session records held in memory, the result
envelopes returned by the search and review operations, and the typed
``Result`` wrapper every core component returns instead of raising.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure kinds surfaced by the core components."""
    INVALID_INPUT = "invalid_input"
    UNAUTHORIZED = "unauthorized"
    UNAUTHENTICATED = "unauthenticated"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INTERNAL_FAILURE = "internal_failure"


class NotFoundCause(str, Enum):
    """Which precondition was unmet when a lookup fails."""
    UNKNOWN_BOOK = "unknown_book"
    NO_REVIEWS = "no_reviews"
    NO_USER_REVIEW = "no_user_review"
    NO_MATCHES = "no_matches"


class MatchQuality(str, Enum):
    """Classification of a title search hit."""
    EXACT = "exact"
    PARTIAL = "partial"


class CatalogError(BaseModel):
    """A typed failure with a human-readable message."""
    kind: ErrorKind = Field(..., description="Failure kind")
    message: str = Field(..., description="Human-readable cause")
    cause: Optional[NotFoundCause] = Field(None, description="Sub-cause for not_found failures")


class Result(BaseModel, Generic[T]):
    """
    Outcome of a core operation: either a value or a CatalogError.

    Components return these instead of raising so the boundary layer can
    map each failure kind onto its own transport status.
    """
    value: Optional[T] = None
    error: Optional[CatalogError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value=None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        cause: Optional[NotFoundCause] = None
    ) -> "Result":
        return cls(error=CatalogError(kind=kind, message=message, cause=cause))


class Book(BaseModel):
    """A catalog entry; only ``reviews`` changes after seeding."""
    isbn: str = Field(..., description="Opaque unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    reviews: Dict[str, str] = Field(default_factory=dict, description="Review text keyed by username")

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "isbn": "1",
                "title": "Things Fall Apart",
                "author": "Chinua Achebe",
                "reviews": {"alice": "A classic."}
            }
        }


class User(BaseModel):
    """A registered user. Passwords are stored and compared verbatim."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class Session(BaseModel):
    """A bearer token bound to a username until ``expires_at``."""
    username: str = Field(..., description="Authenticated username")
    token: str = Field(..., description="Opaque bearer token")
    issued_at: datetime = Field(..., description="When the session was issued")
    expires_at: datetime = Field(..., description="When the token stops being accepted")

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class TitleMatch(Book):
    """A title search hit tagged with its match quality."""
    match_quality: MatchQuality = Field(..., description="exact or partial")


class BookListing(BaseModel):
    total_books: int = Field(..., description="Number of books returned")
    books: List[Book] = Field(default_factory=list)


class AuthorSearchResult(BaseModel):
    author_query: str = Field(..., description="Author name as supplied by the caller")
    count: int = Field(..., description="Number of matching books")
    books: List[Book] = Field(default_factory=list)


class TitleSearchResult(BaseModel):
    search_term: str = Field(..., description="Title as supplied by the caller")
    total_matches: int = Field(..., description="Number of matching books")
    books: List[TitleMatch] = Field(default_factory=list, description="Exact matches first")


class ReviewListing(BaseModel):
    isbn: str
    book_title: str
    review_count: int
    reviews: Dict[str, str] = Field(default_factory=dict)


class ReviewConfirmation(BaseModel):
    isbn: str
    book_title: str
    review: Optional[str] = None
