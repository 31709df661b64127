"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from catalog.models import AuthorSearchResult, Book, TitleMatch


class CredentialsRequest(BaseModel):
    """Username/password body shared by registration and login."""
    # Optional so missing fields surface as our own 400, not a 422
    username: Optional[str] = Field(None, description="Username")
    password: Optional[str] = Field(None, description="Plaintext password")


class ReviewRequest(BaseModel):
    review: Optional[str] = Field(None, description="Review text")


class RegisterResponse(BaseModel):
    message: str = Field(..., description="Outcome message")
    username: str = Field(..., description="Registered username")


class LoginResponse(BaseModel):
    message: str = Field(..., description="Outcome message")
    username: str = Field(..., description="Authenticated username")
    access_token: str = Field(..., description="Bearer token for review endpoints")
    token_type: str = Field("bearer", description="Token scheme")
    expires_at: datetime = Field(..., description="Token expiry")


class BookListResponse(BaseModel):
    message: str = Field(..., description="Outcome message")
    total_books: int = Field(..., description="Number of books")
    books: List[Book] = Field(..., description="Books in catalog order")


class BookSearchResponse(BaseModel):
    message: str
    book: Book


class AuthorSearchResponse(BaseModel):
    message: str
    author_search: str = Field(..., description="Author name as requested")
    result: AuthorSearchResult


class SearchInformation(BaseModel):
    query: str
    matches_found: int
    note: str


class TitleSearchResponse(BaseModel):
    message: str
    search_information: SearchInformation
    results: List[TitleMatch] = Field(..., description="Exact matches first, then partial")


class ReviewListResponse(BaseModel):
    isbn: str
    book_title: str
    review_count: int
    message: Optional[str] = Field(None, description="Set when the book has no reviews")
    reviews: Dict[str, str]


class ReviewResponse(BaseModel):
    message: str
    book: str = Field(..., description="Title of the reviewed book")
    review: Optional[str] = Field(None, description="Stored review text")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class TitleSearchErrorResponse(ErrorResponse):
    """Error envelope for title search, with guidance for the caller."""
    hint: Optional[str] = Field(None, description="How to fix a rejected query")
    suggestions: Optional[List[str]] = Field(None, description="Ways to widen a search with no matches")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    total_books: int = Field(..., description="Books in the catalog")
    active_sessions: int = Field(..., description="Sessions currently held")
