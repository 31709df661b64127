"""
FastAPI main application for the Bookstore Catalog API.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Awaitable, Optional

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.auth import current_username, get_context
from api.config import APIConfig, config as api_config
from api.models import (
    AuthorSearchResponse, BookListResponse, BookSearchResponse, CredentialsRequest,
    ErrorResponse, HealthResponse, LoginResponse, RegisterResponse, ReviewListResponse,
    ReviewRequest, ReviewResponse, SearchInformation, TitleSearchErrorResponse,
    TitleSearchResponse
)
from catalog.context import CatalogContext, build_context
from catalog.models import Book, ErrorKind, Result
from utilities.config import CatalogConfig, config as catalog_config
from utilities.logger import get_logger, setup_logging

logger = get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

TITLE_SEARCH_HINT = "Please provide a title to search for"
TITLE_SEARCH_SUGGESTIONS = ["Try using fewer words", "Check for typos", "Use partial title"]


def unwrap(result: Result):
    """
    Return a successful result's value.

    Raises:
        HTTPException: With the status mapped from the failure kind
    """
    if result.ok:
        return result.value
    raise HTTPException(
        status_code=STATUS_BY_KIND.get(result.error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=result.error.message
    )


async def await_search(search: Awaitable[Result], timeout: float) -> Result:
    """Wait for a search, giving up after ``timeout`` seconds."""
    try:
        return await asyncio.wait_for(search, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Search timed out", timeout_seconds=timeout)
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Search took too long, please retry"
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: CatalogConfig = app.state.catalog_settings
    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.get_log_file_path(),
        debug=settings.debug
    )
    logger.info("Starting Bookstore Catalog API", total_books=len(app.state.context.store))

    yield

    purged = app.state.context.sessions.purge_expired()
    logger.info("Shutting down Bookstore Catalog API", purged_sessions=purged)


def create_app(
    context: Optional[CatalogContext] = None,
    catalog_settings: Optional[CatalogConfig] = None,
    api_settings: Optional[APIConfig] = None
) -> FastAPI:
    """
    Build the FastAPI application around one catalog context.

    Args:
        context: Pre-built context; constructed from ``catalog_settings`` when omitted
        catalog_settings: Core configuration, defaults to the global instance
        api_settings: API configuration, defaults to the global instance
    """
    catalog_settings = catalog_settings or catalog_config
    api_settings = api_settings or api_config

    app = FastAPI(
        title=api_settings.api_title,
        description="""
    Browse and search the bookstore catalog, and review books once logged in.

    ## Authentication

    Review endpoints require the token returned by `/customer/login`:

    ```
    Authorization: Bearer your_token_here
    ```

    Tokens expire one hour after login.
    """,
        version=api_settings.api_version,
        lifespan=lifespan
    )
    app.state.catalog_settings = catalog_settings
    app.state.context = context or build_context(catalog_settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_settings.cors_origins,
        allow_credentials=api_settings.cors_allow_credentials,
        allow_methods=api_settings.cors_allow_methods,
        allow_headers=api_settings.cors_allow_headers,
    )

    search_timeout = api_settings.search_timeout_seconds

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc: HTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.detail,
                status_code=exc.status_code
            ).model_dump(),
            headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc: RequestValidationError):
        """Report malformed request input as a 400 in the common error envelope."""
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        logger.info("Request validation failed", path=request.url.path, problems=problems)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error="Invalid request input",
                detail=problems,
                status_code=status.HTTP_400_BAD_REQUEST
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc) if api_settings.debug else None,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            ).model_dump()
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(ctx: CatalogContext = Depends(get_context)):
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc),
            version=api_settings.api_version,
            total_books=len(ctx.store),
            active_sessions=ctx.sessions.active_sessions()
        )

    # Accounts
    @app.post(
        "/register",
        response_model=RegisterResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Accounts"]
    )
    async def register(body: CredentialsRequest, ctx: CatalogContext = Depends(get_context)):
        """Register a new user. Passwords need at least six characters."""
        username = unwrap(ctx.users.register(body.username, body.password))
        return RegisterResponse(
            message="Registration successful! You can now login with your credentials",
            username=username
        )

    @app.post("/customer/login", response_model=LoginResponse, tags=["Accounts"])
    async def login(body: CredentialsRequest, ctx: CatalogContext = Depends(get_context)):
        """Log in and receive a bearer token valid for one hour."""
        session = unwrap(ctx.sessions.login(body.username, body.password))
        return LoginResponse(
            message="Login successful",
            username=session.username,
            access_token=session.token,
            expires_at=session.expires_at
        )

    # Books
    @app.get("/", response_model=BookListResponse, tags=["Books"])
    async def list_books(ctx: CatalogContext = Depends(get_context)):
        """List every book in catalog order."""
        books = ctx.store.list_books()
        return BookListResponse(
            message="Books retrieved successfully",
            total_books=len(books),
            books=books
        )

    @app.get("/isbn/{isbn}", response_model=Book, tags=["Books"])
    async def get_book(isbn: str, ctx: CatalogContext = Depends(get_context)):
        """Get a single book by ISBN."""
        return unwrap(ctx.store.get_book(isbn))

    # Asynchronous search
    @app.get("/async/books", response_model=BookListResponse, tags=["Search"])
    async def fetch_books(ctx: CatalogContext = Depends(get_context)):
        """Retrieve every book through the asynchronous search path."""
        listing = unwrap(await await_search(ctx.search.fetch_all(), search_timeout))
        return BookListResponse(
            message="Books retrieved successfully",
            total_books=listing.total_books,
            books=listing.books
        )

    @app.get("/async/isbn/{isbn}", response_model=BookSearchResponse, tags=["Search"])
    async def search_isbn(isbn: str, ctx: CatalogContext = Depends(get_context)):
        """Find a book by ISBN."""
        book = unwrap(await await_search(ctx.search.find_by_isbn(isbn), search_timeout))
        return BookSearchResponse(message="Book retrieved successfully", book=book)

    @app.get("/async/author/{author}", response_model=AuthorSearchResponse, tags=["Search"])
    async def search_author(author: str, ctx: CatalogContext = Depends(get_context)):
        """Find books whose author contains the given name, ignoring case."""
        result = unwrap(await await_search(ctx.search.find_by_author(author), search_timeout))
        return AuthorSearchResponse(
            message="Books retrieved successfully",
            author_search=author,
            result=result
        )

    @app.get(
        "/async/title/{title}",
        response_model=TitleSearchResponse,
        responses={400: {"model": TitleSearchErrorResponse}, 404: {"model": TitleSearchErrorResponse}},
        tags=["Search"]
    )
    async def search_title(title: str, ctx: CatalogContext = Depends(get_context)):
        """Find books by title; exact matches are listed first."""
        found = await await_search(ctx.search.find_by_title(title), search_timeout)
        if not found.ok and found.error.kind in (ErrorKind.INVALID_INPUT, ErrorKind.NOT_FOUND):
            status_code = STATUS_BY_KIND[found.error.kind]
            invalid = found.error.kind == ErrorKind.INVALID_INPUT
            return JSONResponse(
                status_code=status_code,
                content=TitleSearchErrorResponse(
                    error=found.error.message,
                    status_code=status_code,
                    hint=TITLE_SEARCH_HINT if invalid else None,
                    suggestions=None if invalid else TITLE_SEARCH_SUGGESTIONS
                ).model_dump()
            )

        result = unwrap(found)
        if result.total_matches > 1:
            note = "Multiple matches found. Results are sorted with exact matches first."
        else:
            note = "Single match found."
        return TitleSearchResponse(
            message="Title search completed successfully",
            search_information=SearchInformation(
                query=title,
                matches_found=result.total_matches,
                note=note
            ),
            results=result.books
        )

    # Reviews
    @app.get("/review/{isbn}", response_model=ReviewListResponse, tags=["Reviews"])
    async def get_reviews(isbn: str, ctx: CatalogContext = Depends(get_context)):
        """List a book's reviews."""
        listing = unwrap(ctx.reviews.get_reviews(isbn))
        return ReviewListResponse(
            **listing.model_dump(),
            message=None if listing.review_count else "No reviews found for this book"
        )

    @app.put("/customer/auth/review/{isbn}", response_model=ReviewResponse, tags=["Reviews"])
    async def put_review(
        isbn: str,
        body: ReviewRequest,
        username: str = Depends(current_username),
        ctx: CatalogContext = Depends(get_context)
    ):
        """Add or replace the caller's review of a book."""
        confirmation = unwrap(ctx.reviews.put_review(username, isbn, body.review))
        return ReviewResponse(
            message="Review added/updated successfully",
            book=confirmation.book_title,
            review=confirmation.review
        )

    @app.delete("/customer/auth/review/{isbn}", response_model=ReviewResponse, tags=["Reviews"])
    async def delete_review(
        isbn: str,
        username: str = Depends(current_username),
        ctx: CatalogContext = Depends(get_context)
    ):
        """Delete the caller's review of a book."""
        confirmation = unwrap(ctx.reviews.delete_review(username, isbn))
        return ReviewResponse(message="Review deleted successfully", book=confirmation.book_title)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=True,
        log_level="info"
    )
