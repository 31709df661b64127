"""
Unit tests for the review manager.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from catalog.models import ErrorKind, NotFoundCause


@pytest.fixture
def reviews(context):
    return context.reviews


def test_put_review(reviews):
    result = reviews.put_review("alice", "001", "Great read")

    assert result.ok
    assert result.value.book_title == "Foo Bar"
    assert result.value.review == "Great read"


def test_put_review_overwrites(reviews):
    """A user's second review replaces the first."""
    reviews.put_review("alice", "001", "first take")
    reviews.put_review("alice", "001", "second take")

    listing = reviews.get_reviews("001").value
    assert listing.review_count == 1
    assert listing.reviews == {"alice": "second take"}


def test_reviews_from_different_users_coexist(reviews):
    reviews.put_review("alice", "001", "mine")
    reviews.put_review("bob", "001", "his")

    assert reviews.get_reviews("001").value.reviews == {"alice": "mine", "bob": "his"}


@pytest.mark.parametrize("username", [None, ""])
def test_put_review_requires_identity(reviews, username):
    assert reviews.put_review(username, "001", "text").error.kind == ErrorKind.UNAUTHENTICATED


@pytest.mark.parametrize("isbn,text", [("", "text"), (None, "text"), ("001", ""), ("001", None), ("001", "   ")])
def test_put_review_missing_fields(reviews, isbn, text):
    assert reviews.put_review("alice", isbn, text).error.kind == ErrorKind.INVALID_INPUT


def test_put_review_unknown_book(reviews):
    result = reviews.put_review("alice", "999", "text")

    assert result.error.kind == ErrorKind.NOT_FOUND
    assert result.error.cause == NotFoundCause.UNKNOWN_BOOK


def test_delete_review(reviews):
    reviews.put_review("alice", "001", "text")

    result = reviews.delete_review("alice", "001")

    assert result.ok
    assert result.value.book_title == "Foo Bar"
    assert "alice" not in reviews.get_reviews("001").value.reviews


def test_delete_review_requires_identity(reviews):
    assert reviews.delete_review(None, "001").error.kind == ErrorKind.UNAUTHENTICATED


def test_delete_never_reviewed_differs_from_unknown_book(reviews):
    reviews.put_review("bob", "001", "his")

    never_reviewed = reviews.delete_review("alice", "001")
    unknown_book = reviews.delete_review("alice", "999")

    assert never_reviewed.error.kind == ErrorKind.NOT_FOUND
    assert unknown_book.error.kind == ErrorKind.NOT_FOUND
    assert never_reviewed.error.cause == NotFoundCause.NO_USER_REVIEW
    assert unknown_book.error.cause == NotFoundCause.UNKNOWN_BOOK


def test_delete_from_book_without_reviews(reviews):
    result = reviews.delete_review("alice", "001")

    assert result.error.cause == NotFoundCause.NO_REVIEWS


def test_user_cannot_delete_another_users_review(reviews):
    reviews.put_review("bob", "001", "his")

    assert not reviews.delete_review("alice", "001").ok
    assert reviews.get_reviews("001").value.reviews == {"bob": "his"}


def test_get_reviews_empty_is_not_an_error(reviews):
    result = reviews.get_reviews("001")

    assert result.ok
    assert result.value.review_count == 0
    assert result.value.reviews == {}


def test_get_reviews_unknown_book(reviews):
    assert reviews.get_reviews("999").error.kind == ErrorKind.NOT_FOUND


def test_concurrent_puts_last_write_wins(reviews):
    """Racing writes for one (user, book) leave exactly one complete review."""
    texts = [f"review number {i}" for i in range(50)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda text: reviews.put_review("alice", "001", text), texts))

    assert all(result.ok for result in results)
    listing = reviews.get_reviews("001").value
    assert listing.review_count == 1
    assert listing.reviews["alice"] in texts


@pytest.mark.asyncio
async def test_mutations_proceed_while_search_is_suspended(context):
    """A suspended search does not hold up review writes."""
    context.search.delay_seconds = 0.2
    pending = asyncio.ensure_future(context.search.find_by_title("foo"))
    await asyncio.sleep(0)

    assert context.reviews.put_review("alice", "001", "Great read").ok
    assert not pending.done()

    result = await pending
    assert result.value.books[0].reviews == {"alice": "Great read"}


def test_review_lifecycle_scenario(catalog_settings, clock):
    """Register, log in, review, list, delete and list again."""
    from catalog.context import build_context

    ctx = build_context(catalog_settings, seed={"001": {"title": "Foo Bar", "author": "Ann"}}, clock=clock)

    assert ctx.users.register("alice", "secret1").ok
    session = ctx.sessions.login("alice", "secret1").value
    username = ctx.sessions.resolve(session.token).value

    assert ctx.reviews.put_review(username, "001", "Great read").ok
    listing = ctx.reviews.get_reviews("001").value
    assert listing.review_count == 1
    assert listing.reviews == {"alice": "Great read"}

    assert ctx.reviews.delete_review(username, "001").ok
    listing = ctx.reviews.get_reviews("001").value
    assert listing.review_count == 0
    assert listing.reviews == {}
