"""
Unit tests for models, seed loading and configuration.
"""

import json

import pytest
from pydantic import ValidationError

from catalog.models import Book, ErrorKind, NotFoundCause, Result, ReviewListing
from catalog.seed import DEFAULT_BOOKS, load_seed
from catalog.store import CatalogStore
from utilities.config import CatalogConfig


class TestResult:
    """Test cases for the Result envelope."""

    def test_success(self):
        result = Result.success("alice")

        assert result.ok
        assert result.value == "alice"
        assert result.error is None

    def test_failure(self):
        result = Result.failure(ErrorKind.NOT_FOUND, "gone", cause=NotFoundCause.NO_REVIEWS)

        assert not result.ok
        assert result.value is None
        assert result.error.kind == ErrorKind.NOT_FOUND
        assert result.error.cause == NotFoundCause.NO_REVIEWS

    def test_json_serialization(self):
        data = Result.failure(ErrorKind.CONFLICT, "taken").model_dump(mode="json")

        assert data["error"] == {"kind": "conflict", "message": "taken", "cause": None}


class TestBook:

    def test_reviews_default_to_empty(self):
        book = Book(isbn="1", title="T", author="A")

        assert book.reviews == {}

    def test_title_is_required(self):
        with pytest.raises(ValidationError):
            Book(isbn="1", author="A")

    def test_review_listing_serialization(self):
        listing = ReviewListing(isbn="1", book_title="T", review_count=1, reviews={"alice": "ok"})

        assert listing.model_dump() == {
            "isbn": "1",
            "book_title": "T",
            "review_count": 1,
            "reviews": {"alice": "ok"},
        }


class TestSeed:

    def test_default_seed(self):
        seed = load_seed()

        assert list(seed) == list(DEFAULT_BOOKS)
        assert seed["1"] == {"author": "Chinua Achebe", "title": "Things Fall Apart"}

    def test_default_seed_is_a_copy(self):
        load_seed()["1"]["title"] = "Changed"

        assert DEFAULT_BOOKS["1"]["title"] == "Things Fall Apart"

    def test_seed_file(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps({
            "b": {"title": "Second", "author": "Y"},
            "a": {"title": "First", "author": "X"},
        }), encoding="utf-8")

        seed = load_seed(path)

        assert list(seed) == ["b", "a"]
        assert seed["a"] == {"title": "First", "author": "X"}

    def test_seed_file_entry_without_author(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps({"1": {"title": "Orphan"}}), encoding="utf-8")

        with pytest.raises(ValueError):
            load_seed(path)

    def test_seed_file_reviews_reach_the_store(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps({
            "1": {"title": "Reviewed", "author": "X", "reviews": {"bob": "ok"}},
            "2": {"title": "Unreviewed", "author": "Y"},
        }), encoding="utf-8")

        seed = load_seed(path)
        store = CatalogStore(seed)

        assert seed["1"]["reviews"] == {"bob": "ok"}
        assert "reviews" not in seed["2"]
        assert store.get_book("1").value.reviews == {"bob": "ok"}
        assert store.get_book("2").value.reviews == {}


class TestCatalogConfig:

    def test_defaults(self):
        settings = CatalogConfig()

        assert settings.search_delay_seconds == 1.0
        assert settings.session_ttl_minutes == 60
        assert settings.min_password_length == 6
        assert settings.get_session_ttl().total_seconds() == 3600

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CATALOG_SEARCH_DELAY_SECONDS", "0.25")
        monkeypatch.setenv("CATALOG_LOG_FORMAT", "CONSOLE")

        settings = CatalogConfig()

        assert settings.search_delay_seconds == 0.25
        assert settings.log_format == "console"

    @pytest.mark.parametrize("field,value", [
        ("search_delay_seconds", -1),
        ("search_delay_seconds", 31),
        ("session_ttl_minutes", 0),
        ("log_level", "LOUD"),
        ("log_format", "xml"),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            CatalogConfig(**{field: value})
