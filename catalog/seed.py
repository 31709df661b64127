"""
Seed data for the catalog.

The catalog is seeded once at startup, either from the built-in set of
classic titles or from a JSON file mapping ISBN to ``{title, author}``,
with an optional ``reviews`` map of username to review text.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import structlog

logger = structlog.get_logger(__name__)

SeedData = Dict[str, Dict[str, Any]]

DEFAULT_BOOKS: SeedData = {
    "1": {"author": "Chinua Achebe", "title": "Things Fall Apart"},
    "2": {"author": "Hans Christian Andersen", "title": "Fairy tales"},
    "3": {"author": "Dante Alighieri", "title": "The Divine Comedy"},
    "4": {"author": "Unknown", "title": "The Epic Of Gilgamesh"},
    "5": {"author": "Unknown", "title": "The Book Of Job"},
    "6": {"author": "Unknown", "title": "One Thousand and One Nights"},
    "7": {"author": "Unknown", "title": "Njál's Saga"},
    "8": {"author": "Jane Austen", "title": "Pride and Prejudice"},
    "9": {"author": "Honoré de Balzac", "title": "Le Père Goriot"},
    "10": {"author": "Samuel Beckett", "title": "Molloy, Malone Dies, The Unnamable, the trilogy"},
}


def load_seed(seed_file: Optional[Union[str, Path]] = None) -> SeedData:
    """
    Load seed books.

    Args:
        seed_file: Optional JSON file; the built-in catalog is used when omitted

    Returns:
        Mapping of ISBN to book attributes, in file order

    Raises:
        ValueError: If an entry lacks a title or author
    """
    if not seed_file:
        return {isbn: dict(entry) for isbn, entry in DEFAULT_BOOKS.items()}

    path = Path(seed_file)
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    seed: SeedData = {}
    for isbn, entry in raw.items():
        if not entry.get("title") or not entry.get("author"):
            raise ValueError(f"Seed entry {isbn!r} must have a title and an author")
        book = {"title": str(entry["title"]), "author": str(entry["author"])}
        reviews = entry.get("reviews")
        if isinstance(reviews, dict):
            book["reviews"] = {str(user): str(text) for user, text in reviews.items()}
        seed[str(isbn)] = book

    logger.info("Seed file loaded", path=str(path), total_books=len(seed))
    return seed
