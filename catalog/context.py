"""
Process-scoped wiring of the catalog components.
"""

from datetime import datetime
from typing import Callable, Optional

import structlog

from catalog.reviews import ReviewManager
from catalog.search import SearchEngine
from catalog.seed import SeedData, load_seed
from catalog.sessions import SessionAuthority, utc_now
from catalog.store import CatalogStore
from catalog.users import UserDirectory
from utilities.config import CatalogConfig

logger = structlog.get_logger(__name__)


class CatalogContext:
    """The single set of stores and services shared by one process."""

    def __init__(
        self,
        store: CatalogStore,
        users: UserDirectory,
        sessions: SessionAuthority,
        search: SearchEngine,
        reviews: ReviewManager
    ):
        self.store = store
        self.users = users
        self.sessions = sessions
        self.search = search
        self.reviews = reviews


def build_context(
    settings: CatalogConfig,
    seed: Optional[SeedData] = None,
    clock: Callable[[], datetime] = utc_now
) -> CatalogContext:
    """
    Construct every component once and wire them together.

    Args:
        settings: Core configuration
        seed: Seed books; loaded from ``settings.seed_file`` when omitted
        clock: Time source handed to the session authority
    """
    if seed is None:
        seed = load_seed(settings.seed_file)

    store = CatalogStore(seed)
    users = UserDirectory(min_password_length=settings.min_password_length)
    context = CatalogContext(
        store=store,
        users=users,
        sessions=SessionAuthority(users, ttl=settings.get_session_ttl(), clock=clock),
        search=SearchEngine(store, delay_seconds=settings.search_delay_seconds),
        reviews=ReviewManager(store)
    )

    logger.info(
        "Catalog context ready",
        total_books=len(store),
        search_delay_seconds=settings.search_delay_seconds,
        session_ttl_minutes=settings.session_ttl_minutes
    )
    return context
