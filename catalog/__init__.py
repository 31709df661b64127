"""
In-memory bookstore catalog core.

This package contains:
- Catalog store of seeded books and their reviews
- User directory and session authority
- Asynchronous search by ISBN, author and title
- Review manager enforcing one review per user per book
"""

__version__ = "1.0.0"
