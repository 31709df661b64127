"""
FastAPI RESTful API for the Bookstore Catalog.

This module provides a REST API for:
- User registration and login
- Book catalog browsing and asynchronous search
- Bearer-token protected review management
"""
