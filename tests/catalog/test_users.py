"""
Unit tests for user registration.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from catalog.models import ErrorKind
from catalog.users import UserDirectory


@pytest.fixture
def users():
    return UserDirectory()


def test_register(users):
    result = users.register("alice", "secret1")

    assert result.ok
    assert result.value == "alice"
    assert users.count() == 1
    assert users.get_user("alice").password == "secret1"


@pytest.mark.parametrize("password", ["secret1", "different", "another-one"])
def test_duplicate_username_conflicts_regardless_of_password(users, password):
    users.register("alice", "secret1")

    result = users.register("alice", password)

    assert result.error.kind == ErrorKind.CONFLICT
    assert users.count() == 1


@pytest.mark.parametrize("password", ["", "a", "12345", "abcde"])
def test_short_password_is_invalid(users, password):
    result = users.register("alice", password)

    assert result.error.kind == ErrorKind.INVALID_INPUT
    assert users.count() == 0


@pytest.mark.parametrize("username,password", [
    (None, "secret1"),
    ("", "secret1"),
    ("alice", None),
])
def test_missing_fields_are_invalid(users, username, password):
    result = users.register(username, password)

    assert result.error.kind == ErrorKind.INVALID_INPUT
    assert "required" in result.error.message


def test_six_character_password_is_accepted(users):
    assert users.register("alice", "123456").ok


def test_custom_min_password_length():
    users = UserDirectory(min_password_length=10)

    result = users.register("alice", "secret1")

    assert result.error.kind == ErrorKind.INVALID_INPUT
    assert "10 characters" in result.error.message


def test_is_username_available(users):
    assert users.is_username_available("alice")
    assert not users.is_username_available("")
    assert not users.is_username_available(None)

    users.register("alice", "secret1")
    assert not users.is_username_available("alice")


def test_concurrent_registration_admits_one_user(users):
    """Racing registrations of one username let exactly one through."""
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda i: users.register("alice", f"password{i}"), range(32)))

    assert sum(1 for result in results if result.ok) == 1
    assert all(result.error.kind == ErrorKind.CONFLICT for result in results if not result.ok)
    assert users.count() == 1
