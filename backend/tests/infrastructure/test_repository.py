"""SQLAlchemy Repository — validation, hashing hook, and integrity classification.

Tests run against the in-memory SQLite database from the root conftest.
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from api_scaffold.core.errors import (
    DatabaseError, UniqueConstraintError, ValidationFailedError,
)
from api_scaffold.core.merge import merge_attributes
from api_scaffold.infrastructure.repository import classify_integrity_error
from api_scaffold.infrastructure.security import verify_password

USER_PASSWORD = "correct horse battery staple"


async def test_create_stores_hash_not_plaintext(seed_user):
    assert seed_user.password != USER_PASSWORD
    assert await verify_password(USER_PASSWORD, seed_user.password)


async def test_create_assigns_id_and_timestamps(seed_user):
    assert seed_user.id is not None
    assert seed_user.created_at is not None
    assert seed_user.updated_at is not None


async def test_find_by_id_and_find_one(user_repository, seed_user):
    assert (await user_repository.find_by_id(seed_user.id)).email == seed_user.email
    assert (await user_repository.find_one(email="ada@example.com")).id == seed_user.id
    assert await user_repository.find_one(email="nobody@example.com") is None
    assert await user_repository.find_by_id(9999) is None


async def test_duplicate_email_raises_unique_constraint_error(user_repository, seed_user):
    # rollback expires seed_user
    email = seed_user.email
    with pytest.raises(UniqueConstraintError) as exc_info:
        await user_repository.create({"email": email, "name": "Someone", "password": "x"})
    assert exc_info.value.fields == ["email"]
    assert exc_info.value.details[0]["value"] == email


async def test_invalid_email_raises_validation_error(user_repository):
    with pytest.raises(ValidationFailedError) as exc_info:
        await user_repository.create({"email": "nope", "name": "A", "password": "x"})
    assert [d["path"] for d in exc_info.value.details] == ["email"]


async def test_validation_details_never_echo_passwords(user_repository):
    with pytest.raises(ValidationFailedError) as exc_info:
        await user_repository.create({"email": "a@example.com", "name": "A", "password": "x" * 80})
    detail = exc_info.value.details[0]
    assert detail["path"] == "password"
    assert detail["value"] is None


async def test_missing_fields_are_reported(user_repository):
    with pytest.raises(ValidationFailedError) as exc_info:
        await user_repository.create({})
    assert {d["path"] for d in exc_info.value.details} == {"email", "name", "password"}


async def test_update_without_password_change_keeps_hash(user_repository, seed_user):
    original_hash = seed_user.password
    merged = merge_attributes(seed_user.to_dict(), {"name": "Countess"})
    updated = await user_repository.update(seed_user, merged)
    assert updated.name == "Countess"
    assert updated.password == original_hash


async def test_update_with_new_password_rehashes(user_repository, seed_user):
    merged = merge_attributes(seed_user.to_dict(), {"password": "new password"})
    updated = await user_repository.update(seed_user, merged)
    assert updated.password != "new password"
    assert await verify_password("new password", updated.password)


async def test_update_to_taken_name_raises_unique_constraint_error(category_repository):
    await category_repository.create({"name": "books"})
    music = await category_repository.create({"name": "music"})
    with pytest.raises(UniqueConstraintError):
        await category_repository.update(
            music, merge_attributes(music.to_dict(), {"name": "books"}),
        )


async def test_destroy_removes_record(category_repository):
    category = await category_repository.create({"name": "books"})
    await category_repository.destroy(category)
    assert await category_repository.find_all() == []


async def test_find_all_orders_by_id(category_repository):
    for name in ("c", "a", "b"):
        await category_repository.create({"name": name})
    assert [c.name for c in await category_repository.find_all()] == ["c", "a", "b"]


async def test_driver_failure_raises_database_error(test_db, category_repository):
    await test_db.execute(text("DROP TABLE categories"))
    with pytest.raises(DatabaseError) as exc_info:
        await category_repository.find_all()
    assert exc_info.value.operation == "find_all"
    assert "categories" in exc_info.value.message


class _DriverError(Exception):
    pass


def _integrity_error(message):
    return IntegrityError("INSERT ...", {}, _DriverError(message))


def test_postgres_unique_violation_is_classified():
    error = classify_integrity_error(
        _integrity_error(
            'duplicate key value violates unique constraint "users_email_key"\n'
            "DETAIL:  Key (email)=(ada@example.com) already exists."
        ),
        {"email": "ada@example.com"},
    )
    assert isinstance(error, UniqueConstraintError)
    assert error.fields == ["email"]


def test_sqlite_not_null_violation_is_a_validation_error():
    error = classify_integrity_error(
        _integrity_error("NOT NULL constraint failed: users.name"), {},
    )
    assert isinstance(error, ValidationFailedError)
    assert error.details[0]["path"] == "name"


def test_postgres_not_null_violation_is_a_validation_error():
    error = classify_integrity_error(
        _integrity_error('null value in column "name" violates not-null constraint'), {},
    )
    assert isinstance(error, ValidationFailedError)
    assert error.details[0]["path"] == "name"
