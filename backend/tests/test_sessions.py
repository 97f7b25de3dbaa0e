"""
Tests for the session store.
"""

import pytest

from app.core.errors import UnauthorizedError
from app.services import session_service


@pytest.mark.asyncio
async def test_create_generates_hex_token(db_session, admin_user):
    session = await session_service.create(db_session, admin_user.id, admin_user.company_id)
    assert len(session.token) == 96
    int(session.token, 16)  # hex only
    assert session.user.username == admin_user.username


@pytest.mark.asyncio
async def test_tokens_are_unique(db_session, admin_user):
    first = await session_service.create(db_session, admin_user.id, admin_user.company_id)
    second = await session_service.create(db_session, admin_user.id, admin_user.company_id)
    assert first.token != second.token


@pytest.mark.asyncio
async def test_find_valid_by_token_unknown(db_session):
    with pytest.raises(UnauthorizedError):
        await session_service.find_valid_by_token(db_session, "0" * 96)


@pytest.mark.asyncio
async def test_delete_by_token_is_idempotent(db_session, admin_user):
    session = await session_service.create(db_session, admin_user.id, admin_user.company_id)

    assert await session_service.delete_by_token(db_session, session.token) == 1
    assert await session_service.delete_by_token(db_session, session.token) == 0


@pytest.mark.asyncio
async def test_delete_all_by_user(db_session, admin_user, manager_user):
    for _ in range(3):
        await session_service.create(db_session, admin_user.id, admin_user.company_id)
    kept = await session_service.create(db_session, manager_user.id, manager_user.company_id)

    assert await session_service.delete_all_by_user(db_session, admin_user.id) == 3
    assert await session_service.delete_all_by_user(db_session, admin_user.id) == 0

    still_valid = await session_service.find_valid_by_token(db_session, kept.token)
    assert still_valid.id == kept.id
