import pytest

from finance_app.db import database


@pytest.mark.asyncio
async def test_session_factory_is_created_once_with_its_engine():
    await database.close_db()
    try:
        factory = database.get_session_factory()

        assert factory is not None
        assert database.get_session_factory() is factory
        assert database.get_engine() is database._engine
        assert factory.kw["bind"] is database.get_engine()
    finally:
        await database.close_db()

    assert database._engine is None
    assert database._session_factory is None
