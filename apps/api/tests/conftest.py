import os
import uuid

# Settings are cached on first use; pin them before any intake import.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LLM_MODE"] = "mock"

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from intake.core import create_access_token
from intake.db.session import Base
from intake.db import models  # noqa: F401
from intake.dependencies import get_chat_provider_or_503, get_session_factory
from intake.main import app
from intake.providers import ChatProvider


class FakeChatProvider(ChatProvider):
    """Scripted provider: streams fixed chunks, optionally failing after them."""

    def __init__(self, chunks=None, summary="We covered your jobs.", fail_with=None):
        self.chunks = list(chunks if chunks is not None else ["Hello", " there!"])
        self.summary = summary
        self.fail_with = fail_with
        self.calls: list[tuple[str, list[dict]]] = []

    async def stream_reply(self, system_prompt, messages):
        self.calls.append((system_prompt, messages))
        for chunk in self.chunks:
            yield chunk
        if self.fail_with is not None:
            raise self.fail_with

    async def complete(self, system_prompt, messages, max_tokens=500):
        if self.fail_with is not None:
            raise self.fail_with
        return self.summary

    async def check(self):
        return {"ok": True}


def text_message(role: str, text: str) -> dict:
    return {"id": str(uuid.uuid4()), "role": role, "parts": [{"type": "text", "text": text}]}


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'intake.db'}")

    # pysqlite/aiosqlite need explicit BEGIN for SAVEPOINT support
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def auth_headers(user_id) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def fake_provider() -> FakeChatProvider:
    return FakeChatProvider()


@pytest.fixture
async def client(session_factory, fake_provider):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_chat_provider_or_503] = lambda: fake_provider
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
