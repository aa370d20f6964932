from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

import access.infrastructure.persistence  # noqa: F401  (registers tables)
from shared.config import Settings
from shared.infrastructure.database.base_model import Base
from shared.infrastructure.database.session import DatabaseSessionFactory


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        database_url=sqlite_url(tmp_path / "access.db"),
        log_level="WARNING",
        log_json=False,
    )


@pytest.fixture
def seed(settings):
    """Synchronously insert ORM rows into the test database before the app starts."""
    engine = create_engine(settings.database_url.replace("+aiosqlite", ""))
    Base.metadata.create_all(engine)

    def _seed(*models):
        with Session(engine, expire_on_commit=False) as session:
            session.add_all(models)
            session.commit()

    yield _seed
    engine.dispose()


@pytest_asyncio.fixture
async def db(settings):
    factory = DatabaseSessionFactory(settings.database_url)
    await factory.create_schema()
    yield factory
    await factory.close()
