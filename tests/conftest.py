import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

import psiconorm.models  # noqa: F401,E402
from psiconorm.core.errors import NormativeStoreUnavailableError
from psiconorm.db.database import Base, SessionLocal, engine
from psiconorm.db.repositories import InMemoryNormativeStore
from psiconorm.engine.norms.factory import build_engine_for_store


class FailingStore:
    """Store whose reads fail; ``fail_listing``/``fail_generic``/``fail_rows`` pick which."""

    def __init__(self, inner=None, *, fail_listing=True, fail_generic=True, fail_rows=False):
        self.inner = inner or InMemoryNormativeStore()
        self.fail_listing = fail_listing
        self.fail_generic = fail_generic
        self.fail_rows = fail_rows
        self.calls = []

    def list_active_tables(self, instrument, criterion_filter=None):
        self.calls.append(("list_active_tables", criterion_filter))
        generic = criterion_filter is not None and criterion_filter.generic_only
        if (generic and self.fail_generic) or (not generic and self.fail_listing):
            raise NormativeStoreUnavailableError(detail={"instrument": str(instrument)})
        return self.inner.list_active_tables(instrument, criterion_filter)

    def list_rows(self, table_id, subscale=None):
        self.calls.append(("list_rows", table_id))
        if self.fail_rows:
            raise NormativeStoreUnavailableError(detail={"table_id": table_id})
        return self.inner.list_rows(table_id, subscale)


@pytest.fixture()
def store():
    return InMemoryNormativeStore()


@pytest.fixture()
def scoring_engine(store):
    return build_engine_for_store(store)


@pytest.fixture()
def failing_store_factory():
    return FailingStore


@pytest.fixture()
def db_setup():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session(db_setup):
    with SessionLocal() as db:
        yield db


@pytest.fixture()
def client(db_setup):
    from psiconorm.main import app

    return TestClient(app)
