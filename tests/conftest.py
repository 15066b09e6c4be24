import os

# importing the app creates its tables; keep them off the local sqlite file
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from uniformops.backend import Backend
from uniformops.db import Base, get_backend
from uniformops.main import app
from uniformops.staging import StagingStore


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def backend(engine):
    return Backend(engine)


@pytest.fixture
def store(backend):
    return StagingStore(backend, chunk_size=2)


@pytest.fixture
def client(backend):
    app.dependency_overrides[get_backend] = lambda: backend
    yield TestClient(app)
    app.dependency_overrides.clear()


SAMPLE = """\
TRINUM - PAGO
Maria Silva 98 99999-8888
2 polos tam 6
1 bermuda tam 8

MAPLE BEAR metade
Mãe: Ana Paula
Contato 98 98888 7777
1 vestido t-4
"""


@pytest.fixture
def sample_text():
    return SAMPLE
