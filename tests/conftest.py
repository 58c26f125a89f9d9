import os

import pytest

os.environ["LOCAL_STORE"] = "1"

from fastapi.testclient import TestClient  # noqa: E402

from doubles import FakeAddressLookup, FakeDistanceLookup  # noqa: E402
from painel.api.deps import get_address_lookup, get_distance_lookup, get_gateway  # noqa: E402
from painel.core.session import SessionContext, get_session_context  # noqa: E402
from painel.gateway.memory import MemoryGateway  # noqa: E402
from painel.main import app  # noqa: E402
from painel.managers.base import SubmitGuard  # noqa: E402


@pytest.fixture()
def gateway():
    return MemoryGateway()


@pytest.fixture()
def guard():
    return SubmitGuard()


@pytest.fixture()
def session():
    return SessionContext(uid="tec-1", display_name="Ana Tecnica", email="ana@example.com")


@pytest.fixture()
def address_lookup():
    return FakeAddressLookup()


@pytest.fixture()
def distance_lookup():
    return FakeDistanceLookup()


@pytest.fixture()
def client(gateway, session, address_lookup, distance_lookup):
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_session_context] = lambda: session
    app.dependency_overrides[get_address_lookup] = lambda: address_lookup
    app.dependency_overrides[get_distance_lookup] = lambda: distance_lookup
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
