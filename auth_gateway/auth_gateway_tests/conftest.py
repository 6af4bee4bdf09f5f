import httpx
import pytest
from fastapi.testclient import TestClient

from auth_gateway.auth_gateway.auth_service.data_service import DataServiceClient
from auth_gateway.auth_gateway.auth_service.main import create_app

from .fakes import FakeDataService, make_settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def fake_data_service():
    return FakeDataService()


@pytest.fixture
def data_service(settings, fake_data_service):
    client = DataServiceClient.from_settings(settings, transport=httpx.MockTransport(fake_data_service))
    yield client
    client.close()


@pytest.fixture
def client(settings, data_service):
    app = create_app(settings, data_service=data_service)
    with TestClient(app) as c:
        yield c
