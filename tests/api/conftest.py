from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from adrelay.server import create_app
from adrelay.state.settings import AppSettings


@pytest.fixture
def client(app_settings: AppSettings):
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client
