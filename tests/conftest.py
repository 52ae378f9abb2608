"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test, no .env file)
  - Provide a seeded InMemoryGateway
  - Provide a TestClient wired to that gateway via dependency_overrides

Collaborators:
  - pytest: Test framework
  - fastapi.testclient: HTTP tests
  - ocs_sharing.infrastructure.gateway.InMemoryGateway

Notes:
  - Fixtures are auto-discovered by pytest
  - Use @pytest.fixture(scope="function") for per-test isolation
"""

import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")

from ocs_sharing.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from ocs_sharing.domain.entities import ResourceType  # noqa: E402
from ocs_sharing.infrastructure.gateway import InMemoryGateway  # noqa: E402

FIXED_NOW = 1_600_000_000


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Gateway Fixtures
# ============================================================================


@pytest.fixture
def gateway() -> InMemoryGateway:
    """
    R: Gateway seeded with two local users, one remote user and a small tree.

    Tree (home /home, owner admin):
      /home/file.txt   (file)
      /home/folder     (folder)
    """
    gw = InMemoryGateway(current_user="admin", home="/home", clock=lambda: FIXED_NOW)
    gw.add_user("einstein", display_name="Albert Einstein", mail="einstein@example.org")
    gw.add_user("marie", display_name="Marie Curie")
    gw.add_resource("/home/file.txt", ResourceType.FILE, "text/plain")
    gw.add_resource("/home/folder", ResourceType.CONTAINER, "httpd/unix-directory")
    gw.add_provider("cern.example.org", name="CERN")
    gw.add_remote_user("richard", "cern.example.org", display_name="Richard Feynman")
    return gw


# ============================================================================
# HTTP Fixtures
# ============================================================================


@pytest.fixture
def app(gateway):
    from ocs_sharing.api.main import create_app
    from ocs_sharing.container import get_gateway_client

    application = create_app()
    application.dependency_overrides[get_gateway_client] = lambda: gateway
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)
