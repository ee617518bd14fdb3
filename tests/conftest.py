from __future__ import annotations

import base64
import time
from dataclasses import dataclass

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import ASGITransport, AsyncClient
from jose import jwt
from starlette.testclient import TestClient

from orgchart.core.auth import jwks_cache
from orgchart.core.cache import TTLCache
from orgchart.core.dependencies import get_current_user, get_org_service, get_setup_service, get_teams_service
from orgchart.core.row_store import build_row, header_index
from orgchart.main import app
from orgchart.models.auth import UserInfo
from orgchart.services import sample_data
from orgchart.services.org_service import OrgService
from orgchart.services.personnel_reader import TEAM_LIST_HEADERS, PersonnelReader
from orgchart.services.setup_service import OrgSetupService
from orgchart.services.teams_service import TEAM_MAPPINGS_HEADERS, VACANT_HEADERS, TeamsService
from tests.fakes import FakeClock, InMemoryRowStore

TEST_TENANT_ID = "test-tenant-00000000-0000-0000-0000-000000000000"
TEST_CLIENT_ID = "test-client-00000000-0000-0000-0000-000000000000"
TEST_KID = "test-kid-1"


def _int_to_base64url(value: int) -> str:
    byte_length = (value.bit_length() + 7) // 8
    return base64.urlsafe_b64encode(value.to_bytes(byte_length, byteorder="big")).rstrip(b"=").decode("ascii")


@pytest.fixture(autouse=True)
def _auth_settings():
    from orgchart.core.config import settings

    original_tenant = settings.AZURE_AD_TENANT_ID
    original_client = settings.AZURE_AD_CLIENT_ID
    settings.AZURE_AD_TENANT_ID = TEST_TENANT_ID
    settings.AZURE_AD_CLIENT_ID = TEST_CLIENT_ID
    jwks_cache.clear()
    yield
    jwks_cache.clear()
    settings.AZURE_AD_TENANT_ID = original_tenant
    settings.AZURE_AD_CLIENT_ID = original_client


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def rsa_test_keys():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("utf-8")

    pub = private_key.public_key().public_numbers()
    jwk_dict = {
        "kty": "RSA",
        "kid": TEST_KID,
        "use": "sig",
        "alg": "RS256",
        "n": _int_to_base64url(pub.n),
        "e": _int_to_base64url(pub.e),
    }
    jwks_response = {"keys": [jwk_dict]}
    return private_pem, jwks_response


def _make_token(
    private_pem: str,
    *,
    oid: str = "test-oid-123",
    name: str = "Test User",
    email: str = "test@hive.com",
    roles: list[str] | None = None,
    expired: bool = False,
    audience: str = TEST_CLIENT_ID,
) -> str:
    now = int(time.time())
    claims = {
        "oid": oid,
        "name": name,
        "preferred_username": email,
        "roles": roles or [],
        "iss": f"https://login.microsoftonline.com/{TEST_TENANT_ID}/v2.0",
        "aud": audience,
        "exp": now - 3600 if expired else now + 3600,
        "iat": now - 60,
        "nbf": now - 60,
    }
    return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": TEST_KID})


@pytest.fixture
def mock_user_viewer():
    return UserInfo(id="viewer-1", name="Viewer User", email="viewer@hive.com", roles=["viewer"])


@pytest.fixture
def mock_user_admin():
    return UserInfo(id="admin-1", name="Admin User", email="admin@hive.com", roles=["admin"])


@pytest.fixture
def mock_user_editor():
    return UserInfo(id="editor-1", name="Editor User", email="editor@hive.com", roles=["org-editor"])


@dataclass
class OrgEnv:
    org_store: InMemoryRowStore
    team_list_store: InMemoryRowStore
    clock: FakeClock
    cache: TTLCache
    teams: TeamsService
    reader: PersonnelReader
    org: OrgService
    setup: OrgSetupService


def sample_sheets() -> tuple[dict, dict]:
    columns = header_index(TEAM_LIST_HEADERS)
    org_sheets = {
        "Team Mappings": [list(TEAM_MAPPINGS_HEADERS)] + [list(r) for r in sample_data.TEAM_MAPPINGS],
        "Vacant Positions": [list(VACANT_HEADERS)] + [list(r) for r in sample_data.VACANT_POSITIONS],
    }
    team_list_sheets = {
        "Team List": [list(TEAM_LIST_HEADERS)]
        + [build_row(columns, record) for record in sample_data.personnel_records()],
    }
    return org_sheets, team_list_sheets


def make_env(org_sheets: dict | None = None, team_list_sheets: dict | None = None) -> OrgEnv:
    org_store = InMemoryRowStore(org_sheets if org_sheets is not None else {})
    team_list_store = InMemoryRowStore(team_list_sheets if team_list_sheets is not None else {})
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    teams = TeamsService(org_store, cache)
    reader = PersonnelReader(team_list_store, cache)
    return OrgEnv(
        org_store=org_store,
        team_list_store=team_list_store,
        clock=clock,
        cache=cache,
        teams=teams,
        reader=reader,
        org=OrgService(reader, teams, cache),
        setup=OrgSetupService(org_store, team_list_store, cache),
    )


@pytest.fixture
def sample_env() -> OrgEnv:
    return make_env(*sample_sheets())


@pytest.fixture
def authenticated_client(mock_user_admin, sample_env):
    app.dependency_overrides[get_current_user] = lambda: mock_user_admin
    app.dependency_overrides[get_org_service] = lambda: sample_env.org
    app.dependency_overrides[get_teams_service] = lambda: sample_env.teams
    app.dependency_overrides[get_setup_service] = lambda: sample_env.setup
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def viewer_client(mock_user_viewer, sample_env):
    app.dependency_overrides[get_current_user] = lambda: mock_user_viewer
    app.dependency_overrides[get_org_service] = lambda: sample_env.org
    app.dependency_overrides[get_teams_service] = lambda: sample_env.teams
    app.dependency_overrides[get_setup_service] = lambda: sample_env.setup
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
