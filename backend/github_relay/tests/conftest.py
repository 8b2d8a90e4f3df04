import pytest
from httpx import ASGITransport, AsyncClient

from github_relay.config.config import Settings
from github_relay.main import build_github_client, create_app

BASE_URL = "https://github.test"
USERNAME = "octocat"
TOKEN = "test-token"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        github_username=USERNAME,
        github_token=TOKEN,
        github_api_url=BASE_URL,
    )


@pytest.fixture
async def github_client(settings: Settings):
    client = build_github_client(settings)
    yield client
    await client.close()


@pytest.fixture
async def test_client(settings: Settings, github_client):
    """Inbound test client wired to a real GitHubClient pointed at BASE_URL."""
    app = create_app(settings)
    app.state.github_client = github_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
