"""
Integration tests for the HTTP API.

The aiohttp application runs in-process with a fake session factory;
repositories or services are replaced per test.
"""

import random
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from api.app import create_app
from api.initialization.services import SharedServices
from app.models.conversion_rate import ConversionRate
from app.models.level import Level
from app.services.conversion.price_oracle import PriceOracleClient
from app.services.conversion.rate_store import ConversionRateStore
from app.services.reward.animation_completion import AnimationCompletionResult
from app.services.reward.distribution_engine import RewardDistributionEngine
from app.utils.exceptions import TierTooLowError
from app.utils.security import issue_access_token


class FakeSessionMaker:
    """Session factory yielding one shared mock session."""

    def __init__(self, session) -> None:
        self.session = session

    def __call__(self):
        return self

    async def __aenter__(self):
        return self.session

    async def __aexit__(self, *exc_info):
        return False


@pytest.fixture
def rate_source(rates):
    source = AsyncMock()
    source.load_rates = AsyncMock(return_value=dict(rates))
    return source


@pytest.fixture
def app(mock_session, rate_source):
    services = SharedServices(
        price_oracle=PriceOracleClient(base_url="http://127.0.0.1:1"),
        rate_store=ConversionRateStore(rate_source, ttl_seconds=300),
        distribution_engine=RewardDistributionEngine(rng=random.Random(0)),
    )
    return create_app(
        session_maker=FakeSessionMaker(mock_session),
        services=services,
        run_background_jobs=False,
    )


@pytest_asyncio.fixture
async def client(app):
    async with TestClient(TestServer(app)) as client:
        yield client


def _headers(user_id=1, is_admin=False):
    token = issue_access_token(user_id, is_admin=is_admin)
    return {"Authorization": f"Bearer {token}"}


class TestHealth:
    """Health endpoints."""

    @pytest.mark.asyncio
    async def test_liveness(self, client):
        response = await client.get("/health/live")
        assert response.status == 200
        assert (await response.json())["alive"] is True

    @pytest.mark.asyncio
    async def test_health_without_scheduler(self, client):
        response = await client.get("/health")
        body = await response.json()

        assert response.status == 200
        assert body["status"] == "healthy"
        assert body["scheduler"]["enabled"] is False
        assert body["rate_cache_warm"] is False

    @pytest.mark.asyncio
    async def test_readiness_checks_database(self, client, mock_session):
        response = await client.get("/health/ready")
        assert response.status == 200
        mock_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_readiness_database_down(self, client, mock_session):
        mock_session.execute.side_effect = ConnectionRefusedError()
        response = await client.get("/health/ready")
        assert response.status == 503


class TestAuthAndErrors:
    """Authentication and error envelopes."""

    @pytest.mark.asyncio
    async def test_tiers_are_public(self, client):
        response = await client.get("/api/tiers")
        body = await response.json()

        assert response.status == 200
        assert body["success"] is True
        assert len(body["data"]) == 5

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/api/tiers/me")
        body = await response.json()

        assert response.status == 401
        assert body == {"success": False, "message": "Missing bearer token"}

    @pytest.mark.asyncio
    async def test_invalid_token(self, client):
        response = await client.get(
            "/api/conversion-rates", headers={"Authorization": "Bearer nope"}
        )
        assert response.status == 401

    @pytest.mark.asyncio
    async def test_admin_route_rejects_user(self, client):
        response = await client.put(
            "/api/conversion-rates",
            json={"rates": {"BTC": 1}},
            headers=_headers(is_admin=False),
        )
        body = await response.json()

        assert response.status == 403
        assert body["success"] is False

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/nothing-here", headers=_headers())
        body = await response.json()

        assert response.status == 404
        assert body["success"] is False

    @pytest.mark.asyncio
    async def test_invalid_json_body(self, client):
        response = await client.post(
            "/api/users/mark-animation-watched",
            data="{not json",
            headers=_headers(),
        )
        assert response.status == 400

    @pytest.mark.asyncio
    async def test_unexpected_error_is_hidden(self, client, monkeypatch):
        handler = MagicMock()
        handler.return_value.mark_animation_watched = AsyncMock(
            side_effect=KeyError("secret detail")
        )
        monkeypatch.setattr(
            "api.handlers.users.AnimationCompletionHandler", handler
        )

        response = await client.post(
            "/api/users/mark-animation-watched",
            json={"level": 1},
            headers=_headers(),
        )
        body = await response.json()

        assert response.status == 500
        assert body["message"] == "Internal server error"


class TestMarkAnimationWatched:
    """POST /api/users/mark-animation-watched"""

    @pytest.mark.asyncio
    async def test_reward_added(self, client, monkeypatch):
        handler = MagicMock()
        handler.return_value.mark_animation_watched = AsyncMock(
            return_value=AnimationCompletionResult(
                level=2,
                reward_added=True,
                reward_amount=Decimal("55"),
                new_balance=Decimal("60"),
            )
        )
        monkeypatch.setattr(
            "api.handlers.users.AnimationCompletionHandler", handler
        )

        response = await client.post(
            "/api/users/mark-animation-watched",
            json={"level": 2},
            headers=_headers(user_id=9),
        )
        body = await response.json()

        assert response.status == 200
        assert body["message"] == "Animation marked as watched and reward added"
        assert body["data"]["rewardAmount"] == 55.0
        handler.return_value.mark_animation_watched.assert_awaited_once_with(9, 2)

    @pytest.mark.asyncio
    async def test_already_watched(self, client, monkeypatch):
        handler = MagicMock()
        handler.return_value.mark_animation_watched = AsyncMock(
            return_value=AnimationCompletionResult(
                level=1,
                reward_added=False,
                reward_amount=Decimal("10"),
                new_balance=Decimal("10"),
            )
        )
        monkeypatch.setattr(
            "api.handlers.users.AnimationCompletionHandler", handler
        )

        response = await client.post(
            "/api/users/mark-animation-watched",
            json={"level": 1},
            headers=_headers(),
        )
        body = await response.json()

        assert body["message"] == "Animation already watched"
        assert body["data"]["rewardAdded"] is False

    @pytest.mark.asyncio
    async def test_tier_too_low(self, client, monkeypatch):
        handler = MagicMock()
        handler.return_value.mark_animation_watched = AsyncMock(
            side_effect=TierTooLowError(1, 4)
        )
        monkeypatch.setattr(
            "api.handlers.users.AnimationCompletionHandler", handler
        )

        response = await client.post(
            "/api/users/mark-animation-watched",
            json={"level": 4},
            headers=_headers(),
        )
        body = await response.json()

        assert response.status == 403
        assert "Tier 1 cannot access level 4" in body["message"]


class TestConversionRates:
    """Conversion rate routes with a mocked repository."""

    @pytest.fixture
    def repository(self, monkeypatch):
        repository = AsyncMock()
        monkeypatch.setattr(
            "app.services.conversion.rate_service.ConversionRateRepository",
            MagicMock(return_value=repository),
        )
        return repository

    @pytest.mark.asyncio
    async def test_get_rate_default(self, client, repository):
        repository.get_by_network.return_value = None

        response = await client.get(
            "/api/conversion-rates/trx", headers=_headers()
        )
        body = await response.json()

        assert body["data"]["network"] == "TRON"
        assert body["data"]["isDefault"] is True

    @pytest.mark.asyncio
    async def test_admin_single_update(self, client, repository):
        repository.upsert.return_value = ConversionRate(
            network="BTC", rate_to_usd=Decimal("50000"), is_auto=False
        )

        response = await client.put(
            "/api/conversion-rates/BTC",
            json={"rateToUSD": 50000},
            headers=_headers(is_admin=True),
        )
        body = await response.json()

        assert response.status == 200
        assert body["data"]["rateToUSD"] == 50000.0
        repository.upsert.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_refresh_with_oracle_down(self, client, repository):
        response = await client.post(
            "/api/conversion-rates/refresh", headers=_headers(is_admin=True)
        )
        assert response.status == 503


class TestLevels:
    """Level routes rendering user rewards."""

    @pytest.fixture
    def repositories(self, monkeypatch, make_user, level_template):
        level = Level(
            level=1,
            name=level_template["name"],
            description=level_template["description"],
            nodes=level_template["nodes"],
            edges=level_template["edges"],
            version="1.0.0",
        )
        levels = AsyncMock()
        levels.get_by_level.return_value = level
        levels.find_all_ordered.return_value = [level]
        users = AsyncMock()
        users.get_by_id.return_value = make_user(
            id=3, lvl1_network_rewards={"SOL": 4}
        )
        monkeypatch.setattr(
            "app.services.level_service.LevelRepository",
            MagicMock(return_value=levels),
        )
        monkeypatch.setattr(
            "app.services.level_service.UserRepository",
            MagicMock(return_value=users),
        )
        return levels, users

    @pytest.mark.asyncio
    async def test_level_rendered_for_own_user(self, client, repositories):
        response = await client.get(
            "/api/levels/1?userId=3", headers=_headers(user_id=3)
        )
        body = await response.json()

        sol = [
            node["data"]["transaction"]
            for node in body["data"]["nodes"]
            if node.get("data", {}).get("transaction", {}).get("currency") == "SOL"
        ]
        assert response.status == 200
        assert sol[0]["amount"] == 400.0

    @pytest.mark.asyncio
    async def test_template_without_user(self, client, repositories):
        response = await client.get("/api/levels", headers=_headers())
        body = await response.json()

        assert body["data"][0]["name"] == "Level 1"
        _, users = repositories
        users.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_user_requires_admin(self, client, repositories):
        response = await client.get(
            "/api/levels/1?userId=3", headers=_headers(user_id=4)
        )
        assert response.status == 403

    @pytest.mark.asyncio
    async def test_invalid_level(self, client, repositories):
        response = await client.get("/api/levels/9", headers=_headers())
        assert response.status == 400
