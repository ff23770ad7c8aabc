"""
Conversion rate handlers.

Read access for authenticated users, writes and oracle refresh for admins.
"""

from aiohttp import web

from api.context import (
    get_auth,
    open_session,
    rate_store,
    read_json,
    require_admin,
)
from api.responses import success_response
from app.services.conversion.rate_service import ConversionRateService
from app.utils.exceptions import ExternalServiceError
from app.utils.formatters import decimal_map_to_json


async def list_conversion_rates(request: web.Request) -> web.Response:
    """GET /api/conversion-rates"""
    get_auth(request)
    async with open_session(request) as session:
        service = ConversionRateService(session, rate_store(request))
        rates = await service.list_rates()
    return success_response(rates)


async def get_conversion_rate(request: web.Request) -> web.Response:
    """GET /api/conversion-rates/{network}"""
    get_auth(request)
    async with open_session(request) as session:
        service = ConversionRateService(session, rate_store(request))
        rate = await service.get_rate(request.match_info["network"])
    return success_response(rate)


async def update_conversion_rates(request: web.Request) -> web.Response:
    """PUT /api/conversion-rates  body: {"rates": {"BTC": 45000, ...}}"""
    auth = require_admin(request)
    body = await read_json(request)
    async with open_session(request) as session:
        service = ConversionRateService(session, rate_store(request))
        rates = await service.update_rates(body.get("rates"), auth.user_id)
    return success_response(rates, message="Conversion rates updated")


async def update_conversion_rate(request: web.Request) -> web.Response:
    """PUT /api/conversion-rates/{network}  body: {"rateToUSD": 45000}"""
    auth = require_admin(request)
    body = await read_json(request)
    async with open_session(request) as session:
        service = ConversionRateService(session, rate_store(request))
        rate = await service.update_single_rate(
            request.match_info["network"], body.get("rateToUSD"), auth.user_id
        )
    return success_response(rate, message="Conversion rate updated")


async def refresh_conversion_rates(request: web.Request) -> web.Response:
    """POST /api/conversion-rates/refresh"""
    require_admin(request)
    async with open_session(request) as session:
        service = ConversionRateService(session, rate_store(request))
        rates = await service.refresh_from_oracle(force=True)
    if rates is None:
        raise ExternalServiceError("Price oracle unavailable, rates unchanged")
    return success_response(
        decimal_map_to_json(rates), message="Conversion rates refreshed"
    )


def setup_routes(app: web.Application) -> None:
    """Register conversion rate routes."""
    app.router.add_get("/api/conversion-rates", list_conversion_rates)
    app.router.add_put("/api/conversion-rates", update_conversion_rates)
    app.router.add_post(
        "/api/conversion-rates/refresh", refresh_conversion_rates
    )
    app.router.add_get("/api/conversion-rates/{network}", get_conversion_rate)
    app.router.add_put(
        "/api/conversion-rates/{network}", update_conversion_rate
    )
