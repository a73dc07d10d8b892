"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from pydantic import BaseModel
from starlette.responses import Response

from sol_watch import __version__
from sol_watch.config.settings import AppConfig
from sol_watch.engine import WatchEngine
from sol_watch.errors.watch_errors import WatchError
from sol_watch.metrics.collector import WatcherMetrics
from sol_watch.tenants.plans import PlanTier

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sol_watch.ledger import LedgerClient
    from sol_watch.notifications.dispatcher import NotificationSender

logger = logging.getLogger(__name__)


class AddressRequest(BaseModel):
    """Body of ``POST /v1/tenants/{tenant_id}/addresses``."""

    address: str


class DestinationRequest(BaseModel):
    """Body of ``PUT /v1/tenants/{tenant_id}/destination``."""

    destination: str | None = None


class PlanRequest(BaseModel):
    """Body of ``PUT /v1/tenants/{tenant_id}/plan``."""

    plan: PlanTier


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle hooks."""
    engine: WatchEngine = app.state.engine
    try:
        await engine.initialize()
        logger.info("sol-watch engine started")
        yield
    finally:
        await engine.close()
        logger.info("sol-watch engine shut down")


def create_app(
    *,
    config: AppConfig | None = None,
    ledger: LedgerClient | None = None,
    sender: NotificationSender | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
        ledger: Optional ledger client replacing the JSON-RPC client.
        sender: Optional notification sender replacing the webhook sender.
    """
    if config is None:
        config = AppConfig()

    app = FastAPI(
        title="sol-watch",
        version=__version__,
        description="Solana wallet activity watcher",
        debug=config.debug,
        lifespan=_lifespan,
    )
    app.state.config = config
    app.state.metrics = WatcherMetrics() if config.metrics.enabled else None
    app.state.engine = WatchEngine(config, ledger=ledger, sender=sender, metrics=app.state.metrics)

    @app.exception_handler(WatchError)
    async def _watch_error_handler(request: Request, exc: WatchError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.code, "message": exc.message},
        )

    # -- Base routes --
    @app.get("/health", tags=["base"])
    async def health() -> dict[str, Any]:
        """Liveness plus the run history of scheduled jobs."""
        tm = app.state.engine.task_manager
        jobs = {name: tm.stats(name).as_dict() for name in tm.jobs} if tm else {}
        return {"status": "ok", "version": __version__, "jobs": jobs}

    @app.get("/metrics", tags=["base"], include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        metrics = app.state.metrics
        body = generate_latest(metrics.registry) if metrics else b""
        return Response(
            content=body,
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    # -- Watcher routes --
    @app.get("/v1/cursors", tags=["watcher"])
    async def cursors() -> dict[str, dict[str, str]]:
        """Stored cursors, keyed by tenant then address."""
        return await app.state.engine.cursors.snapshot()

    @app.post("/v1/cycle", tags=["watcher"])
    async def run_cycle() -> dict[str, Any]:
        """Run one watch cycle immediately."""
        report = await app.state.engine.cycle.run_watch_cycle()
        return vars(report)

    # -- Tenant routes --
    @app.get("/v1/tenants/{tenant_id}", tags=["tenants"])
    async def get_tenant(tenant_id: str) -> dict[str, Any]:
        """Plan, quota and watch-list of one tenant."""
        directory = app.state.engine.directory
        plan = await directory.get_plan(tenant_id)
        return {
            "tenant_id": tenant_id,
            "plan": plan.value,
            "max_addresses": plan.max_addresses,
            "command_cooldown": plan.command_cooldown,
            "addresses": await directory.list_watched_addresses(tenant_id),
            "has_destination": bool(await directory.resolve_notification_destination(tenant_id)),
        }

    @app.post("/v1/tenants/{tenant_id}/addresses", tags=["tenants"], status_code=201)
    async def add_address(tenant_id: str, body: AddressRequest) -> dict[str, Any]:
        """Watch a new address; its current history is skipped."""
        cursor = await app.state.engine.add_address(tenant_id, body.address)
        return {"address": body.address.strip(), "cursor": cursor}

    @app.delete("/v1/tenants/{tenant_id}/addresses/{address}", tags=["tenants"])
    async def remove_address(tenant_id: str, address: str) -> dict[str, bool]:
        """Stop watching an address and drop its cursor."""
        removed = await app.state.engine.remove_address(tenant_id, address)
        return {"removed": removed}

    @app.put("/v1/tenants/{tenant_id}/destination", tags=["tenants"])
    async def set_destination(tenant_id: str, body: DestinationRequest) -> dict[str, bool]:
        """Set or clear where the tenant's notifications are sent."""
        await app.state.engine.directory.set_destination(tenant_id, body.destination)
        return {"ok": True}

    @app.put("/v1/tenants/{tenant_id}/plan", tags=["tenants"])
    async def set_plan(tenant_id: str, body: PlanRequest) -> dict[str, str]:
        """Change the tenant's plan tier."""
        await app.state.engine.directory.set_plan(tenant_id, body.plan)
        return {"plan": body.plan.value}

    return app
