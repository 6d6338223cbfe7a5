"""FastAPI application: inspection and control surface for the mediator."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException

from aura.config import Settings
from aura.domain.errors import LoadError, LoadErrorKind
from aura.domain.mediator import Mediator
from aura.domain.models import (
    ChannelInfo,
    LoadedUnit,
    PublishRequest,
    PublishResponse,
    Region,
    StopRequest,
    UnloadRequest,
    UnloadResponse,
)
from aura.logging_config import setup_logging
from aura.repos.memory import LoadedUnitRepository, RegionRepository
from aura.services.loader import UnitLoader

settings = Settings.from_env()
setup_logging(settings.log_level)

app = FastAPI(title="Aura Mediator")

# ── Singletons (created at import time for simplicity) ────────────────
unit_repo = LoadedUnitRepository()
region_repo = RegionRepository()
loader = UnitLoader(
    base_package=settings.base_package,
    timeout=settings.load_timeout,
    units=unit_repo,
)
mediator = Mediator(
    loader=loader,
    regions=region_repo,
    namespace=settings.widgets_namespace,
    delimiter=settings.delimiter,
)


def _http_error(err: LoadError) -> HTTPException:
    status = 404 if err.kind == LoadErrorKind.NOT_FOUND else 500
    return HTTPException(status_code=status, detail=str(err))


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/channels", response_model=list[ChannelInfo])
def list_channels() -> list[ChannelInfo]:
    """Return every known channel with its subscriber count."""
    return [
        ChannelInfo(name=name, subscribers=count)
        for name, count in mediator.bus.channels().items()
    ]


@app.post("/channels/{channel}/publish", response_model=PublishResponse)
async def publish(channel: str, body: PublishRequest) -> PublishResponse:
    """Publish to a channel, waiting for the unit to load on a cold start."""
    task = mediator.publish(channel, *body.args)
    if task is not None:
        try:
            await task
        except LoadError as err:
            raise _http_error(err) from err

    return PublishResponse(
        channel=channel,
        cold_start=task is not None,
        subscribers=len(mediator.bus.subscribers(channel)),
    )


@app.post("/channels/{channel}/stop")
def stop(channel: str, body: StopRequest) -> dict:
    """Unload a channel's unit namespace and detach its region."""
    unloaded = mediator.stop(channel, body.element)
    return {"status": "stopped", "unloaded": unloaded}


@app.post("/units/unload", response_model=UnloadResponse)
def unload(body: UnloadRequest) -> UnloadResponse:
    """Forget every loaded unit whose id contains the given prefix."""
    return UnloadResponse(unloaded=mediator.unload(body.prefix))


@app.get("/units", response_model=list[LoadedUnit])
def list_units() -> list[LoadedUnit]:
    """Return all units the loader currently knows about."""
    return unit_repo.list_all()


@app.get("/regions", response_model=list[Region])
def list_regions() -> list[Region]:
    """Return the regions currently attached."""
    return region_repo.list_all()
