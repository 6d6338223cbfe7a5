"""Application core: channel mediator with lazy unit activation.

Publishing to a channel nobody listens on yet loads the unit derived from the
channel name (``todoList`` -> ``widgets/todo_list/main``) and replays the
event to whatever that unit subscribed. ``stop`` reverses this by forgetting
every loaded unit under the channel's namespace path.
"""

from __future__ import annotations

import asyncio
import logging
from types import ModuleType
from typing import Any, Callable

from aura.domain.bus import ChannelBus
from aura.domain.errors import LoadError, LoadErrorKind
from aura.domain.models import DEFAULT_NAMESPACE, Region, UnitId, sweeps
from aura.repos.memory import RegionRepository
from aura.services.loader import UnitLoader

logger = logging.getLogger(__name__)


class Mediator:
    """Owns the channel registry and drives the unit loader."""

    def __init__(
        self,
        loader: UnitLoader | None = None,
        regions: RegionRepository | None = None,
        bus: ChannelBus | None = None,
        namespace: str = DEFAULT_NAMESPACE,
        delimiter: str = "_",
    ) -> None:
        self.loader = loader if loader is not None else UnitLoader()
        self.regions = regions if regions is not None else RegionRepository()
        self.bus = bus if bus is not None else ChannelBus()
        self.namespace = namespace
        self.delimiter = delimiter

        self.loader.host = self
        self.loader.on_error = self.on_load_error

    def unit_for(self, channel: str) -> UnitId:
        return UnitId.for_channel(channel, self.namespace, self.delimiter)

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    def subscribe(self, channel: str, fn: Callable, context: Any = None) -> None:
        self.bus.subscribe(channel, fn, context)

    def publish(self, channel: str, *args: Any) -> asyncio.Task | None:
        """Call every subscriber of *channel* with *args*.

        With no subscribers this is :meth:`start` and returns its task.
        A subscriber that raises stops the remaining ones from running.
        """
        if not self.bus.has_subscribers(channel):
            return self.start(channel, *args)

        logger.debug(f"Publishing to {channel}")
        self.bus.dispatch(channel, *args)
        return None

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    def start(self, channel: str, *args: Any) -> asyncio.Task:
        """Load the unit behind *channel*, then replay *args* to its subscribers.

        Returns the scheduled load task right away. Concurrent starts for the
        same channel are not merged.
        """
        unit = self.unit_for(channel)
        logger.info(f"Starting {unit.main} for channel {channel}")

        def replay(_module: ModuleType) -> None:
            # A unit that never subscribed leaves nothing to call.
            self.bus.dispatch(channel, *args)

        return self.loader.require(unit.main, replay)

    def stop(self, channel: str, element: str | Region | None = None, *rest: Any) -> list[str]:
        """Forget every unit under *channel*'s path and detach *element*.

        Returns the forgotten unit ids. Subscribers already registered on the
        channel stay in place.
        """
        unit = self.unit_for(channel)
        forgotten = self.unload(unit.path)
        self.regions.detach(element)
        logger.info(f"Stopped {unit.path}")
        return forgotten

    def unload(self, channel_prefix: str) -> list[str]:
        """Forget every loaded unit whose id contains *channel_prefix*.

        Shared dependencies are not tracked; anything under the prefix is
        assumed to belong to that unit alone.
        """
        forgotten = [
            unit_id
            for unit_id in self.loader.list_resolved_ids()
            if sweeps(channel_prefix, unit_id)
        ]
        for unit_id in forgotten:
            self.loader.forget(unit_id)

        if forgotten:
            logger.info(f"Unloaded {len(forgotten)} units matching {channel_prefix}")
        return forgotten

    # ------------------------------------------------------------------
    # Loader errors
    # ------------------------------------------------------------------

    def on_load_error(self, err: LoadError) -> None:
        if err.kind == LoadErrorKind.TIMEOUT:
            logger.warning(f"Could not load unit {', '.join(err.unit_ids)}")
            return

        # Reset the failed unit so a retry starts clean.
        if err.failed_id is not None:
            self.loader.forget(err.failed_id)
        logger.error(f"Failed to load unit {err.failed_id}: {err}")
        raise err
