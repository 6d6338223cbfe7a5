"""Named-channel publish/subscribe registry."""

from __future__ import annotations

import types
from collections import defaultdict
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict


def method(fn: Callable, context: Any = None) -> Callable:
    """Return *fn* bound to *context*, or *fn* itself when there is none.

    The context arrives as ``self``. Passing a method that is already bound
    binds it a second time: it then receives *context* as an extra first
    positional argument after its own ``self``.
    """
    if context is None:
        return fn
    return types.MethodType(fn, context)


class Binding(BaseModel):
    """A subscriber callback together with the context it runs in."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    fn: Callable[..., Any]
    context: Any = None

    def __call__(self, *args: Any) -> Any:
        return method(self.fn, self.context)(*args)


class ChannelBus:
    """Ordered subscriber lists keyed by channel name.

    Subscribers are called synchronously in registration order. Subscribing
    the same callback twice registers it twice.
    """

    def __init__(self) -> None:
        self._channels: dict[str, list[Binding]] = defaultdict(list)

    def subscribe(self, channel: str, fn: Callable, context: Any = None) -> None:
        self._channels[channel].append(Binding(fn=fn, context=context))

    def subscribers(self, channel: str) -> list[Binding]:
        """Snapshot of the channel's bindings; empty for unknown channels."""
        return list(self._channels.get(channel, []))

    def has_subscribers(self, channel: str) -> bool:
        return bool(self._channels.get(channel))

    def dispatch(self, channel: str, *args: Any) -> None:
        for binding in self.subscribers(channel):
            binding(*args)

    def channels(self) -> dict[str, int]:
        return {name: len(bindings) for name, bindings in self._channels.items()}
