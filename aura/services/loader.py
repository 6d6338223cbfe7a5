"""Asynchronous unit loader backed by importlib.

A unit id such as ``widgets/todo_list/main`` names the module
``<base_package>.widgets.todo_list.main``. Resolving a unit imports that
module and awaits its optional ``setup(host)`` hook. Every module under the
base package that is first imported while a unit initializes is recorded
alongside it, so a later sweep can forget a unit together with the modules it
pulled in.
"""

from __future__ import annotations

import asyncio
import importlib
import inspect
import logging
import sys
from types import ModuleType
from typing import Any, Callable

from aura.domain.errors import LoadError, LoadErrorKind
from aura.domain.models import LoadedUnit, LoadState
from aura.repos.memory import LoadedUnitRepository

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 7.0  # seconds


class UnitLoader:
    """Resolves units once and keeps track of what is currently loaded."""

    def __init__(
        self,
        base_package: str = "aura",
        timeout: float = DEFAULT_TIMEOUT,
        units: LoadedUnitRepository | None = None,
        on_error: Callable[[LoadError], None] | None = None,
    ) -> None:
        self.base_package = base_package
        self.timeout = timeout
        self.units = units if units is not None else LoadedUnitRepository()
        self.on_error = on_error
        self.host: Any = None
        self._pending: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Ids
    # ------------------------------------------------------------------

    def module_name(self, unit_id: str) -> str:
        return f"{self.base_package}.{unit_id.replace('/', '.')}"

    def unit_id(self, module_name: str) -> str:
        return module_name[len(self.base_package) + 1 :].replace(".", "/")

    def _owns(self, module_name: str) -> bool:
        return module_name.startswith(self.base_package + ".")

    # ------------------------------------------------------------------
    # Loaded-unit set
    # ------------------------------------------------------------------

    def get(self, unit_id: str) -> LoadedUnit | None:
        return self.units.get(unit_id)

    def list_resolved_ids(self) -> list[str]:
        return self.units.list_ids()

    def forget(self, unit_id: str) -> None:
        """Drop a unit so the next resolution re-executes it from scratch."""
        unit = self.units.remove(unit_id)
        if unit is None:
            return
        sys.modules.pop(unit.module_name, None)
        logger.debug(f"Forgot unit {unit_id}")

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve(self, unit_id: str) -> ModuleType:
        """Return the initialized module for *unit_id*, loading it if needed.

        Raises:
            LoadError: the module is missing, failed to initialize, or did
                not finish within ``timeout`` seconds.
        """
        unit = self.units.get(unit_id)
        if unit is not None and unit.state == LoadState.READY:
            cached = sys.modules.get(unit.module_name)
            if cached is not None:
                return cached

        try:
            async with asyncio.timeout(self.timeout):
                return await self._execute(unit_id)
        except TimeoutError:
            raise LoadError(
                LoadErrorKind.TIMEOUT,
                [unit_id],
                f"Load timeout for unit: {unit_id}",
            ) from None

    def require(self, unit_id: str, callback: Callable[[ModuleType], Any]) -> asyncio.Task:
        """Schedule resolution of *unit_id* and call *callback* once it is ready.

        Must be called from a running event loop. Returns immediately with
        the scheduled task. Load errors go to ``on_error``; when the hook
        returns instead of raising, the callback is never called.
        """
        task = asyncio.get_running_loop().create_task(
            self._require(unit_id, callback), name=f"require:{unit_id}"
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _require(self, unit_id: str, callback: Callable[[ModuleType], Any]) -> Any:
        try:
            module = await self.resolve(unit_id)
        except LoadError as err:
            if self.on_error is None:
                raise
            self.on_error(err)
            return None
        return callback(module)

    async def _execute(self, unit_id: str) -> ModuleType:
        module_name = self.module_name(unit_id)
        self.units.add(LoadedUnit(id=unit_id, module_name=module_name))
        before = set(sys.modules)

        try:
            module = await self._initialize(unit_id, module_name)
        except BaseException:
            # Failed or cancelled: drop whatever this attempt imported so a
            # retry executes it again.
            evicted = self._imported_since(before)
            for name in evicted:
                sys.modules.pop(name, None)
            if evicted:
                logger.debug(f"Evicted {len(evicted)} modules after failed load of {unit_id}")
            raise

        self._record(unit_id, module, before)
        return module

    async def _initialize(self, unit_id: str, module_name: str) -> ModuleType:
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            if not _names_unit(exc.name, module_name):
                raise LoadError(
                    LoadErrorKind.INIT_FAILED,
                    [unit_id],
                    f"Unit {unit_id} failed to import: {exc}",
                ) from exc
            raise LoadError(
                LoadErrorKind.NOT_FOUND,
                [unit_id],
                f"No unit {unit_id} ({exc})",
            ) from exc
        except Exception as exc:
            raise LoadError(
                LoadErrorKind.INIT_FAILED,
                [unit_id],
                f"Unit {unit_id} failed to import: {exc}",
            ) from exc

        setup = getattr(module, "setup", None)
        if callable(setup):
            try:
                result = setup(self.host)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                raise LoadError(
                    LoadErrorKind.INIT_FAILED,
                    [unit_id],
                    f"Unit {unit_id} failed to initialize: {exc}",
                ) from exc
        return module

    def _imported_since(self, before: set[str]) -> list[str]:
        return sorted(name for name in set(sys.modules) - before if self._owns(name))

    def _record(self, unit_id: str, module: ModuleType, before: set[str]) -> None:
        recorded = 0
        for name in self._imported_since(before):
            if name == module.__name__:
                continue
            dep_id = self.unit_id(name)
            if self.units.get(dep_id) is None:
                self.units.add(
                    LoadedUnit(
                        id=dep_id,
                        module_name=name,
                        location=_location(sys.modules.get(name)),
                        state=LoadState.READY,
                    )
                )
                recorded += 1

        self.units.add(
            LoadedUnit(
                id=unit_id,
                module_name=module.__name__,
                location=_location(module),
                state=LoadState.READY,
            )
        )
        logger.info(f"Loaded unit {unit_id} ({recorded} dependent modules recorded)")


def _location(module: ModuleType | None) -> str | None:
    if module is None:
        return None
    return getattr(module, "__file__", None) or module.__name__


def _names_unit(missing: str | None, module_name: str) -> bool:
    """True if the missing module is *module_name* or one of its packages."""
    if not missing:
        return False
    return missing == module_name or module_name.startswith(missing + ".")
