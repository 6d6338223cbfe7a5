"""Shared fixtures: throwaway unit packages written under tmp_path."""

from __future__ import annotations

import importlib
import sys
import textwrap

import pytest

from aura.domain.mediator import Mediator
from aura.services.loader import UnitLoader

PACKAGE = "demo_units"


def _purge() -> None:
    for name in [n for n in sys.modules if n == PACKAGE or n.startswith(PACKAGE + ".")]:
        del sys.modules[name]


@pytest.fixture()
def write_unit(tmp_path, monkeypatch):
    """Return ``write(module_path, source)`` for modules under ``demo_units``.

    ``module_path`` uses unit-id form, e.g. ``widgets/todo_list/main``.
    """
    (tmp_path / PACKAGE).mkdir()
    monkeypatch.syspath_prepend(str(tmp_path))
    _purge()

    def write(module_path: str, source: str):
        path = (tmp_path / PACKAGE).joinpath(*module_path.split("/")).with_suffix(".py")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source))
        importlib.invalidate_caches()
        return path

    yield write
    _purge()


@pytest.fixture()
def journal(write_unit):
    """A ``demo_units.journal`` module whose ``entries`` list units append to.

    Imported up front so it is never recorded as part of a unit.
    """
    write_unit("journal", "entries = []\n")
    return importlib.import_module(f"{PACKAGE}.journal")


@pytest.fixture()
def loader() -> UnitLoader:
    return UnitLoader(base_package=PACKAGE, timeout=1.0)


@pytest.fixture()
def mediator(loader) -> Mediator:
    return Mediator(loader=loader)
