"""String helpers for deriving unit identifiers from channel names."""

from __future__ import annotations

import re

_UPPER = re.compile(r"([A-Z])")
_CAMEL_BOUNDARY = re.compile(r"(?:^|[-_])(\w)")


def decamelize(camel_case: str, delimiter: str = "_") -> str:
    """Insert *delimiter* before every upper-case letter, then lower-case.

    ``decamelize("todoList")`` gives ``"todo_list"``. A leading capital also
    gets a delimiter (``"TodoList"`` -> ``"_todo_list"``). Strings without
    upper-case letters come back unchanged.
    """
    return _UPPER.sub(lambda m: delimiter + m.group(1), camel_case).lower()


def camelize(value: str) -> str:
    """Upper-case the first character and every character after ``-``/``_``.

    The delimiters are dropped: ``camelize("todo_list")`` gives ``"TodoList"``.
    """
    return _CAMEL_BOUNDARY.sub(lambda m: m.group(1).upper(), value)
