"""Function registry for the templatejs environment."""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from templatejs.environment.core import Environment


class FunctionRegistry(MutableMapping[str, str]):
    """Mutable view of an Environment's function table.

    Maps template function names to the JavaScript expression that is
    called for them:

        env.functions["upper"] = "app.strings.upper"
        env.functions.update(shout="app.shout", join="app.strings.join")
        del env.functions["printf"]

    Every change installs a new table on the environment instead of
    editing the current one in place, so a compilation that already
    captured the table is unaffected.
    """

    __slots__ = ("_env",)

    def __init__(self, env: Environment):
        self._env = env

    @property
    def _table(self) -> dict[str, str]:
        return self._env._functions

    def _replace(self, table: dict[str, str]) -> None:
        self._env._functions = table

    def __getitem__(self, name: str) -> str:
        return self._table[name]

    def __setitem__(self, name: str, callee: str) -> None:
        self._replace({**self._table, name: callee})

    def __delitem__(self, name: str) -> None:
        table = dict(self._table)
        del table[name]
        self._replace(table)

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def update(self, other: Any = (), /, **kwargs: str) -> None:
        """Add several functions with a single table swap."""
        table = dict(self._table)
        table.update(other, **kwargs)
        self._replace(table)

    def copy(self) -> dict[str, str]:
        return dict(self._table)

    def __repr__(self) -> str:
        return f"FunctionRegistry({self._table!r})"
