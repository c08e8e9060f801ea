## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Iterator
from dataclasses import dataclass, field

from .types import Primitive, Text


@dataclass
class Environment:
    """Name to value bindings, with an optional enclosing scope.

    The interpreter runs everything in one global environment; blocks share it.
    """
    values: dict[str, Primitive] = field(default_factory=dict)
    parent: 'Environment | None' = None

    def lookup(self, name: str) -> Primitive | None:
        scope = self
        while scope is not None:
            if name in scope.values: return scope.values[name]
            scope = scope.parent
        return None

    def assign(self, name: str, value: Primitive) -> Primitive:
        """Rebind `name` in the scope that already holds it, or bind it here."""
        scope = self
        while scope is not None:
            if name in scope.values: break
            scope = scope.parent
        (self if scope is None else scope).values[name] = value
        return value

    def child(self) -> 'Environment':
        return Environment(parent=self)

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def __iter__(self) -> Iterator[str]:
        seen = set()
        scope = self
        while scope is not None:
            for name in scope.values:
                if name not in seen:
                    seen.add(name); yield name
            scope = scope.parent

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def items(self) -> list[tuple[str, Primitive]]:
        return [(name, self.lookup(name)) for name in self]


def coerce_binding(raw: str) -> Primitive:
    """Convert a host-supplied value (e.g. from `--define NAME=VALUE`) into a runtime value."""
    if raw in ('true', 'false'): return raw == 'true'
    try:
        return float(raw)
    except ValueError:
        return Text(raw)


def make_environment(bindings: dict | None = None) -> Environment:
    env = Environment()
    for name, value in (bindings or {}).items():
        if isinstance(value, bool): env.assign(name, value)
        elif isinstance(value, (int, float)): env.assign(name, float(value))
        elif isinstance(value, str): env.assign(name, value if type(value) is Text else Text(value))
        else:
            raise TypeError(f"Cannot bind `{name}` to a {type(value).__name__} value.")
    return env
