from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from attrs import field

from argmatch.utils import frozen

if TYPE_CHECKING:
    from argmatch.command import Command
    from argmatch.schema import Group


def _normalize_key(key: str | tuple[str, ...]) -> tuple[str, ...]:
    if isinstance(key, str):
        return tuple(key.split("."))
    return tuple(key)


class ValueSet(Mapping[tuple[str, ...], Any]):
    """Read-only mapping of descriptor key-path to converted value.

    Lookups accept either a key tuple ``("common", "verbose")`` or a dotted string ``"common.verbose"``.
    """

    def __init__(self, values: Mapping[tuple[str, ...], Any] | None = None):
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, key: str | tuple[str, ...]) -> Any:
        return self._values[_normalize_key(key)]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str | tuple):
            return False
        return _normalize_key(key) in self._values

    def __iter__(self) -> Iterator[tuple[str, ...]]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other) -> bool:
        if isinstance(other, ValueSet):
            return dict(self._values) == dict(other._values)
        if isinstance(other, Mapping):
            return dict(self._values) == {_normalize_key(k): v for k, v in other.items()}
        return NotImplemented

    __hash__ = None  # pyright: ignore[reportAssignmentType]

    def __repr__(self):
        inner = ", ".join(f"{'.'.join(k)}={v!r}" for k, v in self._values.items())
        return f"{type(self).__name__}({inner})"

    def to_dict(self) -> dict[str, Any]:
        """Nested ``dict`` keyed by field name."""
        out: dict[str, Any] = {}
        for key, value in self._values.items():
            node = out
            for part in key[:-1]:
                node = node.setdefault(part, {})
            node[key[-1]] = value
        return out

    def assemble(self, schema: "Group") -> Any:
        """Deliver values back to the host, following the declared groups.

        Each group with a ``target`` is instantiated with its fields as keyword arguments;
        groups without one become a ``dict``.
        """
        return _assemble(schema, self._values, ())


def _assemble(schema: "Group", values: Mapping[tuple[str, ...], Any], prefix: tuple[str, ...]) -> Any:
    from argmatch.schema import Group

    kwargs = {}
    for field_name, declared in schema:
        key = prefix + (field_name,)
        if isinstance(declared, Group):
            kwargs[field_name] = _assemble(declared, values, key)
        elif key in values:
            kwargs[field_name] = values[key]
    if schema.target is None:
        return kwargs
    return schema.target(**kwargs)


@frozen
class ParseResult:
    """Outcome of a successful parse: the chain of visited commands and their values."""

    stack: tuple[tuple["Command", ValueSet], ...] = field(converter=tuple)

    @property
    def command(self) -> "Command":
        """The deepest command selected."""
        return self.stack[-1][0]

    @property
    def values(self) -> ValueSet:
        """Values of the deepest command selected."""
        return self.stack[-1][1]

    @property
    def command_path(self) -> tuple[str, ...]:
        return tuple(command.name for command, _ in self.stack[1:] if command.name)

    def values_for(self, command_path: tuple[str, ...] | str = ()) -> ValueSet:
        """Values parsed at an intermediate command, e.g. the root's global options."""
        if isinstance(command_path, str):
            command_path = tuple(command_path.split())
        for i, (_, values) in enumerate(self.stack):
            if self.command_path[:i] == tuple(command_path):
                return values
        raise KeyError(command_path)

    def assemble(self) -> Any:
        return self.values.assemble(self.command.schema)
