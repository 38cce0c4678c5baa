"""ArgumentSet class and schema composition."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from argmatch.descriptor import ArgumentDescriptor, ParsingStrategy
from argmatch.name import Name, NameKind

if TYPE_CHECKING:
    from argmatch.schema import Group


class ArgumentSet(list[ArgumentDescriptor]):
    """A list-like, ordered container of :class:`.ArgumentDescriptor`.

    Order is significant; it is both display order and positional-matching order.
    """

    def __init__(self, *args, schema: "Group | None" = None):
        super().__init__(*args)
        self.schema = schema

    @classmethod
    def compose(cls, schema: "Group") -> "ArgumentSet":
        """Flatten a declared :class:`~argmatch.schema.Group` into an :class:`ArgumentSet`.

        Nested groups are merged in place; each nested descriptor's key is prefixed
        with the embedding field's key path.
        Composition never fails on conflicting names; see :mod:`argmatch.validators`.
        """
        return cls(_walk(schema, ()), schema=schema)

    def __contains__(self, item: object, /) -> bool:
        if isinstance(item, str):
            item = Name.parse(item)
        if isinstance(item, Name):
            return self.lookup(item) is not None
        return super().__contains__(item)

    def lookup(self, name: Name) -> ArgumentDescriptor | None:
        """Exact name match; the first declaration wins."""
        for descriptor in self:
            if name in descriptor.names:
                return descriptor
        return None

    def abbreviations(self, name: Name) -> list[tuple[Name, ArgumentDescriptor]]:
        """All long names that start with ``name``'s payload."""
        if name.kind is not NameKind.LONG:
            return []
        out = []
        for descriptor in self:
            for candidate in descriptor.names:
                if candidate.kind is NameKind.LONG and candidate.value.startswith(name.value):
                    out.append((candidate, descriptor))
        return out

    @property
    def names(self) -> list[Name]:
        return [name for descriptor in self for name in descriptor.names]

    @property
    def short_names(self) -> frozenset[str]:
        return frozenset(name.value for name in self.names if name.is_short)

    @property
    def positionals(self) -> "ArgumentSet":
        return self.filter(positional=True)

    @property
    def named(self) -> "ArgumentSet":
        return self.filter(positional=False)

    def filter(
        self,
        *,
        positional: bool | None = None,
        strategy: ParsingStrategy | None = None,
        show: bool | None = None,
    ) -> "ArgumentSet":
        out = type(self)(schema=self.schema)
        for descriptor in self:
            if positional is not None and descriptor.is_positional != positional:
                continue
            if strategy is not None and descriptor.strategy is not strategy:
                continue
            if show is not None and descriptor.show != show:
                continue
            out.append(descriptor)
        return out

    def by_key(self) -> dict[tuple[str, ...], list[ArgumentDescriptor]]:
        """Descriptors grouped by key; enable/disable flag pairs share one key."""
        out: dict[tuple[str, ...], list[ArgumentDescriptor]] = {}
        for descriptor in self:
            out.setdefault(descriptor.key, []).append(descriptor)
        return out


def _walk(schema: "Group", prefix: tuple[str, ...]) -> Iterable[ArgumentDescriptor]:
    from argmatch.schema import Group

    for field_name, declared in schema:
        key = prefix + (field_name,)
        if isinstance(declared, Group):
            yield from _walk(declared, key)
        else:
            yield from declared.descriptors(key)


def compose(schema: "Group") -> ArgumentSet:
    return ArgumentSet.compose(schema)
