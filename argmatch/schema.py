"""Declaring the arguments a command accepts.

A :class:`Group` is an ordered mapping of python field names to declared arguments
(built with :func:`option`, :func:`flag`, :func:`counter` and :func:`positional`)
or to nested :class:`Group` objects.

.. code-block:: python

    from argmatch import Group, flag, option, positional

    common = Group({"verbose": flag("-v", "--verbose")})

    schema = Group(
        {
            "count": option("-c", "--count", converter=int, default=1),
            "common": common,
            "files": positional(repeating=True, default=()),
        }
    )
"""

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Union

from attrs import field

from argmatch.descriptor import (
    ArgumentDescriptor,
    ArgumentKind,
    Cardinality,
    FlagExclusivity,
    ParsingStrategy,
)
from argmatch.name import Name, NameKind
from argmatch.utils import UNSET, default_name_transform, frozen, to_tuple_converter


class FlagInversion(Enum):
    """How a flag's "off" spelling is generated."""

    PREFIXED_NO = "prefixed_no"
    """``--verbose`` / ``--no-verbose``."""

    PREFIXED_ENABLE_DISABLE = "prefixed_enable_disable"
    """``--enable-verbose`` / ``--disable-verbose``."""


def _names_converter(value) -> tuple[Name, ...]:
    return tuple(x if isinstance(x, Name) else Name.parse(x) for x in to_tuple_converter(value))


@frozen(kw_only=True)
class Field:
    """A declared argument, not yet bound to a key path.

    Use :func:`option`, :func:`flag`, :func:`counter` or :func:`positional` instead
    of instantiating directly.
    """

    kind: ArgumentKind
    names: tuple[Name, ...] = field(default=(), converter=_names_converter)
    cardinality: Cardinality = Cardinality.SINGLE
    strategy: ParsingStrategy = ParsingStrategy.DEFAULT
    converter: Callable[[str], Any] = str
    default: Any = UNSET
    inversion: FlagInversion | None = None
    exclusivity: FlagExclusivity = FlagExclusivity.CHOOSE_LAST
    help: str = ""
    value_name: str = ""
    show: bool = True

    def descriptors(self, key: tuple[str, ...]) -> list[ArgumentDescriptor]:
        """Resolve this field into one or more :class:`.ArgumentDescriptor` at ``key``."""
        names = self.names
        if not names and self.kind is not ArgumentKind.POSITIONAL:
            names = (Name.long(default_name_transform(key[-1])),)

        default_description = None
        if self.default is not UNSET and self.default is not None and self.kind is not ArgumentKind.FLAG:
            default_description = str(self.default)

        if self.kind is ArgumentKind.FLAG and self.inversion is not None:
            return self._inverted_descriptors(key, names)

        return [
            ArgumentDescriptor(
                key=key,
                kind=self.kind,
                names=names,
                cardinality=self.cardinality,
                strategy=self.strategy,
                converter=self.converter,
                default=self.default,
                help=self.help,
                value_name=self.value_name,
                default_description=default_description,
                show=self.show,
            )
        ]

    def _inverted_descriptors(self, key: tuple[str, ...], names: tuple[Name, ...]) -> list[ArgumentDescriptor]:
        long_names = [x for x in names if x.kind is not NameKind.SHORT]
        if not long_names:
            raise ValueError(f"Flag {'.'.join(key)!r} needs a long name to generate an inversion.")

        if self.inversion is FlagInversion.PREFIXED_NO:
            enable_names = names
            disable_names = tuple(Name(x.kind, f"no-{x.value}") for x in long_names)
        else:
            enable_names = tuple(x if x.is_short else Name(x.kind, f"enable-{x.value}") for x in names)
            disable_names = tuple(Name(x.kind, f"disable-{x.value}") for x in long_names)

        common = {
            "key": key,
            "kind": ArgumentKind.FLAG,
            "default": self.default,
            "exclusivity": self.exclusivity,
            "composite": True,
            "help": self.help,
            "show": self.show,
        }
        return [
            ArgumentDescriptor(
                names=enable_names,
                flag_value=True,
                default_description=None if self.default is UNSET else str(self.default).lower(),
                **common,
            ),
            ArgumentDescriptor(names=disable_names, flag_value=False, **common),
        ]


def option(
    *names: str | Name,
    converter: Callable[[str], Any] = str,
    default: Any = UNSET,
    repeating: bool = False,
    strategy: ParsingStrategy = ParsingStrategy.DEFAULT,
    help: str = "",
    value_name: str = "",
    show: bool = True,
) -> Field:
    """Declare a named argument that consumes a value, e.g. ``--count 3``.

    If no ``names`` are given, ``--<field-name>`` is derived from the field name.
    """
    if strategy in (ParsingStrategy.UP_TO_NEXT_OPTION, ParsingStrategy.ALL_REMAINING_INPUT):
        repeating = True
    return Field(
        kind=ArgumentKind.OPTION,
        names=names,
        cardinality=Cardinality.REPEATING if repeating else Cardinality.SINGLE,
        strategy=strategy,
        converter=converter,
        default=default,
        help=help,
        value_name=value_name,
        show=show,
    )


def flag(
    *names: str | Name,
    default: Any = False,
    inversion: FlagInversion | None = None,
    exclusivity: FlagExclusivity = FlagExclusivity.CHOOSE_LAST,
    help: str = "",
    show: bool = True,
) -> Field:
    """Declare a presence-only switch, e.g. ``--verbose``."""
    return Field(
        kind=ArgumentKind.FLAG,
        names=names,
        default=default,
        inversion=inversion,
        exclusivity=exclusivity,
        help=help,
        show=show,
    )


def counter(*names: str | Name, default: int = 0, help: str = "", show: bool = True) -> Field:
    """Declare a flag whose value is the number of times it occurs, e.g. ``-vvv``."""
    return Field(
        kind=ArgumentKind.FLAG,
        names=names,
        cardinality=Cardinality.REPEATING,
        default=default,
        help=help,
        show=show,
    )


def positional(
    *,
    converter: Callable[[str], Any] = str,
    default: Any = UNSET,
    repeating: bool = False,
    strategy: ParsingStrategy = ParsingStrategy.DEFAULT,
    help: str = "",
    value_name: str = "",
    show: bool = True,
) -> Field:
    """Declare an unnamed argument, matched by position."""
    if strategy is not ParsingStrategy.DEFAULT:
        repeating = True
    return Field(
        kind=ArgumentKind.POSITIONAL,
        cardinality=Cardinality.REPEATING if repeating else Cardinality.SINGLE,
        strategy=strategy,
        converter=converter,
        default=default,
        help=help,
        value_name=value_name,
        show=show,
    )


def _fields_converter(value: Mapping[str, Any] | None) -> tuple[tuple[str, Any], ...]:
    if value is None:
        return ()
    items = tuple(value.items()) if isinstance(value, Mapping) else tuple(value)
    for field_name, declared in items:
        if not isinstance(declared, Field | Group):
            raise TypeError(f"Field {field_name!r} must be a declared argument or a Group; got {declared!r}.")
    return items


@frozen
class Group:
    """An ordered set of declared fields; may be embedded in another :class:`Group`."""

    _fields: tuple[tuple[str, Union[Field, "Group"]], ...] = field(
        default=None, alias="fields", converter=_fields_converter
    )

    target: Callable[..., Any] | None = field(default=None, kw_only=True)
    """Optional callable receiving the assembled field values as keyword arguments."""

    @property
    def fields(self) -> dict[str, Union[Field, "Group"]]:
        return dict(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def __len__(self):
        return len(self._fields)
