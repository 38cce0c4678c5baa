from collections.abc import Callable
from enum import Enum
from typing import Any

from attrs import field

from argmatch.name import Name
from argmatch.utils import UNSET, frozen, to_tuple_converter


class ArgumentKind(Enum):
    POSITIONAL = "positional"
    OPTION = "option"
    FLAG = "flag"


class Cardinality(Enum):
    SINGLE = "single"
    REPEATING = "repeating"


class UpdateRule(Enum):
    NULLARY = "nullary"
    """Presence alone sets a value (flags)."""

    UNARY = "unary"
    """Consumes exactly one value per occurrence (options, positionals)."""


class ParsingStrategy(Enum):
    """How many, and which, tokens a matched argument consumes."""

    DEFAULT = "default"
    """Attached value, or the next token only if it is a free value."""

    SCANNING_FOR_VALUE = "scanning_for_value"
    """Skip past recognized options to find the next free value."""

    UNCONDITIONAL = "unconditional"
    """The very next token, even if it looks like an option."""

    UP_TO_NEXT_OPTION = "up_to_next_option"
    """Every following free value until the next option or the end of input."""

    ALL_REMAINING_INPUT = "all_remaining_input"
    """Every remaining token, verbatim."""

    POST_TERMINATOR = "post_terminator"
    """Only tokens after the ``--`` terminator."""

    ALL_UNRECOGNIZED = "all_unrecognized"
    """Every option and value that no other argument claimed."""


class FlagExclusivity(Enum):
    """Resolution policy when both sides of an enable/disable flag pair are supplied."""

    EXCLUSIVE = "exclusive"
    CHOOSE_FIRST = "choose_first"
    CHOOSE_LAST = "choose_last"


_OPTION_ONLY_STRATEGIES = frozenset(
    {
        ParsingStrategy.SCANNING_FOR_VALUE,
        ParsingStrategy.UNCONDITIONAL,
        ParsingStrategy.UP_TO_NEXT_OPTION,
    }
)
_POSITIONAL_ONLY_STRATEGIES = frozenset({ParsingStrategy.POST_TERMINATOR, ParsingStrategy.ALL_UNRECOGNIZED})
_REPEATING_ONLY_STRATEGIES = frozenset(
    {
        ParsingStrategy.UP_TO_NEXT_OPTION,
        ParsingStrategy.ALL_REMAINING_INPUT,
        ParsingStrategy.POST_TERMINATOR,
        ParsingStrategy.ALL_UNRECOGNIZED,
    }
)


@frozen(kw_only=True)
class ArgumentDescriptor:
    """One declared argument, fully resolved and scoped to its key path."""

    key: tuple[str, ...] = field(converter=to_tuple_converter)
    """Path from the root schema to the declaring field, e.g. ``("common", "verbose")``."""

    kind: ArgumentKind

    names: tuple[Name, ...] = field(default=(), converter=to_tuple_converter)

    cardinality: Cardinality = Cardinality.SINGLE

    strategy: ParsingStrategy = ParsingStrategy.DEFAULT

    converter: Callable[[str], Any] = str
    """Leaf conversion.

    :exc:`ValueError` and :exc:`TypeError` are reported as :exc:`~argmatch.exceptions.InvalidValueError`;
    any other exception propagates unchanged.
    """

    default: Any = UNSET
    """Value used when the argument is absent. :obj:`~.UNSET` makes the argument required."""

    flag_value: Any = True
    """Value stored when a (non-counting) flag occurs."""

    exclusivity: FlagExclusivity = FlagExclusivity.CHOOSE_LAST

    composite: bool = False
    """Member of an enable/disable pair sharing one key."""

    help: str = ""
    value_name: str = ""
    default_description: str | None = None
    show: bool = True

    def __attrs_post_init__(self):
        if not self.key:
            raise ValueError("ArgumentDescriptor key cannot be empty.")

        if self.kind is ArgumentKind.POSITIONAL:
            if self.names:
                raise ValueError(f"Positional argument {self.identity!r} cannot have names.")
            if self.strategy in _OPTION_ONLY_STRATEGIES:
                raise ValueError(f"{self.strategy.name} is not valid for positional argument {self.identity!r}.")
        else:
            if not self.names:
                raise ValueError(f"{self.kind.value.capitalize()} {self.identity!r} requires at least one name.")
            if self.strategy in _POSITIONAL_ONLY_STRATEGIES:
                raise ValueError(f"{self.strategy.name} is only valid for positional arguments.")

        if self.kind is ArgumentKind.FLAG and self.strategy is not ParsingStrategy.DEFAULT:
            raise ValueError(f"Flag {self.identity!r} does not consume values; it cannot use {self.strategy.name}.")

        if self.strategy in _REPEATING_ONLY_STRATEGIES and self.cardinality is not Cardinality.REPEATING:
            raise ValueError(f"{self.strategy.name} requires a repeating argument; {self.identity!r} is single.")

    @property
    def identity(self) -> str:
        return ".".join(self.key)

    @property
    def update(self) -> UpdateRule:
        return UpdateRule.NULLARY if self.kind is ArgumentKind.FLAG else UpdateRule.UNARY

    @property
    def is_positional(self) -> bool:
        return self.kind is ArgumentKind.POSITIONAL

    @property
    def is_repeating(self) -> bool:
        return self.cardinality is Cardinality.REPEATING

    @property
    def is_counter(self) -> bool:
        return self.kind is ArgumentKind.FLAG and self.is_repeating

    @property
    def is_optional(self) -> bool:
        return self.default is not UNSET

    @property
    def preferred_name(self) -> Name | None:
        """Long names are preferred for display; otherwise the first declared name."""
        for name in self.names:
            if not name.is_short:
                return name
        return self.names[0] if self.names else None

    @property
    def display_name(self) -> str:
        """Name used in diagnostics, e.g. ``"--count"`` or ``"<file>"``."""
        if self.preferred_name is not None:
            return self.preferred_name.synopsis
        return f"<{self.display_value_name}>"

    @property
    def display_value_name(self) -> str:
        if self.value_name:
            return self.value_name
        if self.preferred_name is not None:
            return self.preferred_name.value
        return self.key[-1].replace("_", "-")

    def convert(self, raw: str) -> Any:
        return self.converter(raw)
