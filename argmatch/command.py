from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, Optional

from attrs import field

from argmatch.argument_set import ArgumentSet
from argmatch.exceptions import CommandCollisionError
from argmatch.schema import Group
from argmatch.utils import frozen, optional_to_tuple_converter, to_tuple_converter

if TYPE_CHECKING:
    from argmatch.values import ValueSet

DEFAULT_HELP_NAMES = ("-h", "--help")


@frozen(kw_only=True)
class CommandConfiguration:
    default_subcommand: str | None = None
    """Child command to dispatch to when no subcommand name is supplied."""

    help_names: tuple[str, ...] | None = field(default=None, converter=optional_to_tuple_converter)
    """Names that trigger help for this command.

    :obj:`None` inherits the parent's help names; the root defaults to ``("-h", "--help")``.
    """

    aliases: tuple[str, ...] = field(default=(), converter=to_tuple_converter)
    show: bool = True
    """Show this command in usage and suggestions."""

    allow_abbreviation: bool = False
    """Accept unambiguous prefixes of long option names, e.g. ``--verb`` for ``--verbose``."""

    help: str = ""

    validator: tuple[Callable[["ValueSet"], Any], ...] = field(default=(), converter=to_tuple_converter)
    """Called with the command's matched :class:`.ValueSet` once the whole command line has matched.

    An ``AssertionError``, ``ValueError`` or ``TypeError`` is reported as :exc:`.ValidationError`.
    """


@frozen
class Command:
    """One node of the subcommand tree.

    The root command has no name.
    """

    name: str | None = None
    schema: Group = field(factory=Group, kw_only=True)
    children: tuple["Command", ...] = field(default=(), converter=to_tuple_converter, kw_only=True)
    configuration: CommandConfiguration = field(factory=CommandConfiguration, kw_only=True)

    def __attrs_post_init__(self):
        seen: dict[str, Command] = {}
        for child in self.children:
            if not child.name:
                raise CommandCollisionError(f"Subcommands of {self.display_name!r} must be named.")
            for name in child.names:
                if name in seen:
                    raise CommandCollisionError(f'Command "{name}" already registered to {self.display_name!r}.')
                seen[name] = child

        default = self.configuration.default_subcommand
        if default is not None and self.find_child(default) is None:
            raise CommandCollisionError(f'Default subcommand "{default}" is not a child of {self.display_name!r}.')

    @property
    def names(self) -> tuple[str, ...]:
        return ((self.name,) if self.name else ()) + self.configuration.aliases

    @property
    def display_name(self) -> str:
        return self.name or "<root>"

    @property
    def arguments(self) -> ArgumentSet:
        """This node's composed :class:`.ArgumentSet`; recomputed on every access."""
        return ArgumentSet.compose(self.schema)

    @property
    def visible_children(self) -> tuple["Command", ...]:
        return tuple(x for x in self.children if x.configuration.show)

    def find_child(self, name: str) -> Optional["Command"]:
        for child in self.children:
            if name in child.names:
                return child
        return None

    def resolve_help_names(self, inherited: tuple[str, ...] = DEFAULT_HELP_NAMES) -> tuple[str, ...]:
        if self.configuration.help_names is None:
            return inherited
        return self.configuration.help_names

    def walk(self, path: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], "Command"]]:
        """Depth-first iteration over ``(command_path, command)`` pairs, starting with ``self``."""
        yield path, self
        for child in self.children:
            assert child.name is not None
            yield from child.walk(path + (child.name,))

    def __getitem__(self, name: str) -> "Command":
        child = self.find_child(name)
        if child is None:
            raise KeyError(name)
        return child
