from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from attrs import define, field

if TYPE_CHECKING:
    from rich.console import Console

    from argmatch.argument_set import ArgumentSet
    from argmatch.command import Command
    from argmatch.descriptor import ArgumentDescriptor
    from argmatch.name import Name
    from argmatch.token import Token
    from argmatch.validators import ValidatorResult


__all__ = [
    "AmbiguousAbbreviationError",
    "ArgmatchError",
    "CommandCollisionError",
    "DiagnosticKind",
    "DuplicateExclusiveValuesError",
    "HelpRequested",
    "InvalidValueError",
    "MissingRequiredArgumentError",
    "MissingSubcommandError",
    "MissingValueError",
    "SchemaInvalidError",
    "SchemaWarning",
    "UnexpectedExtraValuesError",
    "UnknownOptionError",
]


class DiagnosticKind(Enum):
    UNKNOWN_OPTION = "unknown_option"
    AMBIGUOUS_ABBREVIATION = "ambiguous_abbreviation"
    MISSING_VALUE = "missing_value"
    INVALID_VALUE = "invalid_value"
    MISSING_REQUIRED_ARGUMENT = "missing_required_argument"
    UNEXPECTED_EXTRA_VALUES = "unexpected_extra_values"
    MISSING_SUBCOMMAND = "missing_subcommand"
    SCHEMA_INVALID = "schema_invalid"
    VALIDATION_FAILED = "validation_failed"


class CommandCollisionError(Exception):
    """A command with the same name has already been registered to the parent command."""

    # This doesn't derive from ArgmatchError since this is a developer error
    # rather than a runtime error.


class SchemaWarning(UserWarning):
    """A declared schema is usable, but probably not what the author intended."""


class HelpRequested(Exception):  # noqa: N818
    """A help name was supplied on the command line.

    Not a diagnostic; raised to unwind the matching engine so the caller can render help.
    """

    def __init__(self, command: "Command", command_path: Sequence[str] = ()):
        super().__init__(command.display_name)
        self.command = command
        self.command_path = tuple(command_path)


@define(kw_only=True)
class ArgmatchError(Exception):
    """Root exception for runtime diagnostics.

    As ArgmatchErrors bubble up the subcommand recursion, more information is added to it.
    """

    kind: ClassVar[DiagnosticKind]

    msg: str | None = None
    """
    If set, override automatic message generation.
    """

    verbose: bool = False
    """
    More verbose error messages; aimed towards developers debugging their Argmatch schema.
    """

    root_input_tokens: list[str] | None = None
    """
    The raw tokens that were initially fed into :func:`argmatch.parse`.
    """

    command: Optional["Command"] = None
    """
    :class:`.Command` in scope when the error occurred; used to render a usage synopsis.
    """

    command_path: tuple[str, ...] = field(default=(), converter=tuple)
    """
    Names of the subcommands that lead to :attr:`command`.
    """

    console: Optional["Console"] = None
    """:class:`~rich.console.Console` to display runtime errors."""

    @property
    def arguments(self) -> Optional["ArgumentSet"]:
        return None if self.command is None else self.command.arguments

    def __str__(self):
        if self.msg is not None:
            return self.msg

        strings = []
        if self.verbose:
            strings.append(type(self).__name__)
            if self.command_path:
                strings.append(f"Command: {' '.join(self.command_path)}")
            if self.root_input_tokens is not None:
                strings.append(f"Root Input Tokens: {self.root_input_tokens}")

        if strings:
            return "\n".join(strings) + "\n"
        else:
            return ""


@define(kw_only=True)
class UnknownOptionError(ArgmatchError):
    """Unknown/unregistered option provided by the cli.

    A nearest-neighbor name suggestion may be printed.
    """

    kind = DiagnosticKind.UNKNOWN_OPTION

    name: "Name"
    """Name without a matching argument."""

    token: Optional["Token"] = None
    """Token the name came from; differs from :attr:`name` inside a short-flag cluster."""

    def __str__(self):
        response = f'Unknown option: "{self.name.synopsis}".'
        if self.token is not None and self.token.raw != self.name.synopsis:
            response = f'Unknown option: "{self.name.synopsis}" in "{self.token.raw}".'

        if self.command is not None:
            import difflib

            candidates = [x.synopsis for x in self.command.arguments.names]
            close_matches = difflib.get_close_matches(self.name.synopsis, candidates, n=1, cutoff=0.6)
            if close_matches:
                response += f' Did you mean "{close_matches[0]}"?'

        return super().__str__() + response


@define(kw_only=True)
class AmbiguousAbbreviationError(ArgmatchError):
    """An abbreviated (or clustered) option matches more than one declared name."""

    kind = DiagnosticKind.AMBIGUOUS_ABBREVIATION

    name: "Name"
    candidates: tuple[str, ...] = field(converter=tuple)

    def __str__(self):
        choices = ", ".join(f'"{x}"' for x in self.candidates)
        return super().__str__() + f'Option "{self.name.synopsis}" is ambiguous; could be any of {choices}.'


@define(kw_only=True)
class MissingValueError(ArgmatchError):
    """An option that requires a value was not given one."""

    kind = DiagnosticKind.MISSING_VALUE

    descriptor: "ArgumentDescriptor"
    name: Optional["Name"] = None
    """Name the user actually typed."""

    def __str__(self):
        display_name = self.name.synopsis if self.name is not None else self.descriptor.display_name
        response = f'Missing value for "{display_name}".'
        if self.command_path:
            response = f'Command "{" ".join(self.command_path)}" option "{display_name}" requires a value.'
        return super().__str__() + response


@define(kw_only=True)
class InvalidValueError(ArgmatchError):
    """The leaf conversion rejected a supplied value."""

    kind = DiagnosticKind.INVALID_VALUE

    descriptor: "ArgumentDescriptor"
    raw: str
    """Input string that couldn't be converted."""

    name: Optional["Name"] = None

    exception_message: str = ""
    """Message of the ``ValueError``/``TypeError`` raised by the converter."""

    def __str__(self):
        display_name = self.name.synopsis if self.name is not None else self.descriptor.display_name
        response = f'Invalid value "{self.raw}" for "{display_name}".'
        if self.exception_message:
            response += f" {self.exception_message}"
        return super().__str__() + response


@define(kw_only=True)
class DuplicateExclusiveValuesError(InvalidValueError):
    """Both sides of an exclusive enable/disable flag pair were supplied."""

    previous: "Name"

    def __str__(self):
        assert self.name is not None
        return (
            ArgmatchError.__str__(self)
            + f'Value "{self.name.synopsis}" cannot be used with "{self.previous.synopsis}"; they are exclusive.'
        )


@define(kw_only=True)
class ValidationError(ArgmatchError):
    """A command's validator rejected the matched values."""

    kind = DiagnosticKind.VALIDATION_FAILED

    exception_message: str = ""
    """Message of the ``AssertionError``/``ValueError``/``TypeError`` raised by the validator."""

    def __str__(self):
        response = f'Invalid values for command "{" ".join(self.command_path)}".' if self.command_path else ""
        if self.exception_message:
            response = f"{response} {self.exception_message}" if response else self.exception_message
        return super().__str__() + response


@define(kw_only=True)
class MissingRequiredArgumentError(ArgmatchError):
    """A required argument was not provided."""

    kind = DiagnosticKind.MISSING_REQUIRED_ARGUMENT

    descriptor: "ArgumentDescriptor"

    def __str__(self):
        what = "argument" if self.descriptor.is_positional else "option"
        if self.command_path:
            response = f'Command "{" ".join(self.command_path)}" {what} "{self.descriptor.display_name}" is required.'
        else:
            response = f'Missing required {what} "{self.descriptor.display_name}".'
        return super().__str__() + response


@define(kw_only=True)
class UnexpectedExtraValuesError(ArgmatchError):
    """Free values were left over after every positional was filled."""

    kind = DiagnosticKind.UNEXPECTED_EXTRA_VALUES

    values: tuple[str, ...] = field(converter=tuple)

    def __str__(self):
        if len(self.values) == 1:
            return super().__str__() + f'Unexpected argument "{self.values[0]}".'
        return super().__str__() + f"Unexpected arguments: {', '.join(repr(x) for x in self.values)}."


@define(kw_only=True)
class MissingSubcommandError(ArgmatchError):
    """The command requires a subcommand, but none was (correctly) given."""

    kind = DiagnosticKind.MISSING_SUBCOMMAND

    available: tuple[str, ...] = field(converter=tuple)

    token: str | None = None
    """Free value found where a subcommand name was expected."""

    def __str__(self):
        if self.token is None:
            response = "Missing subcommand."
        else:
            response = f'Unknown command "{self.token}".'
            import difflib

            close_matches = difflib.get_close_matches(self.token, self.available, n=1, cutoff=0.6)
            if close_matches:
                response += f' Did you mean "{close_matches[0]}"?'

        # The following is a heuristic to be "maximally helpful" to someone who may have
        # forgotten a command in their CLI call.
        max_commands = 8
        if self.available:
            if len(self.available) > max_commands:
                response += f" Available commands: {', '.join(self.available[:max_commands])}, ..."
            else:
                response += f" Available commands: {', '.join(self.available)}."
        return super().__str__() + response


@define(kw_only=True)
class SchemaInvalidError(ArgmatchError):
    """The declared schema contradicts itself; raised before any input is parsed."""

    kind = DiagnosticKind.SCHEMA_INVALID

    failures: tuple["ValidatorResult", ...] = field(converter=tuple)

    def __str__(self):
        lines = ["Schema validation failed:"]
        for failure in self.failures:
            prefix = f"[{' '.join(failure.command_path)}] " if failure.command_path else ""
            lines.append(f"- {prefix}{failure.message}")
        return super().__str__() + "\n".join(lines)


def exception_message(e: Any) -> str:
    """Best-effort message from a converter's or validator's exception."""
    return str(e) if e.args else ""
