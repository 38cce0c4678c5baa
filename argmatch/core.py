import sys
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Optional

from attrs import define, field

from argmatch.bind import normalize_tokens, parse
from argmatch.command import Command
from argmatch.exceptions import ArgmatchError, HelpRequested
from argmatch.panel import ArgmatchPanel
from argmatch.usage import format_help, format_usage
from argmatch.validators import ValidatorResult, check

if TYPE_CHECKING:
    from rich.console import Console

    from argmatch.values import ParseResult


def _create_error_console(console: "Console") -> "Console":
    """A stderr console that inherits the width and color settings of ``console``."""
    from rich.console import Console

    return Console(
        stderr=True,
        color_system=console.color_system or "auto",  # type: ignore[arg-type]
        force_terminal=getattr(console, "_force_terminal", None),
        soft_wrap=console.soft_wrap,
        width=console._width,
        no_color=console.no_color,
    )


@define
class Parser:
    """Runtime front-end: validates a command tree, parses tokens, and reports diagnostics."""

    command: Command = field(factory=Command)
    """Root of the command tree."""

    name: str | None = field(default=None, kw_only=True)
    """Program name shown in usage; defaults to ``sys.argv[0]``'s basename."""

    _console: Optional["Console"] = field(default=None, kw_only=True, alias="console")
    _error_console: Optional["Console"] = field(default=None, kw_only=True, alias="error_console")

    exit_on_error: bool = field(default=True, kw_only=True)
    """Invoke ``sys.exit(1)`` after reporting a diagnostic. Otherwise, re-raise it."""

    print_error: bool = field(default=True, kw_only=True)
    """Print a rich-formatted diagnostic."""

    help_on_error: bool = field(default=False, kw_only=True)
    """Print the help page of the command in scope before the diagnostic."""

    verbose: bool = field(default=False, kw_only=True)
    """Populate diagnostic strings with more information intended for developers."""

    _validated: list[ValidatorResult] | None = field(init=False, default=None)
    _fallback_error_console: Optional["Console"] = field(init=False, default=None)

    @property
    def console(self) -> "Console":
        if self._console is None:
            from rich.console import Console

            self._console = Console()
        return self._console

    @console.setter
    def console(self, console: Optional["Console"]):
        self._console = console

    @property
    def error_console(self) -> "Console":
        if self._error_console is not None:
            return self._error_console
        if self._fallback_error_console is None:
            self._fallback_error_console = _create_error_console(self.console)
        return self._fallback_error_console

    @error_console.setter
    def error_console(self, console: Optional["Console"]):
        self._error_console = console

    def validate(self) -> list[ValidatorResult]:
        """Run the schema validators over the command tree; only the first call does any work.

        Raises
        ------
        SchemaInvalidError
            The command tree contains a schema failure.
        """
        if self._validated is None:
            self._validated = check(self.command)
        return self._validated

    def usage(self, command_path: Sequence[str] = ()) -> str:
        return format_usage(self.command, command_path, prog=self.name)

    def help_print(self, command_path: Sequence[str] = (), *, console: Optional["Console"] = None):
        """Print the help page of the command at ``command_path``."""
        console = self.console if console is None else console
        console.print(format_help(self.command, command_path, prog=self.name))

    def parse_args(
        self,
        tokens: None | str | Iterable[str] = None,
        *,
        console: Optional["Console"] = None,
        error_console: Optional["Console"] = None,
        print_error: bool | None = None,
        exit_on_error: bool | None = None,
        help_on_error: bool | None = None,
        verbose: bool | None = None,
    ) -> Optional["ParseResult"]:
        """Match tokens against the command tree.

        Parameters
        ----------
        tokens: None | str | Iterable[str]
            Either a string, or a list of strings.
            Defaults to ``sys.argv[1:]``.
        console: ~rich.console.Console
            Console to print help to.
        error_console: ~rich.console.Console
            Console to print diagnostics to.
        print_error: bool | None
            Print a rich-formatted diagnostic on error.
            If :obj:`None`, falls back to :attr:`Parser.print_error`.
        exit_on_error: bool | None
            On a diagnostic, invoke ``sys.exit(1)``. Otherwise, re-raise it.
            If :obj:`None`, falls back to :attr:`Parser.exit_on_error`.
        help_on_error: bool | None
            Print the help page before the diagnostic.
            If :obj:`None`, falls back to :attr:`Parser.help_on_error`.
        verbose: bool | None
            If :obj:`None`, falls back to :attr:`Parser.verbose`.

        Raises
        ------
        SchemaInvalidError
            The command tree is invalid. Raised before any token is examined.

        Returns
        -------
        ParseResult | None
            :obj:`None` if help was requested and printed.
        """
        tokens = normalize_tokens(tokens)
        self.validate()

        try:
            return parse(self.command, tokens)
        except HelpRequested as e:
            self.help_print(e.command_path, console=console)
            return None
        except ArgmatchError as e:
            e.verbose = self.verbose if verbose is None else verbose
            e.console = error_console or self.error_console
            if self.help_on_error if help_on_error is None else help_on_error:
                self.help_print(e.command_path, console=e.console)
            if self.print_error if print_error is None else print_error:
                e.console.print(self.usage(e.command_path), markup=False)
                e.console.print(ArgmatchPanel(e))
            if self.exit_on_error if exit_on_error is None else exit_on_error:
                sys.exit(1)
            raise

    __call__ = parse_args
