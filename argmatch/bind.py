import shlex
import sys
from collections import deque
from collections.abc import Iterable, Sequence
from typing import Any, NamedTuple

from argmatch.command import DEFAULT_HELP_NAMES, Command
from argmatch.descriptor import ArgumentDescriptor, FlagExclusivity, ParsingStrategy, UpdateRule
from argmatch.exceptions import (
    AmbiguousAbbreviationError,
    ArgmatchError,
    DuplicateExclusiveValuesError,
    HelpRequested,
    InvalidValueError,
    MissingRequiredArgumentError,
    MissingSubcommandError,
    MissingValueError,
    UnexpectedExtraValuesError,
    UnknownOptionError,
    ValidationError,
    exception_message,
)
from argmatch.name import Name, NameKind
from argmatch.token import Token, tokenize
from argmatch.utils import UNSET, parse_bool
from argmatch.values import ParseResult, ValueSet


class _Occurrence(NamedTuple):
    """A resolved name within a token; a cluster like ``-abc`` yields several."""

    descriptor: ArgumentDescriptor
    """The matched descriptor."""

    name: Name
    """The name as the user supplied it (or the full name an abbreviation expanded to)."""

    attached: str | None
    """Value attached to the same token, e.g. ``--foo=bar`` or ``-ofile``."""


def normalize_tokens(tokens: None | str | Iterable[str]) -> list[str]:
    if tokens is None:
        tokens = sys.argv[1:]  # Remove the executable
    elif isinstance(tokens, str):
        tokens = shlex.split(tokens)
    else:
        tokens = list(tokens)
    return tokens


class _CommandMatcher:
    """Two-phase match of a token list against one :class:`.Command`."""

    def __init__(
        self,
        command: Command,
        tokens: Sequence[Token],
        *,
        help_names: Sequence[str] = DEFAULT_HELP_NAMES,
        command_path: tuple[str, ...] = (),
    ):
        self.command = command
        self.arguments = command.arguments
        self.tokens = list(tokens)
        self.help_names = tuple(help_names)
        self.command_path = command_path

        self.values: dict[tuple[str, ...], Any] = {}
        self.claimed: set[int] = set()
        self.assigned: set[int] = set()
        self.unrecognized: list[int] = []
        self.boundary: int | None = None
        self.capture_start: int | None = None

        self._flag_sources: dict[tuple[str, ...], tuple[Name, Any]] = {}
        self._short_names = self.arguments.short_names
        self._captures_all = any(
            x.is_positional and x.strategy is ParsingStrategy.ALL_REMAINING_INPUT for x in self.arguments
        )

    def run(self) -> tuple[ValueSet, Command | None, list[Token]]:
        """Match this command's arguments.

        Returns
        -------
        ValueSet
            Values for this command, with defaults filled in.
        Command | None
            Child command to descend into, if any.
        list[Token]
            Tokens handed to the child command.
        """
        self._match_named()

        if self.boundary is not None:
            child = self.command.find_child(self.tokens[self.boundary].raw)
            region_end = self.boundary
        else:
            child = None
            region_end = len(self.tokens)

        leftover = self._assign_positionals(region_end)

        child_tokens: list[Token] = []
        if child is not None:
            self._reject_leftovers(leftover)
            child_tokens = [t for j, t in enumerate(self.tokens) if j > region_end and j not in self.claimed]
        elif self.command.children:
            default = self.command.configuration.default_subcommand
            if default is None:
                self._reject_missing_subcommand(leftover)
            child = self.command.find_child(default)
            # Implicit subcommand; no token is consumed for its name.
            child_tokens = [
                t for j, t in enumerate(self.tokens) if j not in self.claimed and j not in self.assigned
            ]
        else:
            self._reject_leftovers(leftover)

        return ValueSet(self._finalize()), child, child_tokens

    ###########
    # Phase A #
    ###########
    def _match_named(self):
        for i, token in enumerate(self.tokens):
            if i in self.claimed or token.is_terminator or token.after_terminator:
                continue

            if token.is_value:
                if self._is_option_number(token):
                    token = token.as_cluster()
                else:
                    if self._captures_all:
                        self.capture_start = i
                        return
                    if self.command.children and self.command.find_child(token.raw):
                        self.boundary = i
                        return
                    continue

            occurrences = self._resolve(token)
            if occurrences is None:
                if token.raw in self.help_names:
                    raise HelpRequested(self.command, self.command_path)
                if self._captures_all:
                    self.capture_start = i
                    return
                # Held aside; may be collected by an ALL_UNRECOGNIZED positional or a default subcommand.
                self.unrecognized.append(i)
                continue

            self.claimed.add(i)
            for occurrence in occurrences:
                if occurrence.descriptor.update is UpdateRule.NULLARY:
                    self._apply_flag(occurrence)
                else:
                    raws = self._consume(i, occurrence)
                    self._store(occurrence, raws)

    def _is_option_number(self, token: Token) -> bool:
        return token.numeric and token.raw[1] in self._short_names

    def _is_free_value(self, j: int) -> bool:
        token = self.tokens[j]
        return token.is_value and not token.after_terminator and not self._is_option_number(token)

    def _recognizes(self, token: Token) -> bool:
        if token.is_value and self._is_option_number(token):
            token = token.as_cluster()
        if not token.is_named:
            return False
        try:
            return self._resolve(token) is not None
        except AmbiguousAbbreviationError:
            return False

    def _resolve(self, token: Token) -> list[_Occurrence] | None:
        """Resolve a named token to one or more occurrences, or :obj:`None` if unrecognized."""
        assert token.name is not None
        name = token.name
        descriptor = self.arguments.lookup(name)
        cluster = self._resolve_cluster(token) if token.cluster else None

        if descriptor is not None:
            if cluster:
                raise AmbiguousAbbreviationError(
                    name=name,
                    candidates=(name.synopsis, " ".join(x.name.synopsis for x in cluster)),
                )
            return [_Occurrence(descriptor, name, token.value)]

        if token.raw in self.help_names:
            return None

        if name.kind is NameKind.LONG and self.command.configuration.allow_abbreviation:
            candidates = self.arguments.abbreviations(name)
            if len({id(d) for _, d in candidates}) == 1:
                full_name, descriptor = candidates[0]
                return [_Occurrence(descriptor, full_name, token.value)]
            elif candidates:
                raise AmbiguousAbbreviationError(name=name, candidates=sorted(x.synopsis for x, _ in candidates))

        return cluster

    def _resolve_cluster(self, token: Token) -> list[_Occurrence] | None:
        """Interpret ``-abc`` as ``-a -b -c``.

        Every character but the last must be a flag. The last character receives the
        attached value of ``-abc=value``, or takes the next token if it is an option.
        A value-taking option in first position takes the rest of the token (``-ofile``).
        """
        occurrences = []
        last = len(token.cluster) - 1
        for position, char in enumerate(token.cluster):
            if char == "-":
                return None
            name = Name.short(char)
            descriptor = self.arguments.lookup(name)
            if descriptor is None:
                return None
            if position == last:
                occurrences.append(_Occurrence(descriptor, name, token.value))
            elif descriptor.update is UpdateRule.NULLARY:
                occurrences.append(_Occurrence(descriptor, name, None))
            elif position == 0 and token.value is None:
                occurrences.append(_Occurrence(descriptor, name, "".join(token.cluster[1:])))
                break
            else:
                return None
        return occurrences

    def _unknown_option_error(self, token: Token) -> UnknownOptionError:
        if token.is_value:
            token = token.as_cluster()
        assert token.name is not None
        name = token.name
        for position, char in enumerate(token.cluster):
            if char == "-":
                break
            if Name.short(char) not in self.arguments:
                # If even the first character is unknown, report the whole token.
                if position:
                    name = Name.short(char)
                break
        return UnknownOptionError(name=name, token=token)

    def _apply_flag(self, occurrence: _Occurrence):
        descriptor, name, attached = occurrence
        enabled = True
        if attached is not None:
            try:
                enabled = parse_bool(attached)
            except ValueError as e:
                raise InvalidValueError(
                    descriptor=descriptor, raw=attached, name=name, exception_message=exception_message(e)
                ) from None

        key = descriptor.key
        if descriptor.is_counter:
            if enabled:
                start = 0 if descriptor.default is UNSET else descriptor.default
                self.values[key] = self.values.get(key, start) + 1
            return

        if enabled:
            value = descriptor.flag_value
        elif isinstance(descriptor.flag_value, bool):
            value = not descriptor.flag_value
        else:
            # A negative for a non-bool flag doesn't really make sense; silently skip it.
            return

        if key in self._flag_sources:
            previous_name, previous_value = self._flag_sources[key]
            if descriptor.exclusivity is FlagExclusivity.EXCLUSIVE and previous_value != value:
                raise DuplicateExclusiveValuesError(
                    descriptor=descriptor, raw=name.synopsis, name=name, previous=previous_name
                )
            if descriptor.exclusivity is FlagExclusivity.CHOOSE_FIRST:
                return
        self.values[key] = value
        self._flag_sources[key] = (name, value)

    def _following(self, i: int) -> Iterable[int]:
        """Unclaimed token indices after ``i``."""
        return (j for j in range(i + 1, len(self.tokens)) if j not in self.claimed)

    def _consume(self, i: int, occurrence: _Occurrence) -> list[str]:
        """Claim the value tokens for the option at token ``i`` according to its strategy."""
        descriptor, name, attached = occurrence
        strategy = descriptor.strategy
        raws = [] if attached is None else [attached]

        if strategy is ParsingStrategy.DEFAULT:
            if raws:
                return raws
            j = next(iter(self._following(i)), None)
            if j is None or not self._is_free_value(j):
                # Never silently take the next option as this option's value.
                raise MissingValueError(descriptor=descriptor, name=name)
            self.claimed.add(j)
            return [self.tokens[j].raw]
        elif strategy is ParsingStrategy.SCANNING_FOR_VALUE:
            if raws:
                return raws
            for j in self._following(i):
                if self._is_free_value(j):
                    self.claimed.add(j)
                    return [self.tokens[j].raw]
                if not self._recognizes(self.tokens[j]):
                    break
            raise MissingValueError(descriptor=descriptor, name=name)
        elif strategy is ParsingStrategy.UNCONDITIONAL:
            if raws:
                return raws
            j = next(iter(self._following(i)), None)
            if j is None:
                raise MissingValueError(descriptor=descriptor, name=name)
            self.claimed.add(j)
            return [self.tokens[j].raw]
        elif strategy is ParsingStrategy.UP_TO_NEXT_OPTION:
            for j in self._following(i):
                if not self._is_free_value(j):
                    break
                self.claimed.add(j)
                raws.append(self.tokens[j].raw)
            return raws
        elif strategy is ParsingStrategy.ALL_REMAINING_INPUT:
            for j in list(self._following(i)):
                self.claimed.add(j)
                raws.append(self.tokens[j].raw)
            return raws
        else:
            raise NotImplementedError(strategy)

    def _convert(self, descriptor: ArgumentDescriptor, raw: str, name: Name | None = None) -> Any:
        try:
            return descriptor.convert(raw)
        except (ValueError, TypeError) as e:
            raise InvalidValueError(
                descriptor=descriptor, raw=raw, name=name, exception_message=exception_message(e)
            ) from e

    def _store(self, occurrence: _Occurrence, raws: Sequence[str]):
        descriptor = occurrence.descriptor
        converted = [self._convert(descriptor, raw, occurrence.name) for raw in raws]
        if descriptor.is_repeating:
            self.values.setdefault(descriptor.key, []).extend(converted)
        else:
            # Last occurrence wins.
            self.values[descriptor.key] = converted[-1]

    ###########
    # Phase B #
    ###########
    def _assign_positionals(self, region_end: int) -> list[int]:
        """Assign unclaimed free values to positional descriptors in declaration order.

        Returns
        -------
        list[int]
            Token indices of free values that no positional accepted.
        """
        positionals = self.arguments.positionals
        has_post_terminator = any(x.strategy is ParsingStrategy.POST_TERMINATOR for x in positionals)
        pool_end = region_end if self.capture_start is None else self.capture_start

        pool: deque[int] = deque()
        post_terminator: list[int] = []
        for j in range(pool_end):
            token = self.tokens[j]
            if j in self.claimed or not token.is_value or self._is_option_number(token):
                continue
            if token.after_terminator and has_post_terminator:
                post_terminator.append(j)
            else:
                pool.append(j)

        capture: list[int] = []
        if self.capture_start is not None:
            capture = [j for j in range(self.capture_start, region_end) if j not in self.claimed]

        for n, descriptor in enumerate(positionals):
            strategy = descriptor.strategy
            if strategy is ParsingStrategy.ALL_UNRECOGNIZED:
                continue
            elif strategy is ParsingStrategy.POST_TERMINATOR:
                taken = post_terminator
                post_terminator = []
            elif strategy is ParsingStrategy.ALL_REMAINING_INPUT:
                taken = list(pool) + capture
                pool.clear()
                capture = []
            elif descriptor.is_repeating:
                # Leave enough values for single positionals declared afterwards.
                reserved = sum(
                    1
                    for x in positionals[n + 1 :]
                    if not x.is_repeating and x.strategy is ParsingStrategy.DEFAULT
                )
                taken = [pool.popleft() for _ in range(max(len(pool) - reserved, 0))]
            elif pool:
                taken = [pool.popleft()]
            elif capture and self._is_free_value(capture[0]):
                taken = [capture.pop(0)]
            else:
                taken = []

            if not taken:
                continue
            self.assigned.update(taken)
            self._store_positional(descriptor, taken)

        leftover = sorted(list(pool) + post_terminator)

        collector = positionals.filter(strategy=ParsingStrategy.ALL_UNRECOGNIZED)
        if collector:
            taken = sorted(leftover + self.unrecognized)
            self.unrecognized = []
            leftover = []
            if taken:
                self.assigned.update(taken)
                self._store_positional(collector[0], taken)

        return leftover

    def _store_positional(self, descriptor: ArgumentDescriptor, indices: Sequence[int]):
        converted = [self._convert(descriptor, self.tokens[j].raw) for j in indices]
        if descriptor.is_repeating:
            self.values.setdefault(descriptor.key, []).extend(converted)
        else:
            self.values[descriptor.key] = converted[-1]

    def _reject_leftovers(self, leftover: Sequence[int]):
        if self.unrecognized:
            raise self._unknown_option_error(self.tokens[self.unrecognized[0]])
        if leftover:
            raise UnexpectedExtraValuesError(values=[self.tokens[j].raw for j in leftover])

    def _reject_missing_subcommand(self, leftover: Sequence[int]):
        if self.unrecognized:
            raise self._unknown_option_error(self.tokens[self.unrecognized[0]])
        available = [name for child in self.command.visible_children for name in child.names]
        token = self.tokens[leftover[0]].raw if leftover else None
        raise MissingSubcommandError(available=available, token=token)

    def _finalize(self) -> dict[tuple[str, ...], Any]:
        values = dict(self.values)
        for key, descriptors in self.arguments.by_key().items():
            if key in values:
                continue
            descriptor = descriptors[0]
            if descriptor.default is UNSET:
                raise MissingRequiredArgumentError(descriptor=descriptor)
            values[key] = descriptor.default
        return values


def parse(command: Command, tokens: None | str | Iterable[str] = None) -> ParseResult:
    """Match command-line tokens against a command tree.

    Parameters
    ----------
    command: Command
        Root of the command tree.
    tokens: None | str | Iterable[str]
        Either a string, or a list of strings to parse.
        If a string, it will be split via :func:`shlex.split`.
        If :obj:`None`, defaults to ``sys.argv[1:]``.

    Raises
    ------
    ArgmatchError
        The first diagnostic encountered; no partial result is returned.
    HelpRequested
        A help name was supplied.

    Returns
    -------
    ParseResult
        The chain of selected commands and their converted values.
    """
    raw_tokens = normalize_tokens(tokens)
    remaining = tokenize(raw_tokens)

    stack: list[tuple[Command, ValueSet]] = []
    paths: list[tuple[str, ...]] = []
    node: Command | None = command
    command_path: tuple[str, ...] = ()
    help_names = command.resolve_help_names()

    while node is not None:
        matcher = _CommandMatcher(node, remaining, help_names=help_names, command_path=command_path)
        try:
            values, child, remaining = matcher.run()
        except ArgmatchError as e:
            if e.command is None:
                e.command = node
                e.command_path = command_path
            if e.root_input_tokens is None:
                e.root_input_tokens = raw_tokens
            raise
        stack.append((node, values))
        paths.append(command_path)

        if child is not None:
            assert child.name is not None
            command_path = command_path + (child.name,)
            help_names = child.resolve_help_names(help_names)
        node = child

    # Validators only see a command line that matched in full.
    for (node, values), command_path in zip(stack, paths):
        try:
            for validator in node.configuration.validator:
                validator(values)
        except (AssertionError, ValueError, TypeError) as e:
            raise ValidationError(
                exception_message=exception_message(e),
                root_input_tokens=raw_tokens,
                command=node,
                command_path=command_path,
            ) from e

    return ParseResult(stack)
