from collections.abc import Iterable
from enum import Enum

from attrs import evolve, field

from argmatch.name import Name
from argmatch.utils import frozen, is_negative_number

TERMINATOR = "--"


class TokenKind(Enum):
    NAMED = "named"
    """An option/flag occurrence like ``--foo``, ``--foo=bar``, ``-f`` or ``-abc``."""

    VALUE = "value"
    """A free value; a positional candidate or the value of a preceding option."""

    TERMINATOR = "terminator"
    """The ``--`` token; everything after it is literal."""


@frozen(kw_only=True)
class Token:
    """One element of the tokenized argument vector."""

    kind: TokenKind
    raw: str
    """Original string as supplied on the command line."""

    index: int = 0
    """Position of ``raw`` in the original argument vector."""

    name: Name | None = None
    """Matched name for :attr:`TokenKind.NAMED` tokens."""

    value: str | None = None
    """Attached value (``--foo=bar``) for named tokens; the literal for free values."""

    cluster: tuple[str, ...] = field(default=(), converter=tuple)
    """Provisional short-name cluster; ``-abc`` may turn out to be ``-a -b -c``.

    Only the matching engine can decide, since it depends on the declared names.
    """

    after_terminator: bool = False
    numeric: bool = False
    """Free value that looks like a negative number (e.g. ``-3``)."""

    @property
    def is_named(self) -> bool:
        return self.kind is TokenKind.NAMED

    @property
    def is_value(self) -> bool:
        return self.kind is TokenKind.VALUE

    @property
    def is_terminator(self) -> bool:
        return self.kind is TokenKind.TERMINATOR

    def evolve(self, **kwargs) -> "Token":
        return evolve(self, **kwargs)

    def as_cluster(self) -> "Token":
        """Reinterpret a negative-number shaped free value as a short-name occurrence."""
        payload = self.raw[1:]
        if len(payload) == 1:
            return self.evolve(kind=TokenKind.NAMED, name=Name.short(payload), value=None, numeric=False)
        return self.evolve(
            kind=TokenKind.NAMED,
            name=Name.long_single_dash(payload),
            value=None,
            cluster=tuple(payload),
            numeric=False,
        )


def _free(raw: str, index: int, **kwargs) -> Token:
    return Token(kind=TokenKind.VALUE, raw=raw, index=index, value=raw, **kwargs)


def _tokenize_one(raw: str, index: int) -> Token:
    if raw == TERMINATOR:
        return Token(kind=TokenKind.TERMINATOR, raw=raw, index=index)

    if raw.startswith("--"):
        body = raw[2:]
        if body.startswith("-"):
            # 3+ leading hyphens is not an option spelling.
            return _free(raw, index)
        name, sep, value = body.partition("=")
        if not name:
            return _free(raw, index)
        return Token(
            kind=TokenKind.NAMED,
            raw=raw,
            index=index,
            name=Name.long(name),
            value=value if sep else None,
        )

    if raw.startswith("-") and len(raw) > 1:
        if is_negative_number(raw):
            return _free(raw, index, numeric=True)
        body = raw[1:]
        if body.startswith("-"):
            return _free(raw, index)
        name, sep, value = body.partition("=")
        if sep:
            if not name:
                return _free(raw, index)
            if len(name) == 1:
                return Token(kind=TokenKind.NAMED, raw=raw, index=index, name=Name.short(name), value=value)
            # ``-count=1`` is a long name with a single dash, or ``-ab=1`` a cluster ending in ``-b=1``.
            return Token(
                kind=TokenKind.NAMED,
                raw=raw,
                index=index,
                name=Name.long_single_dash(name),
                value=value,
                cluster=tuple(name) if name[0].isalnum() else (),
            )
        if len(body) == 1:
            return Token(kind=TokenKind.NAMED, raw=raw, index=index, name=Name.short(body))
        return Token(
            kind=TokenKind.NAMED,
            raw=raw,
            index=index,
            name=Name.long_single_dash(body),
            cluster=tuple(body) if body[0].isalnum() else (),
        )

    # Empty strings and a lone "-" (conventionally stdin) are values.
    return _free(raw, index)


def tokenize(arguments: Iterable[str]) -> list[Token]:
    """Split a raw argument vector into a list of :class:`Token`.

    Tokenization never fails; semantic validity is decided by the matching engine.

    Parameters
    ----------
    arguments: Iterable[str]
        Raw argument strings, **not** including the executable name.

    Returns
    -------
    list[Token]
    """
    tokens = []
    terminated = False
    for index, raw in enumerate(arguments):
        if terminated:
            tokens.append(_free(raw, index, after_terminator=True))
            continue
        token = _tokenize_one(raw, index)
        tokens.append(token)
        if token.is_terminator:
            terminated = True
    return tokens
