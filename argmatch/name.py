from enum import Enum

from attrs import field

from argmatch.utils import frozen


class NameKind(Enum):
    LONG = "long"
    """Multi-character name prefixed with ``--``, e.g. ``--verbose``."""

    SHORT = "short"
    """Single-character name prefixed with ``-``, e.g. ``-v``.

    Short names may be clustered on the command line: ``-ab`` is equivalent to ``-a -b``.
    """

    LONG_SINGLE_DASH = "long_single_dash"
    """Multi-character name prefixed with ``-``, e.g. ``-verbose``."""


def _validate_payload(instance: "Name", attribute, value: str):
    if not value:
        raise ValueError("Argument names cannot be empty.")
    if instance.kind is NameKind.SHORT and len(value) != 1:
        raise ValueError(f"Short names must be exactly one character; got {value!r}.")
    if value.startswith("-"):
        raise ValueError(f"Name payload {value!r} must not include the leading dashes.")


@frozen
class Name:
    """A name usable on the command line."""

    kind: NameKind
    value: str = field(validator=_validate_payload)

    @classmethod
    def long(cls, value: str) -> "Name":
        return cls(NameKind.LONG, value)

    @classmethod
    def short(cls, value: str) -> "Name":
        return cls(NameKind.SHORT, value)

    @classmethod
    def long_single_dash(cls, value: str) -> "Name":
        return cls(NameKind.LONG_SINGLE_DASH, value)

    @classmethod
    def parse(cls, s: str) -> "Name":
        """Build a :class:`Name` from its command-line spelling.

        .. code-block:: python

            Name.parse("--count")  # Name(kind=NameKind.LONG, value="count")
            Name.parse("-c")  # Name(kind=NameKind.SHORT, value="c")
            Name.parse("-count")  # Name(kind=NameKind.LONG_SINGLE_DASH, value="count")
        """
        if s.startswith("--"):
            return cls.long(s[2:])
        elif s.startswith("-"):
            payload = s[1:]
            return cls.short(payload) if len(payload) == 1 else cls.long_single_dash(payload)
        else:
            raise ValueError(f"Option names must start with a hyphen; got {s!r}.")

    @property
    def synopsis(self) -> str:
        if self.kind is NameKind.LONG:
            return f"--{self.value}"
        return f"-{self.value}"

    @property
    def is_short(self) -> bool:
        return self.kind is NameKind.SHORT

    def __str__(self):
        return self.synopsis
