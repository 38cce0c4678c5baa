from enum import Enum

from attrs import field

from argmatch.utils import frozen


class ValidatorKind(Enum):
    WARNING = "warning"
    """Does not prevent parsing; likely an authoring mistake."""

    FAILURE = "failure"
    """The schema contradicts itself and cannot be used to parse."""


@frozen(kw_only=True)
class ValidatorResult:
    """A structural problem found in a composed :class:`.ArgumentSet`."""

    kind: ValidatorKind
    message: str
    validator: str = ""
    """Name of the validator that produced this result."""

    command_path: tuple[str, ...] = field(default=(), converter=tuple)

    @property
    def is_failure(self) -> bool:
        return self.kind is ValidatorKind.FAILURE

    def __str__(self):
        return self.message
