from argmatch.argument_set import ArgumentSet
from argmatch.utils import frozen
from argmatch.validators._common import ValidatorKind, ValidatorResult


@frozen
class PositionalArgumentsValidator:
    """No positional argument may follow a repeating positional argument.

    The split between values for the repeating positional and values for the next
    positional would be undecidable.
    """

    def __call__(self, arguments: ArgumentSet) -> ValidatorResult | None:
        repeating = None
        for descriptor in arguments.positionals:
            if repeating is not None:
                return ValidatorResult(
                    kind=ValidatorKind.FAILURE,
                    validator=type(self).__name__,
                    message=(
                        f"Can't have a positional argument {descriptor.identity!r} following "
                        f"a repeating positional argument {repeating.identity!r}."
                    ),
                )
            if descriptor.is_repeating:
                repeating = descriptor
        return None
