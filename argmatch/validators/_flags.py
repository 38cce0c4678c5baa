from argmatch.argument_set import ArgumentSet
from argmatch.descriptor import UpdateRule
from argmatch.utils import frozen
from argmatch.validators._common import ValidatorKind, ValidatorResult


@frozen
class NonsenseFlagsValidator:
    """Warn about boolean flags that default to ``True`` and have no inversion."""

    def __call__(self, arguments: ArgumentSet) -> ValidatorResult | None:
        names = [
            descriptor.display_name
            for descriptor in arguments
            if descriptor.update is UpdateRule.NULLARY
            and not descriptor.composite
            and not descriptor.is_counter
            and descriptor.default is True
            and descriptor.flag_value is True
        ]
        if not names:
            return None
        return ValidatorResult(
            kind=ValidatorKind.WARNING,
            validator=type(self).__name__,
            message=(
                "One or more boolean flags default to True, so they are always True "
                "whether or not the user specifies them. Change the default to False, "
                f"add an inversion, or declare an option instead. Affected flag(s): {', '.join(names)}."
            ),
        )
