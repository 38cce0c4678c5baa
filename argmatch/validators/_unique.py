from collections import Counter

from argmatch.argument_set import ArgumentSet
from argmatch.utils import frozen
from argmatch.validators._common import ValidatorKind, ValidatorResult


@frozen
class UniqueNamesValidator:
    """No two descriptors in one composed set may declare the same name."""

    def __call__(self, arguments: ArgumentSet) -> ValidatorResult | None:
        counted = Counter(name for descriptor in arguments for name in descriptor.names)
        duplicates = [(name, count) for name, count in counted.items() if count > 1]
        if not duplicates:
            return None
        return ValidatorResult(
            kind=ValidatorKind.FAILURE,
            validator=type(self).__name__,
            message="\n".join(f'Multiple ({count}) options or flags are named "{name}".' for name, count in duplicates),
        )
