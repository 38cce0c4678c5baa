import inspect
from collections.abc import Iterator

from argmatch.argument_set import ArgumentSet
from argmatch.schema import Group
from argmatch.utils import frozen
from argmatch.validators._common import ValidatorKind, ValidatorResult

_KEYWORD_KINDS = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)


def _groups(schema: Group, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], Group]]:
    yield prefix, schema
    for field_name, declared in schema:
        if isinstance(declared, Group):
            yield from _groups(declared, prefix + (field_name,))


def _unreachable_fields(schema: Group) -> tuple[list[str], list[str]]:
    """Fields the target can't accept, and target parameters no field supplies."""
    assert schema.target is not None
    try:
        parameters = inspect.signature(schema.target).parameters
    except (TypeError, ValueError):
        # No introspectable signature (some builtins); nothing to check.
        return [], []

    accepts_any = any(p.kind is inspect.Parameter.VAR_KEYWORD for p in parameters.values())
    keyword_names = {name for name, p in parameters.items() if p.kind in _KEYWORD_KINDS}
    field_names = [field_name for field_name, _ in schema]

    missing = [] if accepts_any else [x for x in field_names if x not in keyword_names]
    unsupplied = [
        name
        for name, p in parameters.items()
        if p.default is inspect.Parameter.empty
        and (p.kind is inspect.Parameter.POSITIONAL_ONLY or (p.kind in _KEYWORD_KINDS and name not in field_names))
    ]
    return missing, unsupplied


@frozen
class CodingKeyValidator:
    """Every declared argument must be deliverable back to the caller.

    Checks each declared group's ``target`` against the fields that value
    assembly passes to it as keyword arguments.
    """

    def __call__(self, arguments: ArgumentSet) -> ValidatorResult | None:
        if arguments.schema is None:
            return None

        messages = []
        for prefix, group in _groups(arguments.schema):
            if group.target is None:
                continue
            missing, unsupplied = _unreachable_fields(group)
            target_name = getattr(group.target, "__qualname__", repr(group.target))
            for field_name in missing:
                key = ".".join(prefix + (field_name,))
                messages.append(f"Argument {key!r} is declared without a corresponding parameter on {target_name}.")
            for name in unsupplied:
                messages.append(f"Required parameter {name!r} of {target_name} has no declared argument.")

        if not messages:
            return None
        return ValidatorResult(
            kind=ValidatorKind.FAILURE,
            validator=type(self).__name__,
            message="\n".join(messages),
        )
