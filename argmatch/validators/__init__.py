"""Consistency checks run over a composed schema before any input is parsed."""

__all__ = [
    "check",
    "CodingKeyValidator",
    "DEFAULT_VALIDATORS",
    "NonsenseFlagsValidator",
    "PositionalArgumentsValidator",
    "UniqueNamesValidator",
    "validate",
    "ValidatorKind",
    "ValidatorResult",
]

import warnings
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from attrs import evolve

from argmatch.argument_set import ArgumentSet
from argmatch.exceptions import SchemaInvalidError, SchemaWarning
from argmatch.validators._coding import CodingKeyValidator
from argmatch.validators._common import ValidatorKind, ValidatorResult
from argmatch.validators._flags import NonsenseFlagsValidator
from argmatch.validators._positional import PositionalArgumentsValidator
from argmatch.validators._unique import UniqueNamesValidator

if TYPE_CHECKING:
    from argmatch.command import Command

Validator = Callable[[ArgumentSet], ValidatorResult | None]

DEFAULT_VALIDATORS: tuple[Validator, ...] = (
    PositionalArgumentsValidator(),
    CodingKeyValidator(),
    UniqueNamesValidator(),
    NonsenseFlagsValidator(),
)


def validate(command: "Command", validators: Sequence[Validator] = DEFAULT_VALIDATORS) -> list[ValidatorResult]:
    """Run every validator over every command in the tree.

    All validators run regardless of earlier failures; results are concatenated.

    Parameters
    ----------
    command: Command
        Root of the command tree.
    validators: Sequence[Callable[[ArgumentSet], ValidatorResult | None]]
        Pipeline to run against each command's composed :class:`.ArgumentSet`.

    Returns
    -------
    list[ValidatorResult]
        Warnings and failures, in tree order.
    """
    results = []
    for command_path, node in command.walk():
        arguments = node.arguments
        for validator in validators:
            result = validator(arguments)
            if result is not None:
                results.append(evolve(result, command_path=command_path))
    return results


def check(command: "Command", validators: Sequence[Validator] = DEFAULT_VALIDATORS) -> list[ValidatorResult]:
    """Like :func:`validate`, but emits warnings and raises on failures.

    Warnings are issued as :class:`.SchemaWarning` via :func:`warnings.warn`.

    Raises
    ------
    SchemaInvalidError
        If any validator reported a failure. Contains **all** failures.
    """
    results = validate(command, validators)
    for result in results:
        if not result.is_failure:
            prefix = f"[{' '.join(result.command_path)}] " if result.command_path else ""
            warnings.warn(SchemaWarning(prefix + result.message), stacklevel=2)

    failures = [x for x in results if x.is_failure]
    if failures:
        raise SchemaInvalidError(failures=failures, command=command)
    return results
