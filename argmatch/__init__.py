__version__ = "0.1.0"

__all__ = [
    "AmbiguousAbbreviationError",
    "ArgmatchError",
    "ArgmatchPanel",
    "ArgumentDescriptor",
    "ArgumentKind",
    "ArgumentSet",
    "Cardinality",
    "check",
    "Command",
    "CommandCollisionError",
    "CommandConfiguration",
    "compose",
    "counter",
    "default_name_transform",
    "DiagnosticKind",
    "DuplicateExclusiveValuesError",
    "flag",
    "FlagExclusivity",
    "FlagInversion",
    "format_help",
    "format_usage",
    "Group",
    "HelpRequested",
    "InvalidValueError",
    "MissingRequiredArgumentError",
    "MissingSubcommandError",
    "MissingValueError",
    "Name",
    "NameKind",
    "option",
    "parse",
    "Parser",
    "ParseResult",
    "ParsingStrategy",
    "positional",
    "SchemaInvalidError",
    "SchemaWarning",
    "Token",
    "TokenKind",
    "tokenize",
    "UnexpectedExtraValuesError",
    "UnknownOptionError",
    "UNSET",
    "UpdateRule",
    "validate",
    "ValidationError",
    "ValueSet",
]

from argmatch.argument_set import ArgumentSet, compose
from argmatch.bind import parse
from argmatch.command import Command, CommandConfiguration
from argmatch.core import Parser
from argmatch.descriptor import (
    ArgumentDescriptor,
    ArgumentKind,
    Cardinality,
    FlagExclusivity,
    ParsingStrategy,
    UpdateRule,
)
from argmatch.exceptions import (
    AmbiguousAbbreviationError,
    ArgmatchError,
    CommandCollisionError,
    DiagnosticKind,
    DuplicateExclusiveValuesError,
    HelpRequested,
    InvalidValueError,
    MissingRequiredArgumentError,
    MissingSubcommandError,
    MissingValueError,
    SchemaInvalidError,
    SchemaWarning,
    UnexpectedExtraValuesError,
    UnknownOptionError,
    ValidationError,
)
from argmatch.name import Name, NameKind
from argmatch.panel import ArgmatchPanel
from argmatch.schema import FlagInversion, Group, counter, flag, option, positional
from argmatch.token import Token, TokenKind, tokenize
from argmatch.usage import format_help, format_usage
from argmatch.utils import UNSET, default_name_transform
from argmatch.validators import check, validate
from argmatch.values import ParseResult, ValueSet
