import pytest
from rich.console import Console

import argmatch
from argmatch import Command, Group, Parser


@pytest.fixture
def console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def parser(console):
    def inner(command: Command, **kwargs) -> Parser:
        return Parser(command, name="prog", console=console, error_console=console, **kwargs)

    return inner


@pytest.fixture
def assert_parse():
    """Parse ``cmd`` against a single-level command declaring ``schema`` and compare values.

    ``expected`` is keyed by dotted key path, e.g. ``{"common.verbose": True}``.
    """

    def inner(schema: Group, cmd, expected: dict, **configuration):
        command = Command(schema=schema, configuration=argmatch.CommandConfiguration(**configuration))
        result = argmatch.parse(command, cmd)
        assert result.values == expected
        return result

    return inner
