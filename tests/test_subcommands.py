import pytest

import argmatch
from argmatch import Command, CommandCollisionError, CommandConfiguration, Group, flag, option, positional
from argmatch.exceptions import (
    HelpRequested,
    MissingRequiredArgumentError,
    MissingSubcommandError,
    UnexpectedExtraValuesError,
    UnknownOptionError,
    ValidationError,
)


@pytest.fixture
def tree():
    build = Command(
        "build",
        schema=Group({"jobs": option("-j", converter=int, default=1), "target": positional(default="all")}),
        configuration=CommandConfiguration(aliases=["b"], help="Build the project."),
    )
    remote_add = Command("add", schema=Group({"name": positional(), "url": positional()}))
    remote = Command(
        "remote",
        schema=Group({"verbose": flag("-v")}),
        children=[remote_add, Command("list")],
        configuration=CommandConfiguration(default_subcommand="list"),
    )
    return Command(schema=Group({"verbose": flag("-v", "--verbose")}), children=[build, remote])


def test_dispatch(tree):
    result = argmatch.parse(tree, "--verbose build -j 4 lib")
    assert result.command_path == ("build",)
    assert result.command.name == "build"
    assert result.values == {"jobs": 4, "target": "lib"}
    assert result.values_for(()) == {"verbose": True}


def test_dispatch_alias(tree):
    result = argmatch.parse(tree, "b")
    assert result.command.name == "build"
    assert result.command_path == ("build",)
    assert result.values == {"jobs": 1, "target": "all"}


def test_dispatch_nested(tree):
    result = argmatch.parse(tree, "remote -v add origin https://example.com")
    assert result.command_path == ("remote", "add")
    assert result.values == {"name": "origin", "url": "https://example.com"}
    assert result.values_for("remote") == {"verbose": True}
    assert result.values_for(()) == {"verbose": False}


def test_parent_option_after_subcommand_is_unknown(tree):
    with pytest.raises(UnknownOptionError) as e:
        argmatch.parse(tree, "build --verbose")
    assert e.value.command_path == ("build",)


def test_child_option_before_subcommand_is_unknown(tree):
    with pytest.raises(UnknownOptionError) as e:
        argmatch.parse(tree, "-j 3 build")
    assert e.value.command_path == ()


def test_missing_subcommand(tree):
    with pytest.raises(MissingSubcommandError) as e:
        argmatch.parse(tree, "--verbose")
    assert e.value.token is None
    assert e.value.available == ("build", "b", "remote")
    assert str(e.value) == "Missing subcommand. Available commands: build, b, remote."


def test_unknown_subcommand(tree):
    with pytest.raises(MissingSubcommandError) as e:
        argmatch.parse(tree, "biuld")
    assert e.value.token == "biuld"
    assert str(e.value) == 'Unknown command "biuld". Did you mean "build"? Available commands: build, b, remote.'


def test_default_subcommand(tree):
    result = argmatch.parse(tree, "remote")
    assert result.command_path == ("remote", "list")
    assert result.values == {}


def test_default_subcommand_forwards_tokens():
    run = Command("run", schema=Group({"fast": flag(), "script": positional()}))
    root = Command(
        schema=Group({"verbose": flag("-v")}),
        children=[run],
        configuration=CommandConfiguration(default_subcommand="run"),
    )
    result = argmatch.parse(root, "--fast -v main.py")
    assert result.command_path == ("run",)
    assert result.values == {"fast": True, "script": "main.py"}
    assert result.values_for(()) == {"verbose": True}


def test_default_subcommand_parent_positionals_first():
    run = Command("run", schema=Group({"args": positional(repeating=True, default=())}))
    root = Command(
        schema=Group({"config": positional()}),
        children=[run],
        configuration=CommandConfiguration(default_subcommand="run"),
    )
    result = argmatch.parse(root, "a b c")
    assert result.values_for(()) == {"config": "a"}
    assert result.values == {"args": ["b", "c"]}


def test_parent_positionals_before_subcommand():
    build = Command("build")
    root = Command(schema=Group({"profile": positional(default=None)}), children=[build])
    result = argmatch.parse(root, "release build")
    assert result.values_for(()) == {"profile": "release"}
    assert result.command_path == ("build",)


def test_extra_value_before_subcommand(tree):
    with pytest.raises(UnexpectedExtraValuesError):
        argmatch.parse(tree, "extra build")


def test_error_in_nested_command_has_context(tree):
    with pytest.raises(MissingRequiredArgumentError) as e:
        argmatch.parse(tree, "remote add origin")
    assert e.value.command.name == "add"
    assert e.value.command_path == ("remote", "add")
    assert e.value.root_input_tokens == ["remote", "add", "origin"]
    assert str(e.value) == 'Command "remote add" argument "<url>" is required.'


def test_subcommand_name_after_terminator_is_a_value():
    build = Command("build")
    root = Command(schema=Group({"args": positional(repeating=True, default=())}), children=[build])
    with pytest.raises(MissingSubcommandError):
        argmatch.parse(root, "-- build")


class TestHelp:
    def test_root(self, tree):
        with pytest.raises(HelpRequested) as e:
            argmatch.parse(tree, "--help")
        assert e.value.command is tree
        assert e.value.command_path == ()

    def test_nested(self, tree):
        with pytest.raises(HelpRequested) as e:
            argmatch.parse(tree, "remote add -h")
        assert e.value.command_path == ("remote", "add")

    def test_inherited_custom_names(self):
        child = Command("child")
        root = Command(children=[child], configuration=CommandConfiguration(help_names=["-?"]))
        with pytest.raises(HelpRequested) as e:
            argmatch.parse(root, "child -?")
        assert e.value.command_path == ("child",)
        with pytest.raises(UnknownOptionError):
            argmatch.parse(root, "child --help")

    def test_declared_name_takes_precedence(self, assert_parse):
        assert_parse(Group({"help": flag("-h")}), "-h", {"help": True})

    def test_not_an_abbreviation(self):
        command = Command(
            schema=Group({"topic": option("--help-topic", default=None)}),
            configuration=CommandConfiguration(allow_abbreviation=True),
        )
        with pytest.raises(HelpRequested):
            argmatch.parse(command, "--help")
        assert argmatch.parse(command, "--help-t x").values == {"topic": "x"}


class TestCollision:
    def test_duplicate_name(self):
        with pytest.raises(CommandCollisionError):
            Command(children=[Command("a"), Command("a")])

    def test_duplicate_alias(self):
        with pytest.raises(CommandCollisionError):
            Command(children=[Command("a"), Command("b", configuration=CommandConfiguration(aliases="a"))])

    def test_unnamed_child(self):
        with pytest.raises(CommandCollisionError):
            Command(children=[Command()])

    def test_unknown_default(self):
        with pytest.raises(CommandCollisionError):
            Command(children=[Command("a")], configuration=CommandConfiguration(default_subcommand="b"))


def test_walk(tree):
    assert [path for path, _ in tree.walk()] == [
        (),
        ("build",),
        ("remote",),
        ("remote", "add"),
        ("remote", "list"),
    ]
    assert tree["remote"]["add"].name == "add"
    with pytest.raises(KeyError):
        tree["nope"]


class TestValidator:
    @pytest.fixture
    def counted(self):
        return Group({"count": option(converter=int, default=1)})

    def test_receives_values(self, counted):
        seen = []

        def record(values):
            seen.append(values)

        command = Command(schema=counted, configuration=CommandConfiguration(validator=record))
        argmatch.parse(command, "--count 3")
        assert seen == [{"count": 3}]

    def test_failure(self, counted):
        def positive(values):
            if values["count"] < 1:
                raise ValueError("Count must be positive.")

        build = Command("build", schema=counted, configuration=CommandConfiguration(validator=positive))
        root = Command(children=[build])
        argmatch.parse(root, "build --count 2")

        with pytest.raises(ValidationError) as e:
            argmatch.parse(root, "build --count 0")
        assert e.value.command is build
        assert e.value.command_path == ("build",)
        assert str(e.value) == 'Invalid values for command "build". Count must be positive.'

    def test_root_message(self, counted):
        def reject(values):
            raise TypeError("Nope.")

        with pytest.raises(ValidationError) as e:
            argmatch.parse(Command(schema=counted, configuration=CommandConfiguration(validator=reject)), [])
        assert str(e.value) == "Nope."

    def test_runs_after_full_match(self, counted):
        def reject(values):
            raise ValueError("Nope.")

        root = Command(
            configuration=CommandConfiguration(validator=reject),
            children=[Command("build", schema=counted)],
        )
        with pytest.raises(UnknownOptionError):
            argmatch.parse(root, "build --bogus")
