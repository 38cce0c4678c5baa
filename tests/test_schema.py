import pytest

from argmatch import (
    ArgumentDescriptor,
    ArgumentKind,
    ArgumentSet,
    Cardinality,
    FlagInversion,
    Group,
    Name,
    ParsingStrategy,
    compose,
    counter,
    flag,
    option,
    positional,
)


@pytest.fixture
def schema():
    common = Group({"verbose": flag("-v", "--verbose"), "log_level": option()})
    return Group(
        {
            "count": option("-c", "--count", converter=int, default=1),
            "common": common,
            "source": positional(),
            "files": positional(repeating=True, default=()),
        }
    )


def test_compose_idempotent(schema):
    first = compose(schema)
    second = compose(schema)

    assert [x.key for x in first] == [x.key for x in second]
    assert [x.names for x in first] == [x.names for x in second]
    assert first == second


def test_compose_prefixes_nested_keys(schema):
    arguments = compose(schema)
    assert [x.key for x in arguments] == [
        ("count",),
        ("common", "verbose"),
        ("common", "log_level"),
        ("source",),
        ("files",),
    ]
    assert [x.identity for x in arguments] == ["count", "common.verbose", "common.log_level", "source", "files"]


def test_compose_default_name(schema):
    arguments = compose(schema)
    assert arguments[2].names == (Name.long("log-level"),)


def test_compose_does_not_check_uniqueness():
    schema = Group({"a": option("--count"), "b": Group({"c": option("--count")})})
    assert len(compose(schema)) == 2


def test_argument_set_lookup(schema):
    arguments = ArgumentSet.compose(schema)
    assert arguments.lookup(Name.short("v")).key == ("common", "verbose")
    assert arguments.lookup(Name.long("nope")) is None
    assert "--count" in arguments
    assert "-x" not in arguments
    assert arguments.short_names == frozenset({"c", "v"})


def test_argument_set_positionals(schema):
    arguments = compose(schema)
    assert [x.identity for x in arguments.positionals] == ["source", "files"]
    assert [x.identity for x in arguments.named] == ["count", "common.verbose", "common.log_level"]


def test_argument_set_abbreviations():
    arguments = compose(Group({"verbose": flag(), "version": flag(), "count": option("-c")}))
    assert [x.value for x, _ in arguments.abbreviations(Name.long("ver"))] == ["verbose", "version"]
    assert arguments.abbreviations(Name.short("c")) == []


def test_flag_inversion_prefixed_no():
    arguments = compose(Group({"color": flag("-c", "--color", inversion=FlagInversion.PREFIXED_NO)}))
    enable, disable = arguments
    assert enable.key == disable.key == ("color",)
    assert enable.names == (Name.short("c"), Name.long("color"))
    assert disable.names == (Name.long("no-color"),)
    assert enable.flag_value is True
    assert disable.flag_value is False
    assert enable.composite and disable.composite


def test_flag_inversion_enable_disable():
    arguments = compose(Group({"cache": flag(inversion=FlagInversion.PREFIXED_ENABLE_DISABLE)}))
    enable, disable = arguments
    assert enable.names == (Name.long("enable-cache"),)
    assert disable.names == (Name.long("disable-cache"),)


def test_flag_inversion_requires_long_name():
    with pytest.raises(ValueError):
        compose(Group({"x": flag("-x", inversion=FlagInversion.PREFIXED_NO)}))


def test_counter_descriptor():
    (descriptor,) = compose(Group({"verbosity": counter("-v")}))
    assert descriptor.is_counter
    assert descriptor.default == 0


def test_strategy_forces_repeating():
    arguments = compose(
        Group(
            {
                "a": option(strategy=ParsingStrategy.UP_TO_NEXT_OPTION),
                "rest": positional(strategy=ParsingStrategy.ALL_UNRECOGNIZED),
            }
        )
    )
    assert all(x.cardinality is Cardinality.REPEATING for x in arguments)


def test_group_rejects_non_fields():
    with pytest.raises(TypeError):
        Group({"a": "--a"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"key": (), "kind": ArgumentKind.OPTION, "names": (Name.long("a"),)},
        {"key": ("a",), "kind": ArgumentKind.POSITIONAL, "names": (Name.long("a"),)},
        {"key": ("a",), "kind": ArgumentKind.OPTION},
        {"key": ("a",), "kind": ArgumentKind.FLAG},
        {
            "key": ("a",),
            "kind": ArgumentKind.FLAG,
            "names": (Name.long("a"),),
            "strategy": ParsingStrategy.UNCONDITIONAL,
        },
        {
            "key": ("a",),
            "kind": ArgumentKind.POSITIONAL,
            "strategy": ParsingStrategy.SCANNING_FOR_VALUE,
        },
        {
            "key": ("a",),
            "kind": ArgumentKind.OPTION,
            "names": (Name.long("a"),),
            "strategy": ParsingStrategy.POST_TERMINATOR,
            "cardinality": Cardinality.REPEATING,
        },
        {
            "key": ("a",),
            "kind": ArgumentKind.OPTION,
            "names": (Name.long("a"),),
            "strategy": ParsingStrategy.UP_TO_NEXT_OPTION,
        },
    ],
)
def test_descriptor_invariants(kwargs):
    with pytest.raises(ValueError):
        ArgumentDescriptor(**kwargs)


def test_descriptor_display():
    (option_descriptor, positional_descriptor) = compose(
        Group({"out_file": option("-o", "--out-file"), "input_path": positional()})
    )
    assert option_descriptor.display_name == "--out-file"
    assert option_descriptor.display_value_name == "out-file"
    assert positional_descriptor.display_name == "<input-path>"
    assert not positional_descriptor.is_optional
