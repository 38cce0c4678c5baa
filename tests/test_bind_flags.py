import pytest

import argmatch
from argmatch import (
    Command,
    DuplicateExclusiveValuesError,
    FlagExclusivity,
    FlagInversion,
    Group,
    counter,
    flag,
    option,
    positional,
)
from argmatch.exceptions import (
    AmbiguousAbbreviationError,
    InvalidValueError,
    MissingValueError,
    UnknownOptionError,
)


@pytest.fixture
def cluster_schema():
    return Group(
        {
            "a": flag("-a"),
            "b": flag("-b"),
            "c": option("-c", default=None),
        }
    )


class TestCluster:
    def test_flags_and_trailing_option_value(self, cluster_schema, assert_parse):
        assert_parse(cluster_schema, ["-abc", "x"], {"a": True, "b": True, "c": "x"})

    def test_attached_remainder(self, cluster_schema, assert_parse):
        assert_parse(cluster_schema, ["-cx"], {"a": False, "b": False, "c": "x"})

    def test_attached_value_goes_to_last(self, cluster_schema, assert_parse):
        assert_parse(cluster_schema, ["-ac=x"], {"a": True, "b": False, "c": "x"})
        assert_parse(cluster_schema, ["-ab=no"], {"a": True, "b": False, "c": None})

    def test_option_before_last_character(self):
        schema = Group(
            {
                "a": flag("-a"),
                "b": flag("-b"),
                "c": option("-c", default=None),
                "p": positional(default=None),
            }
        )
        with pytest.raises(UnknownOptionError) as e:
            argmatch.parse(Command(schema=schema), ["-acb", "x"])
        assert e.value.name.synopsis == "-acb"

        with pytest.raises(UnknownOptionError):
            argmatch.parse(Command(schema=schema), ["-cb=x"])

    def test_order_independent(self, cluster_schema, assert_parse):
        assert_parse(cluster_schema, ["-ba"], {"a": True, "b": True, "c": None})

    def test_missing_trailing_value(self, cluster_schema):
        with pytest.raises(MissingValueError) as e:
            argmatch.parse(Command(schema=cluster_schema), ["-abc"])
        assert e.value.descriptor.key == ("c",)
        assert e.value.name.synopsis == "-c"

    def test_trailing_value_is_not_an_option(self, cluster_schema):
        with pytest.raises(MissingValueError):
            argmatch.parse(Command(schema=cluster_schema), ["-abc", "-a"])

    def test_unknown_character(self, cluster_schema):
        with pytest.raises(UnknownOptionError) as e:
            argmatch.parse(Command(schema=cluster_schema), ["-axb"])
        assert e.value.name.synopsis == "-x"
        assert str(e.value) == 'Unknown option: "-x" in "-axb".'

    def test_unknown_word(self, cluster_schema):
        with pytest.raises(UnknownOptionError) as e:
            argmatch.parse(Command(schema=cluster_schema), ["-zzz"])
        assert e.value.name.synopsis == "-zzz"

    def test_embedded_dash(self, cluster_schema):
        with pytest.raises(UnknownOptionError):
            argmatch.parse(Command(schema=cluster_schema), ["-a-b"])

    def test_long_single_dash_overlaps_cluster(self):
        schema = Group({"ab": flag("-ab"), "a": flag("-a"), "b": flag("-b")})
        with pytest.raises(AmbiguousAbbreviationError) as e:
            argmatch.parse(Command(schema=schema), ["-ab"])
        assert e.value.candidates == ("-ab", "-a -b")

    def test_long_single_dash_without_overlap(self, assert_parse):
        schema = Group({"ab": flag("-ab"), "a": flag("-a")})
        assert_parse(schema, ["-ab"], {"ab": True, "a": False})


class TestBooleanFlag:
    @pytest.fixture
    def schema(self):
        return Group({"verbose": flag("-v", "--verbose")})

    @pytest.mark.parametrize(
        "cmd_str, expected",
        [
            ("", False),
            ("--verbose", True),
            ("-v", True),
            ("--verbose=true", True),
            ("--verbose=yes", True),
            ("--verbose=false", False),
            ("--verbose=0", False),
            ("-v=n", False),
        ],
    )
    def test_values(self, schema, assert_parse, cmd_str, expected):
        assert_parse(schema, cmd_str, {"verbose": expected})

    def test_invalid_attached_value(self, schema):
        with pytest.raises(InvalidValueError) as e:
            argmatch.parse(Command(schema=schema), "--verbose=maybe")
        assert e.value.raw == "maybe"


class TestInversion:
    @pytest.fixture
    def schema(self):
        return Group(
            {
                "color": flag(inversion=FlagInversion.PREFIXED_NO, default=True),
                "cache": flag(
                    inversion=FlagInversion.PREFIXED_ENABLE_DISABLE,
                    exclusivity=FlagExclusivity.EXCLUSIVE,
                ),
            }
        )

    @pytest.mark.parametrize(
        "cmd_str, color, cache",
        [
            ("", True, False),
            ("--no-color", False, False),
            ("--color --no-color", False, False),
            ("--no-color --color", True, False),
            ("--enable-cache", True, True),
            ("--disable-cache --disable-cache", True, False),
        ],
    )
    def test_values(self, schema, assert_parse, cmd_str, color, cache):
        assert_parse(schema, cmd_str, {"color": color, "cache": cache})

    def test_exclusive(self, schema):
        with pytest.raises(DuplicateExclusiveValuesError) as e:
            argmatch.parse(Command(schema=schema), "--enable-cache --disable-cache")
        assert e.value.previous.synopsis == "--enable-cache"
        assert isinstance(e.value, InvalidValueError)

    def test_choose_first(self, assert_parse):
        color = flag(inversion=FlagInversion.PREFIXED_NO, exclusivity=FlagExclusivity.CHOOSE_FIRST)
        schema = Group({"color": color})
        assert_parse(schema, "--no-color --color", {"color": False})


class TestCounter:
    @pytest.fixture
    def schema(self):
        return Group({"verbosity": counter("-v", "--verbose"), "quiet": flag("-q")})

    @pytest.mark.parametrize(
        "cmd_str, verbosity, quiet",
        [
            ("", 0, False),
            ("-v", 1, False),
            ("-vvv", 3, False),
            ("-v --verbose -qv", 3, True),
            ("--verbose=false", 0, False),
        ],
    )
    def test_counts(self, schema, assert_parse, cmd_str, verbosity, quiet):
        assert_parse(schema, cmd_str, {"verbosity": verbosity, "quiet": quiet})

    def test_counter_default(self, assert_parse):
        assert_parse(Group({"level": counter("-l", default=2)}), "-ll", {"level": 4})
