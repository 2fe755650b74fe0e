"""Tests for the Configuration store."""

import copy as _copy
import datetime as _datetime
import enum as _enum

import pytest as _pytest

import fusion.config as config


class Level(_enum.Enum):
    LOW = "low"
    HIGH = "high"


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    """Tests for creating stores."""

    def test_empty(self) -> None:
        """A new store has no keys."""
        store = config.Configuration()

        assert store.get_keys() == set()
        assert len(store) == 0

    def test_from_map(self) -> None:
        """A plain string map is copied verbatim."""
        store = config.Configuration.from_map(
            {
                "fs.search.enabled": "true",
                "net.hostname": "localhost",
                "net.port": "8080",
            }
        )

        assert len(store.get_keys()) == 3
        assert store.contains_key("fs.search.enabled")
        assert store.get_raw_value("net.port") == "8080"
        assert store.get(config.get_boolean_config_option("fs.search.enabled")) is True

    def test_from_map_rejects_non_strings(self) -> None:
        """from_map only accepts str keys and values."""
        with _pytest.raises(TypeError):
            config.Configuration.from_map({"a": 1})  # type: ignore[dict-item]

    def test_copy_constructor_is_snapshot(self) -> None:
        """Copying takes a snapshot, not a live view."""
        source = config.Configuration.from_map({"a": "1"})

        copy = config.Configuration(source)
        source.set_raw_value("b", "2")

        assert copy.get_keys() == {"a"}


# =============================================================================
# Typed get / set
# =============================================================================


class TestGetSet:
    """Tests for typed reads and writes."""

    def test_set_then_contains(self) -> None:
        """set() writes under the canonical key."""
        store = config.Configuration()
        enabled = config.get_boolean_config_option("fs.search.enabled")

        result = store.set(enabled, True)

        assert result is store
        assert store.contains_key("fs.search.enabled")
        assert store.get(enabled) is True

    @_pytest.mark.parametrize(
        ("builder", "value"),
        [
            (config.key("k").boolean_type(), False),
            (config.key("k").int_type(), 2_000_000_000),
            (config.key("k").long_type(), 2**62),
            (config.key("k").float_type(), 0.1),
            (config.key("k").double_type(), 1e300),
            (config.key("k").string_type(), "value"),
            (config.key("k").duration_type(), _datetime.timedelta(minutes=5)),
            (config.key("k").enum_type(Level), Level.HIGH),
            (config.key("k").map_type(), {"a": "1", "b": "2"}),
        ],
    )
    def test_round_trip(self, builder: config.TypedConfigOptionBuilder, value: object) -> None:
        """A value written through an option reads back unchanged."""
        opt = builder.no_default_value()
        store = config.Configuration()

        store.set(opt, value)

        assert store.get(opt) == value

    def test_list_round_trip(self) -> None:
        """List values read back as equal lists."""
        opt = config.key("ports").int_type().as_list().no_default_values()
        store = config.Configuration()

        store.set(opt, [8000, 8001])

        assert store.get(opt) == [8000, 8001]

    def test_list_of_maps_round_trip(self) -> None:
        """List-valued map options can be written and read back."""
        opt = config.key("groups").map_type().as_list().no_default_values()
        store = config.Configuration()
        groups = [{"a": "1"}, {"b": "2"}]

        store.set(opt, groups)
        groups[0]["a"] = "changed"

        assert store.get(opt) == [{"a": "1"}, {"b": "2"}]
        assert store.to_map() == {"groups": "a:1;b:2"}

    def test_list_of_maps_from_text(self) -> None:
        """Text form of a list of maps uses ';' between maps."""
        opt = config.key("groups").map_type().as_list().no_default_values()
        store = config.Configuration.from_map({"groups": "a:1,b:2;c:3"})

        assert store.get(opt) == [{"a": "1", "b": "2"}, {"c": "3"}]

    def test_list_items_must_be_storable(self) -> None:
        """Lists of non-string maps or nested lists are rejected."""
        store = config.Configuration()

        with _pytest.raises(TypeError):
            store.set_raw_value("a", [{"a": 1}])
        with _pytest.raises(TypeError):
            store.set_raw_value("a", [[1]])

    def test_list_from_text(self) -> None:
        """List options parse ';'-separated text."""
        opt = config.key("levels").enum_type(Level).as_list().no_default_values()
        store = config.Configuration.from_map({"levels": "low;high"})

        assert store.get(opt) == [Level.LOW, Level.HIGH]

    def test_set_is_idempotent(self) -> None:
        """Setting the same value twice changes nothing."""
        opt = config.key("labels").map_type().no_default_value()
        store = config.Configuration()

        store.set(opt, {"a": "1"})
        before = (store.get_keys(), store.to_map())
        store.set(opt, {"a": "1"})

        assert (store.get_keys(), store.to_map()) == before

    def test_set_none_rejected(self) -> None:
        """None is not a deletion; it is rejected."""
        store = config.Configuration()

        with _pytest.raises(ValueError):
            store.set(config.get_integer_config_option("a"), None)  # type: ignore[arg-type]

    def test_set_unsupported_type_rejected(self) -> None:
        """Values outside the storable set are rejected at write time."""
        store = config.Configuration()

        with _pytest.raises(TypeError):
            store.set_raw_value("a", object())

    def test_missing_returns_none(self) -> None:
        """Absence is not an error."""
        store = config.Configuration()

        assert store.get_optional(config.get_integer_config_option("a")) is None
        assert store.get(config.get_integer_config_option("a")) is None

    def test_default_applied(self) -> None:
        """get() falls back to the option default, or an explicit override."""
        opt = config.key("a").int_type().default_value(5)
        store = config.Configuration()

        assert store.get(opt) == 5
        assert store.get(opt, 7) == 7
        assert store.get_optional(opt) is None

    def test_present_value_beats_default(self) -> None:
        """A stored value wins over the default."""
        opt = config.key("a").int_type().default_value(5)
        store = config.Configuration.from_map({"a": "6"})

        assert store.get(opt) == 6

    def test_text_is_coerced_on_read(self) -> None:
        """Strings from from_map are converted on read."""
        store = config.Configuration.from_map({"port": "8080", "ratio": "0.5"})

        assert store.get(config.get_integer_config_option("port")) == 8080
        assert store.get(config.get_double_config_option("ratio")) == 0.5

    def test_conversion_errors_propagate(self) -> None:
        """A present but malformed value is an error, not an absence."""
        opt = config.key("port").int_type().default_value(80)
        store = config.Configuration.from_map({"port": "eighty"})

        with _pytest.raises(config.MalformedValueError):
            store.get(opt)

    def test_huge_int_read_as_double(self) -> None:
        """An int beyond the float range fails as a conversion error."""
        store = config.Configuration()
        store.set_raw_value("ratio", 10**400)

        with _pytest.raises(config.ConversionError):
            store.get(config.get_double_config_option("ratio"))

    def test_overflow_propagates(self) -> None:
        """Out of range values fail on read."""
        opt = config.get_integer_config_option("big")
        store = config.Configuration()
        store.set_raw_value("big", 3000000000)

        with _pytest.raises(config.ValueOverflowError):
            store.get(opt)

    def test_returned_values_are_detached(self) -> None:
        """Mutating a returned value does not touch the store."""
        opt = config.key("labels").map_type().no_default_value()
        store = config.Configuration()
        store.set(opt, {"a": "1"})

        store.get(opt)["b"] = "2"  # type: ignore[index]
        store.get_raw_value("labels")["c"] = "3"

        assert store.get(opt) == {"a": "1"}

    def test_written_values_are_detached(self) -> None:
        """Mutating a written container does not touch the store."""
        opt = config.key("ports").int_type().as_list().no_default_values()
        store = config.Configuration()
        ports = [1, 2]

        store.set(opt, ports)
        ports.append(3)

        assert store.get(opt) == [1, 2]


# =============================================================================
# Fallback keys
# =============================================================================


class TestFallbackResolution:
    """Tests for fallback-key resolution and diagnostics."""

    def test_deprecated_key_scenario(self, recording_diagnostics: config.RecordingDiagnostics) -> None:
        """An old key still resolves and is reported as deprecated."""
        threshold = (
            config.key("cpu.utilization.threshold")
            .double_type()
            .default_value(0.9)
            .with_deprecated_keys("cpu.threshold")
        )
        store = config.Configuration.from_map(
            {"cpu.threshold": "0.75"}, diagnostics=recording_diagnostics
        )

        value = store.get(threshold)

        assert value == 0.75
        assert type(value) is float
        assert recording_diagnostics.usages == [
            config.FallbackUsage("cpu.threshold", "cpu.utilization.threshold", True)
        ]

    def test_canonical_key_wins(self, recording_diagnostics: config.RecordingDiagnostics) -> None:
        """Fallbacks are not consulted when the canonical key has a value."""
        opt = config.key("new").string_type().no_default_value().with_fallback_keys("old")
        store = config.Configuration.from_map(
            {"new": "n", "old": "o"}, diagnostics=recording_diagnostics
        )

        assert store.get(opt) == "n"
        assert recording_diagnostics.usages == []

    def test_first_present_fallback_wins(
        self, recording_diagnostics: config.RecordingDiagnostics
    ) -> None:
        """Fallbacks are checked in order; the first present one resolves."""
        opt = (
            config.key("new")
            .string_type()
            .no_default_value()
            .with_fallback_keys("f1", "f2")
            .with_deprecated_keys("d1")
        )
        store = config.Configuration.from_map(
            {"f2": "two", "d1": "dep"}, diagnostics=recording_diagnostics
        )

        assert store.get(opt) == "two"
        assert recording_diagnostics.usages == [config.FallbackUsage("f2", "new", False)]

    def test_newest_plain_alias_checked_first(self) -> None:
        """An alias prepended later shadows older aliases."""
        opt = (
            config.key("new")
            .string_type()
            .no_default_value()
            .with_fallback_keys("older")
            .with_fallback_keys("newer")
        )
        store = config.Configuration.from_map({"older": "o", "newer": "n"})

        assert store.get(opt) == "n"

    def test_deprecated_checked_after_existing(self) -> None:
        """A deprecated key appended later is shadowed by existing aliases."""
        opt = (
            config.key("new")
            .string_type()
            .no_default_value()
            .with_fallback_keys("alias")
            .with_deprecated_keys("ancient")
        )
        store = config.Configuration.from_map({"ancient": "a", "alias": "b"})

        assert store.get(opt) == "b"

    def test_nothing_resolves(self, recording_diagnostics: config.RecordingDiagnostics) -> None:
        """No canonical or fallback value yields None and no signal."""
        opt = config.key("new").string_type().no_default_value().with_fallback_keys("old")
        store = config.Configuration(diagnostics=recording_diagnostics)

        assert store.get_optional(opt) is None
        assert recording_diagnostics.usages == []

    def test_set_never_writes_fallbacks(self) -> None:
        """Writes go to the canonical key only."""
        opt = config.key("new").string_type().no_default_value().with_deprecated_keys("old")
        store = config.Configuration()

        store.set(opt, "v")

        assert store.get_keys() == {"new"}

    def test_contains_checks_fallbacks(self) -> None:
        """contains() is true when only a fallback key is present."""
        opt = config.key("new").string_type().no_default_value().with_deprecated_keys("old")

        assert config.Configuration.from_map({"old": "v"}).contains(opt)
        assert not config.Configuration.from_map({"other": "v"}).contains(opt)

    def test_remove_config_removes_fallbacks(self) -> None:
        """remove_config() drops canonical and fallback keys."""
        opt = config.key("new").string_type().no_default_value().with_fallback_keys("old")
        store = config.Configuration.from_map({"new": "1", "old": "2", "keep": "3"})

        assert store.remove_config(opt)
        assert store.get_keys() == {"keep"}
        assert not store.remove_config(opt)

    def test_clone_shares_diagnostics(
        self, recording_diagnostics: config.RecordingDiagnostics
    ) -> None:
        """Copies report to the same sink as their source."""
        store = config.Configuration(diagnostics=recording_diagnostics)

        assert store.clone().diagnostics is recording_diagnostics


# =============================================================================
# Prefix maps
# =============================================================================


class TestPrefixMaps:
    """Tests for map options stored as 'key.*' entries."""

    def test_read_from_prefixed_entries(self) -> None:
        """A map option collects 'key.*' entries."""
        opt = config.key("labels").map_type().no_default_value()
        store = config.Configuration.from_map({"labels.env": "prod", "labels.team": "core"})

        assert store.get(opt) == {"env": "prod", "team": "core"}

    def test_exact_value_wins(self) -> None:
        """A value at the exact key wins over prefix expansion."""
        opt = config.key("labels").map_type().no_default_value()
        store = config.Configuration.from_map({"labels": "a:1", "labels.b": "2"})

        assert store.get(opt) == {"a": "1"}

    def test_list_map_options_do_not_expand(self) -> None:
        """List-of-map options are not prefix-map eligible."""
        opt = config.key("labels").map_type().as_list().no_default_values()
        store = config.Configuration.from_map({"labels.env": "prod"})

        assert store.get_optional(opt) is None

    def test_set_map_purges_old_entries(self) -> None:
        """Writing a map removes stale 'key.*' entries first."""
        opt = config.key("labels").map_type().no_default_value()
        store = config.Configuration.from_map({"labels.old": "x", "labels.env": "dev"})

        store.set(opt, {"env": "prod"})

        assert store.get_keys() == {"labels"}
        assert store.get(opt) == {"env": "prod"}

    def test_no_residue_after_non_map_write(self) -> None:
        """A map then a plain value under the same key leaves no 'key.*' entries."""
        map_opt = config.key("labels").map_type().no_default_value()
        str_opt = config.key("labels").string_type().no_default_value()
        store = config.Configuration.from_map({"labels.a": "1"})

        store.set(map_opt, {"b": "2"})
        store.set(str_opt, "plain")

        assert not any(k.startswith("labels.") for k in store.get_keys())
        assert store.get(str_opt) == "plain"

    def test_set_raw_mapping_purges(self) -> None:
        """Raw mapping writes also replace 'key.*' entries."""
        store = config.Configuration.from_map({"labels.a": "1"})

        store.set_raw_value("labels", {"b": "2"})

        assert store.get_keys() == {"labels"}

    def test_empty_map_is_distinguishable_from_absent(self) -> None:
        """An explicitly stored empty map reads as {}, an absent one as None."""
        opt = config.key("labels").map_type().no_default_value()
        store = config.Configuration()

        assert store.get_optional(opt) is None
        store.set(opt, {})
        assert store.get_optional(opt) == {}

    def test_prefix_map_through_fallback(
        self, recording_diagnostics: config.RecordingDiagnostics
    ) -> None:
        """Fallback keys are expanded as prefix maps too."""
        opt = config.key("labels").map_type().no_default_value().with_deprecated_keys("tags")
        store = config.Configuration.from_map(
            {"tags.env": "prod"}, diagnostics=recording_diagnostics
        )

        assert store.get(opt) == {"env": "prod"}
        assert recording_diagnostics.deprecated_usages[0].alias == "tags"

    def test_contains_prefix_map(self) -> None:
        """contains() sees prefix-map entries of map options."""
        opt = config.key("labels").map_type().no_default_value()

        assert config.Configuration.from_map({"labels.a": "1"}).contains(opt)

    def test_remove_key_removes_prefixed_entries(self) -> None:
        """remove_key() drops the key and its 'key.*' entries."""
        store = config.Configuration.from_map({"labels": "x", "labels.a": "1", "other": "2"})

        assert store.remove_key("labels")
        assert store.get_keys() == {"other"}
        assert not store.remove_key("labels")


# =============================================================================
# Keys, bulk operations, copies
# =============================================================================


class TestBulkOperations:
    """Tests for key snapshots, add_all, clone and equality."""

    def test_get_keys_is_a_copy(self) -> None:
        """Mutating the returned key set does not affect the store."""
        store = config.Configuration.from_map({"a": "1"})

        keys = store.get_keys()
        keys.add("b")
        keys.discard("a")

        assert store.get_keys() == {"a"}

    def test_contains_key_is_exact(self) -> None:
        """contains_key() does not look at prefixes or fallbacks."""
        store = config.Configuration.from_map({"labels.a": "1"})

        assert store.contains_key("labels.a")
        assert not store.contains_key("labels")
        assert "labels.a" in store

    def test_add_all_overwrites(self) -> None:
        """add_all copies every key, overwriting collisions."""
        target = config.Configuration.from_map({"a": "1", "b": "2"})
        source = config.Configuration.from_map({"b": "3", "c": "4"})

        target.add_all(source)

        assert target.to_map() == {"a": "1", "b": "3", "c": "4"}
        assert source.to_map() == {"b": "3", "c": "4"}

    def test_add_all_with_prefix(self) -> None:
        """A prefix is prepended to every copied key."""
        target = config.Configuration()
        source = config.Configuration.from_map({"port": "1"})

        target.add_all(source, "net.")

        assert target.get_keys() == {"net.port"}

    def test_add_all_self(self) -> None:
        """Merging a store into itself with a prefix duplicates its entries."""
        store = config.Configuration.from_map({"a": "1"})

        store.add_all(store, "copy.")

        assert store.to_map() == {"a": "1", "copy.a": "1"}

    def test_clone_is_independent(self) -> None:
        """Changes to a clone do not affect the original and vice versa."""
        original = config.Configuration.from_map({"a": "1"})
        original.set_raw_value("ports", [1, 2])

        clone = original.clone()
        clone.set_raw_value("b", "2")
        original.set_raw_value("c", "3")

        assert clone.get_keys() == {"a", "ports", "b"}
        assert original.get_keys() == {"a", "ports", "c"}

    def test_copy_module(self) -> None:
        """copy.copy and copy.deepcopy produce independent stores."""
        original = config.Configuration.from_map({"a": "1"})

        for duplicate in (_copy.copy(original), _copy.deepcopy(original)):
            duplicate.set_raw_value("a", "2")
            assert original.get_raw_value("a") == "1"

    def test_equality(self) -> None:
        """Stores are equal when all keys and values are equal."""
        a = config.Configuration.from_map({"x": "1"})
        b = config.Configuration.from_map({"x": "1"})
        c = config.Configuration.from_map({"x": "2"})

        assert a == b
        assert a != c
        assert a != config.Configuration()

    def test_equality_is_type_aware(self) -> None:
        """'1', 1 and True are different stored values."""
        a = config.Configuration()
        b = config.Configuration()
        a.set_raw_value("x", 1)
        b.set_raw_value("x", True)

        assert a != b

    def test_equality_bytes_elementwise(self) -> None:
        """Byte sequences compare by content."""
        a = config.Configuration()
        b = config.Configuration()
        a.set_raw_value("blob", b"\x00\x01")
        b.set_raw_value("blob", bytearray(b"\x00\x01"))

        assert a == b

    def test_nan_store_equals_its_clone(self) -> None:
        """A stored NaN does not make a store unequal to its copy."""
        store = config.Configuration()
        store.set_raw_value("ratio", float("nan"))
        store.set_raw_value("ratios", [1.0, float("nan")])

        assert store == store.clone()

    def test_unhashable(self) -> None:
        """Stores are mutable and therefore unhashable."""
        with _pytest.raises(TypeError):
            hash(config.Configuration())

    def test_to_map_and_repr(self) -> None:
        """to_map renders values as text; repr shows the entries."""
        store = config.Configuration()
        store.set_raw_value("flag", True)
        store.set_raw_value("timeout", _datetime.timedelta(seconds=1))

        assert store.to_map() == {"flag": "true", "timeout": "1000 ms"}
        assert "flag" in repr(store)


# =============================================================================
# End to end
# =============================================================================


class TestSampleStore:
    """Reads against a store mixing canonical, renamed and prefix-map keys."""

    def test_typed_reads(self, sample_store: config.Configuration) -> None:
        """Strings are coerced to each option's declared type."""
        assert sample_store.get(config.get_boolean_config_option("fs.search.enabled")) is True
        assert sample_store.get(config.key("net.hostname").string_type().no_default_value()) == (
            "localhost"
        )
        assert sample_store.get(config.key("net.port").int_type().default_value(80)) == 8080

    def test_renamed_and_grouped_options(
        self,
        sample_store: config.Configuration,
        recording_diagnostics: config.RecordingDiagnostics,
    ) -> None:
        """Deprecated keys and prefix maps resolve side by side."""
        threshold = (
            config.key("cpu.utilization.threshold")
            .double_type()
            .default_value(0.9)
            .with_deprecated_keys("cpu.threshold")
        )
        labels = config.key("labels").map_type().no_default_value()

        assert sample_store.get(threshold) == 0.75
        assert sample_store.get(labels) == {"env": "prod", "team": "core"}
        assert [u.alias for u in recording_diagnostics.deprecated_usages] == ["cpu.threshold"]

    def test_migrating_a_key(self, sample_store: config.Configuration) -> None:
        """After writing the canonical key, the deprecated value is shadowed."""
        threshold = (
            config.key("cpu.utilization.threshold")
            .double_type()
            .no_default_value()
            .with_deprecated_keys("cpu.threshold")
        )

        sample_store.set(threshold, 0.5)

        assert sample_store.get(threshold) == 0.5
        assert sample_store.get_raw_value("cpu.threshold") == "0.75"
