"""Unit tests for the archive data model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from perf_archiver.archive.models import (
    EXACT,
    Archive,
    MachineConfiguration,
    MachineEntry,
    ResultValue,
    TestEntry,
    TestVariant,
)
from perf_archiver.core.hashing import canonical_json, config_key

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def sample_document() -> dict:
    """Create a sample archive document as parsed from YAML."""
    return {
        "node1": {
            "MachineConfigurations": [
                {
                    "Configuration": {"Ranks": 4, "Node Type": "cpu"},
                    "Tests": {
                        "t1": [
                            {
                                "Configuration": {"Threads": 1},
                                "Results": {
                                    "Time": {"value": 10.0, "tolerance": 0.1},
                                    "Counter": {"value": 22, "tolerance": "exact"},
                                },
                            }
                        ]
                    },
                }
            ]
        }
    }


# ============================================================================
# Hashing Tests
# ============================================================================


class TestConfigKey:
    """Tests for canonical configuration keys."""

    def test_canonical_json_sorts_keys(self) -> None:
        """Keys are sorted and whitespace is removed."""
        assert canonical_json({"b": 1, "a": "2"}) == '{"a":"2","b":1}'

    def test_order_independent(self) -> None:
        """Equal sets in different order share a key."""
        assert config_key({"Threads": 1, "Ranks": 4}) == config_key({"Ranks": 4, "Threads": 1})

    def test_type_sensitive(self) -> None:
        """An int and its string form are different values."""
        assert config_key({"Ranks": 4}) != config_key({"Ranks": "4"})

    def test_different_names(self) -> None:
        """Sets with different names differ."""
        assert config_key({"Ranks": 4}) != config_key({"Ranks": 4, "Threads": 1})


# ============================================================================
# ResultValue Tests
# ============================================================================


class TestResultValue:
    """Tests for ResultValue."""

    def test_exact_by_default(self) -> None:
        """Omitting the tolerance selects exact comparison."""
        value = ResultValue(value=22)

        assert value.is_exact
        assert value.tolerance is None

    def test_tolerance(self) -> None:
        """A tolerance selects relative comparison."""
        value = ResultValue(value=10.0, tolerance=0.1)

        assert not value.is_exact
        assert value.tolerance == 0.1

    def test_dump_exact(self) -> None:
        """Exact values serialize their tolerance as 'exact'."""
        assert ResultValue(value=22).model_dump() == {"value": 22, "tolerance": EXACT}

    def test_dump_tolerance(self) -> None:
        """Relative tolerances serialize as numbers."""
        assert ResultValue(value=10.0, tolerance=0.1).model_dump() == {"value": 10.0, "tolerance": 0.1}

    def test_parse_exact(self) -> None:
        """'exact' parses back to an exact value."""
        value = ResultValue.model_validate({"value": 1.5, "tolerance": "exact"})

        assert value.is_exact

    def test_int_value_preserved(self) -> None:
        """Integer values are kept as integers."""
        assert isinstance(ResultValue(value=22).value, int)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_value_rejected(self, value: float) -> None:
        """Values that can never compare equal to themselves are invalid."""
        with pytest.raises(ValidationError):
            ResultValue(value=value)

    def test_negative_tolerance_rejected(self) -> None:
        """Negative tolerances are invalid."""
        with pytest.raises(ValidationError):
            ResultValue(value=1.0, tolerance=-0.1)

    def test_frozen(self) -> None:
        """Result values are immutable."""
        value = ResultValue(value=1.0)

        with pytest.raises(ValidationError):
            value.value = 2.0  # type: ignore[misc]


# ============================================================================
# TestVariant / TestEntry Tests
# ============================================================================


class TestTestVariant:
    """Tests for TestVariant configuration typing."""

    def test_string_and_int_values(self) -> None:
        """Configuration values keep their YAML type."""
        variant = TestVariant.model_validate({"Configuration": {"Ranks": "4", "Threads": 1}, "Results": {}})

        assert variant.configuration == {"Ranks": "4", "Threads": 1}

    def test_float_config_value_rejected(self) -> None:
        """Configuration values must be ints or strings."""
        with pytest.raises(ValidationError):
            TestVariant.model_validate({"Configuration": {"Scale": 1.5}, "Results": {}})

    def test_bool_config_value_rejected(self) -> None:
        """Booleans are not accepted as integers."""
        with pytest.raises(ValidationError):
            TestVariant.model_validate({"Configuration": {"Flag": True}, "Results": {}})


class TestTestEntry:
    """Tests for TestEntry lookup."""

    def test_find_missing(self) -> None:
        """Unknown configurations are not found."""
        assert TestEntry().find({"Threads": 1}) is None

    def test_add_and_find(self) -> None:
        """Added variants are found by an equal configuration."""
        entry = TestEntry()
        variant = entry.add({"Threads": 1, "Teams": 2}, {"Time": ResultValue(value=1.0)})

        assert entry.find({"Teams": 2, "Threads": 1}) is variant
        assert entry.find({"Threads": "1", "Teams": 2}) is None

    def test_add_after_index_built(self) -> None:
        """Variants appended after a lookup are still found."""
        entry = TestEntry()
        entry.add({"Threads": 1}, {})
        assert entry.find({"Threads": 2}) is None

        second = entry.add({"Threads": 2}, {})

        assert entry.find({"Threads": 2}) is second
        assert len(entry.variants) == 2

    def test_duplicate_configuration_rejected(self) -> None:
        """A test entry cannot hold two equal configurations."""
        with pytest.raises(ValidationError):
            TestEntry.model_validate(
                [
                    {"Configuration": {"Threads": 1}, "Results": {}},
                    {"Configuration": {"Threads": 1}, "Results": {}},
                ]
            )


# ============================================================================
# MachineEntry Tests
# ============================================================================


class TestMachineEntry:
    """Tests for MachineEntry lookup."""

    def test_add_and_find(self) -> None:
        """Machine configurations are found by an equal description."""
        machine = MachineEntry()
        assert machine.find({"Ranks": 4}) is None

        added = machine.add({"Ranks": 4})

        assert isinstance(added, MachineConfiguration)
        assert machine.find({"Ranks": 4}) is added
        assert machine.find({"Ranks": 8}) is None

    def test_add_test(self) -> None:
        """Tests are added by name."""
        machine_config = MachineEntry().add({"Ranks": 4})
        entry = machine_config.add_test("t1")

        assert machine_config.tests == {"t1": entry}

    def test_duplicate_configuration_rejected(self) -> None:
        """A machine cannot hold two equal configurations."""
        with pytest.raises(ValidationError):
            MachineEntry.model_validate(
                {
                    "MachineConfigurations": [
                        {"Configuration": {"Ranks": 4}, "Tests": {}},
                        {"Configuration": {"Ranks": 4}, "Tests": {}},
                    ]
                }
            )


# ============================================================================
# Archive Tests
# ============================================================================


class TestArchive:
    """Tests for Archive documents."""

    def test_empty(self) -> None:
        """A new archive has no machines."""
        archive = Archive()

        assert len(archive) == 0
        assert archive.to_document() == {}

    def test_from_none(self) -> None:
        """An empty YAML document is an empty archive."""
        assert len(Archive.from_document(None)) == 0

    def test_from_document(self, sample_document: dict) -> None:
        """Documents are parsed into the model tree."""
        archive = Archive.from_document(sample_document)

        machine = archive.get_machine("node1")
        assert machine is not None
        machine_config = machine.find({"Node Type": "cpu", "Ranks": 4})
        assert machine_config is not None
        variant = machine_config.tests["t1"].find({"Threads": 1})
        assert variant is not None
        assert variant.results["Time"] == ResultValue(value=10.0, tolerance=0.1)
        assert variant.results["Counter"].is_exact

    def test_document_round_trip(self, sample_document: dict) -> None:
        """Parsing then dumping reproduces the document."""
        assert Archive.from_document(sample_document).to_document() == sample_document

    def test_add_machine(self) -> None:
        """Machines are added by name."""
        archive = Archive()
        machine = archive.add_machine("node1")
        machine.add({"Ranks": 4})

        assert archive.get_machine("node1") is machine
        assert archive.to_document() == {
            "node1": {"MachineConfigurations": [{"Configuration": {"Ranks": 4}, "Tests": {}}]}
        }

    def test_invalid_layout(self) -> None:
        """Documents with the wrong nesting are rejected."""
        with pytest.raises(ValidationError):
            Archive.from_document({"node1": {"MachineConfigurations": "oops"}})
