"""Data model of the performance archive.

The archive is a tree: machines own machine configurations, which own
named tests, which own one (configuration, results) variant per test
configuration observed. Every level is a pydantic model whose aliases
match the keys of the YAML document:

    <machine>:
      MachineConfigurations:
        - Configuration: {...}
          Tests:
            <test>:
              - Configuration: {...}
                Results: {<name>: {value: ..., tolerance: ...}}

Configuration sets are looked up through an index keyed on their
canonical JSON rendering, built on first lookup and kept current on
append.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    FiniteFloat,
    PrivateAttr,
    RootModel,
    StrictInt,
    StrictStr,
    field_serializer,
    field_validator,
    model_validator,
)
from typing_extensions import Self

from perf_archiver.core.hashing import config_key

# Serialized tolerance of a result compared exactly
EXACT = "exact"

ConfigValue = Union[StrictInt, StrictStr]
ConfigurationSet = dict[str, ConfigValue]


class ResultValue(BaseModel):
    """A measured value and how it is compared against later runs.

    Attributes:
        value: The measurement.
        tolerance: Relative tolerance, or None for an exact comparison.

    Example:
        >>> ResultValue(value=10.0, tolerance=0.1).is_exact
        False
        >>> ResultValue(value=22).model_dump()
        {'value': 22, 'tolerance': 'exact'}
    """

    model_config = {"frozen": True}

    value: Union[StrictInt, FiniteFloat] = Field(..., description="Measured value (finite)")
    tolerance: float | None = Field(
        default=None,
        ge=0,
        description="Relative tolerance (None for exact comparison)",
    )

    @field_validator("tolerance", mode="before")
    @classmethod
    def _parse_exact(cls, value: Any) -> Any:
        if value == EXACT:
            return None
        return value

    @field_serializer("tolerance")
    def _dump_exact(self, tolerance: float | None) -> float | str:
        return EXACT if tolerance is None else tolerance

    @property
    def is_exact(self) -> bool:
        """Whether this value must match exactly."""
        return self.tolerance is None


ResultSet = dict[str, ResultValue]


class TestVariant(BaseModel):
    """One observed configuration of a test and its baseline results.

    Attributes:
        configuration: Run configuration the results were recorded under.
        results: Baseline results keyed by result name.
    """

    __test__ = False

    model_config = ConfigDict(populate_by_name=True)

    configuration: ConfigurationSet = Field(default_factory=dict, alias="Configuration")
    results: ResultSet = Field(default_factory=dict, alias="Results")


class TestEntry(RootModel[list[TestVariant]]):
    """All recorded variants of a single named test."""

    __test__ = False

    root: list[TestVariant] = Field(default_factory=list)
    _index: dict[str, int] | None = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _check_unique_configurations(self) -> Self:
        keys = [config_key(variant.configuration) for variant in self.root]
        if len(keys) != len(set(keys)):
            msg = "duplicate test configuration in test entry"
            raise ValueError(msg)
        return self

    @property
    def variants(self) -> list[TestVariant]:
        """Recorded variants in insertion order."""
        return self.root

    def find(self, configuration: ConfigurationSet) -> TestVariant | None:
        """Find the variant recorded under an equal configuration set.

        Args:
            configuration: Test configuration to look up.

        Returns:
            The matching variant, or None.
        """
        if self._index is None:
            self._index = {config_key(v.configuration): i for i, v in enumerate(self.root)}
        position = self._index.get(config_key(configuration))
        return None if position is None else self.root[position]

    def add(self, configuration: ConfigurationSet, results: ResultSet) -> TestVariant:
        """Append a new variant.

        Args:
            configuration: Test configuration, not yet present in this entry.
            results: Results to record as the baseline.

        Returns:
            The appended variant.
        """
        variant = TestVariant(configuration=dict(configuration), results=dict(results))
        self.root.append(variant)
        if self._index is not None:
            self._index[config_key(variant.configuration)] = len(self.root) - 1
        return variant


class MachineConfiguration(BaseModel):
    """A hardware/software setup of a machine and the tests run on it.

    Attributes:
        configuration: Machine description (compiler, node type, ...).
        tests: Test entries keyed by test name.
    """

    model_config = ConfigDict(populate_by_name=True)

    configuration: ConfigurationSet = Field(default_factory=dict, alias="Configuration")
    tests: dict[str, TestEntry] = Field(default_factory=dict, alias="Tests")

    def add_test(self, test_name: str) -> TestEntry:
        """Create an empty entry for a test not yet recorded here."""
        entry = TestEntry()
        self.tests[test_name] = entry
        return entry


class MachineEntry(BaseModel):
    """All configurations recorded for one machine.

    Attributes:
        machine_configurations: Configurations in the order they were first seen.
    """

    model_config = ConfigDict(populate_by_name=True)

    machine_configurations: list[MachineConfiguration] = Field(
        default_factory=list,
        alias="MachineConfigurations",
    )
    _index: dict[str, int] | None = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _check_unique_configurations(self) -> Self:
        keys = [config_key(mc.configuration) for mc in self.machine_configurations]
        if len(keys) != len(set(keys)):
            msg = "duplicate machine configuration in machine entry"
            raise ValueError(msg)
        return self

    def find(self, configuration: ConfigurationSet) -> MachineConfiguration | None:
        """Find the machine configuration with an equal configuration set.

        Args:
            configuration: Machine description to look up.

        Returns:
            The matching machine configuration, or None.
        """
        if self._index is None:
            self._index = {config_key(mc.configuration): i for i, mc in enumerate(self.machine_configurations)}
        position = self._index.get(config_key(configuration))
        return None if position is None else self.machine_configurations[position]

    def add(self, configuration: ConfigurationSet) -> MachineConfiguration:
        """Append a new, empty machine configuration.

        Args:
            configuration: Machine description, not yet present in this entry.

        Returns:
            The appended machine configuration.
        """
        machine_config = MachineConfiguration(configuration=dict(configuration))
        self.machine_configurations.append(machine_config)
        if self._index is not None:
            self._index[config_key(machine_config.configuration)] = len(self.machine_configurations) - 1
        return machine_config


class Archive(RootModel[dict[str, MachineEntry]]):
    """The whole archive, keyed by machine name.

    Example:
        >>> archive = Archive()
        >>> machine = archive.add_machine("node1")
        >>> machine_config = machine.add({"Ranks": 4})
        >>> archive.to_document()
        {'node1': {'MachineConfigurations': [{'Configuration': {'Ranks': 4}, 'Tests': {}}]}}
    """

    root: dict[str, MachineEntry] = Field(default_factory=dict)

    def __len__(self) -> int:
        """Return the number of machines."""
        return len(self.root)

    @property
    def machines(self) -> dict[str, MachineEntry]:
        """Machine entries keyed by machine name."""
        return self.root

    def get_machine(self, machine_name: str) -> MachineEntry | None:
        """Return the entry of a machine, or None if it was never recorded."""
        return self.root.get(machine_name)

    def add_machine(self, machine_name: str) -> MachineEntry:
        """Create an empty entry for a machine not yet recorded."""
        entry = MachineEntry()
        self.root[machine_name] = entry
        return entry

    def to_document(self) -> dict[str, Any]:
        """Convert the archive to plain data for YAML/JSON serialization.

        Returns:
            Nested dicts and lists using the archive document keys.
        """
        document: dict[str, Any] = self.model_dump(mode="json", by_alias=True)
        return document

    @classmethod
    def from_document(cls, document: Any) -> Archive:
        """Build an archive from parsed YAML/JSON data.

        Args:
            document: Parsed document (None for an empty file).

        Returns:
            Archive instance.

        Raises:
            pydantic.ValidationError: If the document does not fit the layout.
        """
        if document is None:
            return cls()
        return cls.model_validate(document)
