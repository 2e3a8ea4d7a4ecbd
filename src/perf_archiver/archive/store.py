"""YAML file storage for the performance archive.

This module loads and saves the whole archive as one YAML document.
Writes are atomic (temp file + rename), so a reader sees either the old
or the new archive, never a partial one.

Only one process should write a given archive file; concurrent writers
are not coordinated and the last write wins.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Hashable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from perf_archiver.archive.models import Archive
from perf_archiver.core.exceptions import ArchiveFormatError, ArchiveIOError

logger = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects a key repeated within one mapping.

    Plain safe_load keeps the last of duplicate keys; this loader raises
    a ConstructorError instead.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def dump_yaml(archive: Archive) -> str:
    """Render an archive as a YAML document.

    Args:
        archive: Archive to render.

    Returns:
        YAML text, with keys in insertion order.
    """
    return yaml.safe_dump(
        archive.to_document(),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


class ArchiveStore:
    """An archive together with the file it is persisted to.

    Attributes:
        path: Path of the YAML archive file.
        archive: The in-memory archive.

    Example:
        >>> store = ArchiveStore.load("performance.yaml")
        >>> classification = classify(store.archive, ...)
        >>> if classification.changed:
        ...     store.save()
    """

    def __init__(self, path: str | Path, archive: Archive | None = None) -> None:
        """Initialize the store.

        Args:
            path: Path of the YAML archive file.
            archive: Archive contents (default: empty archive).
        """
        self.path = Path(path)
        self.archive = archive if archive is not None else Archive()

    @classmethod
    def load(cls, path: str | Path) -> ArchiveStore:
        """Load an archive from a YAML file.

        A missing or blank file loads as an empty archive.

        Args:
            path: Path of the YAML archive file.

        Returns:
            Store holding the loaded archive.

        Raises:
            ArchiveIOError: If the file exists but cannot be read.
            ArchiveFormatError: If the file is not a valid archive.
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"No archive at {path}, starting empty")
            return cls(path)
        except UnicodeDecodeError as e:
            raise ArchiveFormatError(f"{path}: not a text file: {e}") from e
        except OSError as e:
            raise ArchiveIOError(f"Cannot read archive {path}: {e}") from e

        if not content.strip():
            return cls(path)

        try:
            document = yaml.load(content, Loader=UniqueKeyLoader)  # noqa: S506
        except yaml.YAMLError as e:
            raise ArchiveFormatError(f"{path}: invalid YAML: {e}") from e

        if document is not None and not isinstance(document, dict):
            raise ArchiveFormatError(f"{path}: expected a mapping of machine names at top level")

        try:
            archive = Archive.from_document(document)
        except ValidationError as e:
            raise ArchiveFormatError(f"{path}: invalid archive layout: {e}") from e

        logger.debug(f"Loaded archive {path} with {len(archive)} machine(s)")
        return cls(path, archive)

    def save(self, path: str | Path | None = None) -> None:
        """Write the archive to disk atomically.

        Args:
            path: Destination (default: the path the store was loaded from).

        Raises:
            ArchiveIOError: If the file cannot be written. The previous
                archive file, if any, is left untouched.
        """
        target = Path(path) if path is not None else self.path
        content = dump_yaml(self.archive)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target.parent,
                prefix=f".{target.name}_",
                suffix=".tmp",
            )
        except OSError as e:
            raise ArchiveIOError(f"Cannot write archive {target}: {e}") from e

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            Path(temp_path).replace(target)
        except OSError as e:
            Path(temp_path).unlink(missing_ok=True)
            raise ArchiveIOError(f"Cannot write archive {target}: {e}") from e
        except Exception:
            Path(temp_path).unlink(missing_ok=True)
            raise

        logger.debug(f"Saved archive {target}")

    def to_yaml(self) -> str:
        """Return the archive as YAML text."""
        return dump_yaml(self.archive)
