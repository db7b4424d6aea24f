"""File-backed mapping from generated script class names to source files.

The mapping lives in <root>/<tmp dir>/script-mapping.properties. Every
call compares the file's (mtime, size) fingerprint against the last one
seen and re-reads the whole file when it changed, so mappings recorded by
an earlier build run (or another store instance) become visible without
any locking.

Storage failures never reach the caller: a file that cannot be read acts
as an empty mapping, and a file that cannot be written leaves the new
entry in memory only. Both are logged at ERROR.
"""

import logging
import os
from pathlib import Path

from . import config, properties
from .fingerprint import Fingerprint
from .protocols import ScriptSource

logger = logging.getLogger(__name__)

HEADER_COMMENT = "Autogenerated.  Do not edit."


class MappingStoreError(Exception):
    """Base class for mapping store errors."""


class InvalidArgument(MappingStoreError, ValueError):
    """A required source or class name was missing or malformed."""


class StorageReadFailure(MappingStoreError):
    """The mapping file exists but could not be read or parsed."""


class StorageWriteFailure(MappingStoreError):
    """The mapping file or its directory could not be written."""


class MappingStore:
    """Persistent class name -> absolute source path mapping for one build root."""

    def __init__(self, root_dir: str | Path):
        self._mapping_file = Path(root_dir) / config.tmp_dir_name() / config.MAPPING_FILE_NAME
        self._entries: dict[str, str] = {}
        self._fingerprint: Fingerprint | None = None

    @property
    def mapping_file(self) -> Path:
        return self._mapping_file

    def lookup(self, class_name: str) -> Path | None:
        """Return the source file recorded for class_name, or None."""
        _require_class_name(class_name)
        self._reload_if_stale()
        path = self._entries.get(class_name)
        return Path(path) if path is not None else None

    def record(self, source: ScriptSource) -> None:
        """Remember the absolute path source was compiled from.

        Sources with no backing file are ignored. The mapping file is only
        rewritten when the stored path for the class actually changes.
        """
        if source is None:
            raise InvalidArgument("source must not be None")
        if not source.is_file_backed:
            return
        _require_class_name(source.class_name)

        self._reload_if_stale()
        absolute_path = os.path.abspath(os.fspath(source.source_file))
        if self._entries.get(source.class_name) == absolute_path:
            return

        self._entries[source.class_name] = absolute_path
        try:
            self._write()
        except StorageWriteFailure as e:
            # A partial write still changed the file; keep the in-memory view.
            self._fingerprint = Fingerprint.of(self._mapping_file)
            logger.error(
                "mapping_store.write_failed",
                exc_info=True,
                extra={
                    "path": str(self._mapping_file),
                    "class_name": source.class_name,
                    "error_type": type(e.__cause__ or e).__name__,
                },
            )

    def __contains__(self, class_name: object) -> bool:
        if not isinstance(class_name, str) or not class_name:
            return False
        self._reload_if_stale()
        return class_name in self._entries

    def __len__(self) -> int:
        self._reload_if_stale()
        return len(self._entries)

    def _reload_if_stale(self) -> None:
        current = Fingerprint.of(self._mapping_file)
        if current == self._fingerprint:
            return

        # Track what was observed, not what parsed successfully.
        self._fingerprint = current
        self._entries.clear()
        try:
            self._entries.update(self._read())
        except StorageReadFailure as e:
            logger.error(
                "mapping_store.read_failed",
                exc_info=True,
                extra={
                    "path": str(self._mapping_file),
                    "error_type": type(e.__cause__ or e).__name__,
                },
            )
            return

        logger.debug(
            "mapping_store.reloaded",
            extra={"path": str(self._mapping_file), "entries": len(self._entries)},
        )

    def _read(self) -> dict[str, str]:
        path = self._mapping_file
        if not path.exists():
            return {}
        if not os.access(path, os.R_OK):
            raise StorageReadFailure(f"Mapping file is not readable: {path}")

        try:
            with open(path, encoding=properties.ENCODING, newline="") as fh:
                return properties.load(fh)
        except (OSError, properties.PropertiesError) as e:
            raise StorageReadFailure(f"Failed to read mapping file {path}: {e}") from e

    def _write(self) -> None:
        path = self._mapping_file
        directory = path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageWriteFailure(f"Failed to create {directory}: {e}") from e

        if path.exists():
            writable = os.access(path, os.W_OK)
        else:
            writable = os.access(directory, os.W_OK)
        if not writable:
            logger.debug("mapping_store.write_skipped", extra={"path": str(path)})
            return

        try:
            with open(path, "w", encoding=properties.ENCODING, newline="\n") as fh:
                properties.dump(self._entries, fh, comment=HEADER_COMMENT)
        except OSError as e:
            raise StorageWriteFailure(f"Failed to write mapping file {path}: {e}") from e

        logger.debug(
            "mapping_store.written",
            extra={"path": str(path), "entries": len(self._entries)},
        )


def _require_class_name(class_name: object) -> None:
    if not isinstance(class_name, str) or not class_name:
        raise InvalidArgument(f"class name must be a non-empty string, got {class_name!r}")
