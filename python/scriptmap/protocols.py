"""Script source protocols for scriptmap.

Defines the ScriptSource record handed in by the compiler and the
ScriptSourceMappingHandler protocol that decouples build code from the
file-backed store implementation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class ScriptSource:
    """A compiled script: its generated class name and originating file."""
    class_name: str
    source_file: Path | str | None = None

    @property
    def is_file_backed(self) -> bool:
        return self.source_file is not None


class ScriptSourceMappingHandler(Protocol):
    """Protocol for mapping generated script class names back to source files."""

    def lookup(self, class_name: str) -> Path | None:
        """Return the source file recorded for class_name, or None."""
        ...

    def record(self, source: ScriptSource) -> None:
        """Remember where source was compiled from.

        Sources without a backing file are ignored.
        """
        ...
