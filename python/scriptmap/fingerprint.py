"""Cheap staleness fingerprint for a file: (mtime_ns, size).

A missing file fingerprints as MISSING, so a store that has never looked
at its file (fingerprint None) still reloads once on first use.
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Fingerprint:
    mtime_ns: int
    size: int

    @classmethod
    def of(cls, path: str | Path) -> "Fingerprint":
        """Stat path; unreadable or absent files yield MISSING."""
        try:
            st = os.stat(path)
        except OSError:
            return MISSING
        return cls(st.st_mtime_ns, st.st_size)


MISSING = Fingerprint(0, 0)
