from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator


class CompletionKind(Enum):
    EXECUTABLE = "executable"
    SYMBOLIC_LINK = "symbolic_link"


class EntryType(Enum):
    """
    Classification a directory listing attaches to each entry.
    """

    FILE = "file"
    SYMBOLIC_LINK = "symbolic_link"
    DIRECTORY = "directory"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CompletionResource:
    """
    A completion candidate for one executable found on PATH.
    """

    label: str
    documentation: str
    kind: CompletionKind = CompletionKind.EXECUTABLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "documentation": self.documentation,
            "kind": self.kind.value,
        }


class LabelSet:
    """
    Names already accepted during one cache fill.

    Shared by every scan running for that fill, so inserts go through
    ``add_if_absent`` which checks and inserts under a single lock.
    """

    def __init__(self, labels: Iterable[str] = ()):
        self._lock = threading.Lock()
        self._labels: set[str] = set(labels)

    def add_if_absent(self, label: str) -> bool:
        """
        Insert ``label`` unless it is already present.

        Returns:
            bool: True if this call inserted the label.
        """
        with self._lock:
            if label in self._labels:
                return False
            self._labels.add(label)
            return True

    def snapshot(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._labels)

    def __contains__(self, label: object) -> bool:
        with self._lock:
            return label in self._labels

    def __len__(self) -> int:
        with self._lock:
            return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())


@dataclass(frozen=True)
class CacheEntry:
    """
    The merged scan result for one exact PATH value.
    """

    path_key: str
    candidates: frozenset[CompletionResource] = field(default_factory=frozenset)
    labels: frozenset[str] = field(default_factory=frozenset)

    def get(self, label: str) -> CompletionResource | None:
        for candidate in self.candidates:
            if candidate.label == label:
                return candidate
        return None

    def to_list(self) -> list[dict[str, Any]]:
        return [
            c.to_dict() for c in sorted(self.candidates, key=lambda c: c.label)
        ]
