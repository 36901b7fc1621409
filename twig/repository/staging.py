"""
Staging area (index) for pending changes.

Holds files staged for addition (with their target blob ids) and files
staged for removal, persisted between command invocations as JSON.
"""

from dataclasses import dataclass, field
from typing import Dict, Set, Any, Optional
import json

from twig.logging import get_twig_logger
from .storage import RepositoryLayout, atomic_write

log = get_twig_logger("staging")


@dataclass
class StagingArea:
    """
    Mutable pending-change set.

    A filename is never in both ``additions`` and ``removals``.
    """

    additions: Dict[str, str] = field(default_factory=dict)
    removals: Set[str] = field(default_factory=set)

    def stage_addition(
        self, filename: str, blob_id: str, head_blob_id: Optional[str] = None
    ) -> bool:
        """
        Stage ``filename`` with content ``blob_id``.

        If the content equals what HEAD already tracks, the file is instead
        dropped from both sets.

        Returns:
            True if the file ended up staged for addition
        """
        self.removals.discard(filename)
        if blob_id == head_blob_id:
            self.additions.pop(filename, None)
            return False
        self.additions[filename] = blob_id
        return True

    def stage_removal(self, filename: str) -> None:
        self.additions.pop(filename, None)
        self.removals.add(filename)

    def unstage(self, filename: str) -> None:
        self.additions.pop(filename, None)
        self.removals.discard(filename)

    def is_staged_for_addition(self, filename: str) -> bool:
        return filename in self.additions

    def is_staged_for_removal(self, filename: str) -> bool:
        return filename in self.removals

    def is_empty(self) -> bool:
        return not self.additions and not self.removals

    def clear(self) -> None:
        self.additions.clear()
        self.removals.clear()

    def apply_to(self, snapshot: Dict[str, str]) -> Dict[str, str]:
        """Return a copy of ``snapshot`` with the staged changes applied."""
        result = dict(snapshot)
        result.update(self.additions)
        for filename in self.removals:
            result.pop(filename, None)
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "additions": dict(sorted(self.additions.items())),
            "removals": sorted(self.removals),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StagingArea":
        return cls(
            additions=dict(data.get("additions", {})),
            removals=set(data.get("removals", [])),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "StagingArea":
        return cls.from_dict(json.loads(json_str))


class StagingStore:
    """Loads and saves the staging area file."""

    def __init__(self, layout: RepositoryLayout):
        self.layout = layout

    def load(self) -> StagingArea:
        if not self.layout.staging_file.is_file():
            return StagingArea()
        return StagingArea.from_json(self.layout.staging_file.read_text(encoding="utf-8"))

    def save(self, staging: StagingArea) -> None:
        atomic_write(self.layout.staging_file, staging.to_json().encode("utf-8"))
        log.debug(
            "Saved staging area",
            additions=len(staging.additions),
            removals=len(staging.removals),
        )

    def clear(self) -> None:
        self.save(StagingArea())
