"""
Immutable repository objects.

Defines content hashing for blobs and the Commit record, including its
deterministic id and JSON serialization.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, Mapping, Optional
from datetime import datetime, timezone
import hashlib
import json

INITIAL_COMMIT_MESSAGE = "initial commit"
INITIAL_COMMIT_AUTHOR = "twig"
EPOCH = 0


def hash_bytes(data: bytes) -> str:
    """Return the SHA-1 hex digest used as a blob id."""
    return hashlib.sha1(data).hexdigest()


def _canonical_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_commit_id(
    message: str,
    timestamp: int,
    author: str,
    snapshot: Mapping[str, str],
    first_parent: Optional[str],
    second_parent: Optional[str],
) -> str:
    """
    Compute a commit id from every field except the id itself.

    The snapshot is serialized with sorted keys, so two commits tracking the
    same files always hash identically regardless of insertion order.
    """
    payload = {
        "message": message,
        "timestamp": timestamp,
        "author": author,
        "first_parent": first_parent,
        "second_parent": second_parent,
        "snapshot": dict(sorted(snapshot.items())),
    }
    return hashlib.sha1(_canonical_json(payload).encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Commit:
    """
    An immutable snapshot of tracked files plus metadata.

    Attributes:
        commit_id: Hash of all other fields
        message: Commit message
        timestamp: Seconds since the Unix epoch (UTC)
        author: Commit author
        snapshot: Read-only mapping of filename to blob id
        first_parent: Id of the commit this one was made on top of
        second_parent: Id of the merged-in commit (merge commits only)
    """

    commit_id: str
    message: str
    timestamp: int
    author: str
    snapshot: Mapping[str, str] = field(default_factory=dict)
    first_parent: Optional[str] = None
    second_parent: Optional[str] = None

    def __post_init__(self) -> None:
        frozen = MappingProxyType(dict(sorted(self.snapshot.items())))
        object.__setattr__(self, "snapshot", frozen)

    @classmethod
    def create(
        cls,
        message: str,
        snapshot: Mapping[str, str],
        author: str,
        timestamp: int,
        first_parent: Optional[str] = None,
        second_parent: Optional[str] = None,
    ) -> "Commit":
        """Build a commit and stamp its id."""
        commit_id = compute_commit_id(
            message, timestamp, author, snapshot, first_parent, second_parent
        )
        return cls(
            commit_id=commit_id,
            message=message,
            timestamp=timestamp,
            author=author,
            snapshot=snapshot,
            first_parent=first_parent,
            second_parent=second_parent,
        )

    @classmethod
    def initial(cls) -> "Commit":
        """The root commit shared by every repository."""
        return cls.create(
            message=INITIAL_COMMIT_MESSAGE,
            snapshot={},
            author=INITIAL_COMMIT_AUTHOR,
            timestamp=EPOCH,
        )

    @property
    def parents(self) -> tuple[str, ...]:
        """Parent ids, first parent first."""
        return tuple(p for p in (self.first_parent, self.second_parent) if p)

    @property
    def is_merge(self) -> bool:
        return self.second_parent is not None

    def is_tracked(self, filename: str) -> bool:
        return filename in self.snapshot

    def blob_id(self, filename: str) -> Optional[str]:
        return self.snapshot.get(filename)

    def verify(self) -> bool:
        """Check that the stored id matches the commit's content."""
        return self.commit_id == compute_commit_id(
            self.message,
            self.timestamp,
            self.author,
            self.snapshot,
            self.first_parent,
            self.second_parent,
        )

    def formatted_date(self) -> str:
        """Date in log format, e.g. 'Thu Jan 01 00:00:00 1970 +0000'."""
        moment = datetime.fromtimestamp(self.timestamp, tz=timezone.utc).astimezone()
        return moment.strftime("%a %b %d %H:%M:%S %Y %z")

    def to_dict(self) -> Dict[str, Any]:
        """Convert commit to dictionary for serialization."""
        return {
            "commit_id": self.commit_id,
            "message": self.message,
            "timestamp": self.timestamp,
            "author": self.author,
            "snapshot": dict(self.snapshot),
            "first_parent": self.first_parent,
            "second_parent": self.second_parent,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Commit":
        """Create commit from dictionary."""
        return cls(
            commit_id=data["commit_id"],
            message=data["message"],
            timestamp=int(data["timestamp"]),
            author=data["author"],
            snapshot=data.get("snapshot", {}),
            first_parent=data.get("first_parent"),
            second_parent=data.get("second_parent"),
        )

    def to_json(self) -> str:
        """Convert commit to JSON string."""
        return json.dumps(self.to_dict(), indent=2, sort_keys=True)

    @classmethod
    def from_json(cls, json_str: str) -> "Commit":
        """Create commit from JSON string."""
        return cls.from_dict(json.loads(json_str))
