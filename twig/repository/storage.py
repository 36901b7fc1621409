"""
Storage backend for the repository engine.

Handles the on-disk layout and content-addressed persistence of blobs and
commits.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Iterator, List

from twig.logging import get_twig_logger
from .errors import BlobNotFoundError, CommitNotFoundError
from .objects import Commit, hash_bytes

log = get_twig_logger("objects")

OBJECT_ID_RE = re.compile(r"^[0-9a-f]{4,40}$")


def atomic_write(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` via a temp file and an atomic rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class RepositoryLayout:
    """
    Paths of the metadata directory.

    Directory structure:
    - <root>/<meta_dir>/
      - commits/
        - {commit_id}  (JSON commit record)
      - blobs/
        - {blob_id}  (raw file bytes)
      - branches/
        - {branch_name}  (contains commit_id)
      - staging  (JSON staging area)
      - HEAD  (contains "ref: branches/<name>" or a commit_id)
    """

    def __init__(self, root: Path, meta_dir: str = ".twig"):
        """
        Initialize layout.

        Args:
            root: Working-tree root
            meta_dir: Name of the metadata directory inside root
        """
        self.root = Path(root)
        self.meta_dir_name = meta_dir
        self.base_dir = self.root / meta_dir
        self.commits_dir = self.base_dir / "commits"
        self.blobs_dir = self.base_dir / "blobs"
        self.branches_dir = self.base_dir / "branches"
        self.staging_file = self.base_dir / "staging"
        self.head_file = self.base_dir / "HEAD"

    def exists(self) -> bool:
        """Whether a repository has been initialized here."""
        return self.head_file.is_file()

    def create_directories(self) -> None:
        """Ensure all necessary directories exist."""
        self.commits_dir.mkdir(parents=True, exist_ok=True)
        self.blobs_dir.mkdir(parents=True, exist_ok=True)
        self.branches_dir.mkdir(parents=True, exist_ok=True)


class ObjectStore:
    """
    Content-addressed store of blobs and commit records.

    Objects are written once and never modified or deleted.
    """

    def __init__(self, layout: RepositoryLayout):
        self.layout = layout

    # Blobs

    def put_blob(self, data: bytes) -> str:
        """
        Store file content.

        Args:
            data: Raw bytes

        Returns:
            Blob id (hash of data). Storing identical content again is a no-op.
        """
        blob_id = hash_bytes(data)
        path = self.layout.blobs_dir / blob_id
        if not path.exists():
            atomic_write(path, data)
            log.debug("Stored blob {blob_id}", blob_id=blob_id, size=len(data))
        return blob_id

    def get_blob(self, blob_id: str) -> bytes:
        """
        Load file content.

        Raises:
            BlobNotFoundError: If no blob has that id
        """
        path = self.layout.blobs_dir / blob_id
        if not OBJECT_ID_RE.match(blob_id) or not path.is_file():
            raise BlobNotFoundError(blob_id)
        return path.read_bytes()

    def has_blob(self, blob_id: str) -> bool:
        if not OBJECT_ID_RE.match(blob_id):
            return False
        return (self.layout.blobs_dir / blob_id).is_file()

    # Commits

    def put_commit(self, commit: Commit) -> None:
        """Save a commit record under its id."""
        path = self.layout.commits_dir / commit.commit_id
        if not path.exists():
            atomic_write(path, commit.to_json().encode("utf-8"))
            log.debug("Stored commit {commit_id}", commit_id=commit.commit_id)

    def get_commit(self, commit_id: str) -> Commit:
        """
        Load a commit record.

        Raises:
            CommitNotFoundError: If no commit has that id
        """
        path = self.layout.commits_dir / commit_id
        if not OBJECT_ID_RE.match(commit_id) or not path.is_file():
            raise CommitNotFoundError(commit_id)
        return Commit.from_json(path.read_text(encoding="utf-8"))

    def has_commit(self, commit_id: str) -> bool:
        if not OBJECT_ID_RE.match(commit_id):
            return False
        return (self.layout.commits_dir / commit_id).is_file()

    def commit_ids(self) -> List[str]:
        """
        List all commit ids.

        Returns:
            Sorted list of stored commit ids
        """
        return sorted(
            p.name
            for p in self.layout.commits_dir.iterdir()
            if p.is_file() and not p.name.startswith(".")
        )

    def iter_commits(self) -> Iterator[Commit]:
        for commit_id in self.commit_ids():
            yield self.get_commit(commit_id)
