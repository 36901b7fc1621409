"""
Branch pointers and HEAD.

HEAD holds either ``ref: branches/<name>`` (on a branch) or a raw commit id
(detached).
"""

from pathlib import Path
from typing import List, Optional

from twig.logging import get_twig_logger, log_ref_update
from .errors import (
    BranchExistsError,
    BranchNotFoundError,
    InvalidBranchNameError,
    NotInitializedError,
)
from .storage import RepositoryLayout, atomic_write

log = get_twig_logger("refs")

HEAD_REF_PREFIX = "ref: branches/"


class ReferenceStore:
    """File-backed branch and HEAD references."""

    def __init__(self, layout: RepositoryLayout):
        self.layout = layout

    # Branches

    @staticmethod
    def is_valid_name(name: str) -> bool:
        return bool(name) and not name.startswith(".") and "/" not in name and "\\" not in name

    def _branch_file(self, name: str) -> Path:
        if not self.is_valid_name(name):
            raise BranchNotFoundError(name)
        return self.layout.branches_dir / name

    def branch_exists(self, name: str) -> bool:
        try:
            return self._branch_file(name).is_file()
        except BranchNotFoundError:
            return False

    def read_branch(self, name: str) -> str:
        """
        Commit id a branch points to.

        Raises:
            BranchNotFoundError: If the branch does not exist
        """
        path = self._branch_file(name)
        if not path.is_file():
            raise BranchNotFoundError(name)
        return path.read_text(encoding="utf-8").strip()

    def write_branch(self, name: str, commit_id: str) -> None:
        path = self._branch_file(name)
        old = path.read_text(encoding="utf-8").strip() if path.is_file() else None
        atomic_write(path, commit_id.encode("utf-8"))
        log_ref_update(log, name, old, commit_id)

    def create_branch(self, name: str, commit_id: str) -> None:
        """
        Create a branch at ``commit_id``.

        Raises:
            BranchExistsError: If the name is taken
        """
        if not self.is_valid_name(name):
            raise InvalidBranchNameError(name)
        if self.branch_exists(name):
            raise BranchExistsError(name)
        self.write_branch(name, commit_id)

    def delete_branch(self, name: str) -> None:
        path = self._branch_file(name)
        if not path.is_file():
            raise BranchNotFoundError(name)
        path.unlink()
        log.info("Deleted branch {branch}", branch=name)

    def list_branches(self) -> List[str]:
        """Sorted branch names."""
        return sorted(
            p.name
            for p in self.layout.branches_dir.iterdir()
            if p.is_file() and not p.name.startswith(".")
        )

    # HEAD

    def _read_head(self) -> str:
        if not self.layout.head_file.is_file():
            raise NotInitializedError()
        return self.layout.head_file.read_text(encoding="utf-8").strip()

    def current_branch(self) -> Optional[str]:
        """
        Name of the checked-out branch.

        Returns:
            Branch name, or None when HEAD is detached
        """
        head = self._read_head()
        if head.startswith(HEAD_REF_PREFIX):
            return head[len(HEAD_REF_PREFIX):]
        return None

    def is_detached(self) -> bool:
        return self.current_branch() is None

    def current_commit_id(self) -> str:
        """Dereference HEAD (through its branch, if any) to a commit id."""
        head = self._read_head()
        if head.startswith(HEAD_REF_PREFIX):
            return self.read_branch(head[len(HEAD_REF_PREFIX):])
        return head

    def set_head(self, branch: str) -> None:
        """Point HEAD at a branch."""
        if not self.branch_exists(branch):
            raise BranchNotFoundError(branch)
        atomic_write(self.layout.head_file, f"{HEAD_REF_PREFIX}{branch}".encode("utf-8"))
        log.info("HEAD -> {branch}", branch=branch)

    def detach_head(self, commit_id: str) -> None:
        """Point HEAD directly at a commit."""
        atomic_write(self.layout.head_file, commit_id.encode("utf-8"))
        log.info("HEAD detached at {short}", short=commit_id[:7])

    def advance_current(self, new_id: str) -> None:
        """
        Move whatever HEAD designates to ``new_id``.

        On a branch the branch file is rewritten; when detached, HEAD itself.
        """
        branch = self.current_branch()
        if branch is not None:
            self.write_branch(branch, new_id)
        else:
            old = self._read_head()
            atomic_write(self.layout.head_file, new_id.encode("utf-8"))
            log_ref_update(log, "HEAD", old, new_id)
