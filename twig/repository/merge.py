"""
Three-way merge of two branch tips.

Flow: validate preconditions, find the merge base, classify every file
against the base, then either fast-forward, do nothing, or write the merged
snapshot (with conflict markers where needed) and record a merge commit.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from twig.logging import get_twig_logger
from .errors import (
    RepositoryStateError,
    SelfMergeError,
    UncommittedChangesError,
)
from .graph import CommitGraph
from .objects import Commit
from .refs import ReferenceStore
from .staging import StagingStore
from .storage import ObjectStore
from .worktree import WorkingTree

log = get_twig_logger("merge")

FAST_FORWARD_MESSAGE = "Current branch fast-forwarded."
ANCESTOR_MESSAGE = "Given branch is an ancestor of the current branch."
CONFLICT_MESSAGE = "Encountered a merge conflict."


class FileOutcome(str, Enum):
    """How a single file was reconciled."""

    UNCHANGED = "unchanged"
    KEEP_CURRENT = "keep_current"
    TAKE_GIVEN = "take_given"
    SAME_CHANGE = "same_change"
    CONFLICT = "conflict"


class MergeKind(str, Enum):
    """Overall shape of a merge."""

    FAST_FORWARD = "fast_forward"
    ANCESTOR = "ancestor"
    MERGED = "merged"


@dataclass
class FileMerge:
    """Reconciliation of one filename; ``blob_id`` None means absent."""

    filename: str
    outcome: FileOutcome
    blob_id: Optional[str]


@dataclass
class MergeResult:
    """Outcome of a merge operation."""

    kind: MergeKind
    base_id: str
    commit_id: Optional[str] = None
    files: List[FileMerge] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)

    @property
    def conflicts(self) -> List[str]:
        return [f.filename for f in self.files if f.outcome == FileOutcome.CONFLICT]

    @property
    def has_conflicts(self) -> bool:
        return any(f.outcome == FileOutcome.CONFLICT for f in self.files)


def classify(
    base: Optional[str], current: Optional[str], given: Optional[str]
) -> FileOutcome:
    """
    Classify one file from its blob ids (None = absent) on each side.

    A side "changed" the file if its state (content or presence) differs from
    the base.
    """
    current_changed = current != base
    given_changed = given != base
    if not current_changed and not given_changed:
        return FileOutcome.UNCHANGED
    if current_changed and not given_changed:
        return FileOutcome.KEEP_CURRENT
    if given_changed and not current_changed:
        return FileOutcome.TAKE_GIVEN
    if current == given:
        return FileOutcome.SAME_CHANGE
    return FileOutcome.CONFLICT


def _terminated(content: bytes) -> bytes:
    if content and not content.endswith(b"\n"):
        return content + b"\n"
    return content


def conflict_content(current: bytes, given: bytes, given_branch: str) -> bytes:
    """
    Replacement content for a conflicted file.

    A deleted side contributes empty content. Each non-empty side is newline
    terminated so every marker starts its own line.
    """
    return (
        b"<<<<<<< HEAD\n"
        + _terminated(current)
        + b"=======\n"
        + _terminated(given)
        + f">>>>>>> {given_branch}\n".encode("utf-8")
    )


class MergeEngine:
    """Merges a named branch into whatever HEAD designates."""

    def __init__(
        self,
        objects: ObjectStore,
        graph: CommitGraph,
        refs: ReferenceStore,
        staging: StagingStore,
        worktree: WorkingTree,
    ):
        self.objects = objects
        self.graph = graph
        self.refs = refs
        self.staging = staging
        self.worktree = worktree

    def merge(self, given_branch: str) -> MergeResult:
        """
        Merge ``given_branch`` into the current branch.

        Raises:
            UncommittedChangesError: Staging area is not empty
            BranchNotFoundError: ``given_branch`` does not exist
            SelfMergeError: ``given_branch`` is the current branch
            UntrackedFileConflictError: An untracked file would be overwritten
        """
        if not self.staging.load().is_empty():
            raise UncommittedChangesError()

        given_id = self.refs.read_branch(given_branch)
        current_branch = self.refs.current_branch()
        if given_branch == current_branch:
            raise SelfMergeError(given_branch)
        current_id = self.refs.current_commit_id()

        base_id = self.graph.merge_base(current_id, given_id)
        if base_id is None:
            raise RepositoryStateError("Branches share no common ancestor.")

        if base_id == given_id:
            log.info("Merge of {branch} is a no-op", branch=given_branch)
            return MergeResult(
                kind=MergeKind.ANCESTOR, base_id=base_id, messages=[ANCESTOR_MESSAGE]
            )

        base = self.objects.get_commit(base_id)
        current = self.objects.get_commit(current_id)
        given = self.objects.get_commit(given_id)

        self.worktree.check_untracked(
            current.snapshot,
            set(base.snapshot) | set(current.snapshot) | set(given.snapshot),
        )

        if base_id == current_id:
            return self._fast_forward(current, given)

        label = current_branch if current_branch is not None else current_id[:7]
        return self._three_way(base, current, given, given_branch, label)

    def _fast_forward(self, current: Commit, given: Commit) -> MergeResult:
        self.worktree.sync(current.snapshot, given.snapshot, self.objects)
        self.refs.advance_current(given.commit_id)
        self.staging.clear()
        log.info("Fast-forwarded to {short}", short=given.commit_id[:7])
        return MergeResult(
            kind=MergeKind.FAST_FORWARD,
            base_id=current.commit_id,
            commit_id=None,
            messages=[FAST_FORWARD_MESSAGE],
        )

    def reconcile(
        self, base: Commit, current: Commit, given: Commit, given_branch: str
    ) -> List[FileMerge]:
        """
        Classify every file of the three snapshots and compute its result.

        Conflict contents are stored as blobs so the result can be committed.
        """
        names = sorted(set(base.snapshot) | set(current.snapshot) | set(given.snapshot))
        files: List[FileMerge] = []
        for name in names:
            base_blob = base.blob_id(name)
            current_blob = current.blob_id(name)
            given_blob = given.blob_id(name)
            outcome = classify(base_blob, current_blob, given_blob)

            if outcome == FileOutcome.TAKE_GIVEN:
                result = given_blob
            elif outcome == FileOutcome.CONFLICT:
                content = conflict_content(
                    self.objects.get_blob(current_blob) if current_blob else b"",
                    self.objects.get_blob(given_blob) if given_blob else b"",
                    given_branch,
                )
                result = self.objects.put_blob(content)
            else:
                result = current_blob
            files.append(FileMerge(filename=name, outcome=outcome, blob_id=result))
        return files

    def _three_way(
        self,
        base: Commit,
        current: Commit,
        given: Commit,
        given_branch: str,
        current_label: str,
    ) -> MergeResult:
        files = self.reconcile(base, current, given, given_branch)

        merged: Dict[str, str] = {f.filename: f.blob_id for f in files if f.blob_id is not None}
        # Deletions first: a file may replace a directory the merge empties
        for f in files:
            if f.blob_id is None:
                self.worktree.delete(f.filename)
        for f in files:
            if f.blob_id is not None and f.blob_id != current.blob_id(f.filename):
                self.worktree.write(f.filename, self.objects.get_blob(f.blob_id))

        commit = self.graph.create(
            message=f"Merged {given_branch} into {current_label}.",
            snapshot=merged,
            first_parent=current.commit_id,
            second_parent=given.commit_id,
        )
        self.refs.advance_current(commit.commit_id)
        self.staging.clear()

        result = MergeResult(
            kind=MergeKind.MERGED,
            base_id=base.commit_id,
            commit_id=commit.commit_id,
            files=files,
        )
        if result.has_conflicts:
            result.messages.append(CONFLICT_MESSAGE)
            log.info("Merge conflicts", files=result.conflicts)
        log.info(
            "Merged {given_branch} into {current_label}",
            given_branch=given_branch,
            current_label=current_label,
            commit_id=commit.commit_id,
        )
        return result
