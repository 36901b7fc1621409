"""
Repository operations.

Provides the git-like commands (init, add, commit, rm, log, checkout, branch,
reset, merge, ...) over an explicit repository context.
"""

import functools
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar, cast

from twig.config import RepositoryConfig
from twig.logging import get_twig_logger, track_operation
from .errors import (
    AlreadyOnBranchError,
    BranchNotFoundError,
    CommitMessageNotFoundError,
    CurrentBranchRemovalError,
    EmptyCommitMessageError,
    FileNotFoundInWorkTreeError,
    FileNotInCommitError,
    InvalidBranchNameError,
    NotInitializedError,
    NothingToCommitError,
    NothingToRemoveError,
    RepositoryExistsError,
)
from .graph import CommitGraph
from .merge import MergeEngine, MergeResult
from .objects import Commit, hash_bytes
from .refs import ReferenceStore
from .staging import StagingArea, StagingStore
from .status import StatusReport, compute_status
from .storage import ObjectStore, RepositoryLayout
from .worktree import WorkingTree

log = get_twig_logger("repository")

F = TypeVar("F", bound=Callable[..., Any])


def requires_repo(func: F) -> F:
    """Raise NotInitializedError unless the repository exists on disk."""

    @functools.wraps(func)
    def wrapper(self: "Repository", *args: Any, **kwargs: Any) -> Any:
        if not self.layout.exists():
            raise NotInitializedError()
        return func(self, *args, **kwargs)

    return cast(F, wrapper)


class Repository:
    """
    A working tree plus its metadata directory.

    Every component (object store, commit graph, references, staging area,
    working tree, merge engine) hangs off this one context value; nothing is
    kept in module-level state.

    Operations validate everything before their first write. The reference
    update that makes a new state current is the last write, followed only by
    clearing the staging area.

    Example:
        >>> repo = Repository.init(Path("project"))
        >>> repo.add("notes.txt")
        >>> repo.commit("Add notes")
    """

    def __init__(self, root: Path, config: Optional[RepositoryConfig] = None):
        """
        Open a repository rooted at ``root`` (it need not exist yet).

        Args:
            root: Working-tree root directory
            config: Repository settings (defaults to RepositoryConfig())
        """
        self.config = config or RepositoryConfig()
        self.root = Path(root)
        self.layout = RepositoryLayout(self.root, self.config.meta_dir)
        self.objects = ObjectStore(self.layout)
        self.graph = CommitGraph(
            self.objects,
            author=self.config.author,
            min_abbrev_length=self.config.min_abbrev_length,
        )
        self.refs = ReferenceStore(self.layout)
        self.staging = StagingStore(self.layout)
        self.worktree = WorkingTree(self.root, self.config.meta_dir)
        self.merger = MergeEngine(
            self.objects, self.graph, self.refs, self.staging, self.worktree
        )

    @classmethod
    def init(cls, root: Path, config: Optional[RepositoryConfig] = None) -> "Repository":
        """Create a new repository at ``root`` and return it."""
        repo = cls(root, config)
        repo.initialize()
        return repo

    @property
    def is_initialized(self) -> bool:
        return self.layout.exists()

    @track_operation("init")
    def initialize(self) -> Commit:
        """
        Create the metadata directory, the initial commit and the default branch.

        Returns:
            The initial commit

        Raises:
            InvalidBranchNameError: If the configured default branch is unusable
            RepositoryExistsError: If a repository already exists here
        """
        if self.layout.exists():
            raise RepositoryExistsError()
        if not ReferenceStore.is_valid_name(self.config.default_branch):
            raise InvalidBranchNameError(self.config.default_branch)

        self.layout.create_directories()
        initial = self.graph.create_initial()
        self.refs.write_branch(self.config.default_branch, initial.commit_id)
        self.staging.save(StagingArea())
        # HEAD is written last; its presence marks the repository as initialized
        self.refs.set_head(self.config.default_branch)

        log.info("Initialized repository in {path}", path=str(self.layout.base_dir))
        return initial

    def head_commit(self) -> Commit:
        return self.objects.get_commit(self.refs.current_commit_id())

    def current_branch(self) -> Optional[str]:
        return self.refs.current_branch()

    def list_branches(self) -> List[str]:
        return self.refs.list_branches()

    # Staging

    @requires_repo
    @track_operation("add")
    def add(self, filename: str) -> bool:
        """
        Stage a working-tree file for the next commit.

        If the file's content equals what HEAD tracks, any pending addition or
        removal for it is dropped instead.

        Returns:
            True if the file is now staged for addition

        Raises:
            FileNotFoundInWorkTreeError: If the file does not exist
        """
        name = self.worktree.normalize(filename)
        if name is None or not self.worktree.exists(name):
            raise FileNotFoundInWorkTreeError(filename)

        data = self.worktree.read(name)
        head = self.head_commit()
        staging = self.staging.load()

        staged = staging.stage_addition(name, hash_bytes(data), head.blob_id(name))
        if staged:
            self.objects.put_blob(data)
        self.staging.save(staging)
        return staged

    @requires_repo
    @track_operation("rm")
    def rm(self, filename: str) -> None:
        """
        Unstage a file, and if HEAD tracks it, stage its removal and delete it.

        Raises:
            FileNotFoundInWorkTreeError: If the path lies outside the tree
            NothingToRemoveError: If the file is neither staged nor tracked
        """
        name = self.worktree.normalize(filename)
        if name is None:
            raise FileNotFoundInWorkTreeError(filename)
        staging = self.staging.load()
        tracked = self.head_commit().is_tracked(name)
        staged = staging.is_staged_for_addition(name)
        if not staged and not tracked:
            raise NothingToRemoveError(name)

        if staged:
            staging.unstage(name)
        if tracked:
            staging.stage_removal(name)
        self.staging.save(staging)
        if tracked:
            self.worktree.delete(name)

    @requires_repo
    @track_operation("commit")
    def commit(self, message: str) -> Commit:
        """
        Record the staged changes on top of HEAD.

        Args:
            message: Commit message

        Returns:
            The new commit

        Raises:
            EmptyCommitMessageError: If the message is blank
            NothingToCommitError: If nothing is staged
        """
        if not message or not message.strip():
            raise EmptyCommitMessageError()
        staging = self.staging.load()
        if staging.is_empty():
            raise NothingToCommitError()

        head = self.head_commit()
        commit = self.graph.create(
            message=message,
            snapshot=staging.apply_to(dict(head.snapshot)),
            first_parent=head.commit_id,
        )
        self.refs.advance_current(commit.commit_id)
        self.staging.clear()

        log.info(
            "Committed {short}: {message}",
            short=commit.commit_id[:7],
            message=message,
            branch=self.refs.current_branch(),
        )
        return commit

    # History

    @requires_repo
    def log(self) -> List[Commit]:
        """
        Get first-parent history of HEAD.

        Returns:
            Commits from HEAD back to the initial commit
        """
        return list(self.graph.first_parent_chain(self.refs.current_commit_id()))

    @requires_repo
    def global_log(self) -> List[Commit]:
        """Every commit ever made, in no particular order."""
        return self.graph.all_commits()

    @requires_repo
    def find(self, message: str) -> List[str]:
        """
        Ids of all commits whose message is exactly ``message``.

        Raises:
            CommitMessageNotFoundError: If there are none
        """
        ids = [c.commit_id for c in self.graph.all_commits() if c.message == message]
        if not ids:
            raise CommitMessageNotFoundError(message)
        return ids

    @requires_repo
    def status(self) -> StatusReport:
        return compute_status(
            head_snapshot=self.head_commit().snapshot,
            staging=self.staging.load(),
            worktree=self.worktree,
            branches=self.refs.list_branches(),
            current_branch=self.refs.current_branch(),
        )

    # Checkout

    @requires_repo
    @track_operation("checkout_file")
    def checkout_file(self, filename: str) -> None:
        """Restore ``filename`` to its content at HEAD (not staged)."""
        self.checkout_file_at(self.refs.current_commit_id(), filename)

    @requires_repo
    @track_operation("checkout_file_at")
    def checkout_file_at(self, commit_id: str, filename: str) -> None:
        """
        Restore ``filename`` to its content at ``commit_id`` (not staged).

        Raises:
            CommitNotFoundError: If the commit does not exist
            FileNotInCommitError: If the commit does not track the file
        """
        commit = self.graph.resolve(commit_id)
        name = self.worktree.normalize(filename)
        blob_id = commit.blob_id(name) if name is not None else None
        if name is None or blob_id is None:
            raise FileNotInCommitError(filename)
        self.worktree.write(name, self.objects.get_blob(blob_id))

    def _switch_tree(self, target: Commit) -> None:
        current = self.head_commit()
        self.worktree.check_untracked(current.snapshot, target.snapshot)
        self.worktree.sync(current.snapshot, target.snapshot, self.objects)

    @requires_repo
    @track_operation("checkout_branch")
    def checkout_branch(self, branch: str) -> None:
        """
        Switch the working tree and HEAD to ``branch``.

        Raises:
            BranchNotFoundError: If the branch does not exist
            AlreadyOnBranchError: If it is the current branch
            UntrackedFileConflictError: If an untracked file would be overwritten
        """
        if not self.refs.branch_exists(branch):
            raise BranchNotFoundError(branch, "No such branch exists.")
        if branch == self.refs.current_branch():
            raise AlreadyOnBranchError(branch)

        target = self.objects.get_commit(self.refs.read_branch(branch))
        self._switch_tree(target)
        self.refs.set_head(branch)
        self.staging.clear()

    @requires_repo
    @track_operation("checkout_commit")
    def checkout_commit(self, commit_id: str) -> None:
        """
        Check out a commit with a detached HEAD.

        Later commits and resets move HEAD itself rather than any branch.
        """
        target = self.graph.resolve(commit_id)
        self._switch_tree(target)
        self.refs.detach_head(target.commit_id)
        self.staging.clear()

    # Branches

    @requires_repo
    @track_operation("branch")
    def branch(self, name: str) -> None:
        """
        Create a branch pointing at HEAD's commit (HEAD does not move).

        Raises:
            BranchExistsError: If the name is taken
        """
        self.refs.create_branch(name, self.refs.current_commit_id())

    @requires_repo
    @track_operation("rm_branch")
    def rm_branch(self, name: str) -> None:
        """
        Delete a branch pointer; its commits are kept.

        Raises:
            BranchNotFoundError: If the branch does not exist
            CurrentBranchRemovalError: If it is checked out
        """
        if not self.refs.branch_exists(name):
            raise BranchNotFoundError(name)
        if name == self.refs.current_branch():
            raise CurrentBranchRemovalError(name)
        self.refs.delete_branch(name)

    @requires_repo
    @track_operation("reset")
    def reset(self, commit_id: str) -> Commit:
        """
        Move the active branch (or detached HEAD) and the working tree to a commit.

        Returns:
            The commit reset to

        Raises:
            CommitNotFoundError: If the commit does not exist
            UntrackedFileConflictError: If an untracked file would be overwritten
        """
        target = self.graph.resolve(commit_id)
        self._switch_tree(target)
        self.refs.advance_current(target.commit_id)
        self.staging.clear()
        return target

    @requires_repo
    @track_operation("merge")
    def merge(self, branch: str) -> MergeResult:
        """
        Merge ``branch`` into the current branch.

        See MergeEngine.merge for the failure modes. Conflicts do not raise;
        they are listed on the result.
        """
        return self.merger.merge(branch)
