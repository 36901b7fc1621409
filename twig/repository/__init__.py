"""
Repository engine.

Content-addressed object storage, the commit graph, the staging area,
branch/HEAD references, working-tree synchronization and three-way merge.
"""

from .objects import (
    Commit,
    compute_commit_id,
    hash_bytes,
    INITIAL_COMMIT_MESSAGE,
)

from .errors import (
    TwigError,
    UserInputError,
    RepositoryStateError,
    NotInitializedError,
    RepositoryExistsError,
    NotFoundError,
    CommitNotFoundError,
    BlobNotFoundError,
    BranchNotFoundError,
    FileNotInCommitError,
    FileNotFoundInWorkTreeError,
    CommitMessageNotFoundError,
    ConflictError,
    UntrackedFileConflictError,
    PreconditionError,
    NothingToCommitError,
    EmptyCommitMessageError,
    NothingToRemoveError,
    SelfMergeError,
    UncommittedChangesError,
    BranchExistsError,
    CurrentBranchRemovalError,
    AlreadyOnBranchError,
    InvalidBranchNameError,
)

from .storage import ObjectStore, RepositoryLayout
from .graph import CommitGraph
from .staging import StagingArea, StagingStore
from .refs import ReferenceStore
from .worktree import WorkingTree
from .merge import (
    FileMerge,
    FileOutcome,
    MergeEngine,
    MergeKind,
    MergeResult,
    classify,
    conflict_content,
)
from .status import StatusReport, compute_status, format_log_entry
from .repository import Repository

__all__ = [
    # Objects
    "Commit",
    "compute_commit_id",
    "hash_bytes",
    "INITIAL_COMMIT_MESSAGE",
    # Errors
    "TwigError",
    "UserInputError",
    "RepositoryStateError",
    "NotInitializedError",
    "RepositoryExistsError",
    "NotFoundError",
    "CommitNotFoundError",
    "BlobNotFoundError",
    "BranchNotFoundError",
    "FileNotInCommitError",
    "FileNotFoundInWorkTreeError",
    "CommitMessageNotFoundError",
    "ConflictError",
    "UntrackedFileConflictError",
    "PreconditionError",
    "NothingToCommitError",
    "EmptyCommitMessageError",
    "NothingToRemoveError",
    "SelfMergeError",
    "UncommittedChangesError",
    "BranchExistsError",
    "CurrentBranchRemovalError",
    "AlreadyOnBranchError",
    "InvalidBranchNameError",
    # Components
    "ObjectStore",
    "RepositoryLayout",
    "CommitGraph",
    "StagingArea",
    "StagingStore",
    "ReferenceStore",
    "WorkingTree",
    # Merge
    "FileMerge",
    "FileOutcome",
    "MergeEngine",
    "MergeKind",
    "MergeResult",
    "classify",
    "conflict_content",
    # Status
    "StatusReport",
    "compute_status",
    "format_log_entry",
    # Operations
    "Repository",
]
