"""
Exceptions raised by the repository engine.

Every error carries a single-line, user-facing message. Operations raise
before their first persisted write, so catching one of these at the
operation boundary always leaves the repository untouched.
"""

from __future__ import annotations


class TwigError(Exception):
    """Base exception for all twig errors."""

    pass


class UserInputError(TwigError):
    """Malformed command arguments or names."""

    pass


# Repository state


class RepositoryStateError(TwigError):
    """Operation is invalid for the repository's lifecycle state."""

    pass


class NotInitializedError(RepositoryStateError):
    def __init__(self, message: str = "Not in an initialized twig directory."):
        super().__init__(message)


class RepositoryExistsError(RepositoryStateError):
    def __init__(
        self,
        message: str = "A twig version-control system already exists in the current directory.",
    ):
        super().__init__(message)


# Lookups


class NotFoundError(TwigError):
    """A commit, blob, branch, or file could not be found."""

    pass


class CommitNotFoundError(NotFoundError):
    def __init__(self, commit_id: str):
        super().__init__("No commit with that id exists.")
        self.commit_id = commit_id


class BlobNotFoundError(NotFoundError):
    def __init__(self, blob_id: str):
        super().__init__(f"No blob with id {blob_id} exists.")
        self.blob_id = blob_id


class BranchNotFoundError(NotFoundError):
    def __init__(self, branch: str, message: str = "A branch with that name does not exist."):
        super().__init__(message)
        self.branch = branch


class FileNotInCommitError(NotFoundError):
    def __init__(self, filename: str):
        super().__init__("File does not exist in that commit.")
        self.filename = filename


class FileNotFoundInWorkTreeError(NotFoundError):
    def __init__(self, filename: str):
        super().__init__("File does not exist.")
        self.filename = filename


class CommitMessageNotFoundError(NotFoundError):
    def __init__(self, message: str):
        super().__init__("Found no commit with that message.")
        self.commit_message = message


# Working tree conflicts


class ConflictError(TwigError):
    """An operation would clobber local, untracked work."""

    pass


class UntrackedFileConflictError(ConflictError):
    def __init__(self, filenames: list[str]):
        super().__init__(
            "There is an untracked file in the way; delete it, or add and commit it first."
        )
        self.filenames = filenames


# Preconditions


class PreconditionError(TwigError):
    """The repository is not in a state that allows the operation."""

    pass


class NothingToCommitError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("No changes added to the commit.")


class EmptyCommitMessageError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("Please enter a commit message.")


class NothingToRemoveError(PreconditionError):
    def __init__(self, filename: str):
        super().__init__("No reason to remove the file.")
        self.filename = filename


class SelfMergeError(PreconditionError):
    def __init__(self, branch: str):
        super().__init__("Cannot merge a branch with itself.")
        self.branch = branch


class UncommittedChangesError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("You have uncommitted changes.")


class BranchExistsError(PreconditionError):
    def __init__(self, branch: str):
        super().__init__("A branch with that name already exists.")
        self.branch = branch


class CurrentBranchRemovalError(PreconditionError):
    def __init__(self, branch: str):
        super().__init__("Cannot remove the current branch.")
        self.branch = branch


class AlreadyOnBranchError(PreconditionError):
    def __init__(self, branch: str):
        super().__init__("No need to checkout the current branch.")
        self.branch = branch


class InvalidBranchNameError(UserInputError):
    def __init__(self, branch: str):
        super().__init__("Invalid branch name.")
        self.branch = branch
