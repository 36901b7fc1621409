"""
Status and history reporting.

Computes the status report (branches, staged/removed files, unstaged
modifications, untracked files) and formats log entries.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .objects import Commit
from .staging import StagingArea
from .worktree import WorkingTree


@dataclass
class StatusReport:
    """Snapshot of the repository's pending state."""

    branches: List[str] = field(default_factory=list)
    current_branch: Optional[str] = None
    staged: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (
            self.staged or self.removed or self.modified or self.deleted or self.untracked
        )

    def format(self) -> str:
        """Render the report with one section per category."""
        lines = ["=== Branches ==="]
        for branch in self.branches:
            lines.append(f"*{branch}" if branch == self.current_branch else branch)
        lines.append("")

        lines.append("=== Staged Files ===")
        lines.extend(self.staged)
        lines.append("")

        lines.append("=== Removed Files ===")
        lines.extend(self.removed)
        lines.append("")

        lines.append("=== Modifications Not Staged For Commit ===")
        changes = [(name, "modified") for name in self.modified]
        changes += [(name, "deleted") for name in self.deleted]
        lines.extend(f"{name} ({kind})" for name, kind in sorted(changes))
        lines.append("")

        lines.append("=== Untracked Files ===")
        lines.extend(self.untracked)
        lines.append("")
        return "\n".join(lines)


def compute_status(
    head_snapshot: Mapping[str, str],
    staging: StagingArea,
    worktree: WorkingTree,
    branches: List[str],
    current_branch: Optional[str],
) -> StatusReport:
    """
    Compare HEAD, the staging area, and the working tree.

    A file staged for addition but missing from the tree is reported as
    deleted; a tracked file changed without being staged is reported as
    modified.
    """
    report = StatusReport(
        branches=list(branches),
        current_branch=current_branch,
        staged=sorted(staging.additions),
        removed=sorted(staging.removals),
    )
    present = set(worktree.list_files())

    for name in sorted(set(head_snapshot) | set(staging.additions)):
        if name in staging.removals:
            continue
        staged_blob = staging.additions.get(name)
        expected = staged_blob if staged_blob is not None else head_snapshot[name]
        if name not in present:
            report.deleted.append(name)
        elif worktree.hash_file(name) != expected:
            report.modified.append(name)

    for name in sorted(present):
        if name in staging.additions:
            continue
        if name not in head_snapshot or name in staging.removals:
            report.untracked.append(name)
    return report


def format_log_entry(commit: Commit) -> str:
    """
    Render one commit for log output.

    Merge commits carry a ``Merge:`` line with both abbreviated parent ids.
    """
    lines = ["===", f"commit {commit.commit_id}"]
    if commit.first_parent is not None and commit.second_parent is not None:
        lines.append(f"Merge: {commit.first_parent[:7]} {commit.second_parent[:7]}")
    lines.append(f"Date: {commit.formatted_date()}")
    lines.append(commit.message)
    lines.append("")
    return "\n".join(lines)
