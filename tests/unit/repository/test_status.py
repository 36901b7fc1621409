"""
Unit tests for status reporting and log formatting.
"""

from typing import Callable

from twig.repository import Commit, Repository, StatusReport, format_log_entry


class TestStatusReport:
    """Tests for StatusReport rendering."""

    def test_format(self) -> None:
        report = StatusReport(
            branches=["dev", "master"],
            current_branch="master",
            staged=["a.txt"],
            removed=["b.txt"],
            modified=["d.txt"],
            deleted=["c.txt"],
            untracked=["e.txt"],
        )
        assert report.format() == (
            "=== Branches ===\n"
            "dev\n"
            "*master\n"
            "\n"
            "=== Staged Files ===\n"
            "a.txt\n"
            "\n"
            "=== Removed Files ===\n"
            "b.txt\n"
            "\n"
            "=== Modifications Not Staged For Commit ===\n"
            "c.txt (deleted)\n"
            "d.txt (modified)\n"
            "\n"
            "=== Untracked Files ===\n"
            "e.txt\n"
        )
        assert not report.is_clean

    def test_detached_marks_no_branch(self) -> None:
        report = StatusReport(branches=["master"], current_branch=None)
        assert report.format().splitlines()[1] == "master"
        assert report.is_clean


class TestComputeStatus:
    """Tests for status computed against a live repository."""

    def test_clean_after_init(self, repo: Repository) -> None:
        status = repo.status()
        assert status.is_clean
        assert status.branches == ["master"]
        assert status.current_branch == "master"

    def test_categories(self, repo: Repository, write: Callable) -> None:
        for name in ("tracked", "edited", "vanished", "removed"):
            write(name, name)
            repo.add(name)
        repo.commit("base")

        write("edited", "changed")
        (repo.root / "vanished").unlink()
        repo.rm("removed")
        write("staged", "new")
        repo.add("staged")
        write("staged_then_deleted", "x")
        repo.add("staged_then_deleted")
        (repo.root / "staged_then_deleted").unlink()
        write("staged_then_edited", "x")
        repo.add("staged_then_edited")
        write("staged_then_edited", "y")
        write("loose", "?")

        status = repo.status()

        assert status.staged == ["staged", "staged_then_deleted", "staged_then_edited"]
        assert status.removed == ["removed"]
        assert status.modified == ["edited", "staged_then_edited"]
        assert status.deleted == ["staged_then_deleted", "vanished"]
        assert status.untracked == ["loose"]

    def test_removed_file_recreated_is_untracked(
        self, repo: Repository, write: Callable
    ) -> None:
        write("f", "1")
        repo.add("f")
        repo.commit("add f")
        repo.rm("f")
        write("f", "1")
        status = repo.status()
        assert status.removed == ["f"]
        assert status.untracked == ["f"]


class TestFormatLogEntry:
    """Tests for log entry rendering."""

    def test_plain_commit(self) -> None:
        commit = Commit.initial()
        lines = format_log_entry(commit).split("\n")
        assert lines[0] == "==="
        assert lines[1] == f"commit {commit.commit_id}"
        assert lines[2].startswith("Date: ")
        assert lines[3] == "initial commit"
        assert lines[4] == ""

    def test_merge_commit(self) -> None:
        commit = Commit.create("Merged a into b.", {}, "me", 0, "1" * 40, "2" * 40)
        lines = format_log_entry(commit).split("\n")
        assert lines[2] == "Merge: 1111111 2222222"
        assert lines[3].startswith("Date: ")
