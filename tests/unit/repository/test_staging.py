"""
Unit tests for the staging area.
"""

from pathlib import Path

from twig.repository import RepositoryLayout, StagingArea, StagingStore

BLOB_A = "a" * 40
BLOB_B = "b" * 40


class TestStagingArea:
    """Tests for StagingArea."""

    def test_stage_addition(self) -> None:
        staging = StagingArea()
        assert staging.stage_addition("f", BLOB_A, head_blob_id=None)
        assert staging.is_staged_for_addition("f")
        assert not staging.is_empty()

    def test_stage_matching_head_is_noop(self) -> None:
        """Staging HEAD's content drops any pending change for the file."""
        staging = StagingArea()
        staging.stage_addition("f", BLOB_B, head_blob_id=BLOB_A)
        assert not staging.stage_addition("f", BLOB_A, head_blob_id=BLOB_A)
        assert staging.is_empty()

    def test_addition_cancels_removal(self) -> None:
        staging = StagingArea()
        staging.stage_removal("f")
        staging.stage_addition("f", BLOB_A, head_blob_id=BLOB_A)
        assert not staging.is_staged_for_removal("f")
        assert staging.is_empty()

    def test_removal_cancels_addition(self) -> None:
        """A name is never in both sets."""
        staging = StagingArea()
        staging.stage_addition("f", BLOB_A)
        staging.stage_removal("f")
        assert staging.is_staged_for_removal("f")
        assert not staging.is_staged_for_addition("f")

    def test_unstage_and_clear(self) -> None:
        staging = StagingArea()
        staging.stage_addition("f", BLOB_A)
        staging.stage_removal("g")
        staging.unstage("f")
        assert staging.additions == {}
        staging.clear()
        assert staging.is_empty()

    def test_apply_to(self) -> None:
        staging = StagingArea()
        staging.stage_addition("new", BLOB_B)
        staging.stage_removal("old")
        head = {"old": BLOB_A, "kept": BLOB_A}
        assert staging.apply_to(head) == {"kept": BLOB_A, "new": BLOB_B}
        assert head == {"old": BLOB_A, "kept": BLOB_A}

    def test_serialization(self) -> None:
        staging = StagingArea(additions={"f": BLOB_A}, removals={"g", "h"})
        restored = StagingArea.from_json(staging.to_json())
        assert restored == staging
        assert staging.to_dict()["removals"] == ["g", "h"]


class TestStagingStore:
    """Tests for StagingStore persistence."""

    def test_load_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert StagingStore(RepositoryLayout(tmp_path)).load().is_empty()

    def test_save_load_clear(self, tmp_path: Path) -> None:
        store = StagingStore(RepositoryLayout(tmp_path))
        store.save(StagingArea(additions={"f": BLOB_A}))
        assert store.load().additions == {"f": BLOB_A}
        store.clear()
        assert store.load().is_empty()
