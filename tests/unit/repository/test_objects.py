"""
Unit tests for repository objects.

Tests content hashing, commit ids and commit serialization.
"""

import hashlib
from types import MappingProxyType

import pytest
from hypothesis import given, settings, strategies as st

from twig.repository import Commit, compute_commit_id, hash_bytes, INITIAL_COMMIT_MESSAGE

filenames = st.text(
    alphabet=st.characters(min_codepoint=97, max_codepoint=122), min_size=1, max_size=8
)
blob_ids = st.text(alphabet="0123456789abcdef", min_size=40, max_size=40)
snapshots = st.dictionaries(filenames, blob_ids, max_size=6)


class TestHashing:
    """Tests for blob ids."""

    def test_hash_is_sha1_hex(self) -> None:
        """Test that blob ids are SHA-1 hex digests."""
        assert hash_bytes(b"hello") == hashlib.sha1(b"hello").hexdigest()
        assert len(hash_bytes(b"")) == 40

    @given(st.binary(max_size=256), st.binary(max_size=256))
    @settings(max_examples=50)
    def test_equal_content_equal_id(self, a: bytes, b: bytes) -> None:
        """Ids are equal exactly when contents are equal."""
        assert (hash_bytes(a) == hash_bytes(b)) == (a == b)


class TestCommitId:
    """Tests for commit id computation."""

    @given(snapshots, st.text(max_size=20), st.integers(min_value=0, max_value=2**31))
    @settings(max_examples=50)
    def test_id_ignores_snapshot_order(self, snapshot, message, timestamp) -> None:
        """Snapshot insertion order does not affect the id."""
        reversed_snapshot = dict(reversed(list(snapshot.items())))
        assert compute_commit_id(message, timestamp, "a", snapshot, None, None) == (
            compute_commit_id(message, timestamp, "a", reversed_snapshot, None, None)
        )

    def test_id_depends_on_every_field(self) -> None:
        """Changing any field changes the id."""
        base = dict(
            message="m",
            timestamp=1,
            author="a",
            snapshot={"f": "0" * 40},
            first_parent="1" * 40,
            second_parent=None,
        )
        base_id = compute_commit_id(**base)
        variants = [
            {"message": "n"},
            {"timestamp": 2},
            {"author": "b"},
            {"snapshot": {"f": "2" * 40}},
            {"first_parent": "3" * 40},
            {"second_parent": "4" * 40},
        ]
        for change in variants:
            assert compute_commit_id(**{**base, **change}) != base_id

    def test_initial_commit_is_canonical(self) -> None:
        """The initial commit is identical everywhere."""
        first = Commit.initial()
        second = Commit.initial()
        assert first.commit_id == second.commit_id
        assert first.message == INITIAL_COMMIT_MESSAGE
        assert first.timestamp == 0
        assert first.parents == ()
        assert dict(first.snapshot) == {}


class TestCommit:
    """Tests for the Commit record."""

    def test_snapshot_is_read_only(self) -> None:
        """Test that a commit's snapshot cannot be mutated."""
        commit = Commit.create("m", {"b": "1" * 40, "a": "2" * 40}, "me", 10)
        assert isinstance(commit.snapshot, MappingProxyType)
        assert list(commit.snapshot) == ["a", "b"]
        with pytest.raises(TypeError):
            commit.snapshot["c"] = "3" * 40  # type: ignore[index]

    def test_commit_is_frozen(self) -> None:
        """Test that commit fields cannot be reassigned."""
        commit = Commit.create("m", {}, "me", 10)
        with pytest.raises(AttributeError):
            commit.message = "other"  # type: ignore[misc]

    def test_parents_and_merge_flag(self) -> None:
        """Test parent accessors."""
        plain = Commit.create("m", {}, "me", 10, first_parent="a" * 40)
        merge = Commit.create("m", {}, "me", 10, "a" * 40, "b" * 40)
        assert plain.parents == ("a" * 40,)
        assert not plain.is_merge
        assert merge.parents == ("a" * 40, "b" * 40)
        assert merge.is_merge

    def test_tracking_lookups(self) -> None:
        """Test is_tracked and blob_id."""
        commit = Commit.create("m", {"f.txt": "1" * 40}, "me", 10)
        assert commit.is_tracked("f.txt")
        assert commit.blob_id("f.txt") == "1" * 40
        assert not commit.is_tracked("g.txt")
        assert commit.blob_id("g.txt") is None

    def test_json_roundtrip_preserves_id(self) -> None:
        """Test commit to/from JSON."""
        commit = Commit.create("m", {"f.txt": "1" * 40}, "me", 10, first_parent="a" * 40)
        restored = Commit.from_json(commit.to_json())
        assert restored == commit
        assert restored.verify()

    def test_verify_detects_tampering(self) -> None:
        """A record whose fields no longer match its id fails verification."""
        data = Commit.create("m", {}, "me", 10).to_dict()
        data["message"] = "tampered"
        assert not Commit.from_dict(data).verify()

    def test_formatted_date_shape(self) -> None:
        """Test the log date format."""
        parts = Commit.initial().formatted_date().split(" ")
        # Weekday, month, day, time, year, offset
        assert len(parts) == 6
        assert parts[3].count(":") == 2
        assert parts[5][0] in "+-"
