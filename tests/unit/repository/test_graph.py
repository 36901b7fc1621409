"""
Unit tests for the commit graph.

Tests commit creation, id resolution, traversal and merge-base selection.
"""

from pathlib import Path

import pytest

from twig.repository import (
    Commit,
    CommitGraph,
    CommitNotFoundError,
    ObjectStore,
    RepositoryLayout,
)


@pytest.fixture
def graph(tmp_path: Path) -> CommitGraph:
    layout = RepositoryLayout(tmp_path)
    layout.create_directories()
    return CommitGraph(ObjectStore(layout), author="tester")


def make(graph: CommitGraph, message: str, *parents: str) -> str:
    return graph.create(message, {}, *parents, timestamp=100).commit_id


class TestCreate:
    """Tests for commit creation."""

    def test_create_stamps_author_and_stores(self, graph: CommitGraph) -> None:
        root = graph.create_initial()
        commit = graph.create("first", {"f": "1" * 40}, root.commit_id, timestamp=5)
        assert commit.author == "tester"
        assert commit.timestamp == 5
        assert graph.objects.get_commit(commit.commit_id) == commit

    def test_initial_ignores_configured_author(self, graph: CommitGraph) -> None:
        """The initial commit is the same in every repository."""
        assert graph.create_initial().commit_id == Commit.initial().commit_id

    def test_parent_must_exist(self, graph: CommitGraph) -> None:
        with pytest.raises(CommitNotFoundError):
            graph.create("orphan", {}, "a" * 40)


class TestResolve:
    """Tests for id resolution."""

    def test_full_and_abbreviated(self, graph: CommitGraph) -> None:
        root = graph.create_initial()
        assert graph.resolve(root.commit_id) == root
        assert graph.resolve(root.commit_id[:8]) == root

    def test_too_short_prefix(self, graph: CommitGraph) -> None:
        root = graph.create_initial()
        with pytest.raises(CommitNotFoundError):
            graph.resolve(root.commit_id[:3])

    def test_unknown_id(self, graph: CommitGraph) -> None:
        graph.create_initial()
        with pytest.raises(CommitNotFoundError):
            graph.resolve("0" * 40)

    def test_ambiguous_prefix(self, graph: CommitGraph) -> None:
        """A prefix matching two commits resolves to neither."""
        for suffix in ("0", "1"):
            graph.objects.put_commit(
                Commit(commit_id="abcd" + suffix * 36, message=suffix, timestamp=0, author="x")
            )
        with pytest.raises(CommitNotFoundError):
            graph.resolve("abcd")
        assert graph.resolve("abcd1").message == "1"


class TestTraversal:
    """Tests for history walks."""

    def test_first_parent_chain(self, graph: CommitGraph) -> None:
        root = graph.create_initial().commit_id
        a = make(graph, "a", root)
        side = make(graph, "side", root)
        merge = make(graph, "merge", a, side)

        chain = [c.commit_id for c in graph.first_parent_chain(merge)]
        assert chain == [merge, a, root]

    def test_first_parent_chain_is_restartable(self, graph: CommitGraph) -> None:
        root = graph.create_initial().commit_id
        a = make(graph, "a", root)
        assert list(graph.first_parent_chain(a)) == list(graph.first_parent_chain(a))

    def test_all_ancestors_visits_each_once(self, graph: CommitGraph) -> None:
        root = graph.create_initial().commit_id
        a = make(graph, "a", root)
        b = make(graph, "b", root)
        merge = make(graph, "merge", a, b)

        ids = [c.commit_id for c in graph.all_ancestors(merge)]
        assert sorted(ids) == sorted([merge, a, b, root])
        assert ids[0] == merge
        assert ids[-1] == root

    def test_is_ancestor(self, graph: CommitGraph) -> None:
        root = graph.create_initial().commit_id
        a = make(graph, "a", root)
        b = make(graph, "b", root)
        assert graph.is_ancestor(root, a)
        assert graph.is_ancestor(a, a)
        assert not graph.is_ancestor(a, b)

    def test_all_commits_includes_unreachable(self, graph: CommitGraph) -> None:
        root = graph.create_initial().commit_id
        make(graph, "a", root)
        make(graph, "b", root)
        assert {c.message for c in graph.all_commits()} == {"initial commit", "a", "b"}


class TestMergeBase:
    """Tests for merge-base selection."""

    def test_same_commit(self, graph: CommitGraph) -> None:
        root = graph.create_initial().commit_id
        assert graph.merge_base(root, root) == root

    def test_diverged(self, graph: CommitGraph) -> None:
        root = graph.create_initial().commit_id
        split = make(graph, "split", root)
        a = make(graph, "a2", make(graph, "a1", split))
        b = make(graph, "b1", split)
        assert graph.merge_base(a, b) == split
        assert graph.merge_base(b, a) == split

    def test_ancestor(self, graph: CommitGraph) -> None:
        root = graph.create_initial().commit_id
        a = make(graph, "a", root)
        b = make(graph, "b", a)
        assert graph.merge_base(b, a) == a
        assert graph.merge_base(a, b) == a

    def test_after_previous_merge(self, graph: CommitGraph) -> None:
        """A merged-in commit is nearer than the original split point."""
        root = graph.create_initial().commit_id
        a1 = make(graph, "a1", root)
        b1 = make(graph, "b1", root)
        merged = make(graph, "merged", a1, b1)
        a2 = make(graph, "a2", merged)
        b2 = make(graph, "b2", b1)
        assert graph.merge_base(a2, b2) == b1

    def test_criss_cross_tie_break(self, graph: CommitGraph) -> None:
        """Equally near candidates are broken by synchronized BFS order."""
        root = graph.create_initial().commit_id
        a1 = make(graph, "a1", root)
        b1 = make(graph, "b1", root)
        a2 = make(graph, "a2", a1, b1)
        b2 = make(graph, "b2", b1, a1)
        assert graph.merge_base(a2, b2) == a1
        assert graph.merge_base(b2, a2) == b1

    def test_disjoint_histories(self, graph: CommitGraph) -> None:
        a = graph.create("root a", {}, timestamp=1).commit_id
        b = graph.create("root b", {}, timestamp=2).commit_id
        assert graph.merge_base(a, b) is None
