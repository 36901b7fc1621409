"""
Commit graph traversal.

Commits live in the object store as an append-only, id-keyed arena; every
walk here goes through explicit id lookups with a worklist and a visited
set, never recursion.
"""

import time
from collections import deque
from typing import Dict, Iterator, List, Mapping, Optional

from twig.logging import get_twig_logger, performance_monitor
from .errors import CommitNotFoundError
from .objects import Commit
from .storage import ObjectStore

log = get_twig_logger("graph")


class CommitGraph:
    """
    The immutable commit DAG (at most two parents per node).

    Args:
        objects: Object store holding the commit records
        author: Author stamped on commits created through this graph
        min_abbrev_length: Shortest prefix accepted by ``resolve``
    """

    def __init__(self, objects: ObjectStore, author: str = "twig", min_abbrev_length: int = 4):
        self.objects = objects
        self.author = author
        self.min_abbrev_length = min_abbrev_length

    def create(
        self,
        message: str,
        snapshot: Mapping[str, str],
        first_parent: Optional[str] = None,
        second_parent: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> Commit:
        """
        Build, stamp and store a commit.

        Callers decide which parents and snapshot to use; this only checks
        that the parents already exist, which keeps the graph acyclic.
        """
        for parent in (first_parent, second_parent):
            if parent is not None and not self.objects.has_commit(parent):
                raise CommitNotFoundError(parent)

        commit = Commit.create(
            message=message,
            snapshot=snapshot,
            author=self.author,
            timestamp=int(time.time()) if timestamp is None else timestamp,
            first_parent=first_parent,
            second_parent=second_parent,
        )
        self.objects.put_commit(commit)
        log.debug(
            "Created commit {commit_id}",
            commit_id=commit.commit_id,
            parents=commit.parents,
            files=len(commit.snapshot),
        )
        return commit

    def create_initial(self) -> Commit:
        commit = Commit.initial()
        self.objects.put_commit(commit)
        return commit

    def resolve(self, commit_id: str) -> Commit:
        """
        Look up a commit by full id or unique abbreviated prefix.

        Raises:
            CommitNotFoundError: If nothing (or more than one commit) matches
        """
        if self.objects.has_commit(commit_id):
            return self.objects.get_commit(commit_id)

        if len(commit_id) < self.min_abbrev_length or len(commit_id) >= 40:
            raise CommitNotFoundError(commit_id)

        matches = [c for c in self.objects.commit_ids() if c.startswith(commit_id)]
        if len(matches) != 1:
            raise CommitNotFoundError(commit_id)
        return self.objects.get_commit(matches[0])

    def first_parent_chain(self, commit_id: str) -> Iterator[Commit]:
        """
        Yield commits from ``commit_id`` back to the root along first parents.

        Each call returns a fresh generator, so the walk can be restarted.
        """
        current: Optional[str] = commit_id
        while current is not None:
            commit = self.objects.get_commit(current)
            yield commit
            current = commit.first_parent

    def all_ancestors(self, commit_id: str) -> Iterator[Commit]:
        """Breadth-first walk over both parent links, each commit once."""
        seen = {commit_id}
        queue: deque[str] = deque([commit_id])
        while queue:
            commit = self.objects.get_commit(queue.popleft())
            yield commit
            for parent in commit.parents:
                if parent not in seen:
                    seen.add(parent)
                    queue.append(parent)

    def all_commits(self) -> List[Commit]:
        """Every stored commit, including ones unreachable from any branch."""
        return list(self.objects.iter_commits())

    def is_ancestor(self, ancestor_id: str, commit_id: str) -> bool:
        return any(c.commit_id == ancestor_id for c in self.all_ancestors(commit_id))

    def _levels(self, tip: str) -> List[List[str]]:
        """BFS levels from ``tip``: level k holds ids at shortest distance k."""
        seen = {tip}
        levels: List[List[str]] = []
        frontier = [tip]
        while frontier:
            levels.append(frontier)
            next_frontier: List[str] = []
            for commit_id in frontier:
                for parent in self.objects.get_commit(commit_id).parents:
                    if parent not in seen:
                        seen.add(parent)
                        next_frontier.append(parent)
            frontier = next_frontier
        return levels

    @performance_monitor(threshold_ms=500)
    def merge_base(self, a: str, b: str) -> Optional[str]:
        """
        Find the nearest common ancestor of two commits.

        Both tips are expanded breadth-first over both parent edges, recording
        each id's shortest distance. Among ids reachable from both, the one
        with the smallest summed distance wins; ties go to whichever id is met
        first when the two walks advance together one level at a time (level k
        of ``a``, then level k of ``b``).

        This is not a general lowest-common-ancestor algorithm: with criss-cross
        merges several ids can be equally near, and the tie-break above picks
        one of them.

        Returns:
            The merge-base id, or None if the histories are disjoint
        """
        if a == b:
            return a

        levels_a = self._levels(a)
        levels_b = self._levels(b)
        dist_a = {cid: depth for depth, level in enumerate(levels_a) for cid in level}
        dist_b = {cid: depth for depth, level in enumerate(levels_b) for cid in level}

        encounter: Dict[str, int] = {}
        for depth in range(max(len(levels_a), len(levels_b))):
            for levels in (levels_a, levels_b):
                if depth < len(levels):
                    for cid in levels[depth]:
                        encounter.setdefault(cid, len(encounter))

        common = [cid for cid in dist_a if cid in dist_b]
        if not common:
            log.warning("No common ancestor", a=a, b=b)
            return None

        base = min(common, key=lambda cid: (dist_a[cid] + dist_b[cid], encounter[cid]))
        log.debug(
            "Merge base of {a_short} and {b_short} is {base_short}",
            a_short=a[:7],
            b_short=b[:7],
            base_short=base[:7],
        )
        return base
