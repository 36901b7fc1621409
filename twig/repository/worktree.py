"""
Working-tree synchronization.

Materializes commit snapshots into the working directory and guards against
overwriting untracked local files.
"""

from pathlib import Path, PurePosixPath
from typing import Iterable, List, Mapping, Optional

from twig.logging import get_twig_logger
from .errors import UntrackedFileConflictError
from .objects import hash_bytes
from .storage import ObjectStore, atomic_write

log = get_twig_logger("worktree")


class WorkingTree:
    """
    The user's files under ``root``, excluding the metadata directory.

    Filenames are POSIX-style paths relative to ``root``.
    """

    def __init__(self, root: Path, meta_dir: str = ".twig"):
        self.root = Path(root)
        self.meta_dir = meta_dir

    def path(self, filename: str) -> Path:
        return self.root.joinpath(*PurePosixPath(filename).parts)

    def normalize(self, filename: str) -> Optional[str]:
        """
        Relative POSIX form of a user-supplied filename.

        Returns:
            The relative name, or None for an absolute path outside the tree
        """
        candidate = Path(filename)
        if candidate.is_absolute():
            try:
                candidate = candidate.resolve().relative_to(self.root.resolve())
            except ValueError:
                return None
        return PurePosixPath(*candidate.parts).as_posix()

    def is_ignored(self, filename: str) -> bool:
        parts = PurePosixPath(filename).parts
        return not parts or parts[0] == self.meta_dir or ".." in parts

    def list_files(self) -> List[str]:
        """Sorted relative names of every regular file in the tree."""
        files = []
        for path in self.root.rglob("*"):
            rel = path.relative_to(self.root).as_posix()
            if self.is_ignored(rel) or not path.is_file() or path.is_symlink():
                continue
            files.append(rel)
        return sorted(files)

    def exists(self, filename: str) -> bool:
        return not self.is_ignored(filename) and self.path(filename).is_file()

    def read(self, filename: str) -> bytes:
        return self.path(filename).read_bytes()

    def hash_file(self, filename: str) -> Optional[str]:
        """Blob id the file would get, or None if it is missing."""
        if not self.exists(filename):
            return None
        return hash_bytes(self.read(filename))

    def write(self, filename: str, data: bytes) -> None:
        atomic_write(self.path(filename), data)

    def delete(self, filename: str) -> None:
        """Remove a file and any parent directories it leaves empty."""
        path = self.path(filename)
        if not path.is_file():
            return
        path.unlink()
        parent = path.parent
        while parent != self.root and not any(parent.iterdir()):
            parent.rmdir()
            parent = parent.parent

    def check_untracked(self, tracked: Mapping[str, str], incoming: Iterable[str]) -> None:
        """
        Refuse to proceed if an untracked file would be overwritten.

        An untracked file is in the way when it has an incoming name, sits
        where an incoming file needs a directory, or sits inside a directory
        an incoming file would replace.

        Args:
            tracked: Snapshot of the commit currently checked out
            incoming: Filenames the operation is about to write or delete

        Raises:
            UntrackedFileConflictError: Listing every file in the way
        """
        incoming = set(incoming)
        incoming_dirs = {
            parent.as_posix()
            for name in incoming
            for parent in PurePosixPath(name).parents
            if parent.parts
        }

        def blocks(name: str) -> bool:
            if name in incoming or name in incoming_dirs:
                return True
            # An incoming file would replace one of this file's directories
            return any(
                parent.as_posix() in incoming
                for parent in PurePosixPath(name).parents
                if parent.parts
            )

        in_the_way = [
            name for name in self.list_files() if name not in tracked and blocks(name)
        ]
        if in_the_way:
            log.info("Untracked files in the way", files=in_the_way)
            raise UntrackedFileConflictError(in_the_way)

    def sync(
        self,
        current: Mapping[str, str],
        target: Mapping[str, str],
        objects: ObjectStore,
    ) -> None:
        """
        Replace the tracked contents of the tree with ``target``.

        Files tracked by ``current`` but absent from ``target`` are deleted,
        then every file in ``target`` is written.
        """
        for filename in current:
            if filename not in target:
                self.delete(filename)
        for filename, blob_id in target.items():
            self.write(filename, objects.get_blob(blob_id))
        log.debug("Synchronized working tree", files=len(target))
