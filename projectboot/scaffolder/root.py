"""Secure output root for generated projects.

An :class:`OutputRoot` is a filesystem handle confined to one directory
(``<target_path>/<project_name>``).  All operations take paths *relative* to
that directory; anything that would land outside it -- ``..`` segments,
absolute paths, symlinks pointing elsewhere -- is rejected with
:class:`PathEscapeError` before the filesystem is touched.
"""

from __future__ import annotations

import logging
import os
import posixpath
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from ..constants import DIR_PERM, FILE_PERM
from ..errors import FilesystemError, PathEscapeError

logger = logging.getLogger(__name__)


class OutputRoot:
    """A directory handle that only resolves paths inside itself."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).resolve()
        self.closed = False

    # -- Construction ------------------------------------------------------

    @classmethod
    def open(cls, base_dir: str | Path, sub_path: str) -> OutputRoot:
        """Create ``base_dir/sub_path`` (and parents) if needed and open it.

        Pre-existing directories are accepted as-is.

        Raises:
            FilesystemError: If the directory cannot be created.
        """
        target = Path(os.path.abspath(os.path.join(base_dir, sub_path)))
        try:
            target.mkdir(mode=DIR_PERM, parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"failed to create root dir {str(target)!r}: {exc}") from exc
        if not target.is_dir():
            raise FilesystemError(f"root path {str(target)!r} is not a directory")
        return cls(target)

    def close(self) -> None:
        """Release the handle; later operations fail."""
        self.closed = True

    def __enter__(self) -> OutputRoot:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- Path confinement --------------------------------------------------

    def resolve(self, rel_path: str) -> Path:
        """Return the absolute location of *rel_path* inside the root.

        Raises:
            PathEscapeError: If the path leaves the root lexically or through
                a symlink.
            FilesystemError: If the root has been closed.
        """
        if self.closed:
            raise FilesystemError(f"root {str(self.path)!r} is closed")

        clean = _clean(rel_path)
        if _escapes(clean):
            logger.warning("[SECURITY] attempted directory escape: %r", rel_path)
            raise PathEscapeError(rel_path)

        full = self.path if clean == "." else self.path.joinpath(*clean.split("/"))
        resolved = full.resolve()
        if resolved != self.path and self.path not in resolved.parents:
            logger.warning("[SECURITY] symlink escape: %r -> %s", rel_path, resolved)
            raise PathEscapeError(rel_path)
        return full

    # -- Directory operations ----------------------------------------------

    def ensure_dir(self, rel_path: str, mode: int = DIR_PERM) -> None:
        """Create *rel_path* and any missing parents inside the root.

        Each segment is checked in order and only the missing suffix is
        created, so calling this twice is a no-op.  ``""`` and ``"."`` always
        exist.
        """
        if rel_path in ("", "."):
            return

        clean = _clean(rel_path)
        # Validate the whole path before creating any segment.
        self.resolve(clean)

        current = ""
        for part in clean.split("/"):
            if not part:
                continue
            current = f"{current}/{part}" if current else part
            target = self.resolve(current)
            if target.is_dir():
                continue
            if target.exists():
                raise FilesystemError(f"failed to create directory {current!r}: not a directory")
            try:
                target.mkdir(mode=mode)
            except OSError as exc:
                raise FilesystemError(f"failed to create directory {current!r}: {exc}") from exc

    # -- File operations ---------------------------------------------------

    def create(self, rel_path: str, mode: int = FILE_PERM) -> BinaryIO:
        """Open *rel_path* for binary writing, truncating any existing file.

        New files get *mode* (subject to the umask); existing files keep theirs.
        """
        target = self.resolve(rel_path)
        try:
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
            return os.fdopen(fd, "wb")
        except OSError as exc:
            raise FilesystemError(f"failed to create file {rel_path!r} in root: {exc}") from exc

    def open_file(self, rel_path: str) -> BinaryIO:
        """Open *rel_path* for binary reading."""
        target = self.resolve(rel_path)
        try:
            return target.open("rb")
        except OSError as exc:
            raise FilesystemError(f"failed to open file {rel_path!r}: {exc}") from exc

    def read_bytes(self, rel_path: str) -> bytes:
        """Return the full contents of *rel_path*."""
        with self.open_file(rel_path) as fh:
            return fh.read()

    def write_bytes(self, rel_path: str, data: bytes) -> None:
        """Create or overwrite *rel_path* with *data*."""
        with self.create(rel_path) as fh:
            fh.write(data)

    def stat(self, rel_path: str) -> os.stat_result:
        """Return ``os.stat`` for *rel_path*."""
        target = self.resolve(rel_path)
        try:
            return target.stat()
        except OSError as exc:
            raise FilesystemError(f"failed to stat {rel_path!r}: {exc}") from exc

    def exists(self, rel_path: str) -> bool:
        return self.resolve(rel_path).exists()

    def chmod(self, rel_path: str, mode: int) -> None:
        target = self.resolve(rel_path)
        try:
            target.chmod(mode)
        except OSError as exc:
            raise FilesystemError(f"failed to set permissions on {rel_path!r}: {exc}") from exc

    # -- Traversal ---------------------------------------------------------

    def walk(self) -> Iterator[tuple[str, bool]]:
        """Yield ``(relative_path, is_dir)`` for every entry below the root.

        Entries are visited depth-first in lexical order, parents before
        children.  Paths use ``/`` separators.
        """
        yield from _walk_tree(self.resolve("."))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def walk_source(source_dir: str | Path) -> Iterator[tuple[str, bool]]:
    """Walk a template source tree the same way :meth:`OutputRoot.walk` does."""
    source = Path(source_dir)
    if not source.is_dir():
        raise FilesystemError(f"template source {str(source)!r} is not a directory")
    yield from _walk_tree(source)


def _walk_tree(base: Path, prefix: str = "") -> Iterator[tuple[str, bool]]:
    try:
        entries = sorted(os.scandir(base), key=lambda entry: entry.name)
    except OSError as exc:
        raise FilesystemError(f"failed to walk {str(base)!r}: {exc}") from exc
    for entry in entries:
        rel = f"{prefix}/{entry.name}" if prefix else entry.name
        is_dir = entry.is_dir(follow_symlinks=False)
        yield rel, is_dir
        if is_dir:
            yield from _walk_tree(Path(entry.path), rel)


def _clean(rel_path: str) -> str:
    """Normalize *rel_path* to a ``/``-separated path, ``"."`` when empty."""
    if not rel_path:
        return "."
    return posixpath.normpath(rel_path.replace(os.sep, "/"))


def _escapes(clean: str) -> bool:
    return (
        clean == ".."
        or clean.startswith("../")
        or "/../" in clean
        or posixpath.isabs(clean)
    )
