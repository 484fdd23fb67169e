"""File and directory primitives.

Every primitive takes already-resolved absolute paths: callers run the path
resolver and the critical-path guard first, and decide whether to write a
backup sibling before a destructive call. Primitives raise the exceptions in
:mod:`thought.exceptions` for expected failures and let OS errors propagate.

Text is read and written as UTF-8 with newline translation disabled, so
content round-trips byte for byte.
"""

import errno
import logging
import os
import shutil
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from thought.config.constants import DEFAULT_BACKUP_SUFFIX
from thought.exceptions import (
    AlreadyExistsError,
    BackupWriteFailedError,
    NotADirectoryPathError,
    NotEmptyError,
    NotFoundError,
    SourceNotFoundError,
)
from thought.workspace.edits import EditApplier, EditResult

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike


def format_size(size: int) -> str:
    """Human-readable size with one decimal place above 1024 bytes.

    Example:
        >>> format_size(512)
        '512B'
        >>> format_size(2048)
        '2.0KB'
    """
    if size < 1024:
        return f"{size}B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f}KB"
    return f"{size / (1024 * 1024):.1f}MB"


@dataclass
class DirectoryEntry:
    name: str
    size: int | None = None


@dataclass
class DirectoryListing:
    """Directory contents, directories first, each group sorted by name."""

    path: str
    directories: list[DirectoryEntry] = field(default_factory=list)
    files: list[DirectoryEntry] = field(default_factory=list)

    def render(self) -> str:
        lines = [f"[dir] {entry.name}/" for entry in self.directories]
        for entry in self.files:
            size = format_size(entry.size) if entry.size is not None else "?"
            lines.append(f"[file] {entry.name} ({size})")
        listing = "\n".join(lines) or "Empty directory"
        return f"Contents of {self.path}:\n\n{listing}"


def _atomic_write(path: Path, content: str) -> None:
    """Write via temp file + rename so readers never see a half-written file."""
    temp_fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(temp_path, path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def _read_text(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


class FileOperationEngine:
    """CRUD primitives for files and directories.

    Example:
        >>> engine = FileOperationEngine()
        >>> engine.create_file("/tmp/ws/notes.md", "# Notes\\n")
        'File created at "/tmp/ws/notes.md"'
    """

    def __init__(
        self,
        backup_suffix: str = DEFAULT_BACKUP_SUFFIX,
        edit_applier: EditApplier | None = None,
    ):
        self.backup_suffix = backup_suffix
        self.edit_applier = edit_applier or EditApplier()

    def backup_path(self, path: PathLike) -> str:
        return f"{os.fspath(path)}{self.backup_suffix}"

    def write_backup(self, path: PathLike) -> str | None:
        """Copy the current bytes of ``path`` to its backup sibling.

        Any prior backup is overwritten. Nothing is written when ``path`` does
        not exist.

        Returns:
            Backup path, or None when there was nothing to back up

        Raises:
            BackupWriteFailedError: Reading the original or writing the backup failed
        """
        source = Path(path)
        if not source.is_file():
            return None

        backup = self.backup_path(path)
        try:
            Path(backup).write_bytes(source.read_bytes())
        except OSError as e:
            logger.error(f"Backup of {path} failed: {e}")
            raise BackupWriteFailedError(os.fspath(path), e) from e

        logger.debug(f"Backup written: {backup}")
        return backup

    def read_file(self, path: PathLike) -> str:
        target = Path(path)
        if not target.is_file():
            raise NotFoundError(os.fspath(path), f'File "{os.fspath(path)}" does not exist.')
        return _read_text(target)

    def create_file(
        self,
        path: PathLike,
        content: str,
        overwrite: bool = False,
        create_parent_dirs: bool = True,
    ) -> str:
        """Create a file, optionally replacing an existing one.

        Raises:
            AlreadyExistsError: File exists and overwrite is False
            NotFoundError: Parent directory is missing and create_parent_dirs is False
        """
        target = Path(path)
        if target.exists() and not overwrite:
            raise AlreadyExistsError(
                os.fspath(path),
                f'File "{os.fspath(path)}" already exists. Set overwrite=true to overwrite.',
            )

        parent = target.parent
        if not parent.exists():
            if not create_parent_dirs:
                raise NotFoundError(
                    os.fspath(parent),
                    f'Parent directory for "{os.fspath(path)}" does not exist. '
                    "Set create_parent_dirs=true to create it.",
                )
            parent.mkdir(parents=True, exist_ok=True)

        _atomic_write(target, content)
        logger.info(f"Created file: {path} ({len(content)} chars, overwrite={overwrite})")
        return f'File created at "{os.fspath(path)}"'

    def edit_file(self, path: PathLike, changes: Iterable[Any]) -> EditResult:
        """Apply ``changes`` in order and persist the result with a single write.

        Malformed or out-of-range changes are skipped, not failed; see
        :class:`~thought.workspace.edits.EditResult` for what was skipped.

        Raises:
            NotFoundError: File does not exist
        """
        target = Path(path)
        if not target.is_file():
            raise NotFoundError(os.fspath(path), f'File "{os.fspath(path)}" does not exist.')

        original = _read_text(target)
        result = self.edit_applier.apply(original, changes)
        _atomic_write(target, result.content)

        logger.info(
            f"Edited file: {path} ({result.applied_count}/{len(result.outcomes)} changes applied)"
        )
        return result

    def delete_file(self, path: PathLike) -> str:
        """Delete a file. A missing file is a successful no-op."""
        target = Path(path)
        if not target.exists():
            return f"File not found: {os.fspath(path)} (nothing to delete)"

        target.unlink()
        logger.info(f"Deleted file: {path}")
        return f"File deleted: {os.fspath(path)}"

    def _check_transfer(self, source: Path, target: Path, overwrite: bool, create_dirs: bool):
        if not source.is_file():
            raise SourceNotFoundError(os.fspath(source))
        if target.exists() and not overwrite:
            raise AlreadyExistsError(
                os.fspath(target),
                f'Target file "{os.fspath(target)}" already exists. Set overwrite=true to overwrite.',
            )
        if not target.parent.exists():
            if not create_dirs:
                raise NotFoundError(
                    os.fspath(target.parent),
                    f'Target directory for "{os.fspath(target)}" does not exist. '
                    "Set create_target_dirs=true to create it.",
                )
            target.parent.mkdir(parents=True, exist_ok=True)

    def move_file(
        self,
        source: PathLike,
        target: PathLike,
        overwrite: bool = False,
        create_target_dirs: bool = True,
    ) -> str:
        """Move a file, atomically where source and target share a filesystem.

        Raises:
            SourceNotFoundError: Source does not exist
            AlreadyExistsError: Target exists and overwrite is False
            NotFoundError: Target directory is missing and create_target_dirs is False
        """
        src, dst = Path(source), Path(target)
        self._check_transfer(src, dst, overwrite, create_target_dirs)

        try:
            os.replace(src, dst)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise
            # Cross-device: copy then remove
            shutil.copy2(src, dst)
            src.unlink()

        logger.info(f"Moved file: {source} -> {target}")
        return f'File moved from "{os.fspath(source)}" to "{os.fspath(target)}"'

    def copy_file(
        self,
        source: PathLike,
        target: PathLike,
        overwrite: bool = False,
        create_target_dirs: bool = True,
    ) -> str:
        """Copy a file, leaving the source intact. Same rules as :meth:`move_file`."""
        src, dst = Path(source), Path(target)
        self._check_transfer(src, dst, overwrite, create_target_dirs)

        shutil.copy2(src, dst)
        logger.info(f"Copied file: {source} -> {target}")
        return f'File copied from "{os.fspath(source)}" to "{os.fspath(target)}"'

    def create_directory(self, path: PathLike, recursive: bool = True) -> str:
        """Create a directory. An existing directory is a successful no-op.

        Raises:
            NotADirectoryPathError: Path exists as a file
            NotFoundError: Parent is missing and recursive is False
        """
        target = Path(path)
        if target.exists():
            if target.is_dir():
                return f'Directory already exists at "{os.fspath(path)}"'
            raise NotADirectoryPathError(os.fspath(path))

        try:
            target.mkdir(parents=recursive, exist_ok=True)
        except FileNotFoundError as e:
            raise NotFoundError(
                os.fspath(target.parent),
                f"Parent directory does not exist: {os.fspath(path)}. Use recursive=true to create.",
            ) from e

        logger.info(f"Created directory: {path}")
        return f'Directory created at "{os.fspath(path)}"'

    def list_directory(self, path: PathLike, include_hidden: bool = False) -> DirectoryListing:
        """List a directory, hidden entries excluded unless requested.

        Raises:
            NotFoundError: Directory does not exist
            NotADirectoryPathError: Path is not a directory
        """
        target = Path(path)
        if not target.exists():
            raise NotFoundError(os.fspath(path), f'Directory "{os.fspath(path)}" does not exist.')
        if not target.is_dir():
            raise NotADirectoryPathError(os.fspath(path))

        listing = DirectoryListing(path=os.fspath(path))
        with os.scandir(target) as entries:
            for entry in entries:
                if not include_hidden and entry.name.startswith("."):
                    continue
                if entry.is_dir():
                    listing.directories.append(DirectoryEntry(name=entry.name))
                    continue
                try:
                    size = entry.stat().st_size
                except OSError:
                    # Broken symlink
                    size = None
                listing.files.append(DirectoryEntry(name=entry.name, size=size))

        listing.directories.sort(key=lambda e: e.name)
        listing.files.sort(key=lambda e: e.name)
        return listing

    def delete_directory(self, path: PathLike, recursive: bool = False, dry_run: bool = False) -> str:
        """Delete a directory, or describe what deleting it would do.

        Raises:
            NotFoundError: Directory does not exist
            NotADirectoryPathError: Path is not a directory
            NotEmptyError: Directory has contents and recursive is False (not raised on dry runs)
        """
        target = Path(path)
        if not target.exists():
            raise NotFoundError(os.fspath(path), f'Directory "{os.fspath(path)}" does not exist.')
        if not target.is_dir():
            raise NotADirectoryPathError(os.fspath(path))

        has_entries = any(target.iterdir())

        if dry_run:
            if has_entries and not recursive:
                return (
                    f"DRY RUN: would fail to delete non-empty directory {os.fspath(path)}. "
                    "Use recursive=true to delete with contents."
                )
            suffix = " and all its contents" if recursive else ""
            return f"DRY RUN: would delete directory {os.fspath(path)}{suffix}"

        if has_entries and not recursive:
            raise NotEmptyError(os.fspath(path))

        if recursive:
            shutil.rmtree(target)
        else:
            target.rmdir()

        logger.info(f"Deleted directory: {path} (recursive={recursive})")
        suffix = " (including all contents)" if recursive else ""
        return f"Directory deleted: {os.fspath(path)}{suffix}"


def describe_edit(path: PathLike, result: EditResult) -> str:
    """One-line summary of an edit, naming any skipped changes."""
    message = (
        f'File edited at "{os.fspath(path)}" '
        f"({result.applied_count} of {len(result.outcomes)} changes applied)"
    )
    if result.skipped:
        skipped = ", ".join(
            f"change {outcome.index + 1} ({outcome.type}): {outcome.reason}"
            for outcome in result.skipped
        )
        message += f"; skipped {skipped}"
    return message
