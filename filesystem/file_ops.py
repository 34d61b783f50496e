"""
Robust, cross-platform filesystem operations using pathlib.

This module provides the directory walk that finds candidate audio files and
the primitive operations the organizer performs on the destination tree.
Every OSError is wrapped in a FilesystemError naming the failed operation.
"""

import shutil
from pathlib import Path
from typing import Iterator, List
import logging

from utils.exceptions import FilesystemError

logger = logging.getLogger(__name__)


class FileSystemOperations:
    """Handles all filesystem operations with proper error handling."""

    def __init__(self, audio_extensions: List[str], ignored_dirs: List[str]):
        """
        Initialize filesystem operations.

        Args:
            audio_extensions: List of source audio file extensions (with dots)
            ignored_dirs: List of directory names to ignore during scanning
        """
        self.audio_extensions = {
            ext.lower() if ext.startswith('.') else f".{ext.lower()}"
            for ext in audio_extensions
        }
        self.ignored_dirs = {name.lower() for name in ignored_dirs}

    def discover_audio_files(self, root_dir: Path, recursive: bool = True) -> Iterator[Path]:
        """
        Discover audio files in a directory tree.

        Args:
            root_dir: Root directory to scan
            recursive: Whether to scan subdirectories recursively

        Yields:
            Path objects for discovered audio files

        Raises:
            FilesystemError: If the root directory cannot be accessed
        """
        if not root_dir.exists():
            raise FilesystemError(str(root_dir), "scan", "Directory does not exist")

        if not root_dir.is_dir():
            raise FilesystemError(str(root_dir), "scan", "Path is not a directory")

        try:
            pattern = "**/*" if recursive else "*"
            for path in root_dir.glob(pattern):
                if not path.is_file():
                    continue

                if self._should_ignore_parent(path, root_dir):
                    continue

                if path.suffix.lower() in self.audio_extensions:
                    yield path

        except PermissionError as e:
            raise FilesystemError(str(root_dir), "scan", f"Permission denied: {e}")
        except OSError as e:
            raise FilesystemError(str(root_dir), "scan", f"OS error: {e}")

    def _should_ignore_parent(self, file_path: Path, root_dir: Path) -> bool:
        """Check if any directory between the root and the file is ignored."""
        relative_parents = file_path.relative_to(root_dir).parts[:-1]
        return any(part.lower() in self.ignored_dirs for part in relative_parents)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def create_dirs(self, path: Path):
        """Create a directory and any missing parents."""
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(str(path), "mkdir", str(e))

    def delete(self, path: Path):
        try:
            path.unlink()
            logger.info(f"Removed existing file: {path}")
        except OSError as e:
            raise FilesystemError(str(path), "delete", str(e))

    def copy(self, source: Path, destination: Path):
        """
        Copy a file, refusing to replace an existing destination.

        Raises:
            FilesystemError: If the destination exists or the copy fails
        """
        try:
            with open(source, 'rb') as src, open(destination, 'xb') as dst:
                shutil.copyfileobj(src, dst)
            shutil.copystat(source, destination)
            logger.info(f"Copied file: {source} -> {destination}")
        except FileExistsError:
            raise FilesystemError(str(destination), "copy", "Destination already exists")
        except PermissionError as e:
            raise FilesystemError(str(source), "copy", f"Permission denied: {e}")
        except OSError as e:
            raise FilesystemError(str(source), "copy", f"OS error: {e}")

    def move(self, source: Path, destination: Path):
        """
        Move a file, refusing to replace an existing destination.

        Raises:
            FilesystemError: If the destination exists or the move fails
        """
        if destination.exists():
            raise FilesystemError(str(destination), "move", "Destination already exists")

        try:
            shutil.move(str(source), str(destination))
            logger.info(f"Moved file: {source} -> {destination}")
        except PermissionError as e:
            raise FilesystemError(str(source), "move", f"Permission denied: {e}")
        except OSError as e:
            raise FilesystemError(str(source), "move", f"OS error: {e}")
