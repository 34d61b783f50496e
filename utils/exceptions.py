"""
Custom exception hierarchy for the music organizer application.

This module defines a structured hierarchy of exceptions that allows the
organizer to tell fatal configuration problems apart from per-file failures,
which are recorded and skipped without aborting the batch.
"""

from typing import Iterable


class MusicOrganizerError(Exception):
    """Base class for all application-specific errors."""
    pass


class ConfigurationError(MusicOrganizerError):
    """Raised when there are configuration-related issues."""
    pass


class PatternError(ConfigurationError):
    """Raised when a path pattern uses placeholders outside the supported set."""

    def __init__(self, pattern: str, tokens: Iterable[str]):
        self.pattern = pattern
        self.tokens = sorted(set(tokens))

        message = f"Unknown placeholder(s) {', '.join(self.tokens)} in pattern: {pattern}"
        super().__init__(message)


class FileProcessingError(MusicOrganizerError):
    """Base class for errors while reading or planning a single file."""
    pass


class MetadataExtractionError(FileProcessingError):
    """Raised when metadata cannot be extracted from an audio file."""

    def __init__(self, file_path: str, reason: str = None):
        self.file_path = file_path
        self.reason = reason

        message = f"Failed to extract metadata from file: {file_path}"
        if reason:
            message += f" - {reason}"

        super().__init__(message)


class FilesystemError(MusicOrganizerError):
    """Raised when filesystem operations fail."""

    def __init__(self, path: str, operation: str, reason: str = None):
        self.path = path
        self.operation = operation
        self.reason = reason

        message = f"Filesystem error during {operation} on {path}"
        if reason:
            message += f": {reason}"

        super().__init__(message)


class CollisionExhaustedError(FilesystemError):
    """Raised when no free alternate name is found for a colliding target."""

    def __init__(self, path: str, attempts: int):
        self.attempts = attempts
        super().__init__(
            path, "resolve_collision", f"no free name after {attempts} attempts"
        )
