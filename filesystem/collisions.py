"""
Collision resolution for target paths that already exist.
"""

import logging
from pathlib import Path
from typing import Callable

from utils.exceptions import CollisionExhaustedError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10000


def resolve_target(
    proposed: Path,
    overwrite_allowed: bool,
    exists: Callable[[Path], bool],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> Path:
    """
    Pick the path a file should actually be written to.

    A free path is returned unchanged, as is an occupied one when overwriting
    is allowed (the caller removes the existing file). Otherwise the first
    free "name (N).ext" in the same directory is returned, starting at N=2.

    Args:
        proposed: Planned absolute target path
        overwrite_allowed: Whether an existing file may be replaced
        exists: Existence check against the destination filesystem
        max_attempts: Number of numbered alternates to try before giving up

    Returns:
        The path to write to

    Raises:
        CollisionExhaustedError: If every alternate up to max_attempts is taken
    """
    if not exists(proposed) or overwrite_allowed:
        return proposed

    stem = proposed.stem
    suffix = proposed.suffix
    parent = proposed.parent

    for counter in range(2, max_attempts + 2):
        candidate = parent / f"{stem} ({counter}){suffix}"
        if not exists(candidate):
            logger.debug(f"Target exists, using alternate name: {candidate}")
            return candidate

    raise CollisionExhaustedError(str(proposed), max_attempts)
