"""
Path planning for a single source file.
"""

import logging
from pathlib import Path
from typing import Optional

from models.schemas import Plan, TrackMetadata
from pipeline.pattern import build_relative_path
from pipeline.placeholders import resolve_placeholders

logger = logging.getLogger(__name__)


class PathPlanner:
    """Turns track metadata into a Plan under a destination root."""

    def __init__(self, dest_root: Path, pattern: str, required_extension: str = ".mp3"):
        self.dest_root = dest_root
        self.pattern = pattern
        self.required_extension = required_extension

    def plan(self, metadata: TrackMetadata) -> Optional[Plan]:
        """
        Compute the target for one track.

        Returns:
            A Plan, or None when the pattern resolves to an empty path
        """
        placeholders = resolve_placeholders(metadata)
        relative = build_relative_path(self.pattern, placeholders, self.required_extension)
        if not relative:
            logger.debug(f"Pattern resolved to an empty path for '{metadata.file_stem}'")
            return None

        return Plan(abs_target=self.dest_root / relative, relative_target=relative)
