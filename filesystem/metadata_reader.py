"""
Metadata extraction with mutagen.

Tags are read through mutagen's "easy" interface, which exposes ID3, MP4,
Vorbis and APE tags under the same lower-case keys.
"""

import logging
import re
from pathlib import Path
from typing import Any, List, Optional

import mutagen

from models.schemas import TrackMetadata
from utils.exceptions import MetadataExtractionError

logger = logging.getLogger(__name__)

_YEAR = re.compile(r'\d{4}')
_LEADING_NUMBER = re.compile(r'\s*(\d+)')


class MetadataReader:
    """Reads the tag fields the path planner needs from an audio file."""

    def read(self, file_path: Path) -> TrackMetadata:
        """
        Read metadata from an audio file.

        The file is opened and closed within this call.

        Args:
            file_path: Path to the audio file

        Returns:
            TrackMetadata for the file; empty fields when it has no tags

        Raises:
            MetadataExtractionError: If the file cannot be read or is not
                a recognized audio format
        """
        try:
            audio_file = mutagen.File(str(file_path), easy=True)
        except mutagen.MutagenError as e:
            raise MetadataExtractionError(str(file_path), str(e))
        except OSError as e:
            raise MetadataExtractionError(str(file_path), f"cannot open file: {e}")

        if audio_file is None:
            raise MetadataExtractionError(str(file_path), "unrecognized audio format")

        tags = audio_file.tags
        if tags is None:
            logger.debug(f"No tags found in {file_path}")
            return TrackMetadata(file_stem=file_path.stem)

        return TrackMetadata(
            title=_first(tags, 'title'),
            performers=_all(tags, 'artist'),
            album=_first(tags, 'album'),
            year=_parse_year(_first(tags, 'date')),
            track_number=_parse_number(_first(tags, 'tracknumber')),
            disc_number=_parse_number(_first(tags, 'discnumber')),
            file_stem=file_path.stem,
        )


def _all(tags: Any, key: str) -> List[str]:
    try:
        values = tags[key]
    except (KeyError, ValueError):
        return []
    if isinstance(values, str):
        values = [values]
    return [str(v) for v in values if v is not None]


def _first(tags: Any, key: str) -> Optional[str]:
    values = _all(tags, key)
    return values[0] if values else None


def _parse_year(value: Optional[str]) -> Optional[int]:
    """Take the year from a date tag such as "2001", "2001-03-12" or "2001/03"."""
    if not value:
        return None
    match = _YEAR.search(value)
    return int(match.group(0)) if match else None


def _parse_number(value: Optional[str]) -> Optional[int]:
    """Parse "3" or "3/12" into 3."""
    if not value:
        return None
    match = _LEADING_NUMBER.match(value)
    return int(match.group(1)) if match else None
