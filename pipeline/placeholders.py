"""
Placeholder resolution: turns a track's metadata into the values that are
substituted into a path pattern.
"""

import re
from typing import Dict, List

from models.schemas import TrackMetadata
from pipeline.sanitizer import SanitizeMode, sanitize

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"

PLACEHOLDER_TOKENS = (
    "{track_name}",
    "{artist_name}",
    "{all_artist_names}",
    "{album_name}",
    "{track_num}",
    "{release_year}",
    "{release_date}",
    "{multi_disc_path}",
    "{multi_disc_paren}",
    "{playlist_name}",
    "{context_name}",
    "{context_index}",
    "{canvas_id}",
)

_TOKEN_SHAPE = re.compile(r'\{[^{}/\\]*\}')


def resolve_placeholders(meta: TrackMetadata) -> Dict[str, str]:
    """
    Build the placeholder map for one track.

    Keys are the tokens of PLACEHOLDER_TOKENS in lower case. Missing tags
    fall back to the filename stem, "Unknown Artist"/"Unknown Album" or an
    empty string.

    Args:
        meta: Metadata read from the source file

    Returns:
        Mapping from placeholder token to substitution value
    """
    performers = _non_blank(meta.performers)
    artist = performers[0] if performers else UNKNOWN_ARTIST
    all_artists = ", ".join(performers) if performers else artist

    title = meta.title.strip() if meta.title and meta.title.strip() else meta.file_stem
    album = meta.album.strip() if meta.album and meta.album.strip() else UNKNOWN_ALBUM

    year = str(meta.year) if meta.year and meta.year > 0 else ""
    track = meta.track_number if meta.track_number and meta.track_number > 0 else 0
    disc = meta.disc_number if meta.disc_number and meta.disc_number > 0 else 0

    return {
        "{track_name}": sanitize(title, SanitizeMode.SEGMENT),
        "{artist_name}": sanitize(artist, SanitizeMode.PATH_FRAGMENT),
        "{all_artist_names}": sanitize(all_artists, SanitizeMode.PATH_FRAGMENT),
        "{album_name}": sanitize(album, SanitizeMode.PATH_FRAGMENT),
        "{track_num}": f"{track:02d}",
        "{release_year}": year,
        # Only a year is available from the tags, so the date is the year
        "{release_date}": year,
        "{multi_disc_path}": f"CD{disc}/" if disc > 1 else "",
        "{multi_disc_paren}": f"CD{disc}" if disc > 1 else "",
        "{playlist_name}": "",
        "{context_name}": "",
        "{context_index}": "",
        "{canvas_id}": "",
    }


def find_unknown_placeholders(pattern: str) -> List[str]:
    """Return the {...} tokens in a pattern that are not supported placeholders."""
    known = set(PLACEHOLDER_TOKENS)
    return [
        token for token in _TOKEN_SHAPE.findall(pattern)
        if token.lower() not in known
    ]


def _non_blank(values: List[str]) -> List[str]:
    return [v.strip() for v in values if v and v.strip()]
