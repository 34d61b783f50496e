"""Shared fixtures for the organizer tests."""

from pathlib import Path
from typing import Dict, Union

import pytest

from models.schemas import TrackMetadata
from utils.exceptions import MetadataExtractionError


class FakeMetadataReader:
    """Returns canned metadata keyed by file name, or raises a canned error."""

    def __init__(self, records: Dict[str, Union[TrackMetadata, Exception]]):
        self.records = records
        self.calls = []

    def read(self, file_path: Path) -> TrackMetadata:
        self.calls.append(file_path)
        record = self.records.get(file_path.name)
        if record is None:
            raise MetadataExtractionError(str(file_path), "no canned metadata")
        if isinstance(record, Exception):
            raise record
        return record


@pytest.fixture
def daft_punk() -> TrackMetadata:
    return TrackMetadata(
        title="One More Time",
        performers=["Daft Punk"],
        album="Discovery",
        year=2001,
        track_number=1,
        file_stem="01 one more time",
    )


@pytest.fixture
def source_dir(tmp_path) -> Path:
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path) -> Path:
    return tmp_path / "dst"


def make_file(directory: Path, name: str, content: bytes = b"audio") -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path
