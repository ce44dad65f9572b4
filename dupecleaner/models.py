"""
Read-only snapshots of remote state, decoded from the Immich JSON responses.

################################################################
# RESPONSE SHAPES:
#   GET /api/duplicates
#     [{"duplicateId": "...", "assets": [{"id": "..."}, ...]}, ...]
#   GET /api/albums?assetId=...
#     [{"id": "...", "albumName": "...", "assets": [{"id": "..."}]}, ...]
#   GET /api/assets/{id}
#     {"id": "...", "originalFileName": "IMG_1234.HEIC",
#      "fileCreatedAt": "2023-01-01T10:00:00.000Z",
#      "exifInfo": {"fileSizeInByte": 123, "exifImageWidth": 4032, ...}}
################################################################
"""

import datetime
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from dupecleaner.errors import DecodeError


def _require(data, key: str, where: str):
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object for {where}, got {type(data).__name__}")
    if key not in data:
        raise DecodeError(f"Missing '{key}' in {where}")
    return data[key]


def _asset_ids(items, where: str) -> Tuple[str, ...]:
    if items is None:
        return ()
    if not isinstance(items, list):
        raise DecodeError(f"Expected a list of assets in {where}")
    return tuple(str(_require(item, "id", where)) for item in items)


def parse_timestamp(value) -> Optional[datetime.datetime]:
    """
    Parse an ISO-8601 timestamp as sent by the server ("...Z" suffix allowed).
    Returns None for missing or empty values.
    """
    if not value:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"Invalid timestamp: {value!r}")
    try:
        dt = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise DecodeError(f"Invalid timestamp: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt


@dataclass(frozen=True)
class DuplicateGroup:
    duplicate_id: str
    asset_ids: Tuple[str, ...] = ()

    @classmethod
    def from_json(cls, data: dict) -> "DuplicateGroup":
        duplicate_id = _require(data, "duplicateId", "duplicate group")
        return cls(
            duplicate_id=str(duplicate_id),
            asset_ids=_asset_ids(data.get("assets"), "duplicate group"),
        )

    def __len__(self):
        return len(self.asset_ids)


@dataclass(frozen=True)
class AlbumMembership:
    """
    An album and the assets it held when it was fetched. The set may be
    stale by the time we write to the album.
    """
    album_id: str
    album_name: str = ""
    asset_ids: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_json(cls, data: dict) -> "AlbumMembership":
        album_id = _require(data, "id", "album")
        return cls(
            album_id=str(album_id),
            album_name=data.get("albumName") or "",
            asset_ids=frozenset(_asset_ids(data.get("assets"), "album")),
        )


@dataclass(frozen=True)
class AssetMetadata:
    """
    What the quality ranker needs to know about one asset.
    file_size is None when the server reports no EXIF size; such assets
    are never ranked. width/height are only shown in logs.
    """
    asset_id: str
    original_filename: str = ""
    file_size: Optional[int] = None
    created_at: Optional[datetime.datetime] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def from_json(cls, data: dict) -> "AssetMetadata":
        asset_id = _require(data, "id", "asset")

        exif = data.get("exifInfo") or {}
        if not isinstance(exif, dict):
            raise DecodeError("Expected a JSON object for exifInfo")

        size = exif.get("fileSizeInByte")
        if size is not None:
            try:
                size = int(size)
            except (TypeError, ValueError) as e:
                raise DecodeError(f"Invalid fileSizeInByte: {size!r}") from e
            if size < 0:
                raise DecodeError(f"Negative fileSizeInByte: {size}")

        return cls(
            asset_id=str(asset_id),
            original_filename=data.get("originalFileName") or "",
            file_size=size,
            created_at=parse_timestamp(data.get("fileCreatedAt")),
            width=exif.get("exifImageWidth") or exif.get("imageWidth"),
            height=exif.get("exifImageHeight") or exif.get("imageHeight"),
        )

    @property
    def resolution(self) -> str:
        if self.width and self.height:
            return f"{self.width}x{self.height}"
        return "unknown"
