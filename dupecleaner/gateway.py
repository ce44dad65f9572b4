"""
The boundary through which the cleaner reads and writes remote state.

The core only ever talks to a Gateway; ImmichGateway implements it over
HTTP, tests implement it in memory.
"""

from typing import List

from dupecleaner.models import AlbumMembership, AssetMetadata, DuplicateGroup


class Gateway:
    """Interface for the remote duplicate/album/asset service."""

    def list_duplicate_groups(self) -> List[DuplicateGroup]:
        raise NotImplementedError

    def list_albums_for_asset(self, asset_id: str) -> List[AlbumMembership]:
        raise NotImplementedError

    def get_asset_metadata(self, asset_id: str) -> AssetMetadata:
        raise NotImplementedError

    def add_assets_to_album(self, album_id: str, asset_ids: List[str]) -> None:
        """Adding an asset that is already in the album is a no-op remotely."""
        raise NotImplementedError

    def delete_asset(self, asset_id: str) -> None:
        raise NotImplementedError
