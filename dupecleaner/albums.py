from typing import Dict, List

from loguru import logger

from dupecleaner.config import Config
from dupecleaner.errors import GatewayError
from dupecleaner.gateway import Gateway
from dupecleaner.log import short_id
from dupecleaner.models import AlbumMembership, DuplicateGroup


class AlbumReconciler:
    """
    Makes every album that holds any member of a duplicate group hold all
    of them. Only ever adds assets to albums, never removes.
    """

    def __init__(self, gateway: Gateway, config: Config):
        self.gateway = gateway
        self.config = config

    def synchronize(self, group: DuplicateGroup) -> int:
        """
        Returns the number of (asset, album) pairs added, or that would be
        added in dry-run mode. Failed reads skip the asset, failed writes
        skip the album; neither aborts the group.
        """
        asset_albums = self._fetch_memberships(group)

        if self.config.verbose:
            self._log_assignments(asset_albums)

        # album_id -> album, in first-seen order
        all_albums: Dict[str, AlbumMembership] = {}
        for albums in asset_albums.values():
            for album in albums:
                all_albums.setdefault(album.album_id, album)

        sync_count = 0
        for album_id, album in all_albums.items():
            missing = self._missing_assets(group, album_id, asset_albums)
            if not missing:
                continue

            label = album.album_name or short_id(album_id)
            if self.config.dry_run:
                logger.info("[DRY RUN] Would add {} asset(s) to album {}", len(missing), label)
                sync_count += len(missing)
                continue

            try:
                self.gateway.add_assets_to_album(album_id, missing)
            except GatewayError as e:
                logger.error("Failed to add assets to album {}: {}", label, e)
                continue

            logger.info("Added {} asset(s) to album {}", len(missing), label)
            sync_count += len(missing)

        return sync_count

    # -----------------------------
    # INTERNAL HELPERS
    # -----------------------------

    def _fetch_memberships(self, group: DuplicateGroup) -> Dict[str, List[AlbumMembership]]:
        asset_albums: Dict[str, List[AlbumMembership]] = {}
        for asset_id in group.asset_ids:
            try:
                asset_albums[asset_id] = self.gateway.list_albums_for_asset(asset_id)
            except GatewayError as e:
                logger.warning("Failed to fetch albums for asset {}: {}", short_id(asset_id), e)
        return asset_albums

    @staticmethod
    def _missing_assets(group: DuplicateGroup, album_id: str,
                        asset_albums: Dict[str, List[AlbumMembership]]) -> List[str]:
        """
        Group assets not already in album_id, in group order. Assets whose
        albums could not be fetched are left out entirely.
        """
        missing = []
        for asset_id in group.asset_ids:
            # Unknown membership: leave it out rather than add it to every album
            if asset_id not in asset_albums:
                continue
            if not any(album.album_id == album_id for album in asset_albums[asset_id]):
                missing.append(asset_id)
        return missing

    @staticmethod
    def _log_assignments(asset_albums: Dict[str, List[AlbumMembership]]):
        logger.info("Current album assignments:")
        for asset_id, albums in asset_albums.items():
            names = [album.album_name or short_id(album.album_id) for album in albums]
            logger.info("   Asset {}: {}", short_id(asset_id), names)
