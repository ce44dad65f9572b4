import requests
from loguru import logger
from typing import Iterable, List

from dupecleaner.auth import ApiKeyAuth
from dupecleaner.config import (
    ALBUMS_ENDPOINT,
    ASSETS_ENDPOINT,
    DUPLICATES_ENDPOINT,
    Config,
)
from dupecleaner.errors import DecodeError, TransportError, UnexpectedStatus
from dupecleaner.gateway import Gateway
from dupecleaner.models import AlbumMembership, AssetMetadata, DuplicateGroup


class ImmichGateway(Gateway):
    """
    Gateway backed by the Immich REST API.
    One pooled requests.Session per instance; every call uses config.timeout
    and is attempted exactly once.
    """

    def __init__(self, config: Config, session: requests.Session = None):
        self.base_url = config.url.rstrip("/")
        self.timeout = config.timeout
        self.session = session if session is not None else requests.Session()
        self.session.auth = ApiKeyAuth(config.api_key)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -----------------------------
    # READS
    # -----------------------------

    def list_duplicate_groups(self) -> List[DuplicateGroup]:
        data = self._request("GET", DUPLICATES_ENDPOINT)
        return [DuplicateGroup.from_json(item) for item in self._expect_list(data, "duplicates")]

    def list_albums_for_asset(self, asset_id: str) -> List[AlbumMembership]:
        data = self._request("GET", ALBUMS_ENDPOINT, params={"assetId": asset_id})
        return [AlbumMembership.from_json(item) for item in self._expect_list(data, "albums")]

    def get_asset_metadata(self, asset_id: str) -> AssetMetadata:
        data = self._request("GET", f"{ASSETS_ENDPOINT}/{asset_id}")
        return AssetMetadata.from_json(data)

    # -----------------------------
    # WRITES
    # -----------------------------

    def add_assets_to_album(self, album_id: str, asset_ids: List[str]) -> None:
        self._request(
            "PUT",
            f"{ALBUMS_ENDPOINT}/{album_id}/assets",
            json={"ids": list(asset_ids)},
            decode=False,
        )

    def delete_asset(self, asset_id: str) -> None:
        # The server answers 204 or 200 depending on version; both mean deleted.
        self._request(
            "DELETE",
            ASSETS_ENDPOINT,
            json={"ids": [asset_id], "force": True},
            ok_statuses=(200, 204),
            decode=False,
        )

    # -----------------------------
    # INTERNAL HELPERS
    # -----------------------------

    def _request(self, method: str, path: str, ok_statuses: Iterable[int] = (200,),
                 decode: bool = True, **kwargs):
        """
        Send one request and return the decoded JSON body (or None when decode=False).
        Raises TransportError, UnexpectedStatus or DecodeError.
        """
        url = f"{self.base_url}{path}"
        logger.debug("{} {}", method, url)

        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        try:
            if resp.status_code not in ok_statuses:
                raise UnexpectedStatus(resp.status_code, resp.text)

            if not decode:
                return None

            try:
                return resp.json()
            except ValueError as e:
                raise DecodeError(f"Failed to decode response from {path}: {e}") from e
        finally:
            resp.close()

    @staticmethod
    def _expect_list(data, what: str) -> list:
        if not isinstance(data, list):
            raise DecodeError(f"Expected a JSON list of {what}, got {type(data).__name__}")
        return data
