"""
Shared fixtures: an in-memory gateway and a loguru capture sink.
"""
import datetime

import pytest
from loguru import logger

from dupecleaner.config import Config
from dupecleaner.errors import TransportError, UnexpectedStatus
from dupecleaner.gateway import Gateway
from dupecleaner.models import AlbumMembership, AssetMetadata, DuplicateGroup


class StubGateway(Gateway):
    """
    Gateway backed by dicts. Albums are stored as album_id -> (name, set of asset ids);
    ids listed in fail_* make the matching call raise.
    """

    def __init__(self, groups=None, albums=None, assets=None):
        self.groups = list(groups or [])
        self.albums = {album_id: (name, set(members)) for album_id, (name, members) in (albums or {}).items()}
        self.assets = dict(assets or {})
        self.fail_album_reads = set()
        self.fail_album_writes = set()
        self.fail_metadata = set()
        self.fail_deletes = set()
        self.fail_listing = False
        self.add_calls = []
        self.delete_calls = []

    def list_duplicate_groups(self):
        if self.fail_listing:
            raise TransportError("connection refused")
        return list(self.groups)

    def list_albums_for_asset(self, asset_id):
        if asset_id in self.fail_album_reads:
            raise TransportError("timed out")
        return [
            AlbumMembership(album_id=album_id, album_name=name, asset_ids=frozenset(members))
            for album_id, (name, members) in self.albums.items()
            if asset_id in members
        ]

    def get_asset_metadata(self, asset_id):
        if asset_id in self.fail_metadata:
            raise UnexpectedStatus(404, "not found")
        return self.assets[asset_id]

    def add_assets_to_album(self, album_id, asset_ids):
        self.add_calls.append((album_id, list(asset_ids)))
        if album_id in self.fail_album_writes:
            raise UnexpectedStatus(500, "boom")
        self.albums[album_id][1].update(asset_ids)

    def delete_asset(self, asset_id):
        self.delete_calls.append(asset_id)
        if asset_id in self.fail_deletes:
            raise UnexpectedStatus(500, "boom")
        self.assets.pop(asset_id, None)


def make_asset(asset_id, size=1_000_000, filename="photo.jpg", created=None):
    return AssetMetadata(
        asset_id=asset_id,
        original_filename=filename,
        file_size=size,
        created_at=created,
    )


def utc(year, month, day):
    return datetime.datetime(year, month, day, tzinfo=datetime.timezone.utc)


@pytest.fixture
def config():
    return Config(url="http://immich.local", api_key="secret")


@pytest.fixture
def stub_gateway():
    return StubGateway()


@pytest.fixture
def group():
    return DuplicateGroup(duplicate_id="dup-1", asset_ids=("asset-a", "asset-b"))


@pytest.fixture
def log_messages():
    """Collect formatted loguru messages for the duration of a test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
