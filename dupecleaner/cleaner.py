from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from loguru import logger

from dupecleaner.albums import AlbumReconciler
from dupecleaner.config import Config
from dupecleaner.errors import CleanerError, GatewayError, SelectionError
from dupecleaner.gateway import Gateway
from dupecleaner.log import short_id
from dupecleaner.models import AssetMetadata, DuplicateGroup
from dupecleaner.quality import select_best


def prompt_confirm(count: int) -> bool:
    """
    Ask the operator on stdin before deleting. Anything but y/yes, or a
    failure to read input, means no.
    """
    try:
        response = input(f"\nAbout to delete {count} duplicate(s). Continue? [y/N]: ")
    except (EOFError, KeyboardInterrupt, OSError):
        return False
    return response.strip().lower() in ("y", "yes")


@dataclass
class GroupOutcome:
    """What happened to one duplicate group. In dry-run, synced and deleted count what would happen."""
    duplicate_id: str
    synced: int = 0
    kept: Optional[str] = None
    deleted: List[str] = field(default_factory=list)
    skipped: bool = False
    cancelled: bool = False


@dataclass
class RunSummary:
    groups: int = 0
    failed: int = 0
    synced: int = 0
    deleted: int = 0


class GroupProcessor:
    """
    Runs one duplicate group through album sync and, if enabled,
    best-copy selection and deletion of the rest.
    """

    def __init__(self, gateway: Gateway, config: Config,
                 confirm: Callable[[int], bool] = prompt_confirm):
        self.gateway = gateway
        self.config = config
        self.confirm = confirm
        self.reconciler = AlbumReconciler(gateway, config)

    def process(self, group: DuplicateGroup, index: int, total: int) -> GroupOutcome:
        """
        Raises whatever album sync raises, or SelectionError when no best copy
        can be chosen. Per-asset failures are logged and skipped.
        """
        outcome = GroupOutcome(duplicate_id=group.duplicate_id)
        logger.info("Processing group {}/{} ({} assets)", index, total, len(group))

        if len(group) < 2:
            logger.warning("Skipping group - less than 2 assets")
            outcome.skipped = True
            return outcome

        # 1) Albums
        outcome.synced = self.reconciler.synchronize(group)
        if outcome.synced > 0:
            logger.info("Synchronized {} asset(s) across albums", outcome.synced)
        else:
            logger.info("Albums already synchronized")

        # 2) Deletion
        if self.config.auto_delete:
            self._auto_delete(group, outcome)

        return outcome

    # -----------------------------
    # INTERNAL HELPERS
    # -----------------------------

    def _auto_delete(self, group: DuplicateGroup, outcome: GroupOutcome):
        logger.info("Analyzing quality of {} duplicate(s)...", len(group))

        details = self._fetch_metadata(group)
        if len(details) < 2:
            logger.warning("Not enough asset details to compare quality")
            outcome.skipped = True
            return

        best_id = select_best(details)
        if best_id is None:
            raise SelectionError(f"Failed to determine best quality asset in group {short_id(group.duplicate_id)}")

        outcome.kept = best_id
        best = details[best_id]
        logger.info("Best quality asset: {}", short_id(best_id))
        if self.config.verbose:
            logger.info("   Size: {} bytes, Resolution: {}", best.file_size, best.resolution)

        to_delete = [asset_id for asset_id in group.asset_ids
                     if asset_id in details and asset_id != best_id]
        if not to_delete:
            logger.info("No duplicates to delete")
            return

        if not self.config.yes and not self.config.dry_run:
            if not self.confirm(len(to_delete)):
                logger.info("Deletion cancelled")
                outcome.cancelled = True
                return

        if self.config.dry_run:
            logger.info("[DRY RUN] Would delete {} duplicate(s)", len(to_delete))
        else:
            logger.info("Deleting {} duplicate(s)", len(to_delete))

        for asset_id in to_delete:
            if self.config.dry_run:
                logger.info("   [DRY RUN] Would delete asset {}", short_id(asset_id))
                outcome.deleted.append(asset_id)
                continue
            try:
                self.gateway.delete_asset(asset_id)
            except GatewayError as e:
                logger.error("Failed to delete asset {}: {}", short_id(asset_id), e)
                continue
            logger.info("Deleted duplicate asset {}", short_id(asset_id))
            outcome.deleted.append(asset_id)

    def _fetch_metadata(self, group: DuplicateGroup) -> Dict[str, AssetMetadata]:
        details: Dict[str, AssetMetadata] = {}
        for asset_id in group.asset_ids:
            try:
                details[asset_id] = self.gateway.get_asset_metadata(asset_id)
            except GatewayError as e:
                logger.warning("Failed to fetch details for asset {}: {}", short_id(asset_id), e)
        return details


class DuplicateCleaner:
    """
    Main class orchestrating a run:
     - list duplicate groups (failure is fatal)
     - process each group in listing order
     - keep going when a single group fails
    """

    def __init__(self, gateway: Gateway, config: Config,
                 confirm: Callable[[int], bool] = prompt_confirm):
        self.gateway = gateway
        self.config = config
        self.processor = GroupProcessor(gateway, config, confirm=confirm)

    def run(self) -> RunSummary:
        summary = RunSummary()

        if self.config.dry_run:
            logger.warning("DRY RUN MODE - No changes will be made")

        logger.info("Fetching duplicate groups...")
        groups = self.gateway.list_duplicate_groups()
        summary.groups = len(groups)
        logger.info("Found {} duplicate group(s)", len(groups))

        if not groups:
            logger.info("No duplicates found - nothing to do!")
            return summary

        for i, group in enumerate(groups, start=1):
            try:
                outcome = self.processor.process(group, i, len(groups))
            except CleanerError as e:
                logger.error("Failed to process group {}: {}", i, e)
                summary.failed += 1
                continue
            summary.synced += outcome.synced
            summary.deleted += len(outcome.deleted)

        logger.info(
            "Processing complete: {} group(s), {} failed, {} album addition(s), {} deletion(s){}",
            summary.groups, summary.failed, summary.synced, summary.deleted,
            " [DRY RUN - would be made]" if self.config.dry_run else "",
        )
        if not self.config.auto_delete:
            logger.info("Tip: Use --auto-delete to automatically remove lower-quality duplicates")

        return summary
