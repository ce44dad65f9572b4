from typing import Mapping, Optional

from dupecleaner.models import AssetMetadata

# Names cameras and phones generate on their own
CAMERA_PREFIXES = ("IMG_", "DSC_", "DSCN", "P_", "PHOTO_", "VID_")


def is_original_filename(filename: str) -> bool:
    """
    True unless the filename starts (case-insensitively) with a camera prefix.
    Empty names count as original.
    """
    return not (filename or "").upper().startswith(CAMERA_PREFIXES)


def _is_earlier(candidate: AssetMetadata, best: AssetMetadata) -> bool:
    if candidate.created_at is None:
        return False
    if best.created_at is None:
        return True
    return candidate.created_at < best.created_at


def _beats(candidate: AssetMetadata, best: AssetMetadata) -> bool:
    """
    Pairwise comparison:
     1) larger file size wins
     2) same size => the only original filename wins
     3) same size and class => strictly earlier creation time wins
    """
    if candidate.file_size != best.file_size:
        return candidate.file_size > best.file_size

    candidate_original = is_original_filename(candidate.original_filename)
    best_original = is_original_filename(best.original_filename)
    if candidate_original != best_original:
        return candidate_original

    return _is_earlier(candidate, best)


def select_best(candidates: Mapping[str, AssetMetadata]) -> Optional[str]:
    """
    Return the id of the best-quality asset, or None if no candidate has a
    file size. Candidates are visited in asset-id order so ties resolve the
    same way every run. The input mapping is not modified.
    """
    best_id = None
    best = None

    for asset_id in sorted(candidates):
        meta = candidates[asset_id]
        if meta is None or meta.file_size is None:
            continue
        if best is None or _beats(meta, best):
            best_id, best = asset_id, meta

    return best_id
