"""
Primary-designation resolver.

Keeps "exactly one primary among siblings" true for the CV and photo
collections. Everything here is a pure function over a list of assets: no
I/O, no mutation of the input list or its elements (updated elements are
copies), so the same rules can be exercised directly in tests.

Rules:
- promote: the chosen asset becomes primary, every sibling is demoted.
- re-elect: after a removal, if the removed asset was primary, the first
  remaining asset (upload order) becomes primary; otherwise nothing changes.
"""

from typing import Callable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel

from hirehub.models.profile import PhotoAsset, Profile

Asset = TypeVar("Asset", bound=BaseModel)


def _with_flag(asset: Asset, is_primary: bool) -> Asset:
    if asset.is_primary == is_primary:
        return asset
    return asset.model_copy(update={"is_primary": is_primary})


def promote(siblings: Sequence[Asset], asset_id: str) -> List[Asset]:
    """Mark ``asset_id`` primary and demote all others."""
    if not any(asset.id == asset_id for asset in siblings):
        raise KeyError(asset_id)
    return [_with_flag(asset, asset.id == asset_id) for asset in siblings]


def reelect(siblings: Sequence[Asset], removed_was_primary: bool) -> List[Asset]:
    """Choose a new primary after a removal, if the removed one held it."""
    survivors = list(siblings)
    if not removed_was_primary or not survivors:
        return survivors
    return [_with_flag(asset, index == 0) for index, asset in enumerate(survivors)]


def resolve_primary(
    siblings: Sequence[Asset],
    promote_id: Optional[str] = None,
    removed: Optional[Asset] = None,
) -> List[Asset]:
    """
    Single entry point used by the lifecycle manager.

    Args:
        siblings: the collection after any append/removal
        promote_id: id to promote, or None for re-election mode
        removed: the asset just removed (re-election mode only)
    """
    if promote_id is not None:
        return promote(siblings, promote_id)
    return reelect(siblings, removed_was_primary=bool(removed is not None and removed.is_primary))


def primary_of(siblings: Sequence[Asset]) -> Optional[Asset]:
    return next((asset for asset in siblings if asset.is_primary), None)


def avatar_url_for(photos: Sequence[PhotoAsset], url_for: Callable[[str], str]) -> str:
    """URL of the primary photo, or empty when there is none."""
    primary = primary_of(photos)
    return url_for(primary.storage_key) if primary is not None else ""


def apply_photos(profile: Profile, photos: List[PhotoAsset], url_for: Callable[[str], str]) -> bool:
    """
    Replace the photo collection and recompute the avatar projection.

    Returns True when avatar_url changed.
    """
    previous = profile.avatar_url
    profile.photos = photos
    profile.avatar_url = avatar_url_for(photos, url_for)
    return profile.avatar_url != previous
