"""Asset keys and asset-resolution strategies for the renderer.

Assets are addressed by string keys derived from the block type.  Pistons
have two faces and request ``"<type>_side"`` and ``"<type>_top"``; every other
placeable block requests a single ``"<type>"`` key.  Where the key comes from
is up to an :class:`AssetProvider`; the renderer only sees one of the two
strategies defined here:

* :class:`TextureAssets` resolves every key through a provider and keeps the
  images that loaded.
* :class:`SolidFillAssets` loads nothing, so every block is drawn with the
  fallback fill.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, Optional, Set, Tuple

from .blocks import SELECTABLE_BLOCKS, TWO_FACE_BLOCKS, BlockType


LOGGER = logging.getLogger(__name__)

SIDE = "side"
TOP = "top"

# Texture file for every asset key.  Both pistons share the side texture.
TEXTURE_FILES: Dict[str, str] = {
    "sticky_piston_side": "piston_side.png",
    "sticky_piston_top": "piston_top_sticky.png",
    "piston_side": "piston_side.png",
    "piston_top": "piston_top.png",
    "redstone": "redstone_block.png",
    "observer": "observer_top.png",
    "slime_block": "slime.png",
    "honeycomb_block": "honeycomb.png",
    "dispenser": "dispenser_front_horizontal.png",
}


def face_key(block_type: BlockType, face: str) -> str:
    """Return the key of one face of a two-face block."""

    return f"{block_type.value}_{face}"


def asset_keys(block_type: BlockType) -> Tuple[str, ...]:
    """Return every asset key ``block_type`` needs."""

    if block_type is BlockType.EMPTY:
        return ()
    if block_type in TWO_FACE_BLOCKS:
        return (face_key(block_type, SIDE), face_key(block_type, TOP))
    return (block_type.value,)


def required_keys() -> Tuple[str, ...]:
    """Return the keys of all assets the renderer requests at start-up."""

    keys: list[str] = []
    for block_type in SELECTABLE_BLOCKS:
        keys.extend(asset_keys(block_type))
    return tuple(keys)


class AssetProvider:
    """Source of image handles keyed by asset key."""

    async def resolve(self, key: str) -> Any:
        """Return the image for ``key``.  May raise on failure."""

        raise NotImplementedError

    def release(self, image: Any) -> None:
        """Free ``image``.  Most backends rely on garbage collection."""


class SolidFillAssets:
    """Strategy used when no provider is available."""

    async def load(self, keys: Iterable[str]) -> None:
        return None

    def get(self, key: str) -> Optional[Any]:
        return None

    def release(self) -> None:
        return None


class TextureAssets:
    """Strategy that resolves keys through an :class:`AssetProvider`."""

    def __init__(self, provider: AssetProvider) -> None:
        self._provider = provider
        self._images: Dict[str, Any] = {}
        self.failed: Set[str] = set()

    async def load(self, keys: Iterable[str]) -> None:
        """Resolve ``keys`` concurrently.

        A key that fails is logged and left missing.  The other keys are
        unaffected.
        """

        keys = tuple(keys)
        results = await asyncio.gather(
            *(self._provider.resolve(key) for key in keys), return_exceptions=True
        )
        for key, result in zip(keys, results):
            if isinstance(result, Exception):
                LOGGER.warning("Failed to load asset %s: %s", key, result)
                self.failed.add(key)
            elif isinstance(result, BaseException):
                raise result
            else:
                self._images[key] = result
        LOGGER.info("Loaded %d of %d assets", len(self._images), len(keys))

    def get(self, key: str) -> Optional[Any]:
        return self._images.get(key)

    def release(self) -> None:
        for image in self._images.values():
            self._provider.release(image)
        self._images.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._images
