import asyncio

from fakes import ScriptedProvider
from flyingmachine.assets import (
    TEXTURE_FILES,
    SolidFillAssets,
    TextureAssets,
    asset_keys,
    required_keys,
)
from flyingmachine.blocks import BlockType, SELECTABLE_BLOCKS


def test_two_face_blocks_request_side_and_top():
    assert asset_keys(BlockType.STICKY_PISTON) == ("sticky_piston_side", "sticky_piston_top")
    assert asset_keys(BlockType.PISTON) == ("piston_side", "piston_top")


def test_single_face_blocks_request_one_key():
    assert asset_keys(BlockType.REDSTONE) == ("redstone",)
    assert asset_keys(BlockType.DISPENSER) == ("dispenser",)
    assert asset_keys(BlockType.EMPTY) == ()


def test_every_required_key_has_a_texture_file():
    keys = required_keys()
    assert len(keys) == len(set(keys)) == 9
    assert set(keys) == set(TEXTURE_FILES)
    assert "empty" not in keys
    assert len(SELECTABLE_BLOCKS) == 7


def test_texture_assets_keep_successful_keys():
    assets = TextureAssets(ScriptedProvider(failing={"redstone"}))
    asyncio.run(assets.load(["redstone", "observer"]))
    assert assets.get("observer") == "img:observer"
    assert assets.get("redstone") is None
    assert "observer" in assets
    assert assets.failed == {"redstone"}


def test_solid_fill_assets_never_resolve():
    assets = SolidFillAssets()
    asyncio.run(assets.load(required_keys()))
    assert all(assets.get(key) is None for key in required_keys())
    assets.release()
