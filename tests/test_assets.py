"""
Test script for artwork loading/slicing and settings persistence

Covers:
1. Image loading (valid, missing, not an image)
2. Default artwork and square cropping
3. Tile slicing for 3x3 and 4x4
4. Settings defaults, round trip and validation

Usage:
    python tests/test_assets.py
"""

import json
import sys
import tempfile
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from PIL import Image

from tifpuzzle.image_source import default_artwork, load_image, slice_tiles, square_crop
from tifpuzzle.settings import DEFAULT_SETTINGS, load_settings, save_settings


def test_load_image():
    """Test image loading and failure cases."""
    print("\n" + "="*60)
    print("TEST: Load Image")
    print("="*60)

    with tempfile.TemporaryDirectory() as tmp:
        tmp = Path(tmp)

        png = tmp / "photo.png"
        Image.new("RGBA", (40, 30), (255, 0, 0, 128)).save(png)
        image = load_image(png)
        print(f"  Loaded: mode={image.mode}, size={image.size}")
        assert image.mode == "RGB"
        assert image.size == (40, 30)

        assert load_image(tmp / "missing.png") is None

        garbage = tmp / "notes.jpg"
        garbage.write_bytes(b"not an image at all")
        assert load_image(garbage) is None

    print("  [PASS] Load image tests")


def test_default_artwork():
    """Test the built-in artwork."""
    print("\n" + "="*60)
    print("TEST: Default Artwork")
    print("="*60)

    art = default_artwork(200)
    print(f"  Default artwork: mode={art.mode}, size={art.size}")
    assert art.size == (200, 200)
    assert art.mode == "RGB"

    print("  [PASS] Default artwork tests")


def test_square_crop():
    """Test center cropping for landscape and portrait sources."""
    print("\n" + "="*60)
    print("TEST: Square Crop")
    print("="*60)

    # Left/right thirds black, middle white
    wide = Image.new("RGB", (300, 100), (0, 0, 0))
    wide.paste((255, 255, 255), (100, 0, 200, 100))
    cropped = square_crop(wide)
    assert cropped.size == (100, 100)
    assert cropped.getpixel((0, 50)) == (255, 255, 255)
    assert cropped.getpixel((99, 50)) == (255, 255, 255)

    tall = Image.new("RGB", (80, 200), (0, 0, 0))
    assert square_crop(tall).size == (80, 80)

    print("  [PASS] Square crop tests")


def test_slice_tiles():
    """Test tiles cover the artwork in row-major cells."""
    print("\n" + "="*60)
    print("TEST: Slice Tiles")
    print("="*60)

    # Top half red, bottom half blue
    art = Image.new("RGB", (120, 120), (0, 0, 255))
    art.paste((255, 0, 0), (0, 0, 120, 60))

    for n in (3, 4):
        tiles = slice_tiles(art, n, 50)
        print(f"  {n}x{n}: {len(tiles)} tiles")
        assert set(tiles) == {(r, c) for r in range(n) for c in range(n)}
        assert all(t.size == (50, 50) for t in tiles.values())

    tiles = slice_tiles(art, 4, 50)
    red, _, blue = tiles[(0, 0)].getpixel((25, 25))
    assert red > 200 and blue < 50
    red, _, blue = tiles[(3, 3)].getpixel((25, 25))
    assert red < 50 and blue > 200

    print("  [PASS] Slice tiles tests")


def test_settings_defaults():
    """Test missing and invalid files fall back to defaults."""
    print("\n" + "="*60)
    print("TEST: Settings Defaults")
    print("="*60)

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "config.json"
        assert load_settings(path) == DEFAULT_SETTINGS

        path.write_text("{not json", encoding="utf-8")
        assert load_settings(path) == DEFAULT_SETTINGS

        path.write_text(json.dumps({"grid_size": 7}), encoding="utf-8")
        settings = load_settings(path)
        assert settings["grid_size"] == 3
        assert settings["last_image_path"] is None

    print("  [PASS] Settings defaults tests")


def test_settings_round_trip():
    """Test saved settings load back, with missing keys filled in."""
    print("\n" + "="*60)
    print("TEST: Settings Round Trip")
    print("="*60)

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "config.json"
        save_settings({"grid_size": 4, "last_image_path": "cat.png"}, path)
        assert load_settings(path) == {"grid_size": 4, "last_image_path": "cat.png"}

        path.write_text(json.dumps({"grid_size": 4}), encoding="utf-8")
        assert load_settings(path) == {"grid_size": 4, "last_image_path": None}

    print("  [PASS] Settings round trip tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# ARTWORK AND SETTINGS TESTS")
    print("#"*60)

    tests = [
        ("Load Image", test_load_image),
        ("Default Artwork", test_default_artwork),
        ("Square Crop", test_square_crop),
        ("Slice Tiles", test_slice_tiles),
        ("Settings Defaults", test_settings_defaults),
        ("Settings Round Trip", test_settings_round_trip),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {name}: {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)

    all_passed = True
    for name, passed in results:
        status = "PASS" if passed else "FAIL"
        print(f"  {name}: [{status}]")
        if not passed:
            all_passed = False

    print()
    if all_passed:
        print("All tests PASSED!")
        return 0
    else:
        print("Some tests FAILED!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
