"""
Image Source Module for TiFpuzzle

Loads puzzle artwork with Pillow and cuts it into per-cell tile images.
When no custom image is available a default artwork is generated, so the
game never depends on an asset file being present.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

# Side length of the generated default artwork
DEFAULT_ARTWORK_SIZE = 720

# Gradient endpoints for the default artwork (top-left -> bottom-right)
DEFAULT_COLOR_START = (33, 150, 243)
DEFAULT_COLOR_END = (255, 193, 7)

SUPPORTED_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.gif', '.tiff', '.webp')


def load_image(path: Union[str, Path]) -> Optional[Image.Image]:
    """
    Load an image file as RGB.

    Args:
        path: Image file path

    Returns:
        RGB image, or None if the file is missing or unreadable
    """
    path = Path(path)
    try:
        with Image.open(path) as img:
            image = img.convert("RGB")
    except OSError as e:
        # Pillow's UnidentifiedImageError is an OSError
        logger.warning(f"Failed to load image {path}: {e}")
        return None

    logger.info(f"Loaded image {path.name}: {image.size[0]}x{image.size[1]}")
    return image


def default_artwork(size: int = DEFAULT_ARTWORK_SIZE) -> Image.Image:
    """
    Generate the built-in puzzle artwork.

    A diagonal gradient with concentric rings and a title, distinct enough
    in every region that tiles can be told apart.
    """
    vertical = Image.linear_gradient("L").resize((size, size))
    horizontal = vertical.rotate(90)
    mask = Image.blend(vertical, horizontal, 0.5)
    image = Image.composite(
        Image.new("RGB", (size, size), DEFAULT_COLOR_END),
        Image.new("RGB", (size, size), DEFAULT_COLOR_START),
        mask,
    )

    draw = ImageDraw.Draw(image)
    center = size / 2
    for i, radius in enumerate(range(size // 2, 0, -size // 12)):
        color = (255, 255, 255) if i % 2 == 0 else (20, 40, 80)
        draw.ellipse(
            [center - radius, center - radius, center + radius, center + radius],
            outline=color, width=max(size // 80, 2)
        )

    font = ImageFont.load_default()
    draw.text((size * 0.05, size * 0.05), "TiFpuzzle", fill=(255, 255, 255), font=font)
    return image


def square_crop(image: Image.Image) -> Image.Image:
    """Center-crop an image to a square (aspect fill)."""
    width, height = image.size
    side = min(width, height)
    left = (width - side) // 2
    top = (height - side) // 2
    return image.crop((left, top, left + side, top + side))


def slice_tiles(image: Image.Image, grid_size: int,
                tile_px: int) -> Dict[Tuple[int, int], Image.Image]:
    """
    Cut artwork into grid_size x grid_size square tiles.

    Args:
        image: Source artwork (any aspect ratio)
        grid_size: Grid side length N
        tile_px: Output side of each tile in pixels

    Returns:
        Dict mapping (row, col) to tile image
    """
    tile_px = max(int(tile_px), 1)
    full = square_crop(image).resize((tile_px * grid_size, tile_px * grid_size), Image.LANCZOS)

    tiles = {}
    for row in range(grid_size):
        for col in range(grid_size):
            box = (col * tile_px, row * tile_px, (col + 1) * tile_px, (row + 1) * tile_px)
            tiles[(row, col)] = full.crop(box)
    return tiles
