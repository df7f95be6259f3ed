import numpy as np
import numpy.typing as npt
from PIL import Image, ImageDraw

from level_builder.types import BOX_SIZE, LEVEL_HEIGHT, LEVEL_WIDTH, Color

# Type aliases for clarity
FloatArray = npt.NDArray[np.float32]
UInt8Array = npt.NDArray[np.uint8]


def darken_image(base: Image.Image, factor: float) -> Image.Image:
    """
    Scale RGB of every pixel by ``factor`` (clipped to [0, 1]); alpha unchanged.
    Returns a new image, the input is left untouched.
    """
    if base.mode != "RGBA":
        base = base.convert("RGBA")

    arr: UInt8Array = np.array(base, dtype=np.uint8)
    f = np.float32(np.clip(factor, 0.0, 1.0))

    rgb: FloatArray = arr[..., :3].astype(np.float32) * f
    out: UInt8Array = arr.copy()
    out[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    return Image.fromarray(out, mode="RGBA")


def draw_grid_overlay(
    image: Image.Image,
    color: Color,
    width: int,
    box_size: int = BOX_SIZE,
) -> Image.Image:
    """
    Stroke one rectangle per cell onto ``image`` in place and return it.
    Cell boxes follow the level addressing: column ``x`` spans
    ``[x * box_size, (x + 1) * box_size)``.
    """
    if width <= 0:
        return image

    draw = ImageDraw.Draw(image)
    rgba = (color[0], color[1], color[2], 255)
    for y in range(LEVEL_HEIGHT):
        for x in range(LEVEL_WIDTH):
            x0, y0 = x * box_size, y * box_size
            draw.rectangle(
                [x0, y0, x0 + box_size - 1, y0 + box_size - 1],
                outline=rgba,
                width=width,
            )
    return image


def to_rgba_array(image: Image.Image) -> UInt8Array:
    """Copy an image into an ``(H, W, 4)`` uint8 array."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)
