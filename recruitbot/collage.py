"""Ten-roll collage building."""

from __future__ import annotations

import io
import logging
from typing import Sequence

from PIL import Image

from .errors import CompositeEncodingFailure

logger = logging.getLogger("recruitbot.collage")

THUMB_WIDTH = 202  # OG: 404 (2020-02-11) from https://thearchive.gg
THUMB_HEIGHT = 228  # OG: 456 (2020-02-11) from https://thearchive.gg

_ALPHA_LESS_FORMATS = {"JPEG", "BMP"}


class CollageCompositor:
    """Lays a batch of equally sized thumbnails out on a fixed grid."""

    def __init__(
        self,
        thumb_width: int = THUMB_WIDTH,
        thumb_height: int = THUMB_HEIGHT,
        *,
        columns: int = 5,
        rows: int = 2,
        image_format: str = "JPEG",
    ) -> None:
        if thumb_width <= 0 or thumb_height <= 0:
            raise ValueError("Thumbnail dimensions must be positive")
        if columns <= 0 or rows <= 0:
            raise ValueError("Grid dimensions must be positive")
        self.thumb_width = thumb_width
        self.thumb_height = thumb_height
        self.columns = columns
        self.rows = rows
        image_format = image_format.upper()
        self.image_format = "JPEG" if image_format == "JPG" else image_format

    @property
    def capacity(self) -> int:
        return self.columns * self.rows

    @property
    def size(self):
        return (self.thumb_width * self.columns, self.thumb_height * self.rows)

    @property
    def extension(self) -> str:
        return self.image_format.lower()

    def compose(self, images: Sequence[Image.Image]) -> Image.Image:
        if len(images) != self.capacity:
            raise CompositeEncodingFailure(
                f"Collage needs exactly {self.capacity} thumbnails, got {len(images)}"
            )
        expected = (self.thumb_width, self.thumb_height)
        for index, image in enumerate(images):
            if image.size != expected:
                raise CompositeEncodingFailure(
                    f"Thumbnail {index} is {image.size[0]}x{image.size[1]}, expected {expected[0]}x{expected[1]}"
                )

        total_width, _ = self.size
        collage = Image.new("RGBA", self.size, (0, 0, 0, 0))
        # Each row is filled right to left: draw 0 lands in the top-right cell.
        for x in range(0, total_width, self.thumb_width):
            index = (total_width - x) // self.thumb_width - 1
            for row in range(self.rows):
                tile = images[index + row * self.columns]
                if tile.mode != "RGBA":
                    tile = tile.convert("RGBA")
                collage.alpha_composite(tile, dest=(x, row * self.thumb_height))
        return collage

    def encode(self, images: Sequence[Image.Image]) -> bytes:
        collage = self.compose(images)
        if self.image_format in _ALPHA_LESS_FORMATS:
            collage = collage.convert("RGB")
        output = io.BytesIO()
        try:
            collage.save(output, format=self.image_format)
        except (OSError, KeyError, ValueError) as exc:
            raise CompositeEncodingFailure(f"Failed to encode collage as {self.image_format}: {exc}") from exc
        return output.getvalue()


__all__ = ["CollageCompositor", "THUMB_HEIGHT", "THUMB_WIDTH"]
