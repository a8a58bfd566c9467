"""Character thumbnail download and resize."""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

import aiohttp
from PIL import Image, UnidentifiedImageError

from .models import Character

logger = logging.getLogger("recruitbot.thumbnails")

FETCH_TIMEOUT_SECONDS = 10


class ThumbnailFetcher:
    """Resolves a character's art from the CDN (or a local directory)."""

    def __init__(self, cdn_url: str, *, session: Optional[aiohttp.ClientSession] = None) -> None:
        self.cdn_url = cdn_url.rstrip("/")
        self._session = session

    def art_url(self, asset_key: str) -> str:
        return f"{self.cdn_url}/Characters/{asset_key}.png"

    def _is_remote(self) -> bool:
        return self.cdn_url.startswith(("http://", "https://"))

    async def fetch_bytes(
        self,
        asset_key: str,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> Optional[bytes]:
        location = self.art_url(asset_key)
        if self._is_remote():
            session = session or self._session
            try:
                if session is not None:
                    return await self._download(session, location)
                async with aiohttp.ClientSession() as session:
                    return await self._download(session, location)
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                logger.warning("Thumbnail fetch error for %s: %s", location, exc)
                return None

        local_path = Path(location).expanduser()
        if not local_path.exists():
            logger.warning("Thumbnail file not found: %s", local_path)
            return None
        try:
            return local_path.read_bytes()
        except OSError as exc:
            logger.warning("Failed to read thumbnail file %s: %s", local_path, exc)
            return None

    @staticmethod
    async def _download(session: aiohttp.ClientSession, url: str) -> Optional[bytes]:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=FETCH_TIMEOUT_SECONDS)) as resp:
            if resp.status != 200:
                logger.warning("Thumbnail fetch failed (%s): %s", resp.status, url)
                return None
            return await resp.read()

    async def fetch(
        self,
        asset_key: str,
        width: int,
        height: int,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> Image.Image:
        """Return the art resized to exactly ``width`` x ``height``.

        A missing or undecodable image yields a transparent placeholder so a
        ten-roll still produces a full collage.
        """
        data = await self.fetch_bytes(asset_key, session=session)
        if data:
            try:
                with Image.open(io.BytesIO(data)) as image:
                    return image.convert("RGBA").resize((width, height), Image.LANCZOS)
            except (UnidentifiedImageError, OSError) as exc:
                logger.warning("Unable to decode thumbnail for %s: %s", asset_key, exc)
        return Image.new("RGBA", (width, height), (0, 0, 0, 0))

    async def fetch_many(
        self,
        characters: Sequence[Character],
        width: int,
        height: int,
    ) -> Tuple[Image.Image, ...]:
        if not self._is_remote() or self._session is not None:
            return await self._gather(characters, width, height, None)
        async with aiohttp.ClientSession() as session:
            return await self._gather(characters, width, height, session)

    async def _gather(
        self,
        characters: Sequence[Character],
        width: int,
        height: int,
        session: Optional[aiohttp.ClientSession],
    ) -> Tuple[Image.Image, ...]:
        # gather keeps results in argument order, which the collage layout relies on.
        images = await asyncio.gather(
            *(self.fetch(character.asset_key, width, height, session=session) for character in characters)
        )
        return tuple(images)


__all__ = ["FETCH_TIMEOUT_SECONDS", "ThumbnailFetcher"]
