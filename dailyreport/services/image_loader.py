"""
Image resource loading.

Resolves the image references stored in school settings and student rows
(logos, stamps, avatars, QR codes) into decoded Pillow images. A missing or
broken image must never abort a report, so every failure here is logged and
turned into ``None``.
"""
from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple, Union
from urllib.parse import unquote, unquote_to_bytes, urlparse

import httpx
from PIL import Image

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Accept": "image/png,image/jpeg;q=0.9,*/*;q=0.5",
}

ImageRef = Union[str, bytes, bytearray, None]


@dataclass
class LoadedImage:
    image: Image.Image
    codec: str

    @property
    def aspect(self) -> float:
        width, height = self.image.size
        return width / height if height else 1.0


def codec_order(hint: Optional[str]) -> Tuple[str, str]:
    """Codecs to try, the one implied by a content-type or extension first."""
    lowered = (hint or "").lower()
    if "jpeg" in lowered or "jpg" in lowered:
        return ("JPEG", "PNG")
    return ("PNG", "JPEG")


class ImageLoader:
    """Loads data URIs, local files and remote URLs with bounded waits."""

    def __init__(
        self,
        timeout: float = 8.0,
        assets_dir: Optional[Path] = None,
        max_bytes: int = 5 * 1024 * 1024,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.assets_dir = Path(assets_dir).resolve() if assets_dir else None
        self.max_bytes = max_bytes
        self._transport = transport

    async def load(self, ref: ImageRef, hint: Optional[str] = None) -> Optional[LoadedImage]:
        """Return the decoded image for ``ref`` or ``None`` if it cannot be used."""
        if ref is None or (isinstance(ref, str) and not ref.strip()):
            return None
        try:
            payload, detected_hint = await self._read(ref)
        except (httpx.HTTPError, asyncio.TimeoutError, TimeoutError) as exc:
            logger.warning("Image fetch failed for %s: %s", _describe(ref), exc)
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Image reference %s could not be read: %s", _describe(ref), exc)
            return None

        if not payload:
            logger.warning("Image reference %s produced an empty payload", _describe(ref))
            return None
        if len(payload) > self.max_bytes:
            logger.warning("Image reference %s exceeds %d bytes", _describe(ref), self.max_bytes)
            return None
        return self.decode(payload, hint or detected_hint)

    def decode(self, payload: bytes, hint: Optional[str] = None) -> Optional[LoadedImage]:
        if not payload:
            return None
        for codec in codec_order(hint):
            try:
                with Image.open(BytesIO(payload), formats=[codec]) as img:
                    img.load()
                    has_alpha = "A" in img.getbands() or "transparency" in img.info
                    decoded = img.convert("RGBA" if has_alpha else "RGB")
                return LoadedImage(image=decoded, codec=codec)
            except (OSError, ValueError, Image.DecompressionBombError) as exc:
                logger.debug("Codec %s rejected image payload: %s", codec, exc)
        logger.warning("Image payload (%d bytes) is neither PNG nor JPEG", len(payload))
        return None

    async def _read(self, ref: ImageRef) -> Tuple[bytes, Optional[str]]:
        if isinstance(ref, (bytes, bytearray)):
            return bytes(ref), None

        ref = ref.strip()
        if ref.startswith("data:"):
            return _decode_data_uri(ref)

        scheme = urlparse(ref).scheme.lower()
        if scheme in ("http", "https"):
            return await asyncio.wait_for(self._fetch(ref), timeout=self.timeout)
        if scheme in ("file", ""):
            return await self._read_local(ref)
        raise ValueError(f"unsupported image reference scheme '{scheme}'")

    async def _fetch(self, url: str) -> Tuple[bytes, Optional[str]]:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=NO_CACHE_HEADERS,
            transport=self._transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.content, response.headers.get("content-type")

    async def _read_local(self, ref: str) -> Tuple[bytes, Optional[str]]:
        if ref.startswith("file://"):
            path = Path(unquote(urlparse(ref).path))
        else:
            path = Path(ref)
        if self.assets_dir is None:
            raise ValueError("local image references are disabled")
        if not path.is_absolute():
            path = self.assets_dir / path
        path = path.resolve()
        if not path.is_relative_to(self.assets_dir):
            raise ValueError(f"{path} is outside the assets directory")
        payload = await asyncio.to_thread(path.read_bytes)
        return payload, path.suffix


def _decode_data_uri(ref: str) -> Tuple[bytes, Optional[str]]:
    header, sep, data = ref[len("data:"):].partition(",")
    if not sep:
        raise ValueError("malformed data URI")
    mime = header.split(";")[0] or None
    if ";base64" in header:
        return base64.b64decode(data), mime
    return unquote_to_bytes(data), mime


def _describe(ref: ImageRef) -> str:
    if isinstance(ref, (bytes, bytearray)):
        return f"<{len(ref)} bytes>"
    if ref.startswith("data:"):
        return ref[:32] + "..."
    return ref
