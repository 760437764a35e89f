from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Any

from PIL import Image, UnidentifiedImageError

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


@dataclass(frozen=True)
class ImageAsset:
    data: bytes
    mime_type: str
    label: str | None = None

    @classmethod
    def from_bytes(cls, data: bytes, label: str | None = None) -> ImageAsset:
        """
        Build an asset from raw upload bytes, sniffing the MIME type with Pillow.

        Only the header is read; pixels are never decoded or altered.
        """
        try:
            with Image.open(BytesIO(data)) as img:
                mime = img.get_format_mimetype()
        except UnidentifiedImageError as exc:
            raise ValueError("not a recognizable image") from exc
        if not mime:
            raise ValueError("could not determine image MIME type")
        return cls(data=data, mime_type=mime, label=label)

    @classmethod
    def from_data_uri(cls, uri: str, label: str | None = None) -> ImageAsset:
        m = _DATA_URI_RE.match(uri.strip())
        if not m:
            raise ValueError("expected a base64 data URI")
        try:
            data = base64.b64decode(m.group("payload"), validate=True)
        except binascii.Error as exc:
            raise ValueError(f"invalid base64 payload: {exc}") from exc
        return cls(data=data, mime_type=m.group("mime"), label=label)


def to_wire_asset(asset: ImageAsset) -> dict[str, Any]:
    # Dict form of a Gemini `Part` with inline data; google-genai accepts it as-is.
    if not asset.mime_type:
        raise ValueError("ImageAsset.mime_type is required")
    return {"inline_data": {"data": asset.data, "mime_type": asset.mime_type}}
