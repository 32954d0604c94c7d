"""Prepare uploaded source documents for the structure generator."""

from __future__ import annotations

import base64
import binascii
import mimetypes

from shared.errors import DocumentEncodingError
from shared.models import DocumentPayload

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def guess_media_type(filename: str | None, declared: str | None = None) -> str:
    if declared and declared != DEFAULT_MEDIA_TYPE:
        return declared
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return declared or DEFAULT_MEDIA_TYPE


def encode_document(
    data: bytes | None,
    media_type: str | None = None,
    filename: str | None = None,
) -> DocumentPayload | None:
    """Base64-encode a document; ``None`` or empty bytes mean no document."""
    if not data:
        return None
    try:
        encoded = base64.b64encode(data).decode("ascii")
    except (TypeError, binascii.Error) as exc:
        raise DocumentEncodingError(f"Failed to encode document: {exc}") from exc
    return DocumentPayload(
        data=encoded,
        media_type=guess_media_type(filename, media_type),
        filename=filename,
    )


def decode_text(document: DocumentPayload) -> str | None:
    """Return the document as text when its media type is textual."""
    if not document.media_type.startswith("text/") and document.media_type not in {
        "application/json",
        "application/xml",
    }:
        return None
    raw = base64.b64decode(document.data)
    return raw.decode("utf-8", errors="replace")
