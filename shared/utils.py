import base64
import hashlib
import logging
import re

from shared.config import config


def setup_logging(service_name: str, log_level: str | None = None) -> logging.Logger:
    """Setup logging configuration for a service"""
    logger = logging.getLogger(service_name)
    level = log_level or config.get("log_level", "INFO")
    logger.setLevel(getattr(logging, level.upper()))

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(f"%(asctime)s - {service_name} - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def generate_hash(text: str) -> str:
    """Generate a short stable hash, used for deterministic identifiers"""
    return hashlib.md5(text.encode()).hexdigest()


def slugify(text: str, fallback: str = "presentation") -> str:
    """Lowercase, dash-separated version of ``text`` suitable for file names."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or fallback


def to_data_uri(payload: str | bytes, media_type: str = "image/png") -> str:
    """Wrap raw or base64 encoded bytes in a ``data:`` URI.

    Strings that already are data URIs or http(s) URLs are returned unchanged.
    """
    if isinstance(payload, bytes):
        payload = base64.b64encode(payload).decode("ascii")
    if payload.startswith(("data:", "http://", "https://")):
        return payload
    return f"data:{media_type};base64,{payload}"


__all__ = [
    "config",
    "generate_hash",
    "setup_logging",
    "slugify",
    "to_data_uri",
]
