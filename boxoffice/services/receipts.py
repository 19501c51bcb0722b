# boxoffice/services/receipts.py
"""Payment receipt images (comprovantes) stored in UPLOAD_FOLDER."""
from __future__ import annotations

import os
import secrets
import string
import time

from flask import current_app, url_for
from PIL import Image, UnidentifiedImageError
import pillow_heif

from boxoffice.errors import ValidationError

# iPhone receipts arrive as HEIC
pillow_heif.register_heif_opener()

_B36 = string.digits + string.ascii_lowercase


def _uploads_dir() -> str:
    d = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(d, exist_ok=True)
    return d


def _extension(filename: str | None) -> str:
    ext = os.path.splitext(filename or "")[1].lower().lstrip(".")
    allowed = {e.lower() for e in current_app.config.get("RECEIPT_EXTENSIONS", [])}
    if not ext or (allowed and ext not in allowed):
        raise ValidationError("Envie o comprovante como imagem (jpg, png, webp, heic).")
    return ext


def unique_name(ext: str) -> str:
    """`<ms timestamp>-<6 base36 chars>.<ext>`"""
    suffix = "".join(secrets.choice(_B36) for _ in range(6))
    return f"{int(time.time() * 1000)}-{suffix}.{ext}"


def _check_image(fs) -> None:
    stream = fs.stream if hasattr(fs, "stream") else fs
    try:
        with Image.open(stream) as img:
            img.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError):
        raise ValidationError("O comprovante precisa ser uma imagem válida.")
    finally:
        stream.seek(0)


def save(fs) -> str:
    """
    Store an uploaded receipt and return its generated filename.
    Only the extension is taken from the client's filename.
    """
    if fs is None or not getattr(fs, "filename", None):
        raise ValidationError("Anexe o comprovante de pagamento!")

    ext = _extension(fs.filename)
    _check_image(fs)

    name = unique_name(ext)
    path = os.path.join(_uploads_dir(), name)
    fs.save(path)
    current_app.logger.info("Receipt stored as %s", name)
    return name


def public_url(filename: str) -> str:
    base = current_app.config.get("RECEIPTS_BASE_URL")
    if base:
        return f"{base.rstrip('/')}/{filename}"
    return url_for("storefront.receipt_file", filename=filename, _external=True)


def path_for(filename: str) -> str:
    return os.path.join(_uploads_dir(), os.path.basename(filename))
