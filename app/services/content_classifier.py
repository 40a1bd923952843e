# app/services/content_classifier.py
from __future__ import annotations

import codecs
import json
import logging
import os
from typing import Tuple

from app.core.config import get_settings
from app.core.exceptions import FileValidationError
from app.schemas.upload import ValidationOutcome

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "text/csv",
        "application/csv",
        "text/plain",
        "application/vnd.ms-excel",
    }
)

# (bom, codec name)
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
    (codecs.BOM_UTF8, "utf-8"),
)

# (magic, detected type)
_BINARY_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"%PDF", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
)

_ASCII_SAMPLE_SIZE = 512
_MIN_PRINTABLE_RATIO = 0.8
_DELIMITERS = (",", "\t", ";")

_TYPE_LABELS = {
    "application/json": "JSON",
    "application/xml": "XML",
    "text/html": "HTML",
    "application/pdf": "binary (PDF)",
    "application/zip": "binary (ZIP/Office)",
    "application/octet-stream": "binary",
}


def is_allowed_content_type(content_type: str | None) -> bool:
    """
    Check a declared content-type label against the CSV allow-list.

    Comparison is case-insensitive and ignores parameters such as
    `; charset=utf-8`.
    """
    if not content_type:
        return False
    base = content_type.split(";", 1)[0].strip().lower()
    return base in ALLOWED_CONTENT_TYPES


def file_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


def detect_encoding(content: bytes) -> Tuple[str, int]:
    """
    Detect the text encoding from a leading byte-order mark.

    Returns
    -------
    tuple[str, int]
        Python codec name and the BOM length to skip. Without a BOM the
        content is assumed to be UTF-8 and the BOM length is 0.
    """
    for bom, encoding in _BOMS:
        if content.startswith(bom):
            return encoding, len(bom)
    return "utf-8", 0


def decode_content(content: bytes, filename: str = "") -> str:
    """
    Decode a whole upload using the same BOM rules as `classify`.

    Raises FileValidationError(ENCODING_ERROR) if any byte is undecodable.
    """
    encoding, bom_length = detect_encoding(content)
    try:
        return content[bom_length:].decode(encoding)
    except UnicodeDecodeError as exc:
        raise FileValidationError(
            "ENCODING_ERROR",
            f"File '{filename}' could not be decoded as {encoding}: {exc.reason}",
            original_extension=file_extension(filename),
            file_name=filename or None,
        ) from exc


def classify(content: bytes, filename: str) -> ValidationOutcome:
    """
    Sniff the content of an upload and decide whether it is delimited text.

    Rules
    -----
    - Empty payload -> EMPTY_FILE.
    - The encoding comes from the BOM (UTF-16 LE/BE, UTF-8) or defaults to
      UTF-8; a bounded prefix is decoded and a failure -> ENCODING_ERROR.
    - Heuristics run in a fixed order, first match wins:
        1) JSON      (prefix parses as JSON)          -> TYPE_MISMATCH
        2) binary    (PDF/ZIP magic, or <80% ASCII)   -> BINARY_CONTENT
        3) HTML      (doctype/<html>/<body>)          -> TYPE_MISMATCH
        4) XML       (<?xml or a leading '<')         -> TYPE_MISMATCH
        5) no comma/tab/semicolon on any line         -> INVALID_CSV_STRUCTURE
    - Every rejection names the declared extension and the detected type.
    """
    settings = get_settings()
    extension = file_extension(filename)

    if not content:
        return ValidationOutcome.invalid(
            "EMPTY_FILE",
            f"File '{filename}' is empty.",
            original_extension=extension,
        )

    encoding, bom_length = detect_encoding(content)
    prefix = content[bom_length : bom_length + settings.CLASSIFIER_PREFIX_BYTES]

    # final=False tolerates a character cut in half at the prefix boundary.
    decoder = codecs.getincrementaldecoder(encoding)(errors="strict")
    try:
        text = decoder.decode(prefix, final=False)
    except UnicodeDecodeError as exc:
        return ValidationOutcome.invalid(
            "ENCODING_ERROR",
            f"File '{filename}' could not be decoded as {encoding}: {exc.reason}",
            original_extension=extension,
        )

    stripped = text.lstrip()
    lowered = stripped.lower()

    truncated = (
        len(content) - bom_length > settings.CLASSIFIER_PREFIX_BYTES
        or len(stripped) > settings.JSON_PROBE_CHARS
    )
    if _looks_like_json(stripped, settings.JSON_PROBE_CHARS, truncated):
        return _mismatch("TYPE_MISMATCH", "application/json", filename, extension)

    binary_type = _detect_binary(content, has_bom=bom_length > 0)
    if binary_type is not None:
        return _mismatch("BINARY_CONTENT", binary_type, filename, extension)

    if _looks_like_html(lowered, text.lower()):
        return _mismatch("TYPE_MISMATCH", "text/html", filename, extension)

    if lowered.startswith("<?xml") or stripped.startswith("<"):
        return _mismatch("TYPE_MISMATCH", "application/xml", filename, extension)

    if not _has_delimited_line(text):
        return ValidationOutcome.invalid(
            "INVALID_CSV_STRUCTURE",
            f"File '{filename}' does not contain any comma, tab or semicolon "
            "delimited lines.",
            detected_type="text/plain",
            original_extension=extension,
        )

    logger.debug("Classified %s as delimited text (%s)", filename, encoding)
    return ValidationOutcome.valid(encoding)


def _mismatch(
    error_code: str,
    detected_type: str,
    filename: str,
    extension: str,
) -> ValidationOutcome:
    label = _TYPE_LABELS.get(detected_type, detected_type)
    message = (
        f"File '{filename}' has extension '{extension or '(none)'}' but its "
        f"content is {label} ({detected_type})."
    )
    logger.debug("Rejected %s: %s", filename, message)
    return ValidationOutcome.invalid(
        error_code,
        message,
        detected_type=detected_type,
        original_extension=extension,
    )


def _looks_like_json(stripped: str, probe_chars: int, truncated: bool) -> bool:
    if not stripped.startswith(("{", "[")):
        return False

    probe = stripped[:probe_chars]
    if _parses_as_json_prefix(probe):
        return True
    if not truncated:
        return False

    # A literal or number cut by the window: retry up to the last complete value.
    boundary = max(probe.rfind(","), probe.rfind("}"), probe.rfind("]"))
    if boundary <= 0:
        return False
    return _parses_as_json_prefix(probe[: boundary + 1])


def _parses_as_json_prefix(probe: str) -> bool:
    try:
        json.loads(probe)
    except json.JSONDecodeError as exc:
        # A document cut off at the end of the probe is still JSON; a syntax
        # error before the end of the probe is not.
        if exc.msg.startswith("Unterminated string"):
            return True
        return exc.pos >= len(probe.rstrip())
    return True


def _detect_binary(content: bytes, has_bom: bool) -> str | None:
    for magic, detected_type in _BINARY_SIGNATURES:
        if content.startswith(magic):
            return detected_type

    if has_bom:
        return None

    sample = content[:_ASCII_SAMPLE_SIZE]
    printable = sum(1 for b in sample if 32 <= b <= 126 or b in (9, 10, 13))
    if printable / len(sample) < _MIN_PRINTABLE_RATIO:
        return "application/octet-stream"
    return None


def _looks_like_html(lowered_stripped: str, lowered_text: str) -> bool:
    return (
        lowered_stripped.startswith("<!doctype html")
        or lowered_stripped.startswith("<html")
        or "<html>" in lowered_text
        or "<body>" in lowered_text
    )


def _has_delimited_line(text: str) -> bool:
    for line in text.splitlines():
        if line.strip() and any(d in line for d in _DELIMITERS):
            return True
    return False
