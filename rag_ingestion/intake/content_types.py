"""Effective content-type resolution and the intake allow-list."""

import mimetypes
from pathlib import PurePosixPath

OCTET_STREAM = "application/octet-stream"
GENERIC_CONTENT_TYPES = frozenset({OCTET_STREAM, "binary/octet-stream"})

PDF = "application/pdf"
MSWORD = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
JSON = "application/json"

# content type -> short document type label
DOCUMENT_TYPES: dict[str, str] = {
    PDF: "pdf",
    "text/plain": "text",
    "text/markdown": "markdown",
    MSWORD: "word",
    DOCX: "word",
    "text/html": "html",
    "application/rtf": "rtf",
    "text/rtf": "rtf",
    "text/csv": "csv",
    JSON: "json",
}
ALLOWED_CONTENT_TYPES = frozenset(DOCUMENT_TYPES)

TEXTUAL_CONTENT_TYPES = frozenset(
    {"text/plain", "text/markdown", "text/html", "text/rtf", "text/csv", "application/rtf", JSON}
)

_ALIASES = {
    "text/x-markdown": "text/markdown",
    "application/x-rtf": "application/rtf",
    "text/json": JSON,
}

_EXTENSIONS = {
    ".pdf": PDF,
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".doc": MSWORD,
    ".docx": DOCX,
    ".html": "text/html",
    ".htm": "text/html",
    ".rtf": "application/rtf",
    ".csv": "text/csv",
    ".json": JSON,
}


def normalize_content_type(value: str | None) -> str | None:
    """Strip parameters, lower-case, and fold known aliases. Empty -> None."""
    if not value:
        return None
    base = value.split(";", 1)[0].strip().lower()
    if not base:
        return None
    return _ALIASES.get(base, base)


def guess_from_key(key: str) -> str | None:
    suffix = PurePosixPath(key).suffix.lower()
    if suffix in _EXTENSIONS:
        return _EXTENSIONS[suffix]
    guessed, _ = mimetypes.guess_type(key, strict=False)
    return normalize_content_type(guessed)


def resolve_content_type(declared: str | None, key: str) -> str:
    """Declared type, else extension sniffing, else application/octet-stream.

    Generic binary declarations carry no information and are treated as
    undeclared.
    """
    normalized = normalize_content_type(declared)
    if normalized and normalized not in GENERIC_CONTENT_TYPES:
        return normalized
    return guess_from_key(key) or OCTET_STREAM


def is_allowed(content_type: str) -> bool:
    return content_type in ALLOWED_CONTENT_TYPES


def is_textual(content_type: str) -> bool:
    return content_type in TEXTUAL_CONTENT_TYPES


def document_type(content_type: str) -> str:
    return DOCUMENT_TYPES.get(content_type, "binary")
