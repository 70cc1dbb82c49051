from rag_ingestion.intake.content_types import DOCX, MSWORD, PDF, document_type
from rag_ingestion.intake.models import Priority, RoutingInfo

_IMAGE_MARKERS = (
    b"\xff\xd8\xff",  # JPEG SOI
    b"\x89PNG\r\n\x1a\n",
    b"/Subtype /Image",
    b"/Subtype/Image",
)
_OCR_CAPABLE_TYPES = frozenset({PDF, MSWORD, DOCX})


def has_embedded_images(body: bytes) -> bool:
    return any(marker in body for marker in _IMAGE_MARKERS)


def derive_routing(
    content_type: str,
    size_bytes: int,
    body: bytes,
    large_file_threshold: int,
) -> RoutingInfo:
    """Priority: high when OCR is needed, low for large files, else normal."""
    has_images = has_embedded_images(body)
    requires_ocr = has_images and content_type in _OCR_CAPABLE_TYPES
    if requires_ocr:
        priority = Priority.HIGH
    elif size_bytes > large_file_threshold:
        priority = Priority.LOW
    else:
        priority = Priority.NORMAL
    return RoutingInfo(
        priority=priority,
        has_images=has_images,
        requires_ocr=requires_ocr,
        document_type=document_type(content_type),
    )
