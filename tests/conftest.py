import pytest

from rag_ingestion.intake.heuristics import EICAR_SIGNATURE


@pytest.fixture()
def pdf_bytes() -> bytes:
    """Minimal PDF header with a text-only page."""
    return b"%PDF-1.4\n1 0 obj << /Type /Page >> endobj\n%%EOF"


@pytest.fixture()
def pdf_with_image_bytes() -> bytes:
    """PDF header followed by an embedded JPEG start-of-image marker."""
    return b"%PDF-1.4\n" + bytes([0xFF, 0xD8, 0xFF, 0xE0]) + b"\n%%EOF"


@pytest.fixture()
def eicar_bytes() -> bytes:
    return EICAR_SIGNATURE


@pytest.fixture()
def script_html_bytes() -> bytes:
    return b'<script>alert("x")</script>'
