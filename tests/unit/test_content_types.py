from rag_ingestion.intake.content_types import (
    DOCX,
    OCTET_STREAM,
    PDF,
    document_type,
    guess_from_key,
    is_allowed,
    normalize_content_type,
    resolve_content_type,
)


class TestNormalizeContentType:
    def test_strips_parameters_and_lowercases(self) -> None:
        assert normalize_content_type("Text/HTML; charset=UTF-8") == "text/html"

    def test_folds_aliases(self) -> None:
        assert normalize_content_type("text/x-markdown") == "text/markdown"

    def test_empty_is_none(self) -> None:
        assert normalize_content_type("") is None
        assert normalize_content_type(None) is None


class TestResolveContentType:
    def test_declared_type_wins(self) -> None:
        assert resolve_content_type("application/pdf", "uploads/u/doc.txt") == PDF

    def test_falls_back_to_extension(self) -> None:
        assert resolve_content_type(None, "uploads/u/report.docx") == DOCX

    def test_generic_declared_type_is_ignored(self) -> None:
        assert resolve_content_type(OCTET_STREAM, "uploads/u/report.pdf") == PDF

    def test_unknown_extension_is_octet_stream(self) -> None:
        assert resolve_content_type(None, "uploads/u/blob") == OCTET_STREAM

    def test_extension_lookup_is_case_insensitive(self) -> None:
        assert guess_from_key("A/B/NOTES.MD") == "text/markdown"


class TestAllowList:
    def test_document_types_allowed(self) -> None:
        for content_type in (PDF, "text/plain", "text/markdown", "text/html", "application/rtf"):
            assert is_allowed(content_type)

    def test_executable_not_allowed(self) -> None:
        assert not is_allowed("application/x-msdownload")
        assert not is_allowed(OCTET_STREAM)

    def test_document_type_labels(self) -> None:
        assert document_type(PDF) == "pdf"
        assert document_type(DOCX) == "word"
        assert document_type("image/png") == "binary"
