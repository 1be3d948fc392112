from regparse_kit.parsers.cleaning import clean_document_text


class TestCleanDocumentText:
    def test_removes_page_markers(self) -> None:
        text = "Section 1 applies.\nPage 3\nSection 2 applies. page - 4"

        assert clean_document_text(text) == "Section 1 applies. Section 2 applies."

    def test_removes_number_only_lines(self) -> None:
        text = "Article 5\n  12  \nThe minister may act."

        assert clean_document_text(text) == "Article 5 The minister may act."

    def test_collapses_whitespace_and_trims(self) -> None:
        text = "  PART I\n\n\tPRELIMINARY   \r\n1. Short title  "

        assert clean_document_text(text) == "PART I PRELIMINARY 1. Short title"

    def test_numbers_inside_lines_survive(self) -> None:
        text = "under section 9(2) of Act 12 of 2004"

        assert clean_document_text(text) == text

    def test_empty(self) -> None:
        assert clean_document_text(" \n \n ") == ""
