import pytest

from paper_eval.documents.metadata import (
    clean_doi,
    extract_abstract,
    extract_dois,
    extract_metadata,
    extract_publication_year,
    extract_title,
    extract_urls,
    is_doi,
)


class TestCleanDoi:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("doi: 10.1234/abc", "10.1234/abc"),
            ("DOI:10.1234/abc.", "10.1234/abc"),
            ("10.1234/abc;,", "10.1234/abc"),
            ("10.1016/S0140-6736(25)01148-1)", "10.1016/S0140-6736(25)01148-1"),
            ("10.1016/S0140-6736(25)01148-1", "10.1016/S0140-6736(25)01148-1"),
        ],
    )
    def test_cleans(self, raw: str, expected: str) -> None:
        assert clean_doi(raw) == expected

    def test_is_doi(self) -> None:
        assert is_doi("10.1234/abc")
        assert not is_doi("10.12/abc")
        assert not is_doi("https://example.com")


class TestExtractDois:
    def test_finds_every_pattern_in_order(self) -> None:
        content = (
            "See doi: 10.1234/abc.def. Also https://doi.org/10.5555/XYZ-1 "
            "and DOI = {10.1000/bib.2} plus Digital Object Identifier 10.4321/doi-id"
        )
        assert extract_dois(content) == [
            "10.1234/abc.def",
            "10.5555/XYZ-1",
            "10.1000/bib.2",
            "10.4321/doi-id",
        ]

    def test_deduplicates(self) -> None:
        content = "doi: 10.1234/abc and again [doi: 10.1234/abc]"
        assert extract_dois(content) == ["10.1234/abc"]

    def test_keeps_inner_parentheses(self) -> None:
        content = "Lancet (doi: 10.1016/S0140-6736(25)01148-1)"
        assert extract_dois(content) == ["10.1016/S0140-6736(25)01148-1"]

    def test_no_dois(self) -> None:
        assert extract_dois("No identifiers here.") == []


class TestExtractUrls:
    def test_skips_resolver_urls(self) -> None:
        content = "Visit https://example.com/paper, and https://doi.org/10.1234/x"
        assert extract_urls(content) == ["https://example.com/paper"]

    def test_caps_at_ten(self) -> None:
        content = " ".join(f"https://example.com/{i}" for i in range(15))
        assert len(extract_urls(content)) == 10


class TestBibliographicHints:
    def test_title_skips_journal_boilerplate(self) -> None:
        content = "Journal of Sleep Research Vol 3\nEffects of exercise on sleep quality in adults\n"
        assert extract_title(content) == "Effects of exercise on sleep quality in adults"

    def test_title_none_for_short_lines(self) -> None:
        assert extract_title("Short\nTiny\n") is None

    def test_abstract_stops_at_next_section(self) -> None:
        content = "Abstract: We studied sleep in adults.\nIntroduction\nSleep matters."
        assert extract_abstract(content) == "We studied sleep in adults."

    def test_abstract_missing(self) -> None:
        assert extract_abstract("No summary section at all") is None

    def test_publication_year_prefers_publication_marker(self) -> None:
        assert extract_publication_year("Cited 1999 work. Published 2021 online") == 2021

    def test_publication_year_fallback(self) -> None:
        assert extract_publication_year("Smith et al. (2019) reported") == 2019

    def test_publication_year_missing(self) -> None:
        assert extract_publication_year("no year") is None


class TestExtractMetadata:
    def test_builds_metadata(self) -> None:
        content = (
            "Effects of exercise on sleep quality in adults\n"
            "doi: 10.1234/sleep.2021\n"
            "Abstract: A randomized trial.\nIntroduction\n"
        )
        metadata = extract_metadata(content, "sleep.pdf")
        assert metadata.filename == "sleep.pdf"
        assert metadata.dois == ["10.1234/sleep.2021"]
        assert metadata.title == "Effects of exercise on sleep quality in adults"
        assert metadata.abstract == "A randomized trial."
        assert metadata.publication_year == 2021
