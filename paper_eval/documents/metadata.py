"""Identifier and bibliographic metadata scraping from raw paper text.

The DOIs found here are the identifier list handed to the citation
normalizer and to the evaluation prompts.
"""

import re

from paper_eval.documents.models import DocumentMetadata

_DOI_BODY = r"(10\.\d{4,}/[^\s\"'<>\[\]{}]+)"

_DOI_PATTERNS: list[re.Pattern[str]] = [
    re.compile(rf"\bdoi:\s*{_DOI_BODY}", re.IGNORECASE),
    re.compile(rf"https?://(?:dx\.)?doi\.org/{_DOI_BODY}", re.IGNORECASE),
    re.compile(rf"[\[(]doi:?\s*{_DOI_BODY}[\])]", re.IGNORECASE),
    re.compile(r"\bDOI\s*=\s*[\"{]?(10\.\d{4,}/[^\s\"{}]+)[\"}]?", re.IGNORECASE),
    re.compile(rf"Digital\s+Object\s+Identifier\s*:?\s*{_DOI_BODY}", re.IGNORECASE),
]
_VALID_DOI_RE = re.compile(r"^10\.\d{4,}/\S+$")
_URL_RE = re.compile(r"https?://(?!(?:dx\.)?doi\.org)[^\s\"<>\[\]()]+", re.IGNORECASE)
_TITLE_NOISE_RE = re.compile(
    r"journal|volume|issue|doi|www|http|©|published by|all rights reserved",
    re.IGNORECASE,
)
_ABSTRACT_RE = re.compile(
    r"\babstract\b[\s:.\-]*(.*?)"
    r"(?=\b(?:introduction|materials and methods|results|discussion|"
    r"conclusions?|references|acknowledg(?:e)?ments|keywords)\b)",
    re.IGNORECASE | re.DOTALL,
)
_YEAR_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"(?:©|copyright|\bpublished\b|\breceived\b|\baccepted\b)\D{0,40}\b((?:19|20)\d{2})\b",
        re.IGNORECASE,
    ),
    re.compile(r"\(((?:19|20)\d{2})\)"),
    re.compile(r"\b((?:19|20)\d{2})\b"),
]

_MAX_URLS = 10
_TITLE_SCAN_LINES = 5
_MIN_TITLE_LENGTH = 15
_TRAILING_PUNCTUATION = ".,;:"


def clean_doi(raw: str) -> str:
    """Strip a ``doi:`` prefix, whitespace, and trailing punctuation.

    A trailing ``)`` is kept only when it closes a parenthesis inside the DOI,
    e.g. ``10.1016/S0140-6736(25)01148-1``.
    """
    doi = re.sub(r"^doi:\s*", "", raw.strip(), flags=re.IGNORECASE)
    while doi:
        if doi[-1] in _TRAILING_PUNCTUATION:
            doi = doi[:-1]
        elif doi[-1] == ")" and doi.count(")") > doi.count("("):
            doi = doi[:-1]
        else:
            break
    return doi


def is_doi(value: str) -> bool:
    return bool(_VALID_DOI_RE.match(value))


def extract_dois(content: str) -> list[str]:
    """Return every DOI mentioned in *content*, deduplicated in first-seen order."""
    found: list[str] = []
    for pattern in _DOI_PATTERNS:
        for match in pattern.finditer(content):
            doi = clean_doi(match.group(1))
            if is_doi(doi) and doi not in found:
                found.append(doi)
    return found


def extract_urls(content: str) -> list[str]:
    urls: list[str] = []
    for match in _URL_RE.finditer(content):
        url = match.group(0).rstrip(_TRAILING_PUNCTUATION + "\"]}")
        if url not in urls:
            urls.append(url)
        if len(urls) >= _MAX_URLS:
            break
    return urls


def extract_title(content: str) -> str | None:
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    for line in lines[:_TITLE_SCAN_LINES]:
        if len(line) > _MIN_TITLE_LENGTH and not _TITLE_NOISE_RE.search(line):
            return line
    return None


def extract_abstract(content: str) -> str | None:
    match = _ABSTRACT_RE.search(content)
    if match is None:
        return None
    abstract = match.group(1).strip()
    return abstract or None


def extract_publication_year(content: str) -> int | None:
    for pattern in _YEAR_PATTERNS:
        match = pattern.search(content)
        if match:
            return int(match.group(1))
    return None


def extract_metadata(content: str, filename: str) -> DocumentMetadata:
    """Scrape identifiers and bibliographic hints from paper text."""
    return DocumentMetadata(
        filename=filename,
        dois=extract_dois(content),
        urls=extract_urls(content),
        title=extract_title(content),
        abstract=extract_abstract(content),
        publication_year=extract_publication_year(content),
    )
