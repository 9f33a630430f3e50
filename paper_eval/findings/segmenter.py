"""Splits evaluation text into findings.

Segmentation strategies, most specific first; the first one that yields at
least one segment is used:

1. explicit ``Key Finding`` / ``Finding`` headers,
2. generic sections (markdown headings, bold title lines, numbered items),
3. paragraphs longer than ``MIN_PARAGRAPH_LENGTH``.

A segment runs from its header to the next header (or end of text). Field
values come from :mod:`paper_eval.findings.patterns`.
"""

import re
from collections.abc import Callable

from paper_eval.findings.models import DEFAULT_PLACEHOLDER, Finding, Segment, SegmentKind
from paper_eval.findings.patterns import clean_value, extract_fields
from paper_eval.logging.logger import Log

MIN_PARAGRAPH_LENGTH = 50
CATCH_ALL_PREVIEW_LENGTH = 200
CATCH_ALL_CRITERIA = "General evaluation"

_EXPLICIT_HEADER_RE = re.compile(
    r"^[ \t]*(?:#{1,6}[ \t]*(?:\*\*)?|\*\*)[ \t]*(?:Key[ \t]+)?Finding\b[ \t]*#?[ \t]*"
    r"(?P<label>\d+|[A-Za-z]+)?(?P<title>[^\n]*)"
    r"|^[ \t]*Key[ \t]+Finding[ \t]*#?[ \t]*(?P<plain_label>\d+)(?P<plain_title>[^\n]*)",
    re.IGNORECASE | re.MULTILINE,
)
_SECTION_HEADER_RE = re.compile(
    r"^[ \t]*#{1,6}[ \t]+(?P<heading>[^\n]{3,120})$"
    r"|^[ \t]*\*\*(?P<bold>[^*\n]{3,80})\*\*[ \t]*:?[ \t]*$"
    r"|^[ \t]*(?P<number>\d{1,2})[.)][ \t]+(?P<item>[^\n]{3,})",
    re.MULTILINE,
)
_PARAGRAPH_SPLIT_RE = re.compile(r"\n[ \t]*\n")
_TITLE_TRIM_RE = re.compile(r"^[\s:.\-–*#]+|[\s:*#]+$")


def _clean_title(raw: str | None) -> str | None:
    if not raw:
        return None
    return clean_value(_TITLE_TRIM_RE.sub("", raw))


def _split_at(text: str, matches: list[re.Match[str]], kind: SegmentKind,
              describe: Callable[[re.Match[str]], tuple[str | None, str | None]]) -> list[Segment]:
    segments: list[Segment] = []
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        title, label = describe(match)
        segments.append(
            Segment(
                kind=kind,
                text=text[match.start():end].strip(),
                start=match.start(),
                title=title,
                heading_label=label,
            )
        )
    return segments


def _describe_explicit(match: re.Match[str]) -> tuple[str | None, str | None]:
    label = match.group("label") or match.group("plain_label")
    title = match.group("title") if match.group("title") is not None else match.group("plain_title")
    return _clean_title(title), label


def _describe_section(match: re.Match[str]) -> tuple[str | None, str | None]:
    title = match.group("heading") or match.group("bold") or match.group("item")
    return _clean_title(title), match.group("number")


def segment_explicit_headers(text: str) -> list[Segment]:
    matches = list(_EXPLICIT_HEADER_RE.finditer(text))
    return _split_at(text, matches, SegmentKind.EXPLICIT_HEADER, _describe_explicit)


def segment_sections(text: str) -> list[Segment]:
    matches = list(_SECTION_HEADER_RE.finditer(text))
    return _split_at(text, matches, SegmentKind.SECTION, _describe_section)


def segment_paragraphs(text: str) -> list[Segment]:
    segments: list[Segment] = []
    position = 0
    for chunk in _PARAGRAPH_SPLIT_RE.split(text):
        start = text.find(chunk, position)
        position = start + len(chunk)
        paragraph = chunk.strip()
        if len(paragraph) > MIN_PARAGRAPH_LENGTH:
            segments.append(Segment(kind=SegmentKind.PARAGRAPH, text=paragraph, start=start))
    return segments


SEGMENTATION_STRATEGIES: tuple[Callable[[str], list[Segment]], ...] = (
    segment_explicit_headers,
    segment_sections,
    segment_paragraphs,
)


def segment(text: str) -> list[Segment]:
    """Apply the strategies in order and return the first non-empty result."""
    for strategy in SEGMENTATION_STRATEGIES:
        segments = strategy(text)
        if segments:
            Log.debug(f"Segmented evaluation with {strategy.__name__}: {len(segments)} segments")
            return segments
    return []


def _build_finding(number: int, fragment: Segment) -> Finding | None:
    fields = extract_fields(fragment.text)
    criteria = fields["criteria"] or fragment.title
    value = fields["value"]
    if not criteria and not value:
        return None
    return Finding(
        number=number,
        criteria=criteria or DEFAULT_PLACEHOLDER,
        value=value or DEFAULT_PLACEHOLDER,
        evidence_level=fields["evidence_level"] or DEFAULT_PLACEHOLDER,
        methodology_quality=fields["methodology_quality"] or DEFAULT_PLACEHOLDER,
        importance=fields["importance"] or DEFAULT_PLACEHOLDER,
        source=fields["source"] or DEFAULT_PLACEHOLDER,
        heading_label=fragment.heading_label,
    )


def _catch_all(text: str) -> Finding:
    preview = " ".join(text.split())
    if len(preview) > CATCH_ALL_PREVIEW_LENGTH:
        preview = preview[:CATCH_ALL_PREVIEW_LENGTH].rstrip() + "..."
    return Finding(number=1, criteria=CATCH_ALL_CRITERIA, value=preview)


def extract_findings(text: str | None) -> list[Finding]:
    """Parse an evaluation into ordered findings. Never raises.

    Empty input gives ``[]``; non-empty text with nothing extractable gives a
    single catch-all finding previewing the first 200 characters.
    """
    if not text or not text.strip():
        return []

    findings: list[Finding] = []
    try:
        for fragment in segment(text):
            finding = _build_finding(len(findings) + 1, fragment)
            if finding is not None:
                findings.append(finding)
    except Exception as exc:
        Log.warning(f"Finding extraction failed, falling back to summary: {exc}")
        findings = []

    if not findings:
        return [_catch_all(text)]
    Log.info(f"Extracted {len(findings)} findings")
    return findings
