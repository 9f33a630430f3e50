from dataclasses import dataclass
from enum import Enum

DEFAULT_PLACEHOLDER = "Not specified"


class SegmentKind(str, Enum):
    """Which segmentation strategy produced a fragment."""

    EXPLICIT_HEADER = "explicit_header"
    SECTION = "section"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class Segment:
    """A finding-sized slice of evaluation text."""

    kind: SegmentKind
    text: str
    start: int
    title: str | None = None
    heading_label: str | None = None


@dataclass(frozen=True)
class Finding:
    """One structured record extracted from an evaluation.

    ``number`` is always the 1-based position in the extracted sequence;
    whatever number or word the heading carried is kept in ``heading_label``.
    """

    number: int
    criteria: str
    value: str
    evidence_level: str = DEFAULT_PLACEHOLDER
    methodology_quality: str = DEFAULT_PLACEHOLDER
    importance: str = DEFAULT_PLACEHOLDER
    source: str = DEFAULT_PLACEHOLDER
    heading_label: str | None = None
