"""Field extractors for finding fragments.

Each field owns a prioritized list of ``(pattern, extractor)`` pairs. The
first pattern that matches and yields a non-empty value wins; explicit
``Label: value`` shapes come first, natural-language sentence shapes after.
When nothing matches, a sentence heuristic looks for the first sentence
mentioning one of the field's keywords. ``None`` means the field is absent.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

Extractor = Callable[[re.Match[str]], str | None]
FieldPattern = tuple[re.Pattern[str], Extractor]

_FLAGS = re.IGNORECASE | re.MULTILINE
_SENTENCE_RE = re.compile(r"[^.!?\n]+(?:[.!?]+|$)", re.MULTILINE)
_EVIDENCE_DIGIT_RE = re.compile(r"\b([1-6])\b")
_MIN_HEURISTIC_SENTENCE = 20


def _value(match: re.Match[str]) -> str | None:
    return match.group("value")


def _whole(match: re.Match[str]) -> str | None:
    return match.group(0)


def _labelled(labels: str) -> re.Pattern[str]:
    """``**Label**: value`` / ``Label: value`` / ``- Label: value`` on one line."""
    return re.compile(
        rf"(?:^|(?<=[\s*\-(]))(?:{labels})[ \t]*\**[ \t]*:[ \t]*\**[ \t]*(?P<value>[^\n]+)",
        _FLAGS,
    )


def clean_value(raw: str | None) -> str | None:
    if raw is None:
        return None
    value = re.sub(r"\s+", " ", raw).strip()
    value = value.strip("*_ ").rstrip(":;,").strip()
    return value or None


def _keyword_sentence(keywords: tuple[str, ...]) -> Callable[[str], str | None]:
    def pick(text: str) -> str | None:
        for line in text.splitlines():
            if line.lstrip().startswith("#"):
                continue
            for sentence in _SENTENCE_RE.findall(line):
                candidate = sentence.strip(" \t-*")
                if len(candidate) < _MIN_HEURISTIC_SENTENCE:
                    continue
                lowered = candidate.lower()
                if any(keyword in lowered for keyword in keywords):
                    return candidate
        return None

    return pick


def _evidence_sentence(text: str) -> str | None:
    for sentence in _SENTENCE_RE.findall(text):
        if "evidence" in sentence.lower():
            digit = _EVIDENCE_DIGIT_RE.search(sentence)
            if digit:
                return digit.group(1)
    return None


@dataclass(frozen=True)
class FieldExtractor:
    """Prioritized patterns plus a last-resort heuristic for one field."""

    name: str
    patterns: tuple[FieldPattern, ...]
    heuristic: Callable[[str], str | None] | None = None

    def extract(self, text: str) -> str | None:
        for pattern, extractor in self.patterns:
            match = pattern.search(text)
            if match is None:
                continue
            value = clean_value(extractor(match))
            if value:
                return value
        if self.heuristic is None:
            return None
        return clean_value(self.heuristic(text))


CRITERIA = FieldExtractor(
    name="criteria",
    patterns=(
        (_labelled(r"Criteria|Criterion|Research Question|Intervention|Topic|Focus"), _value),
        (
            re.compile(
                r"\b(?:the|this)\s+(?:study|paper|trial|research|review|analysis|article)\s+"
                r"(?:examines|examined|investigates|investigated|evaluates|evaluated|"
                r"assesses|assessed|explores|explored|compares|compared|focuses on|focused on)"
                r"\s+(?P<value>[^.\n]+)",
                _FLAGS,
            ),
            _value,
        ),
        (
            re.compile(
                r"\b(?:the\s+)?(?:effect|impact|influence|association|relationship)s?\s+"
                r"(?:of|between)\s+[^.\n]+",
                _FLAGS,
            ),
            _whole,
        ),
    ),
    heuristic=_keyword_sentence(
        ("study", "trial", "examin", "investigat", "effect of", "association", "relationship")
    ),
)

VALUE = FieldExtractor(
    name="value",
    patterns=(
        (_labelled(r"Value|Key Result|Results?|Outcome|Finding|Description|Summary"), _value),
        (
            re.compile(
                r"\b(?:the\s+)?(?:study|trial|analysis|authors?|researchers?|results?|data|findings?)"
                r"\s+(?:found|find|showed|show|shows|demonstrated|demonstrates|demonstrate|"
                r"revealed|reveals|reported|reports|indicated|indicates|indicate|"
                r"suggested|suggests|suggest|confirmed|confirms)\s+(?:that\s+)?(?P<value>[^.\n]+)",
                _FLAGS,
            ),
            _value,
        ),
        (
            re.compile(
                r"\b(?:resulted in|led to|(?:was|were) associated with)\s+[^.\n]+",
                _FLAGS,
            ),
            _whole,
        ),
    ),
    heuristic=_keyword_sentence(
        ("result", "finding", "found", "showed", "demonstrat", "significant", "reduc", "improv")
    ),
)

EVIDENCE_LEVEL = FieldExtractor(
    name="evidence_level",
    patterns=(
        (
            re.compile(
                r"(?:evidence[ \t]+level|level[ \t]+of[ \t]+evidence)[^\n0-9]{0,20}?(?P<value>[1-6])\b",
                _FLAGS,
            ),
            _value,
        ),
        (re.compile(r"\b(?:evidence\s+)?level\s+(?P<value>[1-6])\b", _FLAGS), _value),
        (re.compile(r"\b(?P<value>[1-6])[ \t]*/[ \t]*6\b", _FLAGS), _value),
    ),
    heuristic=_evidence_sentence,
)

METHODOLOGY_QUALITY = FieldExtractor(
    name="methodology_quality",
    patterns=(
        (
            _labelled(
                r"Methodology Quality|Methodological Quality|Context (?:&|and) Methodology|"
                r"Methodology|Methods?|Study Design"
            ),
            _value,
        ),
        (
            re.compile(
                r"\b(?:a|an|this|the)\s+(?P<value>(?:randomi[sz]ed|double-blind(?:ed)?|"
                r"placebo-controlled|prospective|retrospective|multicent(?:er|re)|cohort|"
                r"cross-sectional|case-control|observational|systematic review|meta-analysis|"
                r"longitudinal)[^.\n]*)",
                _FLAGS,
            ),
            _value,
        ),
        (
            re.compile(
                r"(?P<value>(?:\bn\s*=\s*[\d,]+|\b[\d,]+\s+(?:participants|patients|subjects|adults|children))[^.\n]*)",
                _FLAGS,
            ),
            _value,
        ),
    ),
    heuristic=_keyword_sentence(
        ("sample", "randomi", "cohort", "participants", "controlled", "methodolog")
    ),
)

IMPORTANCE = FieldExtractor(
    name="importance",
    patterns=(
        (
            _labelled(r"Importance|Significance|Clinical Relevance|Relevance|Implications?"),
            _value,
        ),
        (
            re.compile(
                r"\b(?:this|these|the)\s+(?:finding|result)s?\s+(?:is|are|was|were)\s+"
                r"(?:important|significant|relevant|notable|crucial)\s+(?:because|as|since|for)\s+"
                r"(?P<value>[^.\n]+)",
                _FLAGS,
            ),
            _value,
        ),
        (
            re.compile(
                r"\b(?:highlights|underscores|implies)\s+(?:that\s+)?(?P<value>[^.\n]+)",
                _FLAGS,
            ),
            _value,
        ),
    ),
    heuristic=_keyword_sentence(("important", "implication", "clinical practice", "relevan")),
)

SOURCE = FieldExtractor(
    name="source",
    patterns=(
        (_labelled(r"Sources?|Reference|Citation"), _value),
        (
            re.compile(r"(?P<value>\[[^\[\]\n]+\]\((?:https?://|www\.)[^\s)]+\))", _FLAGS),
            _value,
        ),
        (re.compile(r"(?P<value>\bdoi:?\s*10\.\d{4,}/[^\s\])]+)", _FLAGS), _value),
        (re.compile(r"(?P<value>https?://[^\s<>()\[\]]+)", _FLAGS), _value),
    ),
)

FIELD_EXTRACTORS: tuple[FieldExtractor, ...] = (
    CRITERIA,
    VALUE,
    EVIDENCE_LEVEL,
    METHODOLOGY_QUALITY,
    IMPORTANCE,
    SOURCE,
)


def extract_fields(text: str) -> dict[str, str | None]:
    """Run every field extractor over one fragment."""
    return {extractor.name: extractor.extract(text) for extractor in FIELD_EXTRACTORS}
