"""Repairs identifier links in model-generated evaluation text.

Models asked to cite DOIs as ``[doi: X](https://doi.org/X)`` frequently
return plain mentions, links nested inside link targets, bracket runs such
as ``[[[doi: X]]]`` or the same target glued together several times. The
normalizer rewrites those into one well-formed link per identifier:

1. Nesting repair: collapse link targets that embed another link or a
   bracketed identifier down to the innermost real URL.
2. Per-identifier pass: wrap the first clean mention of every identifier
   that has no well-formed link yet.
3. Run-length collapse: drop character-adjacent repeats of the same target.
4. Final cleanup: repeat 1 and 3 until the text is stable.

Repeated citations separated by other text are left alone.
"""

import re

from paper_eval.documents.metadata import clean_doi
from paper_eval.logging.logger import Log

# One level of balanced parentheses is allowed so targets such as
# 10.1016/S0140-6736(25)01148-1 stay intact.
_TARGET_BODY = r"(?:[^\s()\[\]]|\([^\s()\[\]]*\))+"
_LINK_LABEL = r"[^\[\]\n]+"
_ID_BODY = r"10\.\d{4,}/[^\s\[\]]+"

_IDENTIFIER_RE = re.compile(r"^10\.\d{4,}/[^\s\[\]]+$")
_ANY_LINK_RE = re.compile(rf"\[[^\[\]\n]*\]\({_TARGET_BODY}\)")
_BARE_URL_RE = re.compile(r"https?://[^\s<>\[\]]+")

_MAX_CLEANUP_ROUNDS = 10


class CitationNormalizer:
    """Turns identifier mentions into single well-formed resolver links."""

    def __init__(
        self,
        resolver_base_url: str = "https://doi.org",
        label: str = "doi",
    ) -> None:
        self._base_url = resolver_base_url.rstrip("/")
        self._label = label

        base = re.escape(self._base_url)
        label_re = rf"(?i:{re.escape(label)})"
        self._label_re = label_re

        self._nested_link_re = re.compile(
            rf"\[({_LINK_LABEL})\]\({base}/\[{_LINK_LABEL}\]\({base}/({_TARGET_BODY})\)\)"
        )
        self._bracketed_target_re = re.compile(
            rf"\({base}/\[+\s*{label_re}:?\s*({_ID_BODY})\s*\]+\)"
        )
        self._stacked_target_re = re.compile(
            rf"\[({_LINK_LABEL})\]\(({base}/{_TARGET_BODY})\)(?:{base}/{_TARGET_BODY}\))+\)"
        )
        self._bracket_run_re = re.compile(
            rf"\[+\s*{label_re}:?\s*({_ID_BODY})\s*\]+"
        )
        self._labelled_link_re = re.compile(
            rf"\[{label_re}:\s*({_ID_BODY})\]\({base}/({_TARGET_BODY})\)"
        )
        self._link_token_re = re.compile(
            rf"(\[{_LINK_LABEL}\])?\(({base}/{_TARGET_BODY})\)"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def normalize(self, text: str, identifiers: list[str] | None = None) -> str:
        """Return *text* with identifier links repaired.

        Deterministic for a given text and identifier order, and idempotent:
        normalizing an already-normalized text returns it unchanged.
        """
        if not text:
            return text

        normalized = self.repair_nesting(text)
        for identifier in self._clean_identifiers(identifiers or []):
            normalized = self.link_identifier(normalized, identifier)
        normalized = self.collapse_adjacent_duplicates(normalized)
        normalized = self._final_cleanup(normalized)

        if normalized != text:
            Log.debug(
                f"Citation normalizer rewrote text ({len(text)} -> {len(normalized)} chars)"
            )
        return normalized

    def link_for(self, identifier: str) -> str:
        """Canonical markdown link for *identifier*."""
        return f"[{self._label}: {identifier}]({self._base_url}/{identifier})"

    # ------------------------------------------------------------------
    # Step 1: nesting repair
    # ------------------------------------------------------------------

    def repair_nesting(self, text: str) -> str:
        repaired = text
        for _ in range(_MAX_CLEANUP_ROUNDS):
            previous = repaired
            repaired = self._bracketed_target_re.sub(
                lambda m: f"({self._base_url}/{clean_doi(m.group(1))})", repaired
            )
            repaired = self._nested_link_re.sub(
                lambda m: f"[{m.group(1)}]({self._base_url}/{m.group(2)})", repaired
            )
            repaired = self._stacked_target_re.sub(r"[\1](\2)", repaired)
            repaired = self._bracket_run_re.sub(self._collapse_bracket_run, repaired)
            repaired = self._labelled_link_re.sub(self._retarget_labelled_link, repaired)
            if repaired == previous:
                break
        return repaired

    def _collapse_bracket_run(self, match: re.Match[str]) -> str:
        token = match.group(0)
        if not (token.startswith("[[") or token.endswith("]]")):
            return token
        return f"[{self._label}: {match.group(1)}]"

    def _retarget_labelled_link(self, match: re.Match[str]) -> str:
        identifier = clean_doi(match.group(1))
        if match.group(2) == identifier:
            return match.group(0)
        return self.link_for(identifier)

    # ------------------------------------------------------------------
    # Step 2: per-identifier linking
    # ------------------------------------------------------------------

    def link_identifier(self, text: str, identifier: str) -> str:
        """Wrap the first clean mention of *identifier* unless it is already linked."""
        escaped = re.escape(identifier)
        well_formed = re.compile(
            rf"\[{_LINK_LABEL}\]\({re.escape(self._base_url)}/{escaped}\)"
        )
        if well_formed.search(text):
            return text

        boundary = r"(?![\w/\-]|\.\w)"
        mention_re = re.compile(
            rf"\[+\s*{self._label_re}:?\s*{escaped}\s*\]+(?![\](])"
            rf"|(?<![\w/]){self._label_re}:?\s*{escaped}{boundary}"
            rf"|(?<![\w/.\-]){escaped}{boundary}"
        )
        protected = self._protected_spans(text)
        for match in mention_re.finditer(text):
            if any(match.start() < end and start < match.end() for start, end in protected):
                continue
            Log.debug(f"Linking first mention of identifier {identifier}")
            return text[: match.start()] + self.link_for(identifier) + text[match.end():]
        return text

    @staticmethod
    def _protected_spans(text: str) -> list[tuple[int, int]]:
        spans = [m.span() for m in _ANY_LINK_RE.finditer(text)]
        spans.extend(m.span() for m in _BARE_URL_RE.finditer(text))
        return spans

    @staticmethod
    def _clean_identifiers(identifiers: list[str]) -> list[str]:
        cleaned: list[str] = []
        for raw in identifiers:
            identifier = clean_doi(raw)
            if _IDENTIFIER_RE.match(identifier) and identifier not in cleaned:
                cleaned.append(identifier)
        return cleaned

    # ------------------------------------------------------------------
    # Step 3: run-length collapse
    # ------------------------------------------------------------------

    def collapse_adjacent_duplicates(self, text: str) -> str:
        """Collapse runs of character-adjacent link tokens sharing one target.

        Within a run the first labelled link is kept (or the first bare
        ``(url)`` when none is labelled).
        """
        pieces: list[str] = []
        position = 0
        run: list[re.Match[str]] = []

        for match in self._link_token_re.finditer(text):
            if run and match.start() == run[-1].end() and match.group(2) == run[-1].group(2):
                run.append(match)
                continue
            if run:
                pieces.append(self._kept_token(run))
                position = run[-1].end()
            pieces.append(text[position:match.start()])
            run = [match]

        if run:
            pieces.append(self._kept_token(run))
            position = run[-1].end()
        pieces.append(text[position:])
        return "".join(pieces)

    @staticmethod
    def _kept_token(run: list[re.Match[str]]) -> str:
        if len(run) > 1:
            Log.debug(f"Collapsed {len(run)} adjacent links to {run[0].group(2)}")
        return next((m for m in run if m.group(1)), run[0]).group(0)

    # ------------------------------------------------------------------
    # Step 4: final cleanup
    # ------------------------------------------------------------------

    def _final_cleanup(self, text: str) -> str:
        cleaned = text
        for _ in range(_MAX_CLEANUP_ROUNDS):
            previous = cleaned
            cleaned = self.collapse_adjacent_duplicates(self.repair_nesting(cleaned))
            if cleaned == previous:
                break
        return cleaned
