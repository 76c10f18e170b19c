"""Heuristic title/description extraction from dropped source files.

Both fields are resolved through an ordered list of rules. Each rule is a
plain function ``(content, kind) -> Optional[str]``; the first rule returning a
non-empty string wins and the remaining rules are not consulted. Rules never
raise on malformed markup, they simply do not match.
"""

from __future__ import annotations

import html
import re
from typing import Callable, List, Optional, Sequence

from ..models import ExtractedFields, SourceKind

Rule = Callable[[str, SourceKind], Optional[str]]

_H1_RE = re.compile(r"<h1\b[^>]*>(.*?)</h1\s*>", re.IGNORECASE | re.DOTALL)
_TITLE_TAG_RE = re.compile(r"<title\b[^>]*>(.*?)</title\s*>", re.IGNORECASE | re.DOTALL)
_META_TAG_RE = re.compile(r"<meta\b([^>]*)>", re.IGNORECASE)
_ATTR_RE = re.compile(r"""([\w:-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_TAG_RE = re.compile(r"<[^>]*>")
_TRAILING_PUNCTUATION_RE = re.compile(r"([!?.,;:]+)\s*$")
_NON_TITLE_CHARS_RE = re.compile(r"[^a-zA-Z0-9\s]")
_LABEL_PREFIX_RE = re.compile(r"^[^:]*:\s*")


def _literal_pattern(key: str) -> re.Pattern[str]:
    # ``\b`` keeps ``subtitle:`` from satisfying the ``title:`` rule.
    return re.compile(
        rf"""\b{key}\s*:\s*(?:"([^"\n]+)"|'([^'\n]+)')""",
        re.IGNORECASE,
    )


def _class_element_pattern(class_name: str) -> re.Pattern[str]:
    return re.compile(
        rf"""<([a-zA-Z][\w-]*)\b[^>]*?\bclass(?:Name)?\s*=\s*(?:"{class_name}"|'{class_name}')[^>]*>(.*?)</\1\s*>""",
        re.DOTALL,
    )


_TITLE_LITERAL_RE = _literal_pattern("title")
_NAME_LITERAL_RE = _literal_pattern("name")
_DESCRIPTION_LITERAL_RE = _literal_pattern("description")
_SUBTITLE_LITERAL_RE = _literal_pattern("subtitle")
_SUBHEADLINE_RE = _class_element_pattern("subheadline")
_HEADLINE_RE = _class_element_pattern("headline")


def clean_title(raw: str) -> str:
    """Normalise a title candidate for display.

    Symbols and emoji are removed and words are title cased, except short
    all-caps acronyms (``API``, ``3D``) and deliberately mixed-case words
    (``iOS``, ``WebGL``) which keep their casing. A trailing run of
    punctuation survives the cleanup verbatim.
    """
    text = raw.strip()
    trailing = ""
    match = _TRAILING_PUNCTUATION_RE.search(text)
    if match:
        trailing = match.group(1)
        text = text[: match.start()]

    text = _NON_TITLE_CHARS_RE.sub("", text)
    words = [_case_word(word) for word in text.split()]
    if not words:
        return ""
    return " ".join(words) + trailing


def _case_word(word: str) -> str:
    title_form = word[:1].upper() + word[1:].lower()
    if 2 <= len(word) <= 4 and word.isupper():
        return word
    has_upper = any(char.isupper() for char in word)
    has_lower = any(char.islower() for char in word)
    if has_upper and has_lower and word != title_form:
        return word
    return title_form


def _inner_text(fragment: str) -> str:
    """Visible text of a markup fragment with entities decoded."""
    return " ".join(html.unescape(_TAG_RE.sub("", fragment)).split())


def _literal_value(pattern: re.Pattern[str], content: str) -> Optional[str]:
    match = pattern.search(content)
    if not match:
        return None
    value = match.group(1) if match.group(1) is not None else match.group(2)
    return value.strip() or None


# ----------------------------------------------------------------------
# Title rules


def _title_from_h1(content: str, kind: SourceKind) -> Optional[str]:
    match = _H1_RE.search(content)
    if not match:
        return None
    return _inner_text(match.group(1)) or None


def _title_from_title_tag(content: str, kind: SourceKind) -> Optional[str]:
    if kind is not SourceKind.HTML:
        return None
    match = _TITLE_TAG_RE.search(content)
    if not match:
        return None
    return _inner_text(match.group(1)) or None


def _title_from_title_literal(content: str, kind: SourceKind) -> Optional[str]:
    return _literal_value(_TITLE_LITERAL_RE, content)


def _title_from_name_literal(content: str, kind: SourceKind) -> Optional[str]:
    return _literal_value(_NAME_LITERAL_RE, content)


TITLE_RULES: List[Rule] = [
    _title_from_h1,
    _title_from_title_tag,
    _title_from_title_literal,
    _title_from_name_literal,
]


# ----------------------------------------------------------------------
# Description rules


def _description_from_subheadline(content: str, kind: SourceKind) -> Optional[str]:
    match = _SUBHEADLINE_RE.search(content)
    if not match:
        return None
    return _inner_text(match.group(2)) or None


def _description_from_headline(content: str, kind: SourceKind) -> Optional[str]:
    match = _HEADLINE_RE.search(content)
    if not match:
        return None
    text = _inner_text(match.group(2))
    if ":" in text:
        text = _LABEL_PREFIX_RE.sub("", text, count=1)
    return text.strip() or None


def _description_from_meta(content: str, kind: SourceKind) -> Optional[str]:
    for match in _META_TAG_RE.finditer(content):
        attributes = {}
        for attr in _ATTR_RE.finditer(match.group(1)):
            value = attr.group(2) if attr.group(2) is not None else attr.group(3)
            attributes[attr.group(1).lower()] = value
        if attributes.get("name", "").lower() != "description":
            continue
        value = " ".join(html.unescape(attributes.get("content", "")).split())
        if value:
            return value
    return None


def _description_from_description_literal(content: str, kind: SourceKind) -> Optional[str]:
    return _literal_value(_DESCRIPTION_LITERAL_RE, content)


def _description_from_subtitle_literal(content: str, kind: SourceKind) -> Optional[str]:
    return _literal_value(_SUBTITLE_LITERAL_RE, content)


DESCRIPTION_RULES: List[Rule] = [
    _description_from_subheadline,
    _description_from_headline,
    _description_from_meta,
    _description_from_description_literal,
    _description_from_subtitle_literal,
]


def first_match(rules: Sequence[Rule], content: str, kind: SourceKind) -> Optional[str]:
    """Return the first non-empty result produced by ``rules``."""
    for rule in rules:
        value = rule(content, kind)
        if value:
            return value
    return None


def extract_title(content: str, kind: SourceKind) -> Optional[str]:
    """Return the cleaned title, or None when no rule yields a usable one."""
    for rule in TITLE_RULES:
        candidate = rule(content, kind)
        if not candidate:
            continue
        cleaned = clean_title(candidate)
        if cleaned:
            return cleaned
    return None


def extract_description(content: str, kind: SourceKind) -> Optional[str]:
    value = first_match(DESCRIPTION_RULES, content, kind)
    if value is None:
        return None
    return " ".join(value.split()) or None


def extract(content: str, kind: SourceKind) -> ExtractedFields:
    """Extract title and description from raw source text."""
    return ExtractedFields(
        title=extract_title(content, kind),
        description=extract_description(content, kind),
    )


__all__ = [
    "DESCRIPTION_RULES",
    "TITLE_RULES",
    "clean_title",
    "extract",
    "extract_description",
    "extract_title",
    "first_match",
]
