"""
Pagesmith Editor - Range Formatter

Pure functions over a text string and a list of FormattedRange dicts:

    {"start": int, "end": int, "formatting": {bold, italic, underline,
                                              strikethrough, subscript, superscript}}

- apply_ranges         text + ranges -> inline HTML markup
- add_or_update_range  apply a new range, dropping every range it touches
- reconcile_after_edit keep only ranges whose captured text is untouched
- render_list / infer_list_type  line-based list semantics

Ranges may overlap in storage. Rendering splits the text at every range
boundary so the markup is always well-nested, and wraps each segment in
a fixed flag order (bold innermost, superscript outermost).

Invalid ranges (start >= end, negative start, end past the text) are skipped,
never raised on.
"""

from __future__ import annotations

import re
from collections import Counter
from html import escape as _html_escape
from typing import Any

from engine.editor.types import FORMAT_FLAGS, FORMAT_TAGS

# ---------------------------------------------------------------------------
# Range construction / inspection
# ---------------------------------------------------------------------------


def make_formatting(**flags: bool) -> dict[str, bool]:
    """Build a full formatting dict; unspecified flags are False."""
    return {flag: bool(flags.get(flag, False)) for flag in FORMAT_FLAGS}


def make_range(start: int, end: int, **flags: bool) -> dict[str, Any]:
    """
    make_range(0, 5, bold=True)
      -> {"start": 0, "end": 5, "formatting": {"bold": True, "italic": False, ...}}
    """
    return {"start": start, "end": end, "formatting": make_formatting(**flags)}


def active_flags(formatting: dict[str, Any] | None) -> tuple[str, ...]:
    """Flags switched on, in application order."""
    if not isinstance(formatting, dict):
        return ()
    return tuple(flag for flag in FORMAT_FLAGS if formatting.get(flag))


def _bounds(rng: Any) -> tuple[int, int] | None:
    if not isinstance(rng, dict):
        return None
    start, end = rng.get("start"), rng.get("end")
    for value in (start, end):
        if not isinstance(value, int) or isinstance(value, bool):
            return None
    return start, end


def _as_list(ranges: Any) -> list:
    """Stored ranges that are not a list count as no ranges."""
    return ranges if isinstance(ranges, list) else []


def is_valid_range(rng: Any, text_length: int) -> bool:
    """0 <= start < end <= text_length."""
    bounds = _bounds(rng)
    if bounds is None:
        return False
    start, end = bounds
    return 0 <= start < end <= text_length


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def escape(text: str) -> str:
    """HTML-escape user text."""
    return _html_escape(text, quote=False)


def split_ranges(text: str, ranges: list[dict[str, Any]]) -> list[tuple[int, int, tuple[str, ...]]]:
    """
    Split text into non-overlapping segments covering the whole string.

    Each segment is (start, end, flags) where flags is the union of the
    formatting of every valid range covering it. Adjacent segments with the
    same flags are merged.
    """
    length = len(text)
    valid = [r for r in _as_list(ranges) if is_valid_range(r, length)]

    cuts = {0, length}
    for rng in valid:
        cuts.add(rng["start"])
        cuts.add(rng["end"])
    points = sorted(cuts)

    segments: list[tuple[int, int, tuple[str, ...]]] = []
    for seg_start, seg_end in zip(points, points[1:]):
        on: set[str] = set()
        for rng in valid:
            if rng["start"] <= seg_start and rng["end"] >= seg_end:
                on.update(active_flags(rng.get("formatting")))
        flags = tuple(flag for flag in FORMAT_FLAGS if flag in on)

        if segments and segments[-1][2] == flags and segments[-1][1] == seg_start:
            segments[-1] = (segments[-1][0], seg_end, flags)
        else:
            segments.append((seg_start, seg_end, flags))

    return segments


def wrap(inner: str, flags: tuple[str, ...]) -> str:
    """Wrap already-escaped markup in tags, bold first (innermost)."""
    for flag in FORMAT_FLAGS:
        if flag in flags:
            tag = FORMAT_TAGS[flag]
            inner = f"<{tag}>{inner}</{tag}>"
    return inner


def apply_ranges(text: str, ranges: list[dict[str, Any]]) -> str:
    """
    Render text with its formatting ranges as inline HTML.

    apply_ranges("test", [make_range(0, 4, bold=True), make_range(0, 4, italic=True)])
      -> "<em><strong>test</strong></em>"

    Output does not depend on the order of `ranges`.
    """
    return "".join(
        wrap(escape(text[start:end]), flags) for start, end, flags in split_ranges(text, ranges)
    )


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


def _touches(rng: dict[str, Any], start: int, end: int) -> bool:
    bounds = _bounds(rng)
    if bounds is None:
        return True
    return bounds[0] < end and start < bounds[1]


def add_or_update_range(existing: list[dict[str, Any]], new_range: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Apply `new_range` on top of `existing`.

    Every existing range inside, partially overlapping, or enclosing the new
    span is discarded (no splitting; the most recent edit wins). The new range
    is appended unless all its flags are off, in which case the call just
    clears formatting from that span. Malformed existing ranges are dropped.
    A malformed or empty new range leaves `existing` unchanged.
    """
    bounds = _bounds(new_range)
    if bounds is None or not 0 <= bounds[0] < bounds[1]:
        return list(_as_list(existing))

    start, end = bounds
    kept = [r for r in _as_list(existing) if not _touches(r, start, end)]
    on = active_flags(new_range.get("formatting"))
    if on:
        kept.append({"start": start, "end": end, "formatting": make_formatting(**{flag: True for flag in on})})
    return kept


def reconcile_after_edit(old_text: str, new_text: str, ranges: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Keep the ranges that still describe the same characters after an edit.

    A range survives only if the text it covered in `old_text` still occurs
    somewhere in `new_text` AND `new_text` holds that exact text at the same
    offsets. Anything else is dropped. This is lossy on purpose: an insertion
    before a range shifts its text and drops it.
    """
    surviving: list[dict[str, Any]] = []
    for rng in _as_list(ranges):
        if not is_valid_range(rng, len(old_text)):
            continue
        start, end = rng["start"], rng["end"]
        captured = old_text[start:end]
        if captured in new_text and new_text[start:end] == captured:
            surviving.append(rng)
    return surviving


def clip_ranges(ranges: list[dict[str, Any]], start: int, end: int, text_length: int) -> list[dict[str, Any]]:
    """Restrict ranges to [start, end) and rebase them to offset 0."""
    clipped: list[dict[str, Any]] = []
    for rng in _as_list(ranges):
        if not is_valid_range(rng, text_length):
            continue
        lo, hi = max(rng["start"], start), min(rng["end"], end)
        if lo < hi:
            clipped.append({"start": lo - start, "end": hi - start, "formatting": rng.get("formatting")})
    return clipped


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

_ORDERED_RE = re.compile(r"^\s*\d+\.\s+")
_UNORDERED_RE = re.compile(r"^\s*(?:•\s?|[-*]\s)")


def classify_line(line: str) -> str:
    """'ordered' for "N. ", 'unordered' for "• ", "- " or "* ", else 'none'."""
    if _ORDERED_RE.match(line):
        return "ordered"
    if _UNORDERED_RE.match(line):
        return "unordered"
    return "none"


def strip_list_marker(line: str) -> tuple[str, int]:
    """Return (line without its list marker, length of the removed marker)."""
    for pattern in (_ORDERED_RE, _UNORDERED_RE):
        m = pattern.match(line)
        if m:
            return line[m.end():], m.end()
    return line, 0


def infer_list_type(text: str) -> str:
    """
    Derive the list type from line prefixes.

    Blank lines are ignored. The majority line type wins; any tie for first
    place resolves to 'none'.
    """
    counts = Counter(classify_line(line) for line in text.split("\n") if line.strip())
    if not counts:
        return "none"
    ranked = counts.most_common()
    if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
        return "none"
    return ranked[0][0]


def _lines_with_offsets(text: str) -> list[tuple[str, int]]:
    result: list[tuple[str, int]] = []
    offset = 0
    for line in text.split("\n"):
        result.append((line, offset))
        offset += len(line) + 1
    return result


def render_list(text: str, ranges: list[dict[str, Any]], list_type: str) -> str:
    """
    One <li> per non-blank line. Existing "N. " / bullet markers are stripped
    from the item text and the line's ranges are rebased past the marker.
    """
    tag = "ol" if list_type == "ordered" else "ul"
    length = len(text)
    items: list[str] = []
    for line, offset in _lines_with_offsets(text):
        if not line.strip():
            continue
        body, marker_len = strip_list_marker(line)
        line_ranges = clip_ranges(ranges, offset + marker_len, offset + len(line), length)
        items.append(f"<li>{apply_ranges(body, line_ranges)}</li>")
    return f"<{tag}>{''.join(items)}</{tag}>"


def render_rich_text(
    text: str,
    ranges: list[dict[str, Any]],
    list_type: str = "none",
    *,
    paragraphs: bool = True,
) -> str:
    """
    Full markup for a text element.

    Lists render through render_list. Otherwise each line is rendered with its
    own slice of the ranges, as <p> blocks or joined with <br>.
    """
    if list_type in ("ordered", "unordered"):
        return render_list(text, ranges, list_type)

    length = len(text)
    lines = [
        apply_ranges(line, clip_ranges(ranges, offset, offset + len(line), length))
        for line, offset in _lines_with_offsets(text)
    ]
    if paragraphs:
        return "".join(f"<p>{line}</p>" for line in lines)
    return "<br>".join(lines)
