"""
Map a diagnostic's document path back to a line in the original JSON text.

Editors show validation errors inline, so each error can optionally carry the
1-based line of the property that triggered it. This is a display nicety:
the locator never raises, and returns None when it cannot place an error.

The scan tokenizes the raw text (string-aware, so braces or quotes inside
values do not confuse it) and keeps a stack of open containers. A key matches
when its name is the target key and the keys of the enclosing containers,
joined with ".", equal the path's parent context. If no key matches in
context, the first key with the target name anywhere is used.

Example:
    ```python
    text = '{\\n  "a": {\\n    "b": 1\\n  }\\n}'
    assert find_line("$.a.b", None, "type", text) == 3
    ```
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from rule_guard.validation.models import ErrorType

_SEGMENT_RE = re.compile(r"\.([^.\[\]]+)|\[(\d+)\]|\['([^']*)'\]")
_INDEX_SUFFIX_RE = re.compile(r"(\[\d+\])+$")

_WHITESPACE = " \t\r\n"


@dataclass
class _Frame:
    key: Optional[str]
    is_array: bool


def find_line(
    path: Optional[str],
    message: Optional[str],
    error_type: Optional[str],
    raw_text: Optional[str]
) -> Optional[int]:
    """
    Find the 1-based line of the property an error refers to.

    Args:
        path: Document path of the error ("$" is the root)
        message: Error message; for additionalProperties errors the offending
            property is parsed out of it, since the path names the container
        error_type: Error taxonomy tag
        raw_text: Original JSON text as submitted

    Returns:
        Optional[int]: Line number, 1 for the document root, None if not found
    """
    if raw_text is None:
        return None

    segments = parse_path(path)

    target: Optional[str] = None
    if error_type == ErrorType.ADDITIONAL_PROPERTIES.value:
        target = extract_property_name(message)

    if target is not None:
        context = segments
    elif not segments:
        return 1
    else:
        target = segments[-1]
        context = segments[:-1]

    expected_context = ".".join(context)

    fallback: Optional[int] = None
    for key, line, stack in _iter_keys(raw_text):
        if key != target:
            continue
        if ".".join(frame.key for frame in stack if frame.key) == expected_context:
            return line
        if fallback is None:
            fallback = line
    return fallback


def parse_path(path: Optional[str]) -> List[str]:
    """
    Split a document path into property names, dropping array indices.

    "$.definition.conditions[0].left" -> ["definition", "conditions", "left"]
    """
    if not path:
        return []
    text = path[1:] if path.startswith("$") else path
    if text and not text.startswith((".", "[")):
        text = "." + text

    segments = []
    for match in _SEGMENT_RE.finditer(text):
        name = match.group(1) if match.group(1) is not None else match.group(3)
        if name is not None:
            segments.append(name)
    return segments


def extract_property_name(message: Optional[str]) -> Optional[str]:
    """
    Pull the offending property name out of an additionalProperties message.

    "$.definition.return2Type: is not defined in the schema ..." -> "return2Type"
    """
    if not message or ":" not in message:
        return None
    pointer = message.split(":", 1)[0].strip()
    name = _INDEX_SUFFIX_RE.sub("", pointer.rsplit(".", 1)[-1])
    return name or None


def _iter_keys(raw_text: str) -> Iterator[Tuple[str, int, List[_Frame]]]:
    """
    Yield (key, line, open containers) for every object key in the text.

    Tolerates malformed input: unterminated strings end the scan, and extra
    closing brackets are ignored.
    """
    stack: List[_Frame] = []
    pending_key: Optional[str] = None
    line = 1
    i = 0
    n = len(raw_text)

    while i < n:
        char = raw_text[i]

        if char == "\n":
            line += 1
            i += 1
        elif char == '"':
            start_line = line
            text, i, line = _read_string(raw_text, i + 1, line)
            if text is None:
                return
            j = i
            while j < n and raw_text[j] in _WHITESPACE:
                j += 1
            if j < n and raw_text[j] == ":":
                pending_key = text
                yield text, start_line, stack
        elif char in "{[":
            stack.append(_Frame(key=pending_key, is_array=char == "["))
            pending_key = None
            i += 1
        elif char in "}]":
            if stack:
                stack.pop()
            pending_key = None
            i += 1
        elif char == ",":
            pending_key = None
            i += 1
        else:
            i += 1


def _read_string(raw_text: str, i: int, line: int) -> Tuple[Optional[str], int, int]:
    """Read a JSON string body starting after the opening quote."""
    chars = []
    n = len(raw_text)
    while i < n:
        char = raw_text[i]
        if char == "\\" and i + 1 < n:
            chars.append(raw_text[i + 1])
            i += 2
            continue
        if char == '"':
            return "".join(chars), i + 1, line
        if char == "\n":
            line += 1
        chars.append(char)
        i += 1
    return None, i, line
