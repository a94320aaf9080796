"""Helpers for JSON documents that carry ``//`` and ``/* */`` comments."""

from __future__ import annotations

import json

__all__ = ["loads_jsonc", "strip_json_comments"]


def strip_json_comments(text: str) -> str:
    """Remove line and block comments outside of string literals.

    Comments are replaced by whitespace of the same shape so that line and
    column numbers reported by the JSON decoder still point at the source.
    """
    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False

    while i < length:
        char = text[i]

        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            i += 1
            continue

        nxt = text[i + 1] if i + 1 < length else ""

        if char == "/" and nxt == "/":
            end = text.find("\n", i)
            end = length if end == -1 else end
            out.append(" " * (end - i))
            i = end
            continue

        if char == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            end = length if end == -1 else end + 2
            out.append("".join(c if c in "\r\n" else " " for c in text[i:end]))
            i = end
            continue

        out.append(char)
        i += 1

    return "".join(out)


def loads_jsonc(text: str) -> object:
    """Parse JSON text after stripping comments.

    Raises:
        json.JSONDecodeError: The stripped text is not valid JSON.
    """
    return json.loads(strip_json_comments(text))
