"""Escaping text embedded into generated source."""

from __future__ import annotations

_SIMPLE = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_string_literal(value: str) -> str:
    """Return a double-quoted Python string literal that evaluates to ``value``.

    Control characters, line separators and lone surrogates are written as
    escapes, so the literal stays on one line and the generated file is valid
    UTF-8 whatever ``value`` contains.
    """
    parts = ['"']
    for char in value:
        simple = _SIMPLE.get(char)
        if simple is not None:
            parts.append(simple)
            continue
        code = ord(char)
        if code < 0x20 or code == 0x7F:
            parts.append(f"\\x{code:02x}")
        elif code in (0x85, 0x2028, 0x2029) or 0xD800 <= code <= 0xDFFF:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)
