"""
Evaluation of object-like macro replacement lists.

Only single literals are understood: integers, floats and narrow string
literals, optionally negated and wrapped in parentheses.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

INT_RE = re.compile(r"^(0[xX][0-9a-fA-F]+|0[bB][01]+|0[0-7]*|[1-9][0-9]*)([uUlL]*)$")
FLOAT_RE = re.compile(r"^((?:\d+\.\d*|\.\d+)(?:[eE][+-]?\d+)?|\d+[eE][+-]?\d+)[fFlL]?$")
ESCAPE_RE = re.compile(r"\\(x[0-9a-fA-F]{1,2}|[0-7]{1,3}|.)", re.DOTALL)

SIMPLE_ESCAPES = {
    "n": 0x0A, "t": 0x09, "r": 0x0D, "a": 0x07, "b": 0x08,
    "f": 0x0C, "v": 0x0B, "\\": 0x5C, '"': 0x22, "'": 0x27, "?": 0x3F,
}

# Integer slots of --macro-int-types, in positional order
INT_SLOTS: list[tuple[int, int]] = [
    (0, 2**8 - 1),        # u8
    (0, 2**16 - 1),       # u16
    (0, 2**32 - 1),       # u32
    (0, 2**64 - 1),       # u64
    (-(2**7), 2**7 - 1),  # i8
    (-(2**15), 2**15 - 1),
    (-(2**31), 2**31 - 1),
    (-(2**63), 2**63 - 1),
]


@dataclass
class MacroValue:
    """Value of a macro: kind is "int", "float" or "str"."""
    kind: str
    value: Union[int, float, bytes]


def parse_int_literal(token: str) -> Optional[int]:
    m = INT_RE.match(token)
    if m is None:
        return None
    digits = m.group(1)
    if digits[:2] in ("0x", "0X"):
        return int(digits[2:], 16)
    if digits[:2] in ("0b", "0B"):
        return int(digits[2:], 2)
    if len(digits) > 1 and digits.startswith("0"):
        return int(digits[1:], 8)
    return int(digits)


def parse_float_literal(token: str) -> Optional[float]:
    m = FLOAT_RE.match(token)
    if m is None:
        return None
    return float(m.group(1))


def parse_string_literal(token: str) -> Optional[bytes]:
    """Decode a narrow C string literal, or None if it is not one."""
    if len(token) < 2 or token[0] != '"' or token[-1] != '"':
        return None

    body = token[1:-1]
    out = bytearray()
    pos = 0
    for m in ESCAPE_RE.finditer(body):
        out += body[pos:m.start()].encode("utf-8")
        esc = m.group(1)
        if esc[0] == "x":
            out.append(int(esc[1:], 16))
        elif esc[0] in "01234567":
            out.append(int(esc, 8) & 0xFF)
        elif esc in SIMPLE_ESCAPES:
            out.append(SIMPLE_ESCAPES[esc])
        else:
            return None
        pos = m.end()
    out += body[pos:].encode("utf-8")
    return bytes(out)


def evaluate_macro(tokens: Sequence[str]) -> Optional[MacroValue]:
    """
    Evaluate a macro replacement list.

    Args:
        tokens: Token spellings following the macro name

    Returns:
        The literal value, or None if the macro is not a single literal
    """
    tokens = list(tokens)
    while len(tokens) >= 2 and tokens[0] == "(" and tokens[-1] == ")":
        tokens = tokens[1:-1]

    sign = 1
    if len(tokens) == 2 and tokens[0] in ("-", "+"):
        sign = -1 if tokens[0] == "-" else 1
        tokens = tokens[1:]
    if len(tokens) != 1:
        return None

    token = tokens[0]

    int_value = parse_int_literal(token)
    if int_value is not None:
        return MacroValue("int", sign * int_value)

    float_value = parse_float_literal(token)
    if float_value is not None:
        if math.isinf(float_value):
            return None
        return MacroValue("float", sign * float_value)

    if sign == 1:
        string_value = parse_string_literal(token)
        if string_value is not None:
            return MacroValue("str", string_value)

    return None


def int_slot_token(value: int, type_tokens: Sequence[str]) -> Optional[str]:
    """
    Pick the ``--macro-int-types`` token for an integer.

    Tokens are positional: u8, u16, u32, u64, i8, i16, i32, i64. Non-negative
    values try the unsigned slots first. Empty tokens mark a slot as unused.

    Returns:
        The first eligible token whose range holds the value, or None
    """
    slots = range(len(INT_SLOTS)) if value >= 0 else range(4, len(INT_SLOTS))
    for index in slots:
        if index >= len(type_tokens) or not type_tokens[index]:
            continue
        low, high = INT_SLOTS[index]
        if low <= value <= high:
            return type_tokens[index]
    return None


def default_int_type(value: int) -> Optional[str]:
    """Rust type for an integer macro when no types were requested."""
    if -(2**31) <= value < 2**31:
        return "i32"
    if -(2**63) <= value < 2**63:
        return "i64"
    if 0 <= value < 2**64:
        return "u64"
    return None


def rust_float_literal(value: float) -> str:
    text = repr(value)
    if "." not in text and "e" not in text:
        text += ".0"
    return text


def rust_byte_string(data: bytes) -> str:
    """Render bytes as a Rust byte string literal."""
    parts = []
    for byte in data:
        ch = chr(byte)
        if ch in ('"', "\\"):
            parts.append("\\" + ch)
        elif 0x20 <= byte < 0x7F:
            parts.append(ch)
        else:
            parts.append(f"\\x{byte:02x}")
    return 'b"' + "".join(parts) + '"'
