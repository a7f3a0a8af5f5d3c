"""Decoding of N-Triples string escapes in literal values."""

from wikidata_filter.errors import UnescapeError

SIMPLE_ESCAPES = {
    "t": "\t",
    "b": "\b",
    "n": "\n",
    "r": "\r",
    "f": "\f",
    "\\": "\\",
}

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _code_point(value: str, start: int, width: int) -> str:
    digits = value[start : start + width]
    if len(digits) != width or not all(c in HEX_DIGITS for c in digits):
        raise UnescapeError(start, value, "invalid hex escape")
    code = int(digits, 16)
    # surrogates and values past U+10FFFF are not scalar values
    if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        raise UnescapeError(start, value, "invalid code point")
    return chr(code)


def unescape(value: str) -> str:
    if "\\" not in value:
        return value

    out = []
    i = 0
    length = len(value)
    while i < length:
        c = value[i]
        if c != "\\":
            out.append(c)
            i += 1
            continue

        if i + 1 >= length:
            raise UnescapeError(i, value, "dangling backslash")

        kind = value[i + 1]
        if kind in SIMPLE_ESCAPES:
            out.append(SIMPLE_ESCAPES[kind])
            i += 2
        elif kind == "u":
            out.append(_code_point(value, i + 2, 4))
            i += 6
        elif kind == "U":
            out.append(_code_point(value, i + 2, 8))
            i += 10
        else:
            raise UnescapeError(i + 1, value, f"invalid escape {kind!r}")

    return "".join(out)
