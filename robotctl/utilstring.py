"""Lenient string helpers for the command protocol."""


def index_of(text: str, char: str) -> int:
    """Return the position of the first ``char`` in ``text``, or -1."""
    if len(char) != 1:
        raise ValueError("char must be a single character")
    return text.find(char)


def tokenize(text: str, separator: str) -> tuple[str, str]:
    """Split ``text`` into the part before the first and after the last separator.

    Without a separator the whole text is the first part and the second is empty.
    """
    if len(separator) != 1:
        raise ValueError("separator must be a single character")
    first, found, _ = text.partition(separator)
    if not found:
        return first, ""
    return first, text.rpartition(separator)[2]


def atoi(text: str) -> int:
    """Parse a leading run of signs and digits; anything else yields what was read so far."""
    sign = 1
    pos = 0
    while pos < len(text) and text[pos] in "+-":
        if text[pos] == "-":
            sign = -sign
        pos += 1
    result = 0
    while pos < len(text) and "0" <= text[pos] <= "9":
        result = result * 10 + (ord(text[pos]) - ord("0"))
        pos += 1
    return result * sign