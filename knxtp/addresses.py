"""KNX address text helpers.

Individual addresses are written "area.line.member" (4.4.8 bits), group
addresses "main/middle/sub" (5.3.8 bits). Parsing returns component tuples
ready for the Telegram address setters.
"""


def _parse_parts(text: str, sep: str, limits: tuple[int, int, int], kind: str):
    parts = text.strip().split(sep)
    if len(parts) != 3:
        raise ValueError(f"Bad {kind} address: {text!r}")
    try:
        values = tuple(int(p) for p in parts)
    except ValueError:
        raise ValueError(f"Bad {kind} address: {text!r}") from None
    for value, limit in zip(values, limits):
        if not 0 <= value <= limit:
            raise ValueError(f"Bad {kind} address: {text!r} (component out of range)")
    return values


def parse_individual_address(text: str) -> tuple[int, int, int]:
    """Parse "1.1.10" → (1, 1, 10)."""
    return _parse_parts(text, ".", (15, 15, 255), "individual")


def format_individual_address(area: int, line: int, member: int) -> str:
    """Format (1, 1, 10) → "1.1.10"."""
    return f"{area}.{line}.{member}"


def parse_group_address(text: str) -> tuple[int, int, int]:
    """Parse "1/2/3" → (1, 2, 3)."""
    return _parse_parts(text, "/", (31, 7, 255), "group")


def format_group_address(main: int, middle: int, sub: int) -> str:
    """Format (1, 2, 3) → "1/2/3"."""
    return f"{main}/{middle}/{sub}"


def is_group_address_text(text: str) -> bool:
    """True when the text uses the "/" group notation."""
    return "/" in text
