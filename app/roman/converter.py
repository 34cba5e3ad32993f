from __future__ import annotations

MIN_VALUE = 1
MAX_VALUE = 3999

SYMBOL_TABLE: tuple[tuple[int, str], ...] = (
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
)

_SYMBOL_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}


class OutOfRangeError(ValueError):
    """Raised when a value has no Roman numeral representation in [MIN_VALUE, MAX_VALUE]."""

    def __init__(self, value: int) -> None:
        self.value = value
        self.min_value = MIN_VALUE
        self.max_value = MAX_VALUE
        super().__init__(f"Number must be between {MIN_VALUE} and {MAX_VALUE}, got {value}")


def to_roman(number: int) -> str:
    """
    Convert an integer in [1, 3999] to its Roman numeral.

    Walks SYMBOL_TABLE from the largest value down, greedily appending each
    symbol while it still fits. The subtractive pairs in the table make the
    greedy choice the canonical one.
    """
    if isinstance(number, bool) or not isinstance(number, int):
        raise TypeError(f"number must be an int, got {type(number).__name__}")

    if number < MIN_VALUE or number > MAX_VALUE:
        raise OutOfRangeError(number)

    remaining = number
    parts: list[str] = []
    for value, symbol in SYMBOL_TABLE:
        while remaining >= value:
            parts.append(symbol)
            remaining -= value

    return "".join(parts)


def from_roman(numeral: str) -> int:
    """Decode a canonical Roman numeral back to its integer value."""
    if not numeral:
        raise ValueError("numeral must not be empty")

    total = 0
    previous = 0
    for char in reversed(numeral.upper()):
        value = _SYMBOL_VALUES.get(char)
        if value is None:
            raise ValueError(f"invalid Roman numeral character: {char!r}")
        if value < previous:
            total -= value
        else:
            total += value
            previous = value

    # Non-canonical forms like "IIII" or "IC" decode to some number but do not re-encode to themselves.
    if total < MIN_VALUE or total > MAX_VALUE or to_roman(total) != numeral.upper():
        raise ValueError(f"not a canonical Roman numeral: {numeral!r}")

    return total
