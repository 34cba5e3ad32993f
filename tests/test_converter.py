import pytest

from app.roman.converter import MAX_VALUE, MIN_VALUE, SYMBOL_TABLE, OutOfRangeError, from_roman, to_roman


@pytest.mark.parametrize(
    ("number", "expected"),
    [
        (1, "I"),
        (4, "IV"),
        (9, "IX"),
        (40, "XL"),
        (42, "XLII"),
        (90, "XC"),
        (400, "CD"),
        (900, "CM"),
        (1000, "M"),
        (1994, "MCMXCIV"),
        (3888, "MMMDCCCLXXXVIII"),
        (3999, "MMMCMXCIX"),
    ],
)
def test_to_roman_known_values(number: int, expected: str) -> None:
    assert to_roman(number) == expected


def test_symbol_table_is_strictly_descending() -> None:
    values = [value for value, _ in SYMBOL_TABLE]
    assert values == sorted(values, reverse=True)
    assert len(set(values)) == len(values)


def test_every_value_in_range_uses_only_roman_symbols_and_is_unique() -> None:
    seen: dict[str, int] = {}
    for number in range(MIN_VALUE, MAX_VALUE + 1):
        numeral = to_roman(number)
        assert numeral
        assert set(numeral) <= set("IVXLCDM")
        assert numeral not in seen, f"{number} and {seen.get(numeral)} share {numeral}"
        seen[numeral] = number


def test_round_trip_through_decoder() -> None:
    for number in range(MIN_VALUE, MAX_VALUE + 1):
        assert from_roman(to_roman(number)) == number


@pytest.mark.parametrize("number", [0, -1, 4000, 10**6])
def test_to_roman_out_of_range_raises(number: int) -> None:
    with pytest.raises(OutOfRangeError) as exc_info:
        to_roman(number)
    assert exc_info.value.value == number
    assert "between 1 and 3999" in str(exc_info.value)


def test_out_of_range_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        to_roman(0)


@pytest.mark.parametrize("value", ["42", 4.0, True, None])
def test_to_roman_rejects_non_integers(value) -> None:
    with pytest.raises(TypeError):
        to_roman(value)


@pytest.mark.parametrize("numeral", ["", "IIII", "IC", "VX", "MMMM", "ABC"])
def test_from_roman_rejects_non_canonical_numerals(numeral: str) -> None:
    with pytest.raises(ValueError):
        from_roman(numeral)


def test_from_roman_accepts_lowercase() -> None:
    assert from_roman("xlii") == 42
