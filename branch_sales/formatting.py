import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, localcontext

import pyuca

# Group and decimal separators per supported number locale.
NUMBER_SYMBOLS = {
    "en": (",", "."),
    "de": (".", ","),
    "fr": (" ", ","),
}


@dataclass(frozen=True)
class Collator:
    """
    String ordering for product names, using the Unicode Collation Algorithm
    with the default (root) collation table: base letters first, then accents,
    then case with lowercase first. Build once and pass it to the sorter.
    """

    _uca: pyuca.Collator = field(
        default_factory=pyuca.Collator, repr=False, compare=False
    )

    def sort_key(self, text: str) -> tuple:
        # Raw text breaks ties between strings the table treats as equal.
        return (self._uca.sort_key(text), text)

    def compare(self, a: str, b: str) -> int:
        key_a, key_b = self.sort_key(a), self.sort_key(b)
        return (key_a > key_b) - (key_a < key_b)


@dataclass(frozen=True)
class NumberFormatter:
    """
    Revenue formatting: grouped thousands, at least `min_fraction_digits`
    and at most `max_fraction_digits` decimals, rounded half-up.
    """

    min_fraction_digits: int = 2
    max_fraction_digits: int = 3
    group_separator: str = ","
    decimal_separator: str = "."

    @classmethod
    def for_locale(cls, name: str = "en") -> "NumberFormatter":
        language = name.replace("_", "-").split("-")[0].lower()
        group, decimal = NUMBER_SYMBOLS.get(language, NUMBER_SYMBOLS["en"])
        return cls(group_separator=group, decimal_separator=decimal)

    def format(self, value) -> str:
        value = float(value) if value is not None else math.nan
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "∞" if value > 0 else "-∞"

        with localcontext() as ctx:
            ctx.prec = 400
            quantum = Decimal(1).scaleb(-self.max_fraction_digits)
            rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
            text = f"{rounded:,f}"

        whole, _, fraction = text.partition(".")
        fraction = fraction.rstrip("0").ljust(self.min_fraction_digits, "0")
        whole = whole.replace(",", self.group_separator)
        if not fraction:
            return whole
        return f"{whole}{self.decimal_separator}{fraction}"
