"""
Numeric literal grammar.

Decimal and hexadecimal literals with optional exponent, optionally followed by a
unit token:

    number      := sign? (decimal | hexadecimal)
    decimal     := (digits | digits? '.' digits) (' '? ('e'|'E') sign? digits)?
    hexadecimal := '0' ('x'|'X') (hexdigits | hexdigits? '.' hexdigits)
                   (' '? (('e'|'E') sign? hexdigits | ('p'|'P') sign? digits))?
    unit        := letter wordchar* | '%'
    literal     := number (' '? unit)?

The 'E' exponent of a hexadecimal literal is a hexadecimal power of 16, 'P' is a
decimal power of 2.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import re
from dataclasses import dataclass
from fractions import Fraction
from functools import lru_cache

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale, UnknownLocaleError
from babel.numbers import get_decimal_symbol


# @formatter:off

class GrammarConf:
    # Longer input never matches; bounds the cost of hexadecimal backtracking
    MAX_LENGTH = 1024
    # Larger exponents are arithmetic failures; bounds the size of exact values
    MAX_EXPONENT = 9999

# @formatter:on

_DEC = r"(?:[0-9]++|[0-9]*+\.[0-9]++)"
_HEX = r"0[Xx](?:[0-9A-Fa-f]+|[0-9A-Fa-f]*\.[0-9A-Fa-f]+)"

NUMBER = re.compile(
    rf"\A\s*+(?:"
    rf"(?P<dec>[-+]?{_DEC})(?:\s?[Ee](?P<dec_exp>[-+]?[0-9]++))?"
    rf"|"
    rf"(?P<hex>[-+]?{_HEX})(?:\s?(?P<hex_exp>[Ee][-+]?[0-9A-Fa-f]++|[Pp][-+]?[0-9]++))?"
    rf")\s*+\Z"
)

# Hexadecimal first, and never a decimal 0 followed by a unit starting with "x"
NUMBER_UNIT = re.compile(
    rf"\A\s*+(?P<number>[-+]?(?:"
    rf"{_HEX}(?:\s?[Ee][-+]?[0-9A-Fa-f]++|\s?[Pp][-+]?[0-9]++)?"
    rf"|"
    rf"(?!0[Xx]){_DEC}(?:\s?[Ee][-+]?[0-9]++)?"
    rf"))\s?(?P<unit>[^\W\d_]\w*+|%)?\s*+\Z"
)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class NumberToken:
    """
    A matched numeric literal, split into its parts.

    Attributes:
        radix: 10 or 16.
        significand: Signed digits without the "0x" prefix and without the point.
        scale: Number of digits after the point.
        exponent: Exponent in radix digits, or None.
        binary_exponent: True for a hexadecimal 'P' (power of two) exponent.
    """

    radix: int
    significand: str
    scale: int = 0
    exponent: str | None = None
    binary_exponent: bool = False

    @property
    def integral_form(self) -> bool:
        """True if the literal has neither a point nor an exponent."""
        return self.scale == 0 and self.exponent is None

    def value(self) -> Fraction:
        """
        The exact value of the literal.

        Raises:
            ArithmeticError: If the exponent magnitude exceeds GrammarConf.MAX_EXPONENT.
        """
        result = Fraction(int(self.significand, self.radix))
        if self.integral_form:
            return result

        scale = self.scale
        power = 0
        if self.exponent is not None:
            exponent = int(self.exponent, 10 if self.binary_exponent else self.radix)
            if abs(exponent) > GrammarConf.MAX_EXPONENT:
                raise ArithmeticError(f"Exponent out of range: {exponent}")
            if self.binary_exponent:
                power = exponent
            else:
                scale -= exponent

        if scale:
            result *= Fraction(self.radix) ** -scale
        if power:
            result *= Fraction(2) ** power
        return result


# Methods --------------------------------------------------------------------------------------------------------------

@lru_cache(maxsize=64)
def decimal_separator(locale: Locale | str | None) -> str:
    """
    Decimal separator of a locale, "." when locale is None.

    Args:
        locale: Babel Locale or identifier such as "de", "de_DE" or "de-DE".

    Raises:
        ValueError: If the locale is unknown or malformed.
    """
    if locale is None:
        return "."
    if isinstance(locale, str):
        try:
            locale = Locale.parse(locale.replace("-", "_"))
        except (UnknownLocaleError, ValueError, TypeError) as e:
            raise ValueError(f"Unknown locale: {locale!r}") from e
    return get_decimal_symbol(locale)


def localize_separator(text: str, locale: Locale | str | None) -> str:
    """
    Translate a locale decimal separator to ".".

    When the separator is not "." and occurs in text, every "." is removed as a
    thousands separator first.

    Examples:
        >>> localize_separator("1.234,5", "de")
        '1234.5'
        >>> localize_separator("1.5", "de")
        '1.5'
    """
    separator = decimal_separator(locale)
    if separator != "." and separator in text:
        return text.replace(".", "").replace(separator, ".")
    return text


def match_number(text: str) -> NumberToken | None:
    """Split a bare numeric literal into a NumberToken, None if it doesn't match."""
    if len(text) > GrammarConf.MAX_LENGTH:
        return None
    m = NUMBER.match(text)
    if m is None:
        return None

    if m.group("dec") is not None:
        radix = 10
        significand = m.group("dec")
        exponent = m.group("dec_exp")
        binary_exponent = False
    else:
        radix = 16
        significand = re.sub(r"0[Xx]", "", m.group("hex"), count=1)
        exponent = m.group("hex_exp")
        binary_exponent = exponent is not None and exponent[0] in "Pp"
        if exponent is not None:
            exponent = exponent[1:]

    whole, dot, fraction = significand.partition(".")
    return NumberToken(
        radix=radix,
        significand=whole + fraction,
        scale=len(fraction) if dot else 0,
        exponent=exponent,
        binary_exponent=binary_exponent,
    )


def match_number_unit(text: str) -> tuple[str, str | None] | None:
    """
    Split a literal with trailing unit into (number, unit).

    Returns:
        The number text and the unit token or None, or None if text doesn't match.

    Examples:
        >>> match_number_unit(" 7.35 kiB ")
        ('7.35', 'kiB')
        >>> match_number_unit("46%")
        ('46', '%')
    """
    if len(text) > GrammarConf.MAX_LENGTH:
        return None
    m = NUMBER_UNIT.match(text)
    if m is None:
        return None
    return m.group("number"), m.group("unit")
