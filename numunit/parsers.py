"""
Parsers for numbers and quantities in free-form text.

parse_number() turns a numeric literal or a Python number into an exact NumericValue,
parse_quantity() additionally understands a trailing unit with an optional SI or
binary prefix, e.g. "7.35 MiB" or "2300 cL".

Malformed input never raises: every parser returns None (or the caller's default)
and leaves the details in the log.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import dataclasses
import math
from dataclasses import dataclass
from typing import Self

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale
from loguru import logger

# Local ----------------------------------------------------------------------------------------------------------------
from .grammar import localize_separator, match_number, match_number_unit
from .numeric import NumberKind, NumericValue, Rounding, normalize, reduce_fraction
from .units import FORCE_CASE_SENSITIVE, UnitPrefix


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class QuantityOptions:
    """
    Options of parse_quantity().

    Attributes:
        locale: Locale whose decimal separator is accepted in addition to ".".
        rounding: Rounding applied to the final, prefix-scaled value.
        required_unit: Unit the parsed unit must equal, case-insensitively, after
                       prefix stripping; None accepts any unit.
        default_prefix: Prefix applied when the text has no unit at all.
        default_unit: Unit used when the text has no unit or only a prefix.
        allow_percent: Accept "%" as unit; the value is never prefix-scaled.
        case_sensitive_prefixes: Match prefix symbols case-sensitively.
        allow_fractional_prefixes: Accept sub-unity prefixes (deci and below).
    """

    locale: Locale | str | None = None
    rounding: Rounding | None = None
    required_unit: str | None = None
    default_prefix: UnitPrefix | None = None
    default_unit: str | None = None
    allow_percent: bool = False
    case_sensitive_prefixes: bool = False
    allow_fractional_prefixes: bool = False

    def merge(self, **kwargs) -> Self:
        """Copy with the given fields replaced."""
        return dataclasses.replace(self, **kwargs)


@dataclass(frozen=True)
class ParsedQuantity:
    """A parsed value with its unit, e.g. (7350000, "B") for "7.35 MB"."""

    value: NumericValue
    unit: str | None = None


DEFAULT_OPTIONS = QuantityOptions()


# Methods --------------------------------------------------------------------------------------------------------------

def parse_number(
        value,
        locale: Locale | str | None = None,
        rounding: Rounding | None = None,
        reduce_type: bool = True,
) -> NumericValue | None:
    """
    Parse a numeric literal, or normalize a number.

    Strings must be a decimal or hexadecimal literal, optionally with exponent and
    surrounding whitespace: "12.25", "-3E4", "0x2f", "0x1.8p3", "34,45" (with a
    locale using ","). Other values are normalized by numeric.normalize().

    Args:
        value: Text or number.
        locale: Locale whose decimal separator is accepted in addition to ".".
        rounding: Rounding policy, None for exact values.
        reduce_type: Return the narrowest representation if True. If False, integral
                     literals are BIG_INTEGER and fractional literals RATIONAL.

    Literals longer than GrammarConf.MAX_LENGTH (1024) characters never match, and
    exponents beyond GrammarConf.MAX_EXPONENT (9999) in magnitude are arithmetic
    failures, so "1e10000" gives None.

    Returns:
        The value, or None for None, blank text, malformed literals and arithmetic failures.

    Examples:
        >>> parse_number("0x10 P-4")
        NumericValue(kind=<NumberKind.INT: 'int'>, value=1)
        >>> parse_number("  12.25", reduce_type=False)
        NumericValue(kind=<NumberKind.RATIONAL: 'rational'>, value=Fraction(49, 4))
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return normalize(value, rounding, reduce_type)

    text = value.strip()
    if not text:
        return None
    try:
        text = localize_separator(text, locale)
    except ValueError as e:
        logger.error("Failed to parse a number from \"{}\": {}", text, e)
        return None

    token = match_number(text)
    if token is None:
        logger.trace("Failed to parse a number from \"{}\"", text)
        return None

    try:
        fraction = token.value()
        if rounding is not None and rounding.active:
            fraction = rounding.apply(fraction)
    except (ArithmeticError, ValueError) as e:
        logger.trace("Failed to parse a number from \"{}\": {}", text, e)
        return None

    return reduce_fraction(fraction, reduce_type, unreduced=NumberKind.BIG_INTEGER)


def parse_quantity(text: str | None, options: QuantityOptions | None = None) -> ParsedQuantity | None:
    """
    Parse a number with an optional prefixed unit.

    The unit is split into prefix and remainder by scanning UnitPrefix in declaration
    order; the first prefix whose symbol starts the unit wins. The value is then scaled
    exactly by the prefix factor before rounding.

    Args:
        text: Text such as " 7.35kiB ", "4 tb", "46%" or "700 m".
        options: QuantityOptions, defaults to DEFAULT_OPTIONS.

    Returns:
        ParsedQuantity, or None if the text is malformed, the unit doesn't match
        the required unit, or a prefix or "%" is not allowed.
        Text beyond the literal length and exponent bounds of parse_number() gives None.

    Examples:
        parse_quantity(" 7.35MB ") → ParsedQuantity(INT 7350000, "B")
        parse_quantity("5 kg", QuantityOptions(required_unit="g")) → ParsedQuantity(INT 5000, "g")
        parse_quantity("5 kg", QuantityOptions(required_unit="m")) → None
    """
    options = options or DEFAULT_OPTIONS

    if not isinstance(text, str) or not text.strip():
        return None
    try:
        text = localize_separator(text, options.locale)
    except ValueError as e:
        logger.error("Failed to parse a quantity from \"{}\": {}", text, e)
        return None

    matched = match_number_unit(text)
    if matched is None:
        logger.warning("Unable to parse a numeric value from \"{}\"", text)
        return None

    number_text, unit = matched
    required_unit = options.required_unit
    lower_required_unit = required_unit.lower() if required_unit is not None else None
    prefix = None

    if unit is None:
        unit = options.default_unit
        prefix = options.default_prefix
    else:
        if unit == "%":
            if not options.allow_percent:
                logger.warning("Illegal unit \"%\" in \"{}\"", text)
                return None
            return _unscaled_quantity(number_text, "%", options)

        # The required unit itself, even if it starts like a prefix
        if required_unit is not None and (unit == required_unit or unit.lower() == lower_required_unit):
            return _unscaled_quantity(number_text, unit, options)

        prefix, unit = _strip_prefix(unit, options)
        if not unit:
            unit = options.default_unit

    if lower_required_unit is not None and (unit is None or unit.lower() != lower_required_unit):
        logger.error("Invalid unit \"{}\" instead of \"{}\" in \"{}\"", unit, required_unit, text)
        return None

    if prefix is None:
        return _unscaled_quantity(number_text, unit, options)

    if prefix.fractional and not options.allow_fractional_prefixes:
        logger.error("Fractional unit prefix \"{}\" is not allowed in \"{}\"", prefix.symbol, text)
        return None

    number = parse_number(number_text, reduce_type=False)
    if number is None:
        return None

    if number.kind == NumberKind.BIG_INTEGER and prefix.is_big_integer_valid:
        scaled = NumericValue(NumberKind.BIG_INTEGER, number.value * prefix.factor_big_integer)
    else:
        scaled = NumericValue(NumberKind.RATIONAL, number.as_fraction() * prefix.factor_rational)

    value = normalize(scaled, options.rounding, reduce_type=True)
    if value is None:
        return None
    return ParsedQuantity(value, unit)


def parse_int(value, default: int, *, locale: Locale | str | None = None, rounding: Rounding | None = None) -> int:
    """
    Parse a value that must reduce to a 32-bit integer.

    Fractional values (after rounding) and values out of range give default.

    Examples:
        parse_int("0x10 P-4", -1) == 1
        parse_int(" 12.25 ", -1) == -1
        parse_int(" 12.25 ", -1, rounding=Rounding.to_integer()) == 12
    """
    number = parse_number(value, locale, rounding, reduce_type=True)
    if number is not None and number.kind == NumberKind.INT:
        return number.value
    return default


def parse_long(value, default: int, *, locale: Locale | str | None = None, rounding: Rounding | None = None) -> int:
    """Parse a value that must reduce to a 64-bit integer; like parse_int() otherwise."""
    number = parse_number(value, locale, rounding, reduce_type=True)
    if number is not None and number.kind in (NumberKind.INT, NumberKind.LONG):
        return number.value
    return default


def parse_double(
        value,
        default: float,
        *,
        locale: Locale | str | None = None,
        rounding: Rounding | None = None,
) -> float:
    """
    Parse a value as float.

    The exact value is rounded to the nearest float; magnitudes beyond the float range
    become signed infinity.
    """
    number = parse_number(value, locale, rounding, reduce_type=False)
    if number is None:
        return default
    try:
        return float(number)
    except OverflowError:
        return math.inf if number.value > 0 else -math.inf


def _strip_prefix(unit: str, options: QuantityOptions) -> tuple[UnitPrefix | None, str]:
    """
    Split a unit into (prefix, remainder), first match in UnitPrefix order.

    When sub-unity prefixes are not allowed, a sub-unity first match yields to a later
    matching prefix of 1 or more, so "M" is mega rather than milli with case-insensitive
    matching. A lone sub-unity match is still returned for the caller to reject.
    """
    lower_unit = unit.lower()
    first_fractional = None

    for prefix in UnitPrefix:
        case_sensitive = options.case_sensitive_prefixes or (
                options.allow_fractional_prefixes and prefix in FORCE_CASE_SENSITIVE)
        for symbol in prefix.symbols:
            if case_sensitive:
                hit = unit.startswith(symbol)
            else:
                hit = lower_unit.startswith(symbol.lower())
            if hit:
                break
        else:
            continue

        if not prefix.fractional or options.allow_fractional_prefixes:
            return prefix, unit[len(symbol):]
        if first_fractional is None:
            first_fractional = prefix, unit[len(symbol):]

    if first_fractional is not None:
        return first_fractional
    return None, unit


def _unscaled_quantity(number_text: str, unit: str | None, options: QuantityOptions) -> ParsedQuantity | None:
    number = parse_number(number_text, rounding=options.rounding)
    if number is None:
        return None
    return ParsedQuantity(number, unit)
