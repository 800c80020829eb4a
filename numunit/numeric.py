"""
Exact numeric values, rounding policies and type reduction.

This module provides the tagged numeric union returned by all numunit parsers,
the rounding policy applied to parsed values, and the normalizer that decides
the narrowest exact representation of a value.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import decimal
import math
import operator
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum, unique
from fractions import Fraction
from typing import Literal, Self

# Third-party ----------------------------------------------------------------------------------------------------------
from loguru import logger


# @formatter:off

class NumericConf:
    INT_MIN = -(2 ** 31)
    INT_MAX = 2 ** 31 - 1
    LONG_MIN = -(2 ** 63)
    LONG_MAX = 2 ** 63 - 1

# @formatter:on


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class NumberKind(StrEnum):
    """
    Representation kinds of a NumericValue, from narrowest to widest.

    Attributes:
        INT (str)         : Signed 32-bit integer
        LONG (str)        : Signed 64-bit integer
        BIG_INTEGER (str) : Arbitrary-precision integer
        DOUBLE (str)      : IEEE 754 binary64
        RATIONAL (str)    : Exact fraction
    """
    INT = "int"
    LONG = "long"
    BIG_INTEGER = "big_integer"
    DOUBLE = "double"
    RATIONAL = "rational"


@unique
class RoundingMode(StrEnum):
    UP = decimal.ROUND_UP
    DOWN = decimal.ROUND_DOWN
    CEILING = decimal.ROUND_CEILING
    FLOOR = decimal.ROUND_FLOOR
    HALF_UP = decimal.ROUND_HALF_UP
    HALF_DOWN = decimal.ROUND_HALF_DOWN
    HALF_EVEN = decimal.ROUND_HALF_EVEN
    UNNECESSARY = "UNNECESSARY"


@dataclass(frozen=True)
class NumericValue:
    """
    A number tagged with the representation it was reduced to.

    The kind is part of the value: NumericValue(INT, 5) and NumericValue(LONG, 5)
    are different results.

    Use NumericValue.of_int() to build the narrowest integer kind for an int.
    """

    kind: NumberKind
    value: int | float | Fraction

    def __post_init__(self):
        kind = NumberKind(self.kind)
        object.__setattr__(self, 'kind', kind)
        value = self.value

        if kind == NumberKind.DOUBLE:
            if not isinstance(value, float):
                raise TypeError(f"DOUBLE value must be float, got {type(value).__name__}")
            return

        if kind == NumberKind.RATIONAL:
            if not isinstance(value, Fraction):
                raise TypeError(f"RATIONAL value must be Fraction, got {type(value).__name__}")
            return

        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"{kind.name} value must be int, got {type(value).__name__}")
        if kind == NumberKind.INT and not NumericConf.INT_MIN <= value <= NumericConf.INT_MAX:
            raise ValueError(f"INT value out of 32-bit range: {value}")
        if kind == NumberKind.LONG and not NumericConf.LONG_MIN <= value <= NumericConf.LONG_MAX:
            raise ValueError(f"LONG value out of 64-bit range: {value}")

    @classmethod
    def of_int(cls, value: int) -> Self:
        """Integer in the narrowest of INT, LONG or BIG_INTEGER that holds it."""
        if NumericConf.INT_MIN <= value <= NumericConf.INT_MAX:
            return cls(NumberKind.INT, value)
        if NumericConf.LONG_MIN <= value <= NumericConf.LONG_MAX:
            return cls(NumberKind.LONG, value)
        return cls(NumberKind.BIG_INTEGER, value)

    @classmethod
    def of_double(cls, value: float) -> Self:
        return cls(NumberKind.DOUBLE, float(value))

    @classmethod
    def of_rational(cls, value: Fraction | int, denominator: int = 1) -> Self:
        return cls(NumberKind.RATIONAL, Fraction(value, denominator))

    @property
    def is_integral(self) -> bool:
        """True if the value has no fractional part; non-finite doubles are not integral."""
        if self.kind == NumberKind.DOUBLE:
            return math.isfinite(self.value) and self.value.is_integer()
        if self.kind == NumberKind.RATIONAL:
            return self.value.denominator == 1
        return True

    def as_fraction(self) -> Fraction:
        """
        Exact Fraction of the value.

        Raises:
            ValueError, OverflowError: if the value is a NaN or infinite double.
        """
        return Fraction(self.value)

    def __float__(self) -> float:
        return float(self.value)

    def __int__(self) -> int:
        return int(self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Rounding:
    """
    Rounding policy applied to parsed values.

    A positive precision rounds to that many significant digits and takes precedence
    over scale. Otherwise, the value is rounded to scale digits after the decimal point
    (or -scale digits discarded before it) when a mode other than UNNECESSARY is set.

    Attributes:
        precision: Significant digits, None or 0 for unlimited.
        scale: Digits to keep after the decimal point, negative to round before it.
        mode: RoundingMode; defaults to HALF_UP for precision rounding.
    """

    precision: int | None = None
    scale: int = 0
    mode: RoundingMode | None = None

    def __post_init__(self):
        if self.precision is not None:
            if not isinstance(self.precision, int) or isinstance(self.precision, bool):
                raise TypeError(f"precision must be int | None, got {type(self.precision).__name__}")
            if self.precision < 0:
                raise ValueError(f"precision must be >= 0, got {self.precision}")
        if not isinstance(self.scale, int) or isinstance(self.scale, bool):
            raise TypeError(f"scale must be int, got {type(self.scale).__name__}")
        if self.mode is not None:
            object.__setattr__(self, 'mode', RoundingMode(self.mode))

    @classmethod
    def digits(cls, precision: int, mode: RoundingMode = RoundingMode.HALF_UP) -> Self:
        """Round to a number of significant digits."""
        return cls(precision=precision, mode=mode)

    @classmethod
    def to_scale(cls, scale: int, mode: RoundingMode) -> Self:
        """Round to a number of digits after (or before, when negative) the decimal point."""
        return cls(scale=scale, mode=mode)

    @classmethod
    def to_integer(cls, mode: RoundingMode = RoundingMode.HALF_UP) -> Self:
        return cls(scale=0, mode=mode)

    @property
    def active(self) -> bool:
        """True if this policy changes values at all."""
        if self.precision:
            return True
        return self.mode is not None and self.mode != RoundingMode.UNNECESSARY

    def apply(self, value: Fraction) -> Fraction:
        """
        Round an exact value under this policy.

        Raises:
            ArithmeticError: if the mode is UNNECESSARY and precision rounding would change the value.
        """
        if self.precision:
            return round_significant(value, self.precision, self.mode or RoundingMode.HALF_UP)
        if self.mode is None or self.mode == RoundingMode.UNNECESSARY:
            return value
        if self.scale == 0 and value.denominator == 1:
            return value
        return round_fraction(value, self.scale, self.mode)


# Methods --------------------------------------------------------------------------------------------------------------

def as_numeric_value(
        value,
        *,
        on_error: Literal["raise", "none"] = "raise",
) -> NumericValue | None:
    """
    Tag a Python number with its NumericValue kind.

    Detection Priority:
        1. NumericValue as is
        2. bool is rejected
        3. Sized integer scalars (dtype.itemsize) → INT up to 4 bytes, LONG for 8, when in range
        4. int → narrowest integer kind
        5. float → DOUBLE
        6. Fraction and finite Decimal → RATIONAL, non-finite Decimal → DOUBLE
        7. Other __index__ types → narrowest integer kind
        8. Other __float__ types → DOUBLE

    Args:
        value: The number to tag.
        on_error: "raise" raises TypeError for unsupported types, "none" returns None.

    Returns:
        The tagged value, or None when value is None or unsupported with on_error="none".

    Raises:
        TypeError: If on_error="raise" and the type is unsupported.
    """
    if value is None:
        return None

    if isinstance(value, NumericValue):
        return value

    if isinstance(value, bool):
        return _type_error(value, on_error, "boolean values not supported")

    # Sized scalars, e.g. numpy.int8 or numpy.int64
    itemsize = getattr(getattr(value, "dtype", None), "itemsize", None)
    if isinstance(itemsize, int) and hasattr(value, "__index__"):
        try:
            as_int = operator.index(value)
        except (TypeError, ValueError) as e:
            return _type_error(value, on_error, f"cannot convert via __index__: {e}")
        if itemsize <= 4 and NumericConf.INT_MIN <= as_int <= NumericConf.INT_MAX:
            return NumericValue(NumberKind.INT, as_int)
        if itemsize == 8 and NumericConf.LONG_MIN <= as_int <= NumericConf.LONG_MAX:
            return NumericValue(NumberKind.LONG, as_int)
        return NumericValue.of_int(as_int)

    if isinstance(value, int):
        return NumericValue.of_int(value)

    if isinstance(value, float):
        return NumericValue(NumberKind.DOUBLE, value)

    if isinstance(value, Fraction):
        return NumericValue(NumberKind.RATIONAL, value)

    if isinstance(value, Decimal):
        if not value.is_finite():
            return NumericValue(NumberKind.DOUBLE, float(value))
        return NumericValue(NumberKind.RATIONAL, Fraction(value))

    if hasattr(value, '__index__'):
        try:
            return NumericValue.of_int(operator.index(value))
        except (TypeError, ValueError) as e:
            return _type_error(value, on_error, f"cannot convert via __index__: {e}")

    if hasattr(value, '__float__'):
        try:
            return NumericValue(NumberKind.DOUBLE, float(value))
        except (TypeError, ValueError) as e:
            return _type_error(value, on_error, f"cannot convert to float: {e}")

    return _type_error(value, on_error, "unsupported numeric type")


def is_double_value_exact(value: NumericValue | Fraction | Decimal | float | None) -> bool:
    """
    Check if converting a value to float loses no information.

    Infinite and NaN values are trivially exact; None is never exact.

    Examples:
        >>> is_double_value_exact(Fraction(21, 4))
        True
        >>> is_double_value_exact(Decimal("5.2"))
        False
    """
    if value is None:
        return False
    if isinstance(value, NumericValue):
        value = value.value
    if isinstance(value, float):
        return True
    if isinstance(value, Decimal):
        if not value.is_finite():
            return True
        value = Fraction(value)
    try:
        return Fraction(float(value)) == value
    except OverflowError:
        return False


def normalize(
        value,
        rounding: Rounding | None = None,
        reduce_type: bool = True,
) -> NumericValue | None:
    """
    Round a number and reduce it to its narrowest exact representation.

    Parameters
    ----------
    value : NumericValue, int, float, Fraction, Decimal or numeric scalar
        The number to normalize. Unsupported types give None.

    rounding : Rounding, optional
        Rounding policy. None or an inactive policy means no rounding.

    reduce_type : bool, default True
        If True, integral results are narrowed INT → LONG → BIG_INTEGER and
        fractional results become DOUBLE when that is exact. If False, the
        internal RATIONAL is returned, except that unrounded INT, DOUBLE, LONG,
        BIG_INTEGER and RATIONAL inputs are returned unchanged.

    Returns
    -------
    NumericValue or None
        None for None, unsupported types and arithmetic failures.

    Examples
    --------
    >>> normalize(2 ** 40)
    NumericValue(kind=<NumberKind.LONG: 'long'>, value=1099511627776)
    >>> normalize(Fraction(3, 2))
    NumericValue(kind=<NumberKind.DOUBLE: 'double'>, value=1.5)
    >>> normalize(Fraction(1, 3), Rounding.digits(3))
    NumericValue(kind=<NumberKind.RATIONAL: 'rational'>, value=Fraction(333, 1000))
    """
    number = as_numeric_value(value, on_error="none")
    if number is None:
        if value is not None:
            logger.debug("Unsupported numeric type {}: {!r}", type(value).__name__, value)
        return None

    rounding_active = rounding is not None and rounding.active

    if not rounding_active:
        if number.kind in (NumberKind.DOUBLE, NumberKind.INT):
            return number
        if not reduce_type:
            return number

    if number.kind == NumberKind.DOUBLE and not math.isfinite(number.value):
        return number

    try:
        fraction = number.as_fraction()
        if rounding_active:
            fraction = rounding.apply(fraction)
    except (ArithmeticError, ValueError) as e:
        logger.trace("Failed to normalize a {} value: {}", number.kind, e)
        return None

    return reduce_fraction(fraction, reduce_type, unreduced=NumberKind.RATIONAL)


def reduce_fraction(
        value: Fraction,
        reduce_type: bool = True,
        *,
        unreduced: Literal[NumberKind.RATIONAL, NumberKind.BIG_INTEGER] = NumberKind.RATIONAL,
) -> NumericValue:
    """
    Select the output kind of an exact value.

    Args:
        value: The exact value.
        reduce_type: Narrow the kind when True.
        unreduced: Kind of integral values when reduce_type is False; fractional
                   values are always RATIONAL then.
    """
    if not reduce_type:
        if unreduced == NumberKind.BIG_INTEGER and value.denominator == 1:
            return NumericValue(NumberKind.BIG_INTEGER, value.numerator)
        return NumericValue(NumberKind.RATIONAL, value)

    if value.denominator != 1:
        if is_double_value_exact(value):
            return NumericValue(NumberKind.DOUBLE, float(value))
        return NumericValue(NumberKind.RATIONAL, value)

    return NumericValue.of_int(value.numerator)


def round_fraction(value: Fraction, scale: int, mode: RoundingMode) -> Fraction:
    """
    Round to scale digits after the decimal point, or -scale digits before it.

    Raises:
        ArithmeticError: If mode is UNNECESSARY and the value needs rounding.

    Examples:
        round_fraction(Fraction(1535, 1000), 2, RoundingMode.HALF_EVEN) == Fraction(154, 100)
        round_fraction(Fraction(1250), -2, RoundingMode.HALF_EVEN) == 1200
    """
    factor = Fraction(10) ** scale
    return Fraction(_round_to_integer(value * factor, RoundingMode(mode))) / factor


def round_significant(value: Fraction, precision: int, mode: RoundingMode) -> Fraction:
    """
    Round to a number of significant digits.

    Decimal division is correctly rounded, so numerator / denominator under a context
    of the requested precision and mode is the exact rounded result.

    Raises:
        ArithmeticError: If mode is UNNECESSARY and the value needs rounding.
    """
    if precision < 1:
        raise ValueError(f"precision must be >= 1, got {precision}")
    mode = RoundingMode(mode)
    if value == 0:
        return value

    with decimal.localcontext() as ctx:
        ctx.prec = precision
        ctx.Emax = decimal.MAX_EMAX
        ctx.Emin = decimal.MIN_EMIN
        if mode == RoundingMode.UNNECESSARY:
            ctx.rounding = decimal.ROUND_HALF_EVEN
            ctx.traps[decimal.Inexact] = True
        else:
            ctx.rounding = str(mode)
        rounded = Decimal(value.numerator) / Decimal(value.denominator)

    return Fraction(rounded)


def _round_to_integer(value: Fraction, mode: RoundingMode) -> int:
    floor = value.numerator // value.denominator
    remainder = value - floor
    if remainder == 0:
        return floor

    positive = value > 0
    ceiling = floor + 1
    toward_zero = floor if positive else ceiling
    away_from_zero = ceiling if positive else floor

    match mode:
        case RoundingMode.UP:
            return away_from_zero
        case RoundingMode.DOWN:
            return toward_zero
        case RoundingMode.CEILING:
            return ceiling
        case RoundingMode.FLOOR:
            return floor
        case RoundingMode.UNNECESSARY:
            raise ArithmeticError("Rounding necessary")

    half = Fraction(1, 2)
    if remainder > half:
        return ceiling
    if remainder < half:
        return floor

    # Tie
    match mode:
        case RoundingMode.HALF_UP:
            return away_from_zero
        case RoundingMode.HALF_DOWN:
            return toward_zero
        case _:
            return floor if floor % 2 == 0 else ceiling


def _type_error(value, on_error: str, message: str) -> None:
    if on_error == "raise":
        raise TypeError(f"{message}: {type(value).__name__}")
    return None
