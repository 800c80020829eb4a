"""
Human-readable formatting of byte counts.

The inverse of prefix parsing: a byte count is scaled by the largest binary
(KiB, MiB, ...) or SI (kB, MB, ...) step that does not exceed it.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from fractions import Fraction

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale

# Local ----------------------------------------------------------------------------------------------------------------
from .grammar import decimal_separator
from .numeric import RoundingMode, round_fraction
from .units import BINARY_STEPS, SI_STEPS


# Methods --------------------------------------------------------------------------------------------------------------

def format_bytes(count: int, binary: bool = True, locale: Locale | str | None = None) -> str:
    """
    Format a byte count with a binary or SI prefix.

    Counts below one KiB (binary) or kB (SI) are shown as a plain number of bytes.
    Larger counts are divided by the largest step not exceeding their magnitude and
    shown as an integer when the division is exact, otherwise rounded half-up to one
    decimal digit. The sign stays in front of the number.

    Args:
        count: Number of bytes, may be negative.
        binary: Use powers of 1024 (KiB, MiB, ...) if True, powers of 1000 (kB, MB, ...) otherwise.
        locale: Locale of the decimal separator, "." if None.

    Returns:
        The formatted count, e.g. "1 byte", "1023 bytes", "1 KiB", "1.5 KiB" or "4,1 kB".

    Raises:
        TypeError: If count is not an int.
        ValueError: If the locale is unknown.

    Examples:
        >>> format_bytes(1536)
        '1.5 KiB'
        >>> format_bytes(-2 ** 63, binary=False)
        '-9.2 EB'
        >>> format_bytes(4097, binary=False, locale="de")
        '4,1 kB'
    """
    if not isinstance(count, int) or isinstance(count, bool):
        raise TypeError(f"count must be int, got {type(count).__name__}")

    separator = decimal_separator(locale)
    steps = BINARY_STEPS if binary else SI_STEPS
    magnitude = abs(count)

    if magnitude < steps[0].factor_big_integer:
        return f"{count} {'byte' if magnitude == 1 else 'bytes'}"

    prefix = steps[0]
    for step in steps[1:]:
        if step.factor_big_integer > magnitude:
            break
        prefix = step

    sign = "-" if count < 0 else ""
    factor = prefix.factor_big_integer
    unit = f"{prefix.symbol}B"

    if magnitude % factor == 0:
        return f"{sign}{magnitude // factor} {unit}"

    tenths = int(round_fraction(Fraction(magnitude, factor), 1, RoundingMode.HALF_UP) * 10)
    return f"{sign}{tenths // 10}{separator}{tenths % 10} {unit}"
