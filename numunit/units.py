#
# numunit Unit Prefixes
#

# Standard library -----------------------------------------------------------------------------------------------------
from enum import Enum, unique
from fractions import Fraction
from typing import Mapping, Self

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from .numeric import NumericConf


# Classes --------------------------------------------------------------------------------------------------------------

# @formatter:off
@unique
class UnitPrefix(Enum):
    """
    Binary and SI unit prefixes.

    Declaration order is the matching order of prefix stripping: the first prefix
    whose symbol starts a unit wins.

    Attributes:
        symbol (str)            : Prefix symbol, e.g. "Ki" or "k"
        aliases (tuple[str])    : Alternative symbols accepted when matching
        factor_rational         : Exact scale factor as Fraction
        factor_long             : Factor as int if it fits a signed 64-bit integer, None otherwise
        factor_big_integer      : Factor as int if integral, None otherwise
        fractional (bool)       : True for sub-unity prefixes (deci and below)
    """
    KIBI  = ("Ki", 1024 ** 1)
    MEBI  = ("Mi", 1024 ** 2)
    GIBI  = ("Gi", 1024 ** 3)
    TEBI  = ("Ti", 1024 ** 4)
    PEBI  = ("Pi", 1024 ** 5)
    EXBI  = ("Ei", 1024 ** 6)
    ZEBI  = ("Zi", 1024 ** 7)
    YOBI  = ("Yi", 1024 ** 8)
    YOCTO = ("y",  Fraction(1, 10 ** 24))
    ZEPTO = ("z",  Fraction(1, 10 ** 21))
    ATTO  = ("a",  Fraction(1, 10 ** 18))
    FEMTO = ("f",  Fraction(1, 10 ** 15))
    PICO  = ("p",  Fraction(1, 10 ** 12))
    NANO  = ("n",  Fraction(1, 10 ** 9))
    MICRO = ("µ",  Fraction(1, 10 ** 6), ("μ",))
    MILLI = ("m",  Fraction(1, 10 ** 3))
    CENTI = ("c",  Fraction(1, 10 ** 2))
    DECI  = ("d",  Fraction(1, 10 ** 1))
    DECA  = ("da", 10 ** 1)
    HECTO = ("h",  10 ** 2)
    KILO  = ("k",  10 ** 3)
    MEGA  = ("M",  10 ** 6)
    GIGA  = ("G",  10 ** 9)
    TERA  = ("T",  10 ** 12)
    PETA  = ("P",  10 ** 15)
    EXA   = ("E",  10 ** 18)
    ZETTA = ("Z",  10 ** 21)
    YOTTA = ("Y",  10 ** 24)
# @formatter:on

    def __init__(self, symbol: str, factor: int | Fraction, aliases: tuple[str, ...] = ()):
        self.symbol = symbol
        self.aliases = aliases
        self.factor_rational = Fraction(factor)
        self.fractional = self.factor_rational < 1

        if self.factor_rational.denominator == 1:
            self.factor_big_integer = self.factor_rational.numerator
        else:
            self.factor_big_integer = None

        if (self.factor_big_integer is not None
                and NumericConf.LONG_MIN <= self.factor_big_integer <= NumericConf.LONG_MAX):
            self.factor_long = self.factor_big_integer
        else:
            self.factor_long = None

    @classmethod
    def from_symbol(cls, symbol: str) -> Self:
        """
        Lookup a prefix by its symbol or alias, case-sensitive.

        Raises:
            KeyError: If no prefix has this symbol.
        """
        return PREFIXES_BY_SYMBOL[symbol]

    @property
    def is_long_valid(self) -> bool:
        """True if the factor fits a signed 64-bit integer."""
        return self.factor_long is not None

    @property
    def is_big_integer_valid(self) -> bool:
        """True if the factor is integral."""
        return self.factor_big_integer is not None

    @property
    def symbols(self) -> tuple[str, ...]:
        """Symbol followed by its aliases; empty symbols are left out."""
        return tuple(s for s in (self.symbol, *self.aliases) if s)

    def __repr__(self):
        return f"<{type(self).__name__}.{self.name}: {self.symbol!r}>"


# @formatter:off

PREFIXES_BY_SYMBOL: Mapping[str, UnitPrefix] = frozendict(
    (symbol, prefix) for prefix in UnitPrefix for symbol in prefix.symbols
)

# Prefixes matched case-sensitively whenever fractional prefixes are allowed,
# their symbols differ from another prefix only by case: M/m, P/p, Z/z, Y/y
FORCE_CASE_SENSITIVE = frozenset({
    UnitPrefix.MEGA, UnitPrefix.MILLI, UnitPrefix.PICO, UnitPrefix.PETA,
    UnitPrefix.ZEPTO, UnitPrefix.ZETTA, UnitPrefix.YOCTO, UnitPrefix.YOTTA,
})

BINARY_STEPS = (
    UnitPrefix.KIBI, UnitPrefix.MEBI, UnitPrefix.GIBI, UnitPrefix.TEBI,
    UnitPrefix.PEBI, UnitPrefix.EXBI, UnitPrefix.ZEBI, UnitPrefix.YOBI,
)

SI_STEPS = (
    UnitPrefix.KILO, UnitPrefix.MEGA, UnitPrefix.GIGA, UnitPrefix.TERA,
    UnitPrefix.PETA, UnitPrefix.EXA, UnitPrefix.ZETTA, UnitPrefix.YOTTA,
)

# @formatter:on


# Module Sanity Checks -------------------------------------------------------------------------------------------------

# Every symbol and alias must identify exactly one prefix.
if len(PREFIXES_BY_SYMBOL) != sum(len(p.symbols) for p in UnitPrefix):
    raise AssertionError(
        "Configuration Error: Unit prefix symbols and aliases must be unique."
    )
