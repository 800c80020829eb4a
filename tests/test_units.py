#
# numunit - Unit Prefix Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
from fractions import Fraction

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from numunit.units import BINARY_STEPS, FORCE_CASE_SENSITIVE, PREFIXES_BY_SYMBOL, SI_STEPS, UnitPrefix


# Tests ----------------------------------------------------------------------------------------------------------------

class TestUnitPrefix:

    def test_matching_order(self):
        """Binary prefixes first, then SI from smallest to largest."""
        assert [p.name for p in UnitPrefix] == [
            "KIBI", "MEBI", "GIBI", "TEBI", "PEBI", "EXBI", "ZEBI", "YOBI",
            "YOCTO", "ZEPTO", "ATTO", "FEMTO", "PICO", "NANO", "MICRO", "MILLI", "CENTI", "DECI",
            "DECA", "HECTO", "KILO", "MEGA", "GIGA", "TERA", "PETA", "EXA", "ZETTA", "YOTTA",
        ]

    @pytest.mark.parametrize(
        "prefix, symbol, factor, factor_long, factor_big_integer, fractional",
        [
            pytest.param(UnitPrefix.KIBI, "Ki", Fraction(1024), 1024, 1024, False, id="kibi"),
            pytest.param(UnitPrefix.EXBI, "Ei", Fraction(2 ** 60), 2 ** 60, 2 ** 60, False, id="exbi"),
            pytest.param(UnitPrefix.ZEBI, "Zi", Fraction(2 ** 70), None, 2 ** 70, False, id="zebi"),
            pytest.param(UnitPrefix.YOBI, "Yi", Fraction(2 ** 80), None, 2 ** 80, False, id="yobi"),
            pytest.param(UnitPrefix.YOCTO, "y", Fraction(1, 10 ** 24), None, None, True, id="yocto"),
            pytest.param(UnitPrefix.DECI, "d", Fraction(1, 10), None, None, True, id="deci"),
            pytest.param(UnitPrefix.DECA, "da", Fraction(10), 10, 10, False, id="deca"),
            pytest.param(UnitPrefix.KILO, "k", Fraction(1000), 1000, 1000, False, id="kilo"),
            pytest.param(UnitPrefix.EXA, "E", Fraction(10 ** 18), 10 ** 18, 10 ** 18, False, id="exa"),
            pytest.param(UnitPrefix.ZETTA, "Z", Fraction(10 ** 21), None, 10 ** 21, False, id="zetta"),
        ],
    )
    def test_factors(self, prefix, symbol, factor, factor_long, factor_big_integer, fractional):
        assert prefix.symbol == symbol
        assert prefix.factor_rational == factor
        assert prefix.factor_long == factor_long
        assert prefix.factor_big_integer == factor_big_integer
        assert prefix.fractional is fractional
        assert prefix.is_long_valid is (factor_long is not None)
        assert prefix.is_big_integer_valid is (factor_big_integer is not None)

    def test_factor_views_agree(self):
        for prefix in UnitPrefix:
            if prefix.factor_big_integer is not None:
                assert prefix.factor_rational == prefix.factor_big_integer
            if prefix.factor_long is not None:
                assert prefix.factor_long == prefix.factor_big_integer

    def test_fractional_is_sub_unity(self):
        assert {p for p in UnitPrefix if p.fractional} == {p for p in UnitPrefix if p.factor_rational < 1}

    def test_micro_symbols(self):
        assert UnitPrefix.MICRO.symbol == "µ"
        assert UnitPrefix.MICRO.symbols == ("µ", "μ")

    @pytest.mark.parametrize(
        "symbol, prefix",
        [
            pytest.param("Ki", UnitPrefix.KIBI, id="Ki"),
            pytest.param("k", UnitPrefix.KILO, id="k"),
            pytest.param("M", UnitPrefix.MEGA, id="M"),
            pytest.param("m", UnitPrefix.MILLI, id="m"),
            pytest.param("µ", UnitPrefix.MICRO, id="micro-sign"),
            pytest.param("μ", UnitPrefix.MICRO, id="greek-mu"),
            pytest.param("da", UnitPrefix.DECA, id="da"),
        ],
    )
    def test_from_symbol(self, symbol, prefix):
        assert UnitPrefix.from_symbol(symbol) is prefix

    @pytest.mark.parametrize("symbol", ["K", "ki", "x", ""])
    def test_from_symbol_unknown(self, symbol):
        with pytest.raises(KeyError):
            UnitPrefix.from_symbol(symbol)

    def test_repr(self):
        assert repr(UnitPrefix.KIBI) == "<UnitPrefix.KIBI: 'Ki'>"


class TestPrefixTables:

    def test_by_symbol_immutable(self):
        with pytest.raises(TypeError):
            PREFIXES_BY_SYMBOL["x"] = UnitPrefix.KILO

    def test_by_symbol_complete(self):
        assert set(PREFIXES_BY_SYMBOL.values()) == set(UnitPrefix)
        assert all(PREFIXES_BY_SYMBOL)

    def test_force_case_sensitive(self):
        """Prefixes whose symbols collide case-insensitively with another prefix."""
        lowered = {}
        for prefix in UnitPrefix:
            for symbol in prefix.symbols:
                lowered.setdefault(symbol.lower(), set()).add(prefix)
        colliding = set().union(*(group for group in lowered.values() if len(group) > 1))
        assert colliding == FORCE_CASE_SENSITIVE

    def test_steps_ascending(self):
        for steps in (BINARY_STEPS, SI_STEPS):
            factors = [p.factor_big_integer for p in steps]
            assert factors == sorted(factors)
            assert len(steps) == 8
        assert BINARY_STEPS[0] is UnitPrefix.KIBI
        assert SI_STEPS[-1] is UnitPrefix.YOTTA
