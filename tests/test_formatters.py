#
# numunit - Formatter Tests
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest
from babel import Locale

# Local ----------------------------------------------------------------------------------------------------------------
from numunit.formatters import format_bytes

LONG_MAX = 2 ** 63 - 1
LONG_MIN = -(2 ** 63)


# Tests ----------------------------------------------------------------------------------------------------------------

class TestFormatBytes:

    @pytest.mark.parametrize(
        "count, binary, expected",
        [
            pytest.param(0, True, "0 bytes", id="zero"),
            pytest.param(1, True, "1 byte", id="one"),
            pytest.param(-1, True, "-1 byte", id="minus-one"),
            pytest.param(27, True, "27 bytes", id="small"),
            pytest.param(999, False, "999 bytes", id="si-below-kilo"),
            pytest.param(1000, False, "1 kB", id="si-kilo"),
            pytest.param(1000, True, "1000 bytes", id="binary-1000"),
            pytest.param(1023, True, "1023 bytes", id="binary-below-kibi"),
            pytest.param(1024, True, "1 KiB", id="binary-kibi"),
            pytest.param(1024, False, "1.0 kB", id="si-1024"),
            pytest.param(1050, False, "1.1 kB", id="si-half-up"),
            pytest.param(1536, True, "1.5 KiB", id="binary-1.5"),
            pytest.param(4097, True, "4.0 KiB", id="binary-4097"),
            pytest.param(153442, False, "153.4 kB", id="si-153442"),
            pytest.param(153442, True, "149.8 KiB", id="binary-153442"),
            pytest.param(634153442, False, "634.2 MB", id="si-634153442"),
            pytest.param(634153442, True, "604.8 MiB", id="binary-634153442"),
            pytest.param(600 * 2 ** 20, True, "600 MiB", id="binary-exact-mebi"),
            pytest.param(1426453442, False, "1.4 GB", id="si-1426453442"),
            pytest.param(1426453442, True, "1.3 GiB", id="binary-1426453442"),
            pytest.param(2 ** 31 - 1, False, "2.1 GB", id="si-int-max"),
            pytest.param(2 ** 31 - 1, True, "2.0 GiB", id="binary-int-max"),
            pytest.param(2 ** 31, True, "2 GiB", id="binary-int-max+1"),
            pytest.param(-(2 ** 31), False, "-2.1 GB", id="si-int-min"),
            pytest.param(-(2 ** 31), True, "-2 GiB", id="binary-int-min"),
            pytest.param(568426453442, False, "568.4 GB", id="si-568426453442"),
            pytest.param(568426453442, True, "529.4 GiB", id="binary-568426453442"),
            pytest.param(8568426453442, False, "8.6 TB", id="si-8568426453442"),
            pytest.param(8568426453442, True, "7.8 TiB", id="binary-8568426453442"),
            pytest.param(LONG_MAX, False, "9.2 EB", id="si-long-max"),
            pytest.param(LONG_MAX, True, "8.0 EiB", id="binary-long-max"),
            pytest.param(LONG_MIN + 1, False, "-9.2 EB", id="si-long-min+1"),
            pytest.param(LONG_MIN + 1, True, "-8.0 EiB", id="binary-long-min+1"),
            pytest.param(LONG_MIN, False, "-9.2 EB", id="si-long-min"),
            pytest.param(LONG_MIN, True, "-8 EiB", id="binary-long-min"),
            pytest.param(2 ** 80, True, "1 YiB", id="binary-yobi"),
            pytest.param(10 ** 24, False, "1 YB", id="si-yotta"),
            pytest.param(2 ** 90, True, "1024 YiB", id="binary-beyond-yobi"),
            pytest.param(15 * 10 ** 26, False, "1500 YB", id="si-beyond-yotta"),
        ],
    )
    def test_format(self, count, binary, expected):
        assert format_bytes(count, binary) == expected

    @pytest.mark.parametrize(
        "count, binary, locale, expected",
        [
            pytest.param(4097, False, "de", "4,1 kB", id="de-si"),
            pytest.param(-153442, True, "de", "-149,8 KiB", id="de-binary"),
            pytest.param(1024, True, "de", "1 KiB", id="de-exact"),
            pytest.param(1536, True, "en_US", "1.5 KiB", id="en"),
            pytest.param(1536, True, Locale("fr"), "1,5 KiB", id="fr-locale"),
        ],
    )
    def test_locale(self, count, binary, locale, expected):
        assert format_bytes(count, binary, locale) == expected

    def test_sign_symmetry(self):
        for count in (1, 1023, 1536, 153442, 2 ** 40 + 1, LONG_MAX):
            for binary in (True, False):
                assert format_bytes(-count, binary) == "-" + format_bytes(count, binary)

    @pytest.mark.parametrize(
        "count",
        [
            pytest.param(1.5, id="float"),
            pytest.param(True, id="bool"),
            pytest.param("1024", id="str"),
            pytest.param(None, id="none"),
        ],
    )
    def test_not_int(self, count):
        with pytest.raises(TypeError):
            format_bytes(count)

    def test_unknown_locale(self):
        with pytest.raises(ValueError):
            format_bytes(1536, locale="zz")

