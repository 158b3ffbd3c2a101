import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from postmock.generator.random_source import RandomSource
from postmock.server.delay import apply_delay, parse_delay, validate_delay_range


class FixedSource(RandomSource):
    def __init__(self, r: float):
        super().__init__(seed=0)
        self.r = r

    def random(self) -> float:
        return self.r


class TestParseDelay:
    @pytest.mark.parametrize("spec,expected", [
        ("0", (0, 0)),
        ("250", (250, 250)),
        ("100-300", (100, 300)),
        ("-100", (0, 0)),
        ("-100-200", (0, 0)),
        ("abc", (0, 0)),
        ("100-abc", (100, 0)),
        ("100-200-300", (100, 200)),
        ("-", (0, 0)),
        ("", (0, 0)),
        (None, (0, 0)),
        (150, (150, 150)),
    ])
    def test_parse(self, spec, expected):
        assert parse_delay(spec) == expected


class TestValidateDelayRange:
    @pytest.mark.parametrize("spec", ["0", "10", "100-300", "5-5", "100-200-300"])
    def test_valid(self, spec):
        assert validate_delay_range(spec) == spec

    @pytest.mark.parametrize("spec", ["-5", "300-100", "a-b", "abc"])
    def test_invalid(self, spec):
        with pytest.raises(ValueError):
            validate_delay_range(spec)


class TestApplyDelay:
    def test_zero_does_not_sleep(self):
        with patch("postmock.server.delay.asyncio.sleep", new=AsyncMock()) as sleep:
            assert asyncio.run(apply_delay("0")) == 0
        sleep.assert_not_called()

    def test_fixed_delay(self):
        with patch("postmock.server.delay.asyncio.sleep", new=AsyncMock()) as sleep:
            assert asyncio.run(apply_delay("250")) == 250
        sleep.assert_awaited_once_with(0.25)

    @pytest.mark.parametrize("r,expected", [(0.0, 100), (0.999, 300)])
    def test_range_bounds(self, r, expected):
        with patch("postmock.server.delay.asyncio.sleep", new=AsyncMock()) as sleep:
            assert asyncio.run(apply_delay("100-300", FixedSource(r))) == expected
        sleep.assert_awaited_once_with(expected / 1000)

    def test_real_sleep_is_short(self):
        assert asyncio.run(apply_delay("1-2")) in (1, 2)
