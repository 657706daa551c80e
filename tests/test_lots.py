"""LotConvention/LotResolver 테스트: 단주 종목 판별, 정규/단주 분해."""

from __future__ import annotations

import pytest

from dcabot.broker.base import OpenPosition
from dcabot.strategies.lots import LotConvention, LotResolver


def test_fractional_symbol_detection():
    conv = LotConvention()
    assert conv.is_fractional("XYZF")
    assert not conv.is_fractional("XYZ")
    # 접미사 자체만으로는 단주 종목이 아님
    assert not conv.is_fractional("F")
    assert conv.base_symbol("XYZF") == "XYZ"
    assert conv.base_symbol("XYZ") == "XYZ"
    assert conv.fractional_symbol("XYZ") == "XYZF"
    assert conv.fractional_symbol("XYZF") == "XYZF"


def test_base_ticker_ending_in_suffix_is_treated_as_odd_lot():
    """접미사로 끝나는 정규 종목(DEF)은 DE의 단주로 해석됨. 구분이 필요하면 다른 접미사 사용."""
    conv = LotConvention()
    assert conv.is_fractional("DEF")
    assert conv.base_symbol("DEF") == "DE"
    signals = LotResolver(conv).resolve(OpenPosition(symbol="DEF", volume=150))
    assert [(s.side, s.symbol, s.quantity) for s in signals] == [("SELL", "DE", 100), ("SELL", "DEF", 50)]

    dotted = LotConvention(suffix=".F")
    assert not dotted.is_fractional("DEF")
    assert dotted.is_fractional("DEF.F")
    [close] = LotResolver(dotted).resolve(OpenPosition(symbol="DEF", volume=150))
    assert (close.side, close.symbol) == ("CLOSE", "DEF")


@pytest.mark.parametrize(
    "volume, multiples, remainder",
    [(250, 2, 50), (100, 1, 0), (99, 0, 99), (0, 0, 0), (1234.5, 12, 34.5)],
)
def test_split_recomposes_volume(volume, multiples, remainder):
    split = LotConvention().split(volume)
    assert split.multiples == multiples
    assert split.remainder == pytest.approx(remainder)
    assert split.round_lot_volume + split.remainder == pytest.approx(volume)
    assert 0 <= split.remainder < 100


def test_split_negative_volume_raises():
    with pytest.raises(ValueError, match="Negative volume"):
        LotConvention().split(-1)


def test_invalid_convention_raises():
    with pytest.raises(ValueError):
        LotConvention(suffix="")
    with pytest.raises(ValueError):
        LotConvention(lot_size=0)


def test_resolve_round_lot_symbol_closes_position():
    signals = LotResolver().resolve(OpenPosition(symbol="XYZ", volume=300))
    assert len(signals) == 1
    assert signals[0].side == "CLOSE"
    assert signals[0].symbol == "XYZ"


def test_resolve_fractional_position_splits_into_two_sells():
    """250주 XYZF → XYZ 200주 + XYZF 50주."""
    signals = LotResolver().resolve(OpenPosition(symbol="XYZF", volume=250))
    assert [(s.side, s.symbol, s.quantity) for s in signals] == [
        ("SELL", "XYZ", 200),
        ("SELL", "XYZF", 50),
    ]


def test_resolve_fractional_position_below_one_lot():
    signals = LotResolver().resolve(OpenPosition(symbol="XYZF", volume=37))
    assert [(s.symbol, s.quantity) for s in signals] == [("XYZF", 37)]


def test_resolve_fractional_position_exact_lots():
    signals = LotResolver().resolve(OpenPosition(symbol="XYZF", volume=300))
    assert [(s.symbol, s.quantity) for s in signals] == [("XYZ", 300)]


def test_custom_suffix_and_lot_size():
    resolver = LotResolver(LotConvention(suffix=".OL", lot_size=10))
    signals = resolver.resolve(OpenPosition(symbol="ABC.OL", volume=25))
    assert [(s.symbol, s.quantity) for s in signals] == [("ABC", 20), ("ABC.OL", 5)]
