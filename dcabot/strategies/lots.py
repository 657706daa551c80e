"""Round-lot / odd-lot decomposition for liquidating holdings.

The venue lists the odd-lot remainder of a holding as a separate instrument
whose identifier is the round-lot identifier plus a fixed suffix
(``XYZ`` / ``XYZF``). A holding reported under the odd-lot identifier cannot
be closed in one call; it has to be sold as whole lots of the base symbol
plus the remainder on the odd-lot symbol.

Detection is purely by suffix. A base ticker that happens to end in the
suffix (``DEF`` with suffix ``F``) is taken for the odd-lot line of ``DE``.
Venues where that can happen need a suffix no listed ticker ends in
(for example ``.F``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from dcabot.broker.base import OpenPosition
from dcabot.strategies.base import Signal


@dataclass(frozen=True)
class LotSplit:
    multiples: int
    remainder: float
    lot_size: int = 100

    @property
    def round_lot_volume(self) -> int:
        return self.multiples * self.lot_size


@dataclass(frozen=True)
class LotConvention:
    suffix: str = "F"
    lot_size: int = 100

    def __post_init__(self):
        if not self.suffix:
            raise ValueError("Fractional suffix must not be empty")
        if self.lot_size <= 0:
            raise ValueError(f"Invalid lot size: {self.lot_size}")

    def is_fractional(self, symbol: str) -> bool:
        return len(symbol) > len(self.suffix) and symbol.endswith(self.suffix)

    def base_symbol(self, symbol: str) -> str:
        if self.is_fractional(symbol):
            return symbol[: -len(self.suffix)]
        return symbol

    def fractional_symbol(self, symbol: str) -> str:
        return self.base_symbol(symbol) + self.suffix

    def split(self, volume: float) -> LotSplit:
        if volume < 0:
            raise ValueError(f"Negative volume: {volume}")
        multiples = math.floor(volume / self.lot_size)
        remainder = volume - multiples * self.lot_size
        return LotSplit(multiples=multiples, remainder=remainder, lot_size=self.lot_size)


class LotResolver:

    def __init__(self, convention: LotConvention | None = None):
        self.convention = convention or LotConvention()

    def resolve(self, position: OpenPosition) -> list[Signal]:
        """Turn one open position into the sell signals that flatten it."""
        symbol = position.symbol
        if not self.convention.is_fractional(symbol):
            return [Signal(
                symbol=symbol,
                side="CLOSE",
                quantity=position.volume,
                reason=f"Close {symbol} position",
            )]

        split = self.convention.split(position.volume)
        signals = []
        if split.multiples > 0:
            base = self.convention.base_symbol(symbol)
            signals.append(Signal(
                symbol=base,
                side="SELL",
                quantity=split.round_lot_volume,
                reason=f"Sell {split.multiples} round lot(s) of {base}",
            ))
        if split.remainder > 0:
            signals.append(Signal(
                symbol=symbol,
                side="SELL",
                quantity=split.remainder,
                reason=f"Sell odd-lot remainder of {symbol}",
            ))
        return signals
