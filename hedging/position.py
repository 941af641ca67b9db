"""
Position held in a delta hedging portfolio.
"""
from typing import Optional
from dataclasses import dataclass
from datetime import datetime


@dataclass
class Position:
    """
    One leg of the portfolio: either underlying shares or an option.

    Attributes:
        key: Instrument tag identifying an option leg (None for shares)
        instrument: Display name, e.g. 'AAPL.O' or 'OTC:AAPL.O.C00141.94'
        buy_sell: 'Buy' or 'Sell'
        call_put: 'CALL' or 'PUT'
        exercise_style: 'EURO' or 'AMER'
        type: Human readable position, e.g. 'Long Shares' or '360d Short CALL'
        delta_pct: Delta per share (1.0 for shares)
        contracts: Shares held, or option contracts traded (0 = not sized yet)
        delta: Signed position delta in shares
        strike: Strike price (0 for shares)
        expiry: Option end date
        underlying: Underlying instrument code
        underlying_price: Underlying price when the position was taken
        option_price: Last priced option premium
        days_to_expire: Days between valuation and end date when first priced
    """
    instrument: str
    type: str
    delta_pct: float
    contracts: int = 0
    key: Optional[str] = None
    buy_sell: Optional[str] = None
    call_put: Optional[str] = None
    exercise_style: Optional[str] = None
    delta: int = 0
    strike: float = 0.0
    expiry: Optional[datetime] = None
    underlying: Optional[str] = None
    underlying_price: float = 0.0
    option_price: Optional[float] = None
    days_to_expire: int = 0

    @property
    def is_sized(self) -> bool:
        """Check if contracts have been assigned to this leg."""
        return self.contracts > 0

    @property
    def strike_str(self) -> str:
        """Strike with up to 3 decimals, blank for shares."""
        if self.strike > 0:
            return f"{self.strike:.3f}".rstrip('0').rstrip('.')
        return ""

    @property
    def delta_pct_str(self) -> str:
        return f"{self.delta_pct:.3f}".rstrip('0').rstrip('.')

    def __str__(self) -> str:
        return f"{self.contracts} {self.instrument} ({self.type}) delta={self.delta}"
