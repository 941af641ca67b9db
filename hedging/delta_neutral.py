"""
Delta neutral portfolio: an initial share position hedged with options.
"""
from typing import List, Dict, Optional
import logging

from rdp.fields import IPAFields
from hedging.ipa_option import IPAOption, parse_date
from hedging.position import Position
from hedging.tables import MarkdownTable

logger = logging.getLogger(__name__)


class DeltaNeutral:
    """
    Maintains a portfolio of positions and sizes new option legs so that the
    net position delta approaches a target exposure.
    """

    def __init__(
        self,
        ipa_option: IPAOption,
        underlying: str,
        underlying_price: float,
        shares: int = 500
    ):
        """
        Initialize the portfolio with a long share position.

        Args:
            ipa_option: Pricer used to retrieve option deltas
            underlying: Underlying instrument code
            underlying_price: Last price of the underlying
            shares: Number of shares held
        """
        self.ipa_option = ipa_option
        self.portfolio: List[Position] = [
            Position(
                instrument=underlying,
                underlying=underlying,
                underlying_price=underlying_price,
                type='Long Shares',
                delta_pct=1.0,
                contracts=shares
            )
        ]

    def update_portfolio(self, otc_option: Dict):
        """
        Price an OTC option and add it to the portfolio, or update the
        existing position with the same instrument tag, then rebalance.

        Args:
            otc_option: Definition built with IPAOption.define_otc
        """
        options = self.ipa_option.price_options(otc_option)

        if options:
            data = options[0]

            buy_sell = otc_option.get('instrumentDefinition', {}).get('buySell')
            expiry = parse_date(data[IPAFields.END_DATE])
            days = (expiry - parse_date(data[IPAFields.VALUATION_DATE])).days
            key = data[IPAFields.INSTRUMENT_TAG]
            call_put = str(data[IPAFields.EXERCISE_TYPE])
            position_type = f"{days}d {'Long' if buy_sell == 'Buy' else 'Short'} {call_put}"
            delta_pct = float(data[IPAFields.DELTA_PERCENT])

            position = self.find_position(key)
            if position is None:
                underlying = data[IPAFields.UNDERLYING_RIC]
                strike = float(data[IPAFields.STRIKE_PRICE])

                position = Position(
                    key=key,
                    underlying=underlying,
                    instrument=f"OTC:{underlying}.{call_put[0]}{strike:08.2f}",
                    type=position_type,
                    exercise_style=data[IPAFields.EXERCISE_STYLE],
                    strike=strike,
                    expiry=expiry,
                    buy_sell=buy_sell,
                    call_put=call_put,
                    delta_pct=delta_pct,
                    underlying_price=float(data.get(IPAFields.UNDERLYING_PRICE) or 0.0),
                    option_price=data.get(IPAFields.OPTION_PRICE),
                    days_to_expire=days,
                    contracts=0
                )
                self.portfolio.append(position)
                logger.info(f"Added position {key}: {position.instrument} delta={delta_pct}")
            else:
                position.type = position_type
                position.delta_pct = delta_pct
                logger.info(f"Updated position {key}: {position_type} delta={delta_pct}")
        else:
            logger.warning("No priced option returned, portfolio unchanged")

        self.balance_positions(0)

    def balance_positions(self, exposure: float):
        """
        Size the legs that have no contracts yet.

        Single pass in portfolio order. A sized leg adds its delta to the
        running initial position. An unsized leg takes an even share of the
        running initial position over the legs not counted as sized so far,
        scaled by (1 - exposure). Unsized legs earlier in the portfolio are
        not included in the running total seen by later ones.

        Args:
            exposure: Fraction of the initial delta to leave unhedged (0 = neutral)
        """
        initial_position = 0
        positions = 0

        for position in self.portfolio:
            if position.is_sized:
                multiplier = 100 if abs(position.delta_pct) < 1 else 1
                position.delta = int(position.delta_pct * position.contracts * multiplier)
                initial_position += position.delta
                positions += 1
            else:
                if position.delta_pct == 0:
                    logger.warning(f"Position {position.key} has zero delta, cannot size it")
                    position.delta = 0
                    continue

                contract_position = (initial_position * (1 - exposure)) / (len(self.portfolio) - positions)
                contracts = abs(round(contract_position / (position.delta_pct * 100)))
                position.contracts = int(contracts)
                position.delta = int(round(position.delta_pct * contracts * 100))
                logger.debug(f"Sized {position.key}: {position.contracts} contract(s), delta {position.delta}")

    def model_position(self, key: str, underlying_price: float, days_in_future: int):
        """
        Re-price an existing option position at a different underlying price
        and valuation date.

        Args:
            key: Instrument tag of the position
            underlying_price: Simulated underlying price
            days_in_future: Days from now for the valuation date
        """
        position = self.find_position(key)
        if position is None:
            logger.warning(f"No position found for {key}, nothing to model")
            return

        self.update_portfolio(IPAOption.define_otc(
            key,
            position.buy_sell,
            position.call_put,
            position.underlying,
            underlying_price,
            position.strike,
            position.days_to_expire,
            position.exercise_style,
            days_in_future
        ))

    def find_position(self, key: str) -> Optional[Position]:
        for position in self.portfolio:
            if position.key is not None and position.key == key:
                return position
        return None

    @property
    def net_delta(self) -> int:
        return sum(position.delta for position in self.portfolio)

    def display_portfolio(self):
        table = MarkdownTable("Instrument", "Close", "Shares", "Position", "Delta")

        for position in self.portfolio:
            table.add_row(position.instrument, position.underlying_price, position.contracts,
                          position.type, position.delta_pct)

        table.write()

    def display_positions(self, title: str):
        table = MarkdownTable("Instrument", "Strike", "Position", "Delta", "Contracts Traded", "Position Delta")

        for position in self.portfolio:
            table.add_row(position.instrument, position.strike_str, position.type,
                          position.delta_pct_str, position.contracts, position.delta)

        # Summary
        table.add_row("", "", "", "", "", "______________")
        table.add_row("", "", "", "", "Net Position Delta", self.net_delta)

        print(f"\n{title}\n")
        table.write()

    def __len__(self) -> int:
        return len(self.portfolio)
