"""
Option chain retrieval and constituent filtering.

A chain constituent uses the following format:

    <root><month code><day><year><strike>.<suffix>

    root        - Root of the underlying, e.g. AAPL
    month code  - Single character expiration month code, e.g. 'D' (April Call)
    day         - 2 digit expiration day, e.g. 15
    year        - 2 digit expiration year, e.g. 21 (2021)
    strike      - 5 digit strike, price x 100, e.g. 25500 (255.00)

Example: AAPLD152125500.U
"""
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

from rdp.fields import PricingFields, IPAFields
from hedging.ipa_option import parse_date
from hedging.tables import MarkdownTable

logger = logging.getLogger(__name__)

# month code + day + year + strike
CONSTITUENT_SUFFIX_LENGTH = 10


class OptionType(Enum):
    NONE = 'NONE'
    CALL = 'CALL'
    PUT = 'PUT'


# 'A'-'L' are calls for January-December, 'M'-'X' puts for January-December
MONTH_CODES: Dict[str, Tuple[int, OptionType]] = {
    **{chr(ord('A') + i): (i + 1, OptionType.CALL) for i in range(12)},
    **{chr(ord('M') + i): (i + 1, OptionType.PUT) for i in range(12)},
}


@dataclass(frozen=True)
class ContractSymbol:
    """Decoded option chain constituent."""
    symbol: str
    root: str
    month_code: str
    month: int
    day: str
    year: str
    strike: float
    option_type: OptionType

    @property
    def is_call(self) -> bool:
        return self.option_type == OptionType.CALL

    @property
    def is_put(self) -> bool:
        return self.option_type == OptionType.PUT


def month_code(code: str) -> Tuple[int, OptionType]:
    """
    Decode an expiration month code.

    Returns:
        (month, option type), or (0, OptionType.NONE) for an unknown code
    """
    return MONTH_CODES.get(code, (0, OptionType.NONE))


def parse_constituent(constituent: str, root: str) -> Optional[ContractSymbol]:
    """
    Parse a chain constituent into its parts.

    Args:
        constituent: Constituent symbol, e.g. 'AAPLD152125500.U'
        root: Root of the underlying, e.g. 'AAPL'

    Returns:
        ContractSymbol, or None if the root is missing, the month code is
        unknown or the year/strike fields are not numeric
    """
    index = constituent.find(root)
    if index < 0:
        logger.debug(f"Root '{root}' not found in constituent '{constituent}'")
        return None
    index += len(root)

    fields = constituent[index:index + CONSTITUENT_SUFFIX_LENGTH]
    if len(fields) < CONSTITUENT_SUFFIX_LENGTH:
        return None

    code = fields[0]
    day = fields[1:3]
    year = fields[3:5]
    strike_str = fields[5:10]

    month, option_type = month_code(code)
    if option_type == OptionType.NONE:
        return None

    if not year.isdigit() or not strike_str.isdigit():
        logger.debug(f"Non numeric year/strike in constituent '{constituent}'")
        return None

    return ContractSymbol(
        symbol=constituent,
        root=root,
        month_code=code,
        month=month,
        day=day,
        year=year,
        strike=int(strike_str) / 100,
        option_type=option_type
    )


def expiry_code(expiry: date) -> str:
    """Year without century (no padding) followed by the zero padded month, e.g. 2104."""
    return f"{expiry.year % 100}{expiry.month:02d}"


def keep_constituent(
    constituent: str,
    root: str,
    expiry: date,
    underlying_price: float,
    variance: float
) -> OptionType:
    """
    Determine whether a constituent matches the expiry and is Around-The-Money.

    Puts are kept when the strike lies in [price - variance, price], calls
    when it lies in [price, price + variance].

    Returns:
        The constituent's option type if kept, OptionType.NONE otherwise
    """
    contract = parse_constituent(constituent, root)
    if contract is None:
        return OptionType.NONE

    if expiry_code(expiry) != f"{contract.year}{contract.month:02d}":
        return OptionType.NONE

    strike = contract.strike
    if contract.is_put:
        if strike > underlying_price or strike < underlying_price - variance:
            return OptionType.NONE
    elif contract.is_call:
        if strike < underlying_price or strike > underlying_price + variance:
            return OptionType.NONE

    return contract.option_type


class OptionChain:
    """
    Retrieves an option chain and filters its constituents by expiry and
    strike.

    Attributes:
        underlying: First constituent of the last chain requested
        underlying_price: Last price of the underlying (0.0 if unavailable)
        root: Root symbol derived from the underlying
    """

    def __init__(self, client: 'RDPClient'):
        self.client = client
        self.underlying: Optional[str] = None
        self.underlying_price: float = 0.0
        self.root: Optional[str] = None

    def _reset(self):
        self.underlying = None
        self.underlying_price = 0.0
        self.root = None

    def get_contracts(self, chain: str, pct_around_money: float, expiry: date) -> List[str]:
        """
        Retrieve the chain and keep the constituents expiring in the month of
        `expiry` whose strike is within `pct_around_money` of the underlying.

        Args:
            chain: Chain identifier, e.g. '0#AAPL*.U'
            pct_around_money: Strike band as a fraction of the underlying price
            expiry: Target expiry (only year and month are used)

        Returns:
            Kept puts followed by kept calls, each in chain order
        """
        self._reset()
        calls: List[str] = []
        puts: List[str] = []

        response = self.client.get_chain(chain)
        if not response:
            logger.warning(f"No response for chain {chain}")
            return []

        constituents = (response.get('data') or {}).get('constituents') or []

        for constituent in constituents:
            constituent = str(constituent)

            # The first constituent is the underlying, use it to extract the root
            if self.root is None:
                self.underlying = constituent
                if '.' not in constituent:
                    logger.warning(f"Specified chain item {chain} may not be an Option chain.  Ignoring.")
                    break
                self.root = constituent.split('.')[0]
                self.underlying_price = self.get_price(self.underlying)
                continue

            if len(constituent) < len(self.root) + CONSTITUENT_SUFFIX_LENGTH:
                logger.warning(f"Specified chain item {chain} may not be an Option chain.  Ignoring.")
                break

            variance = self.underlying_price * pct_around_money

            option_type = keep_constituent(constituent, self.root, expiry, self.underlying_price, variance)
            if option_type == OptionType.CALL:
                calls.append(constituent)
            elif option_type == OptionType.PUT:
                puts.append(constituent)

        logger.info(f"Kept {len(puts)} put(s) and {len(calls)} call(s) from chain {chain}")
        return puts + calls

    def get_price(self, ric: str) -> float:
        """
        Retrieve the last trade price for `ric`, falling back to the
        historical close. Returns 0.0 when neither is available.
        """
        snapshot = self.client.get_snapshot(ric, PricingFields.LAST_OR_CLOSE)
        if not snapshot:
            return 0.0

        value = snapshot.get(PricingFields.LAST_PRICE)
        if value is None:
            value = snapshot.get(PricingFields.HISTORICAL_CLOSE)
            if value is None:
                return 0.0

        return float(value)


def display_option_chain(table: List[Dict]):
    """Display the deltas and other properties from the priced chain."""
    if not table:
        return

    console = MarkdownTable("Option", "Type", "Expiry", "Strike", "Option Price", "Delta", "Underlying", "Style")
    for row in table:
        expiry = parse_date(row[IPAFields.END_DATE])
        console.add_row(
            row[IPAFields.INSTRUMENT_CODE],
            row[IPAFields.EXERCISE_TYPE],
            expiry.strftime('%d-%B-%Y'),
            f"{float(row[IPAFields.STRIKE_PRICE]):8.2f}",
            f"{float(row[IPAFields.OPTION_PRICE]):10.2f}",
            f"{float(row[IPAFields.DELTA_PERCENT]):6.2f}",
            row[IPAFields.UNDERLYING_RIC],
            row[IPAFields.EXERCISE_STYLE]
        )

    console.write()
