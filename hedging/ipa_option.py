"""
Option pricing through the IPA (Instrument Pricing Analytics) financial
contracts endpoint.

The main Greek used to drive the hedge is DeltaPercent. Options are
defined either as ETI (Exchange-Traded-Instrument, an existing listed
option) or OTC (Over-The-Counter, a what-if definition by strike and
expiry).
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from rdp.fields import IPAFields
from hedging.tables import MarkdownTable

logger = logging.getLogger(__name__)


def parse_date(value: Any) -> datetime:
    """Convert an IPA date value (ISO string or datetime) to a datetime."""
    if isinstance(value, datetime):
        return value
    return pd.Timestamp(value).to_pydatetime()


def format_date(value: datetime) -> str:
    """Format as an ISO UTC timestamp. Naive values are taken to be UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime('%Y-%m-%dT%H:%M:%SZ')


class IPAOption:
    """Prices option definitions through IPA."""

    def __init__(self, client: 'RDPClient'):
        self.client = client

    def price_options(self, *options: Union[Dict, Iterable[Dict]]) -> List[Dict[str, Any]]:
        """
        Price one or more option definitions.

        Accepts definitions as separate arguments or a single iterable:
            price_options(opt)
            price_options(opt1, opt2)
            price_options([opt1, opt2])

        Returns:
            One field mapping per successfully priced option
        """
        if len(options) == 1 and not isinstance(options[0], dict):
            options = tuple(options[0])

        request = {
            'fields': list(IPAFields.OPTION_FIELDS),
            'universe': list(options)
        }

        logger.debug(f"Pricing {len(request['universe'])} option(s)")
        return self.extract_values(self.client.price_contracts(request))

    @staticmethod
    def define_eti(option: str, buy_sell: str) -> Dict:
        """
        Define an existing option traded within the market.

        Args:
            option: Option instrument code, e.g. 'AAPLD152125500.U'
            buy_sell: 'Buy' or 'Sell'
        """
        return {
            'instrumentType': 'Option',
            'instrumentDefinition': {
                'instrumentTag': option,
                'instrumentCode': option,
                'underlyingType': 'Eti',
                'buySell': buy_sell
            },
            'pricingParameters': {
                # Use the historical close of the underlying to price the delta
                'underlyingTimeStamp': 'Close'
            }
        }

    @staticmethod
    def define_otc(
        key: str,
        buy_sell: str,
        call_put: str,
        underlying: str,
        underlying_price: float,
        strike: float,
        days_to_expire: int,
        exercise_style: str,
        days_in_future: int,
        now: Optional[datetime] = None
    ) -> Dict:
        """
        Define an OTC option to model a what-if scenario.

        The expiry is `days_to_expire` days from now and the option is valued
        `days_in_future` days from now at `underlying_price`.

        Args:
            key: Instrument tag identifying the position
            buy_sell: 'Buy' or 'Sell'
            call_put: 'CALL' or 'PUT'
            underlying: Underlying instrument code
            underlying_price: Price of the underlying to value against
            strike: Strike price
            days_to_expire: Days from now until expiry
            exercise_style: 'EURO' or 'AMER'
            days_in_future: Days from now for the valuation date
            now: Reference time (defaults to the current UTC time)
        """
        now = now or datetime.now(timezone.utc)
        return {
            'instrumentType': 'Option',
            'instrumentDefinition': {
                'instrumentTag': key,
                'underlyingType': 'Eti',
                'exerciseStyle': exercise_style,
                'strike': strike,
                'endDate': format_date(now + timedelta(days=days_to_expire)),
                'buySell': buy_sell,
                'callPut': call_put,
                'underlyingDefinition': {
                    'instrumentCode': underlying
                }
            },
            'pricingParameters': {
                'underlyingPrice': underlying_price,
                'valuationDate': format_date(now + timedelta(days=days_in_future)),
                'underlyingTimeStamp': 'Close',
                'volatilityType': 'SVISurface'
            }
        }

    @staticmethod
    def extract_values(response: Optional[Dict]) -> List[Dict[str, Any]]:
        """
        Align each data row of the response with the column headers.

        Rows carrying an ErrorMessage are logged and dropped.

        Args:
            response: Raw IPA response, None if the request failed

        Returns:
            List of field-name to value mappings
        """
        if response is None:
            logger.error("Option pricing request failed, no values extracted")
            return []

        headers = [header['name'] for header in response.get('headers', [])]
        frame = pd.DataFrame(response.get('data') or [], columns=headers, dtype=object)

        if IPAFields.ERROR_MESSAGE in frame.columns:
            errors = frame[IPAFields.ERROR_MESSAGE].fillna('').astype(str).str.strip()
        else:
            errors = pd.Series([''] * len(frame), index=frame.index)

        table = []
        for (_, row), error in zip(frame.iterrows(), errors):
            if error:
                logger.warning(f"Issue with Option. {row.to_dict()}")
                continue
            # Null cells stay None rather than NaN
            table.append({name: (None if pd.api.types.is_scalar(value) and pd.isna(value) else value)
                          for name, value in row.items()})

        logger.debug(f"Extracted {len(table)} of {len(frame)} priced option(s)")
        return table


def display_table(table: List[Dict[str, Any]]):
    """Display every returned field of the priced options."""
    if not table:
        return

    console = MarkdownTable(*table[0].keys())
    for row in table:
        console.add_row(*row.values())

    console.write()
