"""
Shared fixtures: an in-memory stand-in for the RDP endpoints.
"""
from datetime import datetime

import pytest

from rdp.fields import IPAFields
from hedging.option_chain import parse_constituent, OptionType


def fake_delta(call_put: str, underlying_price: float, strike: float, buy_sell: str) -> float:
    """Deterministic delta: 0.5 at-the-money, moving with moneyness."""
    call_delta = min(0.99, max(0.01, 0.5 + (underlying_price - strike) / underlying_price))
    delta = call_delta if call_put == 'CALL' else call_delta - 1.0
    return round(-delta if buy_sell == 'Sell' else delta, 6)


class FakeRDPClient:
    """
    Answers chain, snapshot and financial-contracts requests from fixed data.

    Options are priced with fake_delta; a definition whose tag is listed in
    `failing_tags` comes back with an ErrorMessage.
    """

    def __init__(self, constituents=None, prices=None, underlying='AAPL.O', style='AMER'):
        self.constituents = constituents or []
        self.prices = prices or {}
        self.underlying = underlying
        self.style = style
        self.failing_tags = set()
        self.requests = []

    def get_chain(self, chain):
        return {'universe': {'ric': chain}, 'data': {'constituents': list(self.constituents)}}

    def get_snapshot(self, ric, fields):
        values = self.prices.get(ric)
        if values is None:
            return None
        return {field: values.get(field) for field in fields}

    def price_contracts(self, request):
        self.requests.append(request)
        rows = [self._price(definition) for definition in request['universe']]
        return {
            'headers': [{'name': name, 'type': 'String'} for name in request['fields']],
            'data': rows
        }

    def _price(self, definition):
        instrument = definition['instrumentDefinition']
        pricing = definition.get('pricingParameters', {})
        tag = instrument['instrumentTag']
        buy_sell = instrument['buySell']
        underlying_price = pricing.get('underlyingPrice', self.prices.get(self.underlying, {}).get('TRDPRC_1', 0.0))

        if 'instrumentCode' in instrument:
            code = instrument['instrumentCode']
            contract = parse_constituent(code, self.underlying.split('.')[0])
            call_put = 'CALL' if contract.option_type == OptionType.CALL else 'PUT'
            strike = contract.strike
            valuation = '2021-01-04T00:00:00Z'
            end = f"20{contract.year}-{contract.month:02d}-{contract.day}T00:00:00Z"
        else:
            code = None
            call_put = instrument['callPut']
            strike = instrument['strike']
            valuation = pricing['valuationDate']
            end = instrument['endDate']

        error = 'Unable to price option' if tag in self.failing_tags else ''
        return [
            tag, code, call_put, valuation, end, strike, 4.25,
            fake_delta(call_put, underlying_price, strike, buy_sell),
            self.underlying, underlying_price, self.style, error
        ]


@pytest.fixture
def fake_client():
    return FakeRDPClient(
        constituents=[
            'AAPL.O',
            'AAPLD152114000.U',     # Apr 21 call 140 - below the money
            'AAPLD152116000.U',     # Apr 21 call 160
            'AAPLP152112000.U',     # Apr 21 put 120
            'AAPLD152120000.U',     # Apr 21 call 200 - too far out
            'AAPLP152110000.U',     # Apr 21 put 100 - too far out
            'AAPLE212116500.U',     # May 21 call - wrong month
            'AAPLP152114500.U',     # Apr 21 put 145
        ],
        prices={'AAPL.O': {'TRDPRC_1': 150.0, 'HST_CLOSE': 149.0}}
    )


@pytest.fixture
def priced_row():
    """One IPA result row for an OTC call written on AAPL.O."""
    return {
        IPAFields.INSTRUMENT_TAG: 'tag1',
        IPAFields.INSTRUMENT_CODE: None,
        IPAFields.EXERCISE_TYPE: 'CALL',
        IPAFields.VALUATION_DATE: '2021-01-04T00:00:00Z',
        IPAFields.END_DATE: '2021-12-30T00:00:00Z',
        IPAFields.STRIKE_PRICE: 161.25,
        IPAFields.OPTION_PRICE: 9.8,
        IPAFields.DELTA_PERCENT: -0.30,
        IPAFields.UNDERLYING_RIC: 'AAPL.O',
        IPAFields.UNDERLYING_PRICE: 150.0,
        IPAFields.EXERCISE_STYLE: 'AMER',
        IPAFields.ERROR_MESSAGE: '',
    }


@pytest.fixture
def fixed_now():
    return datetime(2021, 1, 4, 9, 30, 0)
