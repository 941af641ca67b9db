"""
End-to-end run of the delta hedging use cases against the fake RDP client.
"""
from datetime import date
from unittest.mock import patch

import pytest

from hedging.hedging_config import HedgingConfig
from strats import delta_hedging_strat
from strats.delta_hedging_strat import long_strangle, delta_neutral, run, main, target_expiry


@pytest.fixture
def config():
    return HedgingConfig()


@pytest.fixture
def april_expiry():
    with patch.object(delta_hedging_strat, 'target_expiry', return_value=date(2021, 4, 16)):
        yield


def test_target_expiry_month_offset():
    expiry = target_expiry(7)
    today = date.today()

    assert (expiry.year - today.year) * 12 + expiry.month - today.month == 7


class TestLongStrangle:

    def test_prices_filtered_chain(self, fake_client, config, april_expiry, capsys):
        options = long_strangle(fake_client, config)

        assert [o['InstrumentTag'] for o in options] == ['AAPLP152112000.U', 'AAPLP152114500.U', 'AAPLD152116000.U']
        universe = fake_client.requests[0]['universe']
        assert all(o['instrumentDefinition']['buySell'] == 'Buy' for o in universe)

        out = capsys.readouterr().out
        assert "Strategy: Long Strangle" in out
        assert "Retrieved a total of 3 contracts for the underlying AAPL.O with the last trade at: 150.0" in out

    def test_errored_option_dropped(self, fake_client, config, april_expiry):
        fake_client.failing_tags = {'AAPLP152114500.U'}

        options = long_strangle(fake_client, config)

        assert [o['InstrumentTag'] for o in options] == ['AAPLP152112000.U', 'AAPLD152116000.U']

    def test_empty_chain_not_priced(self, fake_client, config, april_expiry):
        fake_client.constituents = ['AAPL']

        assert long_strangle(fake_client, config) == []
        assert fake_client.requests == []


class TestDeltaNeutral:

    def test_scenario(self, fake_client, config, april_expiry, capsys):
        options = long_strangle(fake_client, config)

        dneutral = delta_neutral(fake_client, config, options)

        assert [p.key for p in dneutral.portfolio] == [None, 'tag1', 'tag2']
        hedge = dneutral.find_position('tag1')
        assert hedge.call_put == 'CALL'
        assert hedge.buy_sell == 'Sell'
        assert hedge.type == '300d Short CALL'
        assert hedge.strike == pytest.approx(150.0 * 1.075)
        puts = dneutral.find_position('tag2')
        assert puts.call_put == 'PUT'
        assert puts.strike == pytest.approx(150.0 * 1.05 * 0.95)
        assert all(p.contracts > 0 for p in dneutral.portfolio)

        out = capsys.readouterr().out
        assert "Strategy: Delta Neutral" in out
        assert "The following strategy can be implemented:" in out
        assert "60 days in the future" in out
        assert "Adding a new position with a strike 5% out-of-the money:" in out


def test_run_without_options(fake_client, config, april_expiry):
    fake_client.constituents = []

    assert run(fake_client, config) is False


class TestMain:

    def test_authentication_failure(self, tmp_path):
        with patch.object(delta_hedging_strat, 'RDPClient') as client_cls:
            client_cls.return_value.authenticate.return_value = False

            assert main(['--config', str(tmp_path / 'missing.conf')]) == 1

        client_cls.return_value.close.assert_called_once()

    def test_uncaught_error_reported(self, tmp_path, capsys):
        with patch.object(delta_hedging_strat, 'RDPClient') as client_cls:
            client_cls.return_value.authenticate.return_value = True
            client_cls.return_value.get_chain.side_effect = RuntimeError("boom")

            assert main(['--config', str(tmp_path / 'missing.conf')]) == 1

        assert "Failed to execute: boom" in capsys.readouterr().out

    def test_successful_run(self, tmp_path, fake_client, april_expiry):
        with patch.object(delta_hedging_strat, 'RDPClient', return_value=fake_client):
            fake_client.authenticate = lambda: True
            fake_client.close = lambda: None

            assert main(['--config', str(tmp_path / 'missing.conf')]) == 0
