"""
Delta hedging use cases over the Refinitiv Data Platform.

Option deltas are retrieved through the Pricing and IPA (Instrument Pricing
Analytics) endpoints and used as the basis of two hedging workflows:

1. Long Strangle - filter an option chain Around-The-Money and price the
   contracts to display their deltas.
2. Delta Neutral - hedge a long share position by writing options, then
   model the position at a simulated price and date and re-hedge.
"""
import logging
import sys
from datetime import date

import pandas as pd

from rdp.fields import IPAFields
from rdp.rdp import RDPClient
from hedging.delta_neutral import DeltaNeutral
from hedging.hedging_config import HedgingConfig
from hedging.ipa_option import IPAOption
from hedging.option_chain import OptionChain, display_option_chain

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)
logger = logging.getLogger(__name__)


def banner(title: str):
    print(f"\n***************************\nStrategy: {title}\n***************************")


def target_expiry(months: int) -> date:
    return (pd.Timestamp.now() + pd.DateOffset(months=months)).date()


def long_strangle(client: RDPClient, config: HedgingConfig):
    """
    Use Case 1 - retrieve the option chain, keep the contracts expiring
    `expiry_months` out and Around-The-Money, and price them as bought.

    Returns:
        Priced option rows (puts first, then calls)
    """
    banner("Long Strangle")

    chain = OptionChain(client)
    contracts = chain.get_contracts(config.chain, config.pct_around_money, target_expiry(config.expiry_months))

    print(f"\nRetrieved a total of {len(contracts)} contracts for the underlying {chain.underlying} "
          f"with the last trade at: {chain.underlying_price}\n")

    if not contracts:
        return []

    eti_contracts = [IPAOption.define_eti(contract, 'Buy') for contract in contracts]

    ipa_option = IPAOption(client)
    options = ipa_option.price_options(eti_contracts)

    display_option_chain(options)
    return options


def delta_neutral(client: RDPClient, config: HedgingConfig, options: list) -> DeltaNeutral:
    """
    Use Case 2 - hedge a long share position with written calls, model a
    price move in the future, then hedge again with written puts.

    The underlying details are taken from the first priced option of Use Case 1.
    """
    banner("Delta Neutral")

    underlying = options[0][IPAFields.UNDERLYING_RIC]
    style = options[0][IPAFields.EXERCISE_STYLE]
    underlying_price = float(options[0][IPAFields.UNDERLYING_PRICE])

    # Initial position - long shares
    dneutral = DeltaNeutral(IPAOption(client), underlying, underlying_price, shares=config.initial_shares)
    dneutral.display_portfolio()

    # Write some calls a little out-of-the-money with an expiry close to a year
    strike = underlying_price * config.call_strike_pct
    dneutral.update_portfolio(IPAOption.define_otc(
        config.hedge_key, 'Sell', 'CALL', underlying, underlying_price, strike,
        config.days_to_expiry, style, 0
    ))
    dneutral.display_positions("The following strategy can be implemented:")

    # Look at the position again after a price move in the future
    underlying_price *= config.price_move_pct
    dneutral.model_position(config.hedge_key, underlying_price, config.days_in_future)
    dneutral.display_positions(
        f"With a simulated price increase to {underlying_price} and {config.days_in_future} days in the future:"
    )

    # No longer near delta neutral, sell some out-of-the-money puts
    strike = underlying_price * config.put_strike_pct
    dneutral.update_portfolio(IPAOption.define_otc(
        config.put_key, 'Sell', 'PUT', underlying, underlying_price, strike,
        config.days_to_expiry, style, config.days_in_future
    ))
    dneutral.display_positions(
        f"Adding a new position with a strike {abs(1 - config.put_strike_pct) * 100:.0f}% out-of-the money:"
    )

    return dneutral


def run(client: RDPClient, config: HedgingConfig) -> bool:
    options = long_strangle(client, config)
    if not options:
        logger.error("No priced options from the chain, cannot build the delta neutral portfolio")
        return False

    delta_neutral(client, config, options)
    return True


def main(argv=None):
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description='Delta Hedging with Refinitiv Data Platform option deltas')
    parser.add_argument(
        '--config',
        default='strats/delta_hedging.conf',
        help='Strategy configuration file (default: strats/delta_hedging.conf)'
    )
    parser.add_argument(
        '--rdp-config',
        default='rdp/rdp.conf',
        help='RDP connection configuration file (default: rdp/rdp.conf)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    client = None
    try:
        config = HedgingConfig.from_file(args.config)
        logger.info(f"\n{config}")

        client = RDPClient(args.rdp_config)
        if args.debug:
            logging.getLogger('rdp.rdp').setLevel(logging.DEBUG)

        if not client.authenticate():
            logger.error("Failed to authenticate to the Refinitiv Data Platform")
            return 1

        return 0 if run(client, config) else 1

    except Exception as e:
        print(f"\n**************\nFailed to execute: {e}\n{e.__cause__ or ''}\n***************")
        return 1
    finally:
        if client is not None:
            client.close()


if __name__ == "__main__":
    sys.exit(main())
