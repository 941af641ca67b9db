"""
Option chain filtering, option pricing and delta neutral hedging.
"""
from hedging.option_chain import OptionChain, OptionType, ContractSymbol
from hedging.ipa_option import IPAOption
from hedging.position import Position
from hedging.delta_neutral import DeltaNeutral
from hedging.hedging_config import HedgingConfig

__all__ = [
    'OptionChain',
    'OptionType',
    'ContractSymbol',
    'IPAOption',
    'Position',
    'DeltaNeutral',
    'HedgingConfig',
]
