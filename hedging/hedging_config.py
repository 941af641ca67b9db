"""
Configuration for the delta hedging demo strategies.
"""

import configparser
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class HedgingConfig:
    """Configuration for the long strangle and delta neutral use cases."""
    chain: str = '0#AAPL*.U'
    pct_around_money: float = 0.30
    expiry_months: int = 7
    initial_shares: int = 500
    call_strike_pct: float = 1.075
    days_to_expiry: int = 360
    days_in_future: int = 60
    price_move_pct: float = 1.05
    put_strike_pct: float = 0.95
    hedge_key: str = 'tag1'
    put_key: str = 'tag2'

    @classmethod
    def from_file(cls, config_file: str) -> 'HedgingConfig':
        """
        Load configuration from file.

        Missing file, section or keys fall back to the defaults above.

        Args:
            config_file: Path to configuration file

        Returns:
            HedgingConfig object
        """
        config = configparser.ConfigParser()

        if not os.path.exists(config_file):
            logger.warning(f"Configuration file {config_file} not found, using defaults")
            return cls()

        config.read(config_file)
        if not config.has_section('STRATEGY'):
            logger.warning(f"No [STRATEGY] section in {config_file}, using defaults")
            return cls()

        section = config['STRATEGY']
        defaults = cls()

        return cls(
            chain=section.get('chain', defaults.chain).strip(),
            pct_around_money=section.getfloat('pct_around_money', defaults.pct_around_money),
            expiry_months=section.getint('expiry_months', defaults.expiry_months),
            initial_shares=section.getint('initial_shares', defaults.initial_shares),
            call_strike_pct=section.getfloat('call_strike_pct', defaults.call_strike_pct),
            days_to_expiry=section.getint('days_to_expiry', defaults.days_to_expiry),
            days_in_future=section.getint('days_in_future', defaults.days_in_future),
            price_move_pct=section.getfloat('price_move_pct', defaults.price_move_pct),
            put_strike_pct=section.getfloat('put_strike_pct', defaults.put_strike_pct),
            hedge_key=section.get('hedge_key', defaults.hedge_key).strip(),
            put_key=section.get('put_key', defaults.put_key).strip(),
        )

    def __str__(self) -> str:
        """String representation of config."""
        lines = [
            "Hedging Config:",
            f"  Chain: {self.chain}",
            f"  Strikes: {self.pct_around_money * 100:.1f}% Around-The-Money",
            f"  Expiry: {self.expiry_months} month(s) out",
            f"  Initial Shares: {self.initial_shares}",
            f"  Call Strike: {self.call_strike_pct:.3f} x underlying, {self.days_to_expiry} days",
            f"  Scenario: {self.price_move_pct:.3f} x underlying, {self.days_in_future} days in future",
            f"  Put Strike: {self.put_strike_pct:.3f} x simulated underlying",
        ]
        return "\n".join(lines)
