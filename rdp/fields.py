"""
RDP field definitions and constants.
"""

class PricingFields:
    """
    Pricing snapshot field names.

    Reference: https://developers.refinitiv.com/en/api-catalog/refinitiv-data-platform
    """
    LAST_PRICE = "TRDPRC_1"
    HISTORICAL_CLOSE = "HST_CLOSE"

    # Requested together, last price first
    LAST_OR_CLOSE = [LAST_PRICE, HISTORICAL_CLOSE]


class IPAFields:
    """IPA financial-contracts output fields used for delta hedging."""
    INSTRUMENT_TAG = "InstrumentTag"
    INSTRUMENT_CODE = "InstrumentCode"
    EXERCISE_TYPE = "ExerciseType"      # CALL / PUT
    VALUATION_DATE = "ValuationDate"
    END_DATE = "EndDate"
    STRIKE_PRICE = "StrikePrice"
    OPTION_PRICE = "OptionPrice"
    DELTA_PERCENT = "DeltaPercent"
    UNDERLYING_RIC = "UnderlyingRIC"
    UNDERLYING_PRICE = "UnderlyingPrice"
    EXERCISE_STYLE = "ExerciseStyle"    # EURO / AMER
    ERROR_MESSAGE = "ErrorMessage"

    OPTION_FIELDS = [
        INSTRUMENT_TAG, INSTRUMENT_CODE, EXERCISE_TYPE, VALUATION_DATE,
        END_DATE, STRIKE_PRICE, OPTION_PRICE, DELTA_PERCENT,
        UNDERLYING_RIC, UNDERLYING_PRICE, EXERCISE_STYLE, ERROR_MESSAGE
    ]
