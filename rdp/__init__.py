"""
Refinitiv Data Platform REST access.
"""
from rdp.rdp import RDPClient
from rdp.fields import PricingFields, IPAFields

__all__ = [
    'RDPClient',
    'PricingFields',
    'IPAFields',
]
