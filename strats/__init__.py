"""
Delta hedging demo strategies.
"""
