"""
ICO Monitor — token sale statistics from blockchain event logs.

Turns the per-event logs of a token sale into a statistics report:
funds raised, tokens issued, investor rankings, time-bucketed chart
series, and the Gini index of token holdings.
"""

__version__ = "0.1.0"
