"""
Core building blocks: demo configuration, Cadence argument values and
payout weights.
"""
