"""HTTP service exposing orb payout weights."""

DEFAULT_PORT = 3000
