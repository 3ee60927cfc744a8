"""
Scripted auction demos.

- OrbitalAuctionDemo: host plus freshly created bidders, funded and bidding
- ClassicAuctionDemo: contract accounts bidding with argument-free transactions
- Payout verification of bidder balances and prizes
"""

from orbital.demo.driver import (
    AuctionDemo,
    OrbitalAuctionDemo,
    ClassicAuctionDemo,
    DemoResult,
    PhaseError,
    SCENARIOS,
    create_demo,
)
from orbital.demo.verification import (
    BidderOutcome,
    PayoutReport,
    build_payout_report,
    extract_balance,
    extract_prize_count,
)

__all__ = [
    # Driver
    "AuctionDemo",
    "OrbitalAuctionDemo",
    "ClassicAuctionDemo",
    "DemoResult",
    "PhaseError",
    "SCENARIOS",
    "create_demo",
    # Verification
    "BidderOutcome",
    "PayoutReport",
    "build_payout_report",
    "extract_balance",
    "extract_prize_count",
]
