"""
Payout verification.

Compares each bidder's balance after funding with its balance after the
payout, and checks that the prizes ended up with a bidder. Nothing here
is fatal: mismatches are collected as issues for the caller to report.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from orbital.utils.logger import get_logger

logger = get_logger("demo.verify")

REFUNDED = "refunded"
CHARGED = "charged"
UNKNOWN = "unknown"


def extract_balance(result: Any) -> Optional[Decimal]:
    """
    Pull a token balance out of a decoded script result.

    Accepts a bare number, or a mapping with a key containing "balance"
    (searched one level deep). Returns None when nothing matches.
    """
    if isinstance(result, bool):
        return None
    if isinstance(result, (Decimal, int)):
        return Decimal(result)
    if isinstance(result, str):
        try:
            return Decimal(result)
        except InvalidOperation:
            return None
    if isinstance(result, dict):
        for key, value in result.items():
            if "balance" in str(key).lower():
                return extract_balance(value)
        for value in result.values():
            if isinstance(value, dict):
                found = extract_balance(value)
                if found is not None:
                    return found
    return None


def extract_prize_count(result: Any) -> Optional[int]:
    """
    Count the NFTs held according to a decoded script result.

    Looks for a list under a key containing "nft" (e.g. "nftIDs"),
    searched one level deep. Returns None when the result has no such list.
    """
    if not isinstance(result, dict):
        return None
    for key, value in result.items():
        if "nft" in str(key).lower() and isinstance(value, list):
            return len(value)
    for value in result.values():
        if isinstance(value, dict):
            found = extract_prize_count(value)
            if found is not None:
                return found
    return None


@dataclass
class BidderOutcome:
    """Balance movement of one bidder across the auction."""
    name: str
    bid_amount: Decimal
    funded: Optional[Decimal] = None
    final: Optional[Decimal] = None
    prizes: Optional[int] = None    # NFTs held after payout

    @property
    def delta(self) -> Optional[Decimal]:
        if self.funded is None or self.final is None:
            return None
        return self.final - self.funded

    @property
    def status(self) -> str:
        if self.delta is None:
            return UNKNOWN
        return REFUNDED if self.delta == 0 else CHARGED


@dataclass
class PayoutReport:
    """Outcome of the post-payout checks."""
    outcomes: List[BidderOutcome]
    issues: List[str] = field(default_factory=list)

    @property
    def verified(self) -> bool:
        """True when every balance could be read."""
        return all(o.status != UNKNOWN for o in self.outcomes)

    @property
    def ok(self) -> bool:
        return not self.issues

    def charged(self) -> List[BidderOutcome]:
        return [o for o in self.outcomes if o.status == CHARGED]

    def refunded(self) -> List[BidderOutcome]:
        return [o for o in self.outcomes if o.status == REFUNDED]

    def winners(self) -> List[BidderOutcome]:
        """Bidders holding at least one prize."""
        return [o for o in self.outcomes if o.prizes]

    def summary_lines(self) -> List[str]:
        lines = []
        for o in self.outcomes:
            if o.status == UNKNOWN:
                line = f"{o.name}: balance unavailable"
            else:
                line = f"{o.name}: {o.funded} -> {o.final} ({o.status}, {o.delta:+})"
            if o.prizes is not None:
                line += f", {o.prizes} prize(s)"
            lines.append(line)
        if not self.verified:
            lines.append("Payout not verified: balance script returned no balance")
        for issue in self.issues:
            lines.append(f"ISSUE: {issue}")
        return lines


def _charge_issue(o: BidderOutcome, bid_rounds: int) -> Optional[str]:
    """A charge must be a whole number of the bidder's bids."""
    charged = -o.delta
    if charged > o.bid_amount * bid_rounds:
        return f"{o.name} was charged {charged}, more than it bid ({o.bid_amount} x {bid_rounds})"
    if o.bid_amount == 0 or charged % o.bid_amount != 0:
        return f"{o.name} was charged {charged}, not a whole number of {o.bid_amount} bids"
    return None


def build_payout_report(outcomes: List[BidderOutcome], bid_rounds: int) -> PayoutReport:
    """
    Check bidder balances and prizes after payout.

    Args:
        outcomes: One entry per bidder, in bidder order
        bid_rounds: How many times each bidder placed its bid

    Returns:
        PayoutReport; issues are empty when balances are unavailable
    """
    report = PayoutReport(outcomes=outcomes)
    if not outcomes or not report.verified:
        return report

    for o in outcomes:
        if o.delta > 0:
            report.issues.append(f"{o.name} gained {o.delta} tokens")
        elif o.delta < 0:
            issue = _charge_issue(o, bid_rounds)
            if issue:
                report.issues.append(issue)

    charged = report.charged()
    if not charged:
        report.issues.append("no bidder was charged")

    top = max(o.bid_amount for o in outcomes)
    highest = [o for o in outcomes if o.bid_amount == top]
    if charged and all(o.status != CHARGED for o in highest):
        names = ", ".join(o.name for o in highest)
        if len(highest) == 1:
            report.issues.append(f"highest bidder {names} was not charged")
        else:
            report.issues.append(f"highest bidders {names} were not charged")

    # Prize check only when every bidder's holdings are known
    if all(o.prizes is not None for o in outcomes) and not report.winners():
        report.issues.append("no bidder received a prize")

    for issue in report.issues:
        logger.warning(issue)

    return report
