"""
Unit tests for payout verification.

Tests cover:
1. Balance extraction from script results
2. Bidder classification
3. Report issues
4. Prize holdings
"""

import pytest
from decimal import Decimal

from orbital.core.values import Address
from orbital.demo.verification import (
    BidderOutcome,
    CHARGED,
    REFUNDED,
    UNKNOWN,
    build_payout_report,
    extract_balance,
    extract_prize_count,
)

FUNDED = Decimal("100000.0")


def outcome(name, bid, final, funded=FUNDED, prizes=None):
    return BidderOutcome(
        name=name, bid_amount=Decimal(bid), funded=funded, final=final, prizes=prizes
    )


class TestExtractBalance:
    """Tests for reading balances out of script results."""

    @pytest.mark.parametrize("result,expected", [
        (Decimal("12.5"), Decimal("12.5")),
        (7, Decimal(7)),
        ("99.0", Decimal("99.0")),
        ({"balance": Decimal("5.0")}, Decimal("5.0")),
        ({"address": "0x01", "vaultBalance": Decimal("3.0")}, Decimal("3.0")),
        ({"account": {"Balance": Decimal("8.0")}}, Decimal("8.0")),
    ])
    def test_found(self, result, expected):
        assert extract_balance(result) == expected

    @pytest.mark.parametrize("result", [
        None,
        True,
        "not a number",
        [Decimal("1.0")],
        {"nfts": [1, 2]},
        Address("0x01"),
    ])
    def test_not_found(self, result):
        assert extract_balance(result) is None


class TestExtractPrizeCount:
    """Tests for counting held NFTs in script results."""

    @pytest.mark.parametrize("result,expected", [
        ({"nftIDs": [1, 4]}, 2),
        ({"balance": Decimal("1.0"), "NFTs": []}, 0),
        ({"account": {"nft_ids": [7]}}, 1),
    ])
    def test_found(self, result, expected):
        assert extract_prize_count(result) == expected

    @pytest.mark.parametrize("result", [
        None,
        Decimal("5.0"),
        {"balance": Decimal("5.0")},
        {"nftIDs": "1,4"},
    ])
    def test_not_found(self, result):
        assert extract_prize_count(result) is None


class TestBidderOutcome:
    """Tests for per-bidder classification."""

    def test_refunded(self):
        o = outcome("Bidder1", "60.0", FUNDED)
        assert o.delta == 0
        assert o.status == REFUNDED

    def test_charged(self):
        o = outcome("Bidder2", "65.0", FUNDED - 65)
        assert o.delta == Decimal("-65")
        assert o.status == CHARGED

    def test_unknown(self):
        o = outcome("Bidder3", "55.0", None)
        assert o.delta is None
        assert o.status == UNKNOWN


class TestPayoutReport:
    """Tests for the post-payout checks."""

    def test_winner_charged_others_refunded(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED),
            outcome("Bidder2", "65.0", FUNDED - Decimal("65.0")),
            outcome("Bidder3", "55.0", FUNDED),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)

        assert report.verified
        assert report.ok
        assert [o.name for o in report.charged()] == ["Bidder2"]
        assert [o.name for o in report.refunded()] == ["Bidder1", "Bidder3"]

    def test_nobody_charged(self):
        outcomes = [outcome("Bidder1", "60.0", FUNDED), outcome("Bidder2", "65.0", FUNDED)]
        report = build_payout_report(outcomes, bid_rounds=15)
        assert report.issues == ["no bidder was charged"]

    def test_gain_is_an_issue(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED + 1),
            outcome("Bidder2", "65.0", FUNDED - 65),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)
        assert not report.ok
        assert any("Bidder1 gained" in issue for issue in report.issues)

    def test_overcharge_is_an_issue(self):
        outcomes = [outcome("Bidder1", "10.0", FUNDED - 21)]
        report = build_payout_report(outcomes, bid_rounds=2)
        assert any("more than it bid" in issue for issue in report.issues)

    def test_highest_bidder_not_charged(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED - 60),
            outcome("Bidder2", "65.0", FUNDED),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)
        assert report.issues == ["highest bidder Bidder2 was not charged"]

    def test_unverified_has_no_issues(self):
        outcomes = [outcome("Bidder1", "60.0", None), outcome("Bidder2", "65.0", FUNDED)]
        report = build_payout_report(outcomes, bid_rounds=15)

        assert not report.verified
        assert report.ok
        assert "Payout not verified: balance script returned no balance" in report.summary_lines()

    def test_summary_lines(self):
        outcomes = [outcome("Bidder1", "60.0", FUNDED - 60)]
        lines = build_payout_report(outcomes, bid_rounds=1).summary_lines()
        assert lines[0].startswith("Bidder1: 100000.0 -> ")
        assert "charged" in lines[0]

    def test_wrong_amount_charged(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED),
            outcome("Bidder2", "65.0", FUNDED - Decimal("0.01")),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)

        assert not report.ok
        assert report.issues == ["Bidder2 was charged 0.01, not a whole number of 65.0 bids"]

    def test_several_bids_charged(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED),
            outcome("Bidder2", "65.0", FUNDED - Decimal("195.0")),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)
        assert report.ok

    def test_tied_highest_one_charged(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED),
            outcome("Bidder2", "65.0", FUNDED),
            outcome("Bidder3", "65.0", FUNDED - Decimal("65.0")),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)
        assert report.ok

    def test_tied_highest_none_charged(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED - Decimal("60.0")),
            outcome("Bidder2", "65.0", FUNDED),
            outcome("Bidder3", "65.0", FUNDED),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)
        assert report.issues == ["highest bidders Bidder2, Bidder3 were not charged"]


class TestPrizes:
    """Tests for the prize holding check."""

    def test_winner_holds_prize(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED, prizes=0),
            outcome("Bidder2", "65.0", FUNDED - Decimal("65.0"), prizes=1),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)

        assert report.ok
        assert [o.name for o in report.winners()] == ["Bidder2"]
        assert report.summary_lines()[1].endswith(", 1 prize(s)")

    def test_no_prize_delivered(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED, prizes=0),
            outcome("Bidder2", "65.0", FUNDED - Decimal("65.0"), prizes=0),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)
        assert report.issues == ["no bidder received a prize"]

    def test_unknown_holdings_skip_check(self):
        outcomes = [
            outcome("Bidder1", "60.0", FUNDED, prizes=0),
            outcome("Bidder2", "65.0", FUNDED - Decimal("65.0")),
        ]
        report = build_payout_report(outcomes, bid_rounds=15)
        assert report.ok
