"""
Demo driver - scripted end-to-end runs of the Orbital Auction.

A run is a fixed sequence of phases executed against a tooling backend:
1. Deploy the contracts
2. Provision the host and bidder accounts
3. Mint NFT prizes and fungible tokens
4. Create the auction and place the scripted bids
5. Advance epochs, pay out, and inspect the results

Each call blocks until the backend has completed it. Any tooling failure
aborts the run with a PhaseError naming the phase it happened in.
"""

import json
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

import click

from orbital.core.config import DemoConfig
from orbital.core.values import UInt64, ufix
from orbital.demo.verification import (
    BidderOutcome,
    PayoutReport,
    build_payout_report,
    extract_balance,
    extract_prize_count,
)
from orbital.tooling.base import Tooling
from orbital.tooling.errors import ToolingError
from orbital.utils.logger import get_logger

logger = get_logger("demo")


# =============================================================================
# Transaction and Script Names
# =============================================================================

TX_CREATE_VAULT = "setup/create_demotoken_vault"
TX_CREATE_NFT_COLLECTION = "setup/create_nft_collection"
TX_CREATE_AUCTION_COLLECTION = "setup/create_auction_collection"
TX_MINT_NFT = "setup/mint_nft"
TX_NEW_MINTER = "setup/new_demotoken_minter"
TX_MINT_TOKENS = "setup/mint_demotokens"
TX_CREATE_AUCTION = "list/create_auction"
TX_PLACE_BID = "bid/place_bid"
TX_UPDATE_EPOCH = "run/check_update_epoch"
TX_PAYOUT = "payout/payout_orbs"

SCRIPT_AUCTIONS = "check_auctions"
SCRIPT_EPOCH = "check_epoch"
SCRIPT_BIDDERS = "check_bidders"
SCRIPT_ACCOUNT = "check_account"
SCRIPT_ORBS = "check_orbs"


class PhaseError(Exception):
    """A tooling call failed; the run cannot continue."""

    def __init__(self, phase: str, cause: ToolingError):
        self.phase = phase
        self.cause = cause
        super().__init__(f"{phase}: {cause}")


@dataclass
class DemoResult:
    """What a completed run produced."""
    scenario: str
    bidders: List[str] = field(default_factory=list)
    report: Optional[PayoutReport] = None


def _render(result: Any) -> str:
    if result is None:
        return "(no result)"
    return json.dumps(result, default=str)


# =============================================================================
# Base Driver
# =============================================================================


class AuctionDemo(ABC):
    """
    Base class for demo scenarios.

    Args:
        tooling: Ledger backend
        config: Demo parameters
        echo: Where narration goes
        interactive: Stop for ENTER before completing the auction
        confirm: Called with a prompt when interactive
        sleep: Used for narration pacing
    """

    name = ""

    def __init__(
        self,
        tooling: Tooling,
        config: Optional[DemoConfig] = None,
        echo: Callable[[str], None] = click.echo,
        interactive: bool = False,
        confirm: Callable[[str], None] = click.pause,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.tooling = tooling
        self.config = config or DemoConfig()
        self.echo = echo
        self.interactive = interactive
        self.confirm = confirm
        self.sleep = sleep

    def narrate(self, message: str = ""):
        self.echo(message)

    @contextmanager
    def phase(self, name: str):
        """Run one phase; tooling failures become PhaseError."""
        logger.info(f"Phase: {name}")
        try:
            yield
        except ToolingError as e:
            logger.error(f"Phase '{name}' failed: {e}")
            raise PhaseError(name, e) from e
        if self.config.pace:
            self.sleep(self.config.pace)

    def script(self, name: str, *args) -> Any:
        """Run a script and narrate its result."""
        result = self.tooling.run_script(name, *args)
        self.narrate(f"  {name}: {_render(result)}")
        return result

    def deploy_contracts(self):
        with self.phase("deploy contracts"):
            for contract in self.config.contracts:
                self.tooling.deploy_contract(contract)
        self.narrate("Smart Contracts Deployed...")

    def advance_epochs(self, signer: str, *args):
        with self.phase("advance epochs"):
            for _ in range(self.config.epoch_ticks):
                self.tooling.send_transaction(TX_UPDATE_EPOCH, signer, *args)
        self.narrate(f"Advanced the auction {self.config.epoch_ticks} times")

    @abstractmethod
    def run(self) -> DemoResult:
        ...


# =============================================================================
# Orbital Scenario
# =============================================================================


class OrbitalAuctionDemo(AuctionDemo):
    """
    Full auction with freshly created bidder accounts.

    The host account owns the auction, the NFT prizes and a token vault;
    every bidder gets a vault, an NFT collection and the same funding,
    then bids a fixed amount each round.
    """

    name = "orbital"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.bidders: List[str] = []

    @property
    def auction_id(self) -> UInt64:
        return UInt64(self.config.auction_id)

    def setup_host(self):
        host = self.config.host_account
        self.narrate("Set up the auction host account:")
        self.narrate("- create empty FungibleToken Vault")
        self.narrate("- create empty NonFungibleToken Collection")
        self.narrate("- create empty OrbitalAuction Collection")

        with self.phase("set up host"):
            self.tooling.send_transaction(TX_CREATE_VAULT, host)
            self.tooling.send_transaction(TX_CREATE_NFT_COLLECTION, host)
            self.tooling.send_transaction(TX_CREATE_AUCTION_COLLECTION, host)

    def create_bidders(self):
        self.narrate(f"Create and set up the {self.config.bidder_count} bidder accounts:")
        self.narrate("- create empty FungibleToken Vault")
        self.narrate("- create empty NonFungibleToken Collection")

        with self.phase("create bidders"):
            for name in self.config.bidder_names():
                self.tooling.create_account(name)
                self.bidders.append(name)

            for bidder in self.bidders:
                self.tooling.send_transaction(TX_CREATE_VAULT, bidder)
                self.tooling.send_transaction(TX_CREATE_NFT_COLLECTION, bidder)

    def mint_nfts(self):
        self.narrate(f"Mint {self.config.nft_count} NFTs to use as auction prizes")

        with self.phase("mint NFTs"):
            host = self.tooling.find_address(self.config.host_account)
            for _ in range(self.config.nft_count):
                self.tooling.send_transaction(TX_MINT_NFT, self.config.nft_contract, host)

        self.narrate("NFTs have been minted and deposited in the auction owners NFT collection")

    def mint_tokens(self):
        token = self.config.token_contract
        self.narrate(
            f"Create a new FungibleToken minter with allowed amount of "
            f"{self.config.minter_allowance:,} tokens"
        )

        with self.phase("mint tokens"):
            self.tooling.send_transaction(TX_NEW_MINTER, token, ufix(self.config.minter_allowance))

            self.narrate("Mint tokens for auction owner")
            host = self.tooling.find_address(self.config.host_account)
            self.tooling.send_transaction(TX_MINT_TOKENS, token, host, ufix(self.config.host_funding))

            self.narrate("Mint tokens for the bidders")
            for bidder in self.bidders:
                address = self.tooling.find_address(bidder)
                self.tooling.send_transaction(
                    TX_MINT_TOKENS, token, address, ufix(self.config.bidder_funding)
                )
                self.narrate(f"Fungible tokens have been minted and deposited for {bidder}")

    def read_accounts(self) -> Dict[str, Any]:
        """Raw balance script result of every bidder."""
        results = {}
        with self.phase("read balances"):
            for bidder in self.bidders:
                results[bidder] = self.tooling.run_script(
                    self.config.balance_script, self.tooling.find_address(bidder)
                )
        return results

    def read_balances(self) -> Dict[str, Optional[Decimal]]:
        """Current balance of every bidder, None when unreadable."""
        return {bidder: extract_balance(result) for bidder, result in self.read_accounts().items()}

    def create_auction(self):
        self.narrate("Create a new Orbital Auction")
        self.narrate(f"Epochs - {self.config.epoch_count}")
        self.narrate(f"Epoch Length - {self.config.epoch_length} blocks")

        with self.phase("create auction"):
            self.tooling.send_transaction(
                TX_CREATE_AUCTION,
                self.config.host_account,
                UInt64(self.config.epoch_count),
                UInt64(self.config.epoch_length),
            )
            self.narrate("A new auction has been created")
            self.script(SCRIPT_AUCTIONS, self.tooling.find_address(self.config.host_account))

    def place_bids(self):
        self.narrate("Now we're placing bids!")

        with self.phase("place bids"):
            host = self.tooling.find_address(self.config.host_account)
            amounts = [ufix(amount) for amount in self.config.bid_amounts]
            for _ in range(self.config.bid_rounds):
                for bidder, amount in zip(self.bidders, amounts):
                    self.tooling.send_transaction(TX_PLACE_BID, bidder, host, self.auction_id, amount)

    def inspect_auction(self):
        with self.phase("inspect auction"):
            host = self.tooling.find_address(self.config.host_account)
            self.script(SCRIPT_EPOCH, host, self.auction_id)
            self.script(SCRIPT_BIDDERS, host, self.auction_id)
            for bidder in self.bidders:
                self.script(SCRIPT_ACCOUNT, self.tooling.find_address(bidder))
            self.script(SCRIPT_ORBS, host, self.auction_id)

    def payout(self):
        with self.phase("payout"):
            self.tooling.send_transaction(TX_PAYOUT, self.config.host_account, self.auction_id)
        self.narrate("The auction is over! Orb rewards have been paid out to the owners")

    def verify(self, funded: Dict[str, Optional[Decimal]]) -> PayoutReport:
        final = self.read_accounts()
        amounts = dict(zip(self.bidders, self.config.bid_amounts))
        outcomes = [
            BidderOutcome(
                name=bidder,
                bid_amount=amounts[bidder],
                funded=funded.get(bidder),
                final=extract_balance(final.get(bidder)),
                prizes=extract_prize_count(final.get(bidder)),
            )
            for bidder in self.bidders
        ]
        report = build_payout_report(outcomes, self.config.bid_rounds)

        self.narrate("Payout verification:")
        for line in report.summary_lines():
            self.narrate(f"  {line}")
        return report

    def run(self) -> DemoResult:
        self.narrate("Orbital Auction | Proof of Concept Demo")

        self.deploy_contracts()
        self.setup_host()
        self.create_bidders()
        self.mint_nfts()
        self.mint_tokens()
        funded = self.read_balances()

        self.create_auction()
        self.place_bids()
        self.inspect_auction()

        if self.interactive:
            self.confirm("press ENTER to complete the auction")

        self.advance_epochs(self.config.host_account, self.auction_id)
        self.payout()
        self.inspect_auction()
        report = self.verify(funded)

        return DemoResult(scenario=self.name, bidders=list(self.bidders), report=report)


# =============================================================================
# Classic Scenario
# =============================================================================


class ClassicAuctionDemo(AuctionDemo):
    """
    Earlier variant where the contract accounts act as bidders.

    Transactions take no arguments; the Cadence sources hard-code them.
    """

    name = "classic"

    BID_ROUNDS = 5

    def bid_order(self) -> List[str]:
        c = self.config
        return [
            c.nft_contract,
            c.nonfungible_contract,
            c.nft_contract,
            c.token_contract,
            c.nft_contract,
            c.token_contract,
            c.auction_contract,
            c.nft_contract,
        ]

    def setup_accounts(self):
        c = self.config
        with self.phase("set up accounts"):
            self.tooling.send_transaction(TX_CREATE_NFT_COLLECTION, c.token_contract)
            self.tooling.send_transaction(TX_CREATE_AUCTION_COLLECTION, c.token_contract)
            self.narrate("First account has been set up")

            self.tooling.send_transaction(TX_CREATE_VAULT, c.nft_contract)
            self.narrate("Second account has been set up")

            self.tooling.send_transaction(TX_CREATE_VAULT, c.auction_contract)
            self.tooling.send_transaction(TX_CREATE_NFT_COLLECTION, c.auction_contract)
            self.narrate("Third account has been set up")

            self.tooling.send_transaction(TX_CREATE_VAULT, c.nonfungible_contract)
            self.tooling.send_transaction(TX_CREATE_NFT_COLLECTION, c.nonfungible_contract)
            self.narrate("Fourth account has been set up")

    def run(self) -> DemoResult:
        c = self.config

        self.deploy_contracts()
        self.setup_accounts()

        with self.phase("mint NFTs"):
            for _ in range(c.nft_count):
                self.tooling.send_transaction(TX_MINT_NFT, c.nft_contract)
        self.narrate("NFTs have been minted")

        with self.phase("mint tokens"):
            self.tooling.send_transaction(TX_MINT_TOKENS, c.token_contract)
        self.narrate("Fungible tokens have been minted and deposited")

        with self.phase("create auction"):
            self.tooling.send_transaction(TX_CREATE_AUCTION, c.token_contract)
            self.narrate("A new auction has been created")
            self.script(SCRIPT_AUCTIONS)

        self.narrate("Now we're placing bids!")
        with self.phase("place bids"):
            for _ in range(self.BID_ROUNDS):
                for bidder in self.bid_order():
                    self.tooling.send_transaction(TX_PLACE_BID, bidder)
            self.script(SCRIPT_ACCOUNT)

        self.narrate("Now we're going to fast forward the auction to the end")
        if self.interactive:
            self.confirm("press ENTER to complete the auction")
        self.advance_epochs(c.token_contract)

        with self.phase("payout"):
            self.tooling.send_transaction(TX_PAYOUT, c.token_contract)
        self.narrate("The auction is over! Orb rewards have been paid out to the owners")

        with self.phase("inspect auction"):
            self.script(SCRIPT_ACCOUNT)
            self.script(SCRIPT_BIDDERS)
            self.narrate("All remaining bidders have their tokens back")
            self.script(SCRIPT_ORBS)
        self.narrate("All orbs are empty. Balances and prizes have been paid to the owners")

        return DemoResult(scenario=self.name)


SCENARIOS = {
    OrbitalAuctionDemo.name: OrbitalAuctionDemo,
    ClassicAuctionDemo.name: ClassicAuctionDemo,
}


def create_demo(scenario: str, tooling: Tooling, config: Optional[DemoConfig] = None, **kwargs) -> AuctionDemo:
    """
    Build the driver for a named scenario.

    Raises:
        ValueError: If the scenario is unknown
    """
    try:
        demo_cls = SCENARIOS[scenario]
    except KeyError:
        raise ValueError(
            f"Unknown scenario '{scenario}' (choose from {', '.join(sorted(SCENARIOS))})"
        ) from None
    return demo_cls(tooling, config, **kwargs)
