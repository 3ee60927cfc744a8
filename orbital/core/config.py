"""
Demo configuration for the Orbital Auction driver.

Defines the contract and account names, minting and funding amounts,
auction parameters and the bid script, plus how to reach the Flow CLI.
Values come from defaults, an optional TOML/JSON file and ``ORBITAL_*``
environment variables (a ``.env`` file is honoured), in that order.
"""

import json
import os
import tomllib
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from orbital.core.values import ufix
from orbital.utils.logger import get_logger

logger = get_logger("config")

ENV_PREFIX = "ORBITAL_"


class FlowSettings(BaseModel):
    """How to reach the Flow CLI and the emulator"""

    flow_bin: str = "flow"                         # Flow CLI executable
    network: str = "emulator"                      # Network name in flow.json
    config_path: Path = Path("flow.json")          # Relative to project_dir
    project_dir: Path = Path(".")                  # Holds contracts/, transactions/, scripts/
    service_account: str = "emulator-account"      # Pays for new accounts


class DemoConfig(BaseModel):
    """Demo-wide parameters"""

    # Contract accounts, in deployment order
    nonfungible_contract: str = "NonFungibleToken"
    token_contract: str = "DemoToken"
    nft_contract: str = "Rocks"
    auction_contract: str = "Auction"

    # Participants
    host_account: str = "Auction"
    bidder_count: int = Field(default=6, ge=1)
    bidder_prefix: str = "Bidder"

    # Minting
    nft_count: int = Field(default=10, ge=0)
    minter_allowance: Decimal = Decimal("1000000.0")
    host_funding: Decimal = Decimal("100000.0")
    bidder_funding: Decimal = Decimal("100000.0")

    # Auction
    auction_id: int = Field(default=1, ge=0)
    epoch_count: int = Field(default=8, ge=1)
    epoch_length: int = Field(default=12, ge=1)     # In blocks

    # Bidding
    bid_rounds: int = Field(default=15, ge=0)
    bid_amounts: List[Decimal] = Field(
        default_factory=lambda: [
            Decimal("60.0"),
            Decimal("65.0"),
            Decimal("55.0"),
            Decimal("25.0"),
            Decimal("35.0"),
            Decimal("62.0"),
        ]
    )

    # Epoch advancement; anything above epoch_count is slack
    epoch_ticks: int = Field(default=15, ge=0)

    # Narration pacing in seconds (0 disables)
    pace: float = Field(default=0.0, ge=0)

    # Script whose result carries a bidder's token balance
    balance_script: str = "check_account"

    flow: FlowSettings = Field(default_factory=FlowSettings)

    @field_validator("minter_allowance", "host_funding", "bidder_funding")
    @classmethod
    def _check_amount(cls, value: Decimal) -> Decimal:
        ufix(value)
        return value

    @field_validator("bid_amounts")
    @classmethod
    def _check_bid_amounts(cls, values: List[Decimal]) -> List[Decimal]:
        for value in values:
            ufix(value)
        return values

    @model_validator(mode="after")
    def _check_consistency(self) -> "DemoConfig":
        if len(self.bid_amounts) != self.bidder_count:
            raise ValueError(
                f"bid_amounts has {len(self.bid_amounts)} entries, "
                f"expected one per bidder ({self.bidder_count})"
            )
        if self.epoch_ticks < self.epoch_count:
            raise ValueError(
                f"epoch_ticks ({self.epoch_ticks}) must be at least "
                f"epoch_count ({self.epoch_count})"
            )
        return self

    @property
    def contracts(self) -> List[str]:
        """Contract names in deployment order"""
        return [
            self.nonfungible_contract,
            self.token_contract,
            self.nft_contract,
            self.auction_contract,
        ]

    def bidder_names(self) -> List[str]:
        """Bidder account names, Bidder1..BidderN"""
        return [f"{self.bidder_prefix}{i}" for i in range(1, self.bidder_count + 1)]


# =============================================================================
# Loading
# =============================================================================


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path.suffix == ".toml":
        with path.open("rb") as fh:
            return tomllib.load(fh)
    if path.suffix == ".json":
        return json.loads(path.read_text())

    raise ValueError(f"Unsupported config format: {path.suffix} (use .toml or .json)")


def _apply_env_overrides(data: Dict[str, Any], env: Mapping[str, str]) -> Dict[str, Any]:
    """Overlay ORBITAL_<FIELD> and ORBITAL_FLOW_<FIELD> variables"""
    merged = dict(data)
    flow = dict(merged.get("flow") or {})

    for name in FlowSettings.model_fields:
        key = f"{ENV_PREFIX}FLOW_{name.upper()}"
        if key in env:
            flow[name] = env[key]

    for name in DemoConfig.model_fields:
        if name == "flow":
            continue
        key = f"{ENV_PREFIX}{name.upper()}"
        if key not in env:
            continue
        if name == "bid_amounts":
            merged[name] = [part.strip() for part in env[key].split(",") if part.strip()]
        else:
            merged[name] = env[key]

    if flow:
        merged["flow"] = flow
    return merged


def load_config(
    config_path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> DemoConfig:
    """
    Load configuration from file and environment, or use defaults.

    Args:
        config_path: Optional path to a .toml or .json file
        env: Environment mapping. If None, loads .env and uses os.environ

    Returns:
        DemoConfig instance

    Raises:
        FileNotFoundError: If config_path does not exist
        ValueError: If the file format is unsupported or values are invalid
    """
    data: Dict[str, Any] = {}
    if config_path:
        data = _read_config_file(Path(config_path))
        logger.debug(f"Loaded config file {config_path}")

    if env is None:
        load_dotenv()
        env = os.environ

    return DemoConfig.model_validate(_apply_env_overrides(data, env))
