"""
In-memory tooling backend.

Runs the demo without an emulator: accounts get emulator-style addresses,
transactions are accepted as long as the signer and every address
argument belong to known accounts, and scripts return whatever results
were configured for them. Nothing of the contracts' own logic is modelled.
"""

from typing import Any, Callable, Dict, Iterable, Optional, Set, Tuple, Type, Union

from orbital.core.values import Address, CadenceValue
from orbital.tooling.base import Tooling
from orbital.tooling.errors import (
    AccountError,
    DeploymentError,
    ScriptError,
    ToolingError,
    TransactionError,
)
from orbital.utils.logger import get_logger

logger = get_logger("tooling.dry_run")

SERVICE_ADDRESS = Address("0xf8d6e0586b0a20c7")

# Addresses handed out by the emulator after the service account
EMULATOR_ADDRESSES = (
    "0x01cf0e2f2f715450",
    "0x179b6b1cb6755e31",
    "0xf3fcd2c1a78f5eee",
    "0xe03daebed8ca0615",
    "0x045a1763c93006ca",
    "0x120e725050340cab",
    "0xf669cb8d41ce0c74",
    "0x192440c99cb17282",
    "0xfd43f9148d4b725d",
    "0xeb179c27144f783c",
)

ScriptResult = Union[Any, Callable[[Tuple[CadenceValue, ...]], Any]]


class DryRunTooling(Tooling):
    """
    Tooling backend that keeps everything in memory.

    Args:
        accounts: Account names that exist before the run (contract accounts)
        script_results: Script name -> result, or callable taking the
            script arguments and returning the result
        fail_on: Names of contracts, accounts, transactions or scripts
            whose calls should fail
        service_account: Name of the pre-funded service account
    """

    def __init__(
        self,
        accounts: Iterable[str] = (),
        script_results: Optional[Dict[str, ScriptResult]] = None,
        fail_on: Iterable[str] = (),
        service_account: str = "emulator-account",
    ):
        super().__init__()
        self.addresses: Dict[str, Address] = {service_account: SERVICE_ADDRESS}
        self.deployed: Set[str] = set()
        self.script_results: Dict[str, ScriptResult] = dict(script_results or {})
        self.fail_on: Set[str] = set(fail_on)
        self._tx_count = 0

        for name in accounts:
            self._assign(name)

    @classmethod
    def from_config(cls, config, **kwargs) -> "DryRunTooling":
        """Backend with the contract accounts of `config` already present."""
        kwargs.setdefault("service_account", config.flow.service_account)
        return cls(accounts=config.contracts, **kwargs)

    # =========================================================================
    # Internals
    # =========================================================================

    def _assign(self, name: str) -> Address:
        index = len(self.addresses) - 1
        if index < len(EMULATOR_ADDRESSES):
            address = Address(EMULATOR_ADDRESSES[index])
        else:
            address = Address(f"{index + 1:016x}")
        self.addresses[name] = address
        return address

    def _check_failure(self, name: str, error: Type[ToolingError]):
        if name in self.fail_on:
            raise error(name, "failure injected")

    def _known(self, address: Address) -> bool:
        return address in self.addresses.values()

    # =========================================================================
    # Backend hooks
    # =========================================================================

    def _deploy_contract(self, name: str) -> None:
        self._check_failure(name, DeploymentError)
        if name not in self.addresses:
            raise DeploymentError(name, f"no account named {name}")
        if name in self.deployed:
            raise DeploymentError(name, "contract already deployed")
        self.deployed.add(name)

    def _create_account(self, name: str) -> Address:
        self._check_failure(name, AccountError)
        if name in self.addresses:
            raise AccountError(name, "account already exists")
        return self._assign(name)

    def _find_address(self, name: str) -> Address:
        try:
            return self.addresses[name]
        except KeyError:
            raise AccountError(name, "unknown account") from None

    def _send_transaction(self, name: str, signer: str, args: Tuple[CadenceValue, ...]) -> Dict[str, Any]:
        self._check_failure(name, TransactionError)
        if signer not in self.addresses:
            raise TransactionError(name, f"unknown signer {signer}")
        for arg in args:
            if isinstance(arg, Address) and not self._known(arg):
                raise TransactionError(name, f"no account at {arg}")

        self._tx_count += 1
        return {"id": f"{self._tx_count:064x}", "status": "SEALED", "events": []}

    def _run_script(self, name: str, args: Tuple[CadenceValue, ...]) -> Any:
        self._check_failure(name, ScriptError)
        result = self.script_results.get(name)
        if callable(result):
            return result(args)
        return result
