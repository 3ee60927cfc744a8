"""
Tooling client interface.

The demo driver talks to the ledger only through this interface:
- deploy a named contract to the account of the same name
- create named accounts and resolve them to addresses
- send transactions signed by a named account
- run read-only scripts

Every completed call except address lookups is appended to ``history``
so a run can be inspected afterwards.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from orbital.core.values import Address, CadenceValue
from orbital.utils.logger import get_logger

logger = get_logger("tooling")


class CallKind(Enum):
    """Kind of recorded tooling call."""
    DEPLOY = "deploy"
    CREATE_ACCOUNT = "create_account"
    TRANSACTION = "transaction"
    SCRIPT = "script"


@dataclass(frozen=True)
class Invocation:
    """
    A completed tooling call.

    Attributes:
        kind: What was called
        name: Contract, account, transaction or script name
        signer: Signing account for transactions and deployments
        arguments: Typed arguments in call order
    """
    kind: CallKind
    name: str
    signer: Optional[str] = None
    arguments: Tuple[CadenceValue, ...] = ()

    def addresses(self) -> List[Address]:
        """Address arguments of this call."""
        return [arg for arg in self.arguments if isinstance(arg, Address)]

    def describe(self) -> str:
        args = ", ".join(str(arg) for arg in self.arguments)
        signer = f" as {self.signer}" if self.signer else ""
        return f"{self.kind.value} {self.name}({args}){signer}"


class Tooling(ABC):
    """Base class for ledger backends."""

    def __init__(self):
        self.history: List[Invocation] = []

    # =========================================================================
    # Public API
    # =========================================================================

    def deploy_contract(self, name: str) -> None:
        """Deploy contract `name` to the account of the same name."""
        logger.debug(f"Deploying contract {name}")
        self._deploy_contract(name)
        self._record(Invocation(CallKind.DEPLOY, name, signer=name))
        logger.info(f"Contract {name} deployed")

    def create_account(self, name: str) -> Address:
        """Create a named account and return its address."""
        address = self._create_account(name)
        self._record(Invocation(CallKind.CREATE_ACCOUNT, name))
        logger.info(f"Account {name} created at {address}")
        return address

    def find_address(self, name: str) -> Address:
        """Resolve a named account to its address."""
        return self._find_address(name)

    def send_transaction(self, name: str, signer: str, *args: CadenceValue) -> Dict[str, Any]:
        """
        Send a transaction and wait for it to complete.

        Args:
            name: Transaction name, e.g. "bid/place_bid"
            signer: Name of the signing account
            *args: Typed transaction arguments

        Returns:
            Backend-specific transaction result
        """
        invocation = Invocation(CallKind.TRANSACTION, name, signer=signer, arguments=tuple(args))
        logger.debug(f"Sending {invocation.describe()}")
        result = self._send_transaction(name, signer, tuple(args))
        self._record(invocation)
        return result

    def run_script(self, name: str, *args: CadenceValue) -> Any:
        """
        Execute a read-only script.

        Returns:
            The script result decoded to Python values
        """
        invocation = Invocation(CallKind.SCRIPT, name, arguments=tuple(args))
        logger.debug(f"Running {invocation.describe()}")
        result = self._run_script(name, tuple(args))
        self._record(invocation)
        return result

    # =========================================================================
    # History
    # =========================================================================

    def _record(self, invocation: Invocation):
        self.history.append(invocation)

    def calls(self, kind: Optional[CallKind] = None, name: Optional[str] = None) -> List[Invocation]:
        """Recorded calls, optionally filtered by kind and name."""
        return [
            inv for inv in self.history
            if (kind is None or inv.kind == kind) and (name is None or inv.name == name)
        ]

    # =========================================================================
    # Backend hooks
    # =========================================================================

    @abstractmethod
    def _deploy_contract(self, name: str) -> None:
        ...

    @abstractmethod
    def _create_account(self, name: str) -> Address:
        ...

    @abstractmethod
    def _find_address(self, name: str) -> Address:
        ...

    @abstractmethod
    def _send_transaction(self, name: str, signer: str, args: Tuple[CadenceValue, ...]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def _run_script(self, name: str, args: Tuple[CadenceValue, ...]) -> Any:
        ...
