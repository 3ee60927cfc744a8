"""Errors raised by tooling backends."""

from typing import Optional


class ToolingError(Exception):
    """
    An external call to the ledger backend failed.

    Attributes:
        name: Contract, account, transaction or script name
        detail: Backend output explaining the failure
    """

    operation = "call"

    def __init__(self, name: str, detail: Optional[str] = None):
        self.name = name
        self.detail = detail or ""
        message = f"{self.operation} '{name}' failed"
        if self.detail:
            message = f"{message}: {self.detail}"
        super().__init__(message)


class DeploymentError(ToolingError):
    operation = "deploy contract"


class AccountError(ToolingError):
    operation = "account"


class TransactionError(ToolingError):
    operation = "transaction"


class ScriptError(ToolingError):
    operation = "script"
