"""
Tooling clients for the ledger backend.

- Tooling: abstract call surface used by the demo driver
- FlowCLITooling: drives the Flow CLI against an emulator or network
- DryRunTooling: in-memory backend for dry runs and tests
"""

from orbital.tooling.base import Tooling, Invocation, CallKind
from orbital.tooling.errors import (
    ToolingError,
    DeploymentError,
    AccountError,
    TransactionError,
    ScriptError,
)
from orbital.tooling.dry_run import DryRunTooling
from orbital.tooling.flow_cli import FlowCLITooling

__all__ = [
    "Tooling",
    "Invocation",
    "CallKind",
    "ToolingError",
    "DeploymentError",
    "AccountError",
    "TransactionError",
    "ScriptError",
    "DryRunTooling",
    "FlowCLITooling",
]
