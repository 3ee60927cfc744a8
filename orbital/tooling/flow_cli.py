"""
Flow CLI tooling backend.

Every call runs the ``flow`` command line tool against the configured
network and parses its JSON output. Cadence sources are looked up by
name under the project directory:

    contracts/<name>.cdc
    transactions/<name>.cdc
    scripts/<name>.cdc

Accounts created during a run are written back into flow.json so later
transactions can be signed by them.
"""

import json
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, Type

from orbital.core.config import FlowSettings
from orbital.core.values import Address, CadenceValue, decode_value, encode_arguments
from orbital.tooling.base import Tooling
from orbital.tooling.errors import (
    AccountError,
    DeploymentError,
    ScriptError,
    ToolingError,
    TransactionError,
)
from orbital.utils.logger import get_logger

logger = get_logger("tooling.flow")

Runner = Callable[..., subprocess.CompletedProcess]


def _parse_output(stdout: str) -> Any:
    text = stdout.strip()
    if not text:
        return {}
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return {"output": text}


class FlowCLITooling(Tooling):
    """
    Tooling backend driving the Flow CLI.

    Args:
        settings: CLI location, network and project layout
        runner: Replacement for subprocess.run
    """

    def __init__(self, settings: FlowSettings, runner: Runner = subprocess.run):
        super().__init__()
        self.settings = settings
        self._runner = runner
        self._addresses: Dict[str, Address] = {}

    @property
    def config_file(self) -> Path:
        return self.settings.project_dir / self.settings.config_path

    # =========================================================================
    # CLI plumbing
    # =========================================================================

    def _flow(self, args: List[str], error: Type[ToolingError], name: str) -> Any:
        argv = [
            self.settings.flow_bin,
            *args,
            "--network", self.settings.network,
            "-f", str(self.settings.config_path),
            "-o", "json",
        ]
        logger.debug(f"$ {' '.join(argv)}")

        try:
            proc = self._runner(
                argv,
                cwd=str(self.settings.project_dir),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise error(name, f"cannot run {self.settings.flow_bin}: {e}") from e

        if proc.returncode != 0:
            raise error(name, (proc.stderr or proc.stdout or "").strip())

        return _parse_output(proc.stdout)

    @staticmethod
    def _with_arguments(argv: List[str], args: Tuple[CadenceValue, ...]) -> List[str]:
        if args:
            argv += ["--args-json", json.dumps(encode_arguments(args))]
        return argv

    def _load_flow_json(self) -> Dict[str, Any]:
        try:
            return json.loads(self.config_file.read_text())
        except FileNotFoundError:
            raise AccountError(str(self.config_file), "flow.json not found") from None

    def _register_account(self, name: str, address: Address, private_key: str):
        data = self._load_flow_json()
        data.setdefault("accounts", {})[name] = {
            "address": address.hex,
            "key": private_key,
        }
        self.config_file.write_text(json.dumps(data, indent=2) + "\n")

    # =========================================================================
    # Backend hooks
    # =========================================================================

    def _deploy_contract(self, name: str) -> None:
        self._flow(
            ["accounts", "add-contract", f"contracts/{name}.cdc", "--signer", name],
            DeploymentError,
            name,
        )

    def _create_account(self, name: str) -> Address:
        if name in self._load_flow_json().get("accounts", {}):
            raise AccountError(name, "account already exists in flow.json")

        keys = self._flow(["keys", "generate"], AccountError, name)
        if "public" not in keys or "private" not in keys:
            raise AccountError(name, f"unexpected key output: {keys}")

        created = self._flow(
            ["accounts", "create", "--key", keys["public"], "--signer", self.settings.service_account],
            AccountError,
            name,
        )
        if "address" not in created:
            raise AccountError(name, f"unexpected account output: {created}")

        address = Address(created["address"])
        self._register_account(name, address, keys["private"])
        self._addresses[name] = address
        return address

    def _find_address(self, name: str) -> Address:
        if name in self._addresses:
            return self._addresses[name]

        entry = self._load_flow_json().get("accounts", {}).get(name)
        if not isinstance(entry, dict) or "address" not in entry:
            raise AccountError(name, "unknown account")

        address = Address(entry["address"])
        self._addresses[name] = address
        return address

    def _send_transaction(self, name: str, signer: str, args: Tuple[CadenceValue, ...]) -> Dict[str, Any]:
        argv = self._with_arguments(
            ["transactions", "send", f"transactions/{name}.cdc", "--signer", signer],
            args,
        )
        result = self._flow(argv, TransactionError, name)
        if isinstance(result, dict) and result.get("error"):
            raise TransactionError(name, str(result["error"]))
        return result

    def _run_script(self, name: str, args: Tuple[CadenceValue, ...]) -> Any:
        argv = self._with_arguments(["scripts", "execute", f"scripts/{name}.cdc"], args)
        return decode_value(self._flow(argv, ScriptError, name))
