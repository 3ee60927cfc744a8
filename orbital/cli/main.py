"""
Orbital CLI - Command Line Interface for the Orbital Auction demo

Main entry point for all CLI commands.
"""

import json
import click

from orbital import __version__
from orbital.api import DEFAULT_PORT
from orbital.utils.logger import setup_logging


def _load(ctx):
    """Load the demo config or exit with status 1."""
    from orbital.core.config import load_config

    try:
        return load_config(ctx.obj["config_path"])
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        ctx.exit(1)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-dir", default=None, help="Also write logs to this directory")
@click.option("--config", "config_path", default=None, help="Config file (.toml or .json)")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, debug, log_dir, config_path):
    """Orbital Auction - scripted end-to-end auction demo"""
    import logging

    level = logging.DEBUG if debug else logging.INFO
    setup_logging(level=level, log_dir=log_dir)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.option(
    "--scenario",
    type=click.Choice(["orbital", "classic"]),
    default="orbital",
    help="Demo scenario to run",
)
@click.option("--dry-run", is_flag=True, help="Run against the in-memory backend")
@click.option("--pace", type=float, default=None, help="Seconds to pause after each phase")
@click.option("--interactive", is_flag=True, help="Wait for ENTER before completing the auction")
@click.option("--strict", is_flag=True, help="Exit non-zero when payout verification finds issues")
@click.pass_context
def demo(ctx, scenario, dry_run, pace, interactive, strict):
    """Run the auction demo end to end"""
    from orbital.demo import PhaseError, create_demo
    from orbital.tooling import CallKind, DryRunTooling, FlowCLITooling

    config = _load(ctx)
    if pace is not None:
        config = config.model_copy(update={"pace": max(pace, 0.0)})

    if dry_run:
        tooling = DryRunTooling.from_config(config)
        click.echo("⚠️  Dry run: calls are recorded in memory, nothing is sent")
    else:
        tooling = FlowCLITooling(config.flow)

    click.echo("=" * 60)
    click.echo(f"  ORBITAL AUCTION - {scenario.upper()} DEMO")
    click.echo("=" * 60)
    click.echo()

    runner = create_demo(scenario, tooling, config, interactive=interactive)
    try:
        result = runner.run()
    except PhaseError as e:
        click.echo(f"❌ Demo aborted during '{e.phase}': {e.cause}", err=True)
        ctx.exit(1)

    transactions = sum(1 for inv in tooling.history if inv.kind == CallKind.TRANSACTION)
    click.echo()
    click.echo("📊 Final Statistics:")
    click.echo(f"  Calls: {len(tooling.history)} ({transactions} transactions)")
    if result.bidders:
        click.echo(f"  Bidders: {', '.join(result.bidders)}")

    if result.report is not None and not result.report.ok:
        click.echo(f"⚠️  Payout verification found {len(result.report.issues)} issue(s)")
        if strict:
            ctx.exit(1)

    click.echo("✅ Demo complete!")


# =============================================================================
# Payout Commands
# =============================================================================


@cli.command("payouts")
@click.argument("number", type=int)
def payouts(number):
    """Print payout weights for NUMBER epochs as JSON"""
    from orbital.core.payouts import payout_weights

    click.echo(json.dumps([w.to_dict() for w in payout_weights(number)], indent=2))


@cli.command("serve")
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=DEFAULT_PORT, type=int, help="HTTP port")
def serve(host, port):
    """Serve payout weights over HTTP"""
    import uvicorn

    click.echo(f"Payout service listening at http://{host}:{port}")
    uvicorn.run("orbital.api.app:app", host=host, port=port)


# =============================================================================
# Config Commands
# =============================================================================


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Show the resolved demo configuration"""
    config = _load(ctx)
    click.echo(config.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
