"""Payout weight service."""

from datetime import datetime, timezone
from typing import Dict, List, Union

from fastapi import FastAPI, Request

from orbital import __version__
from orbital.core.payouts import payout_weights
from orbital.utils.logger import get_logger

logger = get_logger("api")

app = FastAPI(title="Orbital Auction payouts", version=__version__)
app.state.start_time = datetime.now(timezone.utc)


@app.get("/payouts/{number}")
async def payouts(number: int) -> List[Dict[str, Union[int, float]]]:
    """Payout weights for every divisor of `number`."""
    weights = payout_weights(number)
    logger.debug(f"Payout weights for {number}: {len(weights)} tokens")
    return [w.to_dict() for w in weights]


@app.get("/health")
async def health(request: Request) -> Dict[str, Union[int, str]]:
    start_time = request.app.state.start_time
    uptime = int((datetime.now(timezone.utc) - start_time).total_seconds())
    return {
        "status": "healthy",
        "uptime_seconds": uptime,
        "version": request.app.version,
    }
