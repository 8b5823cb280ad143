"""
Command-line mood forecast.

    moodflow-forecast --city Lyon --model knn --seed 7
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

import numpy as np
import structlog

from .config import get_settings
from .logging_config import configure_logging
from .session import PredictionSession, PredictionState

logger = structlog.get_logger(__name__)


def format_state(state: PredictionState) -> str:
    """Plain-text report of a successful prediction."""
    lines = [f"Mood forecast for {state.city_label or state.city}", ""]
    for point in state.chart:
        lines.append(
            f"  {point.label:<6} {point.date.isoformat()}  "
            f"{point.weather.icon} {point.weather.label:<14} {point.temp:>5.1f}°C  "
            f"mood {point.mood:.2f}"
        )

    if state.model_metrics is not None:
        m = state.model_metrics
        lines += [
            "",
            f"Model: {m.model_name} (test R² {m.test_r2:.3f}, RMSE {m.test_rmse:.3f}, "
            f"{m.n_train} train / {m.n_test} test days)",
        ]

    lines.append("")
    lines.extend(f"- {reason}" for reason in state.reasons)
    return "\n".join(lines)


async def run(city: str, model: str, seed: Optional[int]) -> PredictionState:
    rng = np.random.default_rng(seed) if seed is not None else None
    session = PredictionSession(rng=rng)
    try:
        state = await session.refresh_prediction(city)
        if state.status == "success" and model != "best":
            try:
                session.select_prediction_model(model)
            except ValueError as e:
                logger.error("model_unavailable", model=model, error=str(e))
                state.status = "error"
                state.error = str(e)
        return state
    finally:
        await session.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description='Forecast mood for the next days from the weather'
    )
    parser.add_argument(
        '--city',
        type=str,
        default=settings.default_city,
        help='City to forecast'
    )
    parser.add_argument(
        '--model',
        choices=['best', 'linear', 'knn', 'tree'],
        default='best',
        help='Model whose forecast is shown'
    )
    parser.add_argument(
        '--seed',
        type=int,
        help='Seed for the synthetic training corpus'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the prediction as JSON'
    )

    args = parser.parse_args(argv)
    configure_logging(settings.log_level, settings.log_json)

    state = asyncio.run(run(args.city, args.model, args.seed))
    if state.status != "success":
        print(f"Error: {state.error}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(state.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_state(state))
    return 0


if __name__ == "__main__":
    sys.exit(main())
