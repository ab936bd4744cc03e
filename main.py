#!/usr/bin/env python3
"""
pricecast - Main Entry Point
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from config.settings import create_config, validate_config
from pricecast.core.exceptions import ForecastEngineError
from pricecast.data.loader import load_series
from pricecast.forecasting.batch import MODES, run_batch
from pricecast.utils.logger import log_startup_info, setup_logging


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Commodity price forecasting and anomaly detection')

    parser.add_argument(
        'inputs',
        nargs='+',
        help='CSV or JSON price files (one series per file)'
    )

    parser.add_argument(
        '--mode',
        choices=MODES,
        default='predict',
        help='Analysis mode (default: predict)'
    )

    parser.add_argument(
        '--horizon',
        type=int,
        default=7,
        help='Prediction horizon in days for predict mode (default: 7)'
    )

    parser.add_argument(
        '--horizons',
        type=int,
        nargs='+',
        help='Horizons for horizons/report modes (default: from config)'
    )

    parser.add_argument(
        '--advanced',
        action='store_true',
        help='Include ARIMA and Holt-Winters in the ensemble'
    )

    parser.add_argument(
        '--date-column',
        default='date',
        help='Date column name (default: date)'
    )

    parser.add_argument(
        '--value-column',
        default='value',
        help='Price column name (default: value)'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to custom config file'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: from config)'
    )

    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Config overrides coming from the command line"""
    overrides: Dict[str, Any] = {}

    if args.log_level:
        overrides['log_level'] = args.log_level
    if args.advanced:
        overrides['predictor'] = {'include_advanced_models': True}
    if args.horizons:
        overrides['default_horizons'] = args.horizons

    return overrides


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point, returns the process exit code"""
    args = parse_arguments(argv)

    try:
        config = create_config(config_path=args.config, overrides=build_overrides(args))
    except ForecastEngineError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    setup_logging(level=config.log_level, log_to_file=config.log_to_file, log_dir=config.log_dir)
    logger = logging.getLogger(__name__)

    if not validate_config(config):
        logger.error("❌ Configuration validation failed")
        return 2

    log_startup_info(config)

    inputs = {}
    for path in args.inputs:
        try:
            label = Path(path).stem if Path(path).stem not in inputs else path
            inputs[label] = load_series(path, args.date_column, args.value_column)
        except ForecastEngineError as e:
            logger.error(f"❌ {e}")
            return 1

    results = await run_batch(
        inputs,
        args.mode,
        horizon=args.horizon,
        horizons=config.default_horizons,
        predictor_config=config.predictor,
        anomaly_config=config.anomaly,
    )

    output: List[Dict[str, Any]] = [result.to_dict() for result in results]
    print(json.dumps(output if len(output) > 1 else output[0], indent=2, ensure_ascii=False))

    return 0 if all(result.ok for result in results) else 1


def cli() -> None:
    """Console script entry point"""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n👋 Goodbye!", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    cli()
