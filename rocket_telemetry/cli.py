"""Command line interface.

Usage:
    rocket-telemetry generate --duration 60 --khz 1 --launch-id SIM-002
    rocket-telemetry influxdb --token $TOKEN --org my-org --bucket telemetry
"""

import argparse
import logging
import sys
from collections.abc import Sequence

from rocket_telemetry.config import DEFAULT_BATCH_SIZE, InfluxConfig, TelemetryConfig
from rocket_telemetry.errors import TelemetryError
from rocket_telemetry.pipeline import export_to_influx, generate_dataset, generate_to_files

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _add_generation_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-d", "--duration", type=int, default=120,
                        help="Duration of the simulated flight [s] (default: 120)")
    parser.add_argument("--khz", type=float, default=1.0,
                        help="Sample rate [kHz] (default: 1)")
    parser.add_argument("--launch-id", default="SIM-001")
    parser.add_argument("--seed", type=int, default=1337)
    parser.add_argument("--disable-progress", action="store_true",
                        help="Disable progress bars")
    parser.add_argument("--max-rows", type=int, default=None,
                        help="Warn when the run would produce more readings than this")
    parser.add_argument("--timestamp-jitter", type=float, default=50.0,
                        help="Timestamp jitter standard deviation [us] (default: 50)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rocket-telemetry",
        description="Generate mock rocket telemetry data",
    )
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate telemetry to Parquet + metadata CSV")
    _add_generation_args(gen)
    gen.add_argument("-o", "--output-dir", default="output")

    influx = sub.add_parser("influxdb", help="Generate telemetry and send it to InfluxDB")
    _add_generation_args(influx)
    influx.add_argument("--url", default="http://localhost:8086")
    influx.add_argument("-t", "--token", required=True)
    influx.add_argument("--org", required=True)
    influx.add_argument("-b", "--bucket", required=True)
    influx.add_argument("--batch-size", type=int, default=DEFAULT_BATCH_SIZE)

    return parser


def config_from_args(args: argparse.Namespace) -> TelemetryConfig:
    return TelemetryConfig(
        duration_s=args.duration,
        sample_rate_hz=round(args.khz * 1000.0),
        launch_id=args.launch_id,
        seed=args.seed,
        max_rows=args.max_rows,
        timestamp_jitter_us=args.timestamp_jitter,
        batch_size=getattr(args, "batch_size", DEFAULT_BATCH_SIZE),
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)
    logger.info("Command: %s", args.command)

    try:
        config = config_from_args(args)
    except ValueError as err:
        parser.error(str(err))

    progress = not args.disable_progress

    try:
        if args.command == "generate":
            report = generate_to_files(config, args.output_dir, progress=progress)
            logger.info("Parquet: %s, metadata: %s", report.parquet_path, report.metadata_path)
        elif args.command == "influxdb":
            influx = InfluxConfig(token=args.token, org=args.org, bucket=args.bucket, url=args.url)
            dataset = generate_dataset(config, progress=progress)
            summary = export_to_influx(dataset, influx, progress=progress)
            logger.info("Sent %d readings in %d batches", summary.readings_written, summary.batch_count)
    except TelemetryError as err:
        logger.error("%s", err)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
