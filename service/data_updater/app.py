import argparse
import logging
import os

from service.tempchart.base import logging_config as _  # configure logging

from . import openmeteo

logger = logging.getLogger("data_updater")


def main():
    parser = argparse.ArgumentParser(
        description="Download yearly temperature data files.", allow_abbrev=False
    )
    parser.add_argument(
        "--output-dir",
        dest="output_dir",
        metavar="PATH",
        help="Directory for the data files (defaults to $TEMPCHART_DATA_DIR).",
    )
    parser.add_argument(
        "--start-year",
        dest="start_year",
        type=int,
        default=2020,
        help="First year to download (default: 2020).",
    )
    parser.add_argument(
        "--end-year",
        dest="end_year",
        type=int,
        default=2024,
        help="Last year to download, inclusive (default: 2024).",
    )
    parser.add_argument(
        "--station",
        dest="stations",
        action="append",
        choices=sorted(openmeteo.STATIONS),
        help="Station to download (repeatable). Defaults to all stations.",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.5,
        help="Seconds to wait between API requests (default: 0.5).",
    )

    args = parser.parse_args()

    if args.output_dir:
        output_dir = args.output_dir
    elif "TEMPCHART_DATA_DIR" in os.environ:
        output_dir = os.environ["TEMPCHART_DATA_DIR"]
    else:
        parser.error("--output-dir is required if $TEMPCHART_DATA_DIR is not set.")

    if args.start_year > args.end_year:
        parser.error("--start-year must not be after --end-year.")

    station_ids = args.stations or list(openmeteo.STATIONS)
    logger.info(
        "Downloading %d-%d for stations %s into %s",
        args.start_year,
        args.end_year,
        ",".join(station_ids),
        output_dir,
    )
    openmeteo.run_update(
        output_dir,
        station_ids,
        start_year=args.start_year,
        end_year=args.end_year,
        delay=args.delay,
    )


if __name__ == "__main__":
    main()
