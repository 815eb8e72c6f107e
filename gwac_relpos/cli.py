"""
Command-line interface for relative pointing computation.

Usage:
    gwac-relpos PATH1 PATH2 [ROTATION_BASE] [TILT_BASE] [--config CONFIG]
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import Config
from .errors import EmptySeries, MultiDayInput, NoOverlap, RelposError
from .pipeline import RelativePositionRunner

EXIT_INPUT_ERROR = 2
EXIT_DATA_UNAVAILABLE = 3
EXIT_TIME_MISMATCH = 4


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Compute the position of the JFoV centre relative to the FFoV centre',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Each record file holds one "ra dec filename" line per image, in time order.
Files may be given in either order; camera ids that are multiples of 5
are taken as FFoV.

Examples:
    # Zero reference angles
    gwac-relpos G041.txt G045.txt

    # Reference rotation 90 deg, tilt 5 deg
    gwac-relpos G041.txt G045.txt 90 5

    # Settings from a configuration file, results in ./results
    gwac-relpos G041.txt G045.txt --config relpos.yaml -o ./results
'''
    )

    parser.add_argument('path1', type=str, help='First record file')
    parser.add_argument('path2', type=str, help='Second record file')
    parser.add_argument(
        'rotation_base',
        type=float,
        nargs='?',
        default=None,
        help='Reference rotation in degrees (default: 0)'
    )
    parser.add_argument(
        'tilt_base',
        type=float,
        nargs='?',
        default=None,
        help='Reference tilt in degrees (default: 0)'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        default=None,
        help='Path to YAML configuration file'
    )

    parser.add_argument(
        '--output-dir', '-o',
        type=str,
        default=None,
        help='Output directory for the result file (default: current directory)'
    )

    parser.add_argument(
        '--max-gap',
        type=float,
        default=None,
        help='Largest accepted JFoV/FFoV time difference in seconds (default: 10)'
    )

    parser.add_argument(
        '--no-file',
        action='store_true',
        help='Print results only, do not write the result file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Load the configuration and apply command-line overrides."""
    config = Config.from_yaml(args.config) if args.config else Config()

    if args.rotation_base is not None:
        config.reference.rotation = args.rotation_base
    if args.tilt_base is not None:
        config.reference.tilt = args.tilt_base
    if args.max_gap is not None:
        config.matching.max_gap_seconds = args.max_gap
    if args.output_dir:
        config.output.directory = args.output_dir
    if args.no_file:
        config.output.write_file = False

    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args)
        runner = RelativePositionRunner(config)
        report = runner.run_files(args.path1, args.path2)

        if not report.has_matches:
            logger.info("No data matches condition")
            return 0

        runner.write(report)
        return 0

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return EXIT_INPUT_ERROR
    except EmptySeries as e:
        logger.error(str(e))
        return EXIT_DATA_UNAVAILABLE
    except (MultiDayInput, NoOverlap) as e:
        logger.error(str(e))
        return EXIT_TIME_MISMATCH
    except (RelposError, ValueError) as e:
        logger.error(f"Input error: {e}")
        return EXIT_INPUT_ERROR
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
