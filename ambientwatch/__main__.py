"""Entry point for AmbientWatch: python -m ambientwatch."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .app import AmbientWatchApp
from .config import load_config
from .i18n import LANGUAGES, init_lang


def setup_logging(verbose: bool, quiet: bool = False) -> None:
    """Configure logging."""
    if quiet:
        # TUI mode: suppress all log output to avoid corrupting the display
        logging.basicConfig(level=logging.CRITICAL + 1)
        return

    level = logging.DEBUG if verbose else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ambientwatch",
        description="Terminal dashboard for a local air-quality monitor",
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to configuration file (default: config.yaml, optional)",
    )

    parser.add_argument(
        "-a", "--address",
        default=None,
        help="Device address, e.g. 192.168.1.40 or ambient.local (overrides config)",
    )

    parser.add_argument(
        "-i", "--interval",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Live poll interval in seconds (overrides config, default 2)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "-o", "--console",
        nargs="?",
        const=0,
        type=int,
        default=None,
        metavar="INTERVAL",
        help=(
            "Print readings to the console instead of the TUI. "
            "--console alone = keypress mode (Enter to print), "
            "--console 10 = print every 10 seconds"
        ),
    )

    parser.add_argument(
        "--lang",
        choices=list(LANGUAGES),
        default=None,
        help="UI language: en (English, default) or fi (Finnish)",
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run against a built-in fake device (no hardware needed)",
    )

    return parser.parse_args(argv)


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging(args.verbose, quiet=args.console is None)

    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config.resolve())
    except Exception as e:
        logger.error("Could not read configuration %s: %s", args.config, e)
        return 1

    # CLI flags override the config file
    if args.address:
        config.device.address = args.address.strip()
    if args.interval is not None:
        if args.interval <= 0:
            logger.error("Poll interval must be positive")
            return 1
        config.device.poll_interval = args.interval
    if args.lang:
        config.language = args.lang

    init_lang(config.language)

    try:
        if args.demo:
            from .demo import run_demo

            asyncio.run(run_demo(config, console_interval=args.console))
        else:
            app = AmbientWatchApp(config, console_interval=args.console)
            asyncio.run(app.run())
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
