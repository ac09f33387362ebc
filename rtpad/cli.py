"""rtpad command-line interface"""

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

from rtpad import __version__
from rtpad.common.app_logging import logging_setup
from rtpad.common.config import Config, ConfigLoader
from rtpad.input.backend import InputPlugin

logger = logging.getLogger(__name__)


def arguments_parse(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments

    Args:
        argv: Argument list, defaults to sys.argv.

    Returns:
        Parsed CLI arguments.
    """
    parser = argparse.ArgumentParser(
        prog="rtpad",
        description="Inject keyboard and pointer events into the desktop session",
    )

    parser.add_argument("--version", action="version", version=f"rtpad {__version__}")

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: search standard locations)",
    )

    parser.add_argument(
        "--backend",
        type=str,
        choices=["portal", "x11"],
        default=None,
        help="Use only this backend instead of the configured probe order.",
    )

    parser.add_argument(
        "--display", type=str, default=None, help="X11 display name (overrides config)"
    )

    # Actions, run in this order
    parser.add_argument("--type", type=str, default=None, dest="text", help="Type TEXT")

    parser.add_argument(
        "--click",
        type=int,
        default=None,
        metavar="BUTTON",
        help="Click pointer BUTTON (1=left, 2=middle, 3=right)",
    )

    parser.add_argument(
        "--move",
        type=float,
        nargs=2,
        default=None,
        metavar=("DX", "DY"),
        help="Move the pointer by DX, DY",
    )

    parser.add_argument(
        "--scroll",
        type=float,
        nargs=2,
        default=None,
        metavar=("DX", "DY"),
        help="Scroll by DX, DY and finish the scroll gesture",
    )

    # Keysym table generation
    parser.add_argument(
        "--generate-keysyms",
        action="store_true",
        help="Regenerate the keysym table from keysymdef.h and exit",
    )

    parser.add_argument(
        "--keysymdef", type=str, default=None, help="keysymdef.h path (overrides config)"
    )

    parser.add_argument(
        "--output", type=str, default=None, help="Generated keysym module path (overrides config)"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging (overrides config)"
    )

    parser.add_argument(
        "--info", action="store_true", help="Enable info logging (overrides config)"
    )

    parser.add_argument(
        "--warning", action="store_true", help="Enable warning logging (overrides config)"
    )

    parser.add_argument(
        "--error", action="store_true", help="Enable error logging (overrides config)"
    )

    parser.add_argument(
        "--critical", action="store_true", help="Enable critical logging (overrides config)"
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """
    Main entry point for the rtpad command

    Args:
        argv: Argument list, defaults to sys.argv.
    """
    args = arguments_parse(argv)

    try:
        config = config_load(args)
        logging_setup(config.logging.level, config.logging.format, config.logging.file)
        if args.generate_keysyms:
            keysyms_generate(config)
        else:
            actions_run(args, config)
        sys.exit(0)

    except KeyboardInterrupt:
        print("\nShutting down...")
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def logLevelOverride_get(args: argparse.Namespace) -> str | None:
    """
    Resolve explicit log level override flags.

    Args:
        args: Parsed CLI args.

    Returns:
        Selected log level or None.
    """
    if args.critical:
        return "CRITICAL"
    if args.error:
        return "ERROR"
    if args.warning:
        return "WARNING"
    if args.info:
        return "INFO"
    if args.debug:
        return "DEBUG"
    return None


def config_load(args: argparse.Namespace) -> Config:
    """
    Load configuration with command line overrides applied.

    Args:
        args: Parsed CLI args.

    Returns:
        Effective configuration.
    """
    config_path: Path | None = Path(args.config) if args.config else None
    return ConfigLoader.configWithOverrides_load(
        config_path,
        backend=args.backend,
        display=args.display,
        keysymdef=args.keysymdef,
        output=args.output,
        log_level=logLevelOverride_get(args),
    )


def keysyms_generate(config: Config) -> None:
    """
    Regenerate the keysym table module.

    Args:
        config: Effective configuration.
    """
    from rtpad.keysyms.generator import keysymTable_generate

    count: int = keysymTable_generate(config.keysyms.header, config.keysyms.output)
    print(f"Wrote {count} keysyms to {config.keysyms.output}")


def actions_apply(plugin: InputPlugin, args: argparse.Namespace) -> None:
    """
    Run the requested injection actions in order.

    Args:
        plugin: Ready input backend.
        args: Parsed CLI args.
    """
    if args.text is not None:
        plugin.keyboardText_inject(args.text)
    if args.click is not None:
        plugin.pointerButton_inject(args.click, True)
        plugin.pointerButton_inject(args.click, False)
    if args.move is not None:
        plugin.pointerMove_inject(args.move[0], args.move[1])
    if args.scroll is not None:
        plugin.pointerScroll_inject(args.scroll[0], args.scroll[1])
        plugin.pointerScroll_finish()


def actions_run(args: argparse.Namespace, config: Config) -> None:
    """
    Initialize a backend, run the actions and close the backend.

    Args:
        args: Parsed CLI args.
        config: Effective configuration.
    """
    from rtpad.input.factory import plugin_init

    plugin: InputPlugin = plugin_init(config)
    try:
        actions_apply(plugin, args)
    finally:
        plugin.connection_close()


if __name__ == "__main__":
    main()
