"""Command-line entry point."""

import argparse
import sys
from typing import Optional, Sequence

import jax

from chip8vm.clock import Scheduler
from chip8vm.constants import DEFAULT_INSTRUCTION_FREQUENCY
from chip8vm.errors import ExecutionError, RomError
from chip8vm.logging import LEVEL_ORDER, get_logger, progress_bar, set_log_level
from chip8vm.rendering import COLOR_SCHEMES, save_screenshot
from chip8vm.rom import read_rom

logger = get_logger("CLI")


def positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8vm",
        description="Run a CHIP-8 ROM",
    )
    parser.add_argument(
        "--rom",
        type=str,
        required=True,
        help="Path to the ROM file",
    )
    parser.add_argument(
        "--frequency",
        type=positive_float,
        default=DEFAULT_INSTRUCTION_FREQUENCY,
        help="Instructions per second",
    )
    parser.add_argument(
        "--scale",
        type=positive_int,
        default=10,
        help="Window / screenshot pixels per CHIP-8 pixel",
    )
    parser.add_argument(
        "--color-scheme",
        type=str,
        default="classic",
        choices=list(COLOR_SCHEMES),
        help="Pixel colours",
    )
    parser.add_argument(
        "--clip-sprites",
        action="store_true",
        help="Clip sprites at the screen edges instead of wrapping them",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for the random number instruction",
    )
    parser.add_argument(
        "--no-sound",
        action="store_true",
        help="Do not open an audio device",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window for --cycles instructions",
    )
    parser.add_argument(
        "--cycles",
        type=positive_int,
        default=10_000,
        help="Instructions to run in headless mode",
    )
    parser.add_argument(
        "--screenshot",
        type=str,
        default=None,
        help="Save the final screen to this image file (headless mode)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=list(LEVEL_ORDER),
        help="Console log level",
    )
    return parser


def run_headless(scheduler: Scheduler, cycles: int) -> None:
    """Run ``cycles`` instructions on the virtual clock, as fast as possible."""
    period = 1.0 / scheduler.instruction_frequency
    with progress_bar(cycles) as bar:
        while scheduler.instruction_ticks < cycles:
            bar.update(scheduler.advance(period))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_log_level(args.log_level)

    try:
        rom = read_rom(args.rom)
    except RomError as err:
        logger.error(str(err))
        return 1
    logger.info(f"Loaded: {args.rom} ({len(rom)} bytes)")

    scheduler = Scheduler(
        rom,
        instruction_frequency=args.frequency,
        rng=jax.random.PRNGKey(args.seed),
        sprite_wrap=not args.clip_sprites,
    )

    try:
        if args.headless:
            run_headless(scheduler, args.cycles)
        else:
            from chip8vm.frontend import PygameFrontend
            PygameFrontend(scheduler, scale=args.scale, color_scheme=args.color_scheme,
                           sound=not args.no_sound, caption=f"chip8vm - {args.rom}").run()
    except ExecutionError:
        # Already logged by the scheduler
        return 1
    finally:
        if args.headless and args.screenshot:
            save_screenshot(scheduler.framebuffer_snapshot(), args.screenshot,
                            scale=args.scale, color_scheme=args.color_scheme)
            logger.info(f"Screenshot saved: {args.screenshot}")

    logger.info(f"Executed {scheduler.instruction_count} instructions")
    return 0


if __name__ == "__main__":
    sys.exit(main())
