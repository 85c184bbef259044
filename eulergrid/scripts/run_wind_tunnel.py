"""
Run the 2D wind tunnel: inlet on the left, obstacle in the middle.

Interactive mode opens a window; click to inject fluid, Escape or q quits.
Headless mode ticks a fixed number of frames and prints progress.

    python -m eulergrid.scripts.run_wind_tunnel --obstacle disc -v
    python -m eulergrid.scripts.run_wind_tunnel --headless --frames 200
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from eulergrid import Simulation, SimulationConfig, NumericalInstabilityError

logger = logging.getLogger("eulergrid")


def setup_logging(verbose: bool, very_verbose: bool):
    if very_verbose:
        logger.setLevel(logging.DEBUG)
        ch = logging.StreamHandler(stream=sys.stdout)
        ch.setLevel(logging.DEBUG)
    elif verbose:
        logger.setLevel(logging.INFO)
        ch = logging.StreamHandler(stream=sys.stdout)
        ch.setLevel(logging.INFO)
    else:
        logger.setLevel(logging.WARNING)
        ch = logging.StreamHandler(stream=sys.stderr)
        ch.setLevel(logging.WARNING)

    # Create formatter for message output
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    ch.setFormatter(formatter)
    logger.handlers.clear()
    logger.addHandler(ch)


def build_config(args) -> SimulationConfig:
    """Configuration file (if any) overridden by command line options."""
    overrides = {
        'width': args.width,
        'height': args.height,
        'tile_size': args.tile_size,
        'obstacle': args.obstacle,
        'scheme': args.scheme,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}

    if args.config is not None:
        config = SimulationConfig.from_json(args.config)
        return dataclasses.replace(config, **overrides)
    return SimulationConfig(**overrides)


def run_headless(sim: Simulation, frames: int):
    """Tick without a display, printing stats every 10 frames."""
    print(f"\nHeadless simulation | {sim.config.width}x{sim.config.height} | {frames} frames")
    print("=" * 60)

    for _ in range(frames):
        metrics = sim.tick()
        if metrics['iteration'] % 10 == 0:
            print(f"  Frame {metrics['iteration']:04d} | {metrics['tick_ms']:6.2f}ms | "
                  f"mass={metrics['total_mass']:.4e} | "
                  f"min rho={metrics['min_density']:.4e} | "
                  f"max p={metrics['max_pressure']:.4e}")

    print("=" * 60)


def run_interactive(sim: Simulation, fps: int):
    # Imported here so headless runs never touch a display backend
    from eulergrid.src.render import GridRenderer

    viz = GridRenderer(sim.config.width, sim.config.height, sim.config.tile_size)
    viz.run(sim, interval_ms=max(1, 1000 // fps))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser("Real-time 2D compressible flow past an obstacle.")
    parser.add_argument("--config", type=Path, help="path to a JSON configuration file")
    parser.add_argument("--width", type=int, help="grid width in cells")
    parser.add_argument("--height", type=int, help="grid height in cells")
    parser.add_argument("--tile-size", type=int, help="display pixels per cell")
    parser.add_argument("--obstacle", choices=['block', 'disc', 'none'], help="obstacle shape")
    parser.add_argument("--scheme", choices=['pressure', 'diffusion'], help="update scheme")
    parser.add_argument("--headless", action="store_true", help="run without a display")
    parser.add_argument("--frames", type=int, default=100, help="frames to run in headless mode")
    parser.add_argument("--fps", type=int, default=60, help="target frame rate of the display")
    parser.add_argument("--save-config", type=Path, help="write the effective configuration to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable verbose output")
    parser.add_argument("-vv", "--very-verbose", action="store_true", help="enable very verbose output")

    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.very_verbose)

    try:
        config = build_config(args)
    except (ValueError, TypeError, OSError) as e:
        parser.error(str(e))

    if args.save_config is not None:
        config.to_json(args.save_config)
        print(f"Saved configuration to {args.save_config}")

    sim = Simulation(config)
    try:
        if args.headless:
            run_headless(sim, args.frames)
        else:
            run_interactive(sim, args.fps)
    except NumericalInstabilityError as e:
        print(f"Simulation became unstable: {e}", file=sys.stderr)
        return 1
    finally:
        sim.cancel()

    return 0


if __name__ == "__main__":
    sys.exit(main())
