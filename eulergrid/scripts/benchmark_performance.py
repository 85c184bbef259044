"""
Performance benchmarking script for the 2D grid solver.

    python -m eulergrid.scripts.benchmark_performance
"""

import time

from eulergrid import Simulation, SimulationConfig


def run_benchmark(width=80, height=60, scheme='pressure', obstacle='block', n_ticks=200):
    """Run a benchmark case and return ticks per second."""
    config = SimulationConfig(
        width=width,
        height=height,
        scheme=scheme,
        obstacle=obstacle,
        check_finite=False,
        print_interval=10**9  # Suppress progress logging
    )
    sim = Simulation(config)

    # Warm-up
    sim.tick()

    start = time.perf_counter()
    sim.run(max_ticks=n_ticks)
    elapsed = time.perf_counter() - start

    return n_ticks / elapsed, elapsed


def main():
    print("=" * 70)
    print("2D GRID SOLVER PERFORMANCE BENCHMARK")
    print("=" * 70)

    sizes = [(40, 30), (80, 60), (160, 120), (320, 240)]
    schemes = ['pressure', 'diffusion']

    print(f"\n{'Grid':<12} {'Scheme':<12} {'Ticks/s':>12} {'ms/tick':>12}")
    print("-" * 50)

    for width, height in sizes:
        for scheme in schemes:
            rate, elapsed = run_benchmark(width, height, scheme)
            print(f"{f'{width}x{height}':<12} {scheme:<12} {rate:>12.1f} {1000.0 / rate:>12.3f}")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    main()
