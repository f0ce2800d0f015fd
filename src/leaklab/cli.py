# src/leaklab/cli.py
"""
Command-line interface for leaklab package
"""

import argparse
import logging
import math

import psutil

from .config import LeakConfig
from .enums import LeakPattern
from .patterns import CacheManager
from .profiler import MemoryProfiler
from .scenarios import run_all, stats_key
from .timers import Timer
from . import __version__


def format_bytes(bytes_value):
    """Format bytes to human-readable string."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_value < 1024.0:
            return f"{bytes_value:.2f} {unit}"
        bytes_value /= 1024.0
    return f"{bytes_value:.2f} PB"


def print_system_info():
    """Print memory information for this process and system."""
    print(f"leaklab v{__version__} - Memory Information")
    print("=" * 50)

    vm = psutil.virtual_memory()
    print("\nSystem Memory:")
    print(f"  Total: {format_bytes(vm.total)}")
    print(f"  Available: {format_bytes(vm.available)} ({vm.percent:.1f}% used)")

    mem = psutil.Process().memory_info()
    print("\nThis Process:")
    print(f"  Resident: {format_bytes(mem.rss)}")
    print(f"  Virtual: {format_bytes(mem.vms)}")


def format_report(report):
    """One line describing a scenario outcome."""
    variant = "fixed" if report.fixed else "leaky"
    if report.leaked:
        mark = "✗"
        outcome = (f"{report.retained}/{report.created} retained after gc.collect() "
                   f"({format_bytes(report.retained_bytes)})")
    else:
        mark = "✓"
        outcome = f"all {report.created} collected"
    return f"  {mark} {report.pattern.value:<18} [{variant}] {outcome}"


def print_reports(reports):
    print("\n" + "=" * 50)
    print("Leak Demonstrations:\n")
    for report in reports:
        print(format_report(report))


def print_memory_stats(profiler, reports):
    """Print the process RSS change recorded for each run."""
    print("\n" + "=" * 50)
    print("Process Memory (RSS change per run):\n")
    for report in reports:
        stats = profiler.memory_stats[stats_key(report.pattern, report.fixed)]
        print(f"  {stats_key(report.pattern, report.fixed):<24} "
              f"{stats['total_memory']:+.2f} MB")
    print(f"\n  Peak RSS increase: {profiler.peak_memory:.2f} MB")
    print(f"  System memory pressure: {profiler.get_memory_pressure() * 100:.1f}%")


def print_remedies(patterns):
    print("\n" + "=" * 50)
    print("Solutions:")
    for i, pattern in enumerate(patterns, 1):
        print(f"  {i}. {pattern.remedy}")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="leaklab: watch references keep garbage alive",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  leaklab-info                              # Run every pattern, leaky variant
  leaklab-info --fixed                      # Run the remedied variants
  leaklab-info --compare --scale 0.1        # Both variants at 10% payload size
  leaklab-info --pattern closure_capture    # A single pattern
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'leaklab v{__version__}'
    )

    parser.add_argument(
        '--pattern',
        action='append',
        choices=[p.value for p in LeakPattern],
        help='Pattern to run (repeatable, default: all)'
    )

    variant = parser.add_mutually_exclusive_group()
    variant.add_argument('--fixed', action='store_true', help='Run the fixed variant')
    variant.add_argument('--compare', action='store_true', help='Run leaky and fixed variants')

    parser.add_argument(
        '--scale',
        type=float,
        default=1.0,
        metavar='FACTOR',
        help='Multiply every payload size by FACTOR (default: 1.0)'
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Log what each sample does')

    args = parser.parse_args(argv)

    if not math.isfinite(args.scale) or args.scale <= 0:
        parser.error("--scale must be a positive finite number")

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="  %(name)s: %(message)s")

    config = LeakConfig(verbose=args.verbose).scaled(args.scale)
    patterns = [LeakPattern(p) for p in args.pattern] if args.pattern else list(LeakPattern)

    print_system_info()
    profiler = MemoryProfiler(config)

    try:
        if args.compare:
            reports = []
            for leaky, fixed in zip(run_all(config, fixed=False, patterns=patterns, profiler=profiler),
                                    run_all(config, fixed=True, patterns=patterns, profiler=profiler)):
                reports.extend([leaky, fixed])
        else:
            reports = run_all(config, fixed=args.fixed, patterns=patterns, profiler=profiler)
        print_reports(reports)
        print_memory_stats(profiler, reports)
    finally:
        Timer.dispose_all()
        CacheManager.clear_cache()

    print_remedies([p for p in LeakPattern if p in patterns])
    return 0


if __name__ == "__main__":
    main()
