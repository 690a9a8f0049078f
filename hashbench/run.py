"""Unified CLI for the hash pipeline benchmark.

Usage:
    hashbench hash --batch-size 500 --trials 1000 --key-size 16
    hashbench --output-dir results hash --host redis.local --port 6380
    hashbench report --results-dir results --format latex
"""

from __future__ import annotations

import argparse
import sys

from . import report as report_mod
from .benchmarks.base import BaseBenchmark
from .benchmarks.hash_pipeline.runner import HashPipelineBenchmark
from .recorder import ResultRecorder

BENCHMARKS: list[type[BaseBenchmark]] = [HashPipelineBenchmark]


def build_parser() -> tuple[argparse.ArgumentParser, dict[str, BaseBenchmark]]:
    parser = argparse.ArgumentParser(
        prog="hashbench",
        description="Pipelined HSET/HGET throughput benchmarks",
    )
    parser.add_argument(
        "--output-dir", type=str, default=None,
        help="Directory for result JSON files (default: do not save)",
    )

    subparsers = parser.add_subparsers(dest="command")

    bench_instances: dict[str, BaseBenchmark] = {}
    for cls in BENCHMARKS:
        instance = cls()
        sub = subparsers.add_parser(instance.name, help=f"Run {instance.name} benchmarks")
        instance.register_args(sub)
        bench_instances[instance.name] = instance

    report_parser = subparsers.add_parser("report", help="Generate benchmark reports")
    report_mod.register_args(report_parser)

    return parser, bench_instances


def main(argv: list[str] | None = None) -> None:
    parser, bench_instances = build_parser()
    parsed = parser.parse_args(argv)

    if parsed.command is None:
        parser.print_help()
        return

    if parsed.command == "report":
        if parsed.results_dir is None:
            parsed.results_dir = parsed.output_dir or "results"
        report_mod.run_report(parsed)
        return

    bench = bench_instances[parsed.command]
    if not bench.validate(parsed):
        print(f"Validation failed for {parsed.command}.", file=sys.stderr)
        sys.exit(1)

    try:
        results = bench.run(parsed)
    except KeyboardInterrupt:
        print(f"\n{parsed.command}: interrupted", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"\nERROR running {parsed.command}: {e}", file=sys.stderr)
        sys.exit(1)

    if results and parsed.output_dir:
        recorder = ResultRecorder(category=parsed.command)
        for r in results:
            recorder.record(r)
        recorder.save(parsed.output_dir)


if __name__ == "__main__":
    main()
