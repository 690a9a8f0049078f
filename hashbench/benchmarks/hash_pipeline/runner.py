"""Hash pipeline benchmark runner -- HSET/HGET throughput over pipelined batches.

Each trial replays the same fixed batch twice: once as a pipelined HSET
phase and once as a pipelined HGET phase.  Every phase is one pipeline and
one flush, so the measured time covers the full batch round trip rather
than per-command latency.

Note: This is a single-threaded, single-session runner.  Trials and phases
run strictly in sequence against one connection.
"""

from __future__ import annotations

import argparse
import functools
import time
from collections.abc import Callable
from dataclasses import dataclass

from tqdm import tqdm

from ...schema import BenchmarkResult, PipelineMetrics, PipelineParameters
from ...store import Pipeline, Session, acquire_session
from ..base import BaseBenchmark
from .aggregate import (
    AggregateReport,
    TrialSamples,
    aggregate,
    format_phase_line,
    format_summary,
)
from .config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_DB,
    DEFAULT_HOST,
    DEFAULT_KEY_FILLER,
    DEFAULT_KEY_SIZE,
    DEFAULT_PASSWORD,
    DEFAULT_PORT,
    DEFAULT_TRIALS,
)
from .workloads import Workload, build_workload

Clock = Callable[[], float]
Emit = Callable[[str], None]


class InvalidTimingError(ValueError):
    """A phase finished in zero or negative time, so it has no throughput."""


@dataclass(frozen=True)
class TrialConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    trials: int = DEFAULT_TRIALS
    key_size: int = DEFAULT_KEY_SIZE
    key_filler: str = DEFAULT_KEY_FILLER


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------

def _enqueue_writes(pipe: Pipeline, workload: Workload) -> None:
    for op in workload:
        pipe.hash_set(op.key, op.field, op.value)


def _enqueue_reads(pipe: Pipeline, workload: Workload) -> None:
    for op in workload:
        pipe.hash_get(op.key, op.field)


def _timed_phase(
    session: Session,
    workload: Workload,
    enqueue: Callable[[Pipeline, Workload], None],
    clock: Clock,
) -> float:
    """Run one pipelined phase and return its wall-clock duration in seconds.

    Each phase gets its own pipeline handle.  The clock starts right before
    the first command is queued and stops once the flush has returned every
    reply.
    """
    pipe = session.pipeline()
    start = clock()
    enqueue(pipe, workload)
    pipe.flush()
    return clock() - start


# ---------------------------------------------------------------------------
# Trial loop
# ---------------------------------------------------------------------------

def run_trials(
    session: Session,
    workload: Workload,
    trials: int,
    *,
    clock: Clock = time.perf_counter,
    emit: Emit = tqdm.write,
    progress: bool = False,
) -> TrialSamples:
    """Run *trials* write+read cycles and return the ops/sec samples.

    Errors from the session propagate immediately; samples gathered so far
    are dropped with the rest of the run.
    """
    samples = TrialSamples()
    ops = len(workload)
    phases = (
        ("HSET", _enqueue_writes, samples.write),
        ("HGET", _enqueue_reads, samples.read),
    )

    for trial in tqdm(range(1, trials + 1), desc="Trials", unit="trial",
                      disable=not progress):
        for label, enqueue, sink in phases:
            elapsed = _timed_phase(session, workload, enqueue, clock)
            if elapsed <= 0:
                raise InvalidTimingError(
                    f"Trial {trial} {label} measured {elapsed!r}s; clock is too coarse"
                )
            ops_per_sec = ops / elapsed
            sink.append(ops_per_sec)
            emit(format_phase_line(trial, label, ops, elapsed, ops_per_sec))

    return samples


def run_benchmark(
    acquire: Callable[[], Session],
    config: TrialConfig,
    *,
    clock: Clock = time.perf_counter,
    emit: Emit = tqdm.write,
    progress: bool = False,
) -> AggregateReport:
    """Generate the workload, run every trial on one session, then summarise.

    The session is closed exactly once whether the trials finish or fail.
    No summary is emitted for a failed run.
    """
    workload = build_workload(config.batch_size, config.key_size, config.key_filler)

    session = acquire()
    try:
        samples = run_trials(session, workload, config.trials,
                             clock=clock, emit=emit, progress=progress)
    finally:
        session.close()

    report = aggregate(samples, config.batch_size, config.key_size)
    for line in format_summary(report):
        emit(line)
    return report


# ---------------------------------------------------------------------------
# CLI benchmark
# ---------------------------------------------------------------------------

class HashPipelineBenchmark(BaseBenchmark):
    name = "hash"

    # ---- CLI registration -------------------------------------------------

    def register_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--host", type=str, default=DEFAULT_HOST,
            help=f"Store host (default: {DEFAULT_HOST}, env HASHBENCH_HOST)",
        )
        parser.add_argument(
            "--port", type=int, default=DEFAULT_PORT,
            help=f"Store port (default: {DEFAULT_PORT}, env HASHBENCH_PORT)",
        )
        parser.add_argument(
            "--db", type=int, default=DEFAULT_DB,
            help=f"Logical database index (default: {DEFAULT_DB})",
        )
        parser.add_argument(
            "--password", type=str, default=DEFAULT_PASSWORD,
            help="Store password (default: env HASHBENCH_PASSWORD)",
        )
        parser.add_argument(
            "--batch-size", type=int, default=DEFAULT_BATCH_SIZE,
            help=f"Operations per pipelined batch (default: {DEFAULT_BATCH_SIZE})",
        )
        parser.add_argument(
            "--trials", type=int, default=DEFAULT_TRIALS,
            help=f"Number of write+read trials (default: {DEFAULT_TRIALS})",
        )
        parser.add_argument(
            "--key-size", type=int, default=DEFAULT_KEY_SIZE,
            help=f"Target key length in bytes (default: {DEFAULT_KEY_SIZE})",
        )
        parser.add_argument(
            "--key-filler", type=str, default=DEFAULT_KEY_FILLER,
            help=f"Padding character for keys (default: {DEFAULT_KEY_FILLER})",
        )
        parser.add_argument(
            "--socket-timeout", type=float, default=None,
            help="Socket timeout in seconds (default: none)",
        )
        parser.add_argument(
            "--max-connections", type=int, default=None,
            help="Connection pool size limit (default: redis-py default)",
        )
        parser.add_argument(
            "--progress", action="store_true",
            help="Show a trial progress bar",
        )

    # ---- Validate ---------------------------------------------------------

    def validate(self, args: argparse.Namespace) -> bool:
        for flag in ("batch_size", "trials", "key_size"):
            value = getattr(args, flag)
            if value < 1:
                print(f"ERROR: --{flag.replace('_', '-')} must be >= 1, got {value}")
                return False
        if not 0 < args.port < 65536:
            print(f"ERROR: --port must be in 1..65535, got {args.port}")
            return False
        if not args.key_filler or any(c.isdigit() for c in args.key_filler):
            print(f"ERROR: --key-filler must be non-empty and digit-free, "
                  f"got {args.key_filler!r}")
            return False
        return True

    # ---- Run --------------------------------------------------------------

    def run(self, args: argparse.Namespace) -> list[BenchmarkResult]:
        acquire = functools.partial(
            acquire_session,
            args.host,
            args.port,
            db=args.db,
            password=args.password,
            socket_timeout=args.socket_timeout,
            max_connections=args.max_connections,
        )
        config = TrialConfig(
            batch_size=args.batch_size,
            trials=args.trials,
            key_size=args.key_size,
            key_filler=args.key_filler,
        )

        print(f"\n{'='*60}")
        print(f"  Hash pipeline: {args.host}:{args.port} db={args.db}")
        print(f"  batch_size={config.batch_size}  trials={config.trials}  "
              f"key_size={config.key_size}")
        print(f"{'='*60}")

        report = run_benchmark(acquire, config, progress=args.progress)

        return [
            BenchmarkResult(
                benchmark=f"hash/pipeline/b{config.batch_size}-k{config.key_size}",
                category="hash",
                parameters=PipelineParameters(
                    host=args.host,
                    port=args.port,
                    db=args.db,
                    batch_size=config.batch_size,
                    trials=config.trials,
                    key_size=config.key_size,
                ),
                metrics=PipelineMetrics(
                    write_mean_ops=round(report.write_mean, 1),
                    read_mean_ops=round(report.read_mean, 1),
                    trials=report.trials,
                    batch_size=report.batch_size,
                    total_operations=report.total_operations,
                    key_size=report.key_size,
                ),
            )
        ]
