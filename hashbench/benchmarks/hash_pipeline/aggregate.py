"""Mean throughput aggregation and the operator-facing report lines."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field


class EmptySamplesError(ValueError):
    """Raised when a mean is requested before any trial completed."""


@dataclass
class TrialSamples:
    """Ops/sec samples in trial order, one list per phase."""

    write: list[float] = field(default_factory=list)
    read: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class AggregateReport:
    write_mean: float
    read_mean: float
    trials: int
    batch_size: int
    total_operations: int
    key_size: int


def mean(samples: Sequence[float]) -> float:
    if not samples:
        raise EmptySamplesError("Cannot average an empty sample sequence")
    return sum(samples) / len(samples)


def aggregate(samples: TrialSamples, batch_size: int, key_size: int) -> AggregateReport:
    """Reduce both phases to their means.

    The trial count is taken from the write samples; both phases record one
    sample per completed trial, so the two lists have the same length.
    """
    trials = len(samples.write)
    return AggregateReport(
        write_mean=mean(samples.write),
        read_mean=mean(samples.read),
        trials=trials,
        batch_size=batch_size,
        total_operations=trials * batch_size,
        key_size=key_size,
    )


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_phase_line(trial: int, label: str, ops: int, elapsed_s: float,
                      ops_per_sec: float) -> str:
    return (f"Trial {trial} {label}: {ops} ops in {elapsed_s:.6f}s "
            f"=> {ops_per_sec:.1f} ops/s")


def format_summary(report: AggregateReport) -> list[str]:
    lines = []
    for label, value in (("HSET", report.write_mean), ("HGET", report.read_mean)):
        lines.append(
            f"Mean {label} ops/s over {report.trials} trials of "
            f"{report.batch_size} operations each, totalling "
            f"{report.total_operations}: {value:.1f}"
        )
    lines.append(f"Performance test completed with key size: {report.key_size} bytes")
    return lines
