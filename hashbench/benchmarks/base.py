"""Base class for benchmark suites."""

from __future__ import annotations

import argparse
from abc import ABC, abstractmethod

from ..schema import BenchmarkResult


class BaseBenchmark(ABC):
    """Abstract base for a benchmark exposed as a CLI subcommand.

    A benchmark registers its own CLI arguments, checks them in ``validate``
    before anything touches the network, and returns result entries from
    ``run``.
    """

    name: str = ""

    @abstractmethod
    def register_args(self, parser: argparse.ArgumentParser) -> None:
        """Add benchmark-specific CLI arguments to *parser*."""

    @abstractmethod
    def run(self, args: argparse.Namespace) -> list[BenchmarkResult]:
        """Execute the benchmark. Returns a list of result entries."""

    def validate(self, args: argparse.Namespace) -> bool:
        """Check arguments and prerequisites. Override to add checks."""
        return True
