"""Result schema written by the recorder and read back by the report command."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict


@dataclass
class HardwareInfo:
    cpu: str = ""
    cores: int = 0
    ram_gb: float = 0.0
    os: str = ""
    arch: str = ""


@dataclass
class RunMetadata:
    timestamp: str = ""
    git_commit: str | None = None
    git_branch: str | None = None
    git_dirty: bool | None = None
    client: str = "redis-py"
    client_version: str = ""
    hardware: HardwareInfo = field(default_factory=HardwareInfo)


@dataclass
class PipelineParameters:
    host: str
    port: int
    db: int
    batch_size: int
    trials: int
    key_size: int


@dataclass
class PipelineMetrics:
    write_mean_ops: float   # mean HSET ops/s
    read_mean_ops: float    # mean HGET ops/s
    trials: int
    batch_size: int
    total_operations: int
    key_size: int


@dataclass
class BenchmarkResult:
    benchmark: str          # e.g. "hash/pipeline/b500-k16"
    category: str           # e.g. "hash"
    parameters: PipelineParameters
    metrics: PipelineMetrics


@dataclass
class BenchmarkReport:
    schema_version: int = 1
    metadata: RunMetadata = field(default_factory=RunMetadata)
    results: list[BenchmarkResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        d = asdict(self)
        # Strip unknown git fields to keep JSON clean
        meta = d["metadata"]
        for key in list(meta):
            if meta[key] is None:
                del meta[key]
        return d
