"""Host, git, and client-library metadata attached to every saved report."""

from __future__ import annotations

import os
import platform
import subprocess

import redis

from .schema import HardwareInfo


def capture_hardware() -> HardwareInfo:
    """Detect CPU model, core count, RAM, OS, and architecture."""
    return HardwareInfo(
        cpu=_cpu_model(),
        cores=os.cpu_count() or 0,
        ram_gb=round(_ram_gb(), 1),
        os=platform.system().lower(),
        arch=platform.machine(),
    )


def get_client_version() -> str:
    return getattr(redis, "__version__", "unknown")


def git_short_commit() -> str | None:
    return _run("git", "rev-parse", "--short", "HEAD")


def git_branch() -> str | None:
    return _run("git", "rev-parse", "--abbrev-ref", "HEAD")


def git_is_dirty() -> bool | None:
    out = _run("git", "status", "--porcelain")
    if out is None:
        return None
    return bool(out)


# -------------------------------------------------------------------
# Internals
# -------------------------------------------------------------------

def _run(*cmd: str) -> str | None:
    """Return the stripped stdout of *cmd*, or None if it fails."""
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def _proc_field(path: str, prefix: str) -> str | None:
    """Return the value after ``prefix:`` in a /proc style file."""
    try:
        with open(path) as f:
            for line in f:
                if line.startswith(prefix):
                    return line.split(":", 1)[1].strip()
    except OSError:
        pass
    return None


def _cpu_model() -> str:
    system = platform.system()
    if system == "Darwin":
        model = _run("sysctl", "-n", "machdep.cpu.brand_string")
    elif system == "Linux":
        model = _proc_field("/proc/cpuinfo", "model name")
    else:
        model = None
    return model or platform.processor() or "unknown"


def _ram_gb() -> float:
    system = platform.system()
    try:
        if system == "Darwin":
            raw = _run("sysctl", "-n", "hw.memsize")
            if raw:
                return int(raw) / (1024 ** 3)
        elif system == "Linux":
            raw = _proc_field("/proc/meminfo", "MemTotal")
            if raw:
                # "16318412 kB"
                return int(raw.split()[0]) / (1024 ** 2)
    except ValueError:
        pass
    return 0.0
