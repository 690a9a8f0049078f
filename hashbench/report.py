"""Report generator -- turns saved result JSONs into Markdown or LaTeX tables."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

# Column key in the result metrics -> table header.
COLUMNS = [
    ("write_mean_ops", "HSET ops/s"),
    ("read_mean_ops", "HGET ops/s"),
    ("trials", "Trials"),
    ("batch_size", "Batch"),
    ("total_operations", "Total ops"),
    ("key_size", "Key bytes"),
]


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format", choices=["markdown", "latex"], default="markdown",
        help="Output format (default: markdown)",
    )
    parser.add_argument(
        "--results-dir", type=str, default=None,
        help="Directory containing result JSON files (default: --output-dir)",
    )
    parser.add_argument(
        "--output", type=str, default=None,
        help="Write output to file instead of stdout",
    )


def run_report(args: argparse.Namespace) -> None:
    results_dir = Path(args.results_dir)
    if not results_dir.exists():
        print(f"No results directory found at {results_dir}")
        return

    rows = collect_rows(load_reports(results_dir))
    if not rows:
        print("No result files found.")
        return

    if args.format == "latex":
        output = render_latex(rows)
    else:
        output = render_markdown(rows)

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(output)
        print(f"Report written to {args.output}")
    else:
        print(output)


# -------------------------------------------------------------------
# Loading
# -------------------------------------------------------------------

def load_reports(results_dir: Path) -> list[dict]:
    """Load every result JSON in *results_dir*, skipping unreadable files."""
    reports = []
    for path in sorted(results_dir.glob("*.json")):
        try:
            with open(path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError):
            continue
        if isinstance(data, dict) and isinstance(data.get("results"), list):
            reports.append(data)
    return reports


def collect_rows(reports: list[dict]) -> list[tuple[str, str, dict]]:
    """Flatten reports to ``(timestamp, benchmark, metrics)`` rows."""
    rows = []
    for report in reports:
        ts = report.get("metadata", {}).get("timestamp", "unknown")
        for res in report["results"]:
            rows.append((ts, res.get("benchmark", "?"), res.get("metrics", {})))
    return rows


# -------------------------------------------------------------------
# Rendering
# -------------------------------------------------------------------

def format_metric(value: object) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, float):
        return f"{value:,.1f}"
    if isinstance(value, int):
        return f"{value:,}"
    return str(value)


def render_markdown(rows: list[tuple[str, str, dict]]) -> str:
    headers = ["Run", "Benchmark"] + [title for _, title in COLUMNS]
    lines = [
        "# Hash Pipeline Results\n",
        "| " + " | ".join(headers) + " |",
        "|---|---|" + "|".join("---:" for _ in COLUMNS) + "|",
    ]
    for ts, name, metrics in rows:
        vals = " | ".join(format_metric(metrics.get(key)) for key, _ in COLUMNS)
        lines.append(f"| {ts} | {name} | {vals} |")
    lines.append("")
    return "\n".join(lines)


def _escape_latex(s: str) -> str:
    for char in ("\\", "&", "%", "$", "#", "_", "{", "}", "~", "^"):
        s = s.replace(char, f"\\{char}")
    return s


def render_latex(rows: list[tuple[str, str, dict]]) -> str:
    lines = [
        r"\begin{table}[t]",
        r"\centering",
        r"\caption{Hash Pipeline Throughput}",
        f"\\begin{{tabular}}{{l{'r' * len(COLUMNS)}}}",
        r"\toprule",
        "Benchmark & " + " & ".join(_escape_latex(t) for _, t in COLUMNS) + r" \\",
        r"\midrule",
    ]
    for _, name, metrics in rows:
        vals = " & ".join(
            _escape_latex(format_metric(metrics.get(key))) for key, _ in COLUMNS
        )
        lines.append(f"{_escape_latex(name)} & {vals} \\\\")
    lines += [r"\bottomrule", r"\end{tabular}", r"\end{table}", ""]
    return "\n".join(lines)
