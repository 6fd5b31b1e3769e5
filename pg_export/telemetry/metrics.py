"""Counters and timings collected while an export runs."""

from __future__ import annotations

import math
import threading
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple


def _nearest_rank(ordered: List[float], pct: int) -> float:
    # ordered is non-empty and ascending
    rank = max(1, math.ceil(pct / 100 * len(ordered)))
    return ordered[rank - 1]


def pct_summary(durations: Iterable[float]) -> Dict[str, float]:
    """count/min/p50/p95/max of ``durations``, the columns the summary prints."""
    ordered = sorted(durations)
    if not ordered:
        return dict(count=0, min=math.nan, p50=math.nan, p95=math.nan, max=math.nan)
    return dict(
        count=len(ordered),
        min=ordered[0],
        p50=_nearest_rank(ordered, 50),
        p95=_nearest_rank(ordered, 95),
        max=ordered[-1],
    )


@dataclass
class Metrics:
    lock: threading.Lock = field(default_factory=threading.Lock)

    rows_written: int = 0
    flushes: int = 0
    statements_executed: int = 0

    # stage -> list of durations
    stage_durations: Dict[str, List[float]] = field(
        default_factory=lambda: defaultdict(list))

    errors_by_type: Counter[str] = field(default_factory=Counter)

    def inc(self, attr: str, value: int = 1) -> None:
        with self.lock:
            setattr(self, attr, getattr(self, attr) + value)

    def observe_flush(self, rows: int, duration: float) -> None:
        with self.lock:
            self.flushes += 1
            self.rows_written += rows
            self.stage_durations["flush"].append(duration)

    def observe_stage(self, stage: str, duration: float) -> None:
        with self.lock:
            self.stage_durations[stage].append(duration)

    def record_error(self, exc: BaseException) -> None:
        with self.lock:
            self.errors_by_type[type(exc).__name__] += 1

    def summary(self) -> Tuple[str, Dict]:
        with self.lock:
            stage_stats = {
                stage: pct_summary(durations)
                for stage, durations in self.stage_durations.items()
            }
            res = {
                "rows_written": self.rows_written,
                "flushes": self.flushes,
                "statements_executed": self.statements_executed,
                "stage_stats": stage_stats,
                "errors_by_type": dict(self.errors_by_type),
            }

        lines = ["===== EXPORT SUMMARY ====="]
        lines.append(f"Rows       : {res['rows_written']:,} in {res['flushes']} batches "
                     f"({res['statements_executed']} statements)")
        if stage_stats:
            lines.append("")
            lines.append("Per-stage timings (seconds):")
            for stage, stats in stage_stats.items():
                lines.append(
                    f"  {stage:10s} "
                    f"count={stats['count']:6d}  "
                    f"min={stats['min']:.4f}  p50={stats['p50']:.4f}  "
                    f"p95={stats['p95']:.4f}  max={stats['max']:.4f}"
                )
        if res["errors_by_type"]:
            lines.append("")
            lines.append("Errors by type:")
            for k, v in sorted(res["errors_by_type"].items(), key=lambda kv: kv[1], reverse=True):
                lines.append(f"  {k}: {v}")

        return "\n".join(lines), res
