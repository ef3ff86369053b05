"""
Command-line entry point: run a configured channel over a CSV of samples.

    python run.py filter samples.csv --channel servo [--out out.csv] [--plot out.png]
    python run.py show
"""
from __future__ import annotations

import argparse
import csv
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from ServoFilter.core.live_config import ConfigSlot
from ServoFilter.core.settings import SettingsManager
from ServoFilter.filters.channel import Channel
from ServoFilter.analysis.response import ResponseMetrics, compute_metrics

logger = logging.getLogger(__name__)


def load_samples(path: str) -> Tuple[List[float], List[bool]]:
    xs: List[float] = []
    holds: List[bool] = []
    with open(path, newline="", encoding="utf-8") as f:
        r = csv.DictReader(f)
        if r.fieldnames is None or "x" not in r.fieldnames:
            raise ValueError(f"{path}: CSV needs an 'x' column")
        for lineno, row in enumerate(r, start=2):
            try:
                xs.append(float(row["x"]))
            except (TypeError, ValueError):
                raise ValueError(f"{path}:{lineno}: bad sample {row['x']!r}") from None
            h = (row.get("hold") or "0").strip().lower()
            holds.append(h in ("1", "true", "yes"))
    return xs, holds


def write_samples(path: str, xs: Sequence[float], holds: Sequence[bool], ys: Sequence[float]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["x", "hold", "y"])
        for x, h, y in zip(xs, holds, ys):
            w.writerow([repr(float(x)), int(bool(h)), repr(float(y))])


def summarize(metrics: ResponseMetrics, n: int) -> None:
    if n == 0:
        print("No samples found.")
        return
    settle = "never" if metrics.settling_index < 0 else str(metrics.settling_index)
    print(f"Samples:    {n}")
    print(f"Final:      {metrics.final_value:.6g}")
    print(f"Peak:       {metrics.peak:.6g} | Overshoot: {100.0 * metrics.overshoot:.1f}%")
    print(f"Settled at: {settle}")
    print(f"Saturated:  {metrics.saturated}")


def _cmd_filter(args: argparse.Namespace, settings: SettingsManager) -> int:
    record = settings.iir_config(args.channel)
    slot = ConfigSlot(record, name=args.channel)
    chan = Channel(slot)
    xs, holds = load_samples(args.samples)
    logger.info("filtering %d samples on channel %r", len(xs), args.channel)
    ys = chan.run(xs, holds)
    metrics = compute_metrics(ys, limits=(record.y_min, record.y_max))
    summarize(metrics, len(xs))
    if args.out:
        write_samples(args.out, xs, holds, ys)
        logger.info("wrote %s", args.out)
    if args.plot:
        from ServoFilter.analysis.plots import fig_response

        fig = fig_response(xs, ys, record, holds)
        fig.savefig(args.plot)
        logger.info("wrote %s", args.plot)
    return 0


def _cmd_show(args: argparse.Namespace, settings: SettingsManager) -> int:
    names = settings.channel_names()
    if not names:
        print("No channels configured.")
        return 0
    for name in names:
        rec = settings.iir_config(name)
        print(f"{name}: limits=[{rec.y_min}, {rec.y_max}] offset={rec.y_offset} dc_gain={rec.dc_gain():.6g}")
        print(f"  ba={list(rec.ba)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="servofilter", description="Sixth-order IIR servo filter tools")
    p.add_argument("--settings", default=None, help="settings JSON (default: ServoFilter/settings.json)")
    p.add_argument("-v", "--verbose", action="store_true", help="log progress to stderr")
    sub = p.add_subparsers(dest="command", required=True)
    pf = sub.add_parser("filter", help="run a channel over a CSV with columns x[,hold]")
    pf.add_argument("samples")
    pf.add_argument("--channel", default="default")
    pf.add_argument("--out", default=None, help="write x,hold,y CSV here")
    pf.add_argument("--plot", default=None, help="save a response plot here")
    sub.add_parser("show", help="list configured channels")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = SettingsManager(args.settings)
    except (OSError, ValueError) as e:
        print(f"error: cannot load settings: {e}", file=sys.stderr)
        return 2
    if (args.verbose or settings.verbose()) and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)
    handlers = {"filter": _cmd_filter, "show": _cmd_show}
    try:
        return handlers[args.command](args, settings)
    except KeyError as e:
        print(f"error: {e.args[0] if e.args else e}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
