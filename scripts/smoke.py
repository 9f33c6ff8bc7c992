# scripts/smoke.py
"""
Smoke Test Script for the metricline snapshot timeline.

Several writer threads update a shared store while the main thread snapshots
it at a fixed interval. The timeline is then trimmed, resampled and printed.

Usage
-----
    $ uv run python scripts/smoke.py
    $ uv run python scripts/smoke.py --writers 8 --snaps 50 --interval 0.01
    $ uv run python scripts/smoke.py --dump timeline.json   # feed to `metricline`
"""

import argparse
import logging
import random
import sys
import threading
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path

from dotenv import load_dotenv

from metricline import MetricStore, Sample, Snapshot, extract_numbers, rate, trim
from metricline.core.contracts.timeline import TimelineDocument

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

KEYS = ("requests", "errors", "queue_depth")


def _writer(store: MetricStore, stop: threading.Event, seed: int) -> None:
    rng = random.Random(seed)
    while not stop.is_set():
        store.add("requests", 1)
        if rng.random() < 0.05:
            store.add("errors", 1)
        store.set("queue_depth", rng.randint(0, 20))
        store.set("mode", rng.choice(["warm", "warm", "hot"]))
        time.sleep(rng.uniform(0.001, 0.005))


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run metricline smoke test")
    parser.add_argument("--writers", type=int, default=4, help="Number of writer threads")
    parser.add_argument("--snaps", type=int, default=30, help="Number of snapshots to take")
    parser.add_argument("--interval", type=float, default=0.02, help="Seconds between snapshots")
    parser.add_argument("--dump", type=Path, help="Write the trimmed timeline JSON here")
    args = parser.parse_args()

    # 1. Capture Phase
    store = MetricStore()
    for key in KEYS:
        store.set(key, 0)
    stop = threading.Event()
    threads = [
        threading.Thread(target=_writer, args=(store, stop, i), daemon=True)
        for i in range(args.writers)
    ]
    for t in threads:
        t.start()

    snaps: list[Snapshot] = []
    for _ in range(args.snaps):
        snaps.append(store.snap())
        time.sleep(args.interval)
    stop.set()
    for t in threads:
        t.join()
    snaps.append(store.snap())

    # 2. Compaction Phase
    captured = len(snaps)
    entries = sum(len(s) for s in snaps)
    trim(snaps)
    print(f"\n🗜  Trimmed {captured} snapshots ({entries} entries)")
    print(f"    -> {len(snaps)} snapshots ({sum(len(s) for s in snaps)} entries)")

    # 3. Resampling Phase
    step = timedelta(milliseconds=10)
    result = extract_numbers(snaps, step, snaps[0].when, snaps[-1].when + step, KEYS)
    if result.is_err():
        print(f"\n❌ Resampling failed: {result.unwrap_err()}")
        sys.exit(1)
    rows = result.unwrap()
    print(f"\n📈 {len(rows)} rows on a 10ms grid:")
    print("    tick            " + "  ".join(f"{k:>12}" for k in KEYS))
    for row in rows:
        print(f"    {row[0]:<15.0f} " + "  ".join(f"{v:>12g}" for v in row[1:]))

    # 4. Rate Phase (centered on the middle row)
    if len(rows) >= 3:
        mid = len(rows) // 2
        window = rows[mid - 1 : mid + 2]
        samples = [
            Sample(when=datetime.fromtimestamp(r[0] / 100, UTC), value=r[1])
            for r in window
        ]
        print(f"\n⏱  requests/s around row {mid}: {rate(*samples):g}")

    print("\n" + store.dump_md_table())

    if args.dump:
        args.dump.write_text(
            TimelineDocument.from_snapshots(snaps).model_dump_json(indent=2) + "\n",
            encoding="utf-8",
        )
        print(f"💾 Timeline saved to: {args.dump}")


if __name__ == "__main__":
    main()
