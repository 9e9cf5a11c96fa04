#!/usr/bin/env python3
"""
Async health check for registered novel sources.

Runs ``popular_novels(1)`` against every source with every session backend
and writes the raw results plus a per-source summary as JSON.

Usage:
  python scripts/check_sources_health.py
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from time import perf_counter
from typing import Any, TypedDict

from novelsource.infra.config import ConfigAdapter, load_config
from novelsource.infra.sessions import BACKENDS
from novelsource.plugins.base.fetcher import SourceFetcher
from novelsource.plugins.registry import hub
from novelsource.plugins.utils.throttle import FixedDelay
from novelsource.schemas import FetcherConfig

# =========================
#   Config
# =========================

CONCURRENT = 8
PAGE_INTERVAL = 0.2
DATA_DIR = Path(__file__).parent / "data"

RAW_PATH = DATA_DIR / "source_health_raw.json"
REPORT_PATH = DATA_DIR / "source_health_report.json"


def _log_level() -> str:
    try:
        return ConfigAdapter(load_config()).get_log_level()
    except FileNotFoundError:
        return "INFO"


logger = logging.getLogger("source_health")
logging.basicConfig(level=_log_level())


# =========================
#   Result record
# =========================


class SourceResult(TypedDict):
    source_id: int
    source_name: str
    backend: str
    elapsed: float
    novels: int
    ok: bool
    reason: str


# =========================
#   Worker: run checks for one source
# =========================


async def run_health_check_for_source(source_id: int) -> list[SourceResult]:
    results: list[SourceResult] = []

    for backend in BACKENDS:
        try:
            fetcher = SourceFetcher(FetcherConfig(backend=backend))
        except ImportError as e:
            logger.warning("Skipping backend %s: %s", backend, e)
            continue

        async with fetcher:
            source = hub.build_source(
                source_id, fetcher, delay=FixedDelay(PAGE_INTERVAL)
            )
            logger.info("Source %s (%s) - backend=%s", source_id, source, backend)

            t0 = perf_counter()
            count, reason = 0, ""
            try:
                page = await source.popular_novels(1)
                count = len(page["novels"])
                if not count:
                    reason = "empty popular page"
            except Exception as e:
                reason = f"{type(e).__name__}: {e}"
                logger.warning(
                    "Health check error | source=%s backend=%s error=%s",
                    source_id,
                    backend,
                    e,
                )
            elapsed = perf_counter() - t0

        results.append(
            {
                "source_id": source_id,
                "source_name": source.source_name,
                "backend": backend,
                "elapsed": elapsed,
                "novels": count,
                "ok": count > 0,
                "reason": reason,
            }
        )

    return results


# =========================
#   Summary generator
# =========================


def summarize(grouped: dict[int, list[SourceResult]]) -> dict[str, Any]:
    summary: dict[str, Any] = {}

    for source_id, checks in grouped.items():
        if not checks:
            continue
        ok_backends = [c["backend"] for c in checks if c["ok"]]
        summary[str(source_id)] = {
            "source_name": checks[0]["source_name"],
            "avg_elapsed": sum(c["elapsed"] for c in checks) / len(checks),
            "ok_backends": ok_backends,
            "all_ok": len(ok_backends) == len(checks),
            "any_ok": bool(ok_backends),
        }

    return summary


# =========================
#   Main
# =========================


async def main() -> None:
    sources = hub.list_sources()
    logger.info("Found %d registered sources", len(sources))

    grouped: dict[int, list[SourceResult]] = {s["source_id"]: [] for s in sources}
    sem = asyncio.Semaphore(CONCURRENT)

    async def worker(source_id: int) -> None:
        async with sem:
            grouped[source_id].extend(await run_health_check_for_source(source_id))

    await asyncio.gather(*(worker(sid) for sid in grouped))

    DATA_DIR.mkdir(parents=True, exist_ok=True)

    # === Save RAW ===
    RAW_PATH.write_text(json.dumps(grouped, ensure_ascii=False, indent=2))
    logger.info("Raw health data saved to %s", RAW_PATH)

    # === Save REPORT ===
    REPORT_PATH.write_text(json.dumps(summarize(grouped), ensure_ascii=False, indent=2))
    logger.info("Summary report saved to %s", REPORT_PATH)


if __name__ == "__main__":
    asyncio.run(main())
