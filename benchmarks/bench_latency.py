"""Benchmark: resolve and diff latency (p50/p95/mean).

Measures per-call latency of inheritance resolution and of a full
comparison on a generated surface of a few hundred members.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from apidiff.diff.differ import diff
from apidiff.model.nodes import Field, Method, Package, Parameter, SurfaceModel, TypeDecl
from apidiff.resolver.inheritance import resolve

_WARMUP: int = 20
_ITERATIONS: int = 300

_PACKAGES: int = 4
_TYPES_PER_PACKAGE: int = 10
_METHODS_PER_TYPE: int = 8


def build_surface(name: str, revision: int = 0) -> SurfaceModel:
    """Build a synthetic surface; ``revision`` changes a few members per type."""
    packages: list[Package] = []
    for p in range(_PACKAGES):
        package_name = f"bench.pkg{p}"
        types: list[TypeDecl] = []
        for t in range(_TYPES_PER_PACKAGE):
            methods = [
                Method(
                    name=f"op{m}",
                    return_type="int" if (m + revision) % 5 else "long",
                    parameters=(Parameter("value", "int"),) * (m % 3),
                )
                for m in range(_METHODS_PER_TYPE + revision)
            ]
            types.append(
                TypeDecl(
                    name=f"Type{t}",
                    extends=f"{package_name}.Type{t - 1}" if t else None,
                    methods=methods,
                    fields=[Field(name=f"field{t}", type="String")],
                )
            )
        packages.append(Package(name=package_name, types=types))
    return SurfaceModel(name=name, packages=packages)


def _percentiles(latencies_ms: list[float]) -> tuple[float, float, float]:
    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    return (
        sum(latencies_ms) / n,
        sorted_lats[int(n * 0.50)],
        sorted_lats[min(int(n * 0.95), n - 1)],
    )


def bench_resolve_latency() -> dict[str, object]:
    """Benchmark inheritance resolution of a fresh surface.

    Returns
    -------
    dict with keys: operation, iterations, avg_latency_ms, p50_ms, p95_ms.
    """
    surfaces = [build_surface("bench") for _ in range(_ITERATIONS)]
    latencies_ms: list[float] = []
    for surface in surfaces:
        t0 = time.perf_counter()
        resolve(surface)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    mean, p50, p95 = _percentiles(latencies_ms)
    result: dict[str, object] = {
        "operation": "apidiff_resolve_latency",
        "iterations": _ITERATIONS,
        "avg_latency_ms": round(mean, 4),
        "p50_ms": round(p50, 4),
        "p95_ms": round(p95, 4),
    }
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def bench_diff_latency() -> dict[str, object]:
    """Benchmark a full comparison of two resolved surfaces.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    old = build_surface("bench-1")
    new = build_surface("bench-2", revision=1)
    resolve(old)
    resolve(new)

    for _ in range(_WARMUP):
        diff(old, new)

    latencies_ms: list[float] = []
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        diff(old, new)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    mean, p50, p95 = _percentiles(latencies_ms)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "apidiff_diff_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(mean, 4),
        "p50_ms": round(p50, 4),
        "p95_ms": round(p95, 4),
    }
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


if __name__ == "__main__":
    results = [bench_resolve_latency(), bench_diff_latency()]
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(results, fh, indent=2)
    print(f"Results saved to {output_path}")
