"""Benchmark: permission check throughput in checks per second.

Measures how many PermissionService.check_permission() calls complete per
second against a multi-group registry with inheritance and wildcard grants.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aumos_group_permissions.groups.group import Group
from aumos_group_permissions.groups.store import GroupStore
from aumos_group_permissions.permissions.principal import Principal
from aumos_group_permissions.permissions.service import PermissionService

_ITERATIONS: int = 10_000

_PERMISSIONS: list[str] = [
    "round.restart",
    "player.kick",
    "chat.send",
    "server.config.reload",
    "noclip",
]


def _make_service() -> PermissionService:
    """Build a service with a realistic group chain, without touching disk."""
    service = PermissionService(GroupStore(Path("unused.yml")))
    service.load_definitions(
        {
            "user": Group(name="user", is_default=True, permissions=("chat.send",)),
            "admin": Group(
                name="admin",
                inheritance=("moderator",),
                permissions=("round.*", "server.config.*"),
            ),
            "moderator": Group(
                name="moderator",
                inheritance=("user",),
                permissions=("player.kick", "player.mute"),
            ),
        }
    )
    return service


def bench_check_throughput() -> dict[str, object]:
    """Benchmark PermissionService.check_permission() throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms.
    """
    service = _make_service()
    principal = Principal(user_id="bench", group_key="admin")
    permission_count = len(_PERMISSIONS)

    start = time.perf_counter()
    for index in range(_ITERATIONS):
        service.check_permission(principal, _PERMISSIONS[index % permission_count])
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "permission_check_throughput",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
        "p99_latency_ms": 0.0,
    }
    print(
        f"[bench_check_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_check_throughput()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "check_throughput_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
