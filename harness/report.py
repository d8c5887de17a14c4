"""Plain-text rendering of scenario results for terminals and CI logs."""

from __future__ import annotations

from harness.runner import ScenarioResult

WIDTH = 60


def format_summary(result: ScenarioResult) -> str:
    """
    Render the metric table and the per-check verdict.

    Args:
        result: A finished scenario.

    Returns:
        A multi-line string ready to print.
    """
    snapshot = result.snapshot
    lines = [
        f"Scenario: {result.scenario_name}",
        "-" * WIDTH,
        f"{'Total requests':<28}{snapshot.total_requests:>12}",
        f"{'HTTP successes':<28}{snapshot.success_count:>12}",
        f"{'  with data':<28}{snapshot.valid_data_count:>12}",
        f"{'  empty or invalid data':<28}{snapshot.empty_data_count:>12}",
        f"{'Failures':<28}{snapshot.failure_count:>12}",
        f"{'  timeouts':<28}{snapshot.timeout_count:>12}",
        f"{'  not issued':<28}{snapshot.not_issued_count:>12}",
        f"{'HTTP success rate (%)':<28}{snapshot.success_rate:>12.2f}",
        f"{'Valid data rate (%)':<28}{snapshot.valid_data_rate:>12.2f}",
        f"{'Empty data rate (%)':<28}{snapshot.empty_data_rate:>12.2f}",
        f"{'Average latency (ms)':<28}{snapshot.average_latency_ms:>12.2f}",
        f"{'Min latency (ms)':<28}{snapshot.min_latency_ms:>12}",
        f"{'Max latency (ms)':<28}{snapshot.max_latency_ms:>12}",
        f"{'Duration (s)':<28}{snapshot.duration_seconds:>12.2f}",
        f"{'Throughput (req/s)':<28}{snapshot.throughput_per_second:>12.2f}",
        "-" * WIDTH,
    ]

    for check in result.verdict.results:
        status = "PASS" if check.passed else "FAIL"
        lines.append(f"{status:<6}{check.name:<22}{check.message}")

    lines.append("-" * WIDTH)
    lines.append(f"Overall: {'PASS' if result.passed else 'FAIL'}")
    return "\n".join(lines)
