#!/usr/bin/env python3
"""
Basic metrics usage example.

Run with a collector address in the environment, for instance:

    METRICS_HOST=127.0.0.1 METRICS_PORT=8125 METRICS_PREFIX=example. \
        python examples/basic_usage.py

or with several destinations:

    METRICS_DESTINATIONS='[{"host": "127.0.0.1", "port": "8125", "prefix": "a."},
                           {"host": "127.0.0.1", "port": "8126", "prefix": "b."}]' \
        python examples/basic_usage.py
"""

import sys
import time

from prometheus_client import CollectorRegistry, generate_latest

import chpr_metrics
from chpr_metrics import MetricsConfigError, PrometheusClient, Sender


def main() -> int:
    """Demonstrate basic metrics usage."""
    chpr_metrics.configure_logging()

    print("chpr-metrics - Basic Usage Example\n")
    print("=" * 50)

    # 1. Shared sender built from the environment
    print("\n1. Shared Sender")
    print("-" * 50)
    try:
        metrics = chpr_metrics.get_sender()
    except MetricsConfigError as e:
        print(f"✗ Metrics are not configured: {e}")
        return 1
    print(f"✓ Sender with {len(metrics.clients)} destination(s)")

    # Count: adds a value to a counter
    metrics.count("my_counter", 3)
    # Increment: a count of 1
    metrics.increment("my_counter")
    # Gauge: absolute value
    metrics.gauge("my_gauge", 42)
    print("✓ Count, increment and gauge sent")

    # 2. Timing a task
    print("\n2. Timing")
    print("-" * 50)
    timer = metrics.new_timing()
    print("I am doing some task")
    time.sleep(1)
    print("I am done doing some task")
    timer.send("some_task.timing")
    print(f"✓ Sent some_task.timing ({timer.duration().total_seconds():.3f}s)")

    # 3. Same calls, also recorded in a local Prometheus registry
    print("\n3. Extra Prometheus destination")
    print("-" * 50)
    registry = CollectorRegistry()
    sender = Sender.from_env(extra_clients=[PrometheusClient(registry=registry)])
    sender.increment("requests")
    print(generate_latest(registry).decode())
    sender.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
