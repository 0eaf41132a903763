"""Prometheus metric definitions."""

from prometheus_client import CollectorRegistry, Counter, Histogram

# Dedicated registry so the textfile only holds provisioning metrics
REGISTRY = CollectorRegistry()

# ============================================================
# BACKEND METRICS
# ============================================================

BACKEND_ATTEMPTS = Counter(
    "backend_attempts_total",
    "Secret decryption attempts per backend",
    ["backend", "status"],
    registry=REGISTRY,
)

BACKEND_LATENCY = Histogram(
    "backend_latency_seconds",
    "Time spent waiting on a backend process",
    ["backend"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
    registry=REGISTRY,
)

# ============================================================
# PROVISIONING METRICS
# ============================================================

SECRETS_PROVISIONED = Counter(
    "secrets_provisioned_total",
    "Secrets written to a derivation secret directory",
    registry=REGISTRY,
)

PROVISION_FAILURES = Counter(
    "provision_failures_total",
    "Provisioning runs aborted by an error",
    ["reason"],
    registry=REGISTRY,
)
