"""System-level bottleneck detection.

A flat scan: every component is checked against CPU, memory and error-rate
thresholds, then every connection is checked against the outbound network
traffic of its source. Connections are never chained.

The error-rate threshold here (10%) is higher than the per-component
diagnosis (5%).
"""

from __future__ import annotations

import logging

from scalesim.instrumentation.summary import (
    BottleneckCategory,
    ComponentPerformance,
    Finding,
    Severity,
)
from scalesim.topology.model import Topology

logger = logging.getLogger(__name__)

CPU_THRESHOLD = 80.0
MEMORY_THRESHOLD = 80.0
ERROR_RATE_THRESHOLD = 0.1
NETWORK_THRESHOLD_KBPS = 1000.0


def _ratio_severity(value: float, threshold: float) -> Severity:
    """HIGH when ``value`` is at least 20% over ``threshold``."""
    return Severity.HIGH if value >= threshold * 1.2 else Severity.MEDIUM


def _pct_severity(value: float, threshold: float) -> Severity:
    """HIGH when a percentage is at least 10 points over ``threshold``."""
    return Severity.HIGH if value >= threshold + 10.0 else Severity.MEDIUM


def _component_findings(cp: ComponentPerformance) -> list[Finding]:
    label = f"{cp.name} ({cp.component_id})" if cp.name != cp.component_id else cp.component_id
    findings: list[Finding] = []
    if cp.cpu_pct > CPU_THRESHOLD:
        findings.append(Finding(
            category=BottleneckCategory.CPU,
            message=f"{label}: High CPU usage ({cp.cpu_pct:.1f}%)",
            component_id=cp.component_id,
            value=cp.cpu_pct,
            threshold=CPU_THRESHOLD,
            severity=_pct_severity(cp.cpu_pct, CPU_THRESHOLD),
        ))
    if cp.memory_pct > MEMORY_THRESHOLD:
        findings.append(Finding(
            category=BottleneckCategory.MEMORY,
            message=f"{label}: High memory usage ({cp.memory_pct:.1f}%)",
            component_id=cp.component_id,
            value=cp.memory_pct,
            threshold=MEMORY_THRESHOLD,
            severity=_pct_severity(cp.memory_pct, MEMORY_THRESHOLD),
        ))
    if cp.error_rate > ERROR_RATE_THRESHOLD:
        findings.append(Finding(
            category=BottleneckCategory.ERROR_RATE,
            message=f"{label}: High error rate ({cp.error_rate * 100:.1f}%)",
            component_id=cp.component_id,
            value=cp.error_rate,
            threshold=ERROR_RATE_THRESHOLD,
            severity=_ratio_severity(cp.error_rate, ERROR_RATE_THRESHOLD),
        ))
    return findings


def detect_bottlenecks(
    performance: dict[str, ComponentPerformance],
    topology: Topology,
) -> list[Finding]:
    """Scan components, then connections, for threshold crossings.

    Args:
        performance: Output of ``analyze_components``.
        topology: Supplies the connections to check.

    Returns:
        Findings in scan order: component findings in component order,
        then network findings in connection order.
    """
    findings: list[Finding] = []
    for cp in performance.values():
        findings.extend(_component_findings(cp))

    for connection in topology.connections:
        source = performance.get(connection.source)
        if source is None:
            logger.debug("Connection %s has unknown source %s, skipping", connection.id, connection.source)
            continue
        if source.network_out_kbps > NETWORK_THRESHOLD_KBPS:
            findings.append(Finding(
                category=BottleneckCategory.NETWORK,
                message=(
                    f"High network traffic from {connection.source} to {connection.target} "
                    f"({source.network_out_kbps} KB/s)"
                ),
                component_id=connection.source,
                target_id=connection.target,
                value=float(source.network_out_kbps),
                threshold=NETWORK_THRESHOLD_KBPS,
                severity=_ratio_severity(source.network_out_kbps, NETWORK_THRESHOLD_KBPS),
            ))

    if findings:
        logger.info("Detected %d system-level bottlenecks", len(findings))
    return findings
