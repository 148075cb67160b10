"""Aggregate resource estimate and a linear, provider-agnostic cost model.

    total_cpu        = min(100, 20 + 15 * n + 20 * rps / 100)      (%)
    total_memory     = 512 + 256 * n + 512 * rps / 100               (MB)
    total_storage    = 10 + 5 * n + 2 * rps / 100                    (GB)
    network          = 2 * rps                                       (KB/s)

Hourly cost charges each resource at a flat rate from the selected rate card;
the run cost is the hourly rate prorated over the simulated duration. This is
not a cloud pricing lookup.
"""

from __future__ import annotations

from scalesim.config import CostRates, EngineParameters, RunConfig
from scalesim.instrumentation.summary import CostEstimate, ResourceUtilization
from scalesim.utils.numeric import round_half_up


def estimate_cost(
    total_cpu_pct: float,
    total_memory_mb: float,
    total_storage_gb: float,
    network_bandwidth_kbps: float,
    duration_s: float,
    rates: CostRates | None = None,
    provider: str = "aws",
) -> CostEstimate:
    rates = rates or CostRates()
    cpu_cost = (total_cpu_pct / 100.0) * rates.cpu
    memory_cost = (total_memory_mb / 1024.0) * rates.memory_gb
    storage_cost = (total_storage_gb / 1024.0) * rates.storage_tb
    network_cost = (network_bandwidth_kbps / 1024.0) * rates.network_mbps
    hourly = cpu_cost + memory_cost + storage_cost + network_cost
    return CostEstimate(
        provider=provider,
        cpu_cost=cpu_cost,
        memory_cost=memory_cost,
        storage_cost=storage_cost,
        network_cost=network_cost,
        hourly_rate=round(hourly, 2),
        total_cost=round(hourly * (duration_s / 3600.0), 2),
    )


def estimate_resources(
    component_count: int,
    config: RunConfig,
    params: EngineParameters | None = None,
) -> ResourceUtilization:
    """Resource totals for ``component_count`` components at the configured load.

    Zero components estimate to zero resources and zero cost.
    """
    params = params or EngineParameters()
    if component_count <= 0:
        return ResourceUtilization(cost=CostEstimate(provider=params.cloud_provider))

    load = config.requests_per_second / 100.0
    total_cpu = min(100.0, 20.0 + 15.0 * component_count + 20.0 * load)
    total_memory = round_half_up(512 + 256 * component_count + 512 * load)
    total_storage = round_half_up(10 + 5 * component_count + 2 * load)
    bandwidth = round_half_up(config.requests_per_second * 2)

    return ResourceUtilization(
        total_cpu_pct=total_cpu,
        total_memory_mb=total_memory,
        total_storage_gb=total_storage,
        network_bandwidth_kbps=bandwidth,
        active_connections=int(config.users),
        cost=estimate_cost(
            total_cpu,
            total_memory,
            total_storage,
            bandwidth,
            config.duration,
            rates=params.cost_rates,
            provider=params.cloud_provider,
        ),
    )
