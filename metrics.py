"""
Performance metrics for placement policy evaluation.

Implements:
1. Acceptance rate: share of VM requests that were placed (0–1, higher is better)
2. Mean / P95 wait: delay between arrival and placement (lower is better)
3. PE utilization: footprint / working PEs over active hosts (0–1)
4. Oversubscription savings: 1 - footprint / raw vCPU demand (higher is better)
5. Hosts in use: number of hosts carrying at least one VM

Host-based metrics are snapshots; the sampled_* variants average the
snapshots a Simulator records after every event instant.
"""
import numpy as np


def acceptance_rate(vms):
    if not vms:
        return 0.0
    placed = sum(1 for vm in vms if vm.start is not None)
    return placed / len(vms)


def _waits(vms):
    return [vm.wait_time() for vm in vms if vm.start is not None]


def mean_wait(vms):
    waits = _waits(vms)
    if not waits:
        return 0.0
    return float(np.mean(waits))


def p95_wait(vms):
    waits = _waits(vms)
    if not waits:
        return 0.0
    return float(np.percentile(waits, 95))


def pe_utilization(hosts):
    """
    Mean over active hosts of footprint / working PEs.

    The footprint is the PE-equivalent load after oversubscription, so this
    is the share of physical cores the placed VMs are charged for.
    """
    ratios = [h.used_pes / h.working_pes_number
              for h in hosts if h.is_active() and h.working_pes_number > 0]
    if not ratios:
        return 0.0
    return float(np.mean(ratios))


def oversubscription_savings(hosts):
    """
    Fraction of raw vCPU demand not charged to physical PEs.

    Returns 0.0 when nothing is placed; 0.5 means the placed vCPUs take half
    as many PEs as they would without oversubscription.
    """
    raw = np.array([sum(h.size_for(r) for r in h.catalog.ratios) for h in hosts], dtype=float)
    used = np.array([h.used_pes for h in hosts], dtype=float)
    total_raw = raw.sum()
    if total_raw <= 0:
        return 0.0
    return float(1.0 - used.sum() / total_raw)


def hosts_in_use(hosts):
    return sum(1 for h in hosts if h.vms)


def sampled_utilization(samples):
    values = [s["used_pes"] / s["working_pes"] for s in samples if s["working_pes"] > 0]
    if not values:
        return 0.0
    return float(np.mean(values))


def sampled_savings(samples):
    values = [1.0 - s["used_pes"] / s["raw_demand"] for s in samples if s["raw_demand"] > 0]
    if not values:
        return 0.0
    return float(np.mean(values))
