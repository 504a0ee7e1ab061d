"""
Synthetic workload generation for VM placement simulation.

Generates VMs with:
- Poisson arrivals (specified arrival rate)
- Exponential lifetimes (parameterizable mean)
- vCPU (PE) demand drawn from a categorical distribution
- Declared oversubscription ratio drawn from a categorical distribution

Supports Common Random Numbers (CRN) via configurable seed for low-variance
cross-policy comparisons.
"""
import numpy as np

from config import HostCatalog
from hosts import Host
from resources import create_pes
from vms import Vm


def generate_vms(
    num_vms=200,
    arrival_rate=10,           # VMs per hour
    mean_lifetime=4.0,         # mean lifetime (hours)
    pes_distribution=None,     # vCPU demand distribution: {pes: probability}
    ratio_distribution=None,   # oversubscription distribution: {ratio: probability}
    mips_per_pe=1000,
    seed=42
):
    """
    Generate a synthetic stream of VM requests.
    Returns a list of Vm objects ordered by arrival.

    Args:
        pes_distribution: dict mapping vCPU counts to probabilities.
            Default: {1: 0.4, 2: 0.3, 4: 0.2, 8: 0.1}
        ratio_distribution: dict mapping oversubscription ratios to probabilities.
            Default: {1.0: 0.5, 2.0: 0.3, 3.0: 0.2}
    """
    rng = np.random.default_rng(seed)

    if pes_distribution is None:
        pes_distribution = {1: 0.4, 2: 0.3, 4: 0.2, 8: 0.1}
    if ratio_distribution is None:
        ratio_distribution = {1.0: 0.5, 2.0: 0.3, 3.0: 0.2}

    pes_values = list(pes_distribution.keys())
    pes_probs = list(pes_distribution.values())
    ratio_values = list(ratio_distribution.keys())
    ratio_probs = list(ratio_distribution.values())

    vms = []
    t = 0.0
    for vid in range(num_vms):
        # Interarrival time ~ Exponential(lambda = arrival_rate)
        t += rng.exponential(1.0 / arrival_rate)
        lifetime = rng.exponential(mean_lifetime)
        pes = int(rng.choice(pes_values, p=pes_probs))
        ratio = float(rng.choice(ratio_values, p=ratio_probs))

        vms.append(Vm(vid, pes, mips_per_pe=mips_per_pe, oversubscription=ratio,
                      arrival=float(t), lifetime=float(lifetime)))

    return vms


def create_hosts(num_hosts=10, pes_per_host=32, catalog=None, mips_per_pe=1000):
    """Build a homogeneous fleet of active hosts sharing one catalog."""
    catalog = catalog or HostCatalog()
    return [Host(hid, create_pes(pes_per_host, mips_per_pe), catalog) for hid in range(num_hosts)]
