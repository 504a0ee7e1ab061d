"""
Per-host vCluster bookkeeping.

A host keeps one vCluster per oversubscription ratio of its catalog. Each
vCluster tracks:
- its member VMs
- the raw PE demand of those members (sum of requested PEs, before reduction)

The footprint of a vCluster is the number of host PEs it is charged:
ceil(demand / ratio) once the vCluster has reached the critical mass,
the raw demand otherwise. The host footprint is the sum over all vClusters.
"""
import math

from errors import ConfigurationInvalid


def cluster_footprint(members, demand, ratio, critical_mass):
    """PE-equivalents charged for `demand` raw PEs shared by `members` VMs."""
    if members >= critical_mass:
        # round() absorbs float error such as 11 / 1.1 = 10.000000000000002
        return math.ceil(round(demand / ratio, 9))
    return demand


class OversubscriptionCluster:
    def __init__(self, ratio):
        self.ratio = ratio
        self.members = set()
        self.raw_demand = 0

    def __len__(self):
        return len(self.members)

    def __contains__(self, vm):
        return vm in self.members

    def add(self, vm):
        self.members.add(vm)
        self.raw_demand += vm.pes_number

    def remove(self, vm):
        self.members.remove(vm)
        self.raw_demand -= vm.pes_number

    def footprint(self, critical_mass, extra_members=0, extra_demand=0):
        return cluster_footprint(len(self.members) + extra_members,
                                 self.raw_demand + extra_demand,
                                 self.ratio, critical_mass)

    def __repr__(self):
        return f"OversubscriptionCluster(oc={self.ratio}, vms={len(self.members)}, demand={self.raw_demand})"


class ClusterTracker:
    """Groups the VMs of one host by declared oversubscription ratio."""

    def __init__(self, ratios, critical_mass=1):
        self.critical_mass = critical_mass
        # Every catalog ratio gets a vCluster up front, even if it stays empty
        self.clusters = {float(r): OversubscriptionCluster(float(r)) for r in ratios}

    def cluster_for(self, ratio):
        try:
            return self.clusters[float(ratio)]
        except KeyError:
            raise ConfigurationInvalid(
                f"Oversubscription ratio {ratio} is not in the host catalog "
                f"{sorted(self.clusters)}") from None

    def compute_footprint(self, extra_ratio=None, extra_pes=0):
        """
        Host footprint, optionally as if one more VM of `extra_pes` PEs at
        `extra_ratio` were registered. Never mutates the tracker.
        """
        if extra_ratio is not None:
            self.cluster_for(extra_ratio)  # unknown ratio fails fast
            extra_ratio = float(extra_ratio)

        total = 0
        for ratio, cluster in self.clusters.items():
            if ratio == extra_ratio:
                total += cluster.footprint(self.critical_mass, 1, extra_pes)
            else:
                total += cluster.footprint(self.critical_mass)
        return total

    def register(self, vm):
        cluster = self.cluster_for(vm.oversubscription_ratio())
        cluster.add(vm)

    def unregister(self, vm):
        """Remove `vm` from its vCluster. Returns False if it was not a member."""
        cluster = self.cluster_for(vm.oversubscription_ratio())
        if vm not in cluster:
            return False
        cluster.remove(vm)
        return True

    def is_registered(self, vm):
        return any(vm in cluster for cluster in self.clusters.values())

    def clear(self):
        for cluster in self.clusters.values():
            cluster.members.clear()
            cluster.raw_demand = 0
