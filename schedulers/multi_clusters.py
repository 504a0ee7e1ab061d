from cluster import ClusterTracker
from config import HostCatalog
from .base import VmScheduler


class MultiClusterScheduler(VmScheduler):
    """
    Oversubscription-aware PE allocation engine.

    VMs are grouped into vClusters by declared oversubscription ratio. The
    host is charged, per vCluster, ceil(raw PE demand / ratio) once the
    vCluster holds at least `critical_mass` VMs, and the raw demand before
    that. A VM is admitted when the resulting host footprint stays within
    the host's working PEs.

    Allocation is not idempotent: registering the same VM twice counts its
    PEs twice, so callers must register each VM at most once per host.
    """

    def __init__(self, pes, catalog=None):
        catalog = catalog or HostCatalog()
        super().__init__(catalog.migration_overhead)
        self.pes = pes
        self.catalog = catalog
        self.tracker = ClusterTracker(catalog.ratios, catalog.critical_mass)

    @property
    def critical_mass(self):
        return self.tracker.critical_mass

    def compute_footprint(self, hypothetical_vm=None):
        if hypothetical_vm is None:
            return self.tracker.compute_footprint()
        return self.tracker.compute_footprint(hypothetical_vm.oversubscription_ratio(),
                                              hypothetical_vm.pes_number)

    @property
    def used_pes(self):
        """Current host footprint in PE-equivalents."""
        return self.compute_footprint()

    def is_admissible(self, vm):
        return self.compute_footprint(vm) <= self.working_pes_number

    def allocate(self, vm, requested_mips=None):
        if requested_mips is None:
            requested_mips = vm.requested_mips
        if not self.is_admissible(vm):
            return False

        vm.allocated_mips = self.mips_share_to_allocate(vm, requested_mips)
        self.tracker.register(vm)
        return True

    def deallocate(self, vm):
        # Released capacity follows the ceiling rounding, not the VM's PE count
        before = self.compute_footprint()
        if not self.tracker.unregister(vm):
            return 0
        vm.allocated_mips = None
        return before - self.compute_footprint()

    def availability_for(self, ratio):
        """PEs left once one more single-PE VM joins the `ratio` vCluster."""
        return self.working_pes_number - self.tracker.compute_footprint(ratio, 1)

    def size_for(self, ratio):
        """Raw PE demand registered in the `ratio` vCluster."""
        return self.tracker.cluster_for(ratio).raw_demand

    def members_for(self, ratio):
        return set(self.tracker.cluster_for(ratio).members)

    def footprint_for(self, ratio):
        """PE-equivalents currently charged for the `ratio` vCluster."""
        return self.tracker.cluster_for(ratio).footprint(self.critical_mass)

    def reset(self):
        self.tracker.clear()
