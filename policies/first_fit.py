from placement_trace import EXHAUSTED, INACTIVE, SELECTED_FIRST_FIT, UNSUITABLE, TraceRecord
from .base import PlacementDecision, VmAllocationPolicy


class FirstFitPolicy(VmAllocationPolicy):
    """
    First-Fit placement baseline.

    Walks hosts in list order and picks the first active host whose
    suitability gate accepts the VM. Ignores vCluster sizes entirely, which
    makes it the reference point for the vCluster-aware policy.
    """

    def find_host_for_vm(self, vm):
        records = []
        for host in self.hosts:
            if not host.is_active():
                records.append(TraceRecord(vm.id, host.id, INACTIVE))
                continue
            footprint = host.footprint_with(vm)
            if not host.is_suitable_for_vm(vm):
                records.append(TraceRecord(vm.id, host.id, UNSUITABLE, footprint=footprint))
                continue
            records.append(TraceRecord(vm.id, host.id, SELECTED_FIRST_FIT, footprint=footprint))
            return PlacementDecision(vm, host, SELECTED_FIRST_FIT, records)

        records.append(TraceRecord(vm.id, None, EXHAUSTED))
        return PlacementDecision(vm, None, EXHAUSTED, records)
