from placement_trace import (CANDIDATE, EXHAUSTED, INACTIVE, SELECTED_AVAILABILITY,
                             SELECTED_SIZE, UNSUITABLE, TraceRecord)
from .base import PlacementDecision, VmAllocationPolicy


class VClusterPolicy(VmAllocationPolicy):
    """
    vCluster-aware host selection.

    Priority goes to the host with the most availability for the VM's
    oversubscription ratio, provided the VM fits in it: such a host absorbs
    the VM without growing any vCluster past its current footprint. Failing
    that, the host with the largest vCluster for the ratio is chosen.

    The fallback compares for the largest size although the intent stated
    for it is to spread VMs over the smallest vCluster. The largest-size
    comparison is kept as is.

    Ties keep the first host in list order.
    """

    def find_host_for_vm(self, vm):
        ratio = vm.oversubscription_ratio()
        records = []
        best_availability_host, best_availability = None, None
        best_size_host, best_size = None, None

        for host in self.hosts:
            if not host.is_active():
                records.append(TraceRecord(vm.id, host.id, INACTIVE))
                continue
            if not host.is_suitable_for_vm(vm):
                records.append(TraceRecord(vm.id, host.id, UNSUITABLE,
                                           footprint=host.footprint_with(vm)))
                continue

            availability = host.availability_for(ratio)
            if vm.pes_number <= availability and (best_availability_host is None or availability > best_availability):
                best_availability_host, best_availability = host, availability

            size = host.size_for(ratio)
            if best_size_host is None or size > best_size:
                best_size_host, best_size = host, size

            records.append(TraceRecord(vm.id, host.id, CANDIDATE,
                                       availability=availability, size=size,
                                       footprint=host.footprint_with(vm)))

        if best_availability_host is not None:
            records.append(TraceRecord(vm.id, best_availability_host.id, SELECTED_AVAILABILITY,
                                       availability=best_availability))
            return PlacementDecision(vm, best_availability_host, SELECTED_AVAILABILITY, records)
        if best_size_host is not None:
            records.append(TraceRecord(vm.id, best_size_host.id, SELECTED_SIZE, size=best_size))
            return PlacementDecision(vm, best_size_host, SELECTED_SIZE, records)

        records.append(TraceRecord(vm.id, None, EXHAUSTED))
        return PlacementDecision(vm, None, EXHAUSTED, records)
