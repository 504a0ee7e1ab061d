"""
Physical hosts and the suitability gate consulted by placement policies.

A host owns a PE list, an active flag and exactly one MultiClusterScheduler.
Storage, RAM and bandwidth are provisioned elsewhere, so the gate always
reports them as satisfied; only the PE flag is actually evaluated.
"""
from config import HostCatalog
from errors import AdmissionRejected
from resources import FAILED, FREE, BUSY
from schedulers.multi_clusters import MultiClusterScheduler


class HostSuitability:
    def __init__(self, host, vm, for_storage=True, for_ram=True, for_bw=True, for_pes=True):
        self.host = host
        self.vm = vm
        self.for_storage = for_storage
        self.for_ram = for_ram
        self.for_bw = for_bw
        self.for_pes = for_pes

    def fully(self):
        return self.for_storage and self.for_ram and self.for_bw and self.for_pes

    def __bool__(self):
        return self.fully()

    def failure_reasons(self):
        flags = [("storage", self.for_storage), ("ram", self.for_ram),
                 ("bw", self.for_bw), ("pes", self.for_pes)]
        return [name for name, ok in flags if not ok]

    def __repr__(self):
        if self.fully():
            return f"HostSuitability(host={self.host.id}, vm={self.vm.id}, ok)"
        return f"HostSuitability(host={self.host.id}, vm={self.vm.id}, missing={self.failure_reasons()})"


class Host:
    def __init__(self, hid, pes, catalog=None, active=True):
        self.id = hid
        self.pes = list(pes)
        self.catalog = catalog or HostCatalog()
        self.active = active
        self.vms = []
        self.vm_scheduler = MultiClusterScheduler(self.pes, self.catalog)
        self.vm_scheduler.host = self

    @property
    def pes_number(self):
        return len(self.pes)

    @property
    def working_pes_number(self):
        return sum(1 for pe in self.pes if pe.is_working())

    def is_active(self):
        return self.active

    def activate(self):
        self.active = True

    def deactivate(self):
        self.active = False

    def fail_pe(self, pid):
        """Mark a PE as failed; it stops counting towards working PEs."""
        for pe in self.pes:
            if pe.id == pid:
                pe.status = FAILED
                return pe
        raise KeyError(f"Host {self.id} has no PE {pid}")

    def is_suitable_for_vm(self, vm):
        suitability = HostSuitability(self, vm)
        suitability.for_pes = self.vm_scheduler.is_admissible(vm)
        return suitability

    def availability_for(self, ratio):
        return self.vm_scheduler.availability_for(ratio)

    def size_for(self, ratio):
        return self.vm_scheduler.size_for(ratio)

    def footprint_with(self, vm=None):
        """Host footprint if `vm` were added (current footprint when None)."""
        return self.vm_scheduler.compute_footprint(vm)

    @property
    def used_pes(self):
        return self.vm_scheduler.used_pes

    def create_vm(self, vm):
        """
        Commit a placement decision.

        Raises:
            AdmissionRejected: the engine refused the VM
        """
        if not self.vm_scheduler.allocate(vm, vm.requested_mips):
            raise AdmissionRejected(vm, self)
        self.vms.append(vm)
        vm.host = self
        self._update_pe_status()
        return vm.allocated_mips

    def destroy_vm(self, vm):
        """Release a VM; returns the PE-equivalents freed."""
        released = self.vm_scheduler.deallocate(vm)
        if vm in self.vms:
            self.vms.remove(vm)
        if vm.host is self:
            vm.host = None
        self._update_pe_status()
        return released

    def _update_pe_status(self):
        # The first `used` working PEs are reported busy, for inspection only
        used = self.used_pes
        for pe in self.pes:
            if not pe.is_working():
                continue
            pe.status = BUSY if used > 0 else FREE
            used -= 1

    def reset(self):
        for vm in self.vms:
            vm.host = None
        self.vms = []
        self.vm_scheduler.reset()
        self._update_pe_status()

    def __repr__(self):
        state = "active" if self.active else "inactive"
        return f"Host {self.id} ({self.used_pes}/{self.working_pes_number} PEs, {state})"
