"""
Abstract base class for VM schedulers (the per-host PE allocation engine).

Every host owns exactly one scheduler instance. Schedulers implement:
1. is_admissible: can the VM be registered without exceeding working PEs
2. allocate: grant a MIPS share and register the VM
3. deallocate: unregister the VM and report the PE-equivalents released

The base class provides the migration-overhead scaling shared by all
implementations.
"""
from abc import ABC, abstractmethod

from config import DEFAULT_MIGRATION_OVERHEAD


class VmScheduler(ABC):
    def __init__(self, migration_overhead=DEFAULT_MIGRATION_OVERHEAD):
        self.migration_overhead = migration_overhead
        self.host = None  # set by the owning Host

    @property
    def working_pes_number(self):
        return self.host.working_pes_number if self.host is not None else 0

    @abstractmethod
    def is_admissible(self, vm):
        """
        Check whether the VM fits on the host.

        Args:
            vm: Oversubscribable VM candidate

        Returns:
            True if registering the VM keeps the host within its working PEs
        """
        pass

    @abstractmethod
    def allocate(self, vm, requested_mips=None):
        """
        Register the VM and grant its MIPS share.

        Args:
            vm: Oversubscribable VM to register
            requested_mips: MipsShare requested (defaults to vm.requested_mips)

        Returns:
            True on success, False (with no state change) otherwise
        """
        pass

    @abstractmethod
    def deallocate(self, vm):
        """
        Unregister the VM.

        Returns:
            Number of host PE-equivalents released
        """
        pass

    def mips_percent_to_request(self, vm):
        """Fraction of the requested MIPS granted to the VM (reduced while migrating)."""
        if vm.in_migration:
            return 1.0 - self.migration_overhead
        return 1.0

    def mips_share_to_allocate(self, vm, requested_mips):
        return requested_mips.scaled(self.mips_percent_to_request(vm))
