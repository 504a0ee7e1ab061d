"""
Abstract base class for VM placement policies.

A policy chooses a host for a VM (find_host_for_vm) without touching any
host state. allocate_host_for_vm commits the choice through Host.create_vm,
which is what the simulator calls when it places a VM.

Subclasses implement concrete selection heuristics (first-fit, vCluster-aware).
"""
from abc import ABC, abstractmethod

from errors import PlacementExhausted


class PlacementDecision:
    def __init__(self, vm, host, reason, trace):
        self.vm = vm
        self.host = host
        self.reason = reason
        self.trace = trace

    def __bool__(self):
        return self.host is not None

    def __repr__(self):
        host = self.host.id if self.host is not None else None
        return f"PlacementDecision(vm={self.vm.id}, host={host}, reason={self.reason})"


class VmAllocationPolicy(ABC):
    def __init__(self, hosts=None):
        self.hosts = list(hosts) if hosts is not None else []

    @abstractmethod
    def find_host_for_vm(self, vm):
        """
        Select a host for the VM.

        Args:
            vm: Oversubscribable VM to place

        Returns:
            PlacementDecision (host is None when no host fits)
        """
        pass

    def allocate_host_for_vm(self, vm):
        """
        Find a host and register the VM on it.

        Raises:
            PlacementExhausted: no active suitable host exists
            AdmissionRejected: the chosen host refused the VM
        """
        decision = self.find_host_for_vm(vm)
        if decision.host is None:
            raise PlacementExhausted(vm)
        decision.host.create_vm(vm)
        return decision
