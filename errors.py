"""
Typed failures raised by the placement core.

- AdmissionRejected: a host refused a VM because its PE footprint would
  exceed the host's working PEs (recoverable, try another host)
- PlacementExhausted: no active, suitable host exists for a VM
- ConfigurationInvalid: bad catalog values, or a VM declaring an
  oversubscription ratio the host does not track
"""


class PlacementError(Exception):
    """Base class for placement failures."""


class AdmissionRejected(PlacementError):
    def __init__(self, vm, host):
        self.vm = vm
        self.host = host
        super().__init__(f"Host {host.id} rejected VM {vm.id} "
                         f"({vm.pes_number} PEs, ratio {vm.oversubscription_ratio()})")


class PlacementExhausted(PlacementError):
    def __init__(self, vm):
        self.vm = vm
        super().__init__(f"No active suitable host for VM {vm.id} "
                         f"({vm.pes_number} PEs, ratio {vm.oversubscription_ratio()})")


class ConfigurationInvalid(PlacementError, ValueError):
    pass
