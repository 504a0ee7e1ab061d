"""
Virtual machines as seen by the placement core.

The allocation engine only talks to the Oversubscribable capability
interface, so any VM variant that exposes a declared oversubscription ratio
and the requested/allocated MIPS accessors can be placed.
"""
from abc import ABC, abstractmethod

from config import is_valid_ratio
from errors import ConfigurationInvalid
from resources import MipsShare


class Oversubscribable(ABC):
    """
    Capability interface for VMs placed by the allocation engine.

    Implementations also carry an `in_migration` flag; a migrating VM is
    granted its requested MIPS reduced by the host's migration overhead.
    """

    @abstractmethod
    def oversubscription_ratio(self):
        """Declared ratio (1.0 means no oversubscription)."""
        pass

    @property
    @abstractmethod
    def pes_number(self):
        pass

    @property
    @abstractmethod
    def requested_mips(self):
        pass

    @property
    @abstractmethod
    def allocated_mips(self):
        pass

    @allocated_mips.setter
    @abstractmethod
    def allocated_mips(self, share):
        pass


class Vm(Oversubscribable):
    def __init__(self, vid, pes, mips_per_pe=1000, oversubscription=1.0,
                 arrival=0.0, lifetime=None):
        if pes < 1:
            raise ConfigurationInvalid(f"VM {vid} must request at least one PE, got {pes}")
        if not is_valid_ratio(oversubscription):
            raise ConfigurationInvalid(
                f"VM {vid} oversubscription ratio must be a finite positive number, "
                f"got {oversubscription}")
        self.id = vid
        self._requested_mips = MipsShare.uniform(pes, mips_per_pe)
        self._oversubscription = float(oversubscription)  # fixed for the VM's lifetime
        self._allocated_mips = None
        self.in_migration = False
        # Simulation bookkeeping
        self.arrival = arrival
        self.lifetime = lifetime
        self.start = None  # placement time
        self.finish = None
        self.host = None
        self.rejected = False

    def oversubscription_ratio(self):
        return self._oversubscription

    @property
    def pes_number(self):
        return self._requested_mips.pes

    @property
    def requested_mips(self):
        return self._requested_mips

    @property
    def allocated_mips(self):
        return self._allocated_mips

    @allocated_mips.setter
    def allocated_mips(self, share):
        self._allocated_mips = share

    def is_placed(self):
        return self.host is not None

    def wait_time(self):
        """Delay between arrival and placement, None if never placed."""
        if self.start is None:
            return None
        return self.start - self.arrival

    def reset(self):
        """Clear placement state so the VM can be replayed in another run."""
        self._allocated_mips = None
        self.in_migration = False
        self.start = None
        self.finish = None
        self.host = None
        self.rejected = False

    def __repr__(self):
        return f"Vm({self.id}, pes={self.pes_number}, oc={self._oversubscription})"
