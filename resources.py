"""
Physical processing resources of a host.

- Pe: one physical core with a MIPS capacity and a status
- MipsShare: per-core MIPS vector requested by or granted to a VM
"""

FREE = "FREE"
BUSY = "BUSY"
FAILED = "FAILED"


class Pe:
    def __init__(self, pid, mips, status=FREE):
        self.id = pid
        self.mips = mips
        self.status = status

    def is_working(self):
        return self.status != FAILED

    def __repr__(self):
        return f"Pe({self.id}, mips={self.mips}, {self.status})"


def create_pes(count, mips=1000):
    """Helper to build a list of `count` identical PEs."""
    return [Pe(i, mips) for i in range(count)]


class MipsShare:
    """
    MIPS requested or allocated for each virtual PE of a VM.

    The vector length is the number of virtual PEs; each entry is the MIPS
    capacity for that PE.
    """

    def __init__(self, mips):
        self.mips = [float(m) for m in mips]

    @classmethod
    def uniform(cls, pes, mips_per_pe):
        return cls([mips_per_pe] * pes)

    @property
    def pes(self):
        return len(self.mips)

    @property
    def total_mips(self):
        return sum(self.mips)

    def scaled(self, factor):
        """Return the share with every PE's MIPS multiplied by `factor`."""
        if factor == 1:
            return self
        return MipsShare([m * factor for m in self.mips])

    def __eq__(self, other):
        return isinstance(other, MipsShare) and self.mips == other.mips

    def __repr__(self):
        return f"MipsShare({self.mips})"
