"""
Structured trace of placement decisions.

Policies return their per-host reasoning as TraceRecord entries instead of
printing it, so decisions stay deterministic and can be rendered (or
asserted on) by whoever consumes them.
"""

INACTIVE = "inactive"
UNSUITABLE = "unsuitable"
CANDIDATE = "candidate"
SELECTED_AVAILABILITY = "selected-availability"
SELECTED_SIZE = "selected-size"
SELECTED_FIRST_FIT = "selected-first-fit"
EXHAUSTED = "exhausted"


class TraceRecord:
    def __init__(self, vm_id, host_id, decision, availability=None, size=None, footprint=None):
        self.vm_id = vm_id
        self.host_id = host_id
        self.decision = decision
        self.availability = availability
        self.size = size
        self.footprint = footprint

    def as_dict(self):
        return {
            "vm": self.vm_id,
            "host": self.host_id,
            "decision": self.decision,
            "availability": self.availability,
            "size": self.size,
            "footprint": self.footprint,
        }

    def __repr__(self):
        return f"TraceRecord({self.as_dict()})"


def format_record(record):
    if record.host_id is None:
        return f"VM {record.vm_id}: {record.decision}"
    parts = [f"VM {record.vm_id} host {record.host_id}: {record.decision}"]
    if record.availability is not None:
        parts.append(f"available={record.availability}")
    if record.size is not None:
        parts.append(f"size={record.size}")
    if record.footprint is not None:
        parts.append(f"footprint={record.footprint}")
    return " ".join(parts)


def format_trace(records):
    return [format_record(r) for r in records]
