"""
Discrete-event simulation driver for VM placement.

Implements event-driven simulation with:
- Priority event queue (ordered by time, with tie-breaking)
- VM lifecycle tracking (pending → running → finished, or rejected)
- Placement through a VmAllocationPolicy, committed on the chosen host
- Release of host capacity when a VM's lifetime ends

The simulator processes events chronologically. Finishes at a given instant
are handled before arrivals so released capacity is visible to them.
"""
import heapq

from errors import AdmissionRejected
from placement_trace import format_trace

EVENT_PRIORITY = {"finish": 0, "arrival": 1}


class Simulator:
    def __init__(self, hosts, vms, policy, reject_unplaceable=False, debug=False):
        self.hosts = hosts
        self.vms = vms
        self.policy = policy
        self.policy.hosts = list(hosts)
        self.reject_unplaceable = reject_unplaceable
        self.time = 0
        self.event_queue = []  # (time, priority, counter, type, vm)
        self.event_counter = 0  # Unique counter to break ties
        self.pending = []
        self.running = []
        self.finished = []
        self.rejected = []
        self.decisions = []
        self.samples = []  # host load after each instant, see sample()
        self.debug = debug

    def log(self, msg):
        if self.debug:
            print(f"[t={self.time:.2f}] {msg}")

    def schedule_event(self, t, etype, vm):
        heapq.heappush(self.event_queue, (t, EVENT_PRIORITY[etype], self.event_counter, etype, vm))
        self.event_counter += 1

    def sample(self):
        """Aggregate load of the active hosts at the current time."""
        active = [h for h in self.hosts if h.is_active()]
        return {
            "time": self.time,
            "used_pes": sum(h.used_pes for h in active),
            "raw_demand": sum(h.size_for(r) for h in active for r in h.catalog.ratios),
            "working_pes": sum(h.working_pes_number for h in active),
            "pending": len(self.pending),
        }

    def reset(self):
        for vm in self.vms:
            vm.reset()
        for host in self.hosts:
            host.reset()

        self.time = 0
        self.event_queue = []
        self.event_counter = 0
        self.pending = []
        self.running = []
        self.finished = []
        self.rejected = []
        self.decisions = []
        self.samples = []

    def try_place(self):
        """
        Place pending VMs in arrival order; unplaceable ones keep waiting.

        If the policy raises (e.g. ConfigurationInvalid for an uncatalogued
        ratio), VMs placed so far leave the pending list and the rest stay.
        """
        still_pending = []
        visited = 0
        try:
            for vm in self.pending:
                self._place_one(vm, still_pending)
                visited += 1
        finally:
            self.pending = still_pending + self.pending[visited:]

    def _place_one(self, vm, still_pending):
        decision = self.policy.find_host_for_vm(vm)
        self.decisions.append(decision)
        for line in format_trace(decision.trace):
            self.log(line)

        placed = False
        if decision.host is not None:
            try:
                decision.host.create_vm(vm)
                placed = True
            except AdmissionRejected as exc:
                self.log(str(exc))

        if placed:
            vm.start = self.time
            self.running.append(vm)
            if vm.lifetime is not None:
                self.schedule_event(self.time + vm.lifetime, "finish", vm)
            self.log(f"VM {vm.id} PLACED on host {vm.host.id} (pes={vm.pes_number}, "
                     f"oc={vm.oversubscription_ratio()}, {decision.reason})")
        elif self.reject_unplaceable:
            vm.rejected = True
            self.rejected.append(vm)
            self.log(f"VM {vm.id} REJECTED")
        else:
            still_pending.append(vm)

    def run(self, horizon=100):
        # Reset VM and host state so the simulator can be reused with another policy
        self.reset()

        for vm in self.vms:
            self.schedule_event(vm.arrival, "arrival", vm)

        while self.event_queue and self.time < horizon:
            current_time = self.event_queue[0][0]
            if current_time >= horizon:
                break
            self.time = current_time

            # Process ALL finish events at current time first
            while self.event_queue and self.event_queue[0][0] == current_time and self.event_queue[0][3] == "finish":
                _, _, _, _, vm = heapq.heappop(self.event_queue)
                if vm not in self.running:
                    self.log(f"Stale finish event for VM {vm.id}, skipping")
                    continue
                host = vm.host
                released = host.destroy_vm(vm)
                vm.finish = self.time
                self.running.remove(vm)
                self.finished.append(vm)
                self.log(f"VM {vm.id} FINISHED on host {host.id} (released {released} PEs)")

            # Then process ALL arrival events at current time
            while self.event_queue and self.event_queue[0][0] == current_time and self.event_queue[0][3] == "arrival":
                _, _, _, _, vm = heapq.heappop(self.event_queue)
                self.pending.append(vm)
                self.log(f"VM {vm.id} (pes={vm.pes_number}, oc={vm.oversubscription_ratio()}) ARRIVED")

            # Finally, place whatever fits after all events at this time
            self.try_place()
            self.samples.append(self.sample())

        return self.finished
