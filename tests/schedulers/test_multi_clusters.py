"""
Tests for the oversubscription-aware PE allocation engine.
"""
import pytest

from errors import ConfigurationInvalid
from resources import MipsShare
from test_utils import assert_cluster_sizes_consistent, create_test_host, create_test_vm


def test_critical_mass_scenario(host, scheduler, scenario_vms):
    """8 working PEs, critical mass 2, catalog {1.0, 2.0}."""
    a, b, c = scenario_vms["A"], scenario_vms["B"], scenario_vms["C"]

    # A alone is below critical mass: charged its full 4 PEs
    assert scheduler.compute_footprint(a) == 4
    assert scheduler.is_admissible(a)
    assert scheduler.allocate(a)
    assert scheduler.size_for(2.0) == 4
    assert scheduler.compute_footprint() == 4

    # B brings the 2.0 vCluster to critical mass: ceil(8 / 2) = 4
    assert scheduler.compute_footprint(b) == 4
    assert scheduler.allocate(b)
    assert scheduler.size_for(2.0) == 8
    assert scheduler.footprint_for(2.0) == 4

    # C alone in the 1.0 vCluster: 4 + 2
    assert scheduler.compute_footprint(c) == 6
    assert scheduler.allocate(c)
    assert scheduler.compute_footprint() == 6

    # Removing A drops B below critical mass, so the 2.0 vCluster is
    # charged its raw 4 PEs again and nothing is released
    released = scheduler.deallocate(a)
    assert scheduler.size_for(2.0) == 4
    assert scheduler.footprint_for(2.0) == 4
    assert scheduler.compute_footprint() == 6
    assert released == 0
    assert_cluster_sizes_consistent(host)


def test_admission_rejects_over_capacity(scheduler, scenario_vms):
    for vm in scenario_vms.values():
        assert scheduler.allocate(vm)

    # 1.0 vCluster would reach 2 members: ceil(5 / 1) + 4 = 9 > 8
    big = create_test_vm("E", 3, 1.0)
    assert scheduler.compute_footprint(big) == 9
    assert not scheduler.is_admissible(big)


def test_failed_allocate_has_no_effect(host, scheduler):
    vm = create_test_vm("huge", 9, 1.0)
    before = scheduler.compute_footprint()

    assert scheduler.allocate(vm) is False
    assert vm.allocated_mips is None
    assert not scheduler.tracker.is_registered(vm)
    assert scheduler.compute_footprint() == before
    assert scheduler.size_for(1.0) == 0
    assert_cluster_sizes_consistent(host)


def test_allocate_then_deallocate_restores_state(host, scheduler):
    scheduler.allocate(create_test_vm("base", 3, 2.0))
    sizes = {r: scheduler.size_for(r) for r in host.catalog.ratios}
    footprint = scheduler.compute_footprint()

    vm = create_test_vm("round", 2, 2.0)
    assert scheduler.allocate(vm)
    scheduler.deallocate(vm)

    assert {r: scheduler.size_for(r) for r in host.catalog.ratios} == sizes
    assert scheduler.compute_footprint() == footprint
    assert vm.allocated_mips is None
    assert_cluster_sizes_consistent(host)


def test_deallocate_releases_rounded_capacity():
    host = create_test_host(pes=4, ratios=(2.0,), critical_mass=1)
    scheduler = host.vm_scheduler
    first, second = create_test_vm("v1", 1, 2.0), create_test_vm("v2", 1, 2.0)
    scheduler.allocate(first)
    scheduler.allocate(second)
    assert scheduler.compute_footprint() == 1  # ceil(2 / 2)

    # ceil(1 / 2) is still 1: the first single-PE VM frees nothing
    assert scheduler.deallocate(first) == 0
    assert scheduler.deallocate(second) == 1
    assert scheduler.compute_footprint() == 0


def test_deallocate_unknown_vm_releases_nothing(scheduler):
    scheduler.allocate(create_test_vm("a", 2, 1.0))
    assert scheduler.deallocate(create_test_vm("ghost", 2, 1.0)) == 0
    assert scheduler.size_for(1.0) == 2


def test_granted_share_unscaled_when_not_migrating(scheduler):
    vm = create_test_vm("steady", 2, 1.0, mips_per_pe=1500)
    scheduler.allocate(vm)
    assert vm.allocated_mips == vm.requested_mips


def test_granted_share_scaled_for_migrating_vm():
    host = create_test_host(migration_overhead=0.25)
    vm = create_test_vm("moving", 2, 2.0, mips_per_pe=1000)
    vm.in_migration = True

    assert host.vm_scheduler.allocate(vm)
    assert vm.allocated_mips.mips == pytest.approx([750.0, 750.0])
    assert vm.requested_mips.mips == [1000.0, 1000.0]


def test_explicit_requested_share_is_used(scheduler):
    vm = create_test_vm("custom", 2, 1.0)
    share = MipsShare([500, 700])
    scheduler.allocate(vm, share)
    assert vm.allocated_mips == share


def test_availability_and_size(scheduler, scenario_vms):
    assert scheduler.availability_for(2.0) == 7  # 8 - one unit VM
    assert scheduler.size_for(2.0) == 0

    for vm in scenario_vms.values():
        scheduler.allocate(vm)

    # Unit VM at 2.0: ceil(9 / 2) + 2 = 7 -> 1 left
    assert scheduler.availability_for(2.0) == 1
    # Unit VM at 1.0: 4 + 3 = 7 -> 1 left
    assert scheduler.availability_for(1.0) == 1
    assert scheduler.size_for(2.0) == 8
    assert scheduler.size_for(1.0) == 2
    assert scheduler.members_for(2.0) == {scenario_vms["A"], scenario_vms["B"]}


def test_unknown_ratio_raises_configuration_invalid(scheduler):
    stray = create_test_vm("stray", 1, 5.0)
    with pytest.raises(ConfigurationInvalid):
        scheduler.is_admissible(stray)
    with pytest.raises(ConfigurationInvalid):
        scheduler.allocate(stray)
    with pytest.raises(ConfigurationInvalid):
        scheduler.availability_for(5.0)
    with pytest.raises(ConfigurationInvalid):
        scheduler.size_for(5.0)
    assert stray.allocated_mips is None


def test_working_pes_bound_admission():
    host = create_test_host(pes=4, ratios=(1.0,))
    scheduler = host.vm_scheduler
    assert scheduler.is_admissible(create_test_vm("four", 4, 1.0))

    host.fail_pe(0)
    assert host.working_pes_number == 3
    assert not scheduler.is_admissible(create_test_vm("four", 4, 1.0))


def test_sizes_stay_consistent_through_churn():
    host = create_test_host(pes=16, ratios=(1.0, 2.0, 3.0), critical_mass=2)
    scheduler = host.vm_scheduler
    vms = [create_test_vm(i, 1 + i % 3, (1.0, 2.0, 3.0)[i % 3]) for i in range(9)]

    for vm in vms:
        scheduler.allocate(vm)
        assert_cluster_sizes_consistent(host)
    for vm in vms[::2]:
        scheduler.deallocate(vm)
        assert_cluster_sizes_consistent(host)
