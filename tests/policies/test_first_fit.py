"""
Tests for the First-Fit placement baseline.
"""
from placement_trace import EXHAUSTED, INACTIVE, SELECTED_FIRST_FIT, UNSUITABLE
from policies.first_fit import FirstFitPolicy
from test_utils import create_test_vm


def test_first_fit_picks_first_suitable_host(small_fleet):
    small_fleet[0].create_vm(create_test_vm("p", 4, 1.0))
    decision = FirstFitPolicy(small_fleet).find_host_for_vm(create_test_vm("vm", 2, 1.0))

    assert decision.host is small_fleet[1]
    assert decision.reason == SELECTED_FIRST_FIT
    assert [r.decision for r in decision.trace] == [UNSUITABLE, SELECTED_FIRST_FIT]


def test_first_fit_ignores_vcluster_sizes(small_fleet):
    small_fleet[2].create_vm(create_test_vm("p", 2, 2.0))
    decision = FirstFitPolicy(small_fleet).find_host_for_vm(create_test_vm("vm", 2, 2.0))
    assert decision.host is small_fleet[0]


def test_first_fit_skips_inactive_and_exhausts(small_fleet):
    for host in small_fleet:
        host.deactivate()
    decision = FirstFitPolicy(small_fleet).find_host_for_vm(create_test_vm("vm", 1, 1.0))

    assert decision.host is None
    assert [r.decision for r in decision.trace] == [INACTIVE] * 3 + [EXHAUSTED]
