"""
Pytest configuration and shared fixtures for placement tests.
"""
import pytest
from test_utils import create_test_host, create_test_vm


@pytest.fixture
def host():
    """8 working PEs, catalog {1.0, 2.0}, critical mass 2."""
    return create_test_host(0, pes=8, ratios=(1.0, 2.0), critical_mass=2)


@pytest.fixture
def scheduler(host):
    return host.vm_scheduler


@pytest.fixture
def small_fleet():
    """Three 4-PE hosts with catalog {1.0, 2.0} and no critical mass."""
    return [create_test_host(i, pes=4, ratios=(1.0, 2.0)) for i in range(3)]


@pytest.fixture
def scenario_vms():
    return {
        "A": create_test_vm("A", 4, 2.0),
        "B": create_test_vm("B", 4, 2.0),
        "C": create_test_vm("C", 2, 1.0),
    }
