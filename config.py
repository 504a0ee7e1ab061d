"""
Host catalog configuration.

A catalog lists the oversubscription ratios a host tracks (one vCluster per
ratio), the critical mass a vCluster must reach before its reduction is
applied, and the CPU overhead charged to VMs that are migrating.
"""
import math

from errors import ConfigurationInvalid

DEFAULT_RATIOS = (1.0, 2.0, 3.0)
DEFAULT_CRITICAL_MASS = 1
DEFAULT_MIGRATION_OVERHEAD = 0.1  # 10% of the requested MIPS


def is_valid_ratio(ratio):
    return math.isfinite(ratio) and ratio > 0


class HostCatalog:
    def __init__(self, ratios=DEFAULT_RATIOS, critical_mass=DEFAULT_CRITICAL_MASS,
                 migration_overhead=DEFAULT_MIGRATION_OVERHEAD):
        ratios = tuple(sorted({float(r) for r in ratios}))
        if not ratios:
            raise ConfigurationInvalid("Catalog needs at least one oversubscription ratio")
        for ratio in ratios:
            if not is_valid_ratio(ratio):
                raise ConfigurationInvalid(
                    f"Oversubscription ratio must be a finite positive number, got {ratio}")
        if not math.isfinite(critical_mass) or int(critical_mass) != critical_mass or critical_mass < 1:
            raise ConfigurationInvalid(f"Critical mass must be an integer >= 1, got {critical_mass}")
        if not 0.0 <= migration_overhead <= 1.0:
            raise ConfigurationInvalid(
                f"Migration overhead must be in [0, 1], got {migration_overhead}")

        self.ratios = ratios
        self.critical_mass = int(critical_mass)
        self.migration_overhead = float(migration_overhead)

    def __contains__(self, ratio):
        return float(ratio) in self.ratios

    def __repr__(self):
        return (f"HostCatalog(ratios={list(self.ratios)}, critical_mass={self.critical_mass}, "
                f"migration_overhead={self.migration_overhead})")
