"""
Multi-seed comparison of VM placement policies.

Uses Common Random Numbers (CRN): every policy sees the same generated VM
stream for a given seed. Reports mean and 95% confidence interval per metric.

Usage:
    python run_experiment.py                         # 10 seeds, default fleet
    python run_experiment.py --seeds 50 --base-seed 42
    python run_experiment.py --critical-mass 3 --ratios 1 2 4
    python run_experiment.py --output results.json   # Also save raw per-seed values
"""
import argparse
import json
import sys

import numpy as np

import metrics
from config import HostCatalog, DEFAULT_CRITICAL_MASS, DEFAULT_MIGRATION_OVERHEAD, DEFAULT_RATIOS
from errors import ConfigurationInvalid
from policies.first_fit import FirstFitPolicy
from policies.vcluster import VClusterPolicy
from simulator import Simulator
from workload import create_hosts, generate_vms

POLICIES = ["vcluster", "first-fit"]
METRICS = ["acceptance", "mean_wait", "p95_wait", "utilization", "savings"]


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Multi-seed comparison of vCluster-aware and first-fit VM placement",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--seeds', type=int, default=10,
                        help='Number of seeds to run (default: 10)')
    parser.add_argument('--base-seed', type=int, default=0,
                        help='Seeds will be base_seed to base_seed+N-1 (default: 0)')
    parser.add_argument('--hosts', type=int, default=10,
                        help='Number of hosts (default: 10)')
    parser.add_argument('--pes-per-host', type=int, default=32,
                        help='PEs per host (default: 32)')
    parser.add_argument('--vms', type=int, default=500,
                        help='Number of VM requests (default: 500)')
    parser.add_argument('--arrival-rate', type=float, default=20.0,
                        help='VM arrivals per hour (default: 20)')
    parser.add_argument('--mean-lifetime', type=float, default=8.0,
                        help='Mean VM lifetime in hours (default: 8)')
    parser.add_argument('--ratios', type=float, nargs='+', default=list(DEFAULT_RATIOS),
                        help='Oversubscription ratios in the host catalog')
    parser.add_argument('--critical-mass', type=int, default=DEFAULT_CRITICAL_MASS,
                        help='VMs a vCluster needs before its ratio applies (default: 1)')
    parser.add_argument('--migration-overhead', type=float, default=DEFAULT_MIGRATION_OVERHEAD,
                        help='MIPS fraction lost by migrating VMs (default: 0.1)')
    parser.add_argument('--reject', action='store_true',
                        help='Reject VMs that cannot be placed on arrival instead of queueing them')
    parser.add_argument('--output', default=None,
                        help='Write per-seed results and statistics to this JSON file')
    parser.add_argument('--debug', action='store_true',
                        help='Print every simulation event and placement trace')
    return parser.parse_args(argv)


def create_policy(name):
    """Create policy instance."""
    if name == "vcluster":
        return VClusterPolicy()
    elif name == "first-fit":
        return FirstFitPolicy()
    raise ValueError(f"Unknown policy {name}")


def run_trial(args, catalog, seed):
    """Run every policy on the same workload (CRN)."""
    vms = generate_vms(num_vms=args.vms, arrival_rate=args.arrival_rate,
                       mean_lifetime=args.mean_lifetime,
                       ratio_distribution={r: 1.0 / len(catalog.ratios) for r in catalog.ratios},
                       seed=seed)
    horizon = vms[-1].arrival + 10 * args.mean_lifetime if vms else 0

    results = {}
    for name in POLICIES:
        hosts = create_hosts(args.hosts, args.pes_per_host, catalog)
        sim = Simulator(hosts, vms, create_policy(name),
                        reject_unplaceable=args.reject, debug=args.debug)
        sim.run(horizon=horizon)
        results[name] = {
            "acceptance": metrics.acceptance_rate(vms),
            "mean_wait": metrics.mean_wait(vms),
            "p95_wait": metrics.p95_wait(vms),
            "utilization": metrics.sampled_utilization(sim.samples),
            "savings": metrics.sampled_savings(sim.samples),
        }
    return results


def summarize(values):
    values = np.array(values, dtype=float)
    mean = float(np.mean(values))
    std_err = float(np.std(values, ddof=1) / np.sqrt(len(values))) if len(values) > 1 else 0.0
    return {
        "mean": mean,
        "std_err": std_err,
        "ci_lower": mean - 1.96 * std_err,
        "ci_upper": mean + 1.96 * std_err,
    }


def run(args):
    catalog = HostCatalog(args.ratios, args.critical_mass, args.migration_overhead)
    per_seed = {name: {m: [] for m in METRICS} for name in POLICIES}

    for seed in range(args.base_seed, args.base_seed + args.seeds):
        trial = run_trial(args, catalog, seed)
        for name, values in trial.items():
            for metric_name, value in values.items():
                per_seed[name][metric_name].append(value)

    stats = {name: {m: summarize(vals) for m, vals in by_metric.items()}
             for name, by_metric in per_seed.items()}
    return per_seed, stats


def print_table(stats):
    header = f"{'Policy':<12}" + "".join(f"{m:>24}" for m in METRICS)
    print(header)
    print("-" * len(header))
    for name, by_metric in stats.items():
        cells = "".join(f"{s['mean']:>10.3f} ({s['ci_lower']:.3f}-{s['ci_upper']:.3f})"
                        .rjust(24) for s in by_metric.values())
        print(f"{name:<12}{cells}")


def main(argv=None):
    args = parse_args(argv)
    try:
        per_seed, stats = run(args)
    except ConfigurationInvalid as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    print(f"Seeds {args.base_seed} to {args.base_seed + args.seeds - 1}, "
          f"{args.hosts} hosts x {args.pes_per_host} PEs, {args.vms} VMs")
    print_table(stats)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump({"per_seed": per_seed, "stats": stats, "args": vars(args)}, f, indent=2)
        print(f"\n✓ Results saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
