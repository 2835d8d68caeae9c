import argparse
import json
import sys
from importlib.metadata import version

from rich.console import Console
from rich.table import Table

from .actuator import GCPActuator
from .core import DEFAULT_NAMESPACE
from .expectations import ExpectationTracker
from .logger import logger
from .store import KubernetesRecordStore


def _print_table(console: Console, machine_sets: list) -> None:
    table = Table(title=f"Machine Sets ({len(machine_sets)})")
    table.add_column("Name", style="green")
    table.add_column("Zone", style="cyan")
    table.add_column("Type")
    table.add_column("Replicas", justify="right")
    table.add_column("Image")

    for ms in machine_sets:
        table.add_row(
            ms.name,
            ms.zone,
            ms.machine_type,
            str(ms.replicas),
            ms.disks[0].image.split("/")[-1] if ms.disks else "",
        )
    console.print(table)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Poolwright: GCP machine pool naming and machine set generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run one reconciliation pass for a machine pool
  poolwright --cluster-deployment mycluster --machine-pool mycluster-infra

  # The cluster already runs installer-created machine sets
  poolwright --cluster-deployment mycluster --machine-pool mycluster-infra \\
      --machine-set abc123-w-a --machine-set abc123-w-b --json
""",
    )
    try:
        ver = version("poolwright")
    except Exception:
        ver = "unknown"
    parser.add_argument("--version", action="version", version=f"Poolwright v{ver}")

    parser.add_argument(
        "--cluster-deployment", required=True, help="ClusterDeployment name"
    )
    parser.add_argument("--machine-pool", required=True, help="MachinePool name")
    parser.add_argument(
        "--namespace",
        default=DEFAULT_NAMESPACE,
        help=f"Namespace of the Hive records (default: {DEFAULT_NAMESPACE})",
    )
    parser.add_argument(
        "--credentials",
        help="GCP service account file (default: application default credentials)",
    )
    parser.add_argument(
        "--machine-set",
        dest="machine_sets",
        action="append",
        default=[],
        help="Name of a machine set already present on the remote cluster",
    )
    parser.add_argument("--json", action="store_true", help="Output results as JSON")

    args = parser.parse_args()

    log_console = Console(stderr=True, quiet=args.json)
    out_console = Console(quiet=args.json)

    try:
        store = KubernetesRecordStore()
        cluster = store.get_cluster_deployment(args.namespace, args.cluster_deployment)
        pool = store.get_machine_pool(args.namespace, args.machine_pool)
        actuator = GCPActuator.from_credentials(
            store,
            ExpectationTracker(),
            cluster.version or "",
            args.machine_sets,
            credentials_file=args.credentials,
        )
        machine_sets, ready = actuator.generate_machine_sets(cluster, pool)
    except Exception as e:
        logger.error(f"Generation Failed: {e}")
        sys.exit(1)

    if not ready:
        log_console.print(
            "[yellow]No machine sets yet, run again once the pool's lease "
            "is visible or a name frees up.[/yellow]"
        )
        sys.exit(2)

    if args.json:
        print(json.dumps([ms.model_dump() for ms in machine_sets], indent=2))
    else:
        _print_table(out_console, machine_sets)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console = Console(stderr=True)
        console.print("\n[bold red]Operation cancelled by user.[/bold red]")
        sys.exit(130)
