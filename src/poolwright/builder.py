from .core import DEFAULT_DISK_SIZE_GB, DEFAULT_DISK_TYPE, MACHINE_API_NAMESPACE
from .errors import InvalidInputError
from .schemas.machineset import GCPDisk, MachineSet
from .schemas.pool import Taint

CLUSTER_LABEL = "machine.openshift.io/cluster-api-cluster"
ROLE_LABEL = "machine.openshift.io/cluster-api-machine-role"
TYPE_LABEL = "machine.openshift.io/cluster-api-machine-type"
MACHINESET_LABEL = "machine.openshift.io/cluster-api-machineset"


def zone_suffix(zone: str, region: str) -> str:
    # us-central1-a -> a
    prefix = f"{region}-"
    return zone[len(prefix) :] if zone.startswith(prefix) else zone


def replicas_for_zone(total: int, zone_count: int, index: int) -> int:
    """Spreads replicas evenly, the first zones take the remainder."""
    replicas = total // zone_count
    if index < total % zone_count:
        replicas += 1
    return replicas


def build_machine_sets(
    infra_id: str,
    project_id: str,
    region: str,
    pool_name: str,
    zones: list[str],
    instance_type: str,
    replicas: int,
    image_id: str,
    role: str,
    user_data_secret: str,
    node_labels: dict[str, str] | None = None,
    taints: list[Taint] | None = None,
    disk_type: str = DEFAULT_DISK_TYPE,
    disk_size_gb: int = DEFAULT_DISK_SIZE_GB,
) -> list[MachineSet]:
    """
    Generates one machine set per zone for a pool. No I/O, the same inputs
    always produce the same machine sets.
    """
    if not zones:
        raise InvalidInputError(f"no zones given for machine pool {pool_name}")
    if replicas < 0:
        raise InvalidInputError(f"replicas must not be negative, got {replicas}")
    if not instance_type:
        raise InvalidInputError(f"no instance type given for machine pool {pool_name}")

    image = f"projects/{project_id}/global/images/{image_id}"
    machine_sets = []
    for idx, zone in enumerate(zones):
        name = f"{infra_id}-{pool_name}-{zone_suffix(zone, region)}"
        selector = {CLUSTER_LABEL: infra_id, MACHINESET_LABEL: name}
        machine_sets.append(
            MachineSet(
                name=name,
                namespace=MACHINE_API_NAMESPACE,
                replicas=replicas_for_zone(replicas, len(zones), idx),
                labels={CLUSTER_LABEL: infra_id, ROLE_LABEL: role, TYPE_LABEL: role},
                selector=selector,
                role=role,
                pool_name=pool_name,
                project_id=project_id,
                region=region,
                zone=zone,
                machine_type=instance_type,
                disks=[GCPDisk(type=disk_type, size_gb=disk_size_gb, image=image)],
                network=f"{infra_id}-network",
                subnetwork=f"{infra_id}-{role}-subnet",
                service_account_email=(
                    f"{infra_id}-{role[:1]}@{project_id}.iam.gserviceaccount.com"
                ),
                tags=[f"{infra_id}-{role}"],
                user_data_secret=user_data_secret,
                node_labels=dict(node_labels or {}),
                taints=list(taints or []),
            )
        )
    return machine_sets
