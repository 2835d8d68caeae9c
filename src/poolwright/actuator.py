from __future__ import annotations

from .allocator import LeaseAllocator
from .builder import build_machine_sets
from .clients import get_credentials
from .core import (
    MIN_VERSION_MANAGED_USER_DATA,
    WORKER_ROLE,
    WORKER_USER_DATA_MANAGED_SECRET,
    WORKER_USER_DATA_SECRET,
)
from .errors import InvalidInputError, ZoneLookupError
from .expectations import ExpectationTracker
from .logger import logger
from .policy import parse_version, requires_leasing
from .schemas.cluster import ClusterDeployment
from .schemas.machineset import MachineSet
from .schemas.pool import MachinePool
from .store import RecordStore
from .topology import get_image_id, list_zones


def worker_user_data(cluster_version: str) -> str:
    """Name of the secret holding the ignition config for new workers."""
    try:
        version = parse_version(cluster_version)
    except ValueError as e:
        raise InvalidInputError(
            f"error determining worker user data secret: {e}"
        ) from e
    if version.compare(MIN_VERSION_MANAGED_USER_DATA) >= 0:
        return WORKER_USER_DATA_MANAGED_SECRET
    return WORKER_USER_DATA_SECRET


class GCPActuator:
    """
    Generates the machine sets to sync to a remote GCP cluster for each of
    its machine pools.
    """

    def __init__(
        self,
        store: RecordStore,
        expectations: ExpectationTracker,
        project_id: str,
        cluster_version: str,
        remote_machine_set_names: list[str],
        credentials_file: str | None = None,
        allocator: LeaseAllocator | None = None,
    ):
        self.store = store
        self.project_id = project_id
        self.credentials_file = credentials_file
        self.allocator = allocator or LeaseAllocator(store, expectations)
        self.leases_required = requires_leasing(
            cluster_version, remote_machine_set_names
        )

    @classmethod
    def from_credentials(
        cls,
        store: RecordStore,
        expectations: ExpectationTracker,
        cluster_version: str,
        remote_machine_set_names: list[str],
        credentials_file: str | None = None,
    ) -> GCPActuator:
        """Builds an actuator for the project the GCP credentials belong to."""
        _, project_id = get_credentials(credentials_file)
        if not project_id:
            logger.error("error getting project ID from GCP credentials")
            raise InvalidInputError("GCP credentials do not name a project")
        return cls(
            store,
            expectations,
            project_id,
            cluster_version,
            remote_machine_set_names,
            credentials_file=credentials_file,
        )

    def generate_machine_sets(
        self, cluster: ClusterDeployment, pool: MachinePool
    ) -> tuple[list[MachineSet], bool]:
        """
        Returns (machine_sets, ready). ready=False with an empty list means
        nothing can be generated yet and the pool should be reconciled again
        later. Errors are raised.
        """
        if cluster.cluster_metadata is None:
            raise InvalidInputError("ClusterDeployment does not have cluster metadata")
        if cluster.platform.gcp is None:
            raise InvalidInputError("ClusterDeployment is not for GCP")
        if pool.platform.gcp is None:
            raise InvalidInputError("MachinePool is not for GCP")
        cluster_version = cluster.version
        if not cluster_version:
            raise InvalidInputError(
                "Unable to get cluster version: version label not set"
            )

        infra_id = cluster.cluster_metadata.infra_id
        region = cluster.platform.gcp.region

        try:
            leases = self.store.list_leases(pool.namespace, cluster.name)
        except Exception as e:
            logger.warning(f"error fetching machine pool name leases: {e}")
            raise

        # Leases are used when the cluster requires them or when some pool of
        # the cluster already holds one.
        pool_name = pool.pool_name
        if self.leases_required:
            logger.debug("using leases since they are required by the cluster")
            use_leases = True
        elif leases:
            logger.debug("using leases since there are existing MachinePoolNameLeases")
            use_leases = True
        else:
            logger.debug("not using leases")
            use_leases = False

        if use_leases:
            try:
                lease_char, proceed = self.allocator.obtain_lease(cluster, pool, leases)
            except Exception as e:
                logger.warning(f"error obtaining pool name lease for {pool.key}: {e}")
                raise
            if not proceed:
                return [], False
            pool_name = lease_char

        image_id = get_image_id(self.project_id, infra_id, self.credentials_file)

        zones = list(pool.platform.gcp.zones)
        if not zones:
            zones = list_zones(self.project_id, region, self.credentials_file)
            if not zones:
                raise ZoneLookupError(f"zero zones returned for region {region}")

        machine_sets = build_machine_sets(
            infra_id=infra_id,
            project_id=self.project_id,
            region=region,
            pool_name=pool_name,
            zones=zones,
            instance_type=pool.platform.gcp.instance_type,
            replicas=pool.replicas,
            image_id=image_id,
            role=WORKER_ROLE,
            user_data_secret=worker_user_data(cluster_version),
            node_labels=pool.labels,
            taints=pool.taints,
        )
        return machine_sets, True
