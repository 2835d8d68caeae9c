import random

from .conditions import UpdateConditionCheck, set_condition_with_change_check
from .core import (
    CLUSTER_DEPLOYMENT_NAME_LABEL,
    LEASE_CHARS,
    MACHINE_POOL_NAME_LABEL,
    NO_LEASES_AVAILABLE_CONDITION,
    WORKER_LEASE_CHAR,
    WORKER_POOL_NAME,
)
from .errors import InvalidInputError, LeaseIntegrityError
from .expectations import ExpectationTracker
from .logger import logger
from .schemas.cluster import ClusterDeployment
from .schemas.lease import MachinePoolNameLease, OwnerReference
from .schemas.pool import MachinePool
from .store import RecordStore


def lease_name(infra_id: str, char: str) -> str:
    return f"{infra_id}-{char}"


def find_available_lease_chars(
    cluster: ClusterDeployment, leases: list[MachinePoolNameLease]
) -> list[str]:
    """Returns the alphabet characters not claimed by any lease of the cluster."""
    taken = {
        lease.lease_char for lease in leases if lease.cluster_name == cluster.name
    }
    return [c for c in LEASE_CHARS if c not in taken]


class LeaseAllocator:
    """
    Claims a unique single character for a machine pool via
    MachinePoolNameLease records. GCP leaves one character of flexibility in
    the installer's machine naming convention, so pools of older clusters
    cannot use their full names.
    """

    def __init__(
        self,
        store: RecordStore,
        expectations: ExpectationTracker,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.expectations = expectations
        self.rng = rng or random.Random()

    def obtain_lease(
        self,
        cluster: ClusterDeployment,
        pool: MachinePool,
        leases: list[MachinePoolNameLease],
    ) -> tuple[str, bool]:
        """
        Returns (char, proceed). proceed is True when the pool's lease was
        already visible in `leases` or the pool is the original worker pool; a
        lease created by this call must be seen on a later pass before machine
        sets are generated from it.
        Returns ("", False) while waiting for a free character or for an
        in-flight creation to be observed.
        """
        if cluster.cluster_metadata is None:
            raise InvalidInputError(
                "ClusterDeployment does not have cluster metadata"
            )
        infra_id = cluster.cluster_metadata.infra_id

        for lease in leases:
            if lease.labels.get(MACHINE_POOL_NAME_LABEL) != pool.name:
                continue
            logger.debug(f"machine pool {pool.key} already has lease: {lease.name}")
            # Everything up to the last character of the name is known.
            char = lease.lease_char
            expected = lease_name(infra_id, char)
            if lease.name != expected:
                raise LeaseIntegrityError(
                    f"lease {lease.name} did not match expected lease name "
                    f"format ({infra_id}-[CHAR])"
                )
            self.expectations.creation_observed(pool.key)
            return char, True

        logger.debug(f"machine pool {pool.key} does not have a lease yet")

        if pool.pool_name == WORKER_POOL_NAME:
            # Keep the installer's "w" so the original workers are not replaced.
            # "w" is outside LEASE_CHARS and only one pool per cluster can be
            # named worker, so nothing else can ever claim it.
            logger.debug("using lease char 'w' for original worker pool")
            return WORKER_LEASE_CHAR, True

        # Claiming the expectation up front keeps overlapping passes for the
        # same pool from both creating a lease.
        if not self.expectations.expect_creations_if_satisfied(pool.key, 1):
            logger.debug(f"lease creation for {pool.key} not observed yet, waiting")
            return "", False

        try:
            available = find_available_lease_chars(cluster, leases)
            if not available:
                logger.warning(
                    f"no machine pool name leases available for {pool.key}, "
                    "setting condition"
                )
                self.expectations.delete_expectations(pool.key)
                self._set_leases_available_condition(
                    pool,
                    status="True",
                    reason="OutOfMachinePoolNames",
                    message="All machine pool names are in use",
                    check=UpdateConditionCheck.IF_REASON_OR_MESSAGE_CHANGE,
                )
                # Nothing else to do until a lease frees up.
                return "", False

            self._set_leases_available_condition(
                pool,
                status="False",
                reason="MachinePoolNamesAvailable",
                message="Machine pool names available",
                check=UpdateConditionCheck.NEVER,
            )

            # A random pick limits collisions between pools reconciled at the
            # same time; the loser's create fails and it redraws next pass.
            char = self.rng.choice(available)
            logger.debug(f"selected lease char: {char}")

            lease = MachinePoolNameLease(
                name=lease_name(infra_id, char),
                namespace=pool.namespace,
                labels={
                    MACHINE_POOL_NAME_LABEL: pool.name,
                    CLUSTER_DEPLOYMENT_NAME_LABEL: cluster.name,
                },
                owner=OwnerReference(name=pool.name, uid=pool.uid),
            )
            self.store.create_lease(lease)
        except Exception:
            self.expectations.delete_expectations(pool.key)
            raise
        logger.info(f"created lease {lease.name}, waiting until creation is observed")

        return char, False

    def _set_leases_available_condition(
        self,
        pool: MachinePool,
        status: str,
        reason: str,
        message: str,
        check: UpdateConditionCheck,
    ) -> None:
        conditions, changed = set_condition_with_change_check(
            pool.conditions,
            NO_LEASES_AVAILABLE_CONDITION,
            status,
            reason,
            message,
            check,
        )
        if changed:
            pool.conditions = conditions
            self.store.update_pool_status(pool)
