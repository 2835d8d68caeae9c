"""
Record stores holding machine pools and their name leases.

Lease uniqueness is enforced here: `create_lease` is an insert-if-absent on
the full lease name and fails with LeaseAlreadyExistsError for a duplicate.
Callers never lock around it.
"""

import threading
from typing import Any, Protocol

import kubernetes

from .clients import get_custom_objects_api
from .core import (
    CLUSTER_DEPLOYMENT_NAME_LABEL,
    CLUSTER_DEPLOYMENT_PLURAL,
    HIVE_API_GROUP,
    HIVE_API_VERSION,
    LEASE_PLURAL,
    MACHINE_POOL_PLURAL,
)
from .errors import LeaseAlreadyExistsError
from .logger import logger
from .schemas.cluster import ClusterDeployment
from .schemas.lease import MachinePoolNameLease
from .schemas.pool import MachinePool


class RecordStore(Protocol):
    def list_leases(
        self, namespace: str, cluster_name: str
    ) -> list[MachinePoolNameLease]: ...

    def create_lease(self, lease: MachinePoolNameLease) -> None: ...

    def update_pool_status(self, pool: MachinePool) -> None: ...


class MemoryRecordStore:
    """Thread-safe keyed store, used for dry runs and tests."""

    def __init__(self) -> None:
        self.leases: dict[tuple[str, str], MachinePoolNameLease] = {}
        self.pools: dict[tuple[str, str], MachinePool] = {}
        self._lock = threading.Lock()

    def list_leases(
        self, namespace: str, cluster_name: str
    ) -> list[MachinePoolNameLease]:
        with self._lock:
            return [
                lease.model_copy(deep=True)
                for (ns, _), lease in self.leases.items()
                if ns == namespace and lease.cluster_name == cluster_name
            ]

    def create_lease(self, lease: MachinePoolNameLease) -> None:
        key = (lease.namespace, lease.name)
        with self._lock:
            if key in self.leases:
                raise LeaseAlreadyExistsError(lease.name)
            self.leases[key] = lease.model_copy(deep=True)

    def update_pool_status(self, pool: MachinePool) -> None:
        with self._lock:
            self.pools[(pool.namespace, pool.name)] = pool.model_copy(deep=True)


class KubernetesRecordStore:
    """Hive custom resources accessed through the Kubernetes API."""

    def __init__(self, api: Any = None):
        self.api = api or get_custom_objects_api()

    def list_leases(
        self, namespace: str, cluster_name: str
    ) -> list[MachinePoolNameLease]:
        response = self.api.list_namespaced_custom_object(
            group=HIVE_API_GROUP,
            version=HIVE_API_VERSION,
            namespace=namespace,
            plural=LEASE_PLURAL,
            label_selector=f"{CLUSTER_DEPLOYMENT_NAME_LABEL}={cluster_name}",
        )
        return [
            MachinePoolNameLease.from_resource(item)
            for item in response.get("items", [])
        ]

    def create_lease(self, lease: MachinePoolNameLease) -> None:
        try:
            self.api.create_namespaced_custom_object(
                group=HIVE_API_GROUP,
                version=HIVE_API_VERSION,
                namespace=lease.namespace,
                plural=LEASE_PLURAL,
                body=lease.to_resource(),
            )
        except kubernetes.client.rest.ApiException as e:
            if e.status == 409:  # Conflict, lease name taken
                raise LeaseAlreadyExistsError(lease.name) from e
            raise

    def update_pool_status(self, pool: MachinePool) -> None:
        body = {
            "status": {"conditions": [c.to_resource() for c in pool.conditions]}
        }
        self.api.patch_namespaced_custom_object_status(
            group=HIVE_API_GROUP,
            version=HIVE_API_VERSION,
            namespace=pool.namespace,
            plural=MACHINE_POOL_PLURAL,
            name=pool.name,
            body=body,
        )
        logger.debug(f"updated status conditions of machine pool {pool.key}")

    def get_cluster_deployment(self, namespace: str, name: str) -> ClusterDeployment:
        obj = self.api.get_namespaced_custom_object(
            group=HIVE_API_GROUP,
            version=HIVE_API_VERSION,
            namespace=namespace,
            plural=CLUSTER_DEPLOYMENT_PLURAL,
            name=name,
        )
        return ClusterDeployment.from_resource(obj)

    def get_machine_pool(self, namespace: str, name: str) -> MachinePool:
        obj = self.api.get_namespaced_custom_object(
            group=HIVE_API_GROUP,
            version=HIVE_API_VERSION,
            namespace=namespace,
            plural=MACHINE_POOL_PLURAL,
            name=name,
        )
        return MachinePool.from_resource(obj)
