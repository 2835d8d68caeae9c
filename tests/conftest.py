import pytest

from poolwright.core import (
    CLUSTER_DEPLOYMENT_NAME_LABEL,
    MACHINE_POOL_NAME_LABEL,
    VERSION_LABEL,
)
from poolwright.expectations import ExpectationTracker
from poolwright.schemas.cluster import (
    ClusterDeployment,
    ClusterMetadata,
    ClusterPlatform,
    GCPClusterPlatform,
)
from poolwright.schemas.lease import MachinePoolNameLease
from poolwright.schemas.pool import (
    GCPMachinePoolPlatform,
    MachinePool,
    MachinePoolPlatform,
)


def make_cluster(version="4.3.0", infra_id="abc123", name="mycluster"):
    return ClusterDeployment(
        name=name,
        namespace="hive",
        labels={VERSION_LABEL: version} if version else {},
        cluster_metadata=ClusterMetadata(infra_id=infra_id),
        platform=ClusterPlatform(gcp=GCPClusterPlatform(region="us-central1")),
    )


def make_pool(pool_name="infra", zones=None, replicas=3, cluster_name="mycluster"):
    return MachinePool(
        name=f"{cluster_name}-{pool_name}",
        namespace="hive",
        uid="uid-1234",
        pool_name=pool_name,
        replicas=replicas,
        platform=MachinePoolPlatform(
            gcp=GCPMachinePoolPlatform(zones=zones or [], instance_type="n1-standard-4")
        ),
    )


def make_lease(name, pool_object_name, cluster_name="mycluster"):
    return MachinePoolNameLease(
        name=name,
        namespace="hive",
        labels={
            MACHINE_POOL_NAME_LABEL: pool_object_name,
            CLUSTER_DEPLOYMENT_NAME_LABEL: cluster_name,
        },
    )


@pytest.fixture
def cluster():
    return make_cluster()


@pytest.fixture
def expectations():
    return ExpectationTracker()
