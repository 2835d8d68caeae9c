import os

from google.api_core import exceptions
from tenacity import retry_if_exception_type, stop_after_attempt, wait_exponential

# Shared retry configuration for cloud queries.
# Only transient API errors are retried; the last error is re-raised as-is.
# usage: @retry(**RETRY_CONFIG)
RETRY_CONFIG = {
    "stop": stop_after_attempt(3),
    "wait": wait_exponential(multiplier=1, min=4, max=10),
    "retry": retry_if_exception_type(
        (
            exceptions.ServiceUnavailable,
            exceptions.TooManyRequests,
            exceptions.InternalServerError,
        )
    ),
    "reraise": True,
}

# Omit m, the installer used it for the master machines. w is also removed as
# it is implicitly used by the installer for the original worker pool.
LEASE_CHARS = "abcdefghijklnopqrstuvxyz0123456789"

# Pool logical name that always maps to the installer's "w" character.
WORKER_POOL_NAME = "worker"
WORKER_LEASE_CHAR = "w"

# Cluster versions able to address pools by their full logical name.
MIN_VERSION_SUPPORTING_FULL_NAMES = "4.4.7"

# Cluster versions whose workers boot from the managed user-data secret.
MIN_VERSION_MANAGED_USER_DATA = "4.6.0"
WORKER_USER_DATA_SECRET = "worker-user-data"
WORKER_USER_DATA_MANAGED_SECRET = "worker-user-data-managed"

# Hive API coordinates for the records we read and write.
HIVE_API_GROUP = "hive.openshift.io"
HIVE_API_VERSION = "v1"
LEASE_PLURAL = "machinepoolnameleases"
MACHINE_POOL_PLURAL = "machinepools"
CLUSTER_DEPLOYMENT_PLURAL = "clusterdeployments"

# Labels
CLUSTER_DEPLOYMENT_NAME_LABEL = "hive.openshift.io/cluster-deployment-name"
MACHINE_POOL_NAME_LABEL = "hive.openshift.io/machine-pool-name"
VERSION_LABEL = "hive.openshift.io/version-major-minor-patch"

# Status condition raised when the lease alphabet is exhausted.
NO_LEASES_AVAILABLE_CONDITION = "NoMachinePoolNameLeasesAvailable"

# Machine set defaults
WORKER_ROLE = "worker"
MACHINE_API_NAMESPACE = "openshift-machine-api"
DEFAULT_DISK_TYPE = "pd-ssd"
DEFAULT_DISK_SIZE_GB = 128

# How long an unobserved lease creation keeps blocking another attempt.
EXPECTATIONS_TTL_SECONDS = 5 * 60

# Runtime settings
DEFAULT_NAMESPACE = os.getenv("POOLWRIGHT_NAMESPACE", "default")
LOG_LEVEL = os.getenv("POOLWRIGHT_LOG_LEVEL", "ERROR").upper()
