import re

import semver

from .core import MIN_VERSION_SUPPORTING_FULL_NAMES, WORKER_LEASE_CHAR, WORKER_POOL_NAME
from .logger import logger


def parse_version(version: str) -> semver.Version:
    """
    Parses a cluster version leniently: surrounding whitespace and a leading
    lowercase "v" are dropped and a missing minor or patch number counts as
    zero. A short version cannot carry prerelease or build data.
    Raises ValueError when the string is not a version at all.
    """
    cleaned = version.strip().removeprefix("v")
    core = re.split(r"[-+]", cleaned, maxsplit=1)
    if len(core) > 1 and core[0].count(".") < 2:
        raise ValueError(
            f"short version cannot contain prerelease or build data: {version}"
        )
    return semver.Version.parse(cleaned, optional_minor_and_patch=True)


def pool_name_from_machine_set(name: str) -> str | None:
    """Extracts the pool token from a <infraID>-<pool>-<zone> machine set name."""
    parts = name.split("-")
    if len(parts) < 3:
        return None
    return parts[-2]


def requires_leasing(cluster_version: str, existing_group_names: list[str]) -> bool:
    """
    Decides whether pools of a cluster must be named through single-character
    leases instead of their full logical names.
    """
    try:
        version = parse_version(cluster_version)
    except (TypeError, ValueError):
        logger.debug(f"unable to parse cluster version {cluster_version!r}")
    else:
        if version.compare(MIN_VERSION_SUPPORTING_FULL_NAMES) < 0:
            logger.debug(
                f"leases are required since cluster version {cluster_version} "
                "does not support full machine names"
            )
            return True

    pool_names = {
        pool
        for pool in map(pool_name_from_machine_set, existing_group_names)
        if pool is not None
    }

    # A "w" pool without any "worker" pool is most likely the installer-created
    # worker pool, which keeps the cluster on leases while it exists.
    if WORKER_LEASE_CHAR in pool_names and WORKER_POOL_NAME not in pool_names:
        logger.debug(
            'leases are required since there is a "w" machine pool in the cluster '
            "that is likely the installer-created worker pool"
        )
        return True

    logger.debug("leases are not required")
    return False
