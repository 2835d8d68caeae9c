from __future__ import annotations

from functools import lru_cache
from typing import Any

import google.auth
import kubernetes
from google.cloud import compute_v1
from kubernetes import client, config

# Shared Client Registry (Lazy-loaded and cached)


@lru_cache(maxsize=4)
def get_credentials(credentials_file: str | None = None) -> tuple[Any, str | None]:
    """
    Loads GCP credentials and the project they belong to, either from an
    explicit service account file or from application default credentials.
    """
    if credentials_file:
        return google.auth.load_credentials_from_file(credentials_file)
    return google.auth.default()


@lru_cache(maxsize=4)
def get_zones_client(credentials_file: str | None = None) -> Any:
    credentials, _ = get_credentials(credentials_file)
    return compute_v1.ZonesClient(credentials=credentials)


@lru_cache(maxsize=4)
def get_images_client(credentials_file: str | None = None) -> Any:
    credentials, _ = get_credentials(credentials_file)
    return compute_v1.ImagesClient(credentials=credentials)


@lru_cache(maxsize=1)
def get_custom_objects_api() -> Any:
    try:
        config.load_incluster_config()
    except kubernetes.config.ConfigException:
        config.load_kube_config()
    return client.CustomObjectsApi()
