from google.cloud import compute_v1
from tenacity import retry

from .clients import get_images_client, get_zones_client
from .core import RETRY_CONFIG
from .errors import AmbiguousImageError, ImageNotFoundError
from .logger import logger


@retry(**RETRY_CONFIG)  # type: ignore[call-overload, untyped-decorator]
def _list_zones_page(
    project_id: str, zone_filter: str, page_token: str, credentials_file: str | None
) -> tuple[list[str], str]:
    client = get_zones_client(credentials_file)
    request = compute_v1.ListZonesRequest(
        project=project_id, filter=zone_filter, page_token=page_token
    )
    # Attribute access on the pager reads the first response only, the loop
    # in list_zones walks the remaining pages itself.
    page = client.list(request=request)
    return [zone.name for zone in page.items], page.next_page_token


def list_zones(
    project_id: str, region: str, credentials_file: str | None = None
) -> list[str]:
    """
    Lists the zones of a region that are currently UP, following page tokens
    until the last page. Any failing page fails the whole lookup.
    """
    # Regions matching '.*<region>.*' where the zone is actually UP
    zone_filter = f"(region eq '.*{region}.*') (status eq UP)"

    zones: list[str] = []
    page_token = ""
    while True:
        names, page_token = _list_zones_page(
            project_id, zone_filter, page_token, credentials_file
        )
        zones.extend(names)
        if not page_token:
            break

    logger.debug(f"found {len(zones)} zones in region {region}")
    return zones


@retry(**RETRY_CONFIG)  # type: ignore[call-overload, untyped-decorator]
def _list_images(
    project_id: str, image_filter: str, credentials_file: str | None
) -> list[str]:
    client = get_images_client(credentials_file)
    request = compute_v1.ListImagesRequest(project=project_id, filter=image_filter)
    return [img.name for img in client.list(request=request)]


def get_image_id(
    project_id: str, infra_id: str, credentials_file: str | None = None
) -> str:
    """
    Finds the single boot image named '<infra_id>-*' created for a cluster.
    """
    image_filter = f'name eq "{infra_id}-.*"'
    try:
        names = _list_images(project_id, image_filter, credentials_file)
    except Exception as e:
        logger.warning(f"failed to find a GCP image starting with name {infra_id}: {e}")
        raise

    if not names:
        msg = f"found 0 results searching for GCP image starting with name: {infra_id}"
        logger.warning(msg)
        raise ImageNotFoundError(msg)
    if len(names) > 1:
        msg = (
            f"found {len(names)} results when looking for GCP image with name "
            f"starting with {infra_id}, expected exactly one"
        )
        logger.warning(msg)
        raise AmbiguousImageError(msg)

    logger.debug(f"using image with name {names[0]} for machine sets")
    return names[0]
