"""Exception hierarchy for machine pool name and topology resolution."""


class PoolwrightError(Exception):
    """Base class for every error raised by poolwright."""


class InvalidInputError(PoolwrightError):
    """A cluster or pool record is missing a section required for GCP."""


class LeaseIntegrityError(PoolwrightError):
    """An existing lease does not match the name its owner implies.

    This points at external corruption and is never repaired automatically.
    """


class LeaseAlreadyExistsError(PoolwrightError):
    """The store rejected a lease because its identifier is already taken."""

    def __init__(self, lease_name: str):
        super().__init__(f"lease {lease_name} already exists")
        self.lease_name = lease_name


class ImageLookupError(PoolwrightError):
    """The boot image for a cluster could not be resolved to a single image."""


class ImageNotFoundError(ImageLookupError):
    pass


class AmbiguousImageError(ImageLookupError):
    pass


class ZoneLookupError(PoolwrightError):
    """Zone resolution returned nothing usable for a region."""
