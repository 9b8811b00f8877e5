"""Errors raised by the product and image storage tiers.

Remote-store and object-storage failures map onto the 5xx part of the HTTP
hierarchy so a route that lets them escape still answers with a standard
ErrorResponse.
"""

from .http_exceptions import BadGatewayError, GatewayTimeoutError, ServiceUnavailableError


class RemoteStoreUnavailableError(ServiceUnavailableError):
    """503 - The remote product store could not be reached or failed."""

    default_message = "Product store unavailable"


class ImageStorageError(BadGatewayError):
    """502 - Object storage rejected or failed an image operation."""

    default_message = "Image storage failed"


class ImageUploadTimeoutError(GatewayTimeoutError):
    """504 - An image upload did not finish within the configured bound."""

    default_message = "Image upload timed out"
