"""Factory classes for creating configured service instances."""

from typing import Any, Callable, Dict, Optional

import boto3

from .ec2 import Ec2ImageService
from .protocols import Ec2ClientProtocol


class Ec2ClientFactory:
    """Factory for creating region scoped EC2 client instances."""

    def __init__(self, client_options: Optional[Dict[str, Any]] = None):
        self._client_options = dict(client_options or {})

    def create_ec2_client(self, region: str) -> Ec2ClientProtocol:
        """Create an EC2 client for ``region``.

        Clients are created late and lazily so that different configurations
        can be used in the same process. Credentials come from the usual
        boto3 chain unless ``client_options`` supplies them.
        """
        options = dict(self._client_options)
        options["region_name"] = region
        session = boto3.Session()
        return session.client("ec2", **options)  # type: ignore

    def __call__(self, region: str) -> Ec2ClientProtocol:
        return self.create_ec2_client(region)


class ImageServiceFactory:
    """Factory for creating the remote image service."""

    @staticmethod
    def create_image_service(
        client_options: Optional[Dict[str, Any]] = None,
        client_factory: Optional[Callable[[str], Ec2ClientProtocol]] = None,
    ) -> Ec2ImageService:
        """Create an image service, defaulting to real boto3 clients."""
        if client_factory is None:
            client_factory = Ec2ClientFactory(client_options)
        return Ec2ImageService(client_factory)
