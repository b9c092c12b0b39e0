"""boto3 backed implementation of the remote image operations.

Every call builds a client for the region it targets, so a single service
instance can work across any number of regions. Each remote call is retried a
fixed number of times with a fixed delay before its error is surfaced.
"""

from typing import Any, Callable, Dict, List, Optional

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from mypy_boto3_ec2.client import EC2Client
else:
    EC2Client = Any

from .constants import (
    DESCRIBE_IMAGE_ATTRIBUTE_PROPERTY,
    LAUNCH_PERMISSION,
    MODIFY_IMAGE_ATTRIBUTE_PROPERTY,
)
from .error_handling import retry_ec2_operation, with_error_handling
from .exceptions import ImageNotFoundError, UnsupportedAttributeError
from .logging_config import get_logger


@retry_ec2_operation()
@with_error_handling
def _describe_images(ec2_client: EC2Client, **params: Any) -> List[Dict[str, Any]]:
    response = ec2_client.describe_images(**params)
    return response.get("Images", [])


@retry_ec2_operation()
@with_error_handling
def _describe_image_attribute(ec2_client: EC2Client, image_id: str, attribute: str) -> Dict[str, Any]:
    return ec2_client.describe_image_attribute(Attribute=attribute, ImageId=image_id)


@retry_ec2_operation()
@with_error_handling
def _copy_image(ec2_client: EC2Client, **params: Any) -> str:
    response = ec2_client.copy_image(**params)
    return response["ImageId"]


@retry_ec2_operation()
@with_error_handling
def _create_tags(ec2_client: EC2Client, image_id: str, tags: List[Dict[str, str]]) -> None:
    ec2_client.create_tags(Resources=[image_id], Tags=tags)


@retry_ec2_operation()
@with_error_handling
def _modify_image_attribute(ec2_client: EC2Client, **params: Any) -> None:
    ec2_client.modify_image_attribute(**params)


class Ec2ImageService:
    """Image operations against EC2, one region scoped client per call."""

    def __init__(self, client_factory: Callable[[str], EC2Client]):
        self._client_factory = client_factory
        self._logger = get_logger("image-cloner.ec2")

    def get_client(self, region: str) -> EC2Client:
        """Obtain a client for the given region."""
        return self._client_factory(region)

    def describe_image(self, image_id: str, region: str) -> Dict[str, Any]:
        """Describe a single image, raising ImageNotFoundError if it is missing."""
        self._logger.debug(f"Describing image {image_id} in {region}")
        images = _describe_images(self.get_client(region), ImageIds=[image_id])
        if not images:
            raise ImageNotFoundError(image_id, region)
        return images[0]

    def describe_image_attribute(self, image_id: str, region: str, attribute: str) -> Any:
        """Return the value of one supported image attribute."""
        property_name = DESCRIBE_IMAGE_ATTRIBUTE_PROPERTY.get(attribute)
        if property_name is None:
            raise UnsupportedAttributeError(
                f"Invalid or unsupported attribute for describe_image_attribute: {attribute}"
            )
        response = _describe_image_attribute(self.get_client(region), image_id, attribute)
        return response.get(property_name, [])

    def describe_launch_permissions(self, image_id: str, region: str) -> List[Dict[str, str]]:
        return self.describe_image_attribute(image_id, region, LAUNCH_PERMISSION)

    def copy_image(
        self,
        image_id: str,
        name: str,
        description: Optional[str],
        source_region: str,
        destination_region: str,
    ) -> str:
        """Start copying an image into ``destination_region``; returns the new image ID."""
        params: Dict[str, Any] = {
            "Name": name,
            "SourceImageId": image_id,
            "SourceRegion": source_region,
        }
        if description:
            params["Description"] = description

        self._logger.debug(
            f"Copying {image_id} from {source_region} to {destination_region}"
        )
        return _copy_image(self.get_client(destination_region), **params)

    def tag_image(self, image_id: str, region: str, tags: List[Dict[str, str]]) -> None:
        """Tag an image. Tags have the form ``[{"Key": ..., "Value": ...}, ...]``."""
        _create_tags(self.get_client(region), image_id, tags)

    def modify_image_attribute(self, image_id: str, region: str, attribute: str, value: Any) -> None:
        """
        Modify one supported image attribute.

        For launch permissions the value looks like
        ``{"Add": [{"UserId": "111222333444"}, {"Group": "all"}], "Remove": [...]}``.
        """
        property_name = MODIFY_IMAGE_ATTRIBUTE_PROPERTY.get(attribute)
        if property_name is None:
            raise UnsupportedAttributeError(
                f"Invalid or unsupported attribute for modify_image_attribute: {attribute}"
            )
        _modify_image_attribute(
            self.get_client(region),
            ImageId=image_id,
            Attribute=attribute,
            **{property_name: value},
        )

    def modify_launch_permissions(
        self, image_id: str, region: str, changes: Dict[str, List[Dict[str, str]]]
    ) -> None:
        self.modify_image_attribute(image_id, region, LAUNCH_PERMISSION, changes)

    def find_images(
        self,
        region: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[List[Dict[str, str]]] = None,
    ) -> List[Dict[str, Any]]:
        """Find images in a region matching name, description and tags."""
        filters = []
        if description is not None:
            filters.append({"Name": "description", "Values": [description]})
        if name is not None:
            filters.append({"Name": "name", "Values": [name]})
        for tag in tags or []:
            filters.append({"Name": f"tag:{tag['Key']}", "Values": [tag["Value"]]})

        self._logger.debug(f"Finding images in {region} with filters {filters}")
        return _describe_images(self.get_client(region), Filters=filters)
