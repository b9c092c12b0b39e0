"""Protocol definitions for dependency injection and testability."""

from typing import Any, Dict, List, Optional, Protocol


class Ec2ClientProtocol(Protocol):
    """The subset of the boto3 EC2 client the cloner calls."""

    def describe_images(self, **kwargs: Any) -> Dict[str, Any]:
        """Describe images by id or filters."""
        ...

    def describe_image_attribute(self, Attribute: str, ImageId: str) -> Dict[str, Any]:
        """Describe one attribute of an image."""
        ...

    def copy_image(self, **kwargs: Any) -> Dict[str, Any]:
        """Start a copy of an image from another region."""
        ...

    def create_tags(self, Resources: List[str], Tags: List[Dict[str, str]]) -> Dict[str, Any]:
        """Tag resources."""
        ...

    def modify_image_attribute(self, **kwargs: Any) -> Dict[str, Any]:
        """Modify one attribute of an image."""
        ...


class ImageServiceProtocol(Protocol):
    """Remote image operations consumed by the cloning pipeline."""

    def describe_image(self, image_id: str, region: str) -> Dict[str, Any]:
        """Describe one image; raises if nothing matches."""
        ...

    def describe_launch_permissions(self, image_id: str, region: str) -> List[Dict[str, str]]:
        """Return the launch permission grants of an image."""
        ...

    def copy_image(
        self,
        image_id: str,
        name: str,
        description: Optional[str],
        source_region: str,
        destination_region: str,
    ) -> str:
        """Copy an image into another region, returning the new image id."""
        ...

    def tag_image(self, image_id: str, region: str, tags: List[Dict[str, str]]) -> None:
        """Apply tags to an image."""
        ...

    def modify_launch_permissions(
        self, image_id: str, region: str, changes: Dict[str, List[Dict[str, str]]]
    ) -> None:
        """Apply launch permission changes such as ``{"Add": [...]}``."""
        ...
