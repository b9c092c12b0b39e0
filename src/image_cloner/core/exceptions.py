"""Custom exceptions for the image cloner."""

from __future__ import annotations

from typing import List, Optional


class ImageClonerError(Exception):
    """Base exception for all image cloner errors."""


class ConfigurationError(ImageClonerError):
    """Error raised when the clone configuration fails validation."""

    def __init__(self, violations: List[str]) -> None:
        self.violations = list(violations)
        super().__init__("Invalid configuration: " + "; ".join(self.violations))


class Ec2Error(ImageClonerError):
    """Error raised when a call to the EC2 API fails."""

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        self.operation = operation
        super().__init__(message)


class ImageNotFoundError(Ec2Error):
    """Error raised when describing an image matches nothing."""

    def __init__(self, image_id: str, region: str) -> None:
        self.image_id = image_id
        self.region = region
        super().__init__(
            f"No image found for image ID {image_id} in {region}.",
            operation="describe_images",
        )


class UnsupportedAttributeError(ImageClonerError):
    """Error raised for image attributes this package does not handle."""


class CloneNotAttemptedError(ImageClonerError):
    """Placeholder cause for regions whose clone never ran."""

    def __init__(self, message: str = "Cloning not attempted") -> None:
        super().__init__(message)
