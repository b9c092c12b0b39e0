import pytest

from image_cloner.core.exceptions import (
    CloneNotAttemptedError,
    ConfigurationError,
    Ec2Error,
    ImageClonerError,
    ImageNotFoundError,
    UnsupportedAttributeError,
)


@pytest.mark.parametrize(
    "error_class",
    [CloneNotAttemptedError, ConfigurationError, Ec2Error, UnsupportedAttributeError],
)
def test_all_errors_share_a_base(error_class) -> None:
    assert issubclass(error_class, ImageClonerError)


def test_configuration_error_joins_violations() -> None:
    error = ConfigurationError(["source_region: Field required", "destination_regions: Field required"])

    assert error.violations == ["source_region: Field required", "destination_regions: Field required"]
    assert "source_region: Field required; destination_regions: Field required" in str(error)


def test_image_not_found_is_an_ec2_error() -> None:
    error = ImageNotFoundError("ami-1", "us-east-1")

    assert isinstance(error, Ec2Error)
    assert error.operation == "describe_images"
    assert str(error) == "No image found for image ID ami-1 in us-east-1."


def test_ec2_error_carries_operation() -> None:
    assert Ec2Error("boom", operation="copy_image").operation == "copy_image"
