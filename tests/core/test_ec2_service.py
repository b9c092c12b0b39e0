"""Tests for the boto3 backed image service."""

import pytest
from unittest.mock import Mock, patch

from image_cloner.core.ec2 import Ec2ImageService
from image_cloner.core.exceptions import (
    Ec2Error,
    ImageNotFoundError,
    UnsupportedAttributeError,
)
from image_cloner.core.factories import Ec2ClientFactory, ImageServiceFactory
from image_cloner.testing.fakes import setup_test_ec2_environment


@pytest.fixture(autouse=True)
def no_retry_delay():
    with patch("image_cloner.core.error_handling.time.sleep"):
        yield


@pytest.fixture
def backend():
    return setup_test_ec2_environment()


@pytest.fixture
def service(backend):
    return Ec2ImageService(backend)


class TestDescribeImage:
    def test_describe_image(self, service):
        image = service.describe_image("ami-1", "us-east-1")

        assert image["ImageId"] == "ami-1"
        assert image["Name"] == "release-42"
        assert image["State"] == "available"

    def test_describe_image_not_found_is_not_retried(self, service, backend):
        with pytest.raises(ImageNotFoundError):
            service.describe_image("ami-missing", "us-east-1")

        assert backend.call_count("DescribeImages") == 1

    def test_describe_image_retries_transient_failure(self, service, backend):
        backend.fail("DescribeImages", times=2)

        image = service.describe_image("ami-1", "us-east-1")

        assert image["ImageId"] == "ami-1"
        assert backend.call_count("DescribeImages") == 3

    def test_describe_image_gives_up_after_three_attempts(self, service, backend):
        backend.fail("DescribeImages")

        with pytest.raises(Ec2Error, match="Call to describe_images failed"):
            service.describe_image("ami-1", "us-east-1")

        assert backend.call_count("DescribeImages") == 3


class TestLaunchPermissions:
    def test_describe_launch_permissions(self, service):
        grants = service.describe_launch_permissions("ami-1", "us-east-1")

        assert grants == [{"UserId": "111222333444"}, {"Group": "all"}]

    def test_describe_unsupported_attribute(self, service, backend):
        with pytest.raises(UnsupportedAttributeError):
            service.describe_image_attribute("ami-1", "us-east-1", "kernel")

        assert backend.call_count("DescribeImageAttribute") == 0

    def test_modify_launch_permissions_adds_grants(self, service, backend):
        backend.add_image("eu-west-1", "ami-2", "copy")

        service.modify_launch_permissions("ami-2", "eu-west-1", {"Add": [{"UserId": "555666777888"}]})

        assert backend.get_image("eu-west-1", "ami-2").launch_permissions == [
            {"UserId": "555666777888"}
        ]
        _, _, params = backend.calls[-1]
        assert params["Attribute"] == "launchPermission"
        assert params["LaunchPermission"] == {"Add": [{"UserId": "555666777888"}]}

    def test_modify_unsupported_attribute(self, service):
        with pytest.raises(UnsupportedAttributeError):
            service.modify_image_attribute("ami-1", "us-east-1", "kernel", "aki-1")


class TestCopyAndTag:
    def test_copy_image(self, service, backend):
        new_image_id = service.copy_image(
            "ami-1", "release-42", "Release 42 base image", "us-east-1", "eu-west-1"
        )

        copied = backend.get_image("eu-west-1", new_image_id)
        assert copied is not None
        assert copied.name == "release-42"
        assert copied.description == "Release 42 base image"
        operation, region, params = backend.calls[-1]
        assert (operation, region) == ("CopyImage", "eu-west-1")
        assert params["SourceImageId"] == "ami-1"
        assert params["SourceRegion"] == "us-east-1"

    def test_copy_image_without_description(self):
        client = Mock()
        client.copy_image.return_value = {"ImageId": "ami-2"}
        service = Ec2ImageService(lambda region: client)

        assert service.copy_image("ami-1", "name", None, "us-east-1", "eu-west-1") == "ami-2"
        client.copy_image.assert_called_once_with(
            Name="name", SourceImageId="ami-1", SourceRegion="us-east-1"
        )

    def test_copy_is_not_idempotent(self, service):
        first = service.copy_image("ami-1", "n", "d", "us-east-1", "eu-west-1")
        second = service.copy_image("ami-1", "n", "d", "us-east-1", "eu-west-1")

        assert first != second

    def test_tag_image(self, service, backend):
        backend.add_image("eu-west-1", "ami-2", "copy")

        service.tag_image("ami-2", "eu-west-1", [{"Key": "release", "Value": "42"}])

        assert backend.get_image("eu-west-1", "ami-2").tags == [{"Key": "release", "Value": "42"}]

    def test_tag_image_failure(self, service, backend):
        backend.add_image("eu-west-1", "ami-2", "copy")
        backend.fail("CreateTags", region="eu-west-1")

        with pytest.raises(Ec2Error, match="Call to create_tags failed"):
            service.tag_image("ami-2", "eu-west-1", [{"Key": "k", "Value": "v"}])
        assert backend.call_count("CreateTags", "eu-west-1") == 3


class TestFindImages:
    def test_find_images_by_name_and_tag(self, service, backend):
        backend.add_image("eu-west-1", "ami-2", "release-42", tags=[{"Key": "release", "Value": "42"}])
        backend.add_image("eu-west-1", "ami-3", "release-42", tags=[{"Key": "release", "Value": "41"}])
        backend.add_image("eu-west-1", "ami-4", "release-43", tags=[{"Key": "release", "Value": "42"}])

        images = service.find_images(
            "eu-west-1", name="release-42", tags=[{"Key": "release", "Value": "42"}]
        )

        assert [image["ImageId"] for image in images] == ["ami-2"]

    def test_find_images_builds_filters(self):
        client = Mock()
        client.describe_images.return_value = {"Images": []}
        service = Ec2ImageService(lambda region: client)

        service.find_images(
            "eu-west-1",
            name="n",
            description="d",
            tags=[{"Key": "team", "Value": "platform"}],
        )

        client.describe_images.assert_called_once_with(
            Filters=[
                {"Name": "description", "Values": ["d"]},
                {"Name": "name", "Values": ["n"]},
                {"Name": "tag:team", "Values": ["platform"]},
            ]
        )


class TestFactories:
    @patch("image_cloner.core.factories.boto3.Session")
    def test_client_factory_merges_options(self, mock_session):
        factory = Ec2ClientFactory({"endpoint_url": "http://localhost:4566", "region_name": "ignored"})

        factory("eu-west-1")

        mock_session.return_value.client.assert_called_once_with(
            "ec2", endpoint_url="http://localhost:4566", region_name="eu-west-1"
        )

    @patch("image_cloner.core.factories.boto3.Session")
    def test_client_factory_without_options(self, mock_session):
        Ec2ClientFactory().create_ec2_client("us-west-2")

        mock_session.return_value.client.assert_called_once_with("ec2", region_name="us-west-2")

    def test_image_service_factory_uses_given_client_factory(self, backend):
        service = ImageServiceFactory.create_image_service(client_factory=backend)

        assert service.describe_image("ami-1", "us-east-1")["ImageId"] == "ami-1"
