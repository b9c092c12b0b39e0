"""Testing utilities and fakes for the image cloner."""

from .fakes import (
    FakeEc2Backend,
    FakeEc2Client,
    FakeImage,
    FailureRule,
    setup_test_ec2_environment,
)

__all__ = [
    "FakeEc2Backend",
    "FakeEc2Client",
    "FakeImage",
    "FailureRule",
    "setup_test_ec2_environment",
]
