"""Constants shared across the image cloner."""

# Only the image attributes we care about; EC2 has others.
LAUNCH_PERMISSION = "launchPermission"

# Key holding the attribute value in describe_image_attribute responses.
DESCRIBE_IMAGE_ATTRIBUTE_PROPERTY = {
    LAUNCH_PERMISSION: "LaunchPermissions",
}

# Key holding the attribute update in modify_image_attribute requests.
MODIFY_IMAGE_ATTRIBUTE_PROPERTY = {
    LAUNCH_PERMISSION: "LaunchPermission",
}

# Lifecycle state reported while a copy is still running.
IMAGE_STATE_PENDING = "pending"
IMAGE_STATE_AVAILABLE = "available"

DEFAULT_PROGRESS_CHECK_INTERVAL_SECONDS = 30

RETRY_MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 0.1
