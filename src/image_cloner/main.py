"""Main module for the image cloner CLI."""

import sys
import json
import argparse
from typing import Any, Dict, List, Optional

from . import __version__
from .cloning import clone_image
from .core import ImageClonerError, get_logger, set_debug_logging
from .core.factories import ImageServiceFactory


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``image-cloner`` command."""
    parser = argparse.ArgumentParser(
        prog="image-cloner",
        description="Copy an EC2 image with its tags and launch permissions to other regions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Clone an image from us-east-1 to two regions
  image-cloner clone --source-image-id ami-11223344 --source-region us-east-1 \\
                     --destination-regions eu-west-1 us-west-2

  # Read the configuration from a JSON file
  image-cloner clone --config clone.json

  # Find clones of a release by name and tag
  image-cloner find --region eu-west-1 --name release-42 --tag release=42
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    clone_parser = subparsers.add_parser(
        "clone", help="Clone an image to one or more destination regions"
    )
    clone_parser.add_argument("--config", help="JSON file holding the clone configuration")
    clone_parser.add_argument("--source-image-id", help="ID of the image to clone")
    clone_parser.add_argument("--source-region", help="Region holding the source image")
    clone_parser.add_argument(
        "--destination-regions", nargs="+", help="Regions to clone the image into"
    )
    clone_parser.add_argument(
        "--progress-check-interval",
        type=float,
        default=None,
        help="Seconds between checks on copy progress (default: 30)",
    )
    clone_parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    find_parser = subparsers.add_parser(
        "find", help="Find images by name, description and tags"
    )
    find_parser.add_argument("--region", required=True, help="Region to search")
    find_parser.add_argument("--name", help="Image name")
    find_parser.add_argument("--description", help="Image description")
    find_parser.add_argument(
        "--tag",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Tag to match; may be repeated",
    )
    find_parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers.add_parser("version", help="Show version information")

    return parser


def build_clone_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Merge the optional JSON config file with command line overrides."""
    config: Dict[str, Any] = {}
    if args.config:
        with open(args.config, encoding="utf-8") as config_file:
            config.update(json.load(config_file))

    overrides = {
        "source_image_id": args.source_image_id,
        "source_region": args.source_region,
        "destination_regions": args.destination_regions,
        "progress_check_interval_in_seconds": args.progress_check_interval,
    }
    config.update({key: value for key, value in overrides.items() if value is not None})
    return config


def parse_tags(values: List[str]) -> List[Dict[str, str]]:
    """Turn ``KEY=VALUE`` strings into EC2 tag dicts."""
    tags = []
    for value in values:
        key, separator, tag_value = value.partition("=")
        if not separator or not key:
            raise ValueError(f"Tag {value!r} is not in KEY=VALUE form")
        tags.append({"Key": key, "Value": tag_value})
    return tags


def run_clone(args: argparse.Namespace) -> int:
    logger = get_logger("image-cloner")
    config = build_clone_config(args)
    report = clone_image(config)
    print(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    if report.error is not None:
        logger.error(f"Clone finished with errors: {report.error}")
        return 1
    return 0


def run_find(args: argparse.Namespace) -> int:
    logger = get_logger("image-cloner")
    tags = parse_tags(args.tag)
    service = ImageServiceFactory.create_image_service()
    try:
        images = service.find_images(
            args.region, name=args.name, description=args.description, tags=tags
        )
    except ImageClonerError as e:
        logger.error(f"Image search failed: {e}")
        return 1

    print(
        json.dumps(
            [
                {"image_id": image["ImageId"], "name": image.get("Name"), "state": image.get("State")}
                for image in images
            ],
            indent=2,
        )
    )
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the ``image-cloner`` command line interface.

    ``clone`` prints the per-region report as JSON and exits non-zero when
    any region, or the run as a whole, failed. ``find`` prints matching
    images. ``version`` prints version information.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "debug", False):
        set_debug_logging()

    if args.command == "clone":
        try:
            exit_code = run_clone(args)
        except (OSError, ValueError) as e:
            get_logger("image-cloner").error(f"Could not read configuration: {e}")
            exit_code = 1
        sys.exit(exit_code)

    elif args.command == "find":
        try:
            exit_code = run_find(args)
        except ValueError as e:
            parser.error(str(e))
        sys.exit(exit_code)

    elif args.command == "version":
        print("Image Cloner CLI")
        print(f"Version {__version__}")
        print("Copies EC2 images, tags and launch permissions across regions")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
