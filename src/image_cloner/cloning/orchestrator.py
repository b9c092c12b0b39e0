"""Top-level coordinator for cloning an image to many regions."""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..core import (
    CloneConfig,
    CloneReport,
    ConfigValidator,
    ConfigurationError,
    RegionOutcome,
    SourceImageSnapshot,
    fill_config_defaults,
    get_logger,
)
from ..core.factories import ImageServiceFactory
from ..core.protocols import ImageServiceProtocol
from .poller import CompletionPoller
from .region_worker import RegionCloneWorker


class ImageCloner:
    """
    Copies one image, with its name, description, tags and launch
    permissions, from a source region to every destination region.

    ``clone_image`` always returns a report holding an entry for every
    destination region. Configuration errors and failures looking up the
    source image stop the run before any region is attempted. Failures
    inside one region are recorded for that region only; the other regions
    run to completion regardless.
    """

    def __init__(
        self,
        config: Mapping[str, Any],
        image_service: Optional[ImageServiceProtocol] = None,
        validator: Optional[ConfigValidator] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = fill_config_defaults(config)
        self._validator = validator or ConfigValidator()
        self._image_service = image_service
        self._sleep = sleep
        self._logger = get_logger("image-cloner.orchestrator")

    @property
    def image_service(self) -> ImageServiceProtocol:
        if self._image_service is None:
            client_options = None
            if isinstance(self.config, Mapping):
                client_options = self.config.get("client_options")
            self._image_service = ImageServiceFactory.create_image_service(
                client_options=client_options
            )
        return self._image_service

    def clone_image(self) -> CloneReport:
        """Run the clone and return the per-region report."""
        report = CloneReport.with_placeholders(self._named_regions())

        violations = self._validator.validate(self.config)
        if violations:
            report.error = ConfigurationError(violations)
            self._logger.error(str(report.error))
            return report

        config = CloneConfig.model_validate(self.config)

        try:
            self._logger.info(
                f"Describing source image {config.source_image_id} in {config.source_region}"
            )
            image = self.image_service.describe_image(
                config.source_image_id, config.source_region
            )
            launch_permissions = self.image_service.describe_launch_permissions(
                config.source_image_id, config.source_region
            )
        except Exception as e:
            self._logger.error(f"Source image lookup failed: {e}", exc_info=True)
            report.error = e
            return report

        snapshot = SourceImageSnapshot.from_image(image, launch_permissions)
        self._clone_to_regions(config, snapshot, report)

        regions = config.unique_destination_regions
        report.error = report.first_region_error(regions)
        self._logger.info(
            f"Cloned {snapshot.image_id} to {len(report.succeeded_regions)} of "
            f"{len(regions)} region(s)"
        )
        if report.failed_regions:
            self._logger.warning(f"Failed regions: {', '.join(report.failed_regions)}")
        return report

    def _clone_to_regions(
        self, config: CloneConfig, snapshot: SourceImageSnapshot, report: CloneReport
    ) -> None:
        poller = CompletionPoller(
            self.image_service, config.progress_check_interval_in_seconds, sleep=self._sleep
        )
        worker = RegionCloneWorker(self.image_service, poller)
        regions = config.unique_destination_regions

        # One thread per region; only this thread writes to the report.
        with ThreadPoolExecutor(
            max_workers=len(regions), thread_name_prefix="clone"
        ) as executor:
            future_to_region = {
                executor.submit(
                    worker.clone_to_region,
                    snapshot,
                    snapshot.launch_permissions,
                    config.source_region,
                    region,
                ): region
                for region in regions
            }

            for future in as_completed(future_to_region):
                region = future_to_region[future]
                try:
                    outcome = RegionOutcome.succeeded(future.result())
                except Exception as e:
                    self._logger.error(f"[{region}] Clone failed: {e}")
                    outcome = RegionOutcome.failed(e)
                report.record(region, outcome)

    def _named_regions(self) -> List[str]:
        """Regions named in the raw config, usable even when it is invalid.

        Entries that are not strings are kept under their ``str()`` form so
        the report still has one placeholder per named destination.
        """
        if not isinstance(self.config, Mapping):
            return []
        regions = self.config.get("destination_regions")
        if not isinstance(regions, list):
            return []
        return list(dict.fromkeys(str(region) for region in regions))


def clone_image(
    config: Mapping[str, Any],
    callback: Optional[Callable[[Optional[Exception], Dict[str, RegionOutcome]], None]] = None,
    image_service: Optional[ImageServiceProtocol] = None,
) -> CloneReport:
    """
    Clone an image to every destination region in ``config``.

    If ``callback`` is given it is called once with ``(error, regions)`` when
    the run is over, where ``regions`` maps each destination region to its
    outcome, e.g.::

        {
            "eu-west-1": RegionOutcome(success=True, image_id="ami-11223344"),
            "us-west-2": RegionOutcome(success=False, error=Ec2Error(...)),
        }

    The report is returned either way.
    """
    report = ImageCloner(config, image_service=image_service).clone_image()
    if callback is not None:
        callback(report.error, report.regions)
    return report
