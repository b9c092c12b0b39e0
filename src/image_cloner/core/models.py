"""Shared data models for the image cloner."""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator

from .constants import IMAGE_STATE_AVAILABLE
from .exceptions import CloneNotAttemptedError

RegionName = Annotated[StrictStr, Field(min_length=1)]


class CloneConfig(BaseModel):
    """Configuration for one clone operation, after defaults are filled in."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    source_image_id: StrictStr = Field(min_length=1)
    source_region: StrictStr = Field(min_length=1)
    destination_regions: List[RegionName] = Field(min_length=1)
    progress_check_interval_in_seconds: float = Field(ge=0)
    client_options: Optional[Dict[str, Any]] = None

    @property
    def unique_destination_regions(self) -> List[str]:
        """Destination regions with duplicates dropped, order preserved."""
        return list(dict.fromkeys(self.destination_regions))


class SourceImageSnapshot(BaseModel):
    """Facts about the source image, read once and shared by every region."""

    model_config = ConfigDict(frozen=True)

    image_id: str
    name: str
    description: Optional[str] = None
    state: str = IMAGE_STATE_AVAILABLE
    tags: List[Dict[str, str]] = Field(default_factory=list)
    launch_permissions: List[Dict[str, str]] = Field(default_factory=list)

    @classmethod
    def from_image(
        cls, image: Dict[str, Any], launch_permissions: List[Dict[str, str]]
    ) -> "SourceImageSnapshot":
        """Build a snapshot from a describe_images entry."""
        return cls(
            image_id=image["ImageId"],
            name=image.get("Name", ""),
            description=image.get("Description"),
            state=image.get("State", IMAGE_STATE_AVAILABLE),
            tags=[dict(tag) for tag in image.get("Tags", [])],
            launch_permissions=[dict(grant) for grant in launch_permissions],
        )


class RegionOutcome(BaseModel):
    """Result of cloning into a single destination region."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    success: bool = False
    image_id: Optional[str] = None
    error: Optional[Exception] = None

    @model_validator(mode="after")
    def _check_exactly_one(self) -> "RegionOutcome":
        if self.success and (self.image_id is None or self.error is not None):
            raise ValueError("a successful outcome carries an image_id and no error")
        if not self.success and (self.error is None or self.image_id is not None):
            raise ValueError("a failed outcome carries an error and no image_id")
        return self

    @classmethod
    def succeeded(cls, image_id: str) -> "RegionOutcome":
        return cls(success=True, image_id=image_id)

    @classmethod
    def failed(cls, error: Exception) -> "RegionOutcome":
        return cls(success=False, error=error)

    @classmethod
    def not_attempted(cls) -> "RegionOutcome":
        return cls(success=False, error=CloneNotAttemptedError())

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "image_id": self.image_id}
        return {"success": False, "error": str(self.error)}


class CloneReport(BaseModel):
    """Per-region outcomes plus the top-level error, if any."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    error: Optional[Exception] = None
    regions: Dict[str, RegionOutcome] = Field(default_factory=dict)

    @classmethod
    def with_placeholders(cls, regions: List[str]) -> "CloneReport":
        """Create a report holding a "not attempted" entry for every region."""
        return cls(regions={region: RegionOutcome.not_attempted() for region in regions})

    def record(self, region: str, outcome: RegionOutcome) -> None:
        """Replace the entry for a region named at construction time."""
        if region not in self.regions:
            raise KeyError(f"Region {region} is not part of this report")
        self.regions[region] = outcome

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def succeeded_regions(self) -> List[str]:
        return [region for region, outcome in self.regions.items() if outcome.success]

    @property
    def failed_regions(self) -> List[str]:
        return [region for region, outcome in self.regions.items() if not outcome.success]

    def first_region_error(self, regions: List[str]) -> Optional[Exception]:
        """Return the error of the first failed region, in the order given."""
        for region in regions:
            outcome = self.regions[region]
            if not outcome.success:
                return outcome.error
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": str(self.error) if self.error is not None else None,
            "regions": {region: outcome.to_dict() for region, outcome in self.regions.items()},
        }
