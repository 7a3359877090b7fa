"""
Run configuration for clipscan.

A DetectionConfig is built once from the command line, validated, and then
passed around unchanged for the rest of the run.
"""

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CONFIRMATION_MESSAGE = (
    "This analysis ONLY makes sense for a BAM file made by mapping long reads "
    "onto an assembly built from those SAME long reads. If you are positive "
    "that you did just that, re-run with the --just-do-it flag."
)

CLIPPING_SUFFIX = "-clipping.txt"
ZERO_COVERAGE_SUFFIX = "-zero_cov.txt"


class DetectionConfig(BaseModel):
    """Validated settings for one clipscan run."""

    model_config = ConfigDict(frozen=True)

    bam_path: Path
    output_prefix: Annotated[str, Field(min_length=1)]
    min_dist_to_end: Annotated[int, Field(ge=0)] = 100
    min_clipping_ratio: Annotated[float, Field(ge=0)] = 1.0
    confirmed: bool = False
    summary_json: Path | None = None
    progress_interval: Annotated[int, Field(gt=0)] = 500

    @field_validator("bam_path")
    @classmethod
    def validate_bam_path(cls, v: Path) -> Path:
        """Ensure the BAM file exists."""
        if not v.is_file():
            msg = f"BAM file does not exist: {v}"
            raise ValueError(msg)
        return v

    @field_validator("output_prefix")
    @classmethod
    def validate_output_dir(cls, v: str) -> str:
        """Ensure the directory the reports go into exists."""
        parent = Path(v).parent
        if not parent.is_dir():
            msg = f"Output directory does not exist: {parent}"
            raise ValueError(msg)
        return v

    @model_validator(mode="before")
    @classmethod
    def require_confirmation(cls, data: Any) -> Any:
        """Refuse to run unless the operator confirmed how the BAM was made."""
        if isinstance(data, dict) and data.get("confirmed") is not True:
            raise ValueError(CONFIRMATION_MESSAGE)
        return data

    @property
    def clipping_path(self) -> Path:
        return Path(f"{self.output_prefix}{CLIPPING_SUFFIX}")

    @property
    def zero_coverage_path(self) -> Path:
        return Path(f"{self.output_prefix}{ZERO_COVERAGE_SUFFIX}")
