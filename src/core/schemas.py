"""Core data models for the factsheet pipeline."""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

STATUS_OK = "completed_successfully"
STATUS_WITH_ERRORS = "completed_with_errors"


class CandidateRecord(BaseModel):
    """One candidate in a batch request.

    Frozen. The email is the correlation key for workspace paths and
    output file names within a job.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    email: str
    mobile_no: str = ""
    skills: list[str] = Field(default_factory=list)
    experience: str = ""
    qualification: str = ""
    resume_url: str

    @field_validator("email")
    @classmethod
    def email_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "email must not be empty"
            raise ValueError(msg)
        return v.strip()


class JobRequest(BaseModel):
    """Batch request body: candidates plus optional naming labels."""

    candidates: list[CandidateRecord]
    organization: str | None = None
    tenant: str | None = None

    def labels(self) -> list[str]:
        return [label for label in (self.organization, self.tenant) if label]


class CandidateOutcome(BaseModel):
    """Result of one candidate's pipeline run: exactly success or failure."""

    model_config = ConfigDict(frozen=True)

    email: str
    success: bool
    artifact_path: Path | None = None
    error: str | None = None
    error_type: str | None = None

    @classmethod
    def succeeded(cls, email: str, artifact_path: Path) -> "CandidateOutcome":
        return cls(email=email, success=True, artifact_path=artifact_path)

    @classmethod
    def failed(cls, email: str, error: str, error_type: str) -> "CandidateOutcome":
        return cls(email=email, success=False, error=error, error_type=error_type)

    def failure_entry(self) -> str:
        """Failure-list line tagged with the candidate's email."""
        return f"{self.email}: {self.error}"


class JobResult(BaseModel):
    """Aggregate view of a completed job.

    ``errors`` is in completion order, not input order.
    """

    job_id: str
    total_candidates: int = Field(ge=0)
    processed_successfully: int = Field(default=0, ge=0)
    errors: list[str] = Field(default_factory=list)
    zip_file_path: str = ""
    files_archived: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def errors_count(self) -> int:
        return len(self.errors)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> Literal["completed_successfully", "completed_with_errors"]:
        return STATUS_WITH_ERRORS if self.errors else STATUS_OK

    def record(self, outcome: CandidateOutcome) -> None:
        """Fold one candidate outcome into the totals."""
        if outcome.success:
            self.processed_successfully += 1
        else:
            self.errors.append(outcome.failure_entry())

    def to_response(self) -> dict[str, Any]:
        """Wire shape returned by the HTTP boundary and the CLI."""
        response: dict[str, Any] = {
            "job_id": self.job_id,
            "zip_file_path": self.zip_file_path,
            "total_candidates": self.total_candidates,
            "processed_successfully": self.processed_successfully,
            "errors_count": self.errors_count,
            "status": self.status,
        }
        if self.errors:
            response["errors"] = list(self.errors)
        return response
