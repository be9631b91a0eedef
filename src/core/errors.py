"""Error taxonomy for the factsheet pipeline.

Candidate-local errors (CandidateError subclasses) are caught at the
per-candidate task boundary and turned into a failed outcome. They never
abort sibling candidates or the job.

PackagingError is job-fatal. ValidationError is raised before any
workspace exists.
"""


class CandidateError(Exception):
    """Base class for failures confined to one candidate's pipeline."""

    stage_message = "candidate processing failed"

    def cause(self) -> str:
        """Human-readable cause, prefixed with the pipeline stage."""
        return f"{self.stage_message}: {self}"


class RenderError(CandidateError):
    stage_message = "failed to generate factsheet"


class DownloadError(CandidateError):
    """Resume could not be fetched (network, HTTP status, or local write)."""

    stage_message = "failed to download resume"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConversionError(CandidateError):
    stage_message = "conversion failed"


class MergeError(CandidateError):
    stage_message = "failed to merge pdfs"


class StagingError(CandidateError):
    """Merged document could not be moved into the artifact directory."""

    stage_message = "failed to move merged file"


class PackagingError(Exception):
    """The job archive could not be written."""


class ValidationError(ValueError):
    """Batch request rejected before the pipeline runs."""
