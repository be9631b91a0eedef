"""Job orchestrator: workspace lifecycle, bounded fan-out, fan-in, archive.

Data flow for one job:
  1. Pre-flight validation (no workspace touched on rejection)
  2. Workspace <root>/<job_id>/{factsheets,temp} created
  3. One task per candidate, at most ``pipeline.max_workers`` in flight
  4. Outcomes drained by a single aggregator in completion order
  5. Artifact directory zipped once, after every task has finished
  6. Workspace removed, whether or not packaging succeeded
"""

import asyncio
import logging
import shutil
import uuid
from collections.abc import Sequence
from pathlib import Path
from types import TracebackType

from src.core.config import Settings
from src.core.errors import ValidationError
from src.core.naming import archive_name
from src.core.schemas import CandidateOutcome, CandidateRecord, JobResult
from src.pipeline.packager import pack_directory
from src.pipeline.task import process_candidate
from src.pipeline.toolkit import Toolkit

logger = logging.getLogger(__name__)

ARTIFACT_SUBDIR = "factsheets"
SCRATCH_SUBDIR = "temp"


def new_job_id() -> str:
    return str(uuid.uuid4())


class Workspace:
    """Context manager owning one job's directory tree.

    Usage::

        with Workspace(root, job_id) as ws:
            ...  # write into ws.artifact_dir / ws.scratch_dir
        # tree is gone here, even if the block raised
    """

    def __init__(self, root_dir: Path, job_id: str) -> None:
        self.base_dir = root_dir / job_id
        self.artifact_dir = self.base_dir / ARTIFACT_SUBDIR
        self.scratch_dir = self.base_dir / SCRATCH_SUBDIR

    def __enter__(self) -> "Workspace":
        self.artifact_dir.mkdir(parents=True, exist_ok=True)
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            discarded = sum(1 for p in self.artifact_dir.rglob("*") if p.is_file())
            if discarded:
                logger.warning("Discarding %d produced artifacts from %s", discarded, self.base_dir)
        self.cleanup()

    def cleanup(self) -> None:
        logger.info("Cleaning up temporary files in %s", self.base_dir)
        try:
            shutil.rmtree(self.base_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            # Logged only; the job outcome stands.
            logger.error("Error cleaning up directory %s: %s", self.base_dir, e)
        else:
            logger.info("Successfully cleaned up %s", self.base_dir)


def validate_candidates(candidates: Sequence[CandidateRecord]) -> None:
    """Reject an empty batch or one where two candidates share an email.

    Raises:
        ValidationError: If the batch cannot be processed.
    """
    if not candidates:
        msg = "at least one candidate is required"
        raise ValidationError(msg)

    seen: set[str] = set()
    duplicates: list[str] = []
    for candidate in candidates:
        key = candidate.email.lower()
        if key in seen and candidate.email not in duplicates:
            duplicates.append(candidate.email)
        seen.add(key)
    if duplicates:
        msg = f"duplicate candidate emails: {', '.join(duplicates)}"
        raise ValidationError(msg)


async def run_job(
    job_id: str,
    candidates: Sequence[CandidateRecord],
    settings: Settings,
    toolkit: Toolkit,
    labels: Sequence[str] = (),
) -> JobResult:
    """Process every candidate, zip the results, and tear the workspace down.

    Candidate failures are reported in the result; they never raise.

    Raises:
        ValidationError: Before any workspace is created.
        PackagingError: If the archive cannot be written. The workspace
            is still removed.
    """
    validate_candidates(candidates)
    logger.info("Starting job %s with %d candidates", job_id, len(candidates))

    archive_dir = Path(settings.workspace.archive_dir)
    archive_path = archive_dir / archive_name(job_id, tuple(labels))
    result = JobResult(job_id=job_id, total_candidates=len(candidates))

    with Workspace(Path(settings.workspace.root_dir), job_id) as workspace:
        gate = asyncio.Semaphore(settings.pipeline.max_workers)

        async def _bounded(candidate: CandidateRecord) -> CandidateOutcome:
            async with gate:
                logger.info("Processing candidate: %s (%s)", candidate.name, candidate.email)
                return await process_candidate(
                    candidate, workspace.artifact_dir, workspace.scratch_dir, toolkit,
                )

        tasks = [asyncio.create_task(_bounded(c)) for c in candidates]
        try:
            for finished in asyncio.as_completed(tasks):
                result.record(await finished)
        finally:
            # No task may still be writing when the workspace is removed.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        logger.info(
            "Processing completed. Success: %d, Errors: %d",
            result.processed_successfully, result.errors_count,
        )

        result.files_archived = await asyncio.to_thread(
            pack_directory, workspace.artifact_dir, archive_path,
        )
        result.zip_file_path = str(archive_path)

    if result.errors:
        logger.warning("Job %s completed with errors: %s", job_id, result.errors)
    else:
        logger.info("Job %s completed successfully", job_id)
    return result
