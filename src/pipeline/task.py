"""Per-candidate pipeline: render -> fetch -> normalize -> merge -> stage.

Strictly sequential within one candidate. Every candidate-local failure
becomes a failed CandidateOutcome; nothing here raises to the caller.
On failure the plain factsheet is removed from the artifact directory,
so the archive only ever holds merged documents.
"""

import asyncio
import logging
import os
from pathlib import Path

from src.core.errors import CandidateError, StagingError
from src.core.naming import email_segment, factsheet_filename
from src.core.schemas import CandidateOutcome, CandidateRecord
from src.pipeline.converter import CANONICAL_SUFFIX, needs_conversion
from src.pipeline.toolkit import Toolkit

logger = logging.getLogger(__name__)

RESUME_BASENAME = "resume"
MERGED_BASENAME = "merged.pdf"


async def process_candidate(
    candidate: CandidateRecord,
    artifact_dir: Path,
    scratch_dir: Path,
    toolkit: Toolkit,
) -> CandidateOutcome:
    """Run the full pipeline for one candidate and report its outcome."""
    factsheet_path = artifact_dir / factsheet_filename(candidate.email)
    try:
        await _build_factsheet(candidate, factsheet_path, scratch_dir, toolkit)
    except CandidateError as e:
        factsheet_path.unlink(missing_ok=True)
        logger.warning("Error processing candidate %s: %s", candidate.email, e.cause())
        return CandidateOutcome.failed(candidate.email, e.cause(), type(e).__name__)
    except Exception as e:
        # A capability raised outside its contract; still only this candidate fails.
        factsheet_path.unlink(missing_ok=True)
        logger.exception("Unexpected error processing candidate %s", candidate.email)
        cause = f"unexpected error: {type(e).__name__}: {e}"
        return CandidateOutcome.failed(candidate.email, cause, type(e).__name__)

    logger.info("Successfully processed candidate: %s", candidate.email)
    return CandidateOutcome.succeeded(candidate.email, factsheet_path)


async def _build_factsheet(
    candidate: CandidateRecord,
    factsheet_path: Path,
    scratch_dir: Path,
    toolkit: Toolkit,
) -> None:
    candidate_dir = scratch_dir / email_segment(candidate.email)
    try:
        candidate_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StagingError(f"cannot create scratch directory: {e}") from e

    # Step 1: plain factsheet
    await asyncio.to_thread(toolkit.renderer.render, candidate, factsheet_path)

    # Step 2: resume download
    resume_file = candidate_dir / RESUME_BASENAME
    await toolkit.fetcher.fetch(candidate.resume_url, resume_file)

    # Step 3: normalize to PDF (fast path: rename)
    if needs_conversion(candidate.resume_url):
        resume_pdf = await toolkit.converter.convert(resume_file, candidate_dir)
    else:
        resume_pdf = resume_file.with_suffix(CANONICAL_SUFFIX)
        try:
            resume_file.rename(resume_pdf)
        except OSError as e:
            raise StagingError(f"cannot rename downloaded resume: {e}") from e

    # Step 4: factsheet pages first, then the resume
    merged_path = candidate_dir / MERGED_BASENAME
    await toolkit.merger.merge(factsheet_path, resume_pdf, merged_path)

    # Step 5: merged document replaces the plain factsheet
    try:
        os.replace(merged_path, factsheet_path)
    except OSError as e:
        raise StagingError(str(e)) from e
