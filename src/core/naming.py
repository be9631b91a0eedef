"""File and archive naming rules.

Per-candidate paths are derived from the email; archive names from the
optional organization/tenant labels plus the job id.
"""

import re

MAX_LABEL_LENGTH = 50
ARCHIVE_EXTENSION = ".zip"
FACTSHEET_SUFFIX = "_factsheet.pdf"

_UNSAFE_SEGMENT_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def email_segment(email: str) -> str:
    """Turn an email into a safe single path segment (``a@b.com`` -> ``a_b.com``)."""
    segment = _UNSAFE_SEGMENT_CHARS.sub("_", email.strip())
    # "." and ".." would escape the directory
    if segment.strip(".") == "":
        segment = segment.replace(".", "_")
    return segment


def factsheet_filename(email: str) -> str:
    return f"{email_segment(email)}{FACTSHEET_SUFFIX}"


def sanitize_label(label: str) -> str:
    """Reduce a label to lowercase alphanumerics joined by single underscores.

    Truncated to MAX_LABEL_LENGTH. Applying it twice gives the same result.
    """
    cleaned = _NON_ALNUM.sub("_", label.lower()).strip("_")
    return cleaned[:MAX_LABEL_LENGTH].rstrip("_")


def archive_name(job_id: str, labels: list[str] | tuple[str, ...] = ()) -> str:
    """``<label>_..._factsheets_<job_id>.zip``; labels that sanitize to nothing are dropped."""
    parts = [s for s in (sanitize_label(label) for label in labels) if s]
    parts.append(f"factsheets_{job_id}")
    return "_".join(parts) + ARCHIVE_EXTENSION
