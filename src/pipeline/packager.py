"""Archive packaging: zip every regular file under a directory."""

import logging
import zipfile
from pathlib import Path

from src.core.errors import PackagingError

logger = logging.getLogger(__name__)


def pack_directory(source_dir: Path, archive_path: Path) -> int:
    """Write all files under ``source_dir`` (recursively) into a zip.

    Entries are stored relative to ``source_dir``; directories get no
    entry of their own. A half-written archive is removed on failure.

    Returns:
        Number of files written.

    Raises:
        PackagingError: If the archive cannot be created or a source file
            cannot be read.
    """
    logger.info("Creating zip file from directory: %s -> %s", source_dir, archive_path)
    file_count = 0
    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path in sorted(source_dir.rglob("*")):
                if not path.is_file():
                    continue
                archive.write(path, arcname=path.relative_to(source_dir).as_posix())
                file_count += 1
    except (OSError, zipfile.BadZipFile) as e:
        archive_path.unlink(missing_ok=True)
        msg = f"failed to create archive {archive_path}: {e}"
        raise PackagingError(msg) from e

    logger.info("Zip file created with %d files: %s", file_count, archive_path)
    return file_count
