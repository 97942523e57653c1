import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from route_codemod.core.codemod import rewrite_source
from route_codemod.core.config import RewriteConfig
from route_codemod.core.languages import detect_language_from_path
from route_codemod.models import RejectReason, Rejected, Rewritten, RewriteResult, Unchanged

logger = logging.getLogger(__name__)


class FileStatus(str, Enum):
    REWRITTEN = "rewritten"
    UNCHANGED = "unchanged"
    ALREADY_MIGRATED = "already migrated"
    FAILED = "failed"


@dataclass(frozen=True)
class FileOutcome:
    path: Path
    status: FileStatus
    result: RewriteResult | None = None
    message: str = ""

    @property
    def failed(self) -> bool:
        return self.status is FileStatus.FAILED


def _status_for(result: RewriteResult) -> FileStatus:
    if isinstance(result, Rewritten):
        return FileStatus.REWRITTEN
    if isinstance(result, Unchanged):
        return FileStatus.UNCHANGED
    if result.reason is RejectReason.ALREADY_MIGRATED:
        return FileStatus.ALREADY_MIGRATED
    return FileStatus.FAILED


def process_file(path: Path, config: RewriteConfig, write: bool = True) -> FileOutcome:
    """Rewrite one file in place; the original bytes are kept for unchanged files."""
    try:
        language = detect_language_from_path(path)
        # bytes in, bytes out so line endings survive untouched
        text = path.read_bytes().decode("utf-8")
    except (ValueError, OSError) as exc:
        logger.warning("Skipping %s: %s", path, exc)
        return FileOutcome(path=path, status=FileStatus.FAILED, message=str(exc))

    result = rewrite_source(text, language, config)
    status = _status_for(result)
    message = result.message if isinstance(result, Rejected) else ""

    if isinstance(result, Rewritten):
        if result.dropped_edits:
            message = f"{len(result.dropped_edits)} conflicting edit(s) dropped"
        if write:
            path.write_bytes(result.text.encode("utf-8"))
    return FileOutcome(path=path, status=status, result=result, message=message)


def process_files(
    paths: Iterable[Path],
    config: RewriteConfig,
    write: bool = True,
    fail_fast: bool = False,
    on_outcome: Callable[[FileOutcome], None] | None = None,
) -> list[FileOutcome]:
    """Process files strictly in order; stop at the first failure with ``fail_fast``."""
    outcomes: list[FileOutcome] = []
    for path in paths:
        outcome = process_file(path, config, write=write)
        outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
        if outcome.failed and fail_fast:
            logger.info("Stopping after failure in %s", path)
            break
    return outcomes
