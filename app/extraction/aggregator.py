from collections.abc import Sequence

from app.extraction.bounded import TIMEOUT_MESSAGE, Deadline
from app.extraction.exceptions import BatchUnusableError
from app.extraction.models import BatchResult, ExtractionResult, ExtractionStatus, FileInput
from app.extraction.orchestrator import ExtractionOrchestrator
from app.logging.logger import Log


def error_marker(index: int, diagnostic: str | None) -> str:
    """Inline marker for a failed slot; brackets in the message are neutralized."""
    message = (diagnostic or "unknown error").replace("[", "(").replace("]", ")")
    return f"[Error processing file {index + 1}: {message}]"


class BatchAggregator:
    """Runs the orchestrator over a batch, in order, keeping every slot visible."""

    def __init__(
        self,
        orchestrator: ExtractionOrchestrator,
        request_timeout_seconds: float | None = 28.0,
    ) -> None:
        self._orchestrator = orchestrator
        self._request_timeout_seconds = request_timeout_seconds

    def aggregate(
        self,
        files: Sequence[FileInput],
        deadline: Deadline | None = None,
    ) -> BatchResult:
        if deadline is None and self._request_timeout_seconds is not None:
            deadline = Deadline(self._request_timeout_seconds)

        total = len(files)
        results: list[ExtractionResult] = []
        blocks: list[str] = []
        for index, file in enumerate(files):
            if deadline is not None and deadline.expired:
                skipped = total - index
                Log.warning(f"Request budget exhausted, skipping {skipped} remaining file(s)")
                results.extend(
                    ExtractionResult(
                        source_index=i,
                        status=ExtractionStatus.SKIPPED,
                        diagnostic=TIMEOUT_MESSAGE,
                    )
                    for i in range(index, total)
                )
                blocks.append(
                    f"[Processing stopped: {TIMEOUT_MESSAGE}; {skipped} file(s) skipped]"
                )
                break

            Log.info(f"Processing file {index + 1} of {total}")
            result = self._orchestrator.extract(file, index, deadline)
            results.append(result)
            if result.succeeded:
                blocks.append(result.text)
            else:
                blocks.append(error_marker(index, result.diagnostic))

        batch = BatchResult(
            results=results,
            combined_text="".join(f"{block}\n\n" for block in blocks),
            total_count=total,
        )
        Log.info(
            f"Batch finished: {batch.success_count}/{total} files succeeded, "
            f"{len(batch.combined_text)} chars"
        )
        return batch


def ensure_usable(batch: BatchResult) -> BatchResult:
    """Return the batch if downstream can use it.

    Raises:
        BatchUnusableError: with the first failure's diagnostic when nothing usable remains.
    """
    if batch.is_usable:
        return batch
    diagnostics = [r.diagnostic for r in batch.results if r.diagnostic]
    if batch.total_count == 1 and diagnostics:
        raise BatchUnusableError(f"Failed to extract text from file: {diagnostics[0]}")
    raise BatchUnusableError("No readable text could be extracted from the uploaded files")
