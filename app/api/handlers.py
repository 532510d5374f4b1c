"""Request handlers for the extract-text and process-payment endpoints.

Handlers take the decoded JSON body and return a HandlerResponse. They are
framework-free, so any HTTP layer (or the CLI in app.main) can call them.
"""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any

from app.api.exceptions import InputError
from app.extraction.exceptions import BatchUnusableError
from app.extraction.models import FileInput
from app.extraction.service import TextExtractionService
from app.logging.logger import Log
from app.payments.exceptions import (
    ClaimExtractionError,
    ClaimExtractionNetworkError,
    DuplicatePaymentError,
    PaymentValidationError,
)
from app.payments.service import PaymentVerifier

NOT_AN_OBJECT = "Request body must be a JSON object"


@dataclass(frozen=True)
class HandlerResponse:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


def decode_base64(data: object, what: str) -> bytes:
    if not isinstance(data, str) or not data:
        raise InputError(f"{what} must be a non-empty base64 string")
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InputError(f"{what} is not valid base64") from exc


def parse_files(body: dict[str, Any]) -> list[FileInput]:
    """Turn ``[{data, type, name?}, ...]`` descriptors into FileInputs.

    Raises:
        InputError: if the list is missing, empty or holds a malformed entry.
    """
    files = body.get("files")
    if not isinstance(files, list) or not files:
        raise InputError("Files are required")

    parsed: list[FileInput] = []
    for number, descriptor in enumerate(files, start=1):
        if not isinstance(descriptor, dict):
            raise InputError(f"File {number} must be an object with 'data' and 'type'")
        declared_type = descriptor.get("type")
        if not isinstance(declared_type, str):
            raise InputError(f"File {number} is missing its 'type'")
        name = descriptor.get("name")
        parsed.append(
            FileInput(
                data=decode_base64(descriptor.get("data"), f"File {number} data"),
                declared_type=declared_type,
                file_name=name if isinstance(name, str) else None,
            )
        )
    return parsed


def handle_extract_text(body: object, service: TextExtractionService) -> HandlerResponse:
    if not isinstance(body, dict):
        return HandlerResponse(400, {"success": False, "error": NOT_AN_OBJECT})
    file_type = body.get("fileType")
    try:
        files = parse_files(body)
        batch = service.extract(files, purpose=file_type if isinstance(file_type, str) else "")
    except InputError as exc:
        return HandlerResponse(400, {"success": False, "error": str(exc)})
    except BatchUnusableError as exc:
        return HandlerResponse(400, {"success": False, "error": str(exc)})
    except Exception:
        Log.exception("Extraction error")
        return HandlerResponse(500, {"success": False, "error": "Extraction failed"})

    return HandlerResponse(
        200,
        {
            "success": True,
            "extractedText": batch.combined_text,
            "fileType": file_type,
            "successCount": batch.success_count,
            "totalCount": batch.total_count,
            "files": [
                {
                    "index": r.source_index,
                    "status": r.status.value,
                    "diagnostic": r.diagnostic,
                }
                for r in batch.results
            ],
        },
    )


def handle_process_payment(body: object, verifier: PaymentVerifier) -> HandlerResponse:
    if not isinstance(body, dict):
        return HandlerResponse(400, {"success": False, "message": NOT_AN_OBJECT})
    user_id = body.get("userId")
    screenshot = body.get("screenshotData")
    if not user_id or not screenshot:
        return HandlerResponse(
            400, {"success": False, "message": "User ID and screenshot are required"}
        )
    media_type = body.get("screenshotType") or "image/jpeg"

    try:
        image_bytes = decode_base64(screenshot, "Screenshot")
        outcome = verifier.verify(str(user_id), image_bytes, str(media_type))
    except InputError as exc:
        return HandlerResponse(400, {"success": False, "message": str(exc)})
    except ClaimExtractionNetworkError as exc:
        Log.error(f"Payment AI provider unavailable: {exc}")
        return HandlerResponse(
            502,
            {
                "success": False,
                "message": "Payment verification is temporarily unavailable. Please try again.",
            },
        )
    except ClaimExtractionError as exc:
        Log.warning(f"Could not read payment screenshot: {exc}")
        return HandlerResponse(
            400,
            {
                "success": False,
                "message": "Payment verification failed: Could not read payment details.",
            },
        )
    except PaymentValidationError as exc:
        Log.warning(f"Payment validation failed: {exc}")
        return HandlerResponse(400, {"success": False, "message": f"Payment failed: {exc}"})
    except DuplicatePaymentError as exc:
        Log.warning(str(exc))
        return HandlerResponse(
            409,
            {"success": False, "message": "Payment failed: This payment ID has already been used."},
        )
    except Exception:
        Log.exception("Payment processing error")
        return HandlerResponse(
            500,
            {
                "success": False,
                "message": (
                    "An unexpected error occurred during payment processing. "
                    "Please try again."
                ),
            },
        )

    return HandlerResponse(
        200,
        {
            "success": True,
            "newBalance": float(outcome.new_balance),
            "transactionId": outcome.transaction_id,
        },
    )
