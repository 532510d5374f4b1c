import argparse
import base64
import json
import mimetypes
import sys
from pathlib import Path

from app.api.handlers import HandlerResponse, handle_extract_text, handle_process_payment
from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.extraction.service import build_text_extraction_service
from app.logging.logger import Log
from app.payments.service import build_payment_verifier


def _encode(path: Path) -> dict[str, str]:
    media_type, _ = mimetypes.guess_type(path.name)
    return {
        "data": base64.b64encode(path.read_bytes()).decode("ascii"),
        "type": media_type or "application/octet-stream",
        "name": path.name,
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cverve-worker")
    commands = parser.add_subparsers(dest="command", required=True)

    extract = commands.add_parser("extract", help="extract combined text from files")
    extract.add_argument("files", nargs="+", type=Path)
    extract.add_argument("--file-type", default="cv", choices=["cv", "jd"])

    payment = commands.add_parser("verify-payment", help="verify a payment screenshot")
    payment.add_argument("user_id")
    payment.add_argument("screenshot", type=Path)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: configure logging -> build services -> run one request."""
    args = _build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    if args.command == "extract":
        body = {"files": [_encode(p) for p in args.files], "fileType": args.file_type}
        response = handle_extract_text(body, build_text_extraction_service(settings))
    else:
        encoded = _encode(args.screenshot)
        body = {
            "userId": args.user_id,
            "screenshotData": encoded["data"],
            "screenshotType": encoded["type"],
        }
        init_pool(settings)
        try:
            response = handle_process_payment(body, build_payment_verifier(settings))
        finally:
            close_pool()

    _print(response)
    return 0 if response.status_code < 400 else 1


def _print(response: HandlerResponse) -> None:
    json.dump({"statusCode": response.status_code, **response.body}, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    sys.exit(main())
