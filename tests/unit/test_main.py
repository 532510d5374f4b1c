import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from app.api.handlers import HandlerResponse
from app.main import main


@pytest.fixture(autouse=True)
def _quiet_log():  # type: ignore[no-untyped-def]
    # keep log lines out of the captured JSON on stdout
    with patch("app.main.Log"):
        yield


class TestMain:
    def test_extract_prints_combined_text(
        self, tmp_path: Path, resume_pdf_bytes: bytes, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "cv.pdf"
        path.write_bytes(resume_pdf_bytes)

        exit_code = main(["extract", str(path), "--file-type", "jd"])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert output["statusCode"] == 200
        assert output["fileType"] == "jd"
        assert "Jane Doe" in output["extractedText"]

    def test_extract_unsupported_file_fails(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("plain notes")

        exit_code = main(["extract", str(path)])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        assert output["statusCode"] == 400
        assert "unsupported file type" in output["error"]

    @patch("app.main.close_pool")
    @patch("app.main.init_pool")
    @patch("app.main.build_payment_verifier")
    @patch("app.main.handle_process_payment")
    def test_verify_payment_manages_pool(
        self,
        mock_handle: MagicMock,
        _mock_build: MagicMock,
        mock_init: MagicMock,
        mock_close: MagicMock,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        screenshot = tmp_path / "receipt.png"
        screenshot.write_bytes(b"\x89PNG")
        mock_handle.return_value = HandlerResponse(409, {"success": False, "message": "used"})

        exit_code = main(["verify-payment", "user-1", str(screenshot)])

        assert exit_code == 1
        assert json.loads(capsys.readouterr().out)["statusCode"] == 409
        body = mock_handle.call_args.args[0]
        assert body["userId"] == "user-1"
        assert body["screenshotType"] == "image/png"
        mock_init.assert_called_once()
        mock_close.assert_called_once()
