"""Offline vision client for local development.

Select it with PAYMENT_AI_PROVIDER=example. Every field comes back as
'Not found', so verification then relies on local OCR being configured.
"""

import json
from typing import ClassVar

from app.payments.client_base import BaseVisionClient


class ExampleVisionClientAdapter(BaseVisionClient):
    """Returns a fixed JSON answer without any network call."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "receiver_name": "Not found",
        "amount": "Not found",
        "payment_id": "Not found",
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
    ) -> str:
        _ = model, prompt, image_data_url, max_tokens
        return json.dumps(self.DEFAULT_RESPONSE)
