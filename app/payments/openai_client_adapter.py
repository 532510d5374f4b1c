import httpx
import openai

from app.payments.client_base import BaseVisionClient
from app.payments.exceptions import ClaimExtractionError, ClaimExtractionNetworkError


class OpenAIVisionClientAdapter(BaseVisionClient):
    """Vision client built on the OpenAI-compatible chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": image_data_url}},
                        ],
                    }
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ClaimExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ClaimExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ClaimExtractionError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ClaimExtractionError("AI returned empty response")
        return content
