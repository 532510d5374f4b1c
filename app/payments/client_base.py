from abc import ABC, abstractmethod


class BaseVisionClient(ABC):
    """Contract for provider-specific vision chat-completion clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
    ) -> str:
        """Return the provider's reply as plain text.

        Raises:
            ClaimExtractionNetworkError: on network or provider API failure.
            ClaimExtractionError: if the provider returns no content.
        """
