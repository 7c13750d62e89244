"""OpenAI Responses API client used as a text-recognition backend."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from label_scanner.services.scan import TextRecognitionClient, to_data_url

TRANSCRIBE_PROMPT = (
    "Transcribe all text printed on this food package exactly as it appears. "
    "Keep each row of the nutrition facts panel on its own line. "
    "Do not summarize, translate or correct the text."
)


@dataclass
class OpenAITextClient(TextRecognitionClient):
    """Text recognition backed by an OpenAI vision model."""

    client: AsyncOpenAI
    model: str
    store: bool = False

    @classmethod
    def create(cls, api_key: str, model: str, store: bool) -> "OpenAITextClient":
        """Create an OpenAI text client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model, store=store)

    async def detect_text(self, image_bytes: bytes) -> str:
        """Ask the model for a verbatim transcription of the label."""
        response = await self.client.responses.create(
            model=self.model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": TRANSCRIBE_PROMPT},
                        {"type": "input_image", "image_url": to_data_url(image_bytes)},
                    ],
                }
            ],
            store=self.store,
        )
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying OpenAI HTTP client."""
        await self.client.close()
