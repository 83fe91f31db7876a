"""
LLM service for the AI helper, backed by AWS Bedrock `converse`.

Answers a patient's free-text question, optionally about an uploaded
medical image.
"""

import asyncio
import logging
from typing import Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from ruralcare.config import get_settings
from ruralcare.exceptions import DependencyError, ValidationError

logger = logging.getLogger(__name__)

settings = get_settings()

DEFAULT_QUESTION = "Explain common symptoms and possible causes."

TEXT_PROMPT = (
    'The patient asked: "{question}". Provide a clear, detailed medical explanation in simple '
    "language, expanding the answer to about 5-7 sentences. Include likely causes, key symptoms "
    "to watch for, and practical steps the patient can take at home to improve the condition, "
    "along with guidance on when to seek medical care."
)

IMAGE_PROMPT = (
    'A patient uploaded a medical image file called "{filename}" and asked: "{question}". '
    "Give a short, crisp, kind and clear explanation of the condition shown in this medical "
    "image. Do not use any formatting such as asterisks or bold, and do not include any "
    "disclaimers about AI limitations."
)

# Bedrock image block formats keyed by MIME type
IMAGE_FORMATS = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
    "image/gif": "gif",
    "image/webp": "webp",
}


class LLMService:
    def __init__(self):
        self.model_id = settings.aws_bedrock_model_id
        self.region = settings.aws_region
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "bedrock-runtime",
                region_name=self.region,
                aws_access_key_id=settings.aws_access_key_id or None,
                aws_secret_access_key=settings.aws_secret_access_key or None,
            )
        return self._client

    def build_content(
        self,
        question: Optional[str],
        image: Optional[bytes] = None,
        mime_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> list[dict]:
        question = (question or "").strip() or DEFAULT_QUESTION
        if image is None:
            return [{"text": TEXT_PROMPT.format(question=question)}]

        image_format = IMAGE_FORMATS.get((mime_type or "").lower())
        if image_format is None:
            raise ValidationError(f"Unsupported image type: {mime_type}")
        return [
            {"text": IMAGE_PROMPT.format(filename=filename or "unknown", question=question)},
            {"image": {"format": image_format, "source": {"bytes": image}}},
        ]

    async def generate(self, content: list[dict], temperature: float = 0.7) -> str:
        messages = [{"role": "user", "content": content}]
        response = await asyncio.to_thread(
            self.client.converse,
            modelId=self.model_id,
            messages=messages,
            inferenceConfig={"temperature": temperature, "maxTokens": 1024},
        )
        return response["output"]["message"]["content"][0]["text"]

    async def interpret(
        self,
        question: Optional[str],
        image: Optional[bytes] = None,
        mime_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> str:
        content = self.build_content(question, image, mime_type, filename)
        try:
            return await self.generate(content)
        except (BotoCoreError, ClientError, KeyError, IndexError) as e:
            logger.error("Bedrock error: %s", e)
            raise DependencyError("AI analysis failed") from e


llm_service = LLMService()
