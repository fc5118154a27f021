"""AI-assisted event extraction using OpenAI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from openai import (
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
    OpenAI,
    OpenAIError,
    RateLimitError,
)
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from ..errors import ExtractionServiceError
from ..models import NormalizedEvent, all_day_start, shift
from ..utils.rate_limiter import RateLimiter
from .tokenizer import count_tokens, truncate_to_tokens

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

# Errors worth another attempt; anything else fails immediately
_TRANSIENT_ERRORS = (APIConnectionError, APITimeoutError, InternalServerError, RateLimitError)


class ExtractedEvent(BaseModel):
    """Event as returned by the model (camelCase JSON)."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    location: str | None = None
    description: str | None = None
    start_date: datetime = Field(alias="startDate")
    end_date: datetime | None = Field(default=None, alias="endDate")
    all_day: bool = Field(default=False, alias="allDay")


@dataclass
class AiEventExtractor:
    """
    Event extractor backed by OpenAI's chat completions API.

    An alternative to the rule-based pipeline for text the scanner cannot
    read. Handles input truncation, rate limiting and retries.
    """

    settings: Settings
    client: OpenAI | None = None
    _rate_limiter: RateLimiter | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        """Initialize OpenAI client and rate limiter."""
        if self.client is None:
            if not self.settings.openai_api_key:
                raise ExtractionServiceError("OpenAI API key not configured.")
            self.client = OpenAI(api_key=self.settings.openai_api_key)
        self._rate_limiter = RateLimiter(
            tokens_per_minute=self.settings.token_limit_per_minute
        )

    @retry(
        wait=wait_random_exponential(min=1, max=60),
        stop=stop_after_attempt(6),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    def _call_openai(self, prompt: str) -> str:
        """
        Make a rate-limited call to OpenAI API.

        Args:
            prompt: The prompt to send.

        Returns:
            The response content.
        """
        estimated_tokens = int(1.5 * count_tokens(prompt))
        self._rate_limiter.acquire(estimated_tokens)

        logger.debug(f"Calling OpenAI API with ~{estimated_tokens} tokens")

        response = self.client.chat.completions.create(
            model=self.settings.openai_model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
        )

        return response.choices[0].message.content or ""

    def extract(self, text: str, now: datetime | None = None) -> NormalizedEvent:
        """
        Ask the model for the event described in ``text``.

        Args:
            text: Free-form text describing an event.
            now: Reference time given to the model for relative dates.

        Returns:
            The extracted event.

        Raises:
            ExtractionServiceError: If the API call fails or the reply is unusable.
        """
        tz = self.settings.tzinfo
        if now is None:
            now = datetime.now(tz)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=tz)

        text = truncate_to_tokens(text, self.settings.max_tokens_per_request)
        try:
            reply = self._call_openai(self._build_prompt(text, now))
        except OpenAIError as e:
            logger.error(f"OpenAI extraction failed: {e}")
            raise ExtractionServiceError() from e

        try:
            extracted = ExtractedEvent.model_validate_json(reply)
        except ValidationError as e:
            logger.error(f"Unusable extraction reply: {e}")
            raise ExtractionServiceError() from e

        start = self._localize(extracted.start_date, tz)
        end = (
            self._localize(extracted.end_date, tz)
            if extracted.end_date is not None
            else shift(start, self.settings.default_duration)
        )
        if extracted.all_day:
            # all-day events sit on their local date at 00:00 UTC
            anchored = all_day_start(start.astimezone(tz).date())
            start, end = anchored, shift(anchored, end - start)
        return NormalizedEvent(
            title=extracted.title.strip() or self.settings.default_title,
            description=extracted.description,
            location=extracted.location,
            start=start,
            end=end,
            all_day=extracted.all_day,
        )

    @staticmethod
    def _localize(value: datetime, tz) -> datetime:
        return value.replace(tzinfo=tz) if value.tzinfo is None else value

    def _build_prompt(self, text: str, now: datetime) -> str:
        """Build the extraction prompt."""
        return f"""Current Date/Time: {now.isoformat()}.
Extract calendar event details from the following text.
If the year is missing, assume the next occurrence relative to the current date.
If the duration is not specified, assume {self.settings.default_duration_minutes} minutes.

Reply with a JSON object with these keys:
- title: the title of the event
- location: the physical location or link, or null
- description: a brief description of the event, or null
- startDate: start in ISO 8601 format (YYYY-MM-DDTHH:mm:ss with offset)
- endDate: end in ISO 8601 format (YYYY-MM-DDTHH:mm:ss with offset)
- allDay: true if the event lasts all day, otherwise false

Input Text:
{text}"""
