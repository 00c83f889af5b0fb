"""AI-written request and reminder messages.

Talks to an OpenAI compatible endpoint (OpenRouter by default). Generation is a
nicety: any failure falls back to a fixed template, so callers always get a
message containing the ``[link]`` placeholder.
"""

import logging
from typing import Protocol

from openai import AsyncOpenAI

from cardulary.config.settings import settings
from cardulary.guests.dtos import Tone

logger = logging.getLogger(__name__)

LINK_PLACEHOLDER = "[link]"

TONE_DESCRIPTIONS = {
    Tone.WARM_CASUAL: "warm and casual, like texting a friend",
    Tone.POLITE_FORMAL: "polite and professional, but still friendly",
    Tone.PLAYFUL: "playful and fun, with a lighthearted vibe",
}

PERSONALIZE_PROMPT = """You are helping someone request a mailing address for their {event_type}.

Context:
- Event: {event_name}
- Recipient's first name: {guest_first_name}
- Organizer's name: {organizer_name}
- Guest relationship: {relationship}
- Desired tone: {tone_description}
{context_line}
Generate a brief, natural message (1-2 sentences max) asking {guest_first_name} for their mailing address.
The message should:
1. Sound human and personal, not robotic or automated
2. Match the {tone_name} tone exactly
3. Include that there will be a link to submit (use placeholder [link])
4. Be conversational and appropriate for the relationship

Bad example (too formal): "I am writing to request your current mailing address for the purpose of sending an invitation."
Good example (warm casual): "Hey {guest_first_name}! {organizer_name} here, we're planning {event_name} and need your address to send you something. Quick form here: [link]"

Generate ONLY the message text, no explanation or quotes."""

REMINDER_PROMPT = """Generate a friendly reminder message based on this original request:

Original: "{original_message}"

This is reminder #{reminder_number}, sent {days_since_last_contact} days after the last message.
Guest's name: {guest_first_name}

Create a varied follow-up message that:
1. Sounds different from the original (not just "following up")
2. Maintains a friendly, non-pushy tone
3. Gets slightly more urgent as reminder number increases
4. Includes [link] placeholder
5. Is 1-2 sentences max

Generate ONLY the reminder text, no explanation."""


def fallback_request_message(guest_first_name: str, event_name: str) -> str:
    return (
        f"Hi {guest_first_name}! I need your mailing address for {event_name}. "
        f"Could you share it here? {LINK_PLACEHOLDER} Thanks!"
    )


def fallback_reminder_message(guest_first_name: str) -> str:
    return (
        f"Hi {guest_first_name}! Just a gentle reminder - we still need your "
        f"mailing address: {LINK_PLACEHOLDER}"
    )


class AIConfig(Protocol):
    ai_api_key: str
    ai_base_url: str
    ai_model: str
    ai_timeout_seconds: float


class MessagePersonalizer:
    def __init__(self, config: AIConfig = settings, client: AsyncOpenAI | None = None):
        self._model = config.ai_model
        if client is None and config.ai_api_key:
            client = AsyncOpenAI(
                api_key=config.ai_api_key,
                base_url=config.ai_base_url,
                timeout=config.ai_timeout_seconds,
                max_retries=1,
            )
        self._client = client

    async def _complete(self, prompt: str, max_tokens: int) -> str | None:
        """Return the model's trimmed answer, or None when there is nothing usable."""
        if self._client is None:
            logger.info("AI personalization is not configured, using fallback message")
            return None
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
            )
            content = response.choices[0].message.content if response.choices else None
        except Exception as e:
            logger.warning(f"AI personalization failed, using fallback message: {e}")
            return None

        content = (content or "").strip().strip('"').strip()
        if not content:
            logger.warning("AI personalization returned an empty message, using fallback")
            return None
        return content

    async def personalize(
        self,
        event_name: str,
        event_type: str,
        guest_first_name: str,
        organizer_name: str,
        relationship: str = "acquaintance",
        tone: Tone = Tone.WARM_CASUAL,
        context: str | None = None,
    ) -> str:
        prompt = PERSONALIZE_PROMPT.format(
            event_type=event_type or "event",
            event_name=event_name,
            guest_first_name=guest_first_name,
            organizer_name=organizer_name,
            relationship=relationship or "acquaintance",
            tone_description=TONE_DESCRIPTIONS[tone],
            tone_name=tone.value.replace("_", " "),
            context_line=f"- Additional context: {context}\n" if context else "",
        )
        message = await self._complete(prompt, max_tokens=200)
        return message or fallback_request_message(guest_first_name, event_name)

    async def reminder_message(
        self,
        original_message: str,
        reminder_number: int,
        days_since_last_contact: int,
        guest_first_name: str,
    ) -> str:
        prompt = REMINDER_PROMPT.format(
            original_message=original_message,
            reminder_number=reminder_number,
            days_since_last_contact=days_since_last_contact,
            guest_first_name=guest_first_name,
        )
        message = await self._complete(prompt, max_tokens=150)
        return message or fallback_reminder_message(guest_first_name)


def get_message_personalizer() -> MessagePersonalizer:
    return MessagePersonalizer()
