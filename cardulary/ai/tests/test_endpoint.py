"""Tests for the AI message endpoints."""

from cardulary.ai.personalizer import MessagePersonalizer, get_message_personalizer
from cardulary.guests.urls import PERSONALIZE_MESSAGE_URL, PERSONALIZE_REMINDER_URL


class RecordingPersonalizer(MessagePersonalizer):
    def __init__(self):
        self.calls: list[dict] = []

    async def personalize(self, **kwargs):
        self.calls.append(kwargs)
        return f"Hey {kwargs['guest_first_name']}! [link]"

    async def reminder_message(self, **kwargs):
        self.calls.append(kwargs)
        return f"Still need it, {kwargs['guest_first_name']}: [link]"


async def test_personalize_uses_organizer_name_from_token(client_factory):
    personalizer = RecordingPersonalizer()

    async with client_factory({get_message_personalizer: lambda: personalizer}) as client:
        response = await client.post(
            PERSONALIZE_MESSAGE_URL,
            json={"event_name": "Smith Wedding", "event_type": "wedding", "guest_first_name": "Ada"},
        )

    assert response.status_code == 200
    assert response.json() == {"message": "Hey Ada! [link]"}
    assert personalizer.calls[0]["organizer_name"] == "Sam Rivera"
    assert personalizer.calls[0]["relationship"] == "acquaintance"


async def test_personalize_rejects_missing_fields(client_factory):
    personalizer = RecordingPersonalizer()

    async with client_factory({get_message_personalizer: lambda: personalizer}) as client:
        no_name = await client.post(PERSONALIZE_MESSAGE_URL, json={"event_name": "Party"})
        bad_tone = await client.post(
            PERSONALIZE_MESSAGE_URL,
            json={"event_name": "Party", "guest_first_name": "Ada", "tone": "grumpy"},
        )

    assert no_name.status_code == 422
    assert bad_tone.status_code == 422
    assert personalizer.calls == []


async def test_reminder_endpoint(client_factory):
    personalizer = RecordingPersonalizer()

    async with client_factory({get_message_personalizer: lambda: personalizer}) as client:
        response = await client.post(
            PERSONALIZE_REMINDER_URL,
            json={"original_message": "Hi Ada! [link]", "guest_first_name": "Ada", "reminder_number": 2},
        )

    assert response.status_code == 200
    assert response.json()["message"] == "Still need it, Ada: [link]"
    assert personalizer.calls[0]["reminder_number"] == 2
