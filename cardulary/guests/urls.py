API_PREFIX = "/api/v1"

EVENTS_URL = f"{API_PREFIX}/events"
EVENT_GUESTS_URL = f"{API_PREFIX}/events/{{event_id}}/guests"
SEND_REQUESTS_URL = f"{API_PREFIX}/events/{{event_id}}/send-requests"
SEND_REMINDERS_URL = f"{API_PREFIX}/events/{{event_id}}/send-reminders"
EXPORT_URL = f"{API_PREFIX}/events/{{event_id}}/export"

SUBMIT_ADDRESS_URL = f"{API_PREFIX}/submit"
GET_SUBMISSION_INFO_URL = f"{API_PREFIX}/submit/{{token}}"

PERSONALIZE_MESSAGE_URL = f"{API_PREFIX}/ai/personalize"
PERSONALIZE_REMINDER_URL = f"{API_PREFIX}/ai/reminder"

RESEND_WEBHOOK_URL = f"{API_PREFIX}/webhooks/resend"
