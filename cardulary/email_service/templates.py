import html
from dataclasses import dataclass

LINK_PLACEHOLDER = "[link]"


@dataclass
class EmailTemplates:
    ADDRESS_REQUEST_SUBJECT = "{organizer_name} needs your mailing address"
    REMINDER_SUBJECT = "Reminder: {organizer_name} still needs your mailing address"

    ADDRESS_REQUEST_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>Address Request - {event_name}</title>
    </head>
    <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background: #667eea; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
            <h1 style="color: white; margin: 0; font-size: 28px;">{event_name}</h1>
        </div>

        <div style="background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px;">
            <p style="font-size: 16px;">Hi <strong>{first_name}</strong>!</p>

            <p style="font-size: 16px;">{message}</p>

            <div style="text-align: center; margin: 30px 0;">
                <a href="{submission_link}" style="display: inline-block; background: #667eea; color: white; padding: 14px 32px; text-decoration: none; border-radius: 6px; font-weight: 600; font-size: 16px;">
                    Submit Your Address
                </a>
            </div>

            <p style="font-size: 14px; color: #6b7280;">
                This will take less than 60 seconds. Just fill out a quick form with your mailing address.
            </p>

            <hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;">

            <p style="font-size: 12px; color: #9ca3af; text-align: center;">
                Your address will only be used for {event_name}.<br>
                We will never spam you or share your information.
            </p>

            <p style="font-size: 12px; color: #9ca3af; text-align: center;">
                Powered by <strong>Cardulary</strong>
            </p>
        </div>
    </body>
    </html>
    """

    ADDRESS_REQUEST_TEXT = """
Hi {first_name}!

{message}

Submit your address here: {submission_link}

This will take less than 60 seconds.

---
Your address will only be used for {event_name}.
We will never spam you or share your information.

Powered by Cardulary
    """

    @classmethod
    def render_address_request(
        cls,
        guest_first_name: str,
        organizer_name: str,
        event_name: str,
        submission_link: str,
        custom_message: str,
        reminder: bool = False,
    ) -> tuple[str, str, str]:
        """Render an address request email.

        The link is rendered as a button, so a ``[link]`` placeholder left in the
        organizer's message is dropped.

        Returns: (subject, html_body, text_body)
        """
        message = custom_message.replace(LINK_PLACEHOLDER, "").strip()
        subject_template = cls.REMINDER_SUBJECT if reminder else cls.ADDRESS_REQUEST_SUBJECT

        subject = subject_template.format(organizer_name=organizer_name)
        html_body = cls.ADDRESS_REQUEST_HTML.format(
            first_name=html.escape(guest_first_name),
            event_name=html.escape(event_name),
            message=html.escape(message),
            submission_link=html.escape(submission_link, quote=True),
        ).strip()
        text_body = cls.ADDRESS_REQUEST_TEXT.format(
            first_name=guest_first_name,
            event_name=event_name,
            message=message,
            submission_link=submission_link,
        ).strip()
        return subject, html_body, text_body
