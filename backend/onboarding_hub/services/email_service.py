"""Outbound email through the Resend HTTP API."""
import html
import logging

import httpx

from onboarding_hub.config import settings

logger = logging.getLogger(__name__)

ONBOARDING_SUBJECT = "Welcome aboard - your onboarding journey begins"


class EmailDeliveryError(Exception):
    pass


class Mailer:
    def __init__(
        self,
        api_key: str | None = None,
        sender: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.sender = sender or settings.email_from
        self.api_url = api_url or settings.resend_api_url
        self.timeout = timeout or settings.http_timeout_seconds

    async def send(self, to: str, subject: str, html_body: str) -> dict:
        """Send one message. Raises EmailDeliveryError on any failure."""
        if not self.api_key:
            raise EmailDeliveryError("Email service not configured (missing Resend API key)")

        payload = {"from": self.sender, "to": [to], "subject": subject, "html": html_body}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=payload,
                )
        except httpx.HTTPError as exc:
            logger.error("Email request to %s failed: %s", to, exc)
            raise EmailDeliveryError(f"Email request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error("Email API rejected message to %s: %s", to, response.text)
            raise EmailDeliveryError(f"Email service error: {response.text}")

        logger.info("Email sent to %s", to)
        return response.json()


def render_onboarding_email(
    client_name: str,
    welcome_message: str,
    next_steps: list[tuple[str, str | None]],
    kickoff_files: list[tuple[str, str]],
) -> str:
    """Minimal HTML body: greeting, message paragraphs, steps and file links."""
    parts = [f"<h1>Welcome, {html.escape(client_name)}</h1>"]
    for paragraph in welcome_message.split("\n\n"):
        if paragraph.strip():
            parts.append(f"<p>{html.escape(paragraph.strip())}</p>")

    if next_steps:
        parts.append("<h2>Next steps</h2><ol>")
        for title, description in next_steps:
            item = f"<strong>{html.escape(title)}</strong>"
            if description:
                item += f"<br>{html.escape(description)}"
            parts.append(f"<li>{item}</li>")
        parts.append("</ol>")

    if kickoff_files:
        parts.append("<h2>Kickoff materials</h2><ul>")
        for name, url in kickoff_files:
            parts.append(f'<li><a href="{html.escape(url, quote=True)}">{html.escape(name)}</a></li>')
        parts.append("</ul>")

    return "\n".join(parts)


def render_signature_request_email(
    recipient_name: str,
    client_name: str,
    documents: list[str],
    signing_url: str,
) -> str:
    items = "".join(f"<li>{html.escape(d)}</li>" for d in documents)
    return (
        f"<p>Hello {html.escape(recipient_name)},</p>"
        f"<p>{html.escape(client_name)} has requested your signature on:</p>"
        f"<ul>{items}</ul>"
        f'<p><a href="{html.escape(signing_url, quote=True)}">Review and sign</a></p>'
    )
