"""Email service using Resend API."""

from __future__ import annotations

import logging
from datetime import datetime
from html import escape

from skipjobs.config import Settings
from skipjobs.services.geometry import LocationRole, location_for
from skipjobs.services.job_states import action_label, skip_size_label

logger = logging.getLogger(__name__)


class ResendMailer:
    def __init__(self, api_key: str, from_address: str, from_name: str = ""):
        self._api_key = api_key
        self._from = f"{from_name} <{from_address}>" if from_name else from_address

    def send(
        self, to: str, subject: str, html: str, attachments: list[tuple[str, bytes]] | None = None,
    ) -> bool:
        """Send an email via Resend. Returns True on success."""
        if not self._api_key:
            logger.warning("RESEND_API_KEY not set, email to %s not sent: %s", to, subject)
            return False
        if not to:
            logger.warning("No recipient configured, email not sent: %s", subject)
            return False

        import resend
        resend.api_key = self._api_key

        params = {
            "from": self._from,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if attachments:
            params["attachments"] = [
                {"filename": name, "content": list(content)}
                for name, content in attachments
            ]

        try:
            resend.Emails.send(params)
            return True
        except Exception:
            logger.exception("Failed to send email to %s", to)
            return False


def build_mailer(settings: Settings) -> ResendMailer:
    return ResendMailer(
        settings.resend_api_key, settings.email.from_address, settings.email.from_name,
    )


def _format_completed(value: datetime) -> str:
    return value.strftime("%d/%m/%Y, %H:%M:%S")


def completion_subject(docket_no: str) -> str:
    return f"Skip Docket Completed: {docket_no}"


def render_completion_email(job, completion) -> str:
    """HTML body for the office's completion email."""
    customer = job.customer
    driver = job.driver
    size = completion.skip_size or completion.drop_size or completion.pick_size
    locations = completion.locations
    site = location_for(locations, LocationRole.SITE)
    position = location_for(locations, LocationRole.DRIVER_POSITION)

    location_section = ""
    if site:
        location_section += '<h3 style="margin-top: 20px; margin-bottom: 10px;">Drop Location (Site)</h3>'
        if customer and customer.address:
            location_section += f"<p><strong>Address:</strong> {escape(customer.address)}</p>"
        location_section += f"<p><strong>GPS:</strong> {site.as_text()}</p>"

    if position:
        location_section += '<h3 style="margin-top: 20px; margin-bottom: 10px;">Job Completion Location</h3>'
        location_section += f"<p><strong>Where driver finished:</strong> {position.as_text()}</p>"
        if position.accuracy_m:
            location_section += f"<p><strong>GPS Accuracy:</strong> {position.accuracy_m:g}m</p>"
        location_section += f'<p><a href="{position.maps_url()}" style="color: #2563eb;">View on Google Maps</a></p>'

    removed = (
        f"<p><strong>Removed Skip:</strong> {skip_size_label(completion.pick_size)}</p>"
        if completion.pick_size else ""
    )
    left = (
        f"<p><strong>Left on Site:</strong> {skip_size_label(completion.drop_size)}</p>"
        if completion.drop_size else ""
    )
    notes = (
        f'<p style="margin-top: 20px;"><strong>Driver Notes:</strong> {escape(completion.driver_notes)}</p>'
        if completion.driver_notes else ""
    )

    return f"""
    <h2>Skip Job Completed</h2>
    <p><strong>Docket No:</strong> {escape(job.docket_no)}</p>
    <p><strong>Customer:</strong> {escape(customer.name) if customer else 'N/A'}</p>
    <p><strong>Driver:</strong> {escape(driver.name) if driver else 'N/A'}</p>
    <p><strong>Truck Reg:</strong> {escape(job.truck_reg)}</p>
    <p><strong>Skip Size:</strong> {skip_size_label(size) or '-'}</p>
    <p><strong>Action:</strong> {action_label(completion.action)}</p>
    {removed}
    {left}
    <p><strong>Completed:</strong> {_format_completed(completion.completed_time)}</p>
    {location_section}
    {notes}
    <hr>
    <p style="color: #666; font-size: 12px;">PDF docket attached. Generated by Irish Metals Dispatch System.</p>
    """
