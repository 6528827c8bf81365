"""Driver notifications over Twilio's Messages API.

Transports never raise to the caller: every outcome is a ``SendResult``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import httpx

from skipjobs.config import SmsConfig

logger = logging.getLogger(__name__)

_STRIP_RE = re.compile(r"[\s\-]")
WHATSAPP_PREFIX = "whatsapp:"


@dataclass
class SendResult:
    success: bool
    sid: str | None = None
    error: str | None = None


def format_phone_number(phone: str, default_country_code: str = "+353") -> str:
    """Normalise a phone number to international form.

    Spaces and dashes are removed. Numbers already starting with ``+`` are
    kept; a national leading ``0`` is replaced by the default country code,
    anything else just gets the code prepended.
    """
    cleaned = _STRIP_RE.sub("", phone)
    if cleaned.startswith("+"):
        return cleaned
    if cleaned.startswith("0"):
        return default_country_code + cleaned[1:]
    return default_country_code + cleaned


def build_job_message(
    customer_name: str, address: str | None, docket_no: str, driver_link: str | None = None,
) -> str:
    lines = ["\U0001F69B New Job Available!", "", f"Customer: {customer_name}"]
    if address:
        lines.append(f"Address: {address}")
    lines.append(f"Docket: {docket_no}")
    lines.append("")
    if driver_link:
        lines.append(f"Open job: {driver_link}")
    else:
        lines.append("Open the Driver Portal to view details.")
    return "\n".join(lines)


class TwilioTransport:
    """Posts messages to Twilio over a shared httpx.AsyncClient."""

    channel = "sms"

    def __init__(self, client: httpx.AsyncClient, config: SmsConfig):
        self._client = client
        self._config = config

    @property
    def configured(self) -> bool:
        return bool(self._config.account_sid and self._config.auth_token)

    def sender(self) -> str:
        return self._config.from_number

    def destination(self, to: str) -> str:
        return format_phone_number(to, self._config.default_country_code)

    async def send(self, to: str, body: str) -> SendResult:
        if not self.configured:
            logger.error("Twilio client not initialized - missing credentials")
            return SendResult(False, error="Twilio not configured")
        if not self.sender():
            logger.error("Twilio FROM number not configured for %s", self.channel)
            return SendResult(False, error="Twilio FROM number not configured")

        url = f"{self._config.api_base}/Accounts/{self._config.account_sid}/Messages.json"
        try:
            resp = await self._client.post(
                url,
                data={"To": self.destination(to), "From": self.sender(), "Body": body},
                auth=(self._config.account_sid, self._config.auth_token),
                timeout=self._config.timeout_s,
            )
            resp.raise_for_status()
            sid = resp.json().get("sid")
        except httpx.HTTPStatusError as exc:
            logger.error("Twilio %s error: %s %s", self.channel, exc.response.status_code, exc.response.text)
            return SendResult(False, error=f"Twilio returned {exc.response.status_code}")
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception("Twilio %s request failed", self.channel)
            return SendResult(False, error=str(exc) or exc.__class__.__name__)

        logger.info("%s sent successfully: %s", self.channel.upper(), sid)
        return SendResult(True, sid=sid)


class WhatsAppTransport(TwilioTransport):
    channel = "whatsapp"

    def sender(self) -> str:
        return self._config.whatsapp_from

    def destination(self, to: str) -> str:
        if to.startswith(WHATSAPP_PREFIX):
            return to
        return WHATSAPP_PREFIX + super().destination(to)


def build_transport(client: httpx.AsyncClient, config: SmsConfig) -> TwilioTransport:
    if config.channel == "whatsapp":
        return WhatsAppTransport(client, config)
    return TwilioTransport(client, config)


async def send_job_notification(
    transport: TwilioTransport,
    driver_phone: str,
    customer_name: str,
    address: str | None,
    docket_no: str,
    driver_link: str | None = None,
) -> SendResult:
    message = build_job_message(customer_name, address, docket_no, driver_link)
    return await transport.send(driver_phone, message)
