"""Stand-ins for the SMS transport and mailer used across the test suite."""

from skipjobs.services.sms import SendResult

YARD_LAT = 53.6552
YARD_LNG = -6.4164


class FakeTransport:
    """Records messages instead of calling Twilio."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: list[tuple[str, str]] = []

    async def send(self, to: str, body: str) -> SendResult:
        self.sent.append((to, body))
        if self.succeed:
            return SendResult(True, sid=f"SM{len(self.sent)}")
        return SendResult(False, error="Twilio returned 500")


class FakeMailer:
    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: list[dict] = []

    def send(self, to, subject, html, attachments=None) -> bool:
        self.sent.append({"to": to, "subject": subject, "html": html, "attachments": attachments or []})
        return self.succeed
