import base64
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from googleapiclient.errors import HttpError

from rollover.core.errors import StoreError


def build_message(sender: str, recipient: str, subject: str, body: str, html: str | None = None):
    if html is None:
        message = MIMEText(body)
    else:
        message = MIMEMultipart("alternative")
        message.attach(MIMEText(body, "plain"))
        message.attach(MIMEText(html, "html"))
    message["to"] = recipient
    message["from"] = sender
    message["subject"] = subject or "(no subject)"
    return message


class GmailNotifier:
    def __init__(self, service, sender: str = "me", retries: int = 5):
        self.service = service
        self.sender = sender
        self.retries = retries

    def account_email(self) -> str:
        profile = self.service.users().getProfile(userId="me").execute(num_retries=self.retries)
        return profile["emailAddress"]

    def send(self, recipient: str, subject: str, body: str, html: str | None = None) -> None:
        message = build_message(self.sender, recipient, subject, body, html)
        raw = base64.urlsafe_b64encode(message.as_bytes()).decode()
        try:
            self.service.users().messages().send(userId="me", body={"raw": raw}).execute(
                num_retries=self.retries
            )
        except HttpError as e:
            raise StoreError(f"send mail to {recipient} failed: {e}") from e
