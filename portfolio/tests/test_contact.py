import unittest
from unittest.mock import AsyncMock, patch

from portfolio.contact import ContactRelay, InMemoryMailSender, SmtpMailSender
from portfolio.errors import MailError, ValidationError


class ContactRelayTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.sender = InMemoryMailSender()
        self.relay = ContactRelay(
            sender=self.sender,
            from_address="owner@x.test",
            recipient="owner@x.test",
        )

    async def test_missing_fields_never_send(self):
        cases = [
            ("", "a@b.com", "hi"),
            (5, "a@b.com", "hi"),
            ("Ann", None, "hi"),
            ("Ann", "a@b.com", "   "),
        ]
        for name, email, message in cases:
            with self.assertRaises(ValidationError):
                await self.relay.send(name, email, message)
        self.assertEqual(self.sender.sent, [])

    async def test_sends_one_message(self):
        await self.relay.send("Ann", "a@b.com", "Hello there")
        self.assertEqual(len(self.sender.sent), 1)
        msg = self.sender.sent[0]
        self.assertEqual(msg["Subject"], "Message from Ann")
        self.assertEqual(msg["To"], "owner@x.test")
        self.assertIn("owner@x.test", msg["From"])
        html = msg.get_body(preferencelist=("html",)).get_content()
        self.assertIn("<strong>Email:</strong> a@b.com", html)
        self.assertIn("Hello there", html)

    async def test_html_fields_are_escaped(self):
        await self.relay.send("Ann", "a@b.com", "<script>alert(1)</script>")
        html = self.sender.sent[0].get_body(preferencelist=("html",)).get_content()
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)

    async def test_subject_stays_on_one_line(self):
        await self.relay.send("Ann\r\nBcc: x@y.test", "a@b.com", "hi")
        self.assertEqual(self.sender.sent[0]["Subject"], "Message from Ann Bcc: x@y.test")

    async def test_send_failure_raises_mail_error(self):
        self.sender.error = ConnectionError("smtp down")
        # The app-level error handler is the single place failures are logged.
        with self.assertNoLogs("portfolio.contact", level="ERROR"):
            with self.assertRaises(MailError) as ctx:
                await self.relay.send("Ann", "a@b.com", "hi")
        self.assertEqual(ctx.exception.to_public_message(), "Error sending email")


class SmtpMailSenderTests(unittest.IsolatedAsyncioTestCase):
    @patch("portfolio.contact.aiosmtplib.send", new_callable=AsyncMock)
    async def test_passes_account_settings(self, mock_send):
        sender = SmtpMailSender(
            hostname="smtp.x.test", port=465, username="u", password="p", timeout=5
        )
        message = object()
        await sender.send(message)
        mock_send.assert_awaited_once_with(
            message,
            hostname="smtp.x.test",
            port=465,
            username="u",
            password="p",
            use_tls=True,
            timeout=5,
        )


if __name__ == "__main__":
    unittest.main()
