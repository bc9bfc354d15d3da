"""
Unit Tests for the password reset email
"""
import pytest

from eventhub.services.email_service import EmailService


class CapturingEmailService(EmailService):
    """Keeps the rendered message instead of talking to SMTP"""

    def __init__(self):
        super().__init__()
        self.messages = []

    async def send_email(self, to_email, subject, html_content, text_content=None) -> bool:
        self.messages.append({
            'to': to_email,
            'subject': subject,
            'html': html_content,
            'text': text_content,
        })
        return True


@pytest.fixture
def service():
    return CapturingEmailService()


class TestPasswordResetEmail:

    @pytest.mark.asyncio
    async def test_contains_reset_link(self, service):
        sent = await service.send_password_reset_email("asha@bmsce.ac.in", "Asha", "tok123")

        assert sent is True
        message = service.messages[0]
        assert message['to'] == "asha@bmsce.ac.in"
        assert "http://localhost:5173/reset-password?token=tok123" in message['html']
        assert "http://localhost:5173/reset-password?token=tok123" in message['text']

    @pytest.mark.asyncio
    async def test_name_is_escaped_in_html(self, service):
        await service.send_password_reset_email(
            "asha@bmsce.ac.in", '<img src=x onerror="alert(1)">', "tok123"
        )

        html_body = service.messages[0]['html']
        assert "<img" not in html_body
        assert "&lt;img src=x onerror=&quot;alert(1)&quot;&gt;" in html_body

    @pytest.mark.asyncio
    async def test_missing_name_greets_generically(self, service):
        await service.send_password_reset_email("asha@bmsce.ac.in", "", "tok123")

        assert "Hi there," in service.messages[0]['html']
