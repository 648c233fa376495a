from datetime import date
from decimal import Decimal

import pytest

import config
from utils import email


class _Response:
     def __init__(self, status_code, text=""):
          self.status_code = status_code
          self.text = text


def _send():
     email.send_rent_reminder_email(
          to_email="tenant@example.com",
          tenant_name="Sara",
          shop_number="G-12",
          period="October 2026",
          amount_due=Decimal("10000.00"),
          due_date=date(2026, 10, 5),
          days_overdue=5,
     )


def test_sends_through_brevo(monkeypatch):
     calls = []
     monkeypatch.setattr(config, "BREVO_API_KEY", "key-123")
     monkeypatch.setattr(email.requests, "post", lambda url, **kw: calls.append((url, kw)) or _Response(201))

     _send()

     url, kwargs = calls[0]
     assert url == email.BREVO_URL
     assert kwargs["headers"]["api-key"] == "key-123"
     assert kwargs["json"]["to"] == [{"email": "tenant@example.com", "name": "Sara"}]
     assert "October 2026" in kwargs["json"]["subject"]
     assert "10000.00" in kwargs["json"]["htmlContent"]


def test_missing_key(monkeypatch):
     monkeypatch.setattr(config, "BREVO_API_KEY", None)

     with pytest.raises(email.EmailDeliveryError):
          _send()


def test_brevo_error(monkeypatch):
     monkeypatch.setattr(config, "BREVO_API_KEY", "key-123")
     monkeypatch.setattr(email.requests, "post", lambda url, **kw: _Response(400, "bad sender"))

     with pytest.raises(email.EmailDeliveryError, match="bad sender"):
          _send()
