# utils/email.py
import logging
from datetime import date
from decimal import Decimal

import requests

import config

logger = logging.getLogger(__name__)

BREVO_URL = "https://api.brevo.com/v3/smtp/email"


class EmailDeliveryError(Exception):
     pass


def send_rent_reminder_email(
     to_email: str,
     tenant_name: str,
     shop_number: str,
     period: str,
     amount_due: Decimal,
     due_date: date,
     days_overdue: int
):
     if not config.BREVO_API_KEY:
          raise EmailDeliveryError("BREVO_API_KEY is not set")

     response = requests.post(
          BREVO_URL,
          headers={
               "api-key": config.BREVO_API_KEY,
               "Content-Type": "application/json",
          },
          json={
               "sender": {"name": "LeaseHub", "email": config.BREVO_SENDER_EMAIL},
               "to": [{"email": to_email, "name": tenant_name}],
               "subject": f"Rent reminder: {period} for shop {shop_number}",
               "htmlContent": f"""
                    <h2>Rent reminder</h2>
                    <p>Dear {tenant_name},</p>
                    <p>Rent of <strong>{amount_due}</strong> for shop {shop_number} ({period})
                    was due on {due_date.isoformat()} and is {days_overdue} day(s) overdue.</p>
                    <p>Please settle it at your earliest convenience.</p>
               """,
          },
          timeout=10,
     )
     if response.status_code not in (200, 201):
          logger.error("Brevo rejected reminder to %s: %s", to_email, response.text)
          raise EmailDeliveryError(f"Brevo error: {response.text}")
     logger.info("Sent rent reminder to %s for %s", to_email, period)
