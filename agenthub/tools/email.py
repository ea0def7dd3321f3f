"""
Email dispatch.

Every attempt is written to the email log. Delivery goes through a
Resend-compatible HTTP API when EMAIL_PROVIDER_URL is set; otherwise the
email is only logged.
"""

import logging
from datetime import UTC, datetime
from html import escape

import httpx
from sqlalchemy.orm import Session

from agenthub.config import settings
from agenthub.db import EmailLog

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    "pending": "Pending Review",
    "reviewing": "In Review",
    "accepted": "Accepted",
    "rejected": "Rejected",
}

STATUS_MESSAGES = {
    "reviewing": "Your application is now being reviewed by our team.",
    "accepted": "Congratulations! Your application has been accepted. You will receive further instructions shortly.",
    "rejected": "Unfortunately, your application was not selected at this time. "
    "We encourage you to apply for other opportunities.",
}


def _deliver(to: str, subject: str, html: str) -> None:
    """Hand the email to the provider. Raises httpx.HTTPError on failure."""
    if not settings.email_provider_url:
        logger.info(f"Email delivery not configured, logged only: to={to} subject={subject!r}")
        return

    headers = {"Authorization": f"Bearer {settings.email_api_key}"}
    payload = {"from": settings.email_from, "to": [to], "subject": subject, "html": html}

    with httpx.Client(timeout=settings.email_timeout) as client:
        response = client.post(settings.email_provider_url, headers=headers, json=payload)
        response.raise_for_status()


def send_email(
    db: Session,
    to: str,
    subject: str,
    html: str,
    template: str,
    metadata: dict | None = None,
) -> bool:
    """Send one email and record the outcome. Returns True when sent."""
    log = EmailLog(to=to, subject=subject, template=template, status="pending", extra_data=metadata)
    db.add(log)
    db.commit()

    try:
        _deliver(to, subject, html)
    except httpx.HTTPError as e:
        logger.error(f"Failed to send {template} email to {to}: {e}")
        log.status = "failed"
        log.error = str(e)
        db.commit()
        return False
    except Exception as e:
        logger.exception(f"Unexpected error sending {template} email to {to}")
        log.status = "failed"
        log.error = str(e)
        db.commit()
        return False

    log.status = "sent"
    log.sent_at = datetime.now(UTC)
    db.commit()
    logger.info(f"Sent {template} email to {to}")
    return True


def _layout(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{title}</title></head>
<body style="font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background: #14b8a6; padding: 30px; border-radius: 12px 12px 0 0; text-align: center;">
      <h1 style="color: white; margin: 0; font-size: 24px;">{title}</h1>
    </div>
    <div style="background: #f9fafb; padding: 30px; border: 1px solid #e5e7eb;">
{body}
    </div>
    <div style="background: #1f2937; padding: 20px; border-radius: 0 0 12px 12px; text-align: center;
                color: #9ca3af; font-size: 12px;">
      <p>AgentHub - Agent Portal + ATS Platform</p>
    </div>
  </div>
</body>
</html>"""


def send_application_confirmation(
    db: Session,
    *,
    to: str,
    agent_name: str,
    opportunity_name: str,
    application_id: str,
    client_name: str,
) -> bool:
    """Tell an agent their application was received."""
    submitted = datetime.now(UTC).strftime("%B %d, %Y")
    body = f"""      <p>Hello <strong>{escape(agent_name)}</strong>,</p>
      <p>Thank you for applying to the <strong>{escape(opportunity_name)}</strong> opportunity with
         <strong>{escape(client_name)}</strong>. Your application has been received and is now being reviewed.</p>
      <p style="text-align: center; font-family: monospace;">Application ID<br><strong>{application_id}</strong></p>
      <p>Status: <strong>{STATUS_LABELS["pending"]}</strong><br>Submitted: {submitted}</p>
      <h3>What's Next?</h3>
      <ul>
        <li>Our recruitment team will review your application within 2-3 business days</li>
        <li>If selected, you'll receive an email with next steps</li>
        <li>Make sure your profile and documents are up to date</li>
      </ul>
      <p style="text-align: center;"><a href="{settings.portal_url}/applications">View Application Status</a></p>"""

    return send_email(
        db,
        to=to,
        subject=f"Application Received: {opportunity_name}",
        html=_layout("Application Submitted!", body),
        template="application_confirmation",
        metadata={
            "applicationId": application_id,
            "opportunityName": opportunity_name,
            "clientName": client_name,
            "agentName": agent_name,
        },
    )


def send_status_change_email(
    db: Session,
    *,
    to: str,
    agent_name: str,
    opportunity_name: str,
    old_status: str,
    new_status: str,
    application_id: str,
) -> bool:
    """Tell an agent their application moved to a new status."""
    label = STATUS_LABELS.get(new_status, new_status.replace("_", " ").title())
    body = f"""      <p>Hello <strong>{escape(agent_name)}</strong>,</p>
      <p>The status of your application for <strong>{escape(opportunity_name)}</strong> has been updated:</p>
      <p style="text-align: center; margin: 30px 0;"><strong>{label.upper()}</strong></p>
      <p>{STATUS_MESSAGES.get(new_status, "Your application status has been updated.")}</p>
      <p><small style="color: #6b7280;">Application ID: {application_id}</small></p>"""

    return send_email(
        db,
        to=to,
        subject=f"Application Update: {opportunity_name}",
        html=_layout("Application Status Update", body),
        template="status_change",
        metadata={
            "applicationId": application_id,
            "opportunityName": opportunity_name,
            "oldStatus": old_status,
            "newStatus": new_status,
        },
    )
