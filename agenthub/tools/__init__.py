"""
Tools for AgentHub.

- email: Outbound email with delivery log
"""

from agenthub.tools.email import send_application_confirmation, send_email, send_status_change_email

__all__ = ["send_email", "send_application_confirmation", "send_status_change_email"]
