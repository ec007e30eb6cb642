"""Outbound notifications."""

from fx_forecast.notifications.mailer import EmailNotifier, build_message

__all__ = ["EmailNotifier", "build_message"]
