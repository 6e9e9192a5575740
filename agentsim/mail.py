"""Messages passed between agents."""

from __future__ import annotations


def form_mail(sender: str, message: str) -> dict[str, str]:
    """Build a mail record from a sender and its text."""
    return {"sender": sender, "message": message}