"""Render an :class:`~emlkit.models.EmailData` summary as a Markdown document."""

from __future__ import annotations

from emlkit.models import EmailData


def render_markdown(email_data: EmailData, filename: str) -> str:
    """Build the final Markdown document for one message.

    The Attachments section is only emitted when attachments are listed.
    """
    lines = [
        f"# {email_data.subject}",
        "",
        f"**From:** {email_data.from_address}",
        f"**To:** {email_data.to_address}",
        f"**Date:** {email_data.date}",
        f"**Original File:** {filename}",
        "",
        "---",
        "",
        "## Message",
        "",
        email_data.body,
        "",
    ]

    if email_data.attachments:
        lines += ["## Attachments", ""]
        for attachment in email_data.attachments:
            lines.append(
                f"- **{attachment.filename}** "
                f"({attachment.content_type}, {attachment.size_kb} KB)"
            )
        lines.append("")

    return "\n".join(lines) + "\n"
