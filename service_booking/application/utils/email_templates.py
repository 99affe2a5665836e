"""Plain-text and HTML bodies for transactional emails."""

from __future__ import annotations

from html import escape

from service_booking.domain.entities.booking import Booking
from service_booking.domain.entities.quote import QuoteRequest

_WRAPPER = '<div style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px;">{body}</div>'
_PANEL = '<div style="background-color: {bg}; padding: 20px; border-radius: 8px; margin-bottom: 24px;">{body}</div>'
_FIELD = '<p style="margin: 8px 0;"><strong>{label}:</strong> {value}</p>'
_SIGN_OFF = (
    '<div style="margin-top: 24px; color: #64748b; text-align: center; padding-top: 24px; '
    'border-top: 1px solid #e2e8f0;"><p style="margin: 4px 0;">Best regards,</p>'
    '<p style="margin: 4px 0;">{team}</p></div>'
)


def _html_fields(fields: list[tuple[str, str | None]]) -> str:
    return "".join(_FIELD.format(label=escape(label), value=escape(value)) for label, value in fields if value)


def _text_fields(fields: list[tuple[str, str | None]]) -> str:
    return "\n".join(f"{label}: {value}" for label, value in fields if value)


def booking_confirmation(
    booking: Booking,
    service_name: str,
    appointment_text: str,
    business_name: str,
) -> tuple[str, str]:
    fields = [
        ("Service", service_name),
        ("Name", booking.client_name),
        ("Email", booking.client_email),
        ("Phone", booking.client_phone),
        ("Appointment Date", appointment_text),
        ("Additional Notes", booking.notes),
    ]
    has_event = bool(booking.calendar_event_link)

    text_parts = ["Thank you for your booking!", "", "Booking Details:", _text_fields(fields), ""]
    if has_event:
        text_parts.append(
            "This appointment has been added to our calendar. You should receive a calendar invitation shortly."
        )
        text_parts.append("")
    text_parts += ["We will review your booking and confirm the appointment shortly.", "", "Best regards,", f"{business_name} Team"]
    text = "\n".join(text_parts)

    if has_event:
        follow_up = _PANEL.format(
            bg="#ecfdf5",
            body=(
                '<h3 style="color: #047857; margin-top: 0;">Calendar Appointment Created</h3>'
                "<p>This appointment has been added to our calendar. "
                "You should receive a calendar invitation in your email shortly.</p>"
                f'<a href="{escape(booking.calendar_event_link or "")}">View in Google Calendar</a>'
            ),
        )
    else:
        follow_up = _PANEL.format(
            bg="#f0f9ff",
            body=(
                '<p style="margin: 0;">We will review your booking and confirm the appointment shortly. '
                "If you need to make any changes or have questions, please contact us.</p>"
            ),
        )

    html = _WRAPPER.format(
        body=(
            '<h2 style="color: #2563eb; margin-bottom: 24px;">Thank you for your booking!</h2>'
            + _PANEL.format(bg="#f8fafc", body='<h3 style="color: #1e293b;">Booking Details</h3>' + _html_fields(fields))
            + follow_up
            + _SIGN_OFF.format(team=escape(f"{business_name} Team"))
        )
    )
    return text, html


def quote_notification(quote: QuoteRequest, business_name: str) -> tuple[str, str]:
    fields = [
        ("Name", quote.name),
        ("Email", quote.email),
        ("Phone", quote.phone),
        ("Service Requested", quote.service_name),
        ("Address", quote.address),
    ]
    analysis = quote.analysis or "Analysis not available"

    text = "\n".join(
        [
            "New quote request received:",
            "",
            _text_fields(fields),
            "",
            "Project Description:",
            quote.description,
            "",
            "Professional Analysis:",
            analysis,
            "",
            "Best regards,",
            f"{business_name} Team",
        ]
    )

    analysis_html = "".join(
        f'<p style="margin: 8px 0;">{escape(line)}</p>' for line in analysis.splitlines() if line.strip()
    )
    html = _WRAPPER.format(
        body=(
            '<h2 style="color: #2563eb; margin-bottom: 24px;">New Quote Request</h2>'
            + _PANEL.format(bg="#f8fafc", body='<h3 style="color: #1e293b;">Customer Information</h3>' + _html_fields(fields))
            + _PANEL.format(
                bg="#f8fafc",
                body='<h3 style="color: #1e293b;">Project Description</h3>'
                f'<p style="line-height: 1.6; white-space: pre-wrap;">{escape(quote.description)}</p>',
            )
            + _PANEL.format(bg="#f0f9ff", body='<h3 style="color: #1e293b;">Professional Analysis</h3>' + analysis_html)
            + _SIGN_OFF.format(team=escape(f"{business_name} Team"))
        )
    )
    return text, html
