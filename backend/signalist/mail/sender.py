"""Rendering and SMTP delivery of the welcome and daily digest emails."""

from __future__ import annotations

import asyncio
import datetime
import smtplib
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger

from signalist.config.settings import settings
from signalist.errors import ConfigurationError
from signalist.mail.unsubscribe import make_unsubscribe_url

_templates = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "templates"),
    autoescape=select_autoescape(["html"]),
)


def format_date_today(today: datetime.date | None = None) -> str:
    today = today or datetime.date.today()
    return f"{today:%A, %B} {today.day}, {today.year}"


def render_welcome_email(name: str, intro: str, unsubscribe_url: str) -> str:
    return _templates.get_template("welcome.html").render(
        name=name,
        intro=intro,
        dashboard_url=settings.base_url,
        unsubscribe_url=unsubscribe_url,
    )


def render_news_summary_email(date: str, news_content: str, unsubscribe_url: str) -> str:
    return _templates.get_template("news_summary.html").render(
        date=date,
        news_content=news_content,
        dashboard_url=settings.base_url,
        unsubscribe_url=unsubscribe_url,
    )


def _deliver(message: EmailMessage) -> None:
    smtp = settings.smtp
    if not smtp.username or not smtp.password:
        raise ConfigurationError("SMTP credentials (NODEMAILER_EMAIL / NODEMAILER_PASSWORD) must be set.")
    client_class = smtplib.SMTP_SSL if smtp.use_ssl else smtplib.SMTP
    with client_class(smtp.host, smtp.port, timeout=smtp.timeout_seconds) as client:
        if not smtp.use_ssl:
            client.starttls()
        client.login(smtp.username, smtp.password)
        client.send_message(message)


async def send_email(to: str, subject: str, html: str, text: str, sender_name: str | None = None) -> str:
    """Send one multipart email and return its Message-ID."""
    message = EmailMessage()
    message["From"] = formataddr((sender_name or settings.smtp.sender_name, settings.smtp.username or ""))
    message["To"] = to
    message["Subject"] = subject
    message["Message-ID"] = make_msgid(domain="signalist")
    message.set_content(text)
    message.add_alternative(html, subtype="html")

    await asyncio.to_thread(_deliver, message)
    return message["Message-ID"]


async def send_welcome_email(email: str, name: str, intro: str) -> str:
    unsubscribe_url = make_unsubscribe_url(email)
    html = render_welcome_email(name, intro, unsubscribe_url)
    return await send_email(
        to=email,
        subject="Welcome to Signalist - your stock market toolkit is ready!",
        html=html,
        text=f"Thanks for joining Signalist. To stop daily emails: {unsubscribe_url}",
    )


async def send_news_summary_email(email: str, date: str, news_content: str) -> str:
    unsubscribe_url = make_unsubscribe_url(email)
    html = render_news_summary_email(date, news_content, unsubscribe_url)
    logger.info(f"Sending daily news summary email to {email}")
    message_id = await send_email(
        to=email,
        subject=f"Market News Summary Today - {date}",
        html=html,
        text=f"Today's market news summary from Signalist. To stop daily emails: {unsubscribe_url}",
        sender_name="Signalist News",
    )
    logger.info(f"Daily news email sent to {email}: {message_id}")
    return message_id
