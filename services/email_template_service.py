"""
Template service for rendering notification emails.
"""
import html
import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from config.email_templates import (
    ACTION_BUTTON_TEMPLATE,
    NOTIFICATION_EMAIL_TEMPLATE,
    NOTIFICATION_TEXT_TEMPLATE,
    PRIORITY_STYLES,
)

logger = logging.getLogger(__name__)


class EmailTemplateService:
    """Service for formatting notification email bodies."""

    def __init__(self):
        """Initialize template service."""
        self.templates = {
            'notification_html': NOTIFICATION_EMAIL_TEMPLATE,
            'notification_text': NOTIFICATION_TEXT_TEMPLATE
        }

    def get_template(self, template_type: str, **kwargs) -> str:
        """
        Get a formatted template by type.

        Args:
            template_type: The type of template to retrieve
            **kwargs: Variables to format into the template

        Returns:
            Formatted template string

        Raises:
            ValueError: If template type is not found or a variable is missing
        """
        if template_type not in self.templates:
            available_types = list(self.templates.keys())
            raise ValueError(f"Unknown template type '{template_type}'. Available types: {available_types}")

        try:
            return self.templates[template_type].format(**kwargs)
        except KeyError as e:
            raise ValueError(f"Missing required parameter for template '{template_type}': {e}")

    def render_notification(
        self,
        title: Optional[str],
        message: str,
        priority: str = 'medium',
        action_url: Optional[str] = None,
        action_label: Optional[str] = None
    ) -> Tuple[str, str]:
        """
        Render the HTML and plain text bodies of a notification email.

        Args:
            title: Notification title
            message: Notification body
            priority: low, medium or high (unknown values fall back to medium)
            action_url: Optional call-to-action link
            action_label: Optional call-to-action label

        Returns:
            Tuple of (html_body, text_body)
        """
        style = PRIORITY_STYLES.get(priority, PRIORITY_STYLES['medium'])
        title = title or 'New Notification'

        action_button = ''
        if action_url and action_label:
            action_button = ACTION_BUTTON_TEMPLATE.format(
                action_url=html.escape(action_url, quote=True),
                action_label=html.escape(action_label),
                color=style['color']
            )

        html_body = self.get_template(
            'notification_html',
            color=style['color'],
            icon=style['icon'],
            title=html.escape(title),
            message=html.escape(message),
            action_button=action_button,
            year=datetime.now(timezone.utc).year
        )
        text_body = self.get_template(
            'notification_text',
            title=title,
            message=message,
            action_line=f"\n{action_label}: {action_url}\n" if action_url and action_label else ''
        )

        logger.debug(f"Rendered {priority} notification email '{title}'")
        return html_body, text_body
