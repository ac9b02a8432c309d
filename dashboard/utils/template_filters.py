from flask import Blueprint
from markupsafe import Markup, escape
import re

from dashboard.entities import NOT_CONFIRMED

template_filters = Blueprint('filters', __name__)

TAG_RE = re.compile(r'<[^>]+>')

@template_filters.app_template_filter('nl2br')
def nl2br(value):
    """Convert newlines to HTML line breaks."""
    if not value:
        return ""
    return Markup(escape(value).replace('\n', Markup('<br>')))

@template_filters.app_template_filter('or_not_confirmed')
def or_not_confirmed(value):
    """Render a missing event date or time as 'not confirmed'."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return NOT_CONFIRMED
    return value

@template_filters.app_template_filter('strip_html')
def strip_html(value):
    """Plain-text preview of rich-text content."""
    if not value:
        return ""
    return TAG_RE.sub('', value).strip()

@template_filters.app_template_filter('truncate_text')
def truncate_text(value, length=80):
    if not value:
        return ""
    value = str(value)
    if len(value) <= length:
        return value
    return value[:length].rstrip() + '...'
