from markupsafe import Markup

from dashboard.utils.template_filters import nl2br, or_not_confirmed, strip_html, truncate_text


def test_or_not_confirmed():
    assert or_not_confirmed(None) == 'not confirmed'
    assert or_not_confirmed('  ') == 'not confirmed'
    assert or_not_confirmed('18:00') == '18:00'


def test_nl2br_escapes_then_breaks():
    result = nl2br('a<b>\nc')
    assert isinstance(result, Markup)
    assert result == 'a&lt;b&gt;<br>c'


def test_strip_html():
    assert strip_html('<p>Hello <b>there</b></p>') == 'Hello there'
    assert strip_html(None) == ''


def test_truncate_text():
    assert truncate_text('short') == 'short'
    assert truncate_text('a' * 10, length=4) == 'aaaa...'
    assert truncate_text(None) == ''
