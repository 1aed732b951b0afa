"""Newsletter rendering and per-subscriber personalization."""

from __future__ import annotations

import html
import re

from pubwon.models.blog_post import BlogPost
from pubwon.models.subscriber import EmailSubscriber

_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
_CODE_RE = re.compile(r"`([^`]+)`")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont,"
    " 'Segoe UI', Roboto, sans-serif;"
    " color: #212121; max-width: 640px; margin: 0 auto;"
)


def unsubscribe_url(app_url: str, subscriber: EmailSubscriber) -> str:
    return f"{app_url.rstrip('/')}/api/v1/unsubscribe/{subscriber.id}"


def personalize(
    content: str, subscriber: EmailSubscriber, app_url: str, *, escape: bool = False
) -> str:
    """Fill the ``{{FIRST_NAME}}``-style placeholders for one recipient.

    With *escape* the subscriber-supplied values are HTML-escaped, for the
    HTML body.
    """
    replacements = {
        "{{FIRST_NAME}}": subscriber.first_name or "there",
        "{{LAST_NAME}}": subscriber.last_name or "",
        "{{EMAIL}}": subscriber.email,
        "{{UNSUBSCRIBE_URL}}": unsubscribe_url(app_url, subscriber),
    }
    for placeholder, value in replacements.items():
        content = content.replace(placeholder, html.escape(value) if escape else value)
    return content


def render_newsletter(post: BlogPost, app_url: str) -> tuple[str, str, str]:
    """Return (subject, html_body, text_body) with placeholders left in."""
    post_url = f"{app_url.rstrip('/')}/blog/{post.slug}"
    subject = post.title

    text_body = "\n".join(
        [
            "Hi {{FIRST_NAME}},",
            "",
            post.excerpt or "",
            "",
            post.content.strip(),
            "",
            f"Read it online: {post_url}",
            "",
            "Unsubscribe: {{UNSUBSCRIBE_URL}}",
        ]
    )

    html_body = f"""\
<html>
<body style="{_BODY_STYLE}">
<p>Hi {{{{FIRST_NAME}}}},</p>
{_markdown_to_html(post.content)}
<p><a href="{html.escape(post_url)}">Read it online</a></p>
<hr style="border: none; border-top: 1px solid #e0e0e0; margin: 24px 0;">
<p style="color: #757575; font-size: 12px;">
You are receiving this because you subscribed with {{{{EMAIL}}}}.
<a href="{{{{UNSUBSCRIBE_URL}}}}">Unsubscribe</a>
</p>
</body>
</html>"""

    return subject, html_body, text_body


def _inline(text: str) -> str:
    out = html.escape(text, quote=False)
    out = _CODE_RE.sub(r"<code>\1</code>", out)
    return _LINK_RE.sub(lambda m: f'<a href="{html.escape(m.group(2))}">{m.group(1)}</a>', out)


def _markdown_to_html(markdown: str) -> str:
    """Headings, bullet lists and paragraphs; enough for generated digests."""
    parts: list[str] = []
    in_list = False
    for raw in markdown.splitlines():
        line = raw.rstrip()
        if line.startswith("- "):
            if not in_list:
                parts.append("<ul>")
                in_list = True
            parts.append(f"<li>{_inline(line[2:])}</li>")
            continue
        if in_list:
            parts.append("</ul>")
            in_list = False
        if not line:
            continue
        if line.startswith("## "):
            parts.append(f"<h3>{_inline(line[3:])}</h3>")
        elif line.startswith("# "):
            parts.append(f"<h2>{_inline(line[2:])}</h2>")
        elif line == "---":
            parts.append("<hr>")
        else:
            parts.append(f"<p>{_inline(line)}</p>")
    if in_list:
        parts.append("</ul>")
    return "\n".join(parts)
