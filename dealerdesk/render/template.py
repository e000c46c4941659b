"""Print document template wrapped around caller HTML fragments."""

from __future__ import annotations

import html
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dealerdesk.render.options import RenderOptions

_PAGE_SIZE = {"A4": "A4", "Letter": "letter"}
_HEAD_OPEN = re.compile(r"<head\b[^>]*>", re.IGNORECASE)
_HTML_OPEN = re.compile(r"<html\b[^>]*>", re.IGNORECASE)

# Screen layouts are authored against wide breakpoints; print width is
# narrower, so wide-breakpoint grid/flex utilities are pinned for print.
_RESPONSIVE_RESETS = "\n".join(
    [
        *(
            f"  .lg\\:grid-cols-{n}, .md\\:grid-cols-{n} "
            f"{{ grid-template-columns: repeat({n}, minmax(0, 1fr)) !important; }}"
            for n in range(2, 5)
        ),
        "  .lg\\:flex-row, .md\\:flex-row { flex-direction: row !important; }",
        "  .lg\\:col-span-2, .md\\:col-span-2 { grid-column: span 2 / span 2 !important; }",
    ]
)

PRINT_CSS = f"""
html, body {{
  margin: 0;
  padding: 0;
  background: #ffffff;
}}
* {{
  -webkit-print-color-adjust: exact !important;
  print-color-adjust: exact !important;
  color-adjust: exact !important;
  box-sizing: border-box;
}}
img {{ max-width: 100%; }}
.avoid-break-inside {{ page-break-inside: avoid; break-inside: avoid; }}
.page-break {{ page-break-after: always; break-after: page; }}
@media print {{
  .grid {{ display: grid !important; }}
  .flex {{ display: flex !important; }}
  .no-print {{ display: none !important; }}
  table, tr, img {{ page-break-inside: avoid; break-inside: avoid; }}
{_RESPONSIVE_RESETS}
}}
""".strip()


def page_rule(options: RenderOptions) -> str:
    """`@page` rule matching the requested paper size, orientation and margins."""
    m = options.margins
    size = f"{_PAGE_SIZE[options.format]} {options.orientation}"
    return f"@page {{ size: {size}; margin: {m.top} {m.right} {m.bottom} {m.left}; }}"


def _template_head(options: RenderOptions, css_framework_url: str, title: str | None) -> str:
    head = [
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
    ]
    if title is not None:
        head.append(f"<title>{html.escape(title)}</title>")
    if css_framework_url:
        head.append(f'<script src="{html.escape(css_framework_url, quote=True)}"></script>')
    head.append(f"<style>\n{page_rule(options)}\n{PRINT_CSS}\n</style>")
    return "\n".join(head)


def compose_document(
    fragment: str,
    options: RenderOptions,
    *,
    css_framework_url: str = "",
    title: str = "Document",
) -> str:
    """
    Wrap an HTML fragment in a complete printable document.

    The fragment is inserted verbatim after the template styles, so any
    `@page` or style rules it carries take precedence over the defaults.
    """
    head = _template_head(options, css_framework_url, title)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        f"<head>\n{head}\n</head>\n"
        f"<body>\n{fragment}\n</body>\n"
        "</html>\n"
    )


def compose(
    html_text: str,
    options: RenderOptions,
    *,
    css_framework_url: str = "",
    title: str = "Document",
) -> str:
    """
    Prepare caller HTML for printing.

    Fragments are wrapped with `compose_document`. Complete documents keep
    their own markup and get the template head injected first thing inside
    `<head>`, ahead of their own styles.
    """
    head_match = _HEAD_OPEN.search(html_text)
    html_match = _HTML_OPEN.search(html_text)
    if not head_match and not html_match:
        return compose_document(
            html_text,
            options,
            css_framework_url=css_framework_url,
            title=title,
        )

    injected = _template_head(options, css_framework_url, title=None)
    if head_match:
        at = head_match.end()
        return html_text[:at] + "\n" + injected + html_text[at:]
    at = html_match.end()
    return html_text[:at] + "\n<head>\n" + injected + "\n</head>" + html_text[at:]
