from __future__ import annotations

from html import escape

from .config import settings

_HOME_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{title}</title>
</head>
<body>
  <h1>{heading}</h1>
  <p>Served by {service} v{version}.</p>
</body>
</html>
"""


def render_home() -> str:
    return _HOME_TEMPLATE.format(
        title=escape(settings.page_title),
        heading=escape(settings.heading),
        service=escape(settings.service_name),
        version=escape(settings.version),
    )
