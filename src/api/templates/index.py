"""Entry page served for every non-API GET path."""

from html import escape

_INDEX = """
<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>TranscriptChat</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <meta http-equiv="refresh" content="3; url={ui_url}" />
    <style>
      body {{ font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; margin: 32px; max-width: 800px; }}
      h1 {{ margin: 0 0 16px; }}
      a {{ color: #4f46e5; }}
      code {{ background: #fafafa; padding: 2px 6px; border-radius: 4px; }}
    </style>
  </head>
  <body>
    <h1>🎙️ TranscriptChat</h1>
    <p>Upload a .wav or .mp3 file, read its transcript, and ask questions about it.</p>
    <p>Redirecting to the app at <a href="{ui_url}">{ui_url}</a>&hellip;</p>
    <p>API health: <a href="/api/health"><code>GET /api/health</code></a></p>
  </body>
</html>
"""


def render_index(ui_url: str) -> str:
    """Return the entry page linking to the Streamlit UI at ``ui_url``."""
    return _INDEX.format(ui_url=escape(ui_url, quote=True))
