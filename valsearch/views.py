"""
File: views.py
Purpose: Render the search page (form + result list) as HTML.
"""

from html import escape
from typing import List, Optional

from .schemas.records import Record

VAL_URL = "https://val.town/v/{id}"

_PAGE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Val Town Search</title>
<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/water.css@2/out/water.css">
</head>
<body>
<main>
<h1>Val Town Search</h1>
<form action="/" method="get">
<label for="q">Query
<input type="text" name="q" id="q" autocomplete="off" value="{q}">
</label>
</form>
{results}
</main>
</body>
</html>
"""

_RESULT = """<li>
<div style="display: grid; grid-template-rows: auto 1fr; padding: 1rem; box-shadow: #00000030 4px 4px 8px">
<div style="display: flex; gap: 1rem; align-items: center">
<a href="{url}">{handle}.{name}</a>
</div>
<div><pre>{body}</pre></div>
</div>
</li>"""


def _render_record(record: Record) -> str:
    return _RESULT.format(
        url=escape(VAL_URL.format(id=record.id)),
        handle=escape(record.handle),
        name=escape(record.name),
        body=escape(record.body),
    )


def render_search_page(q: Optional[str], results: List[Record]) -> str:
    """Full HTML document; the results section is omitted when there is nothing to show."""
    section = ""
    if results:
        items = "\n".join(_render_record(r) for r in results)
        section = (
            "<article>\n<h2>Search Results</h2>\n"
            '<ol style="display: flex; flex-direction: column; gap: 1rem">\n'
            f"{items}\n</ol>\n</article>"
        )
    return _PAGE.format(q=escape(q or ""), results=section)
