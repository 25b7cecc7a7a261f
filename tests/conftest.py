import json
import textwrap

import pytest

LISTING_HTML = textwrap.dedent(
    """\
    <html>
      <body>
        <div id="feedler">
          <div class="event" data-id="42">
            <div class="title">Test Headline</div>
            <a class="comment-link" data-id="42" href="https://liveuamap.com/en/2024/42-test">link</a>
          </div>
          <div class="event" data-id="41">
            <div class="title">Older Headline</div>
          </div>
        </div>
      </body>
    </html>
    """
)

DETAIL_HTML = textwrap.dedent(
    """\
    <html>
      <body>
        <a class="source-link" href="https://example.com/original">source</a>
      </body>
    </html>
    """
)


@pytest.fixture
def listing_html():
    return LISTING_HTML


@pytest.fixture
def detail_html():
    return DETAIL_HTML


@pytest.fixture
def config_file(tmp_path):
    """Write a config document and return its path."""

    def _write(**document):
        document.setdefault("url", "https://discord.com/api/webhooks/1/token")
        path = tmp_path / "config.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
