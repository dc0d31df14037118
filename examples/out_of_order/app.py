"""Out-of-order streaming demo -- skeleton first, slow parts as they finish.

The page is rendered in order, but its main section is a Streamable: the
header, content and list render immediately with placeholders, then each
slow value arrives in the order it finishes (list item, content, title),
regardless of where it sits in the page.

Run:
    uvicorn app:app --reload
    # or: python app.py   (prints the chunks)
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from datetime import date

from slotstream import (
    Streamable,
    StreamingPageHandler,
    create_app,
    render_out_of_order,
    stream_in_order,
    streamable,
)


# Seconds per simulated second of work; tests shrink this.
TIME_SCALE = 1.0

PAGE_HEAD = """
<!DOCTYPE html>
<html>
  <head>
    <title>Out of Order Streaming Demo</title>
    <meta charset="utf8">
  </head>
  <body>
    <h1>Out of Order Streaming Demo</h1>
"""

PAGE_TAIL = """
  </body>
</html>
"""


async def timeout(seconds: float) -> None:
    await asyncio.sleep(seconds * TIME_SCALE)


async def title() -> str:
    await timeout(2.0)
    return "Hello, World!"


async def content() -> str:
    await timeout(1.0)
    return "This is some interesting text content."


async def second() -> str:
    await timeout(0.5)
    return "Second"


def year() -> str:
    return str(date.today().year)


def nested() -> Streamable:
    return streamable(
        [
            """
    <ul>
      <li>First</li>
      <li>""",
            """</li>
      <li>Third</li>
    </ul>
  """,
        ],
        second(),
    )


def main_section() -> Streamable:
    return streamable(
        [
            """
      <header>
        <h2>""",
            """</h2>
      </header>

      <main>
        """,
            """

        """,
            """
      </main>

      <footer>Copyright """,
            """</footer>
    """,
        ],
        title(),
        content(),
        nested(),
        year(),
    )


def render_page() -> AsyncIterator[str]:
    """Render the whole document; only the main section streams out of order."""
    return stream_in_order([PAGE_HEAD, PAGE_TAIL], render_out_of_order(main_section()))


app = create_app(StreamingPageHandler("/", render_page))


async def collect_chunks() -> list[str]:
    return [chunk async for chunk in render_page()]


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    for i, chunk in enumerate(asyncio.run(collect_chunks())):
        print(f"[chunk {i}] {chunk!r}")


if __name__ == "__main__":
    main()
