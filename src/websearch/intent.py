"""
Search intent extraction.

An assistant asked to plan a web search answers with a block such as::

    <websearch>
      <question>latest python release</question>
      <question>python 3.13 changes</question>
      <links>https://docs.python.org/3/whatsnew/</links>
    </websearch>

A first question of ``summarize`` together with links asks for the links to
be fetched and summarized instead of searched.
"""

import logging

from bs4 import BeautifulSoup

from websearch.exceptions import handle_errors
from websearch.models import WebsearchIntent

logger = logging.getLogger(__name__)


@handle_errors("Failed to extract search intent", default_return=None, log_level="warning")
def extract_intent(text: str) -> WebsearchIntent | None:
    """
    Parse the ``<websearch>`` block of an assistant reply.

    Returns:
        WebsearchIntent, or None when the text holds no ``<websearch>`` block.
    """
    if not text or "<websearch" not in text:
        return None

    soup = BeautifulSoup(text, "html.parser")
    block = soup.find("websearch")
    if block is None:
        return None

    questions = tuple(q for q in (node.get_text(strip=True) for node in block.find_all("question")) if q)
    links = tuple(link for link in (node.get_text(strip=True) for node in block.find_all("links")) if link)
    logger.debug(f"Extracted {len(questions)} questions and {len(links)} links")
    return WebsearchIntent(questions=questions, links=links)
