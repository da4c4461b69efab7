"""
Article provider: resolves an article reference and lists the titles it links to.

Talks to the MediaWiki query API. Everything that can go wrong on the wire
surfaces as ProviderFailure; a reference with no usable title is MalformedInput.
"""

import logging
import os
from collections import namedtuple
from urllib.parse import unquote, urlparse

import requests

from errors import MalformedInput, ProviderFailure
from graph_model import build_graph

logger = logging.getLogger(__name__)

API_URL = os.environ.get("WIKIGRAPH_API_URL", "https://en.wikipedia.org/w/api.php")
LINK_LIMIT = int(os.environ.get("WIKIGRAPH_LINK_LIMIT", "500"))
USER_AGENT = "WikiGraph/1.0 (article link visualizer)"

ArticleRecord = namedtuple("ArticleRecord", ["title", "outbound_titles"])


def parse_article_title(reference):
    """``https://en.wikipedia.org/wiki/Artificial_intelligence`` -> ``Artificial intelligence``.

    Bare titles pass through with underscores turned into spaces.
    """
    reference = (reference or "").strip()
    if "://" in reference or reference.startswith("/wiki/"):
        path = urlparse(reference).path
        segment = path.rstrip("/").split("/")[-1]
    else:
        segment = reference
    title = unquote(segment).replace("_", " ").strip()
    if not title:
        raise MalformedInput(f"No article title in {reference!r}")
    return title


def fetch_article(reference, session=None, api_url=None, link_limit=None, timeout=10):
    title = parse_article_title(reference)
    api_url = api_url or API_URL
    link_limit = link_limit or LINK_LIMIT
    http = session or requests

    params = {
        'action': 'query',
        'titles': title,
        'prop': 'links',
        'pllimit': min(link_limit, 500),
        'redirects': 1,
        'format': 'json',
    }
    headers = {'User-Agent': USER_AGENT}

    canonical = None
    links = []
    while True:
        data = _get_json(http, api_url, params, headers, timeout)
        page = _single_page(data, title)
        canonical = page.get('title', title)
        links.extend(link['title'] for link in page.get('links') or [] if isinstance(link, dict) and 'title' in link)

        cont = data.get('continue')
        if not isinstance(cont, dict) or len(links) >= link_limit:
            break
        params = {**params, **cont}

    links = links[:link_limit]
    logger.info(f"Fetched '{canonical}' with {len(links)} links")
    return ArticleRecord(canonical, links)


def load_article_graph(reference, **kwargs):
    article = fetch_article(reference, **kwargs)
    return article, build_graph(article.title, article.outbound_titles)


def _get_json(http, api_url, params, headers, timeout):
    try:
        response = http.get(api_url, params=params, headers=headers, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except requests.RequestException as e:
        logger.error(f"Article request failed: {e}")
        raise ProviderFailure(f"Failed to fetch article: {e}") from e
    except ValueError as e:
        logger.error(f"Article response is not JSON: {e}")
        raise ProviderFailure("Article provider returned an unreadable response") from e


def _single_page(data, title):
    if not isinstance(data, dict):
        raise ProviderFailure("Article provider returned an unreadable response")
    query = data.get('query') or {}
    pages = query.get('pages') if isinstance(query, dict) else None
    if not pages:
        raise ProviderFailure(f"No page data returned for '{title}'")
    if not isinstance(pages, dict):
        raise ProviderFailure("Article provider returned an unreadable response")
    page = next(iter(pages.values()))
    if not isinstance(page, dict):
        raise ProviderFailure("Article provider returned an unreadable response")
    if 'missing' in page or 'invalid' in page:
        raise ProviderFailure("Article not found")
    return page
