"""
Tests for the article provider.

HTTP is faked with a stub session; nothing here touches the network.
"""

from unittest.mock import MagicMock

import pytest
import requests

from errors import MalformedInput, ProviderFailure
from wikipedia import fetch_article, load_article_graph, parse_article_title


def fake_session(*payloads):
    """Session whose successive GETs return ``payloads`` as JSON."""
    responses = []
    for payload in payloads:
        response = MagicMock()
        response.raise_for_status.return_value = None
        response.json.return_value = payload
        responses.append(response)
    session = MagicMock()
    session.get.side_effect = responses
    return session


def page_payload(title, links, cont=None):
    payload = {
        'query': {
            'pages': {
                '123': {'pageid': 123, 'ns': 0, 'title': title,
                        'links': [{'ns': 0, 'title': link} for link in links]},
            }
        }
    }
    if cont:
        payload['continue'] = cont
    return payload


class TestParseArticleTitle:
    """Tests for URL/title parsing."""

    @pytest.mark.parametrize("reference, expected", [
        ("https://en.wikipedia.org/wiki/Artificial_intelligence", "Artificial intelligence"),
        ("https://en.wikipedia.org/wiki/C%2B%2B", "C++"),
        ("https://en.wikipedia.org/wiki/Graph_theory?action=view#History", "Graph theory"),
        ("https://en.wikipedia.org/wiki/Graph_theory/", "Graph theory"),
        ("/wiki/Force-directed_graph_drawing", "Force-directed graph drawing"),
        ("  Graph_drawing ", "Graph drawing"),
    ])
    def test_parses(self, reference, expected):
        assert parse_article_title(reference) == expected

    @pytest.mark.parametrize("reference", ["", "   ", "https://en.wikipedia.org/"])
    def test_empty_rejected(self, reference):
        with pytest.raises(MalformedInput):
            parse_article_title(reference)


class TestFetchArticle:
    """Tests for the MediaWiki query."""

    def test_returns_canonical_title_and_links(self):
        session = fake_session(page_payload("Graph theory", ["Vertex (graph theory)", "Edge"]))

        article = fetch_article("https://en.wikipedia.org/wiki/graph_theory", session=session)

        assert article.title == "Graph theory"
        assert article.outbound_titles == ["Vertex (graph theory)", "Edge"]
        params = session.get.call_args.kwargs['params']
        assert params['titles'] == "graph theory"
        assert params['prop'] == 'links'
        assert 'User-Agent' in session.get.call_args.kwargs['headers']

    def test_follows_continuation(self):
        session = fake_session(
            page_payload("Graph theory", ["A", "B"], cont={'plcontinue': '123|0|C', 'continue': '||'}),
            page_payload("Graph theory", ["C"]),
        )

        article = fetch_article("Graph theory", session=session)

        assert article.outbound_titles == ["A", "B", "C"]
        second_params = session.get.call_args_list[1].kwargs['params']
        assert second_params['plcontinue'] == '123|0|C'

    def test_link_limit(self):
        session = fake_session(
            page_payload("Graph theory", ["A", "B", "C"], cont={'plcontinue': 'x', 'continue': '||'}),
        )
        article = fetch_article("Graph theory", session=session, link_limit=2)
        assert article.outbound_titles == ["A", "B"]
        assert session.get.call_count == 1

    def test_missing_article(self):
        session = fake_session({'query': {'pages': {'-1': {'ns': 0, 'title': 'Nope', 'missing': ''}}}})
        with pytest.raises(ProviderFailure, match="not found"):
            fetch_article("Nope", session=session)

    def test_no_pages(self):
        session = fake_session({'batchcomplete': ''})
        with pytest.raises(ProviderFailure):
            fetch_article("Anything", session=session)

    @pytest.mark.parametrize("payload", [
        ["unexpected"],
        "unexpected",
        42,
        {'query': ["unexpected"]},
        {'query': {'pages': ["unexpected"]}},
        {'query': {'pages': {'123': "unexpected"}}},
    ])
    def test_payload_of_wrong_shape(self, payload):
        session = fake_session(payload)
        with pytest.raises(ProviderFailure):
            fetch_article("Graph theory", session=session)

    def test_malformed_link_entries_skipped(self):
        payload = page_payload("Graph theory", ["Edge"])
        payload['query']['pages']['123']['links'].append("not a link")
        payload['continue'] = "not a continuation"
        article = fetch_article("Graph theory", session=fake_session(payload))
        assert article.outbound_titles == ["Edge"]

    def test_network_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(ProviderFailure):
            fetch_article("Graph theory", session=session)

    def test_http_error(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        session = MagicMock()
        session.get.return_value = response
        with pytest.raises(ProviderFailure):
            fetch_article("Graph theory", session=session)

    def test_unreadable_json(self):
        response = MagicMock()
        response.raise_for_status.return_value = None
        response.json.side_effect = ValueError("Expecting value")
        session = MagicMock()
        session.get.return_value = response
        with pytest.raises(ProviderFailure):
            fetch_article("Graph theory", session=session)


def test_load_article_graph_builds_star():
    session = fake_session(page_payload("Graph theory", ["Edge", "Edge", "Graph theory", "Vertex"]))

    article, graph = load_article_graph("Graph theory", session=session)

    assert article.title == "Graph theory"
    assert list(graph.nodes) == ["Graph theory", "Edge", "Vertex"]
    assert graph.number_of_edges() == 2
