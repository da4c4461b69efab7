"""
Builds the article graph handed to the layout engine.

Graphs are plain networkx DiGraphs whose nodes carry a ``label`` attribute.
Node insertion order is kept by networkx and is what the engine iterates
over, so the same input always renders in the same order.
"""

import logging

import networkx as nx

from errors import MalformedInput

logger = logging.getLogger(__name__)


def build_graph(article_title, linked_titles):
    """Star graph: the article in the middle, one node per distinct link.

    Links equal to the article itself collapse onto the article node and do
    not produce a self-loop. Repeated links produce a single node and edge.
    """
    title = (article_title or "").strip()
    if not title:
        raise MalformedInput("Article title is empty")

    graph = nx.DiGraph()
    graph.add_node(title, label=title, root=True)

    for link in linked_titles or []:
        link = (link or "").strip()
        if not link or link == title:
            continue
        if link not in graph:
            graph.add_node(link, label=link, root=False)
        # add_edge on an existing pair is a no-op, which dedups edges too
        graph.add_edge(title, link)

    logger.info(f"Built graph for '{title}': {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges")
    return graph


def graph_from_records(nodes, edges):
    """Builds a graph from ``[{id, label}]`` / ``[{source, target}]`` records.

    Everything is validated before the graph is created, so a bad record
    never leaves a half-built graph behind.
    """
    seen = {}
    for record in nodes:
        uid = record.get("id")
        if not isinstance(uid, str) or not uid:
            raise MalformedInput(f"Node record without a valid id: {record!r}")
        if uid in seen:
            raise MalformedInput(f"Duplicate node id: {uid}")
        seen[uid] = record.get("label") or uid

    pairs = []
    for record in edges:
        source = record.get("source")
        target = record.get("target")
        for endpoint in (source, target):
            if endpoint not in seen:
                raise MalformedInput(f"Edge {source!r} -> {target!r} references unknown node {endpoint!r}")
        pairs.append((source, target))

    graph = nx.DiGraph()
    for uid, label in seen.items():
        graph.add_node(uid, label=label)
    graph.add_edges_from(pairs)
    return graph


def graph_to_records(graph):
    return {
        'nodes': [{'id': uid, 'label': data.get('label', uid)} for uid, data in graph.nodes(data=True)],
        'edges': [{'source': u, 'target': v} for u, v in graph.edges()],
    }
