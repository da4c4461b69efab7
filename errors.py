class WikiGraphError(Exception):
    """Base class for everything this application raises on purpose."""


class MalformedInput(WikiGraphError, ValueError):
    """Empty title, dangling edge reference or out-of-range parameter.

    Raised while building a graph or a parameter set, never from a tick.
    """


class ProviderFailure(WikiGraphError):
    """The article provider could not deliver an article (network, HTTP, payload)."""
