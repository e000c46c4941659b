"""FastAPI dependencies resolving the services attached to the app."""

from fastapi import Request

from dealerdesk.render.renderer import DocumentRenderer
from dealerdesk.search.aggregator import SearchAggregator


def get_aggregator(request: Request) -> SearchAggregator:
    return request.app.state.aggregator


def get_renderer(request: Request) -> DocumentRenderer:
    return request.app.state.renderer
