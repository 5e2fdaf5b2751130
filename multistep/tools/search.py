"""
Tavily Web Search Tool

Provides web search capabilities via the Tavily search API.
"""

import logging

import requests

from .parameters import ParametersBuilder
from .registry import ToolDefinition

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.tavily.com/search"
USER_AGENT = "multistep-tavily-tool/0.1"


def search(
    query: str,
    api_key: str,
    max_results: int = 5,
    endpoint: str = DEFAULT_ENDPOINT,
    timeout: int = 15,
) -> dict:
    """
    Search the web using Tavily.

    Args:
        query: The search query
        api_key: Tavily API key (sent as a bearer token)
        max_results: Maximum number of results, clamped to 1..10
        endpoint: Search endpoint URL
        timeout: Request timeout in seconds

    Returns:
        The parsed Tavily response, or ``{"raw": text}`` if the body
        was not JSON

    Raises:
        ValueError: If the query is empty or no API key is configured
        requests.RequestException: On transport failure or non-2xx status
    """
    if not query or not query.strip():
        raise ValueError("query is empty")
    if not api_key:
        raise ValueError("TAVILY_API_KEY not set")

    max_results = min(max(int(max_results), 1), 10)
    body = {
        "query": query.strip(),
        "max_results": max_results,
        "auto_parameters": False,
        "search_depth": "basic",
        "include_answer": True,
        "include_raw_content": False,
        "include_images": False,
        "include_image_descriptions": False,
        "include_favicon": False,
        "topic": "general",
    }

    response = requests.post(
        endpoint,
        json=body,
        headers={
            "Authorization": f"Bearer {api_key}",
            "User-Agent": USER_AGENT,
        },
        timeout=timeout,
    )
    logger.debug(
        "Tavily response: status=%s len=%d", response.status_code, len(response.text)
    )
    response.raise_for_status()

    try:
        return response.json()
    except ValueError:
        return {"raw": response.text}


def _handle_search(
    params, api_key: str, endpoint: str, timeout: int
) -> dict:
    """Handle search tool invocation with input validation."""
    query = params.get("query") if isinstance(params, dict) else None
    if not isinstance(query, str) or not query.strip():
        return {"error": "query is required string"}

    max_results = params.get("max_results", 5)
    if not isinstance(max_results, int) or isinstance(max_results, bool):
        max_results = 5

    try:
        return search(
            query=query,
            api_key=api_key,
            max_results=max_results,
            endpoint=endpoint,
            timeout=timeout,
        )
    except (ValueError, requests.exceptions.RequestException) as e:
        logger.error(f"Search failed: {e}")
        return {"error": str(e)}


def build_tavily_search_tool(
    api_key: str,
    endpoint: str = DEFAULT_ENDPOINT,
    timeout: int = 15,
) -> ToolDefinition:
    """Build the ``tavily_search`` tool."""
    params = (
        ParametersBuilder.new_object()
        .add_string("query", "Search query string to send to tavily")
        .add_integer(
            "max_results",
            "Maximum number of results to request (1-10)",
            minimum=1,
            maximum=10,
        )
        .required("query")
        .additional_properties(False)
        .build()
    )
    return ToolDefinition(
        name="tavily_search",
        description=(
            "Perform a web search via tavily API and return JSON results "
            "(pass query, optional max_results)."
        ),
        parameters=params,
        handler=lambda args: _handle_search(args, api_key, endpoint, timeout),
    )
