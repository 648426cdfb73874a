"""
Utility functions for testing.
"""

import json
from typing import Any, Dict, Optional

import requests


def make_response(
    status_code: int = 200,
    body: Any = None,
    text: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    url: str = "https://api.example.com/"
) -> requests.Response:
    """
    Build a real requests.Response without touching the network.

    Args:
        status_code: HTTP status
        body: JSON-serializable body
        text: Raw body, used when ``body`` is None
        headers: Response headers

    Returns:
        Response whose raise_for_status behaves like a live one
    """
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"

    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = b""

    response.headers.update(headers or {})
    return response


def http_error(
    status_code: int,
    body: Any = None,
    text: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None
) -> requests.HTTPError:
    """HTTPError carrying a response, as raise_for_status produces it."""
    response = make_response(status_code, body=body, text=text, headers=headers)
    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        return e
    raise AssertionError(f"Status {status_code} does not raise")


def assert_dict_subset(subset: Dict, superset: Dict) -> None:
    """
    Assert that subset is a subset of superset.

    Args:
        subset: Dictionary that should be subset
        superset: Dictionary that should be superset
    """
    for key, value in subset.items():
        assert key in superset, f"Key {key} not found in superset"
        assert superset[key] == value, f"Value mismatch for key {key}"
