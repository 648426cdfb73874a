"""
Classification of webhook creation failures.
"""
import re

import requests

from git_api.core.exceptions import (
    WebhookError,
    WebhookAlreadyExists,
    UnknownWebhookError,
)

HOOK_EXISTS_PATTERN = re.compile(r"Hook already exists")


def classify_webhook_error(error: BaseException) -> WebhookError:
    """
    Map a failed webhook request onto the webhook error taxonomy.

    A response body containing "Hook already exists" becomes
    ``WebhookAlreadyExists``; anything else becomes ``UnknownWebhookError``.
    The original error is kept as ``cause``.
    """
    response = getattr(error, "response", None)

    if isinstance(error, requests.RequestException) and response is not None:
        if HOOK_EXISTS_PATTERN.search(response.text or ""):
            return WebhookAlreadyExists("Webhook already exists on repository", error)
        return UnknownWebhookError("Unknown error creating webhook", error)

    return UnknownWebhookError(str(error) or "Unknown error creating webhook", error)
