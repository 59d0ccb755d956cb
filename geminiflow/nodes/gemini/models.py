from typing import Any

import requests

from geminiflow.connections import GEMINI_API_HOST
from geminiflow.nodes.exceptions import MissingCapabilityException, MissingCredentialsException, ModelListException
from geminiflow.utils.logger import logger

MODELS_PATH = "/v1beta/models"
MODEL_NAME_PREFIX = "models/"
GENERATE_CONTENT_METHOD = "generateContent"


def list_models(api_key: str | None, client: Any = requests, host: str = GEMINI_API_HOST) -> list[str]:
    """
    List the models of the Gemini catalog that support text generation.

    Args:
        api_key (str | None): The Gemini API key, sent as the `key` query parameter.
        client (Any): Request helper exposing `request(method, url, params)`. Defaults to `requests`.
        host (str): The Gemini API host, optionally with a base path.

    Returns:
        list[str]: Model identifiers without the `models/` prefix, in catalog order.

    Raises:
        MissingCredentialsException: If no API key is provided.
        MissingCapabilityException: If no request helper is available.
        ModelListException: If the catalog request fails or returns an unexpected body.
    """
    if not api_key:
        raise MissingCredentialsException("No Gemini API credentials found")

    if client is None or not callable(getattr(client, "request", None)):
        raise MissingCapabilityException("No helpers found")

    url = f"{host.rstrip('/')}{MODELS_PATH}"
    try:
        response = client.request(method="GET", url=url, params={"key": api_key})
        response.raise_for_status()
        catalog = response.json().get("models", [])
        models = [
            model["name"].removeprefix(MODEL_NAME_PREFIX)
            for model in catalog
            if GENERATE_CONTENT_METHOD in (model.get("supportedGenerationMethods") or [])
        ]
    except Exception as e:
        # The request URL carries the API key, so only the error type is logged.
        logger.error(f"Failed to list Gemini models. Error type: {type(e).__name__}")
        raise ModelListException("Error getting models", cause=e) from e

    logger.debug(f"Listed {len(models)} Gemini models supporting '{GENERATE_CONTENT_METHOD}'")
    return models
