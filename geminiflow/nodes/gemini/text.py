from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from geminiflow.nodes.exceptions import NoTextInResponseException
from geminiflow.nodes.gemini.properties import GenerationOptions, Message
from geminiflow.utils.logger import logger

if TYPE_CHECKING:
    from google.genai import Client as GenAIClient

NO_TEXT_IN_RESPONSE_DESCRIPTION = (
    "The model did not return any text in the response. This is common problem while using gemini with "
    "complex prompts. You can try activating retry on fail (error_handling.max_retries) for multiple times "
    "to avoid this error."
)


def build_contents(messages: list[Message]) -> list[dict[str, Any]]:
    """Map messages to provider turns, one text part per turn, keeping their order."""
    return [{"role": message.role.value, "parts": [{"text": message.prompt}]} for message in messages]


def build_config(options: GenerationOptions) -> dict[str, Any]:
    """
    Build the provider generation config.

    Unset options stay None so the provider applies its defaults. The system instruction is only
    sent when it is not empty and safety settings are taken from the `settings` list of their wrapper.

    Args:
        options (GenerationOptions): Generation options of the node.

    Returns:
        dict[str, Any]: Config accepted by `client.models.generate_content`.
    """
    system_instruction = None
    if options.system_instruction:
        system_instruction = {"parts": [{"text": options.system_instruction}]}

    safety_settings = None
    if options.safety_settings and options.safety_settings.settings is not None:
        safety_settings = [setting.model_dump(mode="json") for setting in options.safety_settings.settings]

    thinking_config = None
    if options.thinking_config:
        thinking_config = options.thinking_config.model_dump()

    return {
        "system_instruction": system_instruction,
        "temperature": options.temperature,
        "max_output_tokens": options.max_output_tokens,
        "top_p": options.top_p,
        "top_k": options.top_k,
        "frequency_penalty": options.frequency_penalty,
        "presence_penalty": options.presence_penalty,
        "thinking_config": thinking_config,
        "safety_settings": safety_settings,
    }


def _to_record_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_to_record_value(item) for item in value]
    return value


def generate_text(
    client: "GenAIClient",
    model: str,
    messages: list[Message],
    options: GenerationOptions,
    simplify: bool = False,
) -> list[dict[str, Any]]:
    """
    Generate text with a single provider call and map the response to one output record.

    Args:
        client (GenAIClient): The google-genai client.
        model (str): Provider model identifier.
        messages (list[Message]): Conversation in chronological order. May be empty.
        options (GenerationOptions): Generation options.
        simplify (bool): Return only the response text when True.

    Returns:
        list[dict[str, Any]]: Exactly one record, `{"json": {...}}`.

    Raises:
        NoTextInResponseException: If the response carries no text, even when candidates are present.
    """
    contents = build_contents(messages)
    config = build_config(options)

    logger.debug(f"Gemini generate content request: model '{model}', {len(contents)} turn(s)")
    result = client.models.generate_content(model=model, contents=contents, config=config)

    text = result.text
    if not text:
        raise NoTextInResponseException(description=NO_TEXT_IN_RESPONSE_DESCRIPTION)

    if simplify:
        return [{"json": {"response": text}}]

    return [
        {
            "json": {
                "candidates": _to_record_value(result.candidates),
                "usageMetadata": _to_record_value(result.usage_metadata),
                "modelVersion": result.model_version,
                "responseId": result.response_id,
            }
        }
    ]
