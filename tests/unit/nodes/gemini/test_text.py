import pytest

from geminiflow.nodes.exceptions import NoTextInResponseException
from geminiflow.nodes.gemini.properties import GenerationOptions, Message
from geminiflow.nodes.gemini.text import NO_TEXT_IN_RESPONSE_DESCRIPTION, build_config, build_contents, generate_text


@pytest.fixture
def conversation():
    return [
        Message(role="user", prompt="Hello"),
        Message(role="model", prompt="Hi! How can I help?"),
        Message(role="user", prompt="Tell me a joke"),
    ]


def test_build_contents_keeps_turn_order(conversation):
    assert build_contents(conversation) == [
        {"role": "user", "parts": [{"text": "Hello"}]},
        {"role": "model", "parts": [{"text": "Hi! How can I help?"}]},
        {"role": "user", "parts": [{"text": "Tell me a joke"}]},
    ]


def test_build_config_without_options():
    assert build_config(GenerationOptions()) == {
        "system_instruction": None,
        "temperature": None,
        "max_output_tokens": None,
        "top_p": None,
        "top_k": None,
        "frequency_penalty": None,
        "presence_penalty": None,
        "thinking_config": None,
        "safety_settings": None,
    }


def test_build_config_with_options():
    options = GenerationOptions.model_validate(
        {
            "systemInstruction": "Answer briefly.",
            "temperature": 0.2,
            "maxOutputTokens": 256,
            "topP": 0.9,
            "topK": 40,
            "frequencyPenalty": 0.1,
            "presencePenalty": 0.3,
            "thinkingConfig": {"includeThoughts": True, "thinkingBudget": 1024},
            "safetySettings": {
                "settings": [
                    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
                    {"category": "HARM_CATEGORY_HATE_SPEECH"},
                ]
            },
        }
    )

    assert build_config(options) == {
        "system_instruction": {"parts": [{"text": "Answer briefly."}]},
        "temperature": 0.2,
        "max_output_tokens": 256,
        "top_p": 0.9,
        "top_k": 40,
        "frequency_penalty": 0.1,
        "presence_penalty": 0.3,
        "thinking_config": {"include_thoughts": True, "thinking_budget": 1024},
        "safety_settings": [
            {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
            {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
        ],
    }


def test_build_config_omits_empty_system_instruction():
    assert build_config(GenerationOptions(system_instruction=""))["system_instruction"] is None


def test_build_config_with_empty_safety_settings_wrapper():
    assert build_config(GenerationOptions.model_validate({"safetySettings": {}}))["safety_settings"] is None


def test_generate_text_simplified(mock_genai_client, conversation, mock_gemini_response_text):
    output = generate_text(
        mock_genai_client, model="gemini-2.0-flash", messages=conversation, options=GenerationOptions(), simplify=True
    )

    assert output == [{"json": {"response": mock_gemini_response_text}}]
    mock_genai_client.models.generate_content.assert_called_once_with(
        model="gemini-2.0-flash",
        contents=build_contents(conversation),
        config=build_config(GenerationOptions()),
    )


def test_generate_text_full_output(mock_genai_client, conversation, mock_gemini_response):
    output = generate_text(
        mock_genai_client, model="gemini-2.0-flash", messages=conversation, options=GenerationOptions()
    )

    assert len(output) == 1
    record = output[0]["json"]
    assert set(record) == {"candidates", "usageMetadata", "modelVersion", "responseId"}
    assert record["candidates"] == [
        candidate.model_dump(mode="json", by_alias=True, exclude_none=True)
        for candidate in mock_gemini_response.candidates
    ]
    assert record["candidates"][0]["content"]["parts"] == [{"text": "Hi there!"}]
    assert record["usageMetadata"]["totalTokenCount"] == 5
    assert record["modelVersion"] == "gemini-2.0-flash"
    assert record["responseId"] == "mocked_response_id"


def test_generate_text_with_plain_response_values(mocker):
    response = mocker.MagicMock(
        text="plain",
        candidates=[{"index": 0}, {"index": 1}],
        usage_metadata={"totalTokenCount": 7},
        model_version="gemini-2.0-flash",
        response_id="plain_response_id",
    )
    client = mocker.MagicMock()
    client.models.generate_content.return_value = response

    output = generate_text(client, model="gemini-2.0-flash", messages=[], options=GenerationOptions())

    assert output == [
        {
            "json": {
                "candidates": [{"index": 0}, {"index": 1}],
                "usageMetadata": {"totalTokenCount": 7},
                "modelVersion": "gemini-2.0-flash",
                "responseId": "plain_response_id",
            }
        }
    ]


def test_generate_text_without_messages(mock_genai_client):
    generate_text(mock_genai_client, model="gemini-2.0-flash", messages=[], options=GenerationOptions())

    mock_genai_client.models.generate_content.assert_called_once()
    assert mock_genai_client.models.generate_content.call_args.kwargs["contents"] == []


@pytest.mark.parametrize("simplify", [True, False])
def test_generate_text_without_text_in_response(mock_genai_client, mock_gemini_blocked_response, simplify):
    mock_genai_client.models.generate_content.return_value = mock_gemini_blocked_response
    assert mock_gemini_blocked_response.candidates

    with pytest.raises(NoTextInResponseException) as exc_info:
        generate_text(
            mock_genai_client,
            model="gemini-2.0-flash",
            messages=[Message(prompt="Hello")],
            options=GenerationOptions(),
            simplify=simplify,
        )

    assert exc_info.value.code == "NO_TEXT_IN_RESPONSE"
    assert exc_info.value.description == NO_TEXT_IN_RESPONSE_DESCRIPTION
    assert "retry on fail" in str(exc_info.value)
    mock_genai_client.models.generate_content.assert_called_once()
