import uuid

import pytest
from google.genai import types

from geminiflow import connections
from geminiflow.nodes.gemini import GeminiNode


@pytest.fixture
def mock_api_key():
    return "test_api_key"


@pytest.fixture
def gemini_connection(mock_api_key):
    return connections.Gemini(id=str(uuid.uuid4()), api_key=mock_api_key)


@pytest.fixture
def mock_gemini_response_text():
    return "Hi there!"


@pytest.fixture
def mock_gemini_response(mock_gemini_response_text):
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=[types.Part(text=mock_gemini_response_text)]),
                finish_reason=types.FinishReason.STOP,
                index=0,
            )
        ],
        usage_metadata=types.GenerateContentResponseUsageMetadata(
            prompt_token_count=2,
            candidates_token_count=3,
            total_token_count=5,
        ),
        model_version="gemini-2.0-flash",
        response_id="mocked_response_id",
    )


@pytest.fixture
def mock_gemini_blocked_response():
    return types.GenerateContentResponse(
        candidates=[types.Candidate(finish_reason=types.FinishReason.SAFETY, index=0)],
        model_version="gemini-2.0-flash",
        response_id="mocked_blocked_response_id",
    )


@pytest.fixture
def mock_genai_client(mocker, mock_gemini_response):
    client = mocker.MagicMock()
    client.models.generate_content.return_value = mock_gemini_response
    return client


@pytest.fixture
def gemini_node(gemini_connection, mock_genai_client):
    return GeminiNode(
        connection=gemini_connection,
        client=mock_genai_client,
        model="gemini-2.0-flash",
        messages={"message": [{"role": "user", "prompt": "Hello"}]},
        simplify_output=True,
    )


@pytest.fixture
def mock_models_catalog():
    return {
        "models": [
            {
                "name": "models/gemini-2.0-flash",
                "supportedGenerationMethods": ["generateContent", "countTokens"],
            },
            {
                "name": "models/text-embedding-004",
                "supportedGenerationMethods": ["embedContent"],
            },
            {
                "name": "models/gemini-1.5-pro",
                "supportedGenerationMethods": ["generateContent"],
            },
            {"name": "models/aqa"},
        ]
    }
