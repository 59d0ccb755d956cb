from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Resource(str, Enum):
    TEXT = "text"
    AUDIO = "audio"


class Operation(str, Enum):
    GENERATE_TEXT = "generateText"
    GENERATE_AUDIO = "generateAudio"


OPERATIONS_BY_RESOURCE = {
    Resource.TEXT: (Operation.GENERATE_TEXT,),
    Resource.AUDIO: (Operation.GENERATE_AUDIO,),
}


def default_operation(resource: Resource) -> Operation:
    """The operation used when none is selected: the first one the resource offers."""
    return OPERATIONS_BY_RESOURCE[Resource(resource)][0]


class MessageRole(str, Enum):
    USER = "user"
    MODEL = "model"


class HarmCategory(str, Enum):
    """Harm categories a safety setting can block."""

    CIVIC_INTEGRITY = "HARM_CATEGORY_CIVIC_INTEGRITY"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    IMAGE_DANGEROUS_CONTENT = "HARM_CATEGORY_IMAGE_DANGEROUS_CONTENT"
    IMAGE_HARASSMENT = "HARM_CATEGORY_IMAGE_HARASSMENT"
    IMAGE_HATE = "HARM_CATEGORY_IMAGE_HATE"
    IMAGE_SEXUALLY_EXPLICIT = "HARM_CATEGORY_IMAGE_SEXUALLY_EXPLICIT"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    UNSPECIFIED = "HARM_CATEGORY_UNSPECIFIED"


class HarmBlockThreshold(str, Enum):
    """Blocking thresholds of a safety setting."""

    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_NONE = "BLOCK_NONE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    UNSPECIFIED = "HARM_BLOCK_THRESHOLD_UNSPECIFIED"
    OFF = "OFF"


class HostModel(BaseModel):
    """Base for parameter models that accept the host's camelCase names."""

    model_config = ConfigDict(populate_by_name=True)


class Message(HostModel):
    role: MessageRole = Field(default=MessageRole.USER, description="The role of the message sender")
    prompt: str = Field(default="", description="The content of the message")


class Messages(HostModel):
    """The conversation history, in chronological turn order."""

    message: list[Message] = Field(default_factory=list)


class SafetySetting(HostModel):
    category: HarmCategory = Field(
        default=HarmCategory.UNSPECIFIED,
        description="The category of the harm content that the model is protected against",
    )
    threshold: HarmBlockThreshold = Field(
        default=HarmBlockThreshold.BLOCK_NONE, description="The threshold for blocking content"
    )


class SafetySettings(HostModel):
    settings: list[SafetySetting] | None = None


class ThinkingConfig(HostModel):
    include_thoughts: bool = Field(
        default=False,
        alias="includeThoughts",
        description="Whether to include thoughts in the response. Thoughts are returned only if the model "
        "supports thought and thoughts are available.",
    )
    thinking_budget: int = Field(
        default=-1,
        alias="thinkingBudget",
        description="The thinking budget in tokens. 0 is DISABLED. -1 is AUTOMATIC. "
        "The default values and allowed ranges are model dependent.",
    )


class GenerationOptions(HostModel):
    """
    Optional generation parameters.

    Options left unset are sent as None so the provider applies its own defaults. The `uiDefault`
    schema extra is the value the host prefills once the user adds the option.
    """

    frequency_penalty: float | None = Field(
        default=None,
        alias="frequencyPenalty",
        description="Penalizes repeated tokens in the response.",
        json_schema_extra={"uiDefault": 0},
    )
    max_output_tokens: int | None = Field(
        default=None,
        alias="maxOutputTokens",
        description="The maximum number of tokens to generate in the response",
        json_schema_extra={"uiDefault": 16384},
    )
    presence_penalty: float | None = Field(
        default=None,
        alias="presencePenalty",
        description="Penalizes new tokens based on whether they appear in the text so far.",
        json_schema_extra={"uiDefault": 0},
    )
    safety_settings: SafetySettings | None = Field(
        default=None,
        alias="safetySettings",
        description="Safety settings in the request to block unsafe content in the response",
    )
    system_instruction: str | None = Field(
        default=None,
        alias="systemInstruction",
        description="Instructions for the model to steer it toward better performance",
    )
    temperature: float | None = Field(
        default=None,
        ge=0,
        le=2,
        description="Value that controls the degree of randomness in token selection.",
        json_schema_extra={"uiDefault": 1},
    )
    thinking_config: ThinkingConfig | None = Field(default=None, alias="thinkingConfig")
    top_k: float | None = Field(
        default=None,
        alias="topK",
        description="For each token selection step, the top_k tokens with the highest probabilities are sampled.",
        json_schema_extra={"uiDefault": 1},
    )
    top_p: float | None = Field(
        default=None,
        alias="topP",
        description="Tokens are selected from the most to least probable until the sum of their probabilities "
        "equals this value.",
        json_schema_extra={"uiDefault": 1},
    )


class AdditionalKey(HostModel):
    key: str = Field(default="", description="An additional API key to use with the Gemini API")


class AdditionalKeys(HostModel):
    keys: list[AdditionalKey] = Field(default_factory=list)


class GeminiParameters(HostModel):
    """
    Parameters the Gemini node declares to the host.

    `round_robin_keys` and `additional_keys` are accepted for compatibility with stored workflows
    but execution always uses the connection's API key.
    """

    round_robin_keys: bool = Field(default=False, alias="roundRobinKeys")
    additional_keys: AdditionalKeys = Field(default_factory=AdditionalKeys, alias="additionalKeys")
    resource: Resource = Field(default=Resource.TEXT, description="The resource to use with the Gemini API")
    operation: Operation | None = Field(
        default=None,
        description="The operation to run. Defaults to the first operation of the resolved resource.",
    )
    model: str = Field(
        default="",
        description="The model to use with the Gemini API. Choose from the list, or specify an ID.",
        json_schema_extra={"loadOptionsMethod": "getModels"},
    )
    messages: Messages = Field(
        default_factory=lambda: Messages(message=[Message()]),
        description="The messages to send to the model. The conversation history.",
    )
    simplify_output: bool = Field(
        default=False,
        alias="simplifyOutput",
        description="Whether to simplify the output to only return the text of the response",
    )
    options: GenerationOptions = Field(default_factory=GenerationOptions)

