from abc import ABC, abstractmethod
from functools import cached_property, partial
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, Field, computed_field

from geminiflow.utils import generate_uuid
from geminiflow.utils.env import get_env_var
from geminiflow.utils.logger import logger

if TYPE_CHECKING:
    from google.genai import Client as GenAIClient


GEMINI_API_HOST = "https://generativelanguage.googleapis.com"


class BaseConnection(BaseModel, ABC):
    """Stored credentials of a provider, able to build the provider client."""

    id: str = Field(default_factory=generate_uuid)

    @computed_field
    @cached_property
    def type(self) -> str:
        return f"{self.__module__.rsplit('.', 1)[0]}.{self.__class__.__name__}"

    @abstractmethod
    def connect(self) -> Any:
        pass


class Gemini(BaseConnection):
    """
    Gemini API (Google AI Studio) credentials.

    Registered with the host as the `geminiApi` credential type, holding one password-typed
    `apiKey` property. The key is not checked here: an invalid key surfaces as a provider error.

    Attributes:
        api_key (str | None): The API key. Defaults to the 'GEMINI_API_KEY' environment variable.
        url (str): The API host. Defaults to the 'GEMINI_API_HOST' environment variable.
    """

    credential_name: ClassVar[str] = "geminiApi"
    display_name: ClassVar[str] = "Gemini API Key"

    api_key: str | None = Field(default_factory=partial(get_env_var, "GEMINI_API_KEY"))
    url: str = Field(default_factory=partial(get_env_var, "GEMINI_API_HOST", GEMINI_API_HOST))

    @classmethod
    def describe(cls) -> dict:
        """Describe the credential type to the host's secret store."""
        return {
            "name": cls.credential_name,
            "displayName": cls.display_name,
            "properties": [
                {
                    "displayName": "API Key",
                    "name": "apiKey",
                    "type": "string",
                    "typeOptions": {"password": True},
                    "default": "",
                    "required": True,
                }
            ],
        }

    def connect(self) -> "GenAIClient":
        # Import in runtime to save memory
        from google import genai

        client = genai.Client(api_key=self.api_key)
        logger.debug(f"Connected to Gemini with connection {self.id}")
        return client
