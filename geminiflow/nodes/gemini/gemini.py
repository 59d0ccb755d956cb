from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field

from geminiflow.connections import Gemini as GeminiConnection
from geminiflow.connections.connections import GEMINI_API_HOST
from geminiflow.connections.managers import ConnectionManager
from geminiflow.nodes.exceptions import MissingCredentialsException, NotSupportedException
from geminiflow.nodes.gemini.models import list_models
from geminiflow.nodes.gemini.properties import (
    OPERATIONS_BY_RESOURCE,
    GeminiParameters,
    Operation,
    Resource,
    default_operation,
)
from geminiflow.nodes.gemini.text import generate_text
from geminiflow.nodes.node import ConnectionNode
from geminiflow.nodes.types import ExecutionItem, NodeGroup
from geminiflow.runnables import RunnableConfig
from geminiflow.utils.logger import logger


class GeminiInputSchema(BaseModel):
    items: list[ExecutionItem] = Field(
        default_factory=list,
        description="Input items. Parameters resolved for the first item override the node configuration.",
    )


class GeminiNode(ConnectionNode, GeminiParameters):
    """
    A node that calls the Gemini API.

    The `text` resource generates text from a conversation. The `audio` resource is declared
    for stored workflows but is not supported yet.

    Attributes:
        group (Literal[NodeGroup.LLMS]): The group the node belongs to.
        name (str): The name of the node.
        connection (GeminiConnection | None): The connection to the Gemini API. A new connection
            is created if neither client nor connection is provided.
    """

    group: Literal[NodeGroup.LLMS] = NodeGroup.LLMS
    name: str = "Run Gemini"
    description: str = "Interact with Gemini API"
    connection: GeminiConnection | None = None

    input_schema: ClassVar[type[GeminiInputSchema]] = GeminiInputSchema
    LOAD_OPTIONS_METHODS: ClassVar[dict[str, str]] = {"getModels": "get_models"}

    def __init__(self, **kwargs):
        """Initialize the Gemini node.

        If neither client nor connection is provided in kwargs, a new Gemini connection is created.

        Args:
            **kwargs: Keyword arguments to initialize the node.
        """
        if kwargs.get("client") is None and kwargs.get("connection") is None:
            kwargs["connection"] = GeminiConnection()
        super().__init__(**kwargs)

    def init_components(self, connection_manager: ConnectionManager | None = None):
        """Build the client on first run. A connection without an API key is left unconnected."""
        if self.client is None and not (self.connection and self.connection.api_key):
            return
        super().init_components(connection_manager)

    @classmethod
    def describe(cls) -> dict[str, Any]:
        """Describe the node type and its parameter schema to the host."""
        return {
            "displayName": "Gemini",
            "name": "gemini",
            "group": ["transform"],
            "version": 1,
            "subtitle": '={{$parameter["resource"] + ": " + $parameter["operation"] }}',
            "description": "Interact with Gemini API",
            "defaults": {"name": "Run Gemini"},
            "inputs": ["main"],
            "outputs": ["main"],
            "credentials": [{"name": GeminiConnection.credential_name, "required": True}],
            "operations": {
                resource.value: [operation.value for operation in operations]
                for resource, operations in OPERATIONS_BY_RESOURCE.items()
            },
            "loadOptionsMethods": list(cls.LOAD_OPTIONS_METHODS),
            "properties": GeminiParameters.model_json_schema(by_alias=True),
        }

    def get_models(self) -> list[dict[str, str]]:
        """
        List the models usable for text generation as dropdown options.

        Returns:
            list[dict[str, str]]: Options with the model id as both name and value.
        """
        api_key = self.connection.api_key if self.connection else None
        host = self.connection.url if self.connection else GEMINI_API_HOST
        return [{"name": model, "value": model} for model in list_models(api_key, host=host)]

    def load_options(self, method: str) -> list[dict[str, str]]:
        """
        Run a load-options method declared by the parameter schema.

        Args:
            method (str): The load-options method name, e.g. `getModels`.

        Raises:
            ValueError: If the method is not declared.
        """
        if method not in self.LOAD_OPTIONS_METHODS:
            raise ValueError(f"Load options method '{method}' is not supported.")
        return getattr(self, self.LOAD_OPTIONS_METHODS[method])()

    def execute(
        self, input_data: GeminiInputSchema, config: RunnableConfig | None = None, **kwargs
    ) -> list[dict[str, Any]]:
        """
        Dispatch the execution by the selected resource.

        Args:
            input_data (GeminiInputSchema): The input items.
            config (RunnableConfig | None): Optional configuration for the execution.
            **kwargs: Additional keyword arguments.

        Returns:
            list[dict[str, Any]]: Exactly one output record.

        Raises:
            NotSupportedException: If the `audio` resource, or an operation the resource does not offer, is selected.
            MissingCredentialsException: If text generation is requested without an API key.
        """
        items = input_data.items
        resource = self.get_node_parameter("resource", items)

        if resource == Resource.AUDIO:
            raise NotSupportedException("Audio resource is not supported yet.")

        return self.execute_text(items)

    def execute_text(self, items: list[ExecutionItem]) -> list[dict[str, Any]]:
        """Run the text resource. Only the parameters of the first input item are read."""
        operation = self.get_node_parameter("operation", items) or default_operation(Resource.TEXT)
        if operation != Operation.GENERATE_TEXT:
            raise NotSupportedException(f"Operation '{operation.value}' is not supported for the text resource.")

        model = self.get_node_parameter("model", items)
        if not model:
            raise ValueError("Model is not selected.")

        if self.client is None:
            raise MissingCredentialsException("No Gemini API credentials found")

        messages = self.get_node_parameter("messages", items).message
        logger.info(
            f"Node {self.name} - {self.id}: generating text with model '{model}' from {len(messages)} message(s)."
        )

        return generate_text(
            self.client,
            model=model,
            messages=messages,
            options=self.get_node_parameter("options", items),
            simplify=self.get_node_parameter("simplifyOutput", items),
        )
