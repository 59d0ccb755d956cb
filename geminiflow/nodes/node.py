import asyncio
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, ClassVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from geminiflow.callbacks import NodeCallbackHandler
from geminiflow.connections import BaseConnection
from geminiflow.connections.managers import ConnectionManager
from geminiflow.nodes.types import ExecutionItem, NodeGroup
from geminiflow.runnables import Runnable, RunnableConfig, RunnableResult, RunnableResultError, RunnableStatus
from geminiflow.utils import format_duration, generate_uuid
from geminiflow.utils.logger import logger


def ensure_config(config: RunnableConfig | None = None) -> RunnableConfig:
    return config if config is not None else RunnableConfig()


class ErrorHandling(BaseModel):
    """
    Retry on fail settings of a node.

    A failed execution is replayed up to `max_retries` times, waiting
    `retry_interval_seconds * backoff_rate ** attempt` before each replay.

    Attributes:
        timeout_seconds (float | None): Limit of a single attempt. None waits indefinitely.
        retry_interval_seconds (float): Wait before the first replay.
        max_retries (int): Number of replays after the first attempt.
        backoff_rate (float): Growth factor of the wait between replays.
    """

    timeout_seconds: float | None = None
    retry_interval_seconds: float = 1
    max_retries: int = Field(default=0, ge=0)
    backoff_rate: float = 1


class Node(BaseModel, Runnable, ABC):
    """
    A workflow step turning input items into output records.

    Subclasses implement `execute`. `run_sync` adds input validation, retries, callbacks and
    logging around it, and reports every outcome as a `RunnableResult` instead of raising.
    """

    id: str = Field(default_factory=generate_uuid)
    name: str | None = None
    description: str | None = None
    group: NodeGroup
    error_handling: ErrorHandling = Field(default_factory=ErrorHandling)
    callbacks: list[NodeCallbackHandler] = Field(default_factory=list)

    input_schema: ClassVar[type[BaseModel] | None] = None
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    def init_components(self, connection_manager: ConnectionManager | None = None):
        """Prepare what `execute` needs. Runs at the start of every run, so it must be idempotent."""

    def to_dict(self, include_secure_params: bool = False, **kwargs) -> dict:
        """Serialize the node for callbacks. The API key is left out unless requested."""
        exclude = {"client": True, "callbacks": True}
        if not include_secure_params:
            exclude["connection"] = {"api_key": True}
        return self.model_dump(exclude=exclude, **kwargs)

    def validate_input_schema(self, input_data: Any) -> Any:
        if self.input_schema:
            return self.input_schema.model_validate(input_data)
        return input_data

    def get_node_parameter(self, name: str, items: list[ExecutionItem] | None = None, item_index: int = 0) -> Any:
        """
        Resolve a node parameter by its host name.

        A value resolved by the host for the input item at `item_index` overrides the configured
        node field. Items at other indexes are never consulted.

        Args:
            name (str): Parameter name as declared to the host (alias or field name).
            items (list[ExecutionItem], optional): Input items of the current execution.
            item_index (int): Index of the item whose resolved parameters are read.

        Returns:
            Any: The resolved and validated parameter value.

        Raises:
            ValueError: If the node does not declare the parameter.
        """
        field_name = next(
            (key for key, field in type(self).model_fields.items() if name in (key, field.alias)),
            None,
        )
        if field_name is None:
            raise ValueError(f"Node {self.name} - {self.id}: unknown parameter '{name}'.")

        if items and item_index < len(items):
            parameters = items[item_index].parameters
            for key in (name, field_name):
                if key in parameters:
                    annotation = type(self).model_fields[field_name].annotation
                    return TypeAdapter(annotation).validate_python(parameters[key])

        return getattr(self, field_name)

    def run_sync(self, input_data: Any, config: RunnableConfig | None = None, **kwargs) -> RunnableResult:
        config = ensure_config(config)
        kwargs = {**kwargs, "run_id": uuid4()}
        started_at = datetime.now()
        logger.info(f"Node {self.name} - {self.id}: execution started.")

        try:
            self._notify(config, "on_node_start", input_data, **kwargs)
            self.init_components()
            output = self.execute_with_retry(self.validate_input_schema(input_data), config, **kwargs)
        except Exception as e:
            self._notify(config, "on_node_error", e, input_data=input_data, **kwargs)
            logger.error(
                f"Node {self.name} - {self.id}: execution failed in "
                f"{format_duration(started_at, datetime.now())}. Error: {e}"
            )
            return RunnableResult(
                status=RunnableStatus.FAILURE, input=input_data, error=RunnableResultError.from_exception(e)
            )

        self._notify(config, "on_node_end", output, **kwargs)
        logger.info(
            f"Node {self.name} - {self.id}: execution succeeded in {format_duration(started_at, datetime.now())}."
        )
        return RunnableResult(status=RunnableStatus.SUCCESS, input=input_data, output=output)

    async def run_async(self, input_data: Any, config: RunnableConfig | None = None, **kwargs) -> RunnableResult:
        return await asyncio.to_thread(self.run_sync, input_data, config, **kwargs)

    def execute_with_retry(self, input_data: Any, config: RunnableConfig, **kwargs) -> Any:
        """Run `execute`, replaying failed attempts per `error_handling`. Raises the last error."""
        attempts = self.error_handling.max_retries + 1
        for attempt in range(attempts):
            attempt_kwargs = {**kwargs, "execution_run_id": uuid4()}
            self._notify(config, "on_node_execute_start", input_data, **attempt_kwargs)
            try:
                output = self.execute_with_timeout(input_data, config, **attempt_kwargs)
            except Exception as e:
                self._notify(config, "on_node_execute_error", e, **attempt_kwargs)
                if attempt == attempts - 1:
                    logger.error(f"Node {self.name} - {self.id}: execution failed after {attempts} attempt(s).")
                    raise

                delay = self.error_handling.retry_interval_seconds * self.error_handling.backoff_rate**attempt
                logger.warning(
                    f"Node {self.name} - {self.id}: attempt {attempt + 1} failed with {type(e).__name__}, "
                    f"retrying in {delay} seconds."
                )
                time.sleep(delay)
            else:
                self._notify(config, "on_node_execute_end", output, **attempt_kwargs)
                return output

    def execute_with_timeout(self, input_data: Any, config: RunnableConfig, **kwargs) -> Any:
        timeout = self.error_handling.timeout_seconds
        if timeout is None:
            return self.execute(input_data, config=config, **kwargs)

        executor = ThreadPoolExecutor(max_workers=1)
        try:
            return executor.submit(self.execute, input_data, config=config, **kwargs).result(timeout=timeout)
        finally:
            executor.shutdown(wait=False)

    def _notify(self, config: RunnableConfig, event: str, *args, **kwargs) -> None:
        handlers = [*config.callbacks, *self.callbacks]
        if not handlers:
            return

        serialized = self.to_dict()
        for handler in handlers:
            try:
                getattr(handler, event)(serialized, *args, **kwargs)
            except Exception as e:
                logger.error(f"Node {self.name} - {self.id}: callback {type(handler).__name__}.{event} failed: {e}")

    @abstractmethod
    def execute(self, input_data: Any, config: RunnableConfig | None = None, **kwargs) -> Any:
        pass


class ConnectionNode(Node, ABC):
    """
    A node that calls a provider through a client built from its connection.

    A ready `client` can be passed in. Otherwise the client is built on the first run, through
    the given `ConnectionManager` or a fresh one.
    """

    connection: BaseConnection | None = None
    client: Any | None = None

    @model_validator(mode="after")
    def validate_connection_client(self):
        if self.client is None and self.connection is None:
            raise ValueError("'connection' or 'client' should be specified")
        return self

    def init_components(self, connection_manager: ConnectionManager | None = None):
        if self.client is None:
            self.client = (connection_manager or ConnectionManager()).get_connection_client(self.connection)
