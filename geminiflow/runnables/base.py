from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Awaitable

from pydantic import BaseModel, ConfigDict, Field

from geminiflow.callbacks import NodeCallbackHandler
from geminiflow.utils import format_value, generate_uuid, is_called_from_async_context


class RunnableConfig(BaseModel):
    """Settings of one workflow run, shared by the nodes it runs."""

    run_id: str = Field(default_factory=generate_uuid)
    callbacks: list[NodeCallbackHandler] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)


class RunnableStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class RunnableResultError(BaseModel):
    """A failure reported to the host. `recoverable` tells it whether running again may succeed."""

    type: type[Exception]
    message: str
    recoverable: bool = False

    @classmethod
    def from_exception(cls, exception: Exception) -> "RunnableResultError":
        return cls(
            type=type(exception),
            message=str(exception),
            recoverable=getattr(exception, "recoverable", False),
        )

    def to_dict(self) -> dict:
        return {"type": self.type.__name__, "message": self.message, "recoverable": self.recoverable}


class RunnableResult(BaseModel):
    """
    Outcome of a run.

    Attributes:
        status (RunnableStatus): Whether the run succeeded.
        input (Any): The input data as given to `run`.
        output (Any): Output records on success, None on failure.
        error (RunnableResultError | None): The failure, if any.
    """

    status: RunnableStatus
    input: Any = None
    output: Any = None
    error: RunnableResultError | None = None

    def to_dict(self) -> dict:
        data = {"status": self.status.value, "input": format_value(self.input), "output": format_value(self.output)}
        if self.error:
            data["error"] = self.error.to_dict()
        return data


class Runnable(ABC):
    def run(
        self, input_data: Any, config: RunnableConfig | None = None, is_async: bool | None = None, **kwargs
    ) -> RunnableResult | Awaitable[RunnableResult]:
        """
        Run with the given input.

        Called from a coroutine this returns the `run_async` coroutine to await, otherwise it runs
        synchronously. Pass `is_async` to pick the mode explicitly.
        """
        if is_async is None:
            is_async = is_called_from_async_context()

        runner = self.run_async if is_async else self.run_sync
        return runner(input_data, config, **kwargs)

    @abstractmethod
    def run_sync(self, input_data: Any, config: RunnableConfig | None = None, **kwargs) -> RunnableResult:
        pass

    @abstractmethod
    async def run_async(self, input_data: Any, config: RunnableConfig | None = None, **kwargs) -> RunnableResult:
        pass
