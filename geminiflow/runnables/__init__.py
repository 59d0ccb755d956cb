from .base import Runnable, RunnableConfig, RunnableResult, RunnableResultError, RunnableStatus
