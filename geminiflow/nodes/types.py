from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NodeGroup(str, Enum):
    """
    Enumeration of node groups that categorize different types of nodes.
    """

    LLMS = "llms"


class ExecutionItem(BaseModel):
    """
    A single record passed between workflow nodes.

    Attributes:
        data (dict[str, Any]): Record payload, serialized under the `json` key.
        parameters (dict[str, Any]): Node parameter values the host resolved for this item.
    """

    data: dict[str, Any] = Field(default_factory=dict, alias="json")
    parameters: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)
