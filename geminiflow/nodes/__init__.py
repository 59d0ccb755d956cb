from .node import ConnectionNode, ErrorHandling, Node
from .types import ExecutionItem, NodeGroup
