from .base import NodeCallbackHandler
