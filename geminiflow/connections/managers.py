import hashlib
from contextlib import contextmanager
from typing import Any

from geminiflow.connections import BaseConnection
from geminiflow.utils.logger import logger


class ConnectionManager:
    """
    Builds provider clients and keeps them for reuse.

    Clients are keyed by connection type and a hash of the connection content, so nodes sharing
    a manager and identical credentials share one client.
    """

    def __init__(self):
        self.connection_clients: dict[str, Any] = {}

    def get_connection_client(self, connection: BaseConnection) -> Any:
        key = self.get_connection_id(connection)
        if key not in self.connection_clients:
            logger.debug(f"Init client for connection '{connection.id}-{connection.type}'")
            self.connection_clients[key] = connection.connect()
        return self.connection_clients[key]

    @staticmethod
    def get_connection_id(connection: BaseConnection) -> str:
        digest = hashlib.sha256(connection.model_dump_json().encode()).hexdigest()
        return f"{connection.type.lower()}:{digest}"

    def close(self):
        """Close the clients that support it and forget all of them."""
        for client in self.connection_clients.values():
            if callable(getattr(client, "close", None)):
                client.close()
        self.connection_clients.clear()


@contextmanager
def get_connection_manager():
    cm = ConnectionManager()
    try:
        yield cm
    finally:
        cm.close()
