"""
db/connection.py
----------------
Manages the MongoDB client session.
One MongoSession is created by the caller and handed to the repository;
there is no module-level connection state.
"""

from typing import Callable, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from config import MONGO_SERVER_API, MONGO_TIMEOUT_MS, MONGO_URI
from utils.errors import SessionError, StoreError
from utils.logger import get_logger

logger = get_logger(__name__)


class MongoSession:
    """
    A single connection to one named database.

    Not thread-safe: callers sharing a session across threads must add
    their own synchronization.

    Args:
        uri: MongoDB connection string.
        timeout_ms: Server selection timeout for the handshake and every
            operation that needs a server.
        server_api: Stable API version to pin, or empty for none.
        client_factory: Callable building the client, ``MongoClient`` by
            default. Tests inject an in-memory client here.
    """

    def __init__(
        self,
        uri: str = MONGO_URI,
        timeout_ms: int = MONGO_TIMEOUT_MS,
        server_api: str = MONGO_SERVER_API,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ):
        self.uri = uri
        self.timeout_ms = timeout_ms
        self.server_api = server_api
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._database: Optional[Database] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def database_name(self) -> Optional[str]:
        return self._database.name if self._database is not None else None

    def connect(self, database_name: str) -> None:
        """
        Open the client and verify the server answers a ping.

        Args:
            database_name: Name of the database to use.

        Raises:
            SessionError: If the session is already connected.
            StoreError: If the server is unreachable or rejects the handshake.
        """
        if self._client is not None:
            raise SessionError(
                f"Already connected to '{self.database_name}'; disconnect first."
            )
        kwargs = {"serverSelectionTimeoutMS": self.timeout_ms}
        if self.server_api:
            kwargs["server_api"] = ServerApi(self.server_api)
        client = None
        try:
            client = self._client_factory(self.uri, **kwargs)
            database = client[database_name]
            database.command("ping")
        except PyMongoError as e:
            if client is not None:
                client.close()
            logger.error(f"Failed to connect to MongoDB at {self.uri}: {e}")
            raise StoreError(f"Error connecting to MongoDB: {e}", cause=e) from e
        self._client = client
        self._database = database
        logger.info(f"Connected to MongoDB database '{database_name}'.")

    def disconnect(self) -> None:
        """
        Close the client.

        Raises:
            SessionError: If there is no open session.
        """
        if self._client is None:
            raise SessionError("Not connected to a database.")
        name = self.database_name
        try:
            self._client.close()
        finally:
            self._client = None
            self._database = None
        logger.info(f"Disconnected from MongoDB database '{name}'.")

    def get_collection(self, name: str) -> Collection:
        """
        Get a collection of the connected database.

        Raises:
            SessionError: If there is no open session.
        """
        if self._database is None:
            raise SessionError("Not connected to a database. Call connect() first.")
        return self._database[name]
