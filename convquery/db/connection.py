"""MongoDB connection management."""

from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..errors import StoreError
from ..utils.logger import get_app_logger


class MongoConnection:
    """MongoDB client manager."""

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        database: str = "bf",
        timeout_ms: int = 5000,
        client: Optional[MongoClient] = None
    ):
        """
        Initialize the connection.

        Args:
            uri: MongoDB connection string
            database: Name of the database holding conversations and projects
            timeout_ms: Server selection and connect timeout
            client: Pre-built client (tests)
        """
        self.uri = uri
        self.database_name = database
        self.timeout_ms = timeout_ms
        self.logger = get_app_logger("db")
        self.client: Optional[MongoClient] = client

        if self.client is None:
            self._connect()

    def _connect(self):
        """Create the client and check the server answers."""
        try:
            self.client = MongoClient(
                self.uri,
                serverSelectionTimeoutMS=self.timeout_ms,
                connectTimeoutMS=self.timeout_ms,
                retryReads=False,
            )
            self.client.admin.command("ping")
            self.logger.info(f"Connected to MongoDB database '{self.database_name}'")
        except PyMongoError as e:
            self.logger.error(f"Failed to connect to MongoDB: {e}")
            if self.client is not None:
                self.client.close()
                self.client = None
            raise StoreError(f"Failed to connect to MongoDB: {e}") from e

    @property
    def database(self) -> Database:
        return self.client[self.database_name]

    def close(self):
        """Close the client."""
        if self.client:
            self.client.close()
            self.client = None
            self.logger.info("MongoDB connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
