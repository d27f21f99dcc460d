from loguru import logger
from pymongo import MongoClient
from pymongo.database import Database


def create_client(uri: str, timeout_ms: int = 5000) -> MongoClient:
    # Connects lazily; the first operation surfaces an unreachable server.
    return MongoClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)


def get_database(client: MongoClient, name: str) -> Database:
    return client[name]


def close_client(client: MongoClient) -> None:
    client.close()
    logger.info("Database connection closed")
