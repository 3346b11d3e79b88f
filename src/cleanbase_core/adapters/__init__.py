from .mapping import PydanticObjectMapper
from .memory import InMemoryRepository, InMemoryUnitOfWork

__all__ = ["InMemoryRepository", "InMemoryUnitOfWork", "PydanticObjectMapper"]
