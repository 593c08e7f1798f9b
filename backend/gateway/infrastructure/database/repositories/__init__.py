from .counter_store_repository import SQLAlchemyCounterStore
from .vector_index_repository import PgVectorIndex

__all__ = ["PgVectorIndex", "SQLAlchemyCounterStore"]
