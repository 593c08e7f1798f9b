from .rate_limit_bucket import RateLimitBucketModel
from .vector_record import VectorRecordModel

__all__ = ["RateLimitBucketModel", "VectorRecordModel"]
