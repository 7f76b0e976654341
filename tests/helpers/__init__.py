from .metric_delta import sample_delta
from .stubs import StubFetcher

__all__ = ["StubFetcher", "sample_delta"]
