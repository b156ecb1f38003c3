from __future__ import annotations

from .logging import configure_logging
from .storage import get_data_dir, get_http_cache_path

__all__ = ["configure_logging", "get_data_dir", "get_http_cache_path"]
