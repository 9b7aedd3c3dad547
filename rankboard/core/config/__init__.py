"""
Configuration subsystem for Rankboard.

Static configuration only: values are read from environment variables
(with .env support) at import time and exposed as class attributes on
``Config``.

Usage
-----
```python
from rankboard.core.config import Config

url = Config.REDIS_URL
page_size = Config.LEADERBOARD_PAGE_SIZE
```
"""

from rankboard.core.config.config import Config, Environment

__all__ = [
    "Config",
    "Environment",
]
