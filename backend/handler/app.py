# Lambda entry point (handler="app.handler"); the root log level is set from
# LOG_LEVEL when the default API is first built.
from schedule_overrides.api import handler

__all__ = ["handler"]
