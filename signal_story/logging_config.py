"""Logging setup shared by the job entry points.

Importing this module applies the root format once. Level comes from
``LOG_LEVEL`` (default INFO); modules themselves only ever call
``logging.getLogger(__name__)``.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format=LOG_FORMAT,
)

# pymongo's heartbeat chatter drowns out run statistics at DEBUG
logging.getLogger("pymongo").setLevel(logging.WARNING)

__all__ = ["logging", "LOG_FORMAT"]
