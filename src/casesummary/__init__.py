"""
Summaries of per-case epidemiological records for a public dashboard
"""

import importlib.metadata

from loguru import logger

__version__ = importlib.metadata.version("casesummary")

logger.disable(__name__)
