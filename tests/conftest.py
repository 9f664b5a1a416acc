"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at an in-memory SQLite database before anything is imported.
"""

import os
import sys
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ["OPENAI_API_KEY"] = ""
os.environ["CRON_SECRET"] = ""

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest


@pytest.fixture(autouse=True)
def reset_ai_state():
    """AI config and the in-memory processors are process-wide; reset them per test."""
    from services.ai.batch import batch_processor
    from services.ai.config import ai_config_manager
    from services.ai.realtime import realtime_processor

    yield
    ai_config_manager.reset()
    batch_processor.clear_queue()
    batch_processor._jobs.clear()
    realtime_processor.clear_queue()
