"""
Shared pytest setup.

Settings are read at import time, so the required environment is seeded
before any ``src.app`` module is imported.
"""
from __future__ import annotations

import os

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
