"""Root conftest: shared test configuration."""

import os

# Ensure tests never reach a real engine or service.
os.environ.setdefault("HEADCALL_ENGINE_URL", "http://engine.invalid")
os.environ.setdefault("HEADCALL_SERVICE_URL", "http://service.invalid")
os.environ.setdefault("DEBUG", "0")
