"""
Root conftest.py for the land registry project.

Makes the service package importable when tests run from a checkout
without an editable install.
"""

import sys
from pathlib import Path


def pytest_configure(config):
    """
    Add every service directory to sys.path.

    Each service keeps its package next to its ``tests`` directory, so
    putting the service directory on the path is enough for imports.
    """
    services_dir = Path(__file__).parent / "services"

    for service_path in sorted(services_dir.iterdir()):
        if service_path.is_dir() and str(service_path) not in sys.path:
            sys.path.insert(0, str(service_path))
