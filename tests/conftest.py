"""
Gemeinsame Test-Fixtures und Konfiguration.
"""
import sys
from pathlib import Path

# Füge das Projekt-Root-Verzeichnis zum Python-Pfad hinzu
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.linking_fixtures import *  # noqa: E402,F401,F403
