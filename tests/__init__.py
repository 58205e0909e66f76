"""
Test-Suite für die Verknüpfung von Sekundärdaten mit CityGML-Gebäuden.

Dieses Paket enthält Unit-Tests der Verknüpfungsbausteine sowie
Integrationstests für Adapter, Writer und CLI.
"""

import os
import sys

# Füge das Hauptverzeichnis zum Python-Pfad hinzu
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
