"""
Gemeinsame Infrastruktur: Logging und YAML-Konfiguration.
"""
