"""
Fehlerklassen der Verknüpfungs-Pipeline.
"""

from typing import Optional

class LinkingError(Exception):
    """Basisklasse für Verknüpfungsfehler"""
    def __init__(self, message: str, step: str, details: Optional[Exception] = None):
        self.message = message
        self.step = step
        self.details = details
        super().__init__(f"{message} in Schritt '{step}'" + (f": {str(details)}" if details else ""))

class NoMatchFoundError(LinkingError):
    """Kein Gebäude konnte mit den Sekundärdaten verknüpft werden."""
    def __init__(self, message: str = "Kein Gebäude konnte verknüpft werden", step: str = "match_pairs"):
        super().__init__(message, step)

class DocumentStructureError(LinkingError):
    """Das Primärdokument hat nicht die erwartete CityGML-Struktur."""
    pass

class DocumentLoadError(LinkingError):
    """Ein Eingabedokument konnte nicht geladen werden."""
    pass

class LinkingConfigError(Exception):
    """Fehler in der Verknüpfungs-Konfiguration."""
    pass
