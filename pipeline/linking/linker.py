"""
Steuerung eines Verknüpfungslaufs.

Primär- und Sekundärschlüssel werden unabhängig extrahiert, abgeglichen und
die Treffer in eine Kopie des Primärdokuments übernommen. Findet der Abgleich
kein einziges Paar, bricht der Lauf ohne Ausgabe ab.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from core.logging_config import LoggedOperation
from .column_resolver import ColumnResolver
from .config import LinkingConfig, load_linking_config
from .document_merger import AttributeMapping, merge_matches
from .errors import NoMatchFoundError
from .generic_node import GenericNode
from .key_extractor import extract_keys
from .matcher import MatchedPair, match_pairs
from .primary_key_extractor import extract_city_object_members, extract_primary_keys

@dataclass
class LinkingResult:
    """Ergebnis eines Verknüpfungslaufs."""
    document: GenericNode
    pairs: List[MatchedPair] = field(default_factory=list)

    @property
    def linked_building_ids(self) -> List[str]:
        return sorted({pair.building_id for pair in self.pairs})

class AttributeLinker:
    """Verknüpft Sekundärdaten mit den Gebäuden eines CityGML-Dokuments."""

    def __init__(self, config: Optional[LinkingConfig] = None):
        """Initialisiert den Linker.

        Args:
            config: Verknüpfungs-Konfiguration (Standard: config/linking.yml)
        """
        self.config = config or load_linking_config()
        self.config.validate()
        self.logger = logging.getLogger(self.__class__.__name__)

    def link(self, primary_doc: GenericNode, secondary_doc: GenericNode,
             primary_field: str, secondary_field: str,
             mappings: Sequence[AttributeMapping]) -> LinkingResult:
        """Führt Extraktion, Abgleich und Übernahme aus.

        Args:
            primary_doc: CityGML-Dokument
            secondary_doc: Beliebiges Sekundärdokument
            primary_field: Schlüsselfeld im Primärdokument
            secondary_field: Schlüsselfeld im Sekundärdokument
            mappings: Zu übernehmende Felder

        Returns:
            LinkingResult mit angereichertem Dokument und Paaren

        Raises:
            NoMatchFoundError: Wenn kein Gebäude verknüpft werden konnte
            DocumentStructureError: Wenn das Primärdokument kein CityModel enthält
        """
        with LoggedOperation(f"Primärschlüssel '{primary_field}' extrahieren", self.logger):
            primary = extract_primary_keys(primary_doc, primary_field, self.config)

        with LoggedOperation(f"Sekundärschlüssel '{secondary_field}' extrahieren", self.logger):
            secondary = extract_keys(secondary_doc, secondary_field, self.config.text_field)
            self.logger.info(f"🔍 {len(secondary)} Sekundärdatensätze mit Schlüssel")

        with LoggedOperation("Abgleich", self.logger):
            pairs = match_pairs(
                primary,
                secondary,
                normalize_order=self.config.normalize_coordinate_order,
                max_workers=self.config.max_workers,
            )

        if not pairs:
            raise NoMatchFoundError("Verknüpfung nicht möglich, keine passenden Paare gefunden")

        with LoggedOperation("Attribute übernehmen", self.logger):
            document = merge_matches(primary_doc, pairs, mappings, self.config)

        return LinkingResult(document=document, pairs=pairs)

    def export_table(self, primary_doc: GenericNode, requested_fields: Sequence[str]) -> List[List[str]]:
        """Kopfzeile und Zeilen je Gebäude für den CSV-Export."""
        with LoggedOperation("Tabellenexport", self.logger):
            buildings = extract_city_object_members(primary_doc, self.config)
            return ColumnResolver(self.config).resolve_table(buildings, requested_fields)

def link_documents(primary_doc: GenericNode, secondary_doc: GenericNode,
                   primary_field: str, secondary_field: str,
                   mappings: Sequence[AttributeMapping],
                   config: Optional[LinkingConfig] = None) -> GenericNode:
    """Kurzform von ``AttributeLinker.link``; gibt nur das Dokument zurück."""
    return AttributeLinker(config).link(
        primary_doc, secondary_doc, primary_field, secondary_field, mappings
    ).document
