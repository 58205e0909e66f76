"""
Konfigurationsklasse für die Verknüpfung.

Enthält das CityGML-Vokabular (Feldnamen des generischen Dokumentbaums)
und die Richtlinien des Abgleichs. Werte aus einer YAML-Datei überschreiben
die eingebauten Standardwerte abschnittsweise.
"""

import copy
import logging
from functools import lru_cache
from typing import Dict, Any, Optional, List

from core.config_manager import load_config, get_config_path, get_module_config
from .errors import LinkingConfigError

FOOTPRINT_KEY_MODES = ('polygon', 'range')

DEFAULT_CONFIG: Dict[str, Any] = {
    'document': {
        'attribute_prefix': '@_',
        'text_field': '#text',
        'city_model_field': 'core:CityModel',
        'member_field': 'core:cityObjectMember',
    },
    'citygml_fields': {
        'building': 'bldg:Building',
        'id_attribute': '@_gml:id',
        'id_field': 'gml:id',
        'height': 'bldg:measuredHeight',
        'locality': 'xAL:LocalityName',
        'footprint': 'gml:posList',
        'footprint_container': 'bldg:lod0RoofEdge',
        'generic_attribute': 'gen:stringAttribute',
        'generic_name_attribute': '@_name',
        'generic_value_field': 'gen:value',
        'qualifier_attributes': ['@_codeSpace', '@_uom'],
    },
    'matching': {
        'footprint_key_mode': 'polygon',
        'normalize_coordinate_order': False,
        'max_workers': 1,
    },
    'export': {
        'qualifier_separator': '@=',
        'column_labels': {},
    },
}

class LinkingConfig:
    """Konfiguration für Schlüsselextraktion, Abgleich und Export."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, config_path: Optional[str] = None):
        """Initialisiert die Konfiguration.

        Args:
            config: Optional[Dict] - Direkte Konfiguration
            config_path: Optional[str] - Pfad zur Konfigurationsdatei
        """
        self.logger = logging.getLogger(__name__)

        if config is not None:
            overrides = config
        elif config_path is not None:
            overrides = load_config(config_path)
            self.logger.info(f"✅ Verknüpfungs-Konfiguration geladen von: {config_path}")
        else:
            overrides = {}

        self.config = self._merge(DEFAULT_CONFIG, overrides)

    @staticmethod
    def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        merged = copy.deepcopy(defaults)
        for section, values in overrides.items():
            section_config = get_module_config(overrides, section)
            if section_config is not None and isinstance(merged.get(section), dict):
                merged[section].update(section_config)
            else:
                # Ungültige Abschnitte bleiben für validate() erhalten
                merged[section] = values
        return merged

    def validate(self) -> bool:
        """Validiert die Konfiguration.

        Returns:
            bool: True wenn die Konfiguration gültig ist

        Raises:
            LinkingConfigError: Bei ungültigen Werten
        """
        for section in ('document', 'citygml_fields', 'matching', 'export'):
            if not isinstance(self.config.get(section), dict):
                raise LinkingConfigError(f"Abschnitt '{section}' fehlt oder ist ungültig")

        if self.footprint_key_mode not in FOOTPRINT_KEY_MODES:
            raise LinkingConfigError(
                f"Unbekannter footprint_key_mode '{self.footprint_key_mode}' "
                f"(erlaubt: {', '.join(FOOTPRINT_KEY_MODES)})"
            )

        workers = self.config['matching'].get('max_workers')
        if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
            raise LinkingConfigError(f"max_workers muss eine positive Ganzzahl sein: {workers!r}")

        if not isinstance(self.column_labels, dict):
            raise LinkingConfigError("column_labels muss ein Mapping sein")

        if not self.qualifier_separator:
            raise LinkingConfigError("qualifier_separator darf nicht leer sein")

        return True

    @property
    def attribute_prefix(self) -> str:
        return self.config['document']['attribute_prefix']

    @property
    def text_field(self) -> str:
        return self.config['document']['text_field']

    @property
    def city_model_field(self) -> str:
        return self.config['document']['city_model_field']

    @property
    def member_field(self) -> str:
        return self.config['document']['member_field']

    @property
    def building_field(self) -> str:
        return self.config['citygml_fields']['building']

    @property
    def id_attribute(self) -> str:
        return self.config['citygml_fields']['id_attribute']

    @property
    def id_field(self) -> str:
        return self.config['citygml_fields']['id_field']

    @property
    def height_field(self) -> str:
        return self.config['citygml_fields']['height']

    @property
    def locality_field(self) -> str:
        return self.config['citygml_fields']['locality']

    @property
    def footprint_field(self) -> str:
        return self.config['citygml_fields']['footprint']

    @property
    def footprint_container(self) -> str:
        return self.config['citygml_fields']['footprint_container']

    @property
    def generic_attribute_field(self) -> str:
        return self.config['citygml_fields']['generic_attribute']

    @property
    def generic_name_attribute(self) -> str:
        return self.config['citygml_fields']['generic_name_attribute']

    @property
    def generic_value_field(self) -> str:
        return self.config['citygml_fields']['generic_value_field']

    @property
    def qualifier_attributes(self) -> List[str]:
        return list(self.config['citygml_fields']['qualifier_attributes'])

    @property
    def footprint_key_mode(self) -> str:
        return self.config['matching']['footprint_key_mode']

    @property
    def normalize_coordinate_order(self) -> bool:
        return bool(self.config['matching']['normalize_coordinate_order'])

    @property
    def max_workers(self) -> int:
        return self.config['matching']['max_workers']

    @property
    def qualifier_separator(self) -> str:
        return self.config['export']['qualifier_separator']

    @property
    def column_labels(self) -> Dict[str, str]:
        return self.config['export']['column_labels']

    def column_label(self, field: str) -> str:
        """Gibt die Spaltenüberschrift für ein Feld zurück."""
        return self.column_labels.get(field, field)

@lru_cache(maxsize=1)
def load_linking_config() -> LinkingConfig:
    """Lädt die Projekt-Konfiguration ``config/linking.yml`` einmalig.

    Returns:
        LinkingConfig: Geteilte, nur lesend verwendete Instanz
    """
    logger = logging.getLogger(__name__)
    try:
        config = LinkingConfig(config_path=str(get_config_path('linking')))
    except FileNotFoundError:
        logger.warning("⚠️ config/linking.yml nicht gefunden, verwende Standardwerte")
        config = LinkingConfig()
    config.validate()
    return config
