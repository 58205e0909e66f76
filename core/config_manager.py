"""
Konfigurationsmanager-Modul.

Dieses Modul stellt Funktionen zum Laden von YAML-Konfigurationsdateien
aus dem Projektverzeichnis ``config/`` bereit.
"""

import logging
from pathlib import Path
from typing import Dict, Any, Union, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent / 'config'

def load_config(config_file: Union[str, Path]) -> Dict[str, Any]:
    """Lädt eine YAML-Konfigurationsdatei.

    Args:
        config_file: Pfad zur Konfigurationsdatei

    Returns:
        Dictionary mit der Konfiguration

    Raises:
        FileNotFoundError: Wenn die Datei nicht existiert
        ValueError: Bei falscher Endung, leerer Datei oder YAML-Fehlern
    """
    config_path = Path(config_file)

    if not config_path.exists():
        raise FileNotFoundError(f"Konfigurationsdatei nicht gefunden: {config_path}")

    if config_path.suffix not in ('.yml', '.yaml'):
        raise ValueError(f"Ungültiges Dateiformat: {config_path.suffix}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"YAML Syntax-Fehler in {config_path}: {e}") from e

    if not config:
        raise ValueError(f"Leere Konfigurationsdatei: {config_path}")
    if not isinstance(config, dict):
        raise ValueError(f"Ungültiges Konfigurationsformat: {type(config).__name__}")

    logger.debug(f"✅ Konfiguration geladen: {config_path}")
    return config

def get_module_config(global_config: Dict[str, Any], module_name: str) -> Optional[Dict[str, Any]]:
    """Holt die Konfiguration für ein spezifisches Modul.

    Args:
        global_config: Globale Konfiguration
        module_name: Name des Moduls (z.B. 'linking', 'export')

    Returns:
        Modulspezifische Konfiguration oder None
    """
    section = global_config.get(module_name)
    if section is None:
        return None
    if not isinstance(section, dict):
        logger.warning(f"⚠️ Ungültige Modulkonfiguration für '{module_name}'")
        return None
    return section

def get_config_path(config_name: str) -> Path:
    """Ermittelt den absoluten Pfad zu einer Konfigurationsdatei.

    Args:
        config_name: Name der Konfigurationsdatei (z.B. 'linking' oder 'config/linking.yml')

    Returns:
        Absoluter Pfad zur Konfigurationsdatei
    """
    if config_name.startswith('config/'):
        config_name = config_name[len('config/'):]

    if not config_name.endswith(('.yml', '.yaml')):
        config_name += '.yml'

    config_path = CONFIG_DIR / config_name
    if not config_path.exists():
        raise FileNotFoundError(f"Konfigurationsdatei nicht gefunden: {config_path}")

    return config_path
