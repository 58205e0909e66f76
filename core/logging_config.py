"""
Logging-Konfiguration für die Verknüpfungs-Pipeline.
"""
import logging
import sys
import time
from contextlib import contextmanager
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """Konfiguriert das Logging-System.

    Args:
        level: Logging-Level als int oder Name (default: INFO)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    # Bereits konfiguriert (z.B. durch pytest oder einen Aufrufer)
    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level)
        return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)
    root_logger.debug("🔧 Logging-System initialisiert")

@contextmanager
def LoggedOperation(operation_name: str, logger: Optional[logging.Logger] = None):
    """Kontext-Manager für geloggte Pipeline-Schritte.

    Args:
        operation_name: Name des Schritts
        logger: Optionaler Logger des Aufrufers
    """
    logger = logger or logging.getLogger(__name__)
    started = time.perf_counter()
    logger.info(f"🔄 Starte: {operation_name}")
    try:
        yield
    except Exception as e:
        logger.error(f"❌ Fehler bei {operation_name}: {str(e)}")
        raise
    finally:
        logger.debug(f"⏱️ {operation_name}: {time.perf_counter() - started:.3f}s")
    logger.info(f"✅ Beendet: {operation_name}")
