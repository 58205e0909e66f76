"""
CLI-Schnittstelle für die Verknüpfung von Sekundärdaten mit CityGML-Gebäuden.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import click

from core.logging_config import setup_logging
from pipeline.data_sources.documents import load_document
from pipeline.linking import (
    AttributeLinker,
    AttributeMapping,
    LinkingConfig,
    LinkingConfigError,
    LinkingError,
    collect_primary_tags,
    collect_tags,
    load_linking_config,
)
from pipeline.output.writer import write_csv, write_gml

logger = logging.getLogger(__name__)

def parse_mappings(ctx, param, values: Tuple[str, ...]) -> List[AttributeMapping]:
    """``quelle=ziel`` -> AttributeMapping; ohne ``=`` wird der Quellname übernommen."""
    mappings = []
    for value in values:
        source, _, target = value.partition('=')
        source, target = source.strip(), target.strip()
        if not source:
            raise click.BadParameter(f"Ungültige Zuordnung: {value!r}")
        mappings.append(AttributeMapping(source_field=source, target_attribute_name=target or source))
    return mappings

def _load_config(config_path: Optional[str]) -> LinkingConfig:
    if config_path is None:
        return load_linking_config()
    config = LinkingConfig(config_path=config_path)
    config.validate()
    return config

@click.group()
@click.option('--log-level', default='INFO', help='Logging-Level (DEBUG, INFO, WARNING, ...)')
@click.option('--config', '-c', 'config_path', default=None, type=click.Path(exists=True, dir_okay=False),
              help='Pfad zur Verknüpfungs-Konfiguration (Standard: config/linking.yml)')
@click.pass_context
def cli(ctx, log_level: str, config_path: Optional[str]):
    """Verknüpft Sekundärdaten mit CityGML-Gebäuden und exportiert Attribute."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path

@cli.command()
@click.argument('primary', type=click.Path(exists=True, dir_okay=False))
@click.argument('secondary', type=click.Path(exists=True, dir_okay=False))
@click.option('--primary-key', '-p', required=True, help='Schlüsselfeld im CityGML-Dokument')
@click.option('--secondary-key', '-s', required=True, help='Schlüsselfeld im Sekundärdokument')
@click.option('--map', '-m', 'mappings', multiple=True, required=True, callback=parse_mappings,
              help='Zu übernehmendes Feld als quelle=zielattribut (mehrfach möglich)')
@click.option('--output', '-o', default='linked.gml', type=click.Path(dir_okay=False),
              help='Ausgabedatei (GML)')
@click.pass_context
def link(ctx, primary: str, secondary: str, primary_key: str, secondary_key: str,
         mappings: List[AttributeMapping], output: str):
    """Verknüpft PRIMARY (CityGML) mit SECONDARY (GML, XML, JSON oder CSV)."""
    try:
        config = _load_config(ctx.obj.get('config_path'))
        primary_doc = load_document(primary, config)
        secondary_doc = load_document(secondary, config)

        result = AttributeLinker(config).link(primary_doc, secondary_doc, primary_key, secondary_key, mappings)
        write_gml(result.document, output, config)
        logger.info(f"✅ {len(result.linked_building_ids)} Gebäude verknüpft, gespeichert in {Path(output).name}")

    except (LinkingError, LinkingConfigError) as e:
        logger.error(f"❌ Verknüpfung mit Fehlern beendet: {str(e)}")
        raise click.Abort()
    except Exception as e:
        logger.error(f"❌ Unerwarteter Fehler bei der Verknüpfung: {str(e)}")
        logger.debug("Stacktrace:", exc_info=True)
        raise click.Abort()

@cli.command()
@click.argument('primary', type=click.Path(exists=True, dir_okay=False))
@click.option('--field', '-f', 'fields', multiple=True, required=True,
              help='Exportfeld, z.B. gml:id, bldg:measuredHeight oder tag@=codeSpace')
@click.option('--output', '-o', default='export.csv', type=click.Path(dir_okay=False),
              help='Ausgabedatei (CSV)')
@click.pass_context
def export(ctx, primary: str, fields: Tuple[str, ...], output: str):
    """Exportiert Felder aller Gebäude aus PRIMARY als CSV."""
    try:
        config = _load_config(ctx.obj.get('config_path'))
        primary_doc = load_document(primary, config)
        rows = AttributeLinker(config).export_table(primary_doc, list(fields))
        write_csv(rows, output)

    except (LinkingError, LinkingConfigError) as e:
        logger.error(f"❌ Export mit Fehlern beendet: {str(e)}")
        raise click.Abort()
    except Exception as e:
        logger.error(f"❌ Unerwarteter Fehler beim Export: {str(e)}")
        logger.debug("Stacktrace:", exc_info=True)
        raise click.Abort()

@cli.command()
@click.argument('document', type=click.Path(exists=True, dir_okay=False))
@click.option('--primary/--secondary', default=False,
              help='CityGML-Felder statt einfacher Feldnamen')
@click.option('--export-fields', is_flag=True, default=False,
              help='Mit --primary zusätzlich qualifizierte Felder (tag@=qualifier); '
                   'diese gelten nur für export, nicht als Schlüssel für link')
@click.pass_context
def tags(ctx, document: str, primary: bool, export_fields: bool):
    """Listet die auswählbaren Feldnamen von DOCUMENT."""
    try:
        config = _load_config(ctx.obj.get('config_path'))
        doc = load_document(document, config)
        if primary:
            names = collect_primary_tags(doc, config, include_qualified=export_fields)
        else:
            names = collect_tags(doc, config)
    except (LinkingError, LinkingConfigError) as e:
        logger.error(f"❌ Feldnamen konnten nicht gelesen werden: {str(e)}")
        raise click.Abort()
    except Exception as e:
        logger.error(f"❌ Unerwarteter Fehler beim Lesen der Feldnamen: {str(e)}")
        logger.debug("Stacktrace:", exc_info=True)
        raise click.Abort()

    for name in names:
        click.echo(name)

if __name__ == "__main__":
    cli()
