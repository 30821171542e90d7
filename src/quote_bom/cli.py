#!/usr/bin/env python3
"""
Quote BOM Converter CLI
Converts vendor quotation PDFs into BOM CSV files.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .catalog import load_catalog
from .config import ConverterSettings
from .converter import ConversionResult, QuoteConverter
from .exceptions import QuoteConversionError

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

# reported as "Error: ..." with exit code 1 instead of a traceback
CLI_ERRORS = (QuoteConversionError, UnicodeDecodeError, OSError)


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def build_converter(catalog_path: Optional[str]) -> QuoteConverter:
    catalog = load_catalog(catalog_path) if catalog_path else None
    return QuoteConverter(ConverterSettings(), catalog)


def run_conversion(converter: QuoteConverter, input_path: str, opportunity_id: str,
                   base_product_code: Optional[str] = None) -> ConversionResult:
    """Convert a .pdf, or a .txt holding already-extracted PDF text."""
    path = Path(input_path)
    if path.suffix.lower() == '.pdf':
        return converter.convert_pdf(path, opportunity_id, base_product_code)

    raw_text = path.read_text(encoding='utf-8')
    return converter.convert_text(raw_text, opportunity_id, base_product_code)


def validate_opportunity_id(ctx, param, value):
    length = ConverterSettings().opportunity_id_length
    if value is not None and len(value) != length:
        raise click.BadParameter(f"must be exactly {length} characters (got {len(value)})")
    return value


def show_summary(result: ConversionResult):
    header = result.header
    console.print(Panel.fit(
        f"[bold]Quote {header.quote_number or 'unknown'}[/bold]\n"
        f"Customer: {header.customer_name or '-'}\n"
        f"Partner: {header.partner_name or '-'}\n"
        f"Quote Date: {header.quote_date or '-'}  Expires: {header.quote_expires or '-'}",
        border_style="blue"
    ))

    table = Table(title=f"{len(result.rows)} BOM rows")
    table.add_column("Product Code", style="cyan")
    table.add_column("Parent")
    table.add_column("Qty", justify="right")
    table.add_column("Month", justify="right")
    table.add_column("Discount Price", justify="right")
    table.add_column("Extended Price", justify="right")
    for row in result.rows:
        table.add_row(
            row.product_code,
            row.parent_product_code,
            str(row.option_qty),
            str(row.month),
            row.discount_price,
            row.extended_price,
        )
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]⚠️  {warning}[/yellow]")


@click.group()
def cli():
    """Convert vendor quotation PDFs into BOM CSV files."""


@cli.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--opportunity-id', '-i', required=True, callback=validate_opportunity_id,
              help='Opportunity ID (18 characters)')
@click.option('--output-dir', '-o', type=click.Path(file_okay=False), default='.',
              show_default=True, help='Directory for the generated CSV')
@click.option('--catalog', 'catalog_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON child product catalog')
@click.option('--base-product-code', help='Override the base product code found in the quote')
@click.option('--stdout', 'to_stdout', is_flag=True, help='Print the CSV instead of writing a file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def convert(input_path: str, opportunity_id: str, output_dir: str, catalog_path: Optional[str],
            base_product_code: Optional[str], to_stdout: bool, verbose: bool):
    """Convert a quotation (.pdf or extracted .txt) into a BOM CSV."""
    configure_logging(verbose)

    try:
        converter = build_converter(catalog_path)
        result = run_conversion(converter, input_path, opportunity_id, base_product_code)
        if to_stdout:
            click.echo(result.to_csv())
            return
        path = result.write(output_dir)
    except CLI_ERRORS as e:
        err_console.print(f"[red]❌ Error: {e}[/red]")
        raise click.Abort()

    show_summary(result)
    console.print(f"[green]💾 CSV saved to: {path}[/green]")


@cli.command('inspect')
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--catalog', 'catalog_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON child product catalog')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def inspect_quote(input_path: str, catalog_path: Optional[str], verbose: bool):
    """Print the extracted header and line items as JSON."""
    configure_logging(verbose)

    try:
        converter = build_converter(catalog_path)
        result = run_conversion(converter, input_path, opportunity_id='')
    except CLI_ERRORS as e:
        err_console.print(f"[red]❌ Error: {e}[/red]")
        raise click.Abort()

    click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
