#!/usr/bin/env python3.11
"""
Точка входа: расстояние редактирования между деревьями T и H.

    python -m rte_ted --text t.conll --hypothesis h.conll --alignments links.tsv --features
"""
import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from rte_ted.alignment.lookup import AlignmentLookup, read_links
from rte_ted.components import create_component
from rte_ted.config import DistanceConfig, load_config
from rte_ted.exceptions import RTETedError
from rte_ted.features import TransformationCategories, extract_features

logger = logging.getLogger(__name__)
console = Console()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tree edit distance между деревьями зависимостей T и H")
    parser.add_argument("--text", required=True, help="CoNLL-X файл с текстом (T)")
    parser.add_argument("--hypothesis", required=True, help="CoNLL-X файл с гипотезой (H)")
    parser.add_argument("--alignments", default=None,
                        help="TSV с выравниваниями: T, H, link_info, strength, direction")
    parser.add_argument("--config", default=None, help="YAML конфигурация (по умолчанию rte_ted/resources/default.yaml)")
    parser.add_argument("--features", action="store_true", help="Вывести признаки для классификатора")
    return parser


def _print_report(result, features=None):
    table = Table(title="Трансформации T -> H")
    table.add_column("#", style="dim")
    table.add_column("Тип", style="cyan")
    table.add_column("T", style="green")
    table.add_column("H", style="green")
    table.add_column("Info", style="magenta")

    for i, trans in enumerate(result.transformations, 1):
        table.add_row(
            str(i),
            trans.type,
            trans.token_t.form if trans.token_t is not None else "-",
            trans.token_h.form if trans.token_h is not None else "-",
            trans.info or "",
        )
    console.print(table)

    console.print(f"Raw distance: [bold]{result.raw_distance:.4f}[/bold]")
    console.print(f"Normalized distance: [bold]{result.normalized_distance:.4f}[/bold]")

    if features is not None:
        console.print(f"\n[cyan]Features ({len(features)}):[/cyan]")
        for name in sorted(features):
            console.print(f"  {name}", markup=False)


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else DistanceConfig()
    except RTETedError as e:
        console.print(f"[red]Ошибка конфигурации: {e}[/red]")
        return 2

    logging.basicConfig(
        level=getattr(logging, config.verbosity_level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        lookup = AlignmentLookup.from_links(read_links(args.alignments)) if args.alignments else None
        component = create_component(config)
        result = component.calculate_conllx(
            Path(args.text).read_text(encoding="utf-8"),
            Path(args.hypothesis).read_text(encoding="utf-8"),
            lookup,
        )
    except (RTETedError, OSError) as e:
        logger.error(f"Calculation failed: {e}")
        console.print(f"[red]{e}[/red]")
        return 1

    features = None
    if args.features:
        features = extract_features(result, TransformationCategories.parse(config.transformations))

    _print_report(result, features)
    return 0


if __name__ == "__main__":
    sys.exit(main())
