"""
Command-line interface for refgraph.

Author: Kevin R. Roy
"""

import logging
import sys
from pathlib import Path

import click
import yaml

from . import __version__
from .core.sides import Face, Side
from .errors import ReferenceGraphError


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def _load(graph_path: str, skip_invalid: bool):
    """Load a graph document, exiting with an error message on failure."""
    from .io.loader import load_graph_yaml

    try:
        result = load_graph_yaml(
            Path(graph_path),
            on_error='skip' if skip_invalid else 'abort',
        )
    except (ValueError, yaml.YAMLError) as e:
        click.echo(f"Error loading graph: {e}", err=True)
        sys.exit(1)

    if result.errors:
        click.echo(f"Skipped {len(result.errors)} invalid records", err=True)
    return result


@click.group()
@click.version_option(version=__version__)
def cli():
    """refgraph: graph-based reference structures."""
    pass


@cli.command()
@click.argument('graph', type=click.Path(exists=True))
@click.option('--skip-invalid', is_flag=True,
              help='Skip invalid records instead of aborting')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def info(graph, skip_invalid, verbose):
    """Display a summary of a graph document."""
    from .io.output import print_graph_summary

    _setup_logging(verbose)
    result = _load(graph, skip_invalid)

    print_graph_summary(result.graph, name=Path(graph).name)
    if result.threads:
        click.echo(f"Threads: {len(result.threads)}")
        for name, thread in result.threads.items():
            click.echo(f"  - {name}: {thread} ({thread.length} bp)")


@cli.command()
@click.argument('graph', type=click.Path(exists=True))
@click.option('--path', '-p', 'path_spec', type=str, required=True,
              help="Block walk, e.g. '10+,20-' (blocks named by left coordinate)")
@click.option('--start', '-s', type=int, default=0,
              help='Start offset on the oriented sequence (default: 0)')
@click.option('--end', '-e', type=int, default=None,
              help='End offset, exclusive (default: full path)')
@click.option('--skip-invalid', is_flag=True,
              help='Skip invalid records instead of aborting')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def resolve(graph, path_spec, start, end, skip_invalid, verbose):
    """
    Print the sequence spelled out by a thread through the graph.

    \b
    Example:
      refgraph resolve graph.yaml --path 10+,20- --start 1 --end 8
    """
    from .core.thread import build_thread, resolve_sequence
    from .io.loader import parse_path_spec

    _setup_logging(verbose)
    result = _load(graph, skip_invalid)

    try:
        path = parse_path_spec(path_spec, result.graph)
        thread = build_thread(result.graph, path, start_offset=start, end_offset=end)
    except ValueError as e:
        click.echo(f"Error building thread: {e}", err=True)
        sys.exit(1)

    click.echo(resolve_sequence(thread))


@cli.command()
@click.argument('graph', type=click.Path(exists=True))
@click.option('--coordinate', '-c', type=int, required=True,
              help='Position id of the side')
@click.option('--face', '-f', type=click.Choice(['left', 'right']), required=True,
              help='Face of the side')
@click.option('--skip-invalid', is_flag=True,
              help='Skip invalid records instead of aborting')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def neighbors(graph, coordinate, face, skip_invalid, verbose):
    """List the sides joined to a side by a block or an adjacency."""
    _setup_logging(verbose)
    result = _load(graph, skip_invalid)

    try:
        side = Side(coordinate, Face.parse(face))
    except ReferenceGraphError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if side not in result.graph:
        click.echo(f"Error: {side} is not a block end in this graph", err=True)
        sys.exit(1)

    for neighbor in sorted(result.graph.neighbors(side)):
        click.echo(str(neighbor))


@cli.command()
@click.argument('graph', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Output directory')
@click.option('--no-bases', is_flag=True,
              help='Leave base strings out of blocks.tsv')
@click.option('--skip-invalid', is_flag=True,
              help='Skip invalid records instead of aborting')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def export(graph, output, no_bases, skip_invalid, verbose):
    """Write blocks.tsv and adjacencies.tsv for a graph document."""
    from .io.output import write_graph_tsv

    _setup_logging(verbose)
    result = _load(graph, skip_invalid)

    blocks_path, adjacencies_path = write_graph_tsv(
        result.graph, Path(output), include_bases=not no_bases
    )
    click.echo(f"Blocks written to: {blocks_path}")
    click.echo(f"Adjacencies written to: {adjacencies_path}")


@cli.command()
@click.option('--output', '-o', type=click.Path(), default='refgraph.yaml',
              help='Output graph document path')
def init(output):
    """Generate a template graph document."""
    template = '''# refgraph graph document
# Blocks are runs of consecutive position ids; adjacencies join block ends.

options:
  allow_self_adjacency: true
  reject_duplicate_adjacencies: false
  allow_virtual_junctions: false

blocks:
  - start: 10            # LEFT face at 10, RIGHT face at 14
    bases: ACCTA
  - start: 20
    bases: GGTTAC
  - left: {coordinate: 30, face: left}
    right: {coordinate: 33, face: right}
    bases: TTGA

adjacencies:
  - left: 14R
    right: 20L
  - left: 25R
    right: 33R           # joins onto block 30-33 read backwards

threads:
  - name: main
    path: 10+,20+,30-
    start: 0
    end: 15
'''

    with open(output, 'w') as f:
        f.write(template)

    click.echo(f"Generated graph template: {output}")
    click.echo("\nEdit this file and run:")
    click.echo(f"  refgraph info {output}")


if __name__ == '__main__':
    cli()
