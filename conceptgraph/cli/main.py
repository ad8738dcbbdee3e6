#!/usr/bin/env python3
"""
Command line interface for conceptgraph

Usage: conceptgraph [--config FILE] [--verbose] graph build|validate|stats|info|query
       conceptgraph config path|show|get|init
"""

import sys
import json
import hashlib
import logging
import click
from pathlib import Path
from typing import Optional, List

from .. import __version__, setup_logging
from ..errors import ConceptGraphError, ConfigError
from ..graph import (
    GraphBuilder,
    FrontmatterExtractor,
    ErrorHandling,
    GraphData,
    GraphMetadata,
    DegreeDirection,
    save_graph,
    load_graph,
    is_cache_fresh,
    compute_content_hash,
    GraphValidator,
    compute_stats,
    top_nodes_by_degree,
    calculate_centrality,
    find_bridges,
    shortest_path,
    neighborhood,
    prerequisites_sorted,
    get_related
)
from ..graph.query import (
    related_response,
    path_response,
    prerequisites_response,
    neighborhood_response,
    graph_info_response
)
from ..services.file_service import FileInfo, discover_files
from .config_validator import validate_content_directory
from .config import (
    load_config,
    resolve_config_path,
    get_config_value,
    content_path,
    graph_output_path,
    dump_config,
    write_default_config
)

logger = logging.getLogger(__name__)

QUERY_TYPES = ['related', 'prerequisites', 'path', 'neighborhood']


def _fail(message: str):
    """Report a command failure and exit with status 1."""
    click.echo(f"❌ {message}")
    sys.exit(1)


def _content_fingerprint(files: List[FileInfo]) -> str:
    """
    Freshness key for a content tree: file bytes plus relative paths.

    Node ids default to file stems; renaming a file changes the key.
    """
    hasher = hashlib.sha256(compute_content_hash(info.path for info in files).encode('utf-8'))
    for info in files:
        hasher.update(info.relative_path.as_posix().encode('utf-8'))
        hasher.update(b'\0')
    return hasher.hexdigest()


def _load_snapshot(ctx: click.Context) -> GraphData:
    """Load the graph snapshot selected by --graph or the configuration."""
    path = ctx.obj.get('graph_path') or graph_output_path(ctx.obj['config'])
    return load_graph(path)


@click.group()
@click.version_option(version=__version__, prog_name='conceptgraph')
@click.option('--config', 'config_file', type=click.Path(dir_okay=False),
              help='Configuration file (default: $CONCEPTGRAPH_CONFIG or ~/.config/conceptgraph/config.yaml)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def cli(ctx, config_file, verbose):
    """conceptgraph - build, validate and query concept knowledge graphs."""
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config_file
    ctx.obj['verbose'] = verbose

    # "config" subcommands must work even when the configuration is broken
    if ctx.invoked_subcommand == 'config':
        setup_logging('DEBUG' if verbose else 'WARNING')
        return

    try:
        config = load_config(config_file)
    except ConceptGraphError as e:
        _fail(str(e))

    logging_config = config.get('logging', {})
    setup_logging('DEBUG' if verbose else logging_config.get('level', 'INFO'),
                  logging_config.get('file'))
    ctx.obj['config'] = config


@cli.group()
@click.option('--graph', 'graph_path', type=click.Path(dir_okay=False),
              help='Graph snapshot to use (default: graph.output_path from the configuration)')
@click.pass_context
def graph(ctx, graph_path):
    """Build and inspect the concept graph."""
    ctx.obj['graph_path'] = graph_path


@graph.command()
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Where to save the graph')
@click.option('--dry-run', is_flag=True, help='Build and report without saving')
@click.option('--use-cache/--no-cache', default=None,
              help='Skip the build when the saved graph matches the content (default: graph.use_cache)')
@click.pass_context
def build(ctx, output, dry_run, use_cache):
    """Build the graph from the content directory."""
    config = ctx.obj['config']
    source = content_path(config)
    target = Path(output or ctx.obj.get('graph_path') or graph_output_path(config))
    glob = config['content']['glob']
    if use_cache is None:
        use_cache = config['graph']['use_cache']

    is_valid, issues = validate_content_directory(source)
    if not is_valid:
        for issue in issues:
            logger.error(issue)
        _fail(f"Build failed: {'; '.join(issues)}")

    try:
        policy = ErrorHandling.from_name(config['graph']['error_handling'])

        click.echo(f"🔍 Building graph from: {source}")

        files = discover_files(source, glob)
        content_hash = _content_fingerprint(files)

        if use_cache and not dry_run and is_cache_fresh(target, content_hash):
            click.echo(f"✅ Graph is up to date: {target}")
            return

        builder = (GraphBuilder(FrontmatterExtractor(glob))
                   .with_content_path(source)
                   .with_error_handling(policy))
        graph_data, stats = builder.build_sync()

        click.echo("Graph built:")
        click.echo(f"  Nodes:           {stats.nodes_created}")
        click.echo(f"  Edges:           {stats.edges_created}")
        click.echo(f"  Files processed: {stats.files_processed}")
        click.echo(f"  Files skipped:   {stats.files_skipped}")
        if stats.errors:
            click.echo(f"  Errors:          {len(stats.errors)}")
            for error in stats.errors:
                click.echo(f"    • {error.file}: {error.message}")
        if stats.dangling_refs:
            click.echo(f"  Dangling refs:   {len(stats.dangling_refs)}")
            for ref in stats.dangling_refs:
                click.echo(f"    • {ref}")

        if dry_run:
            click.echo("\nDry run: graph not saved.")
            return

        metadata = GraphMetadata.default()
        metadata.content_hash = content_hash
        metadata.source_file_count = stats.files_processed
        save_graph(graph_data, target, metadata)
        click.echo(f"\n✅ Graph saved to: {target}")

    except ConceptGraphError as e:
        logger.error(f"Build failed: {e}")
        _fail(f"Build failed: {e}")


@graph.command()
@click.option('--json', 'json_output', is_flag=True, help='Output the validation result as JSON')
@click.pass_context
def validate(ctx, json_output):
    """Check the saved graph for structural problems."""
    try:
        graph_data = _load_snapshot(ctx)
    except ConceptGraphError as e:
        _fail(f"Validation failed: {e}")

    result = GraphValidator(ctx.obj['config']).validate_graph(graph_data)

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        if result.valid:
            click.echo("✅ Graph is valid.")
        else:
            click.echo("❌ Graph has validation issues:")

        for error in result.errors:
            click.echo(f"  ERROR [{error.code}]: {error.message}")
            for item in error.nodes + error.edges:
                click.echo(f"    - {item}")

        for warning in result.warnings:
            click.echo(f"  WARN  [{warning.code}]: {warning.message}")
            for item in warning.nodes + warning.edges:
                click.echo(f"    - {item}")

        for info in result.info:
            click.echo(f"  INFO  [{info.code}]: {info.message}")

        click.echo(f"\nSummary: {len(result.errors)} error(s), {len(result.warnings)} warning(s)")

    if not result.valid:
        sys.exit(1)


@graph.command()
@click.option('--top', type=int, default=5, show_default=True, help='How many top nodes by degree to list')
@click.option('--json', 'json_output', is_flag=True, help='Output statistics as JSON')
@click.pass_context
def stats(ctx, top, json_output):
    """Show statistics for the saved graph."""
    try:
        graph_data = _load_snapshot(ctx)
    except ConceptGraphError as e:
        _fail(f"Stats failed: {e}")

    graph_stats = compute_stats(graph_data)
    top_nodes = top_nodes_by_degree(graph_data, top, DegreeDirection.BOTH)
    centrality = calculate_centrality(graph_data)[:top]
    bridges = find_bridges(graph_data)

    if json_output:
        data = graph_stats.to_dict()
        data['top_nodes'] = [{'id': node_id, 'degree': degree} for node_id, degree in top_nodes]
        data['centrality'] = [{'id': node_id, 'score': score} for node_id, score in centrality]
        data['bridges'] = [edge.describe() for edge in bridges]
        click.echo(json.dumps(data, indent=2))
        return

    click.echo("Graph Statistics")
    click.echo("================")
    click.echo(f"Nodes:          {graph_stats.node_count}")
    click.echo(f"  Canonical:    {graph_stats.canonical_count}")
    click.echo(f"  Variants:     {graph_stats.variant_count}")
    click.echo(f"  Orphans:      {graph_stats.orphan_count}")
    click.echo(f"Edges:          {graph_stats.edge_count}")
    click.echo(f"Avg degree:     {graph_stats.avg_degree:.2f}")
    click.echo(f"Max in-degree:  {graph_stats.max_in_degree}")
    click.echo(f"Max out-degree: {graph_stats.max_out_degree}")

    if graph_stats.most_depended_on:
        click.echo(f"Most depended on: {graph_stats.most_depended_on} (in-degree: {graph_stats.max_in_degree})")
    if graph_stats.most_dependencies:
        click.echo(f"Most dependencies: {graph_stats.most_dependencies} (out-degree: {graph_stats.max_out_degree})")

    if graph_stats.category_distribution:
        click.echo("\nCategories:")
        for name, count in sorted(graph_stats.category_distribution.items(), key=lambda item: -item[1]):
            click.echo(f"  {name}: {count}")

    if graph_stats.relationship_distribution:
        click.echo("\nRelationships:")
        for name, count in sorted(graph_stats.relationship_distribution.items(), key=lambda item: -item[1]):
            click.echo(f"  {name}: {count}")

    if top_nodes:
        click.echo("\nTop nodes by degree:")
        for node_id, degree in top_nodes:
            click.echo(f"  {node_id}: {degree}")

    if centrality:
        click.echo("\nCentrality:")
        for node_id, score in centrality:
            click.echo(f"  {node_id}: {score:.2f}")

    if bridges:
        click.echo("\nBridges:")
        for edge in bridges:
            click.echo(f"  {edge.describe()} [{edge.relationship.name()}]")


@graph.command()
@click.option('--json', 'json_output', is_flag=True, help='Output the overview as JSON')
@click.pass_context
def info(ctx, json_output):
    """Summarize the saved graph by category and relationship."""
    try:
        graph_data = _load_snapshot(ctx)
    except ConceptGraphError as e:
        _fail(f"Info failed: {e}")

    response = graph_info_response(graph_data)

    if json_output:
        click.echo(json.dumps(response.to_dict(), indent=2))
        return

    click.echo(f"Graph: {response.node_count} nodes, {response.edge_count} edges")
    if response.categories:
        click.echo("\nCategories:")
        for item in response.categories:
            click.echo(f"  {item.category}: {item.count}")
    if response.relationships:
        click.echo("\nRelationships:")
        for item in response.relationships:
            click.echo(f"  {item.relationship}: {item.count}")


@graph.command()
@click.argument('node_id')
@click.option('--type', 'query_type', type=click.Choice(QUERY_TYPES), default='related',
              show_default=True, help='Kind of query')
@click.option('--to', 'to_id', help='Target node for path queries')
@click.option('--radius', type=int, default=1, show_default=True, help='Hop radius for neighborhood queries')
@click.option('--json', 'json_output', is_flag=True, help='Output the response as JSON')
@click.pass_context
def query(ctx, node_id, query_type, to_id, radius, json_output):
    """Query the saved graph starting from NODE_ID."""
    try:
        graph_data = _load_snapshot(ctx)

        if query_type == 'related':
            response = related_response(get_related(graph_data, node_id))
        elif query_type == 'prerequisites':
            response = prerequisites_response(graph_data, prerequisites_sorted(graph_data, node_id))
        elif query_type == 'path':
            if not to_id:
                raise ConfigError("--to is required for path queries")
            result = shortest_path(graph_data, node_id, to_id)
            response = path_response(graph_data, node_id, to_id, result)
        else:
            response = neighborhood_response(neighborhood(graph_data, node_id, radius), radius)

    except ConceptGraphError as e:
        logger.error(f"Query failed: {e}")
        _fail(f"Query failed: {e}")

    if json_output:
        click.echo(json.dumps(response.to_dict(), indent=2))
    else:
        _print_response(query_type, node_id, to_id, response)


def _print_response(query_type: str, node_id: str, to_id: Optional[str], response):
    """Human-readable rendering of a query response."""
    if query_type == 'related':
        click.echo(f"Related to '{node_id}':")
        if not response.related:
            click.echo("  (no related nodes)")
        for group in response.related:
            click.echo(f"  [{group.relationship}]")
            for concept in group.concepts:
                click.echo(f"    - {concept.id} ({concept.title})")
        click.echo(f"\n{response.total_count} related node(s)")

    elif query_type == 'prerequisites':
        click.echo(f"Prerequisites for '{node_id}' (learning order):")
        if not response.prerequisites:
            click.echo("  (no prerequisites)")
        for position, info in enumerate(response.prerequisites, start=1):
            click.echo(f"  {position}. {info.node.id} ({info.node.title})")
        if response.has_cycles:
            click.echo("\n  WARNING: Prerequisite cycle detected; ordering is approximate.")

    elif query_type == 'path':
        if not response.found:
            click.echo(f"No path found from '{node_id}' to '{to_id}'.")
            return
        click.echo(f"Path from '{node_id}' to '{to_id}':")
        for position, step in enumerate(response.path, start=1):
            click.echo(f"  {position}. {step.node.id} ({step.node.title})")
            if step.relationship_to_next:
                click.echo(f"    --[{step.relationship_to_next}]-->")
        click.echo(f"\nTotal weight: {response.total_weight:.2f}")

    else:
        click.echo(f"Neighborhood of '{node_id}' (radius {response.radius}):")
        if not response.nodes:
            click.echo("  (no neighbors)")
        for info in response.nodes:
            click.echo(f"  [{info.distance}] {info.node.id} ({info.node.title})")


@cli.group(name='config')
def config_group():
    """Inspect and create configuration files."""
    pass


@config_group.command(name='path')
@click.pass_context
def config_path(ctx):
    """Print the configuration file in effect."""
    path = resolve_config_path(ctx.obj['config_file'])
    click.echo(str(path))
    if not path.exists():
        click.echo("(file does not exist; run `conceptgraph config init` to create it)", err=True)


@config_group.command(name='show')
@click.pass_context
def config_show(ctx):
    """Print the effective configuration as YAML."""
    try:
        config = load_config(ctx.obj['config_file'])
    except ConceptGraphError as e:
        _fail(str(e))
    click.echo(dump_config(config), nl=False)


@config_group.command(name='get')
@click.argument('key')
@click.pass_context
def config_get(ctx, key):
    """Print one configuration value (dotted KEY, e.g. graph.output_path)."""
    try:
        value = get_config_value(load_config(ctx.obj['config_file']), key)
    except ConceptGraphError as e:
        _fail(str(e))

    if isinstance(value, (dict, list)):
        click.echo(dump_config(value), nl=False)
    else:
        click.echo(value)


@config_group.command(name='init')
@click.option('--file', 'file_path', type=click.Path(dir_okay=False),
              help='Where to write the file (default: the resolved configuration path)')
@click.option('--force', is_flag=True, help='Overwrite an existing file')
@click.pass_context
def config_init(ctx, file_path, force):
    """Write a default configuration file."""
    path = Path(file_path) if file_path else resolve_config_path(ctx.obj['config_file'])
    try:
        write_default_config(path, force=force)
    except ConceptGraphError as e:
        _fail(str(e))
    click.echo(f"✅ Configuration written to: {path}")


def main():
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("\n⚠️  Interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
