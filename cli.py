#!/usr/bin/env python3
"""
Topic Graph CLI - inspect and edit a versioned topic hierarchy
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv
from rich.console import Console
from rich.tree import Tree

from topic_graph.config import get_config
from topic_graph.exceptions import TopicGraphError
from topic_graph.logging_config import setup_logging, get_logger
from topic_graph.models import Topic
from topic_graph.service import TopicGraphService
from topic_graph.store import create_store

logger = get_logger("cli")
console = Console()


def _only_latest(args) -> bool:
    return not getattr(args, "all_versions", False)


def _topic_label(topic: Dict[str, Any]) -> str:
    marker = "" if topic.get("is_latest", True) else " [dim](old)[/dim]"
    return f"[bold]{topic['name']}[/bold] v{topic['version']} [cyan]{topic['id']}[/cyan]{marker}"


def _add_branch(branch: Tree, node: Dict[str, Any]) -> None:
    for child in node["children"]:
        _add_branch(branch.add(_topic_label(child)), child)


def render_tree(node: Dict[str, Any]) -> Tree:
    """Build a rich Tree from a serialized topic tree."""
    tree = Tree(_topic_label(node))
    _add_branch(tree, node)
    return tree


def print_topics(topics: List[Topic], as_json: bool, arrow: str = "") -> None:
    if as_json:
        print(json.dumps([t.to_record() for t in topics], indent=2, ensure_ascii=False))
        return
    if not topics:
        print("No topics found.")
        return
    if arrow:
        print(arrow.join(f"{t.name} ({t.id})" for t in topics))
        return
    for i, topic in enumerate(topics, 1):
        print(f"{i}. {topic.name} v{topic.version}  {topic.id}")


async def _run(args, handler) -> None:
    config = get_config()
    async with create_store(config.store) as store:
        await handler(TopicGraphService(store, config), args)


async def _add(service: TopicGraphService, args) -> None:
    topic = await service.versions.create_topic(
        name=args.name,
        content=args.content,
        description=args.description,
        parent_topic_id=args.parent,
        created_by=args.author,
    )
    print(f"Added: {topic.name} ({topic.id})")


async def _version(service: TopicGraphService, args) -> None:
    changes = {}
    for field in ("name", "content", "description"):
        value = getattr(args, field)
        if value is not None:
            changes[field] = value
    if args.parent is not None:
        changes["parent_topic_id"] = args.parent or None
    topic = await service.versions.create_version(args.id, changes, created_by=args.author)
    print(f"Created version {topic.version} of {topic.base_topic_id}: {topic.id}")


async def _history(service: TopicGraphService, args) -> None:
    history = await service.versions.get_history(args.base_id)
    if args.json:
        print(history.model_dump_json(indent=2))
        return
    print(f"Topic {history.base_topic_id} (current version {history.current_version})")
    for topic in history.versions:
        marker = "*" if topic.is_latest else " "
        print(f" {marker} v{topic.version}  {topic.id}  {topic.name}  {topic.updated_at}")


async def _tree(service: TopicGraphService, args) -> None:
    tree = await service.build_tree(args.id, _only_latest(args))
    if args.json:
        print(json.dumps(tree, indent=2, ensure_ascii=False))
    else:
        console.print(render_tree(tree))


async def _forest(service: TopicGraphService, args) -> None:
    trees = await service.build_forest(_only_latest(args))
    if args.json:
        print(json.dumps(trees, indent=2, ensure_ascii=False))
        return
    if not trees:
        print("No root topics found.")
        return
    for tree in trees:
        console.print(render_tree(tree))
    print(f"\nTotal: {len(trees)} root topic(s)")


async def _path(service: TopicGraphService, args) -> None:
    path = await service.get_path(args.id, _only_latest(args))
    print_topics(path, args.json, arrow=" > ")


async def _descendants(service: TopicGraphService, args) -> None:
    print_topics(await service.get_descendants(args.id, _only_latest(args)), args.json)


async def _shortest_path(service: TopicGraphService, args) -> None:
    result = await service.shortest_path_result(args.start, args.end, _only_latest(args))
    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return
    stats = result.search_stats
    if result.path_exists:
        print(f"Distance: {result.distance}")
        print_topics(result.path, False, arrow=" -> ")
    else:
        print(f"No path between {args.start} and {args.end}")
    print(f"Explored {stats.nodes_explored} node(s), max depth {stats.max_depth}, "
          f"{stats.execution_time_ms:.1f} ms ({stats.algorithm_used})")


async def _delete(service: TopicGraphService, args) -> None:
    removed = await service.versions.delete_topic(args.id)
    print(f"Removed {removed} version(s) of {args.id}")


COMMANDS = {
    "add": _add,
    "version": _version,
    "history": _history,
    "tree": _tree,
    "forest": _forest,
    "path": _path,
    "descendants": _descendants,
    "shortest-path": _shortest_path,
    "delete": _delete,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="topic-graph",
        description="Topic Graph - browse versioned topic hierarchies"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # shared options for read commands
    query = argparse.ArgumentParser(add_help=False)
    query.add_argument("--all-versions", action="store_true",
                       help="Traverse every stored version, not only the latest")
    query.add_argument("--json", action="store_true", help="Print JSON output")

    add_parser = subparsers.add_parser("add", help="Create a topic")
    add_parser.add_argument("name", help="Topic name")
    add_parser.add_argument("content", help="Topic content")
    add_parser.add_argument("-d", "--description", help="Optional description")
    add_parser.add_argument("-p", "--parent", help="Parent topic id")
    add_parser.add_argument("-a", "--author", help="Created by")

    version_parser = subparsers.add_parser("version", help="Create a new version of a topic")
    version_parser.add_argument("id", help="Topic id (any version)")
    version_parser.add_argument("-n", "--name", help="New name")
    version_parser.add_argument("-c", "--content", help="New content")
    version_parser.add_argument("-d", "--description", help="New description")
    version_parser.add_argument("-p", "--parent", help="New parent id (empty string detaches)")
    version_parser.add_argument("-a", "--author", help="Created by")

    history_parser = subparsers.add_parser("history", help="List versions of a topic")
    history_parser.add_argument("base_id", help="Base topic id")
    history_parser.add_argument("--json", action="store_true", help="Print JSON output")

    tree_parser = subparsers.add_parser("tree", parents=[query], help="Show the tree under a topic")
    tree_parser.add_argument("id", help="Root topic id")

    subparsers.add_parser("forest", parents=[query], help="Show every root topic tree")

    path_parser = subparsers.add_parser("path", parents=[query], help="Show the path from the root")
    path_parser.add_argument("id", help="Topic id")

    desc_parser = subparsers.add_parser("descendants", parents=[query], help="List descendants")
    desc_parser.add_argument("id", help="Topic id")

    sp_parser = subparsers.add_parser("shortest-path", parents=[query],
                                      help="Shortest path between two topics")
    sp_parser.add_argument("start", help="Start topic id")
    sp_parser.add_argument("end", help="End topic id")

    delete_parser = subparsers.add_parser("delete", help="Delete a childless topic")
    delete_parser.add_argument("id", help="Topic id")

    return parser


def main(argv=None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = get_config()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2
    log_file = Path(config.logging.log_file) if config.logging.log_file else None
    setup_logging(config.logging.level_value, log_file)

    try:
        asyncio.run(_run(args, COMMANDS[args.command]))
    except TopicGraphError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e.message}", file=sys.stderr)
        return 2
    except ValueError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
