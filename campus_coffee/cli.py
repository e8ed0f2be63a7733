#!/usr/bin/env python
"""
Command-line interface for CampusCoffee

Usage:
    campus-coffee import --node-id 5589879349 --store pos.json
    campus-coffee get --id 1 --store pos.json
    campus-coffee list --store pos.json
"""

import sys
import json
import argparse

from loguru import logger

from .config import get_config, validate_config
from .errors import translate
from .repository import InMemoryPosRepository
from .service import PosService


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def build_service(args) -> PosService:
    config = get_config()
    validate_config(config)
    repository = InMemoryPosRepository.load(args.store) if args.store else InMemoryPosRepository()
    return PosService(repository, config=config)


def print_error(exception: Exception, path: str) -> int:
    error = translate(exception, path=path)
    print(error.model_dump_json(indent=2))
    return 1


def cmd_import(args):
    """Import a POS from an OSM node"""
    path = f"/api/pos/import/osm/{args.node_id}"
    try:
        service = build_service(args)
        pos = service.import_from_osm_node(args.node_id)
        if args.store:
            service.repository.save(args.store)
    except Exception as e:
        return print_error(e, path)

    logger.info(f"✓ Imported: {pos.name} (ID {pos.id})")
    print(pos.model_dump_json(indent=2))
    return 0


def cmd_get(args):
    """Show a single POS"""
    try:
        pos = build_service(args).get_by_id(args.id)
    except Exception as e:
        return print_error(e, f"/api/pos/{args.id}")

    print(pos.model_dump_json(indent=2))
    return 0


def cmd_list(args):
    """List all POS"""
    try:
        records = build_service(args).get_all()
    except Exception as e:
        return print_error(e, "/api/pos")

    print(json.dumps([pos.model_dump(mode="json") for pos in records], indent=2, ensure_ascii=False))
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="CampusCoffee CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Import a POS from OpenStreetMap:
    campus-coffee import --node-id 5589879349 --store pos.json

  Show all stored POS:
    campus-coffee list --store pos.json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--store", help="JSON file holding POS records (in-memory only if omitted)")

    # SUPPRESS: a top-level --store must not be overwritten with None
    store_parent = argparse.ArgumentParser(add_help=False)
    store_parent.add_argument("--store", default=argparse.SUPPRESS, help="JSON file holding POS records")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    import_parser = subparsers.add_parser("import", parents=[store_parent], help="Import a POS from an OSM node")
    import_parser.add_argument("--node-id", type=int, required=True, help="OpenStreetMap node ID")
    import_parser.set_defaults(func=cmd_import)

    get_parser = subparsers.add_parser("get", parents=[store_parent], help="Show a POS by ID")
    get_parser.add_argument("--id", type=int, required=True, help="POS ID")
    get_parser.set_defaults(func=cmd_get)

    list_parser = subparsers.add_parser("list", parents=[store_parent], help="List all POS")
    list_parser.set_defaults(func=cmd_list)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
