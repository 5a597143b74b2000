"""CLI entry point: python -m esdocs <command> INDEX TYPE ...

Commands: get, index, delete, search, count. Connection settings come
from the ESDOCS_* environment variables, overridable with --url.
"""

import argparse
import dataclasses
import json
import logging
import sys

from esdocs.client import ESClient
from esdocs.config import ESConfig
from esdocs.document import Document
from esdocs.logging import bind_request_id, configure_logging
from esdocs.models import ESDocsError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="esdocs",
        description="Manage and search documents in an Elasticsearch-style engine",
    )
    parser.add_argument("--url", type=str, default=None, help="Engine base URL")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable DEBUG-level logging to stderr"
    )
    parser.add_argument(
        "--json-log", action="store_true", help="Emit JSON log lines (default: text)"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    def add_target(p: argparse.ArgumentParser) -> None:
        p.add_argument("index", help="Index name")
        p.add_argument("type", help="Document type name")

    p_get = sub.add_parser("get", help="Fetch one document by id")
    add_target(p_get)
    p_get.add_argument("id", help="Document id")

    p_index = sub.add_parser("index", help="Index a JSON document")
    add_target(p_index)
    p_index.add_argument("data", help="Document body as a JSON object")
    p_index.add_argument("--id", type=str, default=None, help="Document id (engine assigns one)")
    p_index.add_argument("--refresh", action="store_true", help="Refresh after the write")

    p_delete = sub.add_parser("delete", help="Delete one document by id")
    add_target(p_delete)
    p_delete.add_argument("id", help="Document id")

    p_search = sub.add_parser("search", help="Run a query-string search")
    add_target(p_search)
    p_search.add_argument("query", nargs="*", help="Query string (default: match all)")
    p_search.add_argument("--size", type=int, default=None, help="Max hits to return")

    p_count = sub.add_parser("count", help="Count documents matching a query string")
    add_target(p_count)
    p_count.add_argument("query", nargs="*", help="Query string (default: match all)")

    return parser


def _run(client: ESClient, args: argparse.Namespace) -> object:
    doc_type = client.get_index(args.index).get_type(args.type)

    if args.command == "get":
        doc = doc_type.get_document(args.id)
        return dataclasses.asdict(doc)

    if args.command == "index":
        data = json.loads(args.data)
        if not isinstance(data, dict):
            raise ValueError("document body must be a JSON object")
        doc = Document(id=args.id, data=data, auto_populate=True)
        if args.refresh:
            doc.options.refresh = True
        response = doc_type.add_document(doc)
        return {"_id": doc.id, "_version": doc.version, "status": response.status_code}

    if args.command == "delete":
        response = doc_type.delete_by_id(args.id)
        return response.body

    query = " ".join(args.query) or None
    if args.command == "search":
        return doc_type.search(query, args.size).to_dict()
    return {"count": doc_type.count(query)}


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    configure_logging(level=level, json_format=args.json_log)
    bind_request_id()

    try:
        config = ESConfig.from_env(base_url=args.url)
        with ESClient(config) as client:
            result = _run(client, args)
    except (ESDocsError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
