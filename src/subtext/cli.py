"""CLI for subtext - parse and inspect Subtext notes."""

import argparse
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.attributes import project_attributes
from .core.excerpt import excerpt
from .core.headers import HeaderSubtext
from .core.model import Memo
from .core.shortlinks import find_inline_at, shortlink_to_slug, shortlinks
from .format.serialize import (
    attributes_to_list,
    document_to_dict,
    headers_to_dict,
    inline_to_dict,
    to_json,
    to_yaml,
)
from .lint import DeadLinksRule, Finding, MissingHeadersRule
from .runtime import build_runtime


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _emit(args: argparse.Namespace, data: Any) -> bool:
    """Print ``data`` if a machine-readable format was requested."""
    if args.json:
        print(to_json(data))
        return True
    if args.yaml:
        print(to_yaml(data), end="")
        return True
    return False


def _memo_excerpt(memo: Memo, rt: Any) -> str:
    config = rt.config.excerpt
    return excerpt(memo.body, fallback=config.fallback, limit=config.limit)


def cmd_parse(args: argparse.Namespace, rt: Any) -> int:
    """Print the headers and block structure of a file."""
    envelope = HeaderSubtext.parse(_read_input(args.file))
    data = {
        "headers": headers_to_dict(envelope.headers),
        **document_to_dict(envelope.body, include_empty=not args.skip_empty),
    }
    if _emit(args, data):
        return 0

    for header in envelope.headers:
        print(f"{header.name}: {header.value}")
    if envelope.headers and not args.quiet:
        print()
    for block in data["blocks"]:
        print(f"{block['kind']:<8} {block['body']}")
        for inline in block["inline"]:
            print(f"  {inline['kind']:<12} {inline['span']['text']}")
    return 0


def cmd_headers(args: argparse.Namespace, rt: Any) -> int:
    """Print normalized headers of a file."""
    envelope = HeaderSubtext.parse(_read_input(args.file))
    headers = envelope.headers
    if args.name:
        values = headers.get_all(args.name)
        if not values:
            print(f"Header {args.name} not found", file=sys.stderr)
            return 1
        if not _emit(args, values):
            for value in values:
                print(value)
        return 0

    if args.dedupe:
        headers = headers.remove_duplicates()
    if not _emit(args, headers_to_dict(headers)):
        print(headers.text, end="")
    return 0


def cmd_excerpt(args: argparse.Namespace, rt: Any) -> int:
    """Print a short preview of a file."""
    envelope = HeaderSubtext.parse(_read_input(args.file))
    fallback = args.fallback if args.fallback is not None else rt.config.excerpt.fallback
    text = excerpt(envelope.body, fallback=fallback, limit=rt.config.excerpt.limit)
    if not _emit(args, {"excerpt": text}):
        print(text)
    return 0


def cmd_links(args: argparse.Namespace, rt: Any) -> int:
    """List slashlinks and wikilinks in document order."""
    envelope = HeaderSubtext.parse(_read_input(args.file))
    output = []
    seen: set[str] = set()
    for inline in shortlinks(envelope.body):
        slug = shortlink_to_slug(inline)
        key = slug.value if slug else inline.text
        if args.unique and key in seen:
            continue
        seen.add(key)
        output.append({**inline_to_dict(inline), "slug": slug.value if slug else None})

    if not _emit(args, output):
        for item in output:
            target = item["slug"] or "(invalid)"
            print(f"{item['span']['start']}\t{item['kind']}\t{item['span']['text']}\t{target}")
    return 0


def cmd_at(args: argparse.Namespace, rt: Any) -> int:
    """Find the shortlink ending at a character offset of the body."""
    envelope = HeaderSubtext.parse(_read_input(args.file))
    inline = find_inline_at(envelope.body, args.index, args.kind)
    if inline is None:
        if not args.quiet:
            print(f"No shortlink ends at {args.index}", file=sys.stderr)
        return 1
    if not _emit(args, inline_to_dict(inline)):
        print(f"{inline.kind}\t{inline.text}")
    return 0


def cmd_attrs(args: argparse.Namespace, rt: Any) -> int:
    """Print the attribute ranges for the body of a file."""
    envelope = HeaderSubtext.parse(_read_input(args.file))
    ranges = project_attributes(
        envelope.body, paragraph_spacing=rt.config.render.paragraph_spacing
    )
    data = attributes_to_list(ranges)
    if not _emit(args, data):
        for item in data:
            print(f"{item['start']}-{item['end']}\t{item['name']}\t{item['value']}")
    return 0


def cmd_ls(args: argparse.Namespace, rt: Any) -> int:
    """List memos in the notebook."""
    slugs = sorted(rt.notebook.list_slugs())
    if args.grep:
        rt.index.rebuild()
        hits = set(rt.index.search(args.grep))
        slugs = [slug for slug in slugs if slug in hits]

    result = []
    for slug in slugs:
        memo = rt.notebook.get(slug)
        if memo is None:
            continue
        result.append({"slug": slug, "title": memo.well_known.title})

    if not _emit(args, result):
        for item in result:
            if args.with_titles:
                print(f"{item['slug']}\t{item['title']}")
            else:
                print(item["slug"])
    return 0


def cmd_show(args: argparse.Namespace, rt: Any) -> int:
    """Print a memo with its well-known headers filled in."""
    memo = rt.notebook.get(args.slug)
    if memo is None:
        print(f"Memo {args.slug} not found", file=sys.stderr)
        return 1
    well_known = memo.well_known
    data = {
        "slug": memo.slug,
        "title": well_known.title,
        "content_type": well_known.content_type,
        "created": well_known.created.isoformat(),
        "modified": well_known.modified.isoformat(),
        "excerpt": _memo_excerpt(memo, rt),
        "body": memo.body.base,
    }
    if not _emit(args, data):
        print(memo.body.base, end="" if memo.body.base.endswith("\n") else "\n")
    return 0


def cmd_backlinks(args: argparse.Namespace, rt: Any) -> int:
    """Show memos linking to a slug."""
    rt.index.rebuild()
    incoming = rt.index.links_in(args.slug)

    output = []
    for source in incoming:
        memo = rt.notebook.get(source)
        if memo is None:
            continue
        output.append({"source": source, "excerpt": _memo_excerpt(memo, rt)})

    if not _emit(args, output):
        for item in output:
            if args.quiet:
                print(item["source"])
            else:
                print(f"{item['source']}: {item['excerpt']}")
    return 0


def cmd_graph(args: argparse.Namespace, rt: Any) -> int:
    """Export graph data."""
    rt.index.rebuild()
    graph_data = rt.index.graph_data()

    if getattr(args, 'dot', False):
        print("digraph notebook {")
        print('  rankdir=LR;')
        print('  node [shape=box];')
        for node in graph_data['nodes']:
            label = (node['title'] or node['id']).replace('"', '\\"')
            print(f'  "{node["id"]}" [label="{label}"];')
        for edge in graph_data['edges']:
            print(f'  "{edge["source"]}" -> "{edge["target"]}";')
        print("}")
    elif not _emit(args, graph_data):
        print(to_json(graph_data))

    return 0


def cmd_lint(args: argparse.Namespace, rt: Any) -> int:
    """Validate shortlinks and headers."""
    rules = [DeadLinksRule(), MissingHeadersRule()]

    all_findings: list[tuple[str, Finding]] = []
    for slug in rt.notebook.list_slugs():
        memo = rt.notebook.get(slug)
        if memo is None:
            continue
        for rule in rules:
            for f in rule.check(memo, rt.resolver):
                all_findings.append((slug, f))

    output = [
        {
            "slug": slug,
            "severity": f.severity,
            "message": f.message,
            "range": {"start": f.span.start, "end": f.span.end} if f.span else None,
        }
        for slug, f in all_findings
    ]
    if not _emit(args, output):
        for slug, f in all_findings:
            if not args.quiet:
                print(f"{slug}: [{f.severity}] {f.message}")

    return 1 if any(f.severity == "error" for _, f in all_findings) else 0


def cmd_mend(args: argparse.Namespace, rt: Any) -> int:
    """Add missing well-known headers to a memo."""
    memo = rt.notebook.mend(args.slug, touch=args.touch)
    if memo is None:
        print(f"Memo {args.slug} not found", file=sys.stderr)
        return 1
    if not _emit(args, headers_to_dict(memo.headers)) and not args.quiet:
        print(memo.headers.text, end="")
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install subtext-engine[api]",
            file=sys.stderr
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    token_arg = getattr(args, 'token', 'auto')
    token = None

    if token_arg == 'auto':
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == 'none':
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=getattr(args, 'cors', False))

    host = getattr(args, 'host', '127.0.0.1')
    port = getattr(args, 'port', 8765)

    print(f"Starting server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")

    return 0


def version_text() -> str:
    return "\n".join(
        [
            f"subtext {__version__}",
            f"python {platform.python_version()}",
            f"platform {platform.platform()}",
        ]
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="subtext", description="Subtext CLI"
    )
    parser.add_argument(
        "--version", action="version", version=version_text()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/subtext.toml, notebook/subtext.toml)",
    )
    parser.add_argument(
        "--notebook",
        type=Path,
        default=None,
        help="Path to notebook directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug messages to stderr"
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    output.add_argument(
        "--yaml", action="store_true", help="YAML output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # parse command
    parser_parse = subparsers.add_parser("parse", help="Show headers and blocks of a file")
    parser_parse.add_argument("file", help="Subtext file, or - for stdin")
    parser_parse.add_argument(
        "--skip-empty", action="store_true", help="Leave out blank-line blocks"
    )

    # headers command
    parser_headers = subparsers.add_parser("headers", help="Show normalized headers")
    parser_headers.add_argument("file", help="Subtext file, or - for stdin")
    parser_headers.add_argument("--name", help="Only print values of this header")
    parser_headers.add_argument(
        "--dedupe", action="store_true", help="Keep only the first header of each name"
    )

    # excerpt command
    parser_excerpt = subparsers.add_parser("excerpt", help="Print a short preview")
    parser_excerpt.add_argument("file", help="Subtext file, or - for stdin")
    parser_excerpt.add_argument(
        "--fallback", default=None, help="Text to print for an empty document"
    )

    # links command
    parser_links = subparsers.add_parser("links", help="List shortlinks")
    parser_links.add_argument("file", help="Subtext file, or - for stdin")
    parser_links.add_argument(
        "--unique", action="store_true", help="Only the first link to each slug"
    )

    # at command
    parser_at = subparsers.add_parser("at", help="Find the shortlink ending at an offset")
    parser_at.add_argument("file", help="Subtext file, or - for stdin")
    parser_at.add_argument("index", type=int, help="Character offset into the body")
    parser_at.add_argument(
        "--kind", choices=["wikilink", "slashlink"], default=None,
        help="Only match this kind of shortlink"
    )

    # attrs command
    parser_attrs = subparsers.add_parser("attrs", help="Show display attribute ranges")
    parser_attrs.add_argument("file", help="Subtext file, or - for stdin")

    # ls command
    parser_ls = subparsers.add_parser("ls", help="List memos in the notebook")
    parser_ls.add_argument("--grep", help="Only memos containing this text")
    parser_ls.add_argument(
        "--with-titles", action="store_true", help="Print slug<TAB>title"
    )

    # show command
    parser_show = subparsers.add_parser("show", help="Print a memo")
    parser_show.add_argument("slug", help="Memo slug")

    # backlinks command
    parser_backlinks = subparsers.add_parser("backlinks", help="Show memos linking here")
    parser_backlinks.add_argument("slug", help="Target slug")

    # graph command
    parser_graph = subparsers.add_parser("graph", help="Export graph data")
    parser_graph.add_argument(
        "--dot", action="store_true", help="Output Graphviz DOT instead of JSON"
    )

    # lint command
    subparsers.add_parser("lint", help="Validate shortlinks and headers")

    # mend command
    parser_mend = subparsers.add_parser("mend", help="Fill in missing headers")
    parser_mend.add_argument("slug", help="Memo slug")
    parser_mend.add_argument(
        "--touch", action="store_true", help="Also set Modified to now"
    )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8765,
        help="Port to bind to (default: 8765)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: false)"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    rt = build_runtime(
        notebook_path=args.notebook,
        config_path=args.config,
    )

    handlers = {
        "parse": cmd_parse,
        "headers": cmd_headers,
        "excerpt": cmd_excerpt,
        "links": cmd_links,
        "at": cmd_at,
        "attrs": cmd_attrs,
        "ls": cmd_ls,
        "show": cmd_show,
        "backlinks": cmd_backlinks,
        "graph": cmd_graph,
        "lint": cmd_lint,
        "mend": cmd_mend,
        "serve": cmd_serve,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
