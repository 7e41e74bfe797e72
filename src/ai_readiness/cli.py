import argparse
import json
import sys
from pathlib import Path

from .config import AppConfig, load_config
from .errors import AIReadinessError
from .logger import set_log_level, set_log_stream


DEFAULT_CONFIG_NAME = "ai-readiness.config.yml"

CONFIG_TEMPLATE = """# ai-readiness config
#
# Every section is optional; the values below are the defaults.

fetch:
  # robots.txt lookup and sitemap existence check
  robots_timeout: 5
  verify_timeout: 5
  # each sitemap document while walking sitemap indexes
  sitemap_timeout: 10
  max_sitemap_depth: 5

llm:
  # The API key is read from this environment variable (or llm.api_key)
  api_key_env: "GROQ_API_KEY"
  base_url: "https://api.groq.com/openai/v1"
  model: "moonshotai/kimi-k2-instruct"
  temperature: 0.7
  max_tokens: 2000

services:
  # Page-scoring and insight services used by POST /api/analyze
  # readiness_url: "http://localhost:3000/api/ai-readiness"
  # insights_url: "http://localhost:3000/api/ai-analysis"
  timeout: 60

server:
  host: "127.0.0.1"
  port: 5000

logging:
  level: "INFO"
"""


def _load(args) -> AppConfig:
    """Config from -c/--config, or the default file when present, else defaults."""
    path = Path(args.config) if getattr(args, "config", None) else Path(DEFAULT_CONFIG_NAME)
    if not path.exists():
        if getattr(args, "config", None):
            raise ValueError(f"Config file not found: {path}")
        return AppConfig()
    return load_config(path)


def cmd_init(args):
    """Create a starter config file in the current directory."""
    target = Path(args.path or DEFAULT_CONFIG_NAME)
    if target.exists() and not args.force:
        print(f"[WARN] Config file already exists: {target}", file=sys.stderr)
        return 1

    target.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    print(f"[OK] Created config file: {target}")
    return 0


def cmd_generate(args):
    """Generate llms.txt for a website from its sitemap."""
    import requests

    from .generator import write_llms_txt
    from .llm import build_text_generator
    from .pipeline import generate_llms_txt

    try:
        config = _load(args)
    except ValueError as e:
        print("[ERROR] Config validation failed:", file=sys.stderr)
        print(f"{e}", file=sys.stderr)
        return 1

    if args.verbose:
        set_log_level("DEBUG")
    else:
        set_log_level(config.log_level)
    text_generator = None if args.no_llm else build_text_generator(config.llm)

    # stdout carries only the JSON document
    previous_stream = set_log_stream(sys.stderr) if args.json else None
    try:
        with requests.Session() as session:
            try:
                result = generate_llms_txt(args.url, session, config, text_generator)
            except AIReadinessError as e:
                print(f"[ERROR] {e.message}", file=sys.stderr)
                for detail in getattr(e, "details", None) or []:
                    print(f"  - {detail}", file=sys.stderr)
                return 1
    finally:
        if previous_stream is not None:
            set_log_stream(previous_stream)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0

    output_path = Path(args.output)
    write_llms_txt(result.content, output_path)
    print(
        f"[OK] {len(result.level1_urls)} level-1 pages out of {result.total_urls} URLs "
        f"(sitemap: {result.sitemap_url})"
    )
    return 0


def cmd_serve(args):
    """Run the HTTP API."""
    from .web import create_app

    try:
        config = _load(args)
    except ValueError as e:
        print("[ERROR] Config validation failed:", file=sys.stderr)
        print(f"{e}", file=sys.stderr)
        return 1

    set_log_level("DEBUG" if args.verbose else config.log_level)
    app = create_app(config)
    app.run(
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        debug=bool(args.debug),
    )
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="ai-readiness",
        description="AI readiness tooling: llms.txt generation from sitemaps.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # init
    p_init = subparsers.add_parser(
        "init", help=f"Create a starter {DEFAULT_CONFIG_NAME} in current directory."
    )
    p_init.add_argument(
        "-p",
        "--path",
        help=f"Config file path (default: {DEFAULT_CONFIG_NAME})",
    )
    p_init.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing config file.",
    )
    p_init.set_defaults(func=cmd_init)

    # generate
    p_gen = subparsers.add_parser(
        "generate",
        help="Generate llms.txt for a website from its sitemap.",
    )
    p_gen.add_argument(
        "url",
        help="Website to process (e.g. example.com or https://example.com)",
    )
    p_gen.add_argument(
        "-c",
        "--config",
        help=f"Config file path (default: {DEFAULT_CONFIG_NAME} if present)",
    )
    p_gen.add_argument(
        "-o",
        "--output",
        default="llms.txt",
        help="Output path for llms.txt (default: llms.txt)",
    )
    p_gen.add_argument(
        "--no-llm",
        action="store_true",
        help="Skip the LLM and build llms.txt from the local template.",
    )
    p_gen.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON instead of writing a file.",
    )
    p_gen.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    p_gen.set_defaults(func=cmd_generate)

    # serve
    p_serve = subparsers.add_parser("serve", help="Run the HTTP API (Flask).")
    p_serve.add_argument(
        "-c",
        "--config",
        help=f"Config file path (default: {DEFAULT_CONFIG_NAME} if present)",
    )
    p_serve.add_argument("--host", help="Bind address (default: server.host)")
    p_serve.add_argument("--port", type=int, help="Port (default: server.port)")
    p_serve.add_argument("--debug", action="store_true", help="Flask debug mode.")
    p_serve.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1

    return int(func(args)) or 0


if __name__ == "__main__":
    raise SystemExit(main())
