#!/usr/bin/env python3
"""Render a document into a styled article.

Usage:
    python render_article.py article.docx                     # default template
    python render_article.py article.docx --template creative
    python render_article.py content.json --manual            # manually authored sections
    python render_article.py --list-templates
"""
import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from errors import ArticleError
from pipeline import stage4_render
from pipeline.assembly import ArticleService
from settings import Settings

logger = logging.getLogger("render_article")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("input", nargs="?", type=Path,
                        help="DOCX, PDF or text document (JSON with --manual)")
    parser.add_argument("--template", dest="template_id", default=None,
                        help="Template id; defaults to the configured default template")
    parser.add_argument("--output", type=Path, default=None,
                        help="Output HTML path; defaults to <output_dir>/<title>.html")
    parser.add_argument("--manual", action="store_true",
                        help="Treat INPUT as JSON manual content {title, sections}")
    parser.add_argument("--list-templates", action="store_true", dest="list_templates")
    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )

    service = ArticleService(settings)

    if args.list_templates:
        for summary in service.list_templates():
            marker = "*" if summary.is_default else " "
            print(f"{marker} {summary.id:<12} {summary.name}  {summary.description}")
        return 0

    if args.input is None:
        parser.error("INPUT is required unless --list-templates is given")

    try:
        if args.manual:
            content = json.loads(args.input.read_text(encoding="utf-8"))
            result = service.from_manual(content, args.template_id)
        else:
            result = service.from_document(args.input.read_bytes(), args.template_id)
    except ArticleError as exc:
        logger.error("%s: %s", exc.kind, exc.message)
        return 1
    except json.JSONDecodeError as exc:
        logger.error("InputError: %s is not valid JSON (%s)", args.input, exc)
        return 1
    except OSError as exc:
        logger.error("InputError: cannot read %s (%s)", args.input, exc)
        return 1

    output_path = stage4_render.write_html(settings, result.title, result.rendered_markup, args.output)

    logger.info("=== Done → %s (%s, %s) ===", output_path, result.template_id, result.variant.value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
