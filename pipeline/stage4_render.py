"""Stage 4: Rendering. Convert an Article to styled HTML via Jinja2.

Reads:  templates/article.html.j2 (+ blocks, header and footer partials)
Writes: <output_dir>/<title slug>.html  (only through ``write_html``)

``render`` is pure: the same article and template always produce
byte-identical markup. Author text is HTML-escaped by Jinja2 autoescape.
"""
import logging
import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from models.article import Article
from models.layout_plan import LayoutPlan
from models.template import TemplateDefinition
from pipeline.stage3_layout import plan_layout
from settings import Settings

logger = logging.getLogger(__name__)

# Path (relative to the package root) where Jinja2 looks for templates
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def render(article: Article, template: TemplateDefinition) -> str:
    """Render ``article`` with ``template`` and return the markup."""
    plan = plan_layout(article, template)
    html = _render_html(plan)
    logger.info("Stage 4 complete → %d characters of markup", len(html))
    return html


def write_html(
    settings: Settings,
    title: str,
    html: str,
    output_path: Path | None = None,
) -> Path:
    """Write rendered markup to disk. Returns the written path."""
    if output_path is None:
        output_path = _output_path(settings, title)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
    logger.info("Article written → %s", output_path)
    return output_path


# ---------------------------------------------------------------------------
# HTML rendering
# ---------------------------------------------------------------------------

def _render_html(plan: LayoutPlan) -> str:
    """Render the Jinja2 template to an HTML string."""
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("article.html.j2")
    return template.render(plan=plan)


# ---------------------------------------------------------------------------
# Output path
# ---------------------------------------------------------------------------

def _output_path(settings: Settings, title: str) -> Path:
    return settings.output_dir / f"{_slugify(title)}.html"


def _slugify(text: str) -> str:
    """Convert a title to a filename slug. CJK characters are kept."""
    text = text.lower()
    text = re.sub(r"[^\w]+", "_", text)
    text = text.strip("_")
    return text[:50] or "article"
