"""Document assembly: the entry point a transport layer calls.

Wires extraction → classification → template lookup → rendering for two
inputs, an uploaded document and manually authored content, and exposes the
template management operations. Built-in templates are protected from
deletion here; the registry itself only refuses to drop its last template.
"""
import logging
from typing import Callable

from pydantic import ValidationError

from errors import BuiltInTemplateProtected, InputError, TemplateNotFound
from models.article import Article, ArticleResult, ManualContent
from models.template import BUILT_IN_TEMPLATE_IDS, CustomTemplateConfig, TemplateDefinition, TemplateSummary
from pipeline import stage2_classify, stage4_render
from pipeline.stage1_extract import extract_paragraphs
from settings import Settings
from utils.template_registry import TemplateRegistry, build_registry

logger = logging.getLogger(__name__)


class ArticleService:
    def __init__(
        self,
        settings: Settings,
        registry: TemplateRegistry | None = None,
        extract: Callable[[bytes], list[str]] = extract_paragraphs,
    ):
        self.settings = settings
        self.registry = registry if registry is not None else build_registry(settings)
        self._extract = extract

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    def from_document(self, data: bytes | None, template_id: str | None = None) -> ArticleResult:
        """Parse uploaded document bytes and render them.

        The first extracted line becomes the title; the rest are classified.
        """
        if not data:
            raise InputError("Document data is missing or empty")
        if len(data) > self.settings.max_document_bytes:
            raise InputError(
                f"Document is {len(data)} bytes; the limit is {self.settings.max_document_bytes}"
            )

        template = self._resolve_template(template_id)
        paragraphs = self._extract(data)
        title = paragraphs[0] if paragraphs else ""
        article = Article(title=title, sections=stage2_classify.classify(paragraphs[1:]))
        return self._render(article, template)

    def from_manual(self, content: ManualContent | dict | None, template_id: str | None = None) -> ArticleResult:
        """Render author-supplied content; every section is marked manual_edit."""
        if not content:
            raise InputError("Manual content is missing")
        if not isinstance(content, ManualContent):
            try:
                content = ManualContent.model_validate(content)
            except ValidationError as exc:
                raise InputError(f"Manual content is malformed: {exc}") from exc

        template = self._resolve_template(template_id)
        return self._render(content.to_article(), template)

    def _render(self, article: Article, template: TemplateDefinition) -> ArticleResult:
        markup = stage4_render.render(article, template)
        return ArticleResult(
            title=article.title,
            sections=article.sections,
            rendered_markup=markup,
            template_id=template.id,
            variant=template.select_variant(article.image_count),
        )

    def _resolve_template(self, template_id: str | None) -> TemplateDefinition:
        if not template_id:
            return self.registry.get_default()
        template = self.registry.get_by_id(template_id)
        if template is None:
            raise TemplateNotFound(template_id)
        return template

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def list_templates(self) -> list[TemplateSummary]:
        default_id = self.registry.default_id
        return [
            TemplateSummary(
                id=t.id,
                name=t.name,
                description=t.description,
                is_built_in=t.is_built_in,
                is_default=t.id == default_id,
            )
            for t in self.registry.all_templates()
        ]

    def create_custom_template(self, config: CustomTemplateConfig | dict | None) -> TemplateDefinition:
        if not config:
            raise InputError("Template config is missing")
        return self.registry.create_custom(config)

    def delete_template(self, template_id: str | None) -> None:
        if template_id in BUILT_IN_TEMPLATE_IDS:
            raise BuiltInTemplateProtected(template_id)
        self.registry.remove(template_id or "")

    def set_default_template(self, template_id: str | None) -> None:
        if not template_id:
            raise InputError("Template id is missing")
        self.registry.set_default(template_id)
