"""In-memory template registry.

Holds template definitions in insertion order plus the id of the default
template. Invariants:
  - the registry is never empty
  - ``default_id`` always names a registered template

All reads and mutations run under one re-entrant lock; a mutation that is
refused raises before touching any state.

Protecting the built-in ids from deletion is the caller's policy
(see ``pipeline.assembly``); the registry only guards the last template.
"""
import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from errors import (
    DuplicateTemplateId,
    InvalidTemplateDefinition,
    LastTemplateRemaining,
    MissingIdOrName,
    MissingTemplateId,
    TemplateNotFound,
)
from models.template import CustomTemplateConfig, ImageRules, TemplateDefinition, builtin_templates
from settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_ID = "business"


class TemplateRegistry:
    def __init__(self, templates: list[TemplateDefinition], default_id: str | None = None):
        if not templates:
            raise ValueError("a template registry needs at least one template")
        self._lock = threading.RLock()
        self._templates: dict[str, TemplateDefinition] = {}
        for template in templates:
            self._validate(template)
            if template.id in self._templates:
                raise DuplicateTemplateId(template.id)
            self._templates[template.id] = template
        if default_id is None:
            default_id = next(iter(self._templates))
        if default_id not in self._templates:
            raise TemplateNotFound(default_id)
        self._default_id = default_id

    @classmethod
    def with_builtins(cls) -> "TemplateRegistry":
        return cls(builtin_templates(), default_id=DEFAULT_TEMPLATE_ID)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def default_id(self) -> str:
        with self._lock:
            return self._default_id

    def get_by_id(self, template_id: str) -> TemplateDefinition | None:
        with self._lock:
            return self._templates.get(template_id)

    def get_default(self) -> TemplateDefinition:
        with self._lock:
            return self._templates[self._default_id]

    def all_templates(self) -> list[TemplateDefinition]:
        with self._lock:
            return list(self._templates.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)

    def __contains__(self, template_id: object) -> bool:
        with self._lock:
            return template_id in self._templates

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_default(self, template_id: str) -> None:
        with self._lock:
            if template_id not in self._templates:
                raise TemplateNotFound(template_id)
            self._default_id = template_id
        logger.info("Default template set to '%s'", template_id)

    def add(self, template: TemplateDefinition) -> None:
        self._validate(template)
        with self._lock:
            if template.id in self._templates:
                raise DuplicateTemplateId(template.id)
            self._templates[template.id] = template
        logger.info("Template '%s' added (%s)", template.id, template.name)

    def remove(self, template_id: str) -> None:
        if not template_id:
            raise MissingTemplateId("Template id must not be empty")
        with self._lock:
            if template_id not in self._templates:
                raise TemplateNotFound(template_id)
            if len(self._templates) <= 1:
                raise LastTemplateRemaining()
            del self._templates[template_id]
            if self._default_id == template_id:
                self._default_id = next(iter(self._templates))
                logger.info("Default template reassigned to '%s'", self._default_id)
        logger.info("Template '%s' removed", template_id)

    def create_custom(self, config: CustomTemplateConfig | dict) -> TemplateDefinition:
        """Derive and register a new template.

        Layout rules come from ``image_rules`` when given; otherwise they are
        inherited from ``base_template_id``, or from the default template when
        the base is unset or unknown.
        """
        if isinstance(config, dict):
            try:
                config = CustomTemplateConfig.model_validate(config)
            except ValidationError as exc:
                raise InvalidTemplateDefinition(f"Template config is malformed: {exc}") from exc
        if not config.id or not config.name:
            raise MissingIdOrName("Template must have both an id and a name")

        with self._lock:
            if config.id in self._templates:
                raise DuplicateTemplateId(config.id)
            base = self._templates.get(config.base_template_id or "") or self._templates[self._default_id]
            template = TemplateDefinition(
                id=config.id,
                name=config.name,
                description=config.description or base.description,
                is_built_in=False,
                rules=config.image_rules if config.image_rules is not None else base.rules,
            )
            self.add(template)
        return template

    @staticmethod
    def _validate(template: TemplateDefinition) -> None:
        if not template.id or not template.name or not isinstance(getattr(template, "rules", None), ImageRules):
            raise InvalidTemplateDefinition("Template must have an id, a name and image rules")


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------

def build_registry(settings: Settings) -> TemplateRegistry:
    """Create the process registry: built-ins, templates file, configured default."""
    registry = TemplateRegistry.with_builtins()

    if settings.templates_file is not None:
        for config in load_template_configs(settings.templates_file):
            registry.create_custom(config)

    if settings.default_template in registry:
        registry.set_default(settings.default_template)
    else:
        logger.warning(
            "Configured default template '%s' not found; keeping '%s'.",
            settings.default_template,
            registry.default_id,
        )

    logger.info("Template registry ready: %d templates, default '%s'", len(registry), registry.default_id)
    return registry


def load_template_configs(path: Path) -> list[CustomTemplateConfig]:
    """Load custom template configs from a YAML list.

    Raises FileNotFoundError if path does not exist.
    """
    import yaml  # lazy, only needed at load time
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    if isinstance(data, dict):
        data = data.get("templates") or []
    return [CustomTemplateConfig.model_validate(item) for item in data]
