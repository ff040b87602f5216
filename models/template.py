"""Template definitions and the image-count layout policy.

A template's layout behaviour is a closed threshold policy (``ImageRules``)
rather than an arbitrary callable, so every definition stays serializable
and each policy can be tested on its own.
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LayoutVariant(str, Enum):
    SINGLE_IMAGE = "single-image"
    DOUBLE_IMAGE_WITH_CAPTION = "double-image-with-caption"
    DOUBLE_IMAGE_NO_CAPTION = "double-image-no-caption"


class ImageRules(BaseModel):
    """Image-count thresholds. ``None`` means the threshold is never reached."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    min_images_for_double_no_caption: int | None = Field(default=None, ge=0)
    min_images_for_double_with_caption: int | None = Field(default=None, ge=0)

    def select_variant(self, image_count: int) -> LayoutVariant:
        no_caption = self.min_images_for_double_no_caption
        with_caption = self.min_images_for_double_with_caption
        if no_caption is not None and image_count >= no_caption:
            return LayoutVariant.DOUBLE_IMAGE_NO_CAPTION
        if with_caption is not None and image_count >= with_caption:
            return LayoutVariant.DOUBLE_IMAGE_WITH_CAPTION
        return LayoutVariant.SINGLE_IMAGE


class TemplateDefinition(BaseModel):
    """A registered template. Immutable once built."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    description: str = ""
    is_built_in: bool = False
    rules: ImageRules

    def select_variant(self, image_count: int) -> LayoutVariant:
        if image_count < 0:
            raise ValueError("image_count must be non-negative")
        return self.rules.select_variant(image_count)


class CustomTemplateConfig(BaseModel):
    """Request to derive a new template, as accepted by ``create_custom``.

    Field presence is validated by the registry so that missing ids or names
    surface as ``MissingIdOrName`` rather than a schema error.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    name: str | None = None
    description: str | None = None
    base_template_id: str | None = None
    image_rules: ImageRules | None = None


class TemplateSummary(BaseModel):
    id: str
    name: str
    description: str
    is_built_in: bool
    is_default: bool


# Built-in policies, fixed at startup:
#   business / creative: 0 → single, 1–2 → double with caption, ≥3 → double without
#   simple:              always single
#   education:           0–1 → single, ≥2 → double with caption
BUSINESS_RULES = ImageRules(min_images_for_double_no_caption=3, min_images_for_double_with_caption=1)
SIMPLE_RULES = ImageRules()
EDUCATION_RULES = ImageRules(min_images_for_double_with_caption=2)
CREATIVE_RULES = ImageRules(min_images_for_double_no_caption=3, min_images_for_double_with_caption=1)


def builtin_templates() -> list[TemplateDefinition]:
    return [
        TemplateDefinition(
            id="business",
            name="商务风格",
            description="适用于商务类文章的模板风格",
            is_built_in=True,
            rules=BUSINESS_RULES,
        ),
        TemplateDefinition(
            id="simple",
            name="简约风格",
            description="简洁明了的文章模板风格",
            is_built_in=True,
            rules=SIMPLE_RULES,
        ),
        TemplateDefinition(
            id="education",
            name="教育风格",
            description="适用于教育类文章的模板风格",
            is_built_in=True,
            rules=EDUCATION_RULES,
        ),
        TemplateDefinition(
            id="creative",
            name="创意风格",
            description="富有创意设计感的文章模板风格",
            is_built_in=True,
            rules=CREATIVE_RULES,
        ),
    ]


BUILT_IN_TEMPLATE_IDS = frozenset({"business", "simple", "education", "creative"})
