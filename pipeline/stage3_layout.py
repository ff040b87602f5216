"""Stage 3: Layout Planning. Resolve an Article and a template into a LayoutPlan.

The template's image rules pick one layout variant for the whole article from
the number of image sections. Sections are then walked in order:

  text / subtitle           → one block each, styled by the template
  image, with-caption pair  → two images + two captions per image section
  image, no-caption pair    → a fixed decorative image pair
  image, single             → a fixed decorative image

Two counters drive the with-caption variant and must stay independent:

  caption cursor     index into the captions of *all* image sections, in
                     document order; advances by two per image section
  image-asset index  starts at 1, advances by two per image section; picks
                     image sources from a two-element rotation and the
                     circled numbers of placeholder captions (first slot:
                     the index itself, second slot: index mod 2 + 1, so
                     always ② while the index stays odd)

The no-caption and single variants touch neither counter, so every image
section repeats the same fixed block.
"""
import logging

from models.article import Article
from models.layout_plan import Block, ImageSlot, LayoutPlan
from models.template import LayoutVariant, TemplateDefinition

logger = logging.getLogger(__name__)

CAPTION_IMAGE_ROTATION = (
    "https://bcn.135editor.com/files/images/editor_styles/ff9cb06459e31801669bcff7c5540f81.png",
    "https://bcn.135editor.com/files/images/editor_styles/152761406d63a8a84e2a9a39760e8350.png",
)

PLAIN_PAIR_IMAGES = {
    "classic": (
        "https://bcn.135editor.com/files/images/editor_styles/14df324fe8197ec294b38f540adb4b80.jpg",
        "https://bcn.135editor.com/files/images/editor_styles/f89266a84c9697acc23068c2653045e2.png",
    ),
    "creative": (
        "https://bexp.135editor.com/files/users/755/7550510/202509/GZZQuUzN_DwSw.jpg"
        "?auth_key=1757865599-0-0-20702252cde8287c26fbfd81e33976f7&x-bce-process=image%2Fauto-orient%2Co_1",
        "https://bexp.135editor.com/files/users/755/7550510/202509/MvU54x8W_zgJm.jpg"
        "?auth_key=1757865599-0-0-3df514dd9c2a40f09607e213f616b1b2&x-bce-process=image%2Fauto-orient%2Co_1",
    ),
}

SINGLE_IMAGES = {
    "classic": "https://bcn.135editor.com/files/images/editor_styles/194203ed1fb963628dbf9a93e2430b30.png",
    "creative": (
        "https://mmbiz.qpic.cn/sz_mmbiz_png/viactygias9W3gcNn3Sgs7pmLcmyQ97NrjNCOVqibv9rYG5Sgv"
        "QNTI6qmBiaMAozVZVGLfRZ40k4hsX7UxicohmDqBg/640?from=appmsg"
    ),
}

PLACEHOLDER_CAPTION_SUFFIX = "图注"

CREATIVE_TEMPLATE_ID = "creative"


def plan_layout(article: Article, template: TemplateDefinition) -> LayoutPlan:
    """Build the LayoutPlan for ``article`` under ``template``."""
    image_count = article.image_count
    variant = template.select_variant(image_count)
    style = style_for(template)

    blocks: list[Block] = []
    captions = article.image_captions
    caption_cursor = 0
    image_index = 1

    for section in article.sections:
        if section.type == "text":
            blocks.append(Block(kind="text", content=section.content))
        elif section.type == "subtitle":
            blocks.append(Block(kind="subtitle", content=section.content))
        elif section.type == "image":
            if variant is LayoutVariant.DOUBLE_IMAGE_WITH_CAPTION:
                first = _caption_at(captions, caption_cursor)
                second = _caption_at(captions, caption_cursor + 1)
                blocks.append(_captioned_pair(image_index, first, second))
                caption_cursor += 2
                image_index += 2
            elif variant is LayoutVariant.DOUBLE_IMAGE_NO_CAPTION:
                blocks.append(_plain_pair(style))
            else:
                blocks.append(_single_image(style))
        else:
            logger.warning(
                "Unknown section type %r at position %s; skipped.",
                section.type,
                getattr(section, "position", "?"),
            )

    plan = LayoutPlan(
        template_id=template.id,
        style=style,
        variant=variant,
        image_count=image_count,
        title=article.title,
        blocks=blocks,
    )
    logger.info("Stage 3 complete → template '%s' (%s style)", template.id, style)
    logger.info("  Images:  %d → %s", image_count, variant.value)
    logger.info("  Blocks:  %d", len(blocks))
    return plan


def style_for(template: TemplateDefinition) -> str:
    return "creative" if template.id == CREATIVE_TEMPLATE_ID else "classic"


# ---------------------------------------------------------------------------
# Image blocks
# ---------------------------------------------------------------------------

def _caption_at(captions: list[str], cursor: int) -> str:
    return captions[cursor] if cursor < len(captions) else ""


def _captioned_pair(image_index: int, first: str, second: str) -> Block:
    rotation = CAPTION_IMAGE_ROTATION
    return Block(
        kind="image-pair",
        images=[
            ImageSlot(
                src=rotation[(image_index - 1) % len(rotation)],
                caption=first or placeholder_caption(image_index),
            ),
            ImageSlot(
                src=rotation[image_index % len(rotation)],
                caption=second or placeholder_caption(image_index % len(rotation) + 1),
            ),
        ],
    )


def _plain_pair(style: str) -> Block:
    left, right = PLAIN_PAIR_IMAGES[style]
    return Block(kind="image-pair-plain", images=[ImageSlot(src=left), ImageSlot(src=right)])


def _single_image(style: str) -> Block:
    return Block(kind="image-single", images=[ImageSlot(src=SINGLE_IMAGES[style])])


# ---------------------------------------------------------------------------
# Caption numbering
# ---------------------------------------------------------------------------

def placeholder_caption(number: int) -> str:
    return f"{circled_number(number)} {PLACEHOLDER_CAPTION_SUFFIX}"


def circled_number(number: int) -> str:
    """Return the circled digit for ``number`` (① … ㊿), or ``(n)`` beyond 50."""
    if 1 <= number <= 20:
        return chr(0x2460 + number - 1)
    if 21 <= number <= 35:
        return chr(0x3251 + number - 21)
    if 36 <= number <= 50:
        return chr(0x32B1 + number - 36)
    return f"({number})"
