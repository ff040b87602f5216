"""Stage 2: Classify every body paragraph as text, subtitle or image.

Paragraphs are processed strictly in order. The subtitle heuristic looks at
the type of the section emitted just before, so the loop carries that type
forward as it goes; the paragraphs cannot be classified independently.

Priority per paragraph:
  1. image rules (utils.classification_rules.IMAGE_RULES, first match wins)
  2. subtitle heuristic
  3. text
"""
import logging

from models.article import ImageSection, Section, SubtitleSection, TextSection
from utils.classification_rules import is_subtitle, match_image_rule

logger = logging.getLogger(__name__)


def classify(paragraphs: list[str]) -> list[Section]:
    """Classify body paragraphs (title already removed) into sections.

    Input must be non-empty stripped strings. Output has the same length,
    with positions 1..n in input order.
    """
    sections: list[Section] = []
    previous_type: str | None = None

    for position, paragraph in enumerate(paragraphs, start=1):
        section = _classify_one(paragraph, position, previous_type)
        sections.append(section)
        previous_type = section.type

    _log_summary(sections)
    return sections


def _classify_one(paragraph: str, position: int, previous_type: str | None) -> Section:
    rule = match_image_rule(paragraph)
    if rule is not None:
        logger.debug("  [%03d] image (%s): %s", position, rule, paragraph[:40])
        return ImageSection(caption=paragraph, position=position)

    if is_subtitle(paragraph, previous_type):
        logger.debug("  [%03d] subtitle: %s", position, paragraph[:40])
        return SubtitleSection(content=paragraph, position=position)

    return TextSection(content=paragraph, position=position)


def _log_summary(sections: list[Section]) -> None:
    counts = {"text": 0, "subtitle": 0, "image": 0}
    for s in sections:
        counts[s.type] += 1
    logger.info("Stage 2 complete → %d sections", len(sections))
    for section_type, count in counts.items():
        logger.info("  %-10s %d", section_type, count)
