"""Keyword tables and predicates used by the paragraph classifier.

Image rules are an ordered table: the classifier walks ``IMAGE_RULES`` top to
bottom and the first predicate that matches wins. Subtitle cues are checked
only after every image rule has failed, and only for paragraphs that pass the
length and punctuation gate in ``is_subtitle``.

Each predicate takes the stripped paragraph text and can be tested on its own.
"""
import re
from typing import Callable

FIGURE_GLYPH = "图"

# ---------------------------------------------------------------------------
# Image rules
# ---------------------------------------------------------------------------

IMAGE_MARKERS = ("[图片]", "[image]", "[img]", "【图片】", "【image】", "【img】")

FIGURE_WORDS = frozenset({"图片", "图像"})

CAPTION_KEYWORDS = ("注释", "说明", "备注", "描述", "caption", "图注", "配图", "插图")

_FIGURE_NUMBER_RE = re.compile(r"图\s*(?:[0-9]|[一二三四五六七八九]|[A-Za-z])")
_LEADING_ENUMERATOR_RE = re.compile(r"^[0-9]+[.、]")
_FIGURE_CAPTION_RE = re.compile(r"^图[0-9一二三四五六七八九]+[\s\u3000]+.+")

IMAGE_DESCRIPTION_PATTERNS = (
    re.compile(r"图.*展示"),
    re.compile(r"图.*显示"),
    re.compile(r"如图"),
    re.compile(r"图片.*[展|显]示"),
    re.compile(r"插图"),
    re.compile(r"配图"),
)


def has_image_marker(text: str) -> bool:
    return any(marker in text for marker in IMAGE_MARKERS)


def has_figure_number(text: str) -> bool:
    return FIGURE_GLYPH in text and _FIGURE_NUMBER_RE.search(text) is not None


def is_bare_figure_word(text: str) -> bool:
    return text.strip() in FIGURE_WORDS


def has_caption_keyword(text: str) -> bool:
    return any(keyword in text for keyword in CAPTION_KEYWORDS)


def has_leading_enumerator(text: str) -> bool:
    return _LEADING_ENUMERATOR_RE.match(text.strip()) is not None


def matches_image_description(text: str) -> bool:
    return any(pattern.search(text) for pattern in IMAGE_DESCRIPTION_PATTERNS)


def starts_with_figure_glyph(text: str) -> bool:
    return text.strip().startswith(FIGURE_GLYPH)


def has_figure_caption_numbering(text: str) -> bool:
    return FIGURE_GLYPH in text and _FIGURE_CAPTION_RE.match(text.strip()) is not None


IMAGE_RULES: tuple[tuple[str, Callable[[str], bool]], ...] = (
    ("image_marker", has_image_marker),
    ("figure_number", has_figure_number),
    ("bare_figure_word", is_bare_figure_word),
    ("caption_keyword", has_caption_keyword),
    ("leading_enumerator", has_leading_enumerator),
    ("image_description", matches_image_description),
    ("figure_prefix", starts_with_figure_glyph),
    ("figure_caption_numbering", has_figure_caption_numbering),
)


def match_image_rule(text: str) -> str | None:
    """Return the name of the first image rule ``text`` satisfies, or None."""
    for name, predicate in IMAGE_RULES:
        if predicate(text):
            return name
    return None


# ---------------------------------------------------------------------------
# Subtitle cues
# ---------------------------------------------------------------------------

SUBTITLE_MAX_LENGTH = 30
LIST_ITEM_MAX_LENGTH = 20

SUBTITLE_KEYWORDS = (
    # structure
    "介绍", "概述", "总结", "结论", "方法", "步骤", "注意", "要点",
    "背景", "目的", "意义", "问题", "分析", "讨论", "结果", "建议",
    # chapters
    "第一章", "第二章", "第三章", "第四章", "第五章", "第六章", "第七章", "第八章", "第九章",
    "一、", "二、", "三、", "四、", "五、", "六、", "七、", "八、", "九、",
    # sequence
    "首先", "其次", "最后", "第一", "第二", "第三",
    # domain
    "助力", "陪伴", "成长", "课堂", "教学", "学习", "教育",
    "特点", "优势", "内容", "展示", "案例",
    "志愿", "服务", "活动", "实践", "体验", "中心", "之旅",
)

# Pronouns, conjunctions and time words that usually open body text
BODY_OPENING_WORDS = (
    "我们", "他们", "她们", "它", "这个", "这些", "那些", "那么", "因为", "所以",
    "但是", "然而", "虽然", "如果", "为了", "由于", "通过", "根据", "对于",
    "今天", "昨天", "明天", "现在", "目前", "已经", "正在", "将会",
)

TOPIC_HIGHLIGHT_PATTERNS = (
    re.compile(r"助力.*成长"),
    re.compile(r"课堂.*教学"),
    re.compile(r"学习.*教育"),
    re.compile(r"特点.*优势"),
    re.compile(r"内容.*展示"),
    re.compile(r"志愿.*能力"),
    re.compile(r"特教.*中心"),
)

SUBTITLE_ENDINGS = ("：", ":", "】", "）", ")")

PARALLEL_DOMAIN_WORDS = ("志愿", "服务", "活动", "中心", "之旅")

_BODY_PUNCTUATION_END_RE = re.compile(r"[，。；！？]$")
_COLON_END_RE = re.compile(r"[：:]$")
_CHAPTER_INDICATOR_RE = re.compile(r"^(?:第?[一二三四五六七八九十章]+|[0-9]+[、.])")
_LIST_SEPARATOR_RE = re.compile(r"[，、,]")


def ends_with_body_punctuation(text: str) -> bool:
    return _BODY_PUNCTUATION_END_RE.search(text.strip()) is not None


def starts_with_body_opening(text: str) -> bool:
    return text.startswith(BODY_OPENING_WORDS)


def has_subtitle_keyword(text: str) -> bool:
    return any(keyword in text for keyword in SUBTITLE_KEYWORDS)


def matches_topic_highlight(text: str) -> bool:
    return any(pattern.search(text) for pattern in TOPIC_HIGHLIGHT_PATTERNS)


def ends_with_subtitle_mark(text: str) -> bool:
    return text.strip().endswith(SUBTITLE_ENDINGS)


def ends_with_colon(text: str) -> bool:
    return _COLON_END_RE.search(text.strip()) is not None


def has_chapter_indicator(text: str) -> bool:
    return _CHAPTER_INDICATOR_RE.match(text.strip()) is not None


def is_parallel_structure(text: str) -> bool:
    return (
        _LIST_SEPARATOR_RE.search(text) is not None
        and any(word in text for word in PARALLEL_DOMAIN_WORDS)
    )


def continues_subtitle_list(text: str, previous_type: str | None) -> bool:
    """Short lines right after a subtitle read as list-item subtitles."""
    return (
        previous_type == "subtitle"
        and not starts_with_body_opening(text)
        and len(text) <= LIST_ITEM_MAX_LENGTH
    )


SUBTITLE_CUES: tuple[tuple[str, Callable[[str], bool]], ...] = (
    ("subtitle_keyword", has_subtitle_keyword),
    ("topic_highlight", matches_topic_highlight),
    ("subtitle_ending", ends_with_subtitle_mark),
    ("colon_ending", ends_with_colon),
    ("chapter_indicator", has_chapter_indicator),
    ("parallel_structure", is_parallel_structure),
)


def is_subtitle(text: str, previous_type: str | None) -> bool:
    """Subtitle heuristic.

    ``previous_type`` is the type of the section emitted just before this
    paragraph (None at the start of the document).
    """
    if len(text) > SUBTITLE_MAX_LENGTH or ends_with_body_punctuation(text):
        return False
    if any(cue(text) for _, cue in SUBTITLE_CUES):
        return True
    return continues_subtitle_list(text, previous_type)
