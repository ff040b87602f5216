from typing import Annotated, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from models.template import LayoutVariant


class _SectionBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    position: int = Field(ge=1)
    manual_edit: bool = Field(default=False, alias="manualEdit")


class TextSection(_SectionBase):
    type: Literal["text"] = "text"
    content: str


class SubtitleSection(_SectionBase):
    type: Literal["subtitle"] = "subtitle"
    content: str


class ImageSection(_SectionBase):
    """An image slot. The caption is the paragraph that identified it.

    Manual authors send image captions under ``content``; both names are accepted.
    """

    type: Literal["image"] = "image"
    caption: str = Field(default="", validation_alias=AliasChoices("caption", "content"))


Section = Annotated[
    Union[TextSection, SubtitleSection, ImageSection],
    Field(discriminator="type"),
]


class Article(BaseModel):
    """A classified document: title plus sections in final order.

    Frozen after construction. Positions must run 1..n in list order.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    sections: list[Section] = Field(default_factory=list)

    @model_validator(mode="after")
    def positions_are_contiguous(self) -> "Article":
        for expected, section in enumerate(self.sections, start=1):
            if section.position != expected:
                raise ValueError(
                    f"section positions must be contiguous from 1; "
                    f"found {section.position} at index {expected - 1}"
                )
        return self

    @property
    def image_captions(self) -> list[str]:
        return [s.caption for s in self.sections if s.type == "image"]

    @property
    def image_count(self) -> int:
        return len(self.image_captions)


class ManualSection(BaseModel):
    type: Literal["text", "subtitle", "image"]
    content: str = Field(default="", validation_alias=AliasChoices("content", "caption"))


class ManualContent(BaseModel):
    """Author-supplied article as received from the transport layer."""

    title: str = ""
    sections: list[ManualSection]

    def to_article(self) -> Article:
        sections = []
        for position, item in enumerate(self.sections, start=1):
            if item.type == "image":
                sections.append(ImageSection(caption=item.content, position=position, manual_edit=True))
            elif item.type == "subtitle":
                sections.append(SubtitleSection(content=item.content, position=position, manual_edit=True))
            else:
                sections.append(TextSection(content=item.content, position=position, manual_edit=True))
        return Article(title=self.title, sections=sections)


class ArticleResult(BaseModel):
    title: str
    sections: list[Section] = Field(default_factory=list)
    rendered_markup: str
    template_id: str
    variant: LayoutVariant
