from typing import Literal

from pydantic import BaseModel, Field

from models.template import LayoutVariant


class ImageSlot(BaseModel):
    src: str
    caption: str = ""


class Block(BaseModel):
    kind: Literal["text", "subtitle", "image-pair", "image-pair-plain", "image-single"]
    content: str = ""
    images: list[ImageSlot] = Field(default_factory=list)


class LayoutPlan(BaseModel):
    template_id: str
    style: Literal["classic", "creative"]
    variant: LayoutVariant
    image_count: int = Field(ge=0)
    title: str = ""
    blocks: list[Block] = Field(default_factory=list)
