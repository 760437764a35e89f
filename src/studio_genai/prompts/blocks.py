from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from studio_genai.assets import ImageAsset, to_wire_asset


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class ImageBlock:
    asset: ImageAsset


Block = Union[TextBlock, ImageBlock]


@dataclass
class PromptSpec:
    """
    Ordered content blocks for one request.

    The service can only bind an image to its role by adjacency, so every
    image block sits directly after a text block that names it. Use
    `add_image` rather than appending to `blocks` directly.
    """

    blocks: list[Block] = field(default_factory=list)

    def add_text(self, text: str) -> PromptSpec:
        self.blocks.append(TextBlock(text))
        return self

    def add_image(self, label: str, asset: ImageAsset) -> PromptSpec:
        if not label.strip():
            raise ValueError("image blocks need a non-empty role label")
        self.blocks.append(TextBlock(label))
        self.blocks.append(ImageBlock(asset))
        return self

    def validate(self) -> None:
        for idx, block in enumerate(self.blocks):
            if isinstance(block, ImageBlock) and (idx == 0 or not isinstance(self.blocks[idx - 1], TextBlock)):
                raise ValueError(f"image block at position {idx} is not preceded by a label")

    @property
    def text(self) -> str:
        return "\n".join(b.text for b in self.blocks if isinstance(b, TextBlock))

    @property
    def images(self) -> list[ImageAsset]:
        return [b.asset for b in self.blocks if isinstance(b, ImageBlock)]

    def to_wire(self) -> list[dict[str, Any]]:
        self.validate()
        out: list[dict[str, Any]] = []
        for block in self.blocks:
            if isinstance(block, TextBlock):
                out.append({"text": block.text})
            else:
                out.append(to_wire_asset(block.asset))
        return out
