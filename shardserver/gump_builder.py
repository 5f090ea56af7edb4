"""Builder for gump layout command strings and their interned text."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

__all__ = ["GumpLayout", "GumpText", "GumpBuilder"]

Vec2 = Sequence[int]


@dataclass
class GumpLayout:
    """A finished gump: the layout commands and the text they refer to."""

    layout: str = ""
    text: list[str] = field(default_factory=list)


@dataclass
class GumpText:
    """Table of strings referenced from a layout by index."""

    text: list[str] = field(default_factory=list)

    def intern(self, text: str) -> int:
        """Store ``text`` and return the index that refers to it."""
        self.text.append(text)
        return len(self.text) - 1


class GumpBuilder:
    """Accumulates gump layout commands; every method returns the builder."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def __repr__(self) -> str:
        return f"GumpBuilder(layout={''.join(self._parts)!r})"

    def _write(self, *items: object) -> GumpBuilder:
        self._parts.append("{ " + " ".join(str(item) for item in items) + " }")
        return self

    def into_layout(self, text: GumpText) -> GumpLayout:
        """Combine the commands written so far with ``text`` into a layout."""
        return GumpLayout(layout="".join(self._parts), text=list(text.text))

    def mark_no_close(self) -> GumpBuilder:
        return self._write("noclose")

    def mark_no_dispose(self) -> GumpBuilder:
        return self._write("nodispose")

    def mark_no_move(self) -> GumpBuilder:
        return self._write("nomove")

    def override_gump_id(self, gump_id: int) -> GumpBuilder:
        return self._write("mastergump", gump_id)

    def add_tooltip_localised(self, text_id: int, args: str) -> GumpBuilder:
        return self._write("tooltip", text_id, f"@{args}@")

    def add_page(self, page: int) -> GumpBuilder:
        return self._write("page", page)

    def start_group(self, group_id: int) -> GumpBuilder:
        return self._write("group", group_id)

    def end_group(self) -> GumpBuilder:
        return self._write("group")

    def add_alpha_cutout(self, position: Vec2, size: Vec2) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write("checkertrans", x, y, w, h)

    def add_image(self, image_id: int, position: Vec2) -> GumpBuilder:
        x, y = position
        return self._write("gumppic", x, y, image_id)

    def add_image_hue(self, image_id: int, hue: int, position: Vec2) -> GumpBuilder:
        x, y = position
        return self._write("gumppic", x, y, image_id, f"hue={hue}")

    def add_image_sliced(self, image_id: int, position: Vec2, size: Vec2) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write("resizepic", x, y, image_id, w, h)

    def add_image_tiled(self, image_id: int, position: Vec2, size: Vec2) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write("gumppictiled", x, y, w, h, image_id)

    def add_tile_image(self, graphic_id: int, position: Vec2) -> GumpBuilder:
        x, y = position
        return self._write("tilepic", x, y, graphic_id)

    def add_tile_image_hue(self, graphic_id: int, hue: int, position: Vec2) -> GumpBuilder:
        x, y = position
        return self._write("tilepic", x, y, graphic_id, hue)

    def add_item_property(self, entity_id: int) -> GumpBuilder:
        return self._write("itemproperty", int(entity_id))

    def add_sprite(
        self, image_id: int, position: Vec2, size: Vec2, sprite_offset: Vec2
    ) -> GumpBuilder:
        x, y = position
        w, h = size
        ox, oy = sprite_offset
        return self._write("picinpic", x, y, image_id, ox, oy, w, h)

    def add_text(self, intern_id: int, hue: int, position: Vec2) -> GumpBuilder:
        x, y = position
        return self._write("text", x, y, hue, intern_id)

    def add_text_cropped(
        self, intern_id: int, hue: int, position: Vec2, size: Vec2
    ) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write("croppedtext", x, y, w, h, hue, intern_id)

    def add_text_entry(
        self, entry_id: int, default_intern_id: int, hue: int, position: Vec2, size: Vec2
    ) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write("textentry", x, y, w, h, hue, entry_id, default_intern_id)

    def add_text_entry_limited(
        self,
        entry_id: int,
        max_length: int,
        default_intern_id: int,
        hue: int,
        position: Vec2,
        size: Vec2,
    ) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write(
            "textentrylimited", x, y, w, h, hue, entry_id, default_intern_id, max_length
        )

    def add_button(
        self,
        up_texture_id: int,
        down_texture_id: int,
        button_id: int,
        page_id: int,
        close: bool,
        position: Vec2,
    ) -> GumpBuilder:
        x, y = position
        return self._write(
            "button",
            x,
            y,
            up_texture_id,
            down_texture_id,
            int(bool(close)),
            page_id,
            button_id,
        )

    def add_tile_button(
        self,
        up_texture_id: int,
        down_texture_id: int,
        graphic_id: int,
        hue: int,
        button_id: int,
        page_id: int,
        close: bool,
        position: Vec2,
        tile_offset: Vec2,
    ) -> GumpBuilder:
        x, y = position
        ox, oy = tile_offset
        return self._write(
            "buttontileart",
            x,
            y,
            up_texture_id,
            down_texture_id,
            int(bool(close)),
            page_id,
            button_id,
            graphic_id,
            hue,
            ox,
            oy,
        )

    def add_checkbox(
        self, off_image_id: int, on_image_id: int, on: bool, switch_id: int, position: Vec2
    ) -> GumpBuilder:
        x, y = position
        return self._write(
            "checkbox", x, y, off_image_id, on_image_id, int(bool(on)), switch_id
        )

    def add_radio(
        self, off_image_id: int, on_image_id: int, on: bool, switch_id: int, position: Vec2
    ) -> GumpBuilder:
        x, y = position
        return self._write(
            "radio", x, y, off_image_id, on_image_id, int(bool(on)), switch_id
        )

    def add_html(
        self, intern_id: int, background: bool, scrollbar: bool, position: Vec2, size: Vec2
    ) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write(
            "htmlgump", x, y, w, h, intern_id, int(bool(background)), int(bool(scrollbar))
        )

    def add_html_localised(
        self, text_id: int, background: bool, scrollbar: bool, position: Vec2, size: Vec2
    ) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write(
            "xmfhtmlgump", x, y, w, h, text_id, int(bool(background)), int(bool(scrollbar))
        )

    def add_html_localised_parametric(
        self,
        text_id: int,
        params: str,
        background: bool,
        scrollbar: bool,
        position: Vec2,
        size: Vec2,
    ) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write(
            "xmfhtmltok",
            x,
            y,
            w,
            h,
            text_id,
            int(bool(background)),
            int(bool(scrollbar)),
            f"@{params}@",
        )

    def add_html_colour(
        self,
        text_id: int,
        colour: int,
        background: bool,
        scrollbar: bool,
        position: Vec2,
        size: Vec2,
    ) -> GumpBuilder:
        x, y = position
        w, h = size
        return self._write(
            "xmfhtmlgumpcolor",
            x,
            y,
            w,
            h,
            text_id,
            int(bool(background)),
            int(bool(scrollbar)),
            colour,
        )