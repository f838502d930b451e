#!/usr/bin/env python3
"""
Generate the open/grabbed hand cursor images (PNG) using Pillow.
"""
from pathlib import Path

from PIL import Image, ImageDraw


SIZE = 32
OUT_DIR = Path("src/map_viewer/assets/cursors")
FILL = (255, 255, 255, 255)
OUTLINE = (0, 0, 0, 255)


def draw_palm(draw: ImageDraw.ImageDraw) -> None:
    draw.rounded_rectangle([7, 14, 25, 29], radius=5, fill=FILL, outline=OUTLINE)


def draw_fingers(draw: ImageDraw.ImageDraw, length: int) -> None:
    # four fingers, left to right
    for i, left in enumerate((8, 12, 16, 20)):
        top = 15 - length + (2 if i in (0, 3) else 0)
        draw.rounded_rectangle([left, top, left + 4, 17], radius=2, fill=FILL, outline=OUTLINE)


def draw_thumb(draw: ImageDraw.ImageDraw, spread: bool) -> None:
    if spread:
        draw.rounded_rectangle([2, 15, 9, 19], radius=2, fill=FILL, outline=OUTLINE)
    else:
        draw.rounded_rectangle([5, 17, 10, 22], radius=2, fill=FILL, outline=OUTLINE)


def make_cursor(grabbed: bool) -> Image.Image:
    img = Image.new("RGBA", (SIZE, SIZE), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw_fingers(draw, length=3 if grabbed else 11)
    draw_thumb(draw, spread=not grabbed)
    draw_palm(draw)
    return img


def main() -> None:
    OUT_DIR.mkdir(parents=True, exist_ok=True)
    for name, grabbed in (("open_hand", False), ("grabbed_hand", True)):
        out_path = OUT_DIR / f"{name}.png"
        make_cursor(grabbed).save(out_path, format="PNG")
        print(f"saved {out_path}")


if __name__ == "__main__":
    main()
