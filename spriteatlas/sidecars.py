"""
Text descriptions of a packed page for game engines.

XML follows the Starling TextureAtlas format; JSON follows the common
"JSON array" hash used by Phaser and TexturePacker.
"""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET

from .errors import AtlasIOError
from .layout import AtlasPage


def _text(value) -> str:
    """Return value as valid Unicode; undecodable filename bytes become \\xNN escapes."""
    text = str(value)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        text = text.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")
    return text


def build_xml(page: AtlasPage, image_path: str) -> ET.Element:
    root = ET.Element("TextureAtlas", imagePath=_text(image_path))
    for s in page.sprites:
        sub = ET.SubElement(root, "SubTexture", name=_text(s.name))
        sub.set("x", str(s.x))
        sub.set("y", str(s.y))
        sub.set("width", str(s.width))
        sub.set("height", str(s.height))
        if s.trimmed:
            sub.set("frameX", str(-s.trim_left))
            sub.set("frameY", str(-s.trim_top))
            sub.set("frameWidth", str(s.source_width))
            sub.set("frameHeight", str(s.source_height))
    return root


def build_json(page: AtlasPage, image_path: str) -> dict:
    frames = []
    for s in page.sprites:
        frame = {
            "filename": _text(s.name),
            "frame": {"x": s.x, "y": s.y, "w": s.width, "h": s.height},
        }
        if s.trimmed:
            frame["trimmed"] = True
            frame["spriteSourceSize"] = {"x": s.trim_left, "y": s.trim_top,
                                         "w": s.width, "h": s.height}
            frame["sourceSize"] = {"w": s.source_width, "h": s.source_height}
        frames.append(frame)
    return {
        "meta": {"image": _text(image_path), "size": {"w": page.size, "h": page.size}},
        "frames": frames,
    }


def write_xml(path, page: AtlasPage, image_path: str) -> None:
    """Write a Starling XML sidecar describing page."""
    root = build_xml(page, image_path)
    ET.indent(root, space="  ")
    try:
        ET.ElementTree(root).write(path, encoding="utf-8")
    except OSError as e:
        raise AtlasIOError(f"can't write file: {path}: {e}") from e
    logging.info(f"Wrote {path}")


def write_json(path, page: AtlasPage, image_path: str) -> None:
    """Write a JSON sidecar describing page."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(build_json(page, image_path), f, indent=4)
            f.write("\n")
    except OSError as e:
        raise AtlasIOError(f"can't write file: {path}: {e}") from e
    logging.info(f"Wrote {path}")
