"""
spriteatlas - PNG texture atlas packer

Packs sprites into square atlases with the Maximal Rectangles heuristic,
optionally trimming transparent borders, and embeds each sprite's geometry
in an atLS chunk so sprites can be extracted from the atlas again.
"""

__version__ = "1.0.0"
__author__ = "spriteatlas Team"
