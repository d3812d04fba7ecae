"""Convert ASCII PLY triangle meshes into LEGO brick models written as LDraw files."""

__version__ = "1.0.0"