"""
Export modules for offline inspection of compiled rooms.

Supported formats:
- Wavefront (.obj) - Room mesh with UVs and normals
- JSON (.json) - Compound collider boxes
"""

from .obj_exporter import OBJExporter
from .collider_exporter import ColliderExporter

__all__ = ["OBJExporter", "ColliderExporter"]
