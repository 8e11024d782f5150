"""
Collider JSON Exporter

Writes the merged box colliders as a JSON document so a physics host (or a
person) can inspect the compound shape:

    {"collider_height": 1.2,
     "colliders": [{"center": [...], "size": [...], "half_extents": [...],
                    "color": [r, g, b], "cells": [[x0, z0], [x1, z1]]}]}
"""

import json
from pathlib import Path
from typing import List, Optional, Union

from ..colliders import ColliderBox


class ColliderExporter:
    """Export collider boxes to JSON."""

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    def to_dict(self, boxes: List[ColliderBox]) -> dict:
        return {
            "collider_height": boxes[0].size[1] if boxes else None,
            "colliders": [
                {
                    "center": list(box.center),
                    "size": list(box.size),
                    "half_extents": list(box.half_extents),
                    "color": list(box.color),
                    "cells": [list(box.cell_min), list(box.cell_max)],
                }
                for box in boxes
            ],
        }

    def export(self, boxes: List[ColliderBox], output_path: Union[str, Path]):
        """
        Export boxes to a JSON file.

        Args:
            boxes: Boxes from ColliderMerger
            output_path: Output file path (.json)
        """
        output_path = Path(output_path)
        with open(output_path, 'w') as f:
            json.dump(self.to_dict(boxes), f, indent=self.indent)
