"""
Wavefront OBJ Format Exporter

OBJ is a universal text-based format supported by virtually all 3D software.
Room meshes are written with:
- Positions (v) in world units, Y up
- Texture coordinates (vt), V flipped to OBJ's bottom-left origin
- Normals (vn) when the mesh is flat shaded

Limitations:
- Text format = larger file sizes
- No material (MTL) output; the room texture is applied by the host
"""

from pathlib import Path
from typing import Union

import numpy as np

from ..room_mesh import RoomMesh


class OBJExporter:
    """
    Export room meshes to Wavefront OBJ format.
    """

    def __init__(
        self,
        include_uvs: bool = True,
        include_normals: bool = True,
        flip_v: bool = True
    ):
        """
        Initialize the exporter.

        Args:
            include_uvs: Whether to write texture coordinates
            include_normals: Whether to write normals (flat-shaded meshes only)
            flip_v: Write 1 - v, since OBJ puts the texture origin bottom-left
        """
        self.include_uvs = include_uvs
        self.include_normals = include_normals
        self.flip_v = flip_v

    def to_lines(self, mesh: RoomMesh, model_name: str = "room"):
        """Render the mesh as a list of OBJ lines."""
        if len(mesh.positions) == 0:
            raise ValueError("Cannot export empty mesh")

        with_uvs = self.include_uvs
        with_normals = self.include_normals and mesh.normals is not None

        lines = []
        lines.append("# roomkit OBJ Export")
        lines.append(f"# Vertices: {len(mesh.positions)}")
        lines.append(f"# Triangles: {len(mesh.indices) // 3}")
        lines.append("")
        lines.append(f"o {model_name}")
        lines.append("")

        for v in mesh.positions:
            lines.append(f"v {v[0]:.6f} {v[1]:.6f} {v[2]:.6f}")
        lines.append("")

        if with_uvs:
            uvs = mesh.uvs.astype(np.float64)
            if self.flip_v:
                uvs[:, 1] = 1.0 - uvs[:, 1]
            for uv in uvs:
                lines.append(f"vt {uv[0]:.6f} {uv[1]:.6f}")
            lines.append("")

        if with_normals:
            # Flat shading gives each vertex its own normal, so normal i pairs with vertex i
            for n in mesh.normals:
                lines.append(f"vn {n[0]:.6f} {n[1]:.6f} {n[2]:.6f}")
            lines.append("")

        for i in range(0, len(mesh.indices), 3):
            corners = [int(mesh.indices[i + k]) + 1 for k in range(3)]
            if with_uvs and with_normals:
                lines.append("f " + " ".join(f"{c}/{c}/{c}" for c in corners))
            elif with_uvs:
                lines.append("f " + " ".join(f"{c}/{c}" for c in corners))
            elif with_normals:
                lines.append("f " + " ".join(f"{c}//{c}" for c in corners))
            else:
                lines.append("f " + " ".join(str(c) for c in corners))

        return lines

    def export(
        self,
        mesh: RoomMesh,
        output_path: Union[str, Path],
        model_name: str = "room"
    ):
        """
        Export mesh to OBJ file.

        Args:
            mesh: RoomMesh from RoomMeshCompiler
            output_path: Output file path (.obj)
            model_name: Name for the model/object
        """
        output_path = Path(output_path)
        lines = self.to_lines(mesh, model_name)

        with open(output_path, 'w') as f:
            f.write('\n'.join(lines) + '\n')
