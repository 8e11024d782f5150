"""
Tests for the command-line interface.
"""

import json
import sys
from pathlib import Path
import tempfile
import numpy as np
import unittest
from PIL import Image

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from roomkit.cli import EXIT_BAD_ROOM, EXIT_ERROR, EXIT_NO_BLUEPRINT, EXIT_OK, main
from roomkit.level import COLOR_BLUEPRINT, COLOR_DOOR, COLOR_FLOOR, COLOR_WALL


def write_level(path):
    """5x5 walled room with a door and a blueprint at (2, 2)."""
    rgb = np.zeros((5, 5, 3), dtype=np.uint8)
    rgb[:, :] = COLOR_FLOOR
    for i in range(5):
        rgb[0, i] = rgb[4, i] = rgb[i, 0] = rgb[i, 4] = COLOR_WALL
    rgb[0, 2] = COLOR_DOOR
    rgb[2, 2] = COLOR_BLUEPRINT
    Image.fromarray(rgb).save(path)


class TestMeshCommand(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

        rgba = np.zeros((3, 3, 4), dtype=np.uint8)
        rgba[0, :] = [200, 200, 200, 255]
        self.room = self.tmp / "room.png"
        Image.fromarray(rgba).save(self.room)

        self.collider = self.tmp / "room_collider.png"
        Image.fromarray(rgba).save(self.collider)

    def tearDown(self):
        self._tmp.cleanup()

    def test_mesh_writes_obj(self):
        out = self.tmp / "out.obj"
        assert main(["mesh", str(self.room), "-o", str(out), "--stats"]) == EXIT_OK
        assert out.exists()

    def test_default_output_path(self):
        assert main(["mesh", str(self.room)]) == EXIT_OK
        assert (self.tmp / "room.obj").exists()

    def test_mesh_with_colliders(self):
        out_json = self.tmp / "boxes.json"
        code = main([
            "mesh", str(self.room),
            "--collider", str(self.collider),
            "--colliders-json", str(out_json),
        ])
        assert code == EXIT_OK
        assert len(json.loads(out_json.read_text())["colliders"]) == 1

    def test_verbose_after_subcommand(self):
        out = self.tmp / "out.obj"
        assert main(["mesh", str(self.room), "-o", str(out), "-v"]) == EXIT_OK
        assert out.exists()

    def test_bad_collider_writes_nothing(self):
        broken = self.tmp / "broken.png"
        broken.write_bytes(b"\x89PNG garbage")
        out = self.tmp / "out.obj"
        out_json = self.tmp / "boxes.json"

        code = main([
            "mesh", str(self.room),
            "-o", str(out),
            "--collider", str(broken),
            "--colliders-json", str(out_json),
        ])
        assert code == EXIT_ERROR
        assert not out.exists()
        assert not out_json.exists()

    def test_missing_input(self):
        assert main(["mesh", str(self.tmp / "missing.png")]) == EXIT_ERROR


class TestCheckCommand(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.level = Path(self._tmp.name) / "level.png"
        write_level(self.level)

    def tearDown(self):
        self._tmp.cleanup()

    def test_good_room_from_player(self):
        assert main(["check", str(self.level), "--player", "2", "0", "3"]) == EXIT_OK

    def test_good_room_from_seed(self):
        assert main(["check", str(self.level), "--seed", "2.2", "1.8"]) == EXIT_OK

    def test_verbose_after_subcommand(self):
        assert main(["check", str(self.level), "--seed", "2", "2", "-v"]) == EXIT_OK

    def test_verbose_before_subcommand(self):
        assert main(["-v", "check", str(self.level), "--seed", "2", "2"]) == EXIT_OK

    def test_carried_wall(self):
        code = main([
            "check", str(self.level), "--seed", "2", "2", "--disable-wall", "4", "2"
        ])
        assert code == EXIT_BAD_ROOM

    def test_small_cap(self):
        code = main(["check", str(self.level), "--seed", "2", "2", "--cap", "3"])
        assert code == EXIT_BAD_ROOM

    def test_no_blueprint_in_reach(self):
        code = main(["check", str(self.level), "--player", "40", "0", "40"])
        assert code == EXIT_NO_BLUEPRINT

    def test_missing_level(self):
        assert main(["check", "/nonexistent/level.png", "--seed", "0", "0"]) == EXIT_ERROR


class TestMain(unittest.TestCase):

    def test_no_command(self):
        assert main([]) == EXIT_ERROR


if __name__ == "__main__":
    unittest.main(verbosity=2)
