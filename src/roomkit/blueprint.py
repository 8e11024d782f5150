"""
Blueprint Room Validation

A blueprint marks a spot where the player wants to build a room. The room is
valid when the area around the blueprint is enclosed, has a door, does not
leak into water and is not too big. Validation is a bounded breadth-first
flood fill over a grid classified from the current walls, water and doors.

The host calls validate_room once per evaluation with a fresh WorldSnapshot;
nothing is cached between calls.

Known limitation: a door only has to be reachable from the blueprint. The
fill never checks that the door actually opens onto the outside.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .grid import Cell, neighbors4, snap_cell, snap_position, xz_distance

logger = logging.getLogger(__name__)

ROOM_CELL_CAP = 300
BLUEPRINT_RADIUS = 2.4


class CellKind(Enum):
    """Classification of an occupied grid cell."""
    WALL = "wall"
    WATER = "water"
    DOOR = "door"


@dataclass(frozen=True)
class WorldSnapshot:
    """
    Immutable view of the classified world for one validation.

    Attributes:
        walls: (cell, enabled) pairs; disabled walls are being carried
        waters: water cells
        doors: door cells
    """

    walls: Tuple[Tuple[Cell, bool], ...] = ()
    waters: Tuple[Cell, ...] = ()
    doors: Tuple[Cell, ...] = ()

    @classmethod
    def from_positions(
        cls,
        walls: Iterable[Tuple[Sequence[float], bool]] = (),
        waters: Iterable[Sequence[float]] = (),
        doors: Iterable[Sequence[float]] = ()
    ) -> "WorldSnapshot":
        """
        Build a snapshot from world positions, snapping each to its cell.

        Args:
            walls: (position, enabled) pairs
            waters: water positions
            doors: door positions
        """
        return cls(
            walls=tuple((snap_position(p), bool(enabled)) for p, enabled in walls),
            waters=tuple(snap_position(p) for p in waters),
            doors=tuple(snap_position(p) for p in doors),
        )


def build_classification_grid(snapshot: WorldSnapshot) -> Dict[Cell, CellKind]:
    """
    Classify cells from a snapshot.

    Collections are applied in the fixed order water, wall, door; a later
    write replaces an earlier one, so a door always wins its cell.
    """
    grid: Dict[Cell, CellKind] = {}
    for cell in snapshot.waters:
        grid[cell] = CellKind.WATER
    for cell, enabled in snapshot.walls:
        if enabled:
            grid[cell] = CellKind.WALL
    for cell in snapshot.doors:
        grid[cell] = CellKind.DOOR
    return grid


@dataclass
class RoomVerdict:
    """
    Result of validating one blueprint location.

    Attributes:
        good: True when a door was found without leaking or overflowing
        seed: The blueprint cell the fill started from
        reachable_from: Visited cell -> parent cell (the seed is its own parent)
        path: For bad verdicts, cells from the failure cell back toward the
            seed, seed excluded
        has_door: A door cell bordered the fill
        leaked: The fill touched water
        oversized: The fill visited more cells than the cap
        failure_cell: Where the fill failed, if it failed at a cell
    """

    good: bool
    seed: Cell
    reachable_from: Dict[Cell, Cell] = field(default_factory=dict)
    path: List[Cell] = field(default_factory=list)
    has_door: bool = False
    leaked: bool = False
    oversized: bool = False
    failure_cell: Optional[Cell] = None

    @property
    def visited(self) -> Set[Cell]:
        return set(self.reachable_from)

    @property
    def reason(self) -> str:
        if self.good:
            return "ok"
        if self.leaked:
            return "leaks into water"
        if self.oversized:
            return "too big"
        return "no door"

    @property
    def highlight_cells(self) -> List[Cell]:
        """Cells to draw: the whole room when good, the failure path when bad."""
        if self.good:
            return list(self.reachable_from)
        return list(self.path)


def trace_path(reachable_from: Dict[Cell, Cell], start: Optional[Cell], seed: Cell) -> List[Cell]:
    """Follow parent links from start back to the seed, seed excluded."""
    path: List[Cell] = []
    current = start
    while current is not None and current != seed:
        path.append(current)
        current = reachable_from.get(current)
    return path


def validate_room(
    seed: Cell,
    snapshot: WorldSnapshot,
    cap: int = ROOM_CELL_CAP
) -> RoomVerdict:
    """
    Flood fill from a blueprint cell and judge the enclosed room.

    Args:
        seed: Blueprint cell; fractional positions snap to the nearest cell
        snapshot: Walls, water and doors for this evaluation
        cap: Largest number of visited cells a valid room may have

    Returns:
        RoomVerdict
    """
    seed = snap_cell(seed[0], seed[1])
    grid = build_classification_grid(snapshot)

    reachable_from: Dict[Cell, Cell] = {seed: seed}
    queue = deque([seed])

    leaked = False
    has_door = False
    oversized = False
    failure_cell: Optional[Cell] = None

    while queue:
        current = queue.popleft()
        if len(reachable_from) > cap:
            failure_cell = current
            oversized = True
            break

        for neighbor in neighbors4(current):
            if neighbor in reachable_from:
                continue
            reachable_from[neighbor] = current

            kind = grid.get(neighbor)
            if kind is CellKind.WATER:
                failure_cell = neighbor
                leaked = True
                break
            if kind is CellKind.DOOR:
                has_door = True
                continue
            if kind is CellKind.WALL:
                continue

            queue.append(neighbor)

        if failure_cell is not None:
            break

    good = has_door and not leaked and not oversized
    path = [] if good else trace_path(reachable_from, failure_cell, seed)

    verdict = RoomVerdict(
        good=good,
        seed=seed,
        reachable_from=reachable_from,
        path=path,
        has_door=has_door,
        leaked=leaked,
        oversized=oversized,
        failure_cell=failure_cell,
    )
    logger.debug(
        "Blueprint at %s: %s (%d cells visited)",
        seed, verdict.reason, len(reachable_from)
    )
    return verdict


@dataclass(frozen=True)
class ActiveBlueprint:
    """The blueprint the player is standing next to."""
    location: Cell
    index: int


def select_active_blueprint(
    player_position: Sequence[float],
    blueprint_positions: Iterable[Sequence[float]],
    radius: float = BLUEPRINT_RADIUS
) -> Optional[ActiveBlueprint]:
    """
    Pick the blueprint in reach of the player.

    A blueprint is in reach when its XZ distance to the player is strictly
    less than radius. When several are in reach the last one wins.

    Args:
        player_position: (x, y, z) world position
        blueprint_positions: (x, y, z) world positions
        radius: Reach distance

    Returns:
        ActiveBlueprint, or None when no blueprint is in reach
    """
    active = None
    for index, position in enumerate(blueprint_positions):
        if xz_distance(position, player_position) < radius:
            active = ActiveBlueprint(location=snap_position(position), index=index)
    return active
