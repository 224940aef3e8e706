"""
Thermal erosion of sculpted land.

Steep cells (a neighbor at least two steps lower) shed one elevation step at
a time to a random lower neighbor until only a share of the initial steep
cells remains. Elevation moves between cells, so the total is conserved.
"""

from typing import List

import structlog

from .alea_prng import AleaPRNG
from .hex_grid import HexGrid

logger = structlog.get_logger()


class ErosionSimulator:
    def __init__(self, grid: HexGrid, prng: AleaPRNG):
        self.grid = grid
        self.prng = prng

    def is_erodible(self, cell: int) -> bool:
        erodible_elevation = int(self.grid.elevation[cell]) - 2
        for _, neighbor in self.grid.iter_neighbors(cell):
            if self.grid.elevation[neighbor] <= erodible_elevation:
                return True
        return False

    def erosion_target(self, cell: int) -> int:
        """Pick a random neighbor at least two steps below the cell."""
        erodible_elevation = int(self.grid.elevation[cell]) - 2
        candidates = [
            neighbor
            for _, neighbor in self.grid.iter_neighbors(cell)
            if self.grid.elevation[neighbor] <= erodible_elevation
        ]
        return self.prng.choice(candidates)

    def erode(self, erosion_percentage: int) -> int:
        """
        Erode the land in place.

        Args:
            erosion_percentage: Share (0-100) of the initially erodible cells to smooth out

        Returns:
            Number of erosion steps taken
        """
        grid = self.grid
        erodible: List[int] = [i for i in range(grid.cell_count) if self.is_erodible(i)]
        members = set(erodible)
        target_count = int(len(erodible) * (100 - erosion_percentage) * 0.01)
        logger.info("Eroding land", erodible=len(erodible), target=target_count)

        steps = 0
        while len(erodible) > target_count:
            index = self.prng.range(0, len(erodible))
            cell = erodible[index]
            target = self.erosion_target(cell)

            grid.set_elevation(cell, int(grid.elevation[cell]) - 1)
            grid.set_elevation(target, int(grid.elevation[target]) + 1)
            steps += 1

            if not self.is_erodible(cell):
                erodible[index] = erodible[-1]
                erodible.pop()
                members.discard(cell)

            cell_elevation = int(grid.elevation[cell])
            for _, neighbor in grid.iter_neighbors(cell):
                if grid.elevation[neighbor] == cell_elevation + 2 and neighbor not in members:
                    erodible.append(neighbor)
                    members.add(neighbor)

            if self.is_erodible(target) and target not in members:
                erodible.append(target)
                members.add(target)

            target_elevation = int(grid.elevation[target])
            for _, neighbor in grid.iter_neighbors(target):
                if (
                    neighbor != cell
                    and grid.elevation[neighbor] == target_elevation + 1
                    and neighbor in members
                    and not self.is_erodible(neighbor)
                ):
                    erodible.remove(neighbor)
                    members.discard(neighbor)

        logger.info("Erosion finished", steps=steps, remaining=len(erodible))
        return steps
