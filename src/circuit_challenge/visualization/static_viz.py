"""
Static visualization for Circuit Challenge puzzles.
"""

import matplotlib.pyplot as plt
import numpy as np
from typing import Optional, Tuple, List
from pathlib import Path

from .. import config
from ..core.puzzle import Puzzle, Cell, Connector


class PuzzleVisualizer:
    """Render puzzles as cells joined by numbered connectors"""

    def __init__(self, figsize: Tuple[int, int] = config.VIZ_FIGSIZE, dpi: int = config.VIZ_DPI):
        """
        Initialize visualizer.

        Args:
            figsize: Figure size in inches
            dpi: Dots per inch for saved images
        """
        self.figsize = figsize
        self.dpi = dpi

        # Visual parameters
        self.cell_radius = 0.32
        self.connector_width = 2.0
        self.cell_color = '#2E86AB'
        self.start_color = '#3BB273'
        self.finish_color = '#E15554'
        self.connector_color = '#9AA0A6'
        self.solution_color = '#F4A259'
        self.text_color = 'white'
        self.value_color = '#424874'
        self.background_color = '#F7F7F7'

    def visualize(self, puzzle: Puzzle,
                  show_solution: bool = False,
                  show_values: bool = True,
                  title: Optional[str] = None,
                  save_path: Optional[Path] = None,
                  show_plot: bool = True) -> plt.Figure:
        """
        Create visualization of puzzle.

        Args:
            puzzle: The puzzle to visualize
            show_solution: Whether to highlight the solution path
            show_values: Whether to label connectors with their values
            title: Optional title for the plot
            save_path: Optional path to save the image
            show_plot: Whether to display the plot

        Returns:
            The matplotlib figure
        """
        fig, ax = plt.subplots(figsize=self.figsize)
        fig.patch.set_facecolor(self.background_color)
        self._setup_axis(ax, puzzle)

        # Connectors first so they sit behind the cells
        solution_edges = set()
        if show_solution:
            path = puzzle.solution.path
            solution_edges = {frozenset(pair) for pair in zip(path, path[1:])}

        for connector in puzzle.connectors:
            on_path = frozenset((connector.cell_a, connector.cell_b)) in solution_edges
            self._draw_connector(ax, connector, highlight=on_path, show_value=show_values)

        self._draw_cells(ax, puzzle)

        if title:
            ax.set_title(title, fontsize=16, pad=20)

        if save_path:
            save_path = Path(save_path)
            save_path.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(save_path, dpi=self.dpi, bbox_inches='tight',
                        facecolor=self.background_color)

        if show_plot:
            plt.show()
        else:
            plt.close(fig)

        return fig

    def _setup_axis(self, ax, puzzle: Puzzle):
        ax.set_facecolor(self.background_color)
        ax.set_xlim(-0.6, puzzle.cols - 0.4)
        ax.set_ylim(-0.6, puzzle.rows - 0.4)
        ax.set_aspect('equal')

        # Row 0 at the top
        ax.invert_yaxis()

        ax.set_xticks([])
        ax.set_yticks([])
        for spine in ax.spines.values():
            spine.set_visible(False)

    def _cell_color(self, cell: Cell) -> str:
        if cell.is_start:
            return self.start_color
        if cell.is_finish:
            return self.finish_color
        return self.cell_color

    def _cell_label(self, cell: Cell) -> str:
        if cell.is_finish:
            return "FINISH"
        if cell.is_start:
            return f"START\n{cell.expression}"
        return cell.expression

    def _draw_cells(self, ax, puzzle: Puzzle, fontsize: int = 10):
        """Draw all cells with their expressions"""
        for cell in puzzle.cells():
            circle = plt.Circle((cell.col, cell.row), self.cell_radius,
                                color=self._cell_color(cell), zorder=2)
            ax.add_patch(circle)

            ax.text(cell.col, cell.row, self._cell_label(cell),
                    ha='center', va='center', fontsize=fontsize, fontweight='bold',
                    color=self.text_color, zorder=3)

    def _draw_connector(self, ax, connector: Connector,
                        highlight: bool = False, show_value: bool = True):
        """Draw a single connector, trimmed to the cell edges"""
        a, b = connector.cell_a, connector.cell_b
        dx = b.col - a.col
        dy = b.row - a.row
        length = np.sqrt(dx**2 + dy**2)

        ux = dx / length
        uy = dy / length

        x1 = a.col + ux * self.cell_radius
        y1 = a.row + uy * self.cell_radius
        x2 = b.col - ux * self.cell_radius
        y2 = b.row - uy * self.cell_radius

        line = plt.Line2D([x1, x2], [y1, y2],
                          color=self.solution_color if highlight else self.connector_color,
                          linewidth=self.connector_width * (2 if highlight else 1),
                          solid_capstyle='round',
                          zorder=0)
        ax.add_line(line)

        if show_value and connector.value is not None:
            ax.text((a.col + b.col) / 2, (a.row + b.row) / 2, str(connector.value),
                    ha='center', va='center', fontsize=8, color=self.value_color,
                    bbox=dict(boxstyle='round,pad=0.15', fc=self.background_color, ec='none'),
                    zorder=1)

    def create_puzzle_sheet(self, puzzles: List[Puzzle],
                            rows: int, cols: int,
                            save_path: Optional[Path] = None) -> plt.Figure:
        """Create a sheet of multiple puzzles (for printing)"""
        fig, axes = plt.subplots(rows, cols, figsize=(cols * 4, rows * 4))
        axes = np.array(axes).reshape(rows, cols)

        puzzle_idx = 0

        for i in range(rows):
            for j in range(cols):
                ax = axes[i][j]

                if puzzle_idx < len(puzzles):
                    puzzle = puzzles[puzzle_idx]
                    self._setup_axis(ax, puzzle)

                    for connector in puzzle.connectors:
                        self._draw_connector(ax, connector)
                    self._draw_cells(ax, puzzle, fontsize=7)

                    ax.text(0.02, 0.98, f"#{puzzle_idx + 1}",
                            transform=ax.transAxes,
                            ha='left', va='top',
                            fontsize=10)

                    puzzle_idx += 1
                else:
                    ax.set_visible(False)

        plt.tight_layout()

        if save_path:
            save_path = Path(save_path)
            save_path.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(save_path, dpi=self.dpi, bbox_inches='tight')

        return fig
