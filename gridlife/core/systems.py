import logging
import sys
from typing import List, Optional, TextIO, TYPE_CHECKING

import esper
import numpy as np
import pyglet

from gridlife.ui.console import console_draw
from gridlife.ui.layout import cell_rectangles, to_bottom_left
from gridlife.world.board import Board
from gridlife.world.cells import CellState

if TYPE_CHECKING:
    import pyglet.shapes
    import pyglet.window

LOG = logging.getLogger(__name__)

# esper runs higher priorities first: read input, present generation N, then advance to N+1.
INPUT_PRIORITY = 30
PRESENT_PRIORITY = 20
SIMULATION_PRIORITY = 10

LABEL_COLOR = (220, 20, 60, 255)

class System(esper.Processor):
    """Base class for all systems run by the engine.

    Systems are registered with esper.add_processor and driven once per frame
    by esper.process(dt).
    """

    def __init__(self) -> None:
        super().__init__()

class SimulationSystem(System):
    """Advances the board one generation per frame and counts generations."""

    def __init__(self, board: Board, max_generations: Optional[int] = None) -> None:
        super().__init__()
        self.board = board
        self.max_generations = max_generations
        self.generation = 0
        self.paused = False
        self._pending_steps = 0

    @property
    def finished(self) -> bool:
        return self.max_generations is not None and self.generation >= self.max_generations

    def toggle_pause(self) -> None:
        self.paused = not self.paused
        self._pending_steps = 0
        LOG.info("Simulation %s at generation %d", "paused" if self.paused else "resumed", self.generation)

    def request_step(self) -> None:
        """Queues a single advance while paused. Ignored while running."""
        if self.paused:
            self._pending_steps += 1

    def reseed(self, chance_percent: int) -> None:
        """Re-randomizes the board and restarts the generation count."""
        self.board.randomize(chance_percent)
        self.generation = 0
        LOG.info("Board re-randomized at %d%%, population %d", chance_percent, self.board.population)

    def process(self, dt: float) -> None:
        if self.finished:
            return
        if self.paused:
            if not self._pending_steps:
                return
            self._pending_steps -= 1
        self.board.advance()
        self.generation += 1

class InputSystem(System):
    """Handles keyboard control of the simulation.

    SPACE pauses/resumes, N steps one generation while paused and R
    re-randomizes the board. ESC is left to pyglet, which closes the window.
    """

    def __init__(self, window: 'pyglet.window.Window', simulation: SimulationSystem, randomize_chance: int) -> None:
        super().__init__()
        self.window = window
        self.simulation = simulation
        self.randomize_chance = randomize_chance
        self.window.push_handlers(self)

    def on_key_press(self, symbol: int, modifiers: int) -> None:
        key = pyglet.window.key
        if symbol == key.SPACE:
            self.simulation.toggle_pause()
        elif symbol == key.N:
            self.simulation.request_step()
        elif symbol == key.R:
            self.simulation.reseed(self.randomize_chance)

    def process(self, dt: float) -> None:
        # Input is event driven through on_key_press.
        pass

class RenderSystem(System):
    """Draws the board into a pyglet window, one rectangle per cell.

    Rectangles live in a single batch. After the first frame only cells whose
    state changed since the previous frame get recoloured.
    """

    def __init__(
        self,
        window: 'pyglet.window.Window',
        board: Board,
        screen_width: int,
        screen_height: int,
        simulation: Optional[SimulationSystem] = None,
    ) -> None:
        super().__init__()
        self.window = window
        self.board = board
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.simulation = simulation
        self.batch = pyglet.graphics.Batch()
        self.cell_group = pyglet.graphics.Group(order=0)
        self.cell_visuals: List['pyglet.shapes.Rectangle'] = []
        self.rendered_state: Optional[np.ndarray] = None

        self.fps_label = pyglet.text.Label(
            'FPS: 0',
            font_name='Arial', font_size=12, color=LABEL_COLOR,
            x=10, y=self.screen_height - 10, anchor_x='left', anchor_y='top',
        )
        self.generation_label = pyglet.text.Label(
            'Generation: 0',
            font_name='Arial', font_size=12, color=LABEL_COLOR,
            x=10, y=self.screen_height - 30, anchor_x='left', anchor_y='top',
        )

    @staticmethod
    def _cell_color(alive: bool) -> tuple:
        return (CellState.ALIVE if alive else CellState.DEAD).metadata.color

    def _prepare_cell_renderables(self) -> None:
        """Creates one rectangle per cell for the current generation."""
        for visual in self.cell_visuals:
            visual.delete()
        self.cell_visuals = []

        alive = self.board.alive_mask()
        for rect in cell_rectangles(self.board.width, self.board.height, self.screen_width, self.screen_height):
            x, y = to_bottom_left(rect, self.screen_height)
            self.cell_visuals.append(pyglet.shapes.Rectangle(
                x=x, y=y,
                width=rect.width, height=rect.height,
                color=self._cell_color(alive[rect.row, rect.col]),
                batch=self.batch,
                group=self.cell_group,
            ))
        self.rendered_state = alive
        LOG.debug("Created %d cell rectangles", len(self.cell_visuals))

    def _update_dirty_cell_renderables(self) -> None:
        alive = self.board.alive_mask()
        width = self.board.width
        for r_idx, c_idx in np.argwhere(alive != self.rendered_state):
            self.cell_visuals[r_idx * width + c_idx].color = self._cell_color(alive[r_idx, c_idx])
        self.rendered_state = alive

    def process(self, dt: float) -> None:
        if self.rendered_state is None:
            self._prepare_cell_renderables()
        else:
            self._update_dirty_cell_renderables()
        if self.simulation:
            self.generation_label.text = (
                f"Generation: {self.simulation.generation}  Population: {self.board.population}"
            )

    def draw(self) -> None:
        """Draws the last synced generation. Called from the window's on_draw."""
        self.window.clear()
        self.batch.draw()
        self.fps_label.draw()
        self.generation_label.draw()

    def update_fps_display(self, fps: float) -> None:
        """Update the FPS label text.

        Args:
            fps: The current frames per second value.
        """
        self.fps_label.text = f"FPS: {fps:.1f}"

class ConsoleSystem(System):
    """Prints every generation to a text stream before it is advanced."""

    def __init__(self, board: Board, simulation: Optional[SimulationSystem] = None, stream: Optional[TextIO] = None) -> None:
        super().__init__()
        self.board = board
        self.simulation = simulation
        self.stream = stream if stream is not None else sys.stdout

    def process(self, dt: float) -> None:
        if self.simulation:
            if self.simulation.finished:
                return
            self.stream.write(f"Generation {self.simulation.generation}\n")
        console_draw(self.board, self.stream)
        self.stream.write("\n")
        self.stream.flush()
