import logging
import time
from typing import Optional

import esper
import pyglet

from gridlife.config import GameConfig
from gridlife.core.systems import (
    ConsoleSystem,
    InputSystem,
    INPUT_PRIORITY,
    PRESENT_PRIORITY,
    RenderSystem,
    SIMULATION_PRIORITY,
    SimulationSystem,
)
from gridlife.errors import EngineError
from gridlife.world.board import Board

LOG = logging.getLogger(__name__)

WINDOW_CAPTION = "Game of Life"
DEFAULT_ESPER_WORLD = "default"

class Engine:
    """Owns the board, the window and the systems, and runs the frame loop.

    Every frame presents the current generation (window or console) and then
    advances the board by one generation.
    """

    def __init__(self, config: GameConfig, board: Optional[Board] = None) -> None:
        config.validate()
        self.config = config
        self.window: Optional['pyglet.window.Window'] = None
        self.stop_requested = False

        if board is None:
            board = Board(config.board_width, config.board_height, seed=config.seed)
            board.randomize(config.randomize_chance)
        self.board = board

        self.frame_count = 0
        self.fps_update_interval = 1.0  # Update FPS display every N seconds
        self.time_since_last_fps_update = 0.0
        self.current_fps = 0.0

        self.simulation_system = SimulationSystem(self.board, config.max_generations)
        self.render_system: Optional[RenderSystem] = None
        self.input_system: Optional[InputSystem] = None
        self.console_system: Optional[ConsoleSystem] = None

        self._initialize_pyglet()

        # Each engine gets its own esper world so processors never leak between engines.
        # Switched only once the window exists so a failed setup leaves no world behind.
        self.esper_world = f"gridlife-{id(self)}"
        esper.switch_world(self.esper_world)
        self.initialize_systems()

        if self.window:
            pyglet.clock.schedule_interval(self.update, 1 / self.config.target_fps)
        LOG.info(
            "Engine initialized: %dx%d board, population %d, %s mode",
            self.board.width, self.board.height, self.board.population,
            "console" if config.console_mode else "headless" if config.headless_mode else "window",
        )

    @property
    def generation(self) -> int:
        return self.simulation_system.generation

    def _initialize_pyglet(self) -> None:
        if self.config.headless_mode:
            LOG.info("Headless mode: Pyglet window not initialized.")
            return
        try:
            pyglet.options['debug_gl'] = self.config.pyglet_debug_gl
            self.window = pyglet.window.Window(
                width=self.config.screen_width,
                height=self.config.screen_height,
                caption=WINDOW_CAPTION,
                resizable=False,
            )
        except Exception as e:
            LOG.error("Failed to initialize Pyglet window: %s", e)
            raise EngineError(f"Failed to initialize Pyglet window: {e}") from e

        @self.window.event
        def on_draw() -> None:
            if self.render_system:
                self.render_system.draw()

        @self.window.event
        def on_close() -> None:
            LOG.info("Window closed, exiting engine...")
            self.stop_requested = True

    def initialize_systems(self) -> None:
        if self.window:
            self.input_system = InputSystem(self.window, self.simulation_system, self.config.randomize_chance)
            esper.add_processor(self.input_system, priority=INPUT_PRIORITY)
            self.render_system = RenderSystem(
                window=self.window,
                board=self.board,
                screen_width=self.config.screen_width,
                screen_height=self.config.screen_height,
                simulation=self.simulation_system,
            )
            esper.add_processor(self.render_system, priority=PRESENT_PRIORITY)
        elif self.config.console_mode:
            self.console_system = ConsoleSystem(self.board, self.simulation_system)
            esper.add_processor(self.console_system, priority=PRESENT_PRIORITY)

        esper.add_processor(self.simulation_system, priority=SIMULATION_PRIORITY)
        LOG.debug(
            "Systems registered: input=%s render=%s console=%s simulation=True",
            self.input_system is not None, self.render_system is not None, self.console_system is not None,
        )

    def update(self, dt: float) -> None:
        if self.stop_requested:
            if self.window:
                pyglet.app.exit()
            return

        esper.switch_world(self.esper_world)
        esper.process(dt)

        if self.simulation_system.finished:
            LOG.info("Reached %d generations, stopping.", self.simulation_system.generation)
            self.stop_requested = True

        # FPS calculation
        self.frame_count += 1
        self.time_since_last_fps_update += dt
        if self.time_since_last_fps_update >= self.fps_update_interval:
            self.current_fps = self.frame_count / self.time_since_last_fps_update
            self.frame_count = 0
            self.time_since_last_fps_update = 0.0
            LOG.debug("FPS: %.2f, generation %d", self.current_fps, self.generation)
            if self.render_system:
                self.render_system.update_fps_display(self.current_fps)

    def run(self) -> None:
        LOG.info("Starting engine loop...")
        if self.window:
            pyglet.app.run()
        else:
            self._run_headless()
        LOG.info("Engine loop stopped at generation %d.", self.generation)

    def _run_headless(self) -> None:
        frame_time = 1.0 / self.config.target_fps if self.config.target_fps > 0 else 0.0
        last_time = time.perf_counter()
        while not self.stop_requested:
            current_time = time.perf_counter()
            dt = current_time - last_time
            last_time = current_time
            self.update(dt)

            if frame_time:
                time_to_sleep = frame_time - (time.perf_counter() - current_time)
                if time_to_sleep > 0:
                    time.sleep(time_to_sleep)

    def shutdown(self) -> None:
        LOG.info("Shutting down engine...")
        self.stop_requested = True
        if self.window:
            pyglet.clock.unschedule(self.update)
        esper.switch_world(DEFAULT_ESPER_WORLD)
        if self.esper_world != DEFAULT_ESPER_WORLD:
            esper.delete_world(self.esper_world)
