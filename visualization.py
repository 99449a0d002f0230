# visualization.py
"""
Hosts the particle network in a Pygame window.

The window plays the part of the page: it owns the document root that carries
the theme, exposes the display as the `particles-canvas` drawing surface, and
turns Pygame events into the resize, pointer and theme signals the engine
listens to. Events are drained before every frame, so state changes are only
ever applied between frames.
"""
import logging
import pygame
import pygame.gfxdraw
from typing import Any, Dict, Optional, Tuple

from constants import (
    CANVAS_ID, FULLSCREEN, WINDOW_WIDTH, WINDOW_HEIGHT, FPS, TITLE,
    PREFERENCES_FILE, BACKGROUND_COLOR_PROPERTY, DEFAULT_BACKGROUND_COLOR,
    THEME_ATTRIBUTE,
)
from page import DocumentRoot, MutationRecord, Page
from theme import ThemePreferences, init_theme, toggle_theme
from utils import parse_color, parse_rgb

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import ParticleNetwork


# --- Data Contracts ---
#
# class PygameCanvas:
#   - __init__(self, surface: pygame.Surface, background: str, display: bool):
#   - set_size(width, height) -> None: resizes the backing surface if needed
#     and clears it.
#   - clear() -> None: fills the surface with the background colour.
#   - fill_circle(x, y, radius, color, alpha) -> None
#   - stroke_line(x1, y1, x2, y2, color, alpha, width) -> None
#     - Inputs: colours are colour strings, alpha in [0, 1] (clipped).
#     - Side Effects: alpha-blended drawing onto the surface. Nothing is
#       drawn when the effective alpha rounds to zero.
#
# class PageHost:
#   - __init__(self, page_params: Dict[str, Any], themes: Dict[str, Dict[str, str]]):
#     - Side Effects: Initializes Pygame, opens the window, applies the
#       initial theme.
#   - handle_events(self) -> bool: False once the user asked to quit.
#   - run(self, max_frames: int = 0, log_throttle: int = 300) -> int:
#     - Outputs: number of frames the engine rendered. The max_frames limit
#       counts loop ticks, rendered or not.


class PygameCanvas:
    """
    A drawing surface backed by a pygame.Surface.
    """
    def __init__(self, surface: pygame.Surface, background: str = DEFAULT_BACKGROUND_COLOR,
                 display: bool = False):
        self.surface = surface
        self.background = background
        # A display canvas follows the window surface across resizes.
        self.display = display

    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()

    def set_size(self, width: int, height: int) -> None:
        if self.display:
            self.surface = pygame.display.get_surface()
        if self.surface.get_size() != (width, height):
            if self.display:
                self.surface = pygame.display.set_mode((width, height), pygame.RESIZABLE)
            else:
                self.surface = pygame.Surface((width, height))
        self.clear()

    def clear(self) -> None:
        self.surface.fill(parse_color(self.background))

    @staticmethod
    def _rgba(color: str, alpha: float) -> Optional[Tuple[int, int, int, int]]:
        a = int(round(255 * min(max(alpha, 0.0), 1.0)))
        if a == 0:
            return None
        r, g, b = parse_rgb(color)
        return (r, g, b, a)

    def fill_circle(self, x: float, y: float, radius: float, color: str, alpha: float) -> None:
        rgba = self._rgba(color, alpha)
        if rgba is None:
            return
        r = max(1, int(round(radius)))
        pygame.gfxdraw.filled_circle(self.surface, int(round(x)), int(round(y)), r, rgba)

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float,
                    color: str, alpha: float, width: float = 1.0) -> None:
        # Simulated stroke width, not a second opacity: gfxdraw lines are one
        # pixel wide, so a 0.5-wide hairline is drawn at half its alpha.
        rgba = self._rgba(color, alpha * min(width, 1.0))
        if rgba is None:
            return
        pygame.gfxdraw.line(
            self.surface,
            int(round(x1)), int(round(y1)), int(round(x2)), int(round(y2)),
            rgba
        )


class PygameWindow:
    """The Pygame window's inner size."""

    @property
    def inner_width(self) -> int:
        return pygame.display.get_window_size()[0]

    @property
    def inner_height(self) -> int:
        return pygame.display.get_window_size()[1]


class PageHost:
    """
    Opens the window, applies the theme and pumps events into the engine.
    """
    def __init__(self, page_params: Dict[str, Any], themes: Dict[str, Dict[str, str]]):
        pygame.init()

        if page_params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            size = (display_info.current_w, display_info.current_h)
            self.screen = pygame.display.set_mode(size, pygame.FULLSCREEN)
        else:
            size = (
                page_params.get('window_width', WINDOW_WIDTH),
                page_params.get('window_height', WINDOW_HEIGHT)
            )
            self.screen = pygame.display.set_mode(size, pygame.RESIZABLE)

        pygame.display.set_caption(page_params.get('title', TITLE))
        self.clock = pygame.time.Clock()
        self.fps = page_params.get('fps', FPS)

        self.window = PygameWindow()
        self.root = DocumentRoot(themes)
        self.page = Page(self.window, self.root)
        self.canvas = PygameCanvas(self.screen, display=True)

        # The page only carries the surfaces its config lists.
        if CANVAS_ID in page_params.get('canvases', [CANVAS_ID]):
            self.page.add_canvas(CANVAS_ID, self.canvas)
        else:
            logging.info(f"Page has no {CANVAS_ID!r} surface.")

        self.preferences = ThemePreferences(page_params.get('preferences_file', PREFERENCES_FILE))
        self.root.observe(self._on_root_mutation)
        init_theme(self.root, self.preferences, self.window.inner_width)

        self.network: Optional["ParticleNetwork"] = None

        logging.info(f"PageHost initialized with Pygame display ({size[0]}x{size[1]}).")

    def _on_root_mutation(self, record: MutationRecord) -> None:
        if record.attribute_name == THEME_ATTRIBUTE:
            background = self.root.get_property_value(BACKGROUND_COLOR_PROPERTY)
            self.canvas.background = background or DEFAULT_BACKGROUND_COLOR

    def attach(self, network: Optional["ParticleNetwork"]) -> None:
        self.network = network

    def handle_events(self) -> bool:
        """
        Drains the Pygame event queue into engine and theme calls.

        Returns:
            bool: False if the host should exit, True otherwise.
        """
        network = self.network
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down host.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down host.")
                    return False
                if event.key == pygame.K_t:
                    toggle_theme(self.root, self.preferences)

            if network is None:
                continue

            if event.type == pygame.VIDEORESIZE:
                network.on_resize()
            elif event.type == pygame.MOUSEMOTION:
                network.on_pointer_move(*event.pos)
            elif event.type == pygame.WINDOWLEAVE:
                network.on_pointer_leave()
            elif event.type in (pygame.WINDOWHIDDEN, pygame.WINDOWMINIMIZED):
                network.pause()
            elif event.type in (pygame.WINDOWSHOWN, pygame.WINDOWRESTORED):
                network.resume()
        return True

    def run(self, max_frames: int = 0, log_throttle: int = 300) -> int:
        """
        Runs the frame loop until the user quits or max_frames is reached.

        max_frames counts host ticks, so the limit also holds while the
        engine is paused or was never started.
        """
        frames = 0
        ticks = 0
        running = True
        while running:
            if not self.handle_events():
                break

            network = self.network
            if network is None:
                self.canvas.set_size(self.window.inner_width, self.window.inner_height)
            elif not network.paused:
                lines = network.frame()
                frames += 1

                # Rule 2.4: Hot loops must throttle logs
                if frames % log_throttle == 0:
                    logging.debug(
                        f"Frame {frames} | Lines: {lines} | "
                        f"FPS: {self.clock.get_fps():.1f} | Pointer: {network.pointer}"
                    )

            pygame.display.flip()
            self.clock.tick(self.fps)
            ticks += 1

            if max_frames and ticks >= max_frames:
                logging.info(f"Reached max_frames ({max_frames}). Stopping.")
                running = False
        return frames

    def close(self):
        """Stops the engine's theme listener and shuts down Pygame."""
        if self.network is not None:
            self.network.close()
        pygame.quit()
