"""
Frame and Video Rendering for GridSnake Sessions

This service turns GameState snapshots into images and videos by:
1. Rendering each snapshot to a frame using PIL (Pillow)
2. Encoding the frames of a session to video using MoviePy/FFmpeg

The rendering follows the browser board:
- Grid of cells with light grid lines
- Green snake body, darker head with eyes facing the travel direction
- Red food cell
- Score and speed header, "GAME OVER" banner once the session ended
"""

import io
import logging
import os
import tempfile
from typing import List, Optional, Sequence, Tuple

import numpy as np
from moviepy import ImageSequenceClip
from PIL import Image, ImageDraw, ImageFont

from domain.constants import UP, DOWN, LEFT, RIGHT, GAME_OVER
from domain.game_state import GameState

logger = logging.getLogger(__name__)

# Video settings
DEFAULT_FPS = 2  # Matches the initial tick period (500ms = 2 FPS)
CELL_SIZE = 32  # Size of each grid cell in pixels
HEADER_HEIGHT = 48
MARGIN = 16


class ColorScheme:
    """Color configuration matching the browser board"""

    BACKGROUND = "#1a1f2e"
    BOARD = "#FFFFFF"
    GRID_LINE = "#E5E7EB"
    SNAKE = "#4F7022"
    FOOD = "#EA2014"
    EYE = "#FFFFFF"

    SCORE_TEXT = "#FFFFFF"
    GAME_OVER_TEXT = "#EA2014"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple"""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def darken_color(hex_color: str, amount: float = 0.3) -> Tuple[int, int, int]:
    """Darken a hex color by a given amount"""
    r, g, b = hex_to_rgb(hex_color)
    r = max(0, int(r * (1 - amount)))
    g = max(0, int(g * (1 - amount)))
    b = max(0, int(b * (1 - amount)))
    return (r, g, b)


class SnakeVideoGenerator:
    """Render GridSnake snapshots to PNG frames and MP4 videos"""

    def __init__(
        self,
        fps: int = DEFAULT_FPS,
        cell_size: int = CELL_SIZE
    ):
        self.fps = fps
        self.cell_size = cell_size

        # Try to load a font, fallback to default if not available
        try:
            self.font = ImageFont.truetype("DejaVuSans-Bold.ttf", 20)
        except Exception:
            self.font = ImageFont.load_default()

    def frame_size(self, board_size: int) -> Tuple[int, int]:
        """Pixel (width, height) of a frame for an N x N board"""
        side = board_size * self.cell_size
        return (side + 2 * MARGIN, side + HEADER_HEIGHT + 2 * MARGIN)

    def cell_origin(self, row: int, col: int) -> Tuple[int, int]:
        """Top-left pixel of a board cell"""
        return (MARGIN + col * self.cell_size, HEADER_HEIGHT + MARGIN + row * self.cell_size)

    def render_frame(self, state: GameState) -> Image.Image:
        """Render a single frame of the game"""
        img = Image.new('RGB', self.frame_size(state.board_size), hex_to_rgb(ColorScheme.BACKGROUND))
        draw = ImageDraw.Draw(img)

        header = f"Score: {state.score}   Speed: {state.speed}ms"
        draw.text((MARGIN, MARGIN), header, fill=hex_to_rgb(ColorScheme.SCORE_TEXT), font=self.font)

        self._draw_grid(draw, state.board_size)

        if state.food is not None:
            food_row, food_col = divmod(state.food - 1, state.board_size)
            self._draw_cell(draw, food_row, food_col, hex_to_rgb(ColorScheme.FOOD), padding=3)

        # Draw body
        for row, col in state.snake_positions[1:]:
            self._draw_cell(draw, row, col, hex_to_rgb(ColorScheme.SNAKE))

        # Draw head with eyes
        if state.snake_positions:
            head_row, head_col = state.snake_positions[0]
            self._draw_cell(draw, head_row, head_col, darken_color(ColorScheme.SNAKE, 0.3), padding=0)
            self._draw_eyes(draw, head_row, head_col, state.direction)

        if state.status == GAME_OVER:
            text = "GAME OVER"
            bbox = draw.textbbox((0, 0), text, font=self.font)
            text_width = bbox[2] - bbox[0]
            draw.text(
                (img.width - MARGIN - text_width, MARGIN),
                text,
                fill=hex_to_rgb(ColorScheme.GAME_OVER_TEXT),
                font=self.font
            )

        return img

    def render_png(self, state: GameState) -> bytes:
        """Render a frame and encode it as PNG bytes"""
        buffer = io.BytesIO()
        self.render_frame(state).save(buffer, format="PNG")
        return buffer.getvalue()

    def _draw_grid(self, draw: ImageDraw.ImageDraw, board_size: int):
        left, top = self.cell_origin(0, 0)
        side = board_size * self.cell_size

        draw.rectangle(
            [left, top, left + side, top + side],
            fill=hex_to_rgb(ColorScheme.BOARD),
            outline=(100, 100, 100),
            width=2
        )

        for i in range(1, board_size):
            offset = i * self.cell_size
            draw.line([left + offset, top, left + offset, top + side], fill=hex_to_rgb(ColorScheme.GRID_LINE), width=1)
            draw.line([left, top + offset, left + side, top + offset], fill=hex_to_rgb(ColorScheme.GRID_LINE), width=1)

    def _draw_cell(
        self,
        draw: ImageDraw.ImageDraw,
        row: int,
        col: int,
        color: Tuple[int, int, int],
        padding: int = 1
    ):
        """Draw a single cell (for snake body or food)"""
        x, y = self.cell_origin(row, col)
        size = self.cell_size
        draw.rectangle(
            [x + padding, y + padding, x + size - padding - 1, y + size - padding - 1],
            fill=color
        )

    def _draw_eyes(self, draw: ImageDraw.ImageDraw, row: int, col: int, direction: str):
        x, y = self.cell_origin(row, col)
        size = self.cell_size
        eye = max(2, size // 5)
        near, far = size // 4, 3 * size // 4 - eye

        # Eyes sit on the side of the head facing the travel direction
        if direction == RIGHT:
            spots = [(far, near), (far, far)]
        elif direction == LEFT:
            spots = [(near, near), (near, far)]
        elif direction == UP:
            spots = [(near, near), (far, near)]
        elif direction == DOWN:
            spots = [(near, far), (far, far)]
        else:
            spots = [(near, near), (far, near)]

        for dx, dy in spots:
            draw.ellipse([x + dx, y + dy, x + dx + eye, y + dy + eye], fill=hex_to_rgb(ColorScheme.EYE))

    def generate_video(
        self,
        history: Sequence[GameState],
        output_path: Optional[str] = None
    ) -> str:
        """
        Generate a video from the snapshots of one session

        Args:
            history: snapshots in tick order (SnakeGame.history)
            output_path: Optional output path (if None, uses temp file)

        Returns:
            Path to the generated video file
        """
        if not history:
            raise ValueError("Cannot generate a video from an empty history")

        logger.info(f"Rendering {len(history)} frames")

        frames: List[np.ndarray] = []
        for i, state in enumerate(history):
            if i % 50 == 0:
                logger.info(f"Rendering frame {i + 1}/{len(history)}")
            frames.append(np.array(self.render_frame(state)))

        if output_path is None:
            output_path = os.path.join(tempfile.gettempdir(), "gridsnake_session.mp4")

        clip = ImageSequenceClip(frames, fps=self.fps)
        clip.write_videofile(
            output_path,
            codec='libx264',
            audio=False,
            logger=None
        )

        logger.info(f"Video created successfully at {output_path}")
        return output_path
