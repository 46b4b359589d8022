from __future__ import annotations

import argparse
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pygame

from block_blast.game import BlockBlastGame, GameConfig, Piece, is_valid_placement
from block_blast.game.pieces import color_hex
from block_blast.game.events import Event, LinesCleared
from block_blast.storage import HighScoreStore


logger = logging.getLogger(__name__)

BACKGROUND = (15, 15, 20)
EMPTY_CELL = (40, 40, 48)
TEXT = (230, 230, 230)


@dataclass
class Layout:
    cell_size: int = 44
    gap: int = 4
    margin: int = 20
    tray_cell: int = 22
    grid_size: int = 8
    tray_size: int = 3

    @property
    def pitch(self) -> int:
        return self.cell_size + self.gap

    @property
    def board_px(self) -> int:
        return self.grid_size * self.pitch - self.gap

    @property
    def board_origin(self) -> Tuple[int, int]:
        return self.margin, self.margin + 40

    @property
    def tray_top(self) -> int:
        return self.board_origin[1] + self.board_px + self.margin

    @property
    def slot_width(self) -> int:
        return self.board_px // self.tray_size

    @property
    def window_size(self) -> Tuple[int, int]:
        return self.margin * 2 + self.board_px, self.tray_top + self.tray_cell * 5 + self.margin

    def slot_rect(self, index: int) -> pygame.Rect:
        return pygame.Rect(self.margin + index * self.slot_width, self.tray_top, self.slot_width, self.tray_cell * 5)


def screen_to_anchor(left: float, top: float, layout: Layout) -> Tuple[int, int]:
    """Snap the top-left corner of a dragged piece to the nearest board (row, col)."""
    ox, oy = layout.board_origin
    col = int(math.floor((left - ox) / layout.pitch + 0.5))
    row = int(math.floor((top - oy) / layout.pitch + 0.5))
    return row, col


def tray_slot_at(x: int, y: int, layout: Layout) -> Optional[int]:
    for index in range(layout.tray_size):
        if layout.slot_rect(index).collidepoint(x, y):
            return index
    return None


def _color(color_id: Optional[int], piece: Optional[Piece] = None) -> pygame.Color:
    if piece is not None:
        return pygame.Color(piece.hex_color)
    if color_id is None:
        return pygame.Color(EMPTY_CELL)
    return pygame.Color(color_hex(color_id))


def draw_board(screen: pygame.Surface, game: BlockBlastGame, layout: Layout) -> None:
    ox, oy = layout.board_origin
    for row in range(game.board.size):
        for col in range(game.board.size):
            rect = pygame.Rect(ox + col * layout.pitch, oy + row * layout.pitch, layout.cell_size, layout.cell_size)
            pygame.draw.rect(screen, _color(game.board.color_at(row, col)), rect, border_radius=4)


def draw_piece(screen: pygame.Surface, piece: Piece, left: int, top: int, cell: int, gap: int = 1, alpha: int = 255) -> None:
    color = _color(None, piece)
    color.a = alpha
    for r, c in piece.shape.offsets():
        rect = pygame.Rect(left + c * (cell + gap), top + r * (cell + gap), cell, cell)
        if alpha < 255:
            surf = pygame.Surface((cell, cell), pygame.SRCALPHA)
            surf.fill(color)
            screen.blit(surf, rect)
        else:
            pygame.draw.rect(screen, color, rect, border_radius=3)


def draw_tray(screen: pygame.Surface, game: BlockBlastGame, layout: Layout, dragging: Optional[int]) -> None:
    for index, piece in enumerate(game.tray):
        if piece is None or index == dragging:
            continue
        slot = layout.slot_rect(index)
        w = piece.width * (layout.tray_cell + 1)
        h = piece.height * (layout.tray_cell + 1)
        draw_piece(screen, piece, slot.centerx - w // 2, slot.centery - h // 2, layout.tray_cell)


def draw_ghost(screen: pygame.Surface, game: BlockBlastGame, piece: Piece, anchor: Tuple[int, int], layout: Layout) -> None:
    row, col = anchor
    if not is_valid_placement(game.board, col, row, piece):
        return
    ox, oy = layout.board_origin
    draw_piece(screen, piece, ox + col * layout.pitch, oy + row * layout.pitch, layout.cell_size, layout.gap, alpha=120)


def run(config: Optional[GameConfig] = None, store: Optional[HighScoreStore] = None) -> None:
    store = store or HighScoreStore()
    config = config or GameConfig()
    game = BlockBlastGame(config, high_score=store.load(), on_new_high_score=store.save)
    layout = Layout(grid_size=config.grid_size, tray_size=config.tray_size)

    popups: List[Tuple[str, int]] = []

    def on_event(event: Event) -> None:
        if isinstance(event, LinesCleared):
            popups.append((f"+{event.points}", pygame.time.get_ticks() + 1000))

    game.subscribe(on_event)

    pygame.init()
    try:
        screen = pygame.display.set_mode(layout.window_size)
        pygame.display.set_caption("Block Blast")
        font = pygame.font.SysFont(None, 28)
        big_font = pygame.font.SysFont(None, 48)
        clock = pygame.time.Clock()

        dragging: Optional[int] = None
        grab_offset = (0, 0)

        running = True
        while running:
            mx, my = pygame.mouse.get_pos()
            drag_piece = game.tray.get(dragging) if dragging is not None else None
            drag_left = mx - grab_offset[0]
            drag_top = my - grab_offset[1]

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in (pygame.K_e, pygame.K_r):
                        game.rotate_tray(clockwise=True)
                    elif event.key == pygame.K_q:
                        game.rotate_tray(clockwise=False)
                    elif event.key == pygame.K_n:
                        game.restart()
                        dragging = None
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not game.game_over:
                    index = tray_slot_at(*event.pos, layout)
                    if index is not None and game.tray.is_available(index):
                        dragging = index
                        # grab near the piece's first cell so the drop lines up with the cursor
                        grab_offset = (layout.cell_size // 2, layout.cell_size // 2)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and dragging is not None:
                    row, col = screen_to_anchor(drag_left, drag_top, layout)
                    result = game.attempt_placement(row, col, dragging)
                    logger.debug("Drop at (%d, %d): %s", row, col, result.outcome.value)
                    dragging = None

            screen.fill(BACKGROUND)
            header = f"Score {game.score}   Level {game.level}   Best {game.high_score}"
            screen.blit(font.render(header, True, TEXT), (layout.margin, layout.margin))
            draw_board(screen, game, layout)
            draw_tray(screen, game, layout, dragging)
            if drag_piece is not None:
                draw_ghost(screen, game, drag_piece, screen_to_anchor(drag_left, drag_top, layout), layout)
                draw_piece(screen, drag_piece, drag_left, drag_top, layout.cell_size, layout.gap)

            now = pygame.time.get_ticks()
            popups[:] = [(text, until) for text, until in popups if until > now]
            for i, (text, _) in enumerate(popups):
                img = big_font.render(text, True, (255, 220, 80))
                screen.blit(img, img.get_rect(center=(layout.window_size[0] // 2, layout.board_origin[1] + 40 + i * 44)))

            if game.game_over:
                over = big_font.render(f"Game Over - {game.score}", True, (255, 100, 100))
                screen.blit(over, over.get_rect(center=(layout.window_size[0] // 2, layout.board_origin[1] + layout.board_px // 2)))
                hint = font.render("Press N to restart", True, TEXT)
                screen.blit(hint, hint.get_rect(center=(layout.window_size[0] // 2, layout.board_origin[1] + layout.board_px // 2 + 40)))

            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:  # pragma: no cover
    p = argparse.ArgumentParser(description="Play Block Blast")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--high-score-file", type=str, default=None)
    p.add_argument("--log-level", default="WARNING")
    args = p.parse_args()
    logging.basicConfig(level=args.log_level.upper())
    run(GameConfig(random_seed=args.seed), HighScoreStore(args.high_score_file))


if __name__ == "__main__":  # pragma: no cover
    main()
