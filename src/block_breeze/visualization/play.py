from __future__ import annotations

import argparse
import os
from typing import Optional, Tuple

import pygame

from block_breeze.game import BlockBreezeGame, GameConfig, JsonBestScoreStore, praise_for
from block_breeze.utils.logging import setup_logger


BG = (36, 52, 125)
BOARD_BG = (15, 30, 86)
GRID_LINE = (31, 57, 127)
PRAISE_MS = 2000


def _rgb(token: int) -> Tuple[int, int, int]:
    return (token >> 16) & 0xFF, (token >> 8) & 0xFF, token & 0xFF


def draw_board(screen: pygame.Surface, cells, cell_size: int, margin: int) -> None:
    h, w = cells.shape
    screen.fill(BG)
    pygame.draw.rect(screen, BOARD_BG, pygame.Rect(margin, margin, w * cell_size, h * cell_size))
    for y in range(h):
        for x in range(w):
            rect = pygame.Rect(margin + x * cell_size, margin + y * cell_size, cell_size - 1, cell_size - 1)
            token = int(cells[y, x])
            if token:
                pygame.draw.rect(screen, _rgb(token), rect, border_radius=4)
            else:
                pygame.draw.rect(screen, GRID_LINE, rect, 1)


def draw_pieces(screen: pygame.Surface, game: BlockBreezeGame, cell_size: int, margin: int, selected_piece: int) -> None:
    # Draw the current rack at the right side
    if game.deal is None:
        return
    x0 = margin * 2 + game.board.size * cell_size
    y0 = margin
    for idx, piece in enumerate(game.deal):
        off_y = y0 + idx * (cell_size * 5)
        if piece.placed:
            continue
        for r, c in piece.shape.offsets():
            rect = pygame.Rect(x0 + c * cell_size, off_y + r * cell_size, cell_size - 1, cell_size - 1)
            pygame.draw.rect(screen, _rgb(piece.color), rect, border_radius=4)
        if idx == selected_piece:
            outline = pygame.Rect(x0, off_y, piece.shape.width * cell_size, piece.shape.height * cell_size)
            pygame.draw.rect(screen, (255, 255, 255), outline, 2)


def draw_ghost(screen: pygame.Surface, game: BlockBreezeGame, row: int, col: int, cell_size: int, margin: int, selected_piece: int) -> None:
    if game.deal is None or not (0 <= selected_piece < len(game.deal)):
        return
    piece = game.deal[selected_piece]
    if piece.placed:
        return
    color = (255, 255, 255) if game.board.fits(piece.shape, row, col) else (255, 68, 68)
    for r, c in piece.shape.cells_at(row, col):
        rect = pygame.Rect(margin + c * cell_size, margin + r * cell_size, cell_size - 1, cell_size - 1)
        pygame.draw.rect(screen, color, rect, 2)


def _first_unplaced(game: BlockBreezeGame) -> int:
    if game.deal is None:
        return -1
    for idx, piece in enumerate(game.deal):
        if not piece.placed:
            return idx
    return -1


def run(best_file: Optional[str] = None, seed: Optional[int] = None) -> None:
    logger = setup_logger(name="block_breeze")
    store = JsonBestScoreStore(best_file or os.path.join(os.path.expanduser("~"), ".block_breeze", "best.json"))
    game = BlockBreezeGame(GameConfig(random_seed=seed), store=store)
    logger.info("best so far: %d", game.best)

    pygame.init()
    try:
        cell_size = 56
        margin = 20
        board_px = game.board.size * cell_size
        side_panel_w = 5 * cell_size
        width = margin * 3 + board_px + side_panel_w
        height = margin * 2 + board_px + 40
        screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Block Breeze")
        font = pygame.font.SysFont(None, 28)
        big_font = pygame.font.SysFont(None, 48)

        selected_piece = _first_unplaced(game)
        praise: Optional[str] = None
        praise_until = 0

        key_to_index = {
            pygame.K_1: 0,
            pygame.K_2: 1,
            pygame.K_3: 2,
            pygame.K_KP1: 0,
            pygame.K_KP2: 1,
            pygame.K_KP3: 2,
        }

        running = True
        clock = pygame.time.Clock()
        while running:
            mx, my = pygame.mouse.get_pos()
            col = (mx - margin) // cell_size
            row = (my - margin) // cell_size

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in key_to_index:
                        idx = key_to_index[event.key]
                        if game.deal is not None and idx < len(game.deal) and not game.deal[idx].placed:
                            selected_piece = idx
                    elif event.key == pygame.K_n:
                        game.reset()
                        selected_piece = _first_unplaced(game)
                        praise = None
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not game.game_over:
                    outcome = game.place(selected_piece, row, col)
                    if outcome.accepted:
                        selected_piece = _first_unplaced(game)
                        word = praise_for(outcome.clear.lines_cleared, game.rng) if outcome.clear else None
                        if word is not None:
                            praise = word
                            praise_until = pygame.time.get_ticks() + PRAISE_MS

            draw_board(screen, game.board.cells, cell_size, margin)
            if not game.game_over:
                draw_ghost(screen, game, row, col, cell_size, margin, selected_piece)
            draw_pieces(screen, game, cell_size, margin, selected_piece)

            status = f"Score: {game.score}   Best: {game.best}   x{game.multiplier:.1f}"
            screen.blit(font.render(status, True, (255, 255, 255)), (margin, margin * 2 + board_px))
            if praise is not None and pygame.time.get_ticks() < praise_until:
                img = big_font.render(praise, True, (255, 255, 255))
                screen.blit(img, img.get_rect(center=(margin + board_px // 2, margin + board_px // 3)))
            if game.game_over:
                over = big_font.render("Game Over - Press N", True, (255, 235, 59))
                screen.blit(over, over.get_rect(center=(margin + board_px // 2, margin + board_px // 2)))

            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    p = argparse.ArgumentParser(description="Play Block Breeze.")
    p.add_argument("--best-file", type=str, default=None)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    run(args.best_file, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
