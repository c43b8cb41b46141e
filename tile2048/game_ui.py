import sys

import pygame

from .board import GRID_SIZE
from .controller import GameController, ScoreNotSubmittableError
from .engine import DIRECTION_DOWN, DIRECTION_LEFT, DIRECTION_RIGHT, DIRECTION_UP
from .leaderboard import InvalidPlayerNameError

# 색상 정의
COLORS = {
    0: (205, 193, 180),
    2: (238, 228, 218),
    4: (237, 224, 200),
    8: (242, 177, 121),
    16: (245, 149, 99),
    32: (246, 124, 95),
    64: (246, 94, 59),
    128: (237, 207, 114),
    256: (237, 204, 97),
    512: (237, 200, 80),
    1024: (237, 197, 63),
    2048: (237, 194, 46),
    "big": (60, 58, 50),
}

TEXT_COLORS = {
    0: (205, 193, 180),
    2: (119, 110, 101),
    4: (119, 110, 101),
}
LIGHT_TEXT = (249, 246, 242)
DARK_TEXT = (119, 110, 101)
WARNING_COLOR = (217, 123, 69)

BACKGROUND_COLOR = (187, 173, 160)

# 화면 설정
TILE_SIZE = 100
TILE_MARGIN = 10
HEADER_HEIGHT = 100
NAME_MAX_LENGTH = 32
INVALID_FLASH_MS = 600

WINDOW_WIDTH = GRID_SIZE * TILE_SIZE + (GRID_SIZE + 1) * TILE_MARGIN
WINDOW_HEIGHT = HEADER_HEIGHT + GRID_SIZE * TILE_SIZE + (GRID_SIZE + 1) * TILE_MARGIN

KEY_DIRECTIONS = {
    pygame.K_UP: DIRECTION_UP,
    pygame.K_w: DIRECTION_UP,
    pygame.K_DOWN: DIRECTION_DOWN,
    pygame.K_s: DIRECTION_DOWN,
    pygame.K_LEFT: DIRECTION_LEFT,
    pygame.K_a: DIRECTION_LEFT,
    pygame.K_RIGHT: DIRECTION_RIGHT,
    pygame.K_d: DIRECTION_RIGHT,
}


class BoardRenderer:
    """보드/헤더/오버레이 그리기"""

    def __init__(self, screen):
        self.screen = screen
        self.font_large = pygame.font.Font(None, 55)
        self.font_medium = pygame.font.Font(None, 40)
        self.font_small = pygame.font.Font(None, 30)

    def get_tile_color(self, value):
        """타일 값에 따른 배경색 반환"""
        return COLORS.get(value, COLORS["big"])

    def get_text_color(self, value):
        """타일 값에 따른 텍스트 색상 반환"""
        return TEXT_COLORS.get(value, LIGHT_TEXT)

    def draw_tile(self, row, col, value, highlight=False):
        x = TILE_MARGIN + col * (TILE_SIZE + TILE_MARGIN)
        y = HEADER_HEIGHT + TILE_MARGIN + row * (TILE_SIZE + TILE_MARGIN)

        # 새로 생긴/합쳐진 타일은 살짝 크게
        grow = 4 if highlight else 0
        rect = (x - grow, y - grow, TILE_SIZE + 2 * grow, TILE_SIZE + 2 * grow)
        pygame.draw.rect(self.screen, self.get_tile_color(value), rect, border_radius=5)

        if value != 0:
            font = self.font_medium if value >= 1000 else self.font_large
            text = font.render(str(value), True, self.get_text_color(value))
            text_rect = text.get_rect(center=(x + TILE_SIZE // 2, y + TILE_SIZE // 2))
            self.screen.blit(text, text_rect)

    def draw_header(self, score, best, can_undo):
        title = self.font_large.render("2048", True, DARK_TEXT)
        self.screen.blit(title, (TILE_MARGIN, 20))

        for i, (label, value) in enumerate((("SCORE", score), ("BEST", best))):
            box_x = WINDOW_WIDTH - (i + 1) * (120 + TILE_MARGIN)
            pygame.draw.rect(self.screen, BACKGROUND_COLOR, (box_x, 15, 120, 60), border_radius=5)
            label_text = self.font_small.render(label, True, (238, 228, 218))
            self.screen.blit(label_text, label_text.get_rect(center=(box_x + 60, 30)))
            value_text = self.font_medium.render(str(value), True, (255, 255, 255))
            self.screen.blit(value_text, value_text.get_rect(center=(box_x + 60, 55)))

        hint = "U: undo  N: new  L: leaders" if can_undo else "N: new  L: leaders"
        hint_text = self.font_small.render(hint, True, DARK_TEXT)
        self.screen.blit(hint_text, (TILE_MARGIN, 70))

    def draw_board(self, tiles, highlight_ids):
        board_height = GRID_SIZE * TILE_SIZE + (GRID_SIZE + 1) * TILE_MARGIN
        pygame.draw.rect(self.screen, BACKGROUND_COLOR,
                         (0, HEADER_HEIGHT, WINDOW_WIDTH, board_height), border_radius=5)

        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                self.draw_tile(row, col, 0)
        for tile in tiles:
            self.draw_tile(tile["row"], tile["col"], tile["value"], tile["id"] in highlight_ids)

    def _overlay(self):
        overlay = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT))
        overlay.set_alpha(200)
        overlay.fill((255, 255, 255))
        self.screen.blit(overlay, (0, 0))

    def _center_text(self, text, font, y, color=DARK_TEXT):
        surface = font.render(text, True, color)
        self.screen.blit(surface, surface.get_rect(center=(WINDOW_WIDTH // 2, y)))

    def draw_game_over(self, score_saved, name, name_invalid):
        self._overlay()
        mid = WINDOW_HEIGHT // 2
        self._center_text("Game Over!", self.font_large, mid - 60)

        if score_saved:
            self._center_text("Score saved", self.font_small, mid)
        else:
            self._center_text("Type your name, Enter to save", self.font_small, mid - 10)
            box = pygame.Rect(WINDOW_WIDTH // 2 - 150, mid + 10, 300, 40)
            border = WARNING_COLOR if name_invalid else (0, 0, 0)
            pygame.draw.rect(self.screen, (255, 255, 255), box, border_radius=4)
            pygame.draw.rect(self.screen, border, box, width=2, border_radius=4)
            name_text = self.font_small.render(name, True, DARK_TEXT)
            self.screen.blit(name_text, (box.x + 8, box.y + 10))

        self._center_text("Press N to restart", self.font_small, mid + 80)

    def draw_leaders(self, leaders):
        self._overlay()
        self._center_text("Leaders", self.font_large, 50)
        if not leaders:
            self._center_text("No records yet", self.font_small, 120)
        for i, entry in enumerate(leaders):
            line = f"{i + 1:>2}. {entry.name[:14]:<14} {entry.score:>7}"
            self._center_text(line, self.font_small, 110 + i * 32)
        self._center_text("L: close  Del: clear", self.font_small, WINDOW_HEIGHT - 30)


class Game2048UI:
    """2048 게임 UI (pygame 기반)"""

    def __init__(self, controller: GameController | None = None):
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("2048")

        self.renderer = BoardRenderer(self.screen)
        self.game = controller if controller is not None else GameController()
        self.clock = pygame.time.Clock()

        self.player_name = ""
        self.invalid_until = 0
        self.show_leaders = False

    def draw(self):
        """전체 화면 그리기"""
        self.screen.fill((250, 248, 239))
        view = self.game.snapshot()

        self.renderer.draw_header(view["score"], view["best"], view["can_undo"])
        self.renderer.draw_board(view["tiles"], set(view["new_ids"]) | set(view["merged_ids"]))

        if self.show_leaders:
            self.renderer.draw_leaders(self.game.leaders())
        elif view["game_over"]:
            name_invalid = pygame.time.get_ticks() < self.invalid_until
            self.renderer.draw_game_over(view["score_saved"], self.player_name, name_invalid)

        pygame.display.flip()

    def submit_name(self):
        try:
            self.game.submit_score(self.player_name)
        except InvalidPlayerNameError:
            self.invalid_until = pygame.time.get_ticks() + INVALID_FLASH_MS
        except ScoreNotSubmittableError:
            pass
        else:
            self.player_name = ""

    def handle_input(self, event):
        """키 입력 처리"""
        key = event.key

        if key == pygame.K_l:
            self.show_leaders = not self.show_leaders
            return
        if self.show_leaders:
            if key == pygame.K_DELETE:
                self.game.clear_leaders()
            return

        if self.game.session.game_over:
            if key == pygame.K_n:
                self.player_name = ""
                self.game.new_game()
            elif self.game.score_saved:
                return
            elif key == pygame.K_RETURN:
                self.submit_name()
            elif key == pygame.K_BACKSPACE:
                self.player_name = self.player_name[:-1]
            elif event.unicode and event.unicode.isprintable():
                self.player_name = (self.player_name + event.unicode)[:NAME_MAX_LENGTH]
            return

        if key == pygame.K_n:
            self.game.new_game()
        elif key == pygame.K_u:
            self.game.undo()
        elif key in KEY_DIRECTIONS:
            self.game.move(KEY_DIRECTIONS[key])

    def run(self):
        """게임 메인 루프"""
        running = True

        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        self.handle_input(event)

            self.draw()
            self.clock.tick(60)

        pygame.quit()
        sys.exit()


if __name__ == "__main__":
    ui = Game2048UI()
    ui.run()
