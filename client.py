import logging
import threading

import pygame

from config import POOL_WIDTH, POOL_HEIGHT, HUD_HEIGHT, FPS, MAX_LIVES, SCORE_SERVER_PORT
from bubbles import NORMAL, LIFE
from game import GameSession
from network import ScoreClient, Identity
from powerups import SLOWTIME
from ranking import RankingStore

WIDTH, HEIGHT = POOL_WIDTH, POOL_HEIGHT
BACKGROUND = (15, 23, 42)
SLOWTIME_COLOR = (59, 130, 246)
DOUBLESCORE_COLOR = (234, 179, 8)
MAX_NAME_LENGTH = 20


def centered(parent, target):
    #Centering the selected surface in the parent surface.
    x = (parent.get_width() - target.get_width()) / 2
    y = (parent.get_height() - target.get_height()) / 2
    return x, y


def leaderboard_message(entries, error):
    #status line under the leaderboard, an empty board is not a failure
    if error:
        return 'Leaderboard unavailable, press L to retry'
    if not entries:
        return 'No scores yet, be the first!'
    return ''


class BubblePanel:
    '''
    draw bubbles from the read-only snapshots of the game
    '''

    def __init__(self, surface, font):
        self.surface = surface
        self.font = font

    def draw_bubble(self, bubble):
        radius = bubble['radius'] * bubble['scale']
        if radius < 1:
            return
        pygame.draw.circle(self.surface, bubble['color'], bubble['position'], radius)
        pygame.draw.circle(self.surface, 'white', bubble['position'], radius, 2)
        if bubble['kind'] == NORMAL:
            label = str(bubble['value'])
        elif bubble['kind'] == LIFE:
            label = '+1'
        elif bubble['kind'] == SLOWTIME:
            label = 'SLOW'
        else:
            label = '2X'
        text = self.font.render(label, True, 'white')
        x, y = bubble['position']
        self.surface.blit(text, (x - text.get_width() / 2, y - text.get_height() / 2))

    def draw(self, bubbles):
        for bubble in bubbles:
            self.draw_bubble(bubble)


class StatusPanel:
    '''
    score, lives and powerups along the top of the screen
    '''

    def __init__(self, surface):
        self.surface = surface
        self.font = pygame.font.Font(None, 36)
        self.small_font = pygame.font.Font(None, 22)

    def draw_powerup(self, kind, position, faded=False):
        color = SLOWTIME_COLOR if kind == SLOWTIME else DOUBLESCORE_COLOR
        if faded:
            color = tuple(c // 2 for c in color)
        pygame.draw.circle(self.surface, color, position, 12)
        text = self.small_font.render('S' if kind == SLOWTIME else '2X', True, 'white')
        self.surface.blit(text, (position[0] - text.get_width() / 2, position[1] - text.get_height() / 2))

    def draw(self, game, now):
        self.surface.fill((30, 41, 59))
        for i in range(MAX_LIVES):
            color = (239, 68, 68) if i < game.lives else (75, 85, 99)
            pygame.draw.circle(self.surface, color, (20 + i * 24, HUD_HEIGHT / 2), 9)

        x = 290
        active = game.active_powerup
        if active:
            self.draw_powerup(active.kind, (x, 24))
            bar_width = 28 + 30 * 4
            pygame.draw.rect(self.surface, (71, 85, 105), (x - 14, 42, bar_width, 5))
            pygame.draw.rect(self.surface, 'white', (x - 14, 42, bar_width * active.progress(now), 5))
        for i, kind in enumerate(game.pending_powerups()[:4]):
            self.draw_powerup(kind, (x + 30 * (i + 1), 24), faded=True)

        label = f'{game.score}'
        if game.multiplier > 1:
            label += f' ({game.multiplier}x)'
        text = self.font.render(label, True, (74, 222, 128))
        self.surface.blit(text, (self.surface.get_width() - text.get_width() - 16, 18))


class GameClient:
    '''
    pygame front end of one player, drives the game session from the frame clock
    '''

    def __init__(self, screen, score_client, identity):
        self.screen = screen
        self.score_client = score_client
        self.identity = identity
        self.game = GameSession()
        self.ranking = RankingStore()
        self.font = pygame.font.Font(None, 30)
        self.big_font = pygame.font.Font(None, 64)
        self.bubble_panel = BubblePanel(self.screen.subsurface((0, 0, WIDTH, HEIGHT)), pygame.font.Font(None, 20))
        self.status_panel = StatusPanel(self.screen.subsurface((0, 0, WIDTH, HUD_HEIGHT)))
        self.entering_name = False
        self.name = ''
        self.message = ''
        self.show_leaderboard = False

    def now(self):
        return pygame.time.get_ticks()

    def start(self):
        self.entering_name = False
        self.show_leaderboard = False
        self.message = ''
        self.game.start(self.now())

    def reset(self):
        self.entering_name = False
        self.show_leaderboard = False
        self.message = ''
        self.game.reset()

    #submitting and fetching run on their own thread so a slow server never stalls the frame loop
    def _submit(self, name, score):
        if self.score_client.submit_score(name, score, self.identity.auth_token()):
            self.message = 'Score saved!'
        else:
            self.message = 'Could not save score, press S to retry'

    def submit_score(self):
        name = self.name.strip() or self.identity.default_name()
        self.entering_name = False
        self.message = 'Saving...'
        threading.Thread(target=self._submit, args=(name, self.game.score), daemon=True).start()

    def _fetch_leaderboard(self):
        entries = self.score_client.fetch_top_scores()
        error = self.score_client.last_error
        # a failed fetch keeps whatever was loaded before
        if not error:
            self.ranking.bulk_load(entries)
        self.message = leaderboard_message(entries, error)

    def request_leaderboard(self):
        self.show_leaderboard = True
        self.message = ''
        threading.Thread(target=self._fetch_leaderboard, daemon=True).start()

    def handle_key(self, event):
        if self.entering_name:
            if event.key == pygame.K_RETURN:
                self.submit_score()
            elif event.key == pygame.K_ESCAPE:
                self.entering_name = False
            elif event.key == pygame.K_BACKSPACE:
                self.name = self.name[:-1]
            elif event.unicode and event.unicode.isprintable() and len(self.name) < MAX_NAME_LENGTH:
                self.name += event.unicode
            return
        if self.game.running:
            return
        if event.key in (pygame.K_SPACE, pygame.K_RETURN):
            self.start()
        elif event.key == pygame.K_l:
            self.request_leaderboard()
        elif event.key == pygame.K_r:
            self.reset()
        elif event.key == pygame.K_s and self.game.over and self.game.score > 0:
            self.name = self.identity.default_name(fallback='')
            self.entering_name = True

    def update(self):
        self.game.update(self.now())

    def draw_lines(self, lines, top):
        y = top
        for line, font in lines:
            text = font.render(line, True, 'white')
            self.screen.blit(text, (centered(self.screen, text)[0], y))
            y += text.get_height() + 12

    def draw_overlay(self):
        shade = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 140))
        self.screen.blit(shade, (0, 0))
        if self.show_leaderboard:
            lines = [('Leaderboard', self.big_font)]
            for place, entry in enumerate(self.ranking.top(10), 1):
                lines.append((f'{place}. {entry["name"]}  {entry["score"]}', self.font))
            lines.append(('SPACE play   R back', self.font))
        elif self.game.over:
            lines = [('Game Over!', self.big_font), (f'Final Score: {self.game.score}', self.font)]
            if self.entering_name:
                lines.append((f'Name: {self.name}_', self.font))
            else:
                lines.append(('S save score   SPACE play again   L leaderboard', self.font))
        else:
            lines = [
                ('Ready to Pop?', self.big_font),
                ('Click bubbles to score, collect powerups, survive!', self.font),
                ('SPACE start   L leaderboard', self.font),
            ]
        if self.message:
            lines.append((self.message, self.font))
        self.draw_lines(lines, HEIGHT / 4)

    def draw(self):
        now = self.now()
        self.screen.fill(BACKGROUND)
        self.bubble_panel.draw(self.game.bubbles(now))
        self.status_panel.draw(self.game, now)
        if not self.game.running:
            self.draw_overlay()


#main function to initialize the client and run the game
def main(server_address, identity):
    pygame.init()

    pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption('Bubble Pop')

    screen = pygame.display.get_surface()
    client = GameClient(screen, ScoreClient(server_address), identity)

    clock = pygame.time.Clock()
    running = True

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                client.game.click_at(event.pos, client.now())
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE and not client.entering_name:
                    running = False
                else:
                    client.handle_key(event)

        clock.tick(FPS)
        client.update()
        client.draw()
        pygame.display.update()
    #quit the game
    pygame.quit()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument('server', nargs='?', default='localhost')
    parser.add_argument('--port', default=SCORE_SERVER_PORT, type=int)
    parser.add_argument('--name', help='pre-fill the name used when saving scores')
    parser.add_argument('--token', help='auth token issued by the score service')
    args = parser.parse_args()
    user = {'id': args.name, 'name': args.name} if args.name else None
    main((args.server, args.port), Identity(user, args.token))
