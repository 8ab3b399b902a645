# Snake — classic rules, arrows/WASD, beeps/boops, menu + difficulty + countdown
# 60 FPS | walls = death | grow = +1 on the move after eating | session high score only
# Controls (play): WASD/Arrows = move, Esc = menu. Game over: R/Enter = restart, M/Esc = menu

import argparse
import array
import logging
import math
import sys
import time

import pygame

import snake_config as cfg
from snake_logic import (
    BOARD_FULL, COUNTDOWN, DOWN, GAME_OVER, LEFT, RIGHT, RUNNING, UP,
    Game, Ticker, run_ticks,
)

logger = logging.getLogger(__name__)

# ---------------------- App / Scenes / State -------------------------
STATE_MENU       = "menu"
STATE_DIFFICULTY = "difficulty"
STATE_CREDITS    = "credits"
STATE_PLAY       = "play"

MENU_ITEMS = ["Start Game", "Credits", "Quit"]
DIFFICULTY_ITEMS = ["Easy", "Normal", "Hard", "Cancel"]
GAMEOVER_ITEMS = ["Restart", "Main Menu"]
CREDITS = ["ALBY MATHEW BIJU", "ANUSREE BABU"]

KEY_DIRECTIONS = {
    pygame.K_UP: UP,       pygame.K_w: UP,
    pygame.K_DOWN: DOWN,   pygame.K_s: DOWN,
    pygame.K_LEFT: LEFT,   pygame.K_a: LEFT,
    pygame.K_RIGHT: RIGHT, pygame.K_d: RIGHT,
}


class _Silent:
    def play(self): pass


def tone(freq=440, ms=90, vol=0.4, shape="square"):
    """Generate a tone Sound without numpy. 16-bit mono, 22.05kHz."""
    if not pygame.mixer.get_init():
        return _Silent()
    sr = 22050
    n = max(1, int(sr * (ms/1000.0)))
    buf = array.array("h")
    amp = int(32767 * max(0.0, min(1.0, vol)))
    phase = 0.0
    inc = (freq / sr)
    attack = max(1,int(n*0.02)); release = max(1,int(n*0.08))
    for i in range(n):
        if shape == "square":
            s = 1.0 if (phase % 1.0) < 0.5 else -1.0
        elif shape == "tri":
            x = (phase % 1.0)
            s = 4.0*abs(x-0.5)-1.0
        else:
            s = math.sin(phase*2*math.pi)
        phase += inc
        a = 1.0
        if i < attack: a = i/attack
        if i > n-release: a = max(0.0, (n-i)/release)
        buf.append(int(amp * s * a))
    return pygame.mixer.Sound(buffer=buf.tobytes())


def make_sounds(mute=False):
    if mute:
        return {k: _Silent() for k in ("turn", "eat", "die", "tick", "go", "ui_move", "ui_sel")}
    return {
        "turn":    tone(920, 28, 0.25, "square"),
        "eat":     tone(320,120, 0.35, "square"),
        "die":     tone( 80,420, 0.5 , "tri"),
        "tick":    tone(520, 90, 0.30, "sine"),
        "go":      tone(780,220, 0.35, "sine"),
        "ui_move": tone(660, 40, 0.25, "square"),
        "ui_sel":  tone(420, 80, 0.35, "square"),
    }


def new_app(settings):
    """
    Open the window and build the session context every scene works on.

    The context carries the pygame handles plus everything that survives
    between rounds (high score, chosen difficulty) and the current round.
    """
    pygame.mixer.pre_init(22050, -16, 1, 256)
    pygame.init()
    pygame.display.set_caption("Snake")
    if not settings.mute and not pygame.mixer.get_init():
        try:
            pygame.mixer.init()
        except pygame.error as exc:
            logger.warning("Audio unavailable, playing silently: %s", exc)
    return {
        "screen": pygame.display.set_mode((cfg.WIDTH, cfg.HEIGHT)),
        "clock": pygame.time.Clock(),
        "font": pygame.font.SysFont("consolas", 16),
        "midfont": pygame.font.SysFont("consolas", 20, bold=True),
        "bigfont": pygame.font.SysFont("consolas", 46, bold=True),
        "hugefont": pygame.font.SysFont("consolas", 80, bold=True),
        "sounds": make_sounds(settings.mute),
        "settings": settings,
        "state": STATE_MENU,
        "menu_idx": 0,
        "diff_idx": 1,
        "over_idx": 0,
        "high_score": 0,
        "difficulty": settings.difficulty or cfg.DEFAULT_DIFFICULTY,
        "game": None,
        "game_clock": Ticker(cfg.DIFFICULTIES[cfg.DEFAULT_DIFFICULTY]),
        "countdown_clock": Ticker(cfg.COUNTDOWN_MS),
    }


def quit_game():
    logger.info("Quitting")
    pygame.quit(); sys.exit(0)


def play(app, name):
    app["sounds"][name].play()

# ----------------------------- Drawing --------------------------------
def text(app, s, x, y, c=cfg.LIT, center=False, f=None):
    f = f or app["font"]
    img = f.render(s, True, c)
    pos = (x - (img.get_width()//2 if center else 0),
           y - (img.get_height()//2 if center else 0))
    app["screen"].blit(img, pos)


def grid_to_px(cell):
    x, y = cell
    return x*cfg.CELL_SIZE, cfg.STATS_HEIGHT + y*cfg.CELL_SIZE, cfg.CELL_SIZE, cfg.CELL_SIZE


def draw_stats(app, score):
    screen = app["screen"]
    screen.fill(cfg.BLACK)
    pygame.draw.rect(screen, cfg.DK, (0, 0, cfg.WIDTH, cfg.STATS_HEIGHT))
    text(app, f"Score: {score}", 8, cfg.STATS_HEIGHT//2 - 8)
    text(app, app["difficulty"].title(), cfg.WIDTH//2, cfg.STATS_HEIGHT//2, center=True)
    text(app, f"High Score: {app['high_score']}", cfg.WIDTH - 180, cfg.STATS_HEIGHT//2 - 8)
    pygame.draw.rect(screen, cfg.LIT, (0, cfg.STATS_HEIGHT, cfg.WIDTH, cfg.HEIGHT - cfg.STATS_HEIGHT), 1)


def draw_snake_and_food(app, snap):
    screen = app["screen"]
    for i, cell in enumerate(snap["body"]):
        x,y,w,h = grid_to_px(cell)
        pygame.draw.rect(screen, cfg.SNAKE_EDGE, (x,y,w,h))
        pygame.draw.rect(screen, cfg.SNAKE_HEAD if i==0 else cfg.SNAKE_BODY, (x+2,y+2,w-4,h-4))
    if snap["food"] is not None:
        x,y,w,h = grid_to_px(snap["food"])
        pygame.draw.ellipse(screen, cfg.FOOD, (x+3,y+3,w-6,h-6))
        pygame.draw.ellipse(screen, cfg.FOOD_SHINE, (x+4,y+4,3,3))


def draw_choices(app, items, idx, y0, step=40):
    for i, item in enumerate(items):
        sel = (i == idx)
        text(app, ("> " if sel else "  ") + item, cfg.WIDTH//2, y0 + i*step,
             c=cfg.YEL if sel else cfg.LIT, center=True, f=app["midfont"])

# --------------------------- Game control -----------------------------
def start_game(app, difficulty):
    """Fresh round at `difficulty`; the countdown clock starts, the game clock waits."""
    app["difficulty"] = difficulty
    app["game"] = Game(difficulty=difficulty, seed=app["settings"].seed)
    restart_clocks(app)
    app["over_idx"] = 0
    app["state"] = STATE_PLAY


def restart_game(app):
    app["game"].reset()
    restart_clocks(app)
    app["over_idx"] = 0
    logger.info("Restarted %s game", app["difficulty"])


def restart_clocks(app):
    app["game_clock"].stop()
    app["game_clock"].set_interval(app["game"].interval)
    app["countdown_clock"].start()
    play(app, "tick")


def back_to_menu(app):
    app["game_clock"].stop()
    app["countdown_clock"].stop()
    record_high_score(app)
    app["game"] = None
    app["state"] = STATE_MENU


def record_high_score(app):
    G = app["game"]
    if G is not None and G.score > app["high_score"]:
        logger.info("New session high score: %d", G.score)
        app["high_score"] = G.score


def update_game(app, dt_ms):
    """Run whatever countdown and game ticks the frame delta covers."""
    G = app["game"]
    if G.phase == COUNTDOWN:
        for _ in range(app["countdown_clock"].update(dt_ms)):
            G.countdown_tick()
            if G.phase == RUNNING:
                app["countdown_clock"].stop()
                app["game_clock"].start()
                break
            play(app, "go" if G.countdown_label() == "GO!" else "tick")
    elif G.phase == RUNNING:
        before = G.direction
        for result in run_ticks(G, app["game_clock"], dt_ms):
            if result.ate:
                play(app, "eat")
        if G.direction != before:
            play(app, "turn")
        if G.phase == GAME_OVER:
            record_high_score(app)
            play(app, "die")

# --------------------------- Scene: Menu -------------------------------
def draw_menu(app):
    app["screen"].fill(cfg.BLACK)
    text(app, "SNAKE GAME", cfg.WIDTH//2, 60, center=True, f=app["bigfont"])
    draw_choices(app, MENU_ITEMS, app["menu_idx"], 170, step=70)
    lines = [
        "Use Arrow Keys or WASD to move.",
        "Avoid hitting yourself or the wall.",
        "Restart or go back to the Main Menu after Game Over.",
    ]
    for i, ln in enumerate(lines):
        text(app, ln, cfg.WIDTH//2, 420 + i*22, center=True)
    text(app, f"High Score: {app['high_score']}", cfg.WIDTH//2, cfg.HEIGHT - 30, center=True)


def handle_menu(app, events):
    for e in events:
        if e.type == pygame.QUIT:
            quit_game()
        elif e.type == pygame.KEYDOWN:
            if e.key in (pygame.K_ESCAPE, pygame.K_q):
                quit_game()
            elif e.key in (pygame.K_UP, pygame.K_w):
                app["menu_idx"] = (app["menu_idx"] - 1) % len(MENU_ITEMS); play(app, "ui_move")
            elif e.key in (pygame.K_DOWN, pygame.K_s):
                app["menu_idx"] = (app["menu_idx"] + 1) % len(MENU_ITEMS); play(app, "ui_move")
            elif e.key in (pygame.K_RETURN, pygame.K_SPACE):
                play(app, "ui_sel")
                sel = MENU_ITEMS[app["menu_idx"]]
                if sel == "Start Game":
                    app["diff_idx"] = 1
                    app["state"] = STATE_DIFFICULTY
                elif sel == "Credits":
                    app["state"] = STATE_CREDITS
                elif sel == "Quit":
                    quit_game()

# ------------------------ Scene: Difficulty ----------------------------
def draw_difficulty(app):
    app["screen"].fill(cfg.BLACK)
    text(app, "Select difficulty:", cfg.WIDTH//2, 80, center=True, f=app["bigfont"])
    draw_choices(app, DIFFICULTY_ITEMS, app["diff_idx"], 180, step=60)


def handle_difficulty(app, events):
    for e in events:
        if e.type == pygame.QUIT:
            quit_game()
        elif e.type == pygame.KEYDOWN:
            if e.key == pygame.K_ESCAPE:
                app["state"] = STATE_MENU; play(app, "ui_sel")
            elif e.key in (pygame.K_UP, pygame.K_w):
                app["diff_idx"] = (app["diff_idx"] - 1) % len(DIFFICULTY_ITEMS); play(app, "ui_move")
            elif e.key in (pygame.K_DOWN, pygame.K_s):
                app["diff_idx"] = (app["diff_idx"] + 1) % len(DIFFICULTY_ITEMS); play(app, "ui_move")
            elif e.key in (pygame.K_RETURN, pygame.K_SPACE):
                play(app, "ui_sel")
                sel = DIFFICULTY_ITEMS[app["diff_idx"]]
                if sel == "Cancel":
                    app["state"] = STATE_MENU
                else:
                    start_game(app, sel.lower())
                return

# --------------------------- Scene: Credits ----------------------------
def draw_credits(app):
    app["screen"].fill(cfg.BLACK)
    text(app, "CREDITS", cfg.WIDTH//2, 80, center=True, f=app["bigfont"])
    for i, name in enumerate(CREDITS):
        text(app, name, cfg.WIDTH//2, 180 + i*40, center=True, f=app["midfont"])
    text(app, "Esc / Enter: menu", 8, cfg.HEIGHT-24)


def handle_credits(app, events):
    for e in events:
        if e.type == pygame.QUIT:
            quit_game()
        elif e.type == pygame.KEYDOWN:
            if e.key in (pygame.K_ESCAPE, pygame.K_m, pygame.K_RETURN, pygame.K_SPACE):
                app["state"] = STATE_MENU; play(app, "ui_sel")

# --------------------------- Scene: Play -------------------------------
def handle_play(app, events):
    G = app["game"]
    for e in events:
        if e.type == pygame.QUIT:
            quit_game()
        elif e.type == pygame.KEYDOWN:
            if G.phase == GAME_OVER:
                handle_gameover_key(app, e.key)
                return
            if e.key == pygame.K_ESCAPE:
                back_to_menu(app); play(app, "ui_sel"); return
            # turns only count while the snake is moving
            if G.phase == RUNNING and e.key in KEY_DIRECTIONS:
                G.queue_direction(KEY_DIRECTIONS[e.key])


def handle_gameover_key(app, key):
    if key in (pygame.K_UP, pygame.K_w, pygame.K_DOWN, pygame.K_s):
        app["over_idx"] = (app["over_idx"] + 1) % len(GAMEOVER_ITEMS); play(app, "ui_move")
    elif key == pygame.K_r:
        restart_game(app)
    elif key in (pygame.K_m, pygame.K_ESCAPE):
        back_to_menu(app); play(app, "ui_sel")
    elif key in (pygame.K_RETURN, pygame.K_SPACE):
        play(app, "ui_sel")
        if GAMEOVER_ITEMS[app["over_idx"]] == "Restart":
            restart_game(app)
        else:
            back_to_menu(app)


def draw_play(app):
    snap = app["game"].snapshot()
    draw_stats(app, snap["score"])
    mid = cfg.STATS_HEIGHT + (cfg.HEIGHT - cfg.STATS_HEIGHT)//2
    if snap["phase"] == COUNTDOWN:
        text(app, snap["countdown"], cfg.WIDTH//2, mid, c=cfg.YEL, center=True, f=app["hugefont"])
    elif snap["phase"] == GAME_OVER:
        title = "BOARD CLEARED" if snap["death_reason"] == BOARD_FULL else "GAME OVER"
        text(app, title, cfg.WIDTH//2, mid - 60, c=cfg.RED, center=True, f=app["bigfont"])
        text(app, f"Score: {snap['score']}", cfg.WIDTH//2, mid - 15, center=True, f=app["midfont"])
        draw_choices(app, GAMEOVER_ITEMS, app["over_idx"], mid + 30, step=44)
    else:
        draw_snake_and_food(app, snap)

# ------------------------------ Main ----------------------------------
def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Classic arcade Snake")
    parser.add_argument(
        "--difficulty",
        choices=sorted(cfg.DIFFICULTIES),
        help="Skip the menu and start straight away at this difficulty",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed food placement for a repeatable round",
    )
    parser.add_argument(
        "--mute",
        action="store_true",
        help="Disable sound",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: INFO, or SNAKE_LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def run(app):
    if app["settings"].difficulty:
        start_game(app, app["settings"].difficulty)
    while True:
        dt_ms = app["clock"].tick(cfg.FPS)
        events = pygame.event.get()

        if app["state"] == STATE_MENU:
            handle_menu(app, events); draw_menu(app)

        elif app["state"] == STATE_DIFFICULTY:
            handle_difficulty(app, events); draw_difficulty(app)

        elif app["state"] == STATE_CREDITS:
            handle_credits(app, events); draw_credits(app)

        elif app["state"] == STATE_PLAY:
            handle_play(app, events)
            if app["state"] == STATE_PLAY:
                update_game(app, dt_ms)
                draw_play(app)

        pygame.display.flip()


def main(argv=None):
    settings = cfg.load_settings(parse_args(argv))
    cfg.setup_logging(settings.log_level)
    logger.info("Starting Snake (difficulty=%s, seed=%s, mute=%s)",
                settings.difficulty or "menu", settings.seed, settings.mute)
    t0 = time.perf_counter()
    try:
        run(new_app(settings))
    finally:
        logger.info("Session lasted %.0fs", time.perf_counter() - t0)


if __name__ == "__main__":
    main()
