"""
main.py — Entry point and game loop for TYPErun.

Responsibilities:
    - Configure logging (TYPERUN_LOG_LEVEL, default WARNING)
    - Initialise pygame, audio, and create the window
    - Run the main loop: handle events → update → render → flip
    - Manage pygame.Clock and delta time
    - Wrap the loop in async for pygbag (WASM/itch.io export)

Architecture note:
    main.py is intentionally thin. It owns pygame lifecycle and the
    window and nothing else. Screens live in core/game.py and the rules
    in core/engine.py.

Usage (local):
    python main.py

Usage (WASM export):
    pygbag main.py
"""

import asyncio
import logging
import os
import pygame
from settings import SCREEN_W, SCREEN_H, FPS, TITLE, DT_CLAMP_S
from core.audio import Audio
from core.game import Game, GameState


def _configure_logging() -> None:
    level = os.environ.get("TYPERUN_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def main() -> None:
    """Async main loop, compatible with both CPython and pygbag WASM.

    Each iteration yields to the event loop via asyncio.sleep(0), which
    pygbag uses to hand control back to the browser.
    """
    _configure_logging()
    pygame.init()

    window = pygame.display.set_mode((SCREEN_W, SCREEN_H))
    pygame.display.set_caption(TITLE)

    # ── Subsystems ────────────────────────────────────────────────────────────
    clock = pygame.time.Clock()
    game  = Game()

    audio = Audio()
    audio.init()
    game.set_audio(audio)

    # ── Main loop ─────────────────────────────────────────────────────────────
    running = True
    while running:
        dt = clock.tick(FPS) / 1000.0   # seconds since last frame
        dt = min(dt, DT_CLAMP_S)        # prevents a tick burst after tab switch

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif (event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE
                  and game.state != GameState.PLAYING):
                running = False
            else:
                game.handle_event(event)

        game.update(dt)
        game.render(window)
        pygame.display.flip()

        # ── Yield to browser (pygbag) ─────────────────────────────────────────
        await asyncio.sleep(0)

    audio.quit()
    pygame.quit()


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
