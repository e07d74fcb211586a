"""pygame window, keyboard and tone adapters around the scheduler."""

import numpy as np
import pygame

from chip8vm.clock import Scheduler
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.logging import get_logger
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme

logger = get_logger("Frontend")

# COSMAC VIP hex keypad laid over the left-hand block of a QWERTY keyboard:
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

SAMPLE_RATE = 44100
TONE_FREQUENCY = 440
TONE_VOLUME = 0.12


def square_wave(frequency: float = TONE_FREQUENCY, sample_rate: int = SAMPLE_RATE,
                volume: float = TONE_VOLUME) -> np.ndarray:
    """One second of a mono 16-bit square wave, suitable for looping."""
    phase = (np.arange(sample_rate) * frequency / sample_rate) % 1.0
    amplitude = int(volume * np.iinfo(np.int16).max)
    return np.where(phase < 0.5, amplitude, -amplitude).astype(np.int16)


class PygameFrontend:
    """Paints the framebuffer, feeds the keypad and beeps while the sound timer runs."""

    def __init__(self, scheduler: Scheduler, scale: int = 10, color_scheme: str = "classic",
                 sound: bool = True, caption: str = "chip8vm"):
        self.scheduler = scheduler
        self.scale = scale
        self.on_color, self.off_color = create_color_scheme(color_scheme)
        self.caption = caption
        self.want_sound = sound
        self.running = False
        self.paused = False
        self.screen = None
        self.tone = None
        self.tone_playing = False

    def open(self):
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH * self.scale, SCREEN_HEIGHT * self.scale))
        pygame.display.set_caption(self.caption)

        if self.want_sound:
            try:
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
                self.tone = pygame.sndarray.make_sound(square_wave())
            except pygame.error as err:
                logger.warning(f"Audio unavailable, running silent: {err}")
                self.tone = None

        self.running = True
        logger.info(f"Window opened at {SCREEN_WIDTH * self.scale}x{SCREEN_HEIGHT * self.scale}")

    def close(self):
        if self.tone is not None:
            self.tone.stop()
        pygame.quit()
        self.running = False
        logger.info("Window closed")

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_F5:
                    self.scheduler.reset()
                elif event.key == pygame.K_p:
                    self.paused = not self.paused
                    logger.info("Paused" if self.paused else "Resumed")
                elif event.key in KEY_MAP:
                    self.scheduler.press_key(KEY_MAP[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    self.scheduler.release_key(KEY_MAP[event.key])

    def draw(self):
        rgb = chip8_display_to_rgb(self.scheduler.framebuffer_snapshot(), self.scale,
                                   self.on_color, self.off_color)
        # surfarray expects (width, height, 3)
        surface = pygame.surfarray.make_surface(np.transpose(rgb, (1, 0, 2)))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def update_sound(self):
        if self.tone is None:
            return
        active = self.scheduler.sound_active and not self.paused
        if active and not self.tone_playing:
            self.tone.play(loops=-1)
        elif not active and self.tone_playing:
            self.tone.stop()
        self.tone_playing = active

    def on_frame(self, scheduler: Scheduler):
        self.handle_events()
        self.update_sound()
        self.draw()

    def run(self):
        """Open the window and run the machine until it is closed."""
        self.open()
        try:
            while self.running:
                if self.paused:
                    self.on_frame(self.scheduler)
                    pygame.time.wait(16)
                    continue
                self.scheduler.run(
                    on_frame=self.on_frame,
                    should_stop=lambda: not self.running or self.paused,
                )
        finally:
            self.close()
