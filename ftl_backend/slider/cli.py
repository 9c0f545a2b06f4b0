# ftl_backend/slider/cli.py
import threading

import click
from flask import current_app
from flask.cli import with_appcontext

from .carousel import Carousel
from .hero import discover_hero_images
from .timers import ThreadingScheduler


@click.command('slideshow')
@click.option('--interval', type=int, default=None, help='Milliseconds per slide (defaults to HERO_SLIDER_INTERVAL_MS).')
@click.option('--cycles', type=int, default=1, show_default=True, help='Full passes over the images before stopping.')
@click.option('--image', 'images', multiple=True, help='Image to show; repeat for several. Defaults to the images folder.')
@with_appcontext
def slideshow_command(interval, cycles, images):
    """Runs the hero carousel in the terminal, printing each slide change."""
    interval = interval or current_app.config.get('HERO_SLIDER_INTERVAL_MS', 6000)
    if interval <= 0:
        raise click.BadParameter('must be positive', param_hint='--interval')
    images = list(images) or discover_hero_images(current_app.config.get('IMAGE_FOLDER'),
                                                  current_app.config.get('HERO_SLIDER_MAX_IMAGES'))
    if not images:
        click.echo('No images to show.')
        return

    target_changes = max(cycles, 1) * len(images)
    finished = threading.Event()
    changes = []

    carousel = Carousel(images, interval_ms=interval, scheduler=ThreadingScheduler())

    def on_change(index, image):
        changes.append(index)
        click.echo(f"[{carousel.slide_counter}] {image}")
        if len(changes) >= target_changes:
            finished.set()

    carousel.subscribe(on_change)
    click.echo(f"[{carousel.slide_counter}] {carousel.current_image}")
    try:
        # A single image never changes slide.
        if len(images) > 1:
            finished.wait()
    except KeyboardInterrupt:
        click.echo('Interrupted.')
    finally:
        carousel.dispose()
    click.echo(f"Showed {len(changes)} slide changes.")


def register_slider_commands(app):
    app.cli.add_command(slideshow_command)
