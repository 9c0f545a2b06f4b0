# ftl_backend/slider/hero.py
# Builds the home page hero slider settings from the images folder.
import os

from flask import current_app

HERO_IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.webp')


def discover_hero_images(image_folder, limit=None):
    """Public /images URLs of the image files in `image_folder`, sorted by name."""
    if not image_folder or not os.path.isdir(image_folder):
        return []
    names = sorted(
        name for name in os.listdir(image_folder)
        if name.lower().endswith(HERO_IMAGE_EXTENSIONS) and os.path.isfile(os.path.join(image_folder, name))
    )
    if limit is not None:
        names = names[:limit]
    return [f"/images/{name}" for name in names]


def build_hero_config():
    """Slider settings served to the client. HERO_IMAGES in config overrides folder discovery."""
    limit = current_app.config.get('HERO_SLIDER_MAX_IMAGES')
    images = current_app.config.get('HERO_IMAGES')
    if images:
        images = list(images)[:limit] if limit else list(images)
    else:
        images = discover_hero_images(current_app.config.get('IMAGE_FOLDER'), limit)
    return {
        "images": images,
        "interval": current_app.config.get('HERO_SLIDER_INTERVAL_MS', 6000),
        "autoplay": True,
        "pause_on_hover": True
    }
