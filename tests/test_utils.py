import pytest

from ftl_backend.utils import (generate_slug, sanitize_input, is_valid_email, parse_bool,
                               parse_int, parse_date, make_unique_slug)
from ftl_backend.models import Service
from ftl_backend.slider.hero import discover_hero_images


def test_generate_slug_transliterates():
    assert generate_slug('Analyse des Crèmes Glacées') == 'analyse-des-cremes-glacees'
    assert generate_slug('') == ''


def test_sanitize_input():
    assert sanitize_input('  <script>x</script>Hello ') == 'xHello'
    assert sanitize_input('abcdef', max_length=3) == 'abc'
    assert sanitize_input('<b>ok</b>', allow_html=True) == '<b>ok</b>'
    assert sanitize_input(None) is None


@pytest.mark.parametrize('email,valid', [
    ('lab@ftl.org.in', True), ('a@b.co', True), ('no-at.example.com', False),
    ('two words@x.com', False), ('missing@tld', False), ('', False),
])
def test_is_valid_email(email, valid):
    assert is_valid_email(email) is valid


def test_parsers():
    assert parse_bool('Yes') is True
    assert parse_bool('off') is False
    assert parse_bool(None, default=True) is True
    assert parse_int('7') == 7
    assert parse_int('seven', default=0) == 0
    assert parse_date('2026-03-01').isoformat() == '2026-03-01'
    assert parse_date('03/01/2026') is None


def test_make_unique_slug_skips_taken(app):
    assert make_unique_slug(Service, 'Water Testing') == 'water-testing-2'
    existing = Service.query.filter_by(slug='water-testing').first()
    assert make_unique_slug(Service, 'Water Testing', exclude_id=existing.id) == 'water-testing'


def test_discover_hero_images(tmp_path):
    for name in ('3.webp', '1.jpg', '2.JPEG', 'readme.md'):
        (tmp_path / name).write_bytes(b'x')
    assert discover_hero_images(str(tmp_path)) == ['/images/1.jpg', '/images/2.JPEG', '/images/3.webp']
    assert discover_hero_images(str(tmp_path), limit=1) == ['/images/1.jpg']
    assert discover_hero_images(str(tmp_path / 'missing')) == []
