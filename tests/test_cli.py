from ftl_backend.models import AdminUser, Service
from ftl_backend.database import populate_initial_data


def test_seed_is_idempotent(app):
    populate_initial_data()
    assert AdminUser.query.count() == 1
    assert Service.query.count() == 4


def test_create_admin_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['create-admin', 'qa@test.ftl.org.in', '--password', 'qa_password_1', '--role', 'staff'])
    assert result.exit_code == 0, result.output
    assert 'Created staff account qa@test.ftl.org.in' in result.output

    again = runner.invoke(args=['create-admin', 'qa@test.ftl.org.in', '--password', 'qa_password_1'])
    assert again.exit_code != 0


def test_create_admin_rejects_bad_email(app):
    result = app.test_cli_runner().invoke(args=['create-admin', 'not-an-email', '--password', 'x'])
    assert result.exit_code != 0


def test_seed_db_command(app):
    result = app.test_cli_runner().invoke(args=['seed-db'])
    assert result.exit_code == 0
    assert 'Database seeded' in result.output


def test_slideshow_without_images(app):
    result = app.test_cli_runner().invoke(args=['slideshow'])
    assert result.exit_code == 0
    assert 'No images to show.' in result.output


def test_slideshow_runs_one_cycle(app):
    result = app.test_cli_runner().invoke(args=['slideshow', '--interval', '10', '--image', 'a.jpg', '--image', 'b.jpg'])
    assert result.exit_code == 0, result.output
    assert '[1 / 2] a.jpg' in result.output
    assert '[2 / 2] b.jpg' in result.output
    assert 'Showed 2 slide changes.' in result.output


def test_slideshow_single_image_prints_summary(app):
    result = app.test_cli_runner().invoke(args=['slideshow', '--image', 'only.jpg'])
    assert result.exit_code == 0, result.output
    assert '[1 / 1] only.jpg' in result.output
    assert 'Showed 0 slide changes.' in result.output
