"""Test CLI commands."""
from app.models import AttendanceSession, ClassEnrollment, User

def test_seed_db(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['seed-db'])

    assert result.exit_code == 0
    assert 'Database seeded successfully!' in result.output
    assert User.query.count() == 2
    assert ClassEnrollment.query.count() == 1
    assert AttendanceSession.query.filter_by(location_required=True).count() == 1

def test_create_token(app, student):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['create-token', student.email])

    assert result.exit_code == 0
    assert result.output.count('.') == 2

def test_create_token_unknown_user(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['create-token', 'nobody@example.com'])

    assert result.exit_code != 0
    assert 'No user with email' in result.output

def test_init_db(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['init-db'])

    assert result.exit_code == 0
    assert 'Created all tables.' in result.output
