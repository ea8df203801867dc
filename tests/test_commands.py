from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from bingo.management.commands import rungame
from bingo.models import Game

pytestmark = pytest.mark.django_db


def test_rungame_calls_numbers():
    game = Game.objects.create()
    out = StringIO()
    call_command("rungame", str(game.id), "--interval", "0", "--max-calls", "3", stdout=out)
    game.refresh_from_db()
    assert game.state == Game.PLAYING
    assert len(game.draws) == 3
    assert "Stopped after 3 calls." in out.getvalue()


def test_rungame_runs_until_exhausted():
    game = Game.objects.create()
    out = StringIO()
    call_command("rungame", str(game.id), "--interval", "0", "--max-calls", "100", stdout=out)
    game.refresh_from_db()
    assert game.state == Game.COMPLETED
    assert len(game.draws) == 75
    assert "No more numbers." in out.getvalue()


def test_rungame_refuses_finished_game():
    game = Game.objects.create(state=Game.COMPLETED)
    with pytest.raises(CommandError):
        call_command("rungame", str(game.id), "--interval", "0")


def test_rungame_waits_while_paused(monkeypatch):
    game = Game.objects.create(state=Game.PAUSED)
    sleeps = []

    def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 3:
            Game.objects.filter(id=game.id).update(state=Game.COMPLETED)

    monkeypatch.setattr(rungame.time, "sleep", fake_sleep)
    out = StringIO()
    call_command("rungame", str(game.id), "--interval", "0", stdout=out)
    assert sleeps == [rungame.PAUSED_POLL] * 3
    assert "Game completed." in out.getvalue()
    game.refresh_from_db()
    assert game.draws == []
