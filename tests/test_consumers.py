import pytest
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator

from bingo.gameplay import draw_next
from bingo.models import Game, Selection
from bingo.pool import DrawnNumber
from bingo.routing import websocket_urlpatterns
from bingo.utils import get_card, letter_for, position_to_cell

application = URLRouter(websocket_urlpatterns)


async def connect(game_id):
    communicator = WebsocketCommunicator(application, f"/ws/game/{game_id}/")
    connected, _ = await communicator.connect()
    assert connected
    return communicator


@pytest.mark.django_db(transaction=True)
async def test_ping():
    communicator = await connect(1)
    await communicator.send_json_to({"action": "ping"})
    assert await communicator.receive_json_from() == {"type": "pong"}
    await communicator.send_json_to({"action": "dance"})
    assert await communicator.receive_json_from() == {"type": "error", "reason": "unknown_action"}
    await communicator.disconnect()


@pytest.mark.django_db(transaction=True)
async def test_check_without_index():
    communicator = await connect(2)
    await communicator.send_json_to({"action": "check", "index": "abc"})
    assert await communicator.receive_json_from() == {"type": "check", "ok": False, "reason": "missing_index"}
    await communicator.disconnect()


@pytest.mark.django_db(transaction=True)
async def test_group_events_are_relayed():
    communicator = await connect(3)
    layer = get_channel_layer()
    await layer.group_send("game_3", {"type": "call.drawn", "letter": "N", "number": 40, "count": 9})
    assert await communicator.receive_json_from() == {"type": "call", "letter": "N", "number": 40, "count": 9}
    await layer.group_send("game_3", {"type": "game.state", "state": "paused"})
    assert await communicator.receive_json_from() == {"type": "state", "state": "paused", "reason": None}
    await communicator.disconnect()


@database_sync_to_async
def playing_game(index, numbers=()):
    game = Game.objects.create(classic_line_types=["horizontal"], state=Game.PLAYING)
    Selection.objects.create(game=game, index=index)
    for n in numbers:
        game.record_draw(DrawnNumber(letter=letter_for(n), number=n, timestamp=game.created_at))
    return game


@database_sync_to_async
def reload(game):
    game.refresh_from_db()
    return game


@pytest.mark.django_db(transaction=True)
async def test_winning_check_is_announced():
    top_row = [n for i, n in enumerate(get_card(1)) if position_to_cell(i)[0] == 0]
    game = await playing_game(1, top_row)
    communicator = await connect(game.id)
    await communicator.send_json_to({"action": "check", "index": 1})
    first = await communicator.receive_json_from()
    second = await communicator.receive_json_from()
    messages = {m["type"]: m for m in (first, second)}

    assert messages["check"]["ok"] is True
    assert messages["check"]["won"] is True
    assert messages["check"]["units"] == ["row:0"]
    assert messages["winner"]["index"] == 1
    assert messages["winner"]["units"] == ["row:0"]
    assert messages["winner"]["mask"][0] == [True] * 5
    assert await communicator.receive_nothing()
    await communicator.disconnect()

    game = await reload(game)
    assert game.state == Game.COMPLETED
    assert game.winner_index == 1


@pytest.mark.django_db(transaction=True)
async def test_losing_check_disqualifies():
    game = await playing_game(2)
    communicator = await connect(game.id)
    await communicator.send_json_to({"action": "check", "index": 2})
    verdict = await communicator.receive_json_from()
    assert verdict["type"] == "check"
    assert verdict["ok"] is False
    assert verdict["reason"] == "not_bingo"
    assert await communicator.receive_json_from() == {"type": "disqualified", "index": 2, "reason": "not_bingo"}

    await communicator.send_json_to({"action": "check", "index": 2})
    assert await communicator.receive_json_from() == {"type": "check", "ok": False, "reason": "disqualified"}
    await communicator.disconnect()


@pytest.mark.django_db(transaction=True)
async def test_draw_is_relayed():
    game = await playing_game(3)
    communicator = await connect(game.id)
    _, result = await database_sync_to_async(draw_next)(game.id)
    message = await communicator.receive_json_from()
    assert message == {"type": "call", "letter": result.letter, "number": result.number, "count": 1}
    await communicator.disconnect()
