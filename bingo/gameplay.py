import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .cards import Grid, to_grid
from .checker import PATTERN_DIFFICULTY, RuleConfig, WinResult, check_call_timing, check_card
from .models import CardSet, Game, Selection
from .pool import DrawnNumber, PoolExhausted, draw

logger = logging.getLogger(__name__)

# action -> (states it may be taken from, resulting state)
TRANSITIONS = {
    "start": ({Game.IDLE}, Game.PLAYING),
    "pause": ({Game.PLAYING}, Game.PAUSED),
    "resume": ({Game.PAUSED}, Game.PLAYING),
    "end": ({Game.IDLE, Game.PLAYING, Game.PAUSED}, Game.COMPLETED),
}


class GameError(Exception):
    """A request the current game state does not allow."""

    def __init__(self, reason: str, status: int = 409):
        super().__init__(reason)
        self.reason = reason
        self.status = status


@dataclass(frozen=True)
class ClaimResult:
    ok: bool
    reason: Optional[str]
    index: int
    result: WinResult
    grid: Grid

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "reason": self.reason,
            "index": self.index,
            "grid": self.grid,
            **self.result.to_dict(),
        }


def group_name(game_id: int) -> str:
    return f"game_{game_id}"


def _group_send(game_id: int, payload: dict):
    layer = get_channel_layer()
    if not layer:
        return
    try:
        async_to_sync(layer.group_send)(group_name(game_id), payload)
    except Exception:
        logger.exception("Broadcast %s to game %s failed", payload.get("type"), game_id)


def _locked(game_id: int) -> Game:
    try:
        return Game.objects.select_for_update().get(id=game_id)
    except Game.DoesNotExist:
        raise GameError("game_not_found", status=404) from None


def create_game(data: dict) -> Game:
    config = RuleConfig.from_dict(data)  # ValueError on a bad config
    card_set = None
    name = data.get("card_set")
    if name:
        card_set = CardSet.objects.filter(name=name).first()
        if not card_set:
            raise GameError("card_set_not_found", status=404)
    late = data.get("allowed_late_calls", settings.BINGO_ALLOWED_LATE_CALLS)
    cfg = config.to_dict()
    game = Game.objects.create(
        card_set=card_set,
        stake=int(data.get("stake") or 0),
        category=cfg["category"],
        selected_pattern=cfg["selected_pattern"] or "",
        classic_lines_target=cfg["classic_lines_target"],
        classic_line_types=cfg["classic_line_types"],
        allowed_late_calls=None if late is None else max(0, int(late)),
    )
    logger.info("Game %s created: %s", game.id, cfg)
    return game


def game_state(game: Game) -> dict:
    history = game.history()
    labels = [d.label for d in history]
    config = game.rule_config()
    return {
        "ok": True,
        "game_id": game.id,
        "state": game.state,
        "stake": game.stake,
        "card_set": game.card_set.name if game.card_set else None,
        "config": config.to_dict(),
        "difficulty": PATTERN_DIFFICULTY.get(config.selected_pattern or ""),
        "allowed_late_calls": game.allowed_late_calls,
        "current_call": labels[-1] if labels else None,
        "recent_calls": labels[-5:],
        "called_numbers": labels,
        "call_count": len(labels),
        "taken": list(game.selections.values_list("index", flat=True)),
        "started_at": game.started_at.isoformat() if game.started_at else None,
        "ended_at": game.ended_at.isoformat() if game.ended_at else None,
        "winner_index": game.winner_index,
    }


def transition(game_id: int, action: str) -> Game:
    if action not in TRANSITIONS:
        raise GameError("unknown_action", status=400)
    allowed, target = TRANSITIONS[action]
    with transaction.atomic():
        game = _locked(game_id)
        if game.state not in allowed:
            raise GameError("invalid_transition")
        now = timezone.now()
        game.state = target
        if action == "start":
            game.started_at = now
        if target == Game.COMPLETED:
            game.ended_at = now
        game.save(update_fields=["state", "started_at", "ended_at"])
    logger.info("Game %s %s -> %s", game_id, action, target)
    _group_send(game_id, {"type": "game.state", "state": target})
    return game


def select_card(game_id: int, index: int) -> Selection:
    with transaction.atomic():
        game = _locked(game_id)
        if game.state == Game.COMPLETED:
            raise GameError("finished")
        if not 1 <= index <= game.card_limit():
            raise GameError("invalid_index", status=400)
        sel, created = Selection.objects.get_or_create(game=game, index=index)
        if not created:
            raise GameError("taken")
    return sel


def draw_next(game_id: int, rng=None) -> Tuple[Game, Union[DrawnNumber, PoolExhausted]]:
    with transaction.atomic():
        game = _locked(game_id)
        if game.state != Game.PLAYING:
            raise GameError("not_playing")
        result = draw(game.history(), rng=rng)
        if not result:
            game.complete()
        else:
            game.record_draw(result)
    if not result:
        logger.info("Game %s: all 75 numbers called", game_id)
        _group_send(game_id, {"type": "game.state", "state": Game.COMPLETED, "reason": "exhausted"})
    else:
        _group_send(game_id, {
            "type": "call.drawn",
            "letter": result.letter,
            "number": result.number,
            "count": len(game.draws),
        })
    return game, result


def check_claim(game_id: int, index: int) -> ClaimResult:
    """Check a bingo claim for cartela ``index``.

    A valid claim completes the game; an invalid one disqualifies the
    cartela for the rest of the game.
    """
    with transaction.atomic():
        game = _locked(game_id)
        if game.state == Game.IDLE:
            raise GameError("not_started")
        if game.state == Game.COMPLETED:
            raise GameError("finished")
        sel = Selection.objects.select_for_update().filter(game=game, index=index).first()
        if not sel:
            raise GameError("no_card")
        if sel.disqualified:
            raise GameError("disqualified")

        card = game.card(index)
        history = game.history()
        config = game.rule_config()
        result = check_card(card, history, config)
        if result.won:
            ok, reason = check_call_timing(card, history, config, game.allowed_late_calls)
        else:
            ok, reason = False, "not_bingo"

        if ok:
            game.complete(winner_index=index)
        else:
            sel.disqualified = True
            sel.save(update_fields=["disqualified"])

    if ok:
        logger.info("Game %s won by cartela %s (%s)", game_id, index, ", ".join(result.units))
        _group_send(game_id, {
            "type": "announce.winner",
            "index": index,
            "units": list(result.units),
            "mask": [list(row) for row in result.mask],
        })
    else:
        logger.info("Game %s: claim by cartela %s rejected (%s)", game_id, index, reason)
    return ClaimResult(ok=ok, reason=reason, index=index, result=result, grid=to_grid(card))
