import json
import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .cards import InvalidCardError, parse_card_text, to_grid
from .gameplay import GameError, check_claim, create_game, draw_next, game_state, select_card, transition
from .models import CardSet, Game
from .utils import get_card

logger = logging.getLogger(__name__)


def _payload(request: HttpRequest) -> dict:
    # Accept JSON bodies as well as form posts
    if request.content_type == "application/json":
        try:
            data = json.loads(request.body or b"{}")
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
    return request.POST.dict()


def _error(reason: str, status: int, **extra) -> JsonResponse:
    return JsonResponse({"ok": False, "reason": reason, **extra}, status=status)


def _index(data: dict):
    raw = data.get("index")
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


@require_http_methods(["GET"])
def card(request: HttpRequest, index: int):
    index = max(1, min(settings.BINGO_CARD_LIMIT, index))
    numbers = get_card(index, limit=settings.BINGO_CARD_LIMIT)
    return JsonResponse({"ok": True, "index": index, "card": numbers, "grid": to_grid(numbers)})


@csrf_exempt
@require_http_methods(["POST"])
def api_create_game(request: HttpRequest):
    data = _payload(request)
    if "classic_line_types" in data and isinstance(data["classic_line_types"], str):
        data["classic_line_types"] = [t for t in data["classic_line_types"].split(",") if t]
    try:
        game = create_game(data)
    except (TypeError, ValueError) as e:
        # wrongly typed JSON fields (stake, allowed_late_calls) land here too
        return _error("invalid_config", 400, message=str(e))
    except GameError as e:
        return _error(e.reason, e.status)
    return JsonResponse(game_state(game), status=201)


@require_http_methods(["GET"])
def api_game_state(request: HttpRequest, game_id: int):
    game = get_object_or_404(Game, id=game_id)
    return JsonResponse(game_state(game))


@csrf_exempt
@require_http_methods(["POST"])
def api_select(request: HttpRequest, game_id: int):
    index = _index(_payload(request))
    if index is None:
        return _error("missing_index", 400)
    try:
        select_card(game_id, index)
    except GameError as e:
        return _error(e.reason, e.status)
    game = Game.objects.get(id=game_id)
    return JsonResponse({"ok": True, "index": index, "taken": list(game.selections.values_list("index", flat=True))})


@csrf_exempt
@require_http_methods(["POST"])
def api_transition(request: HttpRequest, game_id: int, action: str):
    try:
        game = transition(game_id, action)
    except GameError as e:
        return _error(e.reason, e.status)
    return JsonResponse(game_state(game))


@csrf_exempt
@require_http_methods(["POST"])
def api_draw(request: HttpRequest, game_id: int):
    try:
        game, result = draw_next(game_id)
    except GameError as e:
        return _error(e.reason, e.status)
    if not result:
        return JsonResponse({"ok": False, "reason": "exhausted", "state": game.state, "call_count": len(game.draws)})
    return JsonResponse({
        "ok": True,
        "letter": result.letter,
        "number": result.number,
        "label": result.label,
        "timestamp": result.timestamp.isoformat(),
        "call_count": len(game.draws),
    })


@csrf_exempt
@require_http_methods(["POST"])
def api_check(request: HttpRequest, game_id: int):
    index = _index(_payload(request))
    if index is None:
        return _error("missing_index", 400)
    try:
        claim = check_claim(game_id, index)
    except GameError as e:
        return _error(e.reason, e.status)
    payload = claim.to_dict()
    if not claim.ok:
        payload["disqualified"] = True
    return JsonResponse(payload)


@csrf_exempt
@require_http_methods(["POST"])
def api_create_card_set(request: HttpRequest):
    """Create a card set from CSV text, one 24-number card per line."""
    data = _payload(request)
    name = data.get("name") or ""
    text = data.get("cards") or ""
    if not isinstance(name, str) or not isinstance(text, str):
        return _error("invalid_payload", 400, message="name and cards must be text, one card per line")
    name = name.strip()
    if not name:
        return _error("missing_name", 400)
    if CardSet.objects.filter(name=name).exists():
        return _error("name_taken", 409)

    cards = []
    seen = set()
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            numbers = parse_card_text(line)
        except InvalidCardError as e:
            return _error(e.reason, 400, line=line_no, **{k: v for k, v in e.as_dict().items() if k != "reason"})
        if tuple(numbers) in seen:
            return _error("duplicate_card", 400, line=line_no)
        seen.add(tuple(numbers))
        cards.append(numbers)
    if not cards:
        return _error("no_cards", 400)

    card_set = CardSet.objects.create(name=name, cards=cards)
    logger.info("Card set %r created with %d cards", name, len(cards))
    return JsonResponse({"ok": True, "name": card_set.name, "count": len(cards)}, status=201)
