from typing import List

from django.conf import settings
from django.db import models
from django.utils import timezone

from .checker import CATEGORIES, DEFAULT_LINE_TYPES, RuleConfig
from .pool import DrawnNumber
from .utils import get_card


def _default_line_types():
    return list(DEFAULT_LINE_TYPES)


class CardSet(models.Model):
    name = models.CharField(max_length=64, unique=True)
    cards = models.JSONField(default=list)  # list of 24-number lists
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.name} ({len(self.cards)} cards)"

    def card(self, index: int) -> List[int]:
        return list(self.cards[index - 1])


class Game(models.Model):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"
    STATE_CHOICES = [
        (IDLE, "Idle"),
        (PLAYING, "Playing"),
        (PAUSED, "Paused"),
        (COMPLETED, "Completed"),
    ]

    card_set = models.ForeignKey(CardSet, on_delete=models.SET_NULL, null=True, blank=True, related_name="games")
    stake = models.IntegerField(default=0)
    category = models.CharField(max_length=16, choices=[(c, c.title()) for c in CATEGORIES], default="classic")
    selected_pattern = models.CharField(max_length=32, blank=True, default="")
    classic_lines_target = models.PositiveIntegerField(default=1)
    classic_line_types = models.JSONField(default=_default_line_types)
    allowed_late_calls = models.PositiveIntegerField(null=True, blank=True)
    state = models.CharField(max_length=16, choices=STATE_CHOICES, default=IDLE)
    draws = models.JSONField(default=list, blank=True)  # [{letter, number, timestamp}, ...] in call order
    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    ended_at = models.DateTimeField(null=True, blank=True)
    winner_index = models.IntegerField(null=True, blank=True)

    def __str__(self) -> str:
        return f"Game {self.id} ({self.state}, {len(self.draws)} calls)"

    def rule_config(self) -> RuleConfig:
        return RuleConfig(
            category=self.category,
            selected_pattern=self.selected_pattern or None,
            classic_lines_target=self.classic_lines_target,
            classic_line_types=self.classic_line_types or [],
        )

    def history(self) -> List[DrawnNumber]:
        return [DrawnNumber.from_dict(d) for d in self.draws]

    def card_limit(self) -> int:
        if self.card_set:
            return len(self.card_set.cards)
        return settings.BINGO_CARD_LIMIT

    def card(self, index: int) -> List[int]:
        if self.card_set:
            return self.card_set.card(index)
        return get_card(index, limit=settings.BINGO_CARD_LIMIT)

    def record_draw(self, drawn: DrawnNumber):
        self.draws = list(self.draws) + [drawn.to_dict()]
        self.save(update_fields=["draws"])

    def complete(self, winner_index=None):
        self.state = self.COMPLETED
        self.ended_at = timezone.now()
        self.winner_index = winner_index
        self.save(update_fields=["state", "ended_at", "winner_index"])


class Selection(models.Model):
    game = models.ForeignKey(Game, on_delete=models.CASCADE, related_name="selections")
    index = models.IntegerField()
    disqualified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = (
            ("game", "index"),  # one holder per cartela per game
        )
