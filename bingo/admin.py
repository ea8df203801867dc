from django.contrib import admin

from .models import CardSet, Game, Selection


class SelectionInline(admin.TabularInline):
    model = Selection
    extra = 0
    readonly_fields = ("created_at",)


@admin.register(Game)
class GameAdmin(admin.ModelAdmin):
    list_display = ("id", "state", "category", "selected_pattern", "classic_lines_target", "call_count", "winner_index", "created_at")
    list_filter = ("state", "category")
    readonly_fields = ("draws", "created_at", "started_at", "ended_at")
    inlines = [SelectionInline]

    @admin.display(description="Calls")
    def call_count(self, obj: Game) -> int:
        return len(obj.draws or [])


@admin.register(CardSet)
class CardSetAdmin(admin.ModelAdmin):
    list_display = ("name", "card_count", "created_at")
    search_fields = ("name",)

    @admin.display(description="Cards")
    def card_count(self, obj: CardSet) -> int:
        return len(obj.cards or [])
