import time

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from bingo.gameplay import GameError, draw_next, transition
from bingo.models import Game

# seconds between state polls while the game is paused
PAUSED_POLL = 0.5


class Command(BaseCommand):
    help = "Call numbers for a game at a fixed interval until it ends"

    def add_arguments(self, parser):
        parser.add_argument("game_id", type=int)
        parser.add_argument("--interval", type=float, default=None, help="Seconds between calls")
        parser.add_argument("--max-calls", type=int, default=75)

    def handle(self, *args, **options):
        game_id = options["game_id"]
        interval = options["interval"] if options["interval"] is not None else settings.BINGO_CALL_INTERVAL
        try:
            game = Game.objects.get(id=game_id)
        except Game.DoesNotExist:
            raise CommandError(f"Game {game_id} does not exist")
        if game.state == Game.COMPLETED:
            raise CommandError(f"Game {game_id} is already completed")
        if game.state == Game.IDLE:
            transition(game_id, "start")

        self.stdout.write(self.style.SUCCESS(f"Calling game {game_id} every {interval:g}s..."))
        calls = 0
        while calls < options["max_calls"]:
            state = Game.objects.values_list("state", flat=True).get(id=game_id)
            if state == Game.COMPLETED:
                self.stdout.write("Game completed.")
                return
            if state == Game.PAUSED:
                time.sleep(max(interval, PAUSED_POLL))
                continue
            try:
                game, result = draw_next(game_id)
            except GameError as e:
                # state changed between the check and the draw
                self.stdout.write(self.style.WARNING(f"Draw skipped: {e.reason}"))
                continue
            if not result:
                self.stdout.write("No more numbers.")
                return
            calls += 1
            self.stdout.write(f"{len(game.draws):>2}. {result.label}")
            if interval > 0:
                time.sleep(interval)
        self.stdout.write(f"Stopped after {calls} calls.")
