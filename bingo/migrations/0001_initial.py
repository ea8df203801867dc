import bingo.models
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CardSet",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=64, unique=True)),
                ("cards", models.JSONField(default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Game",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("stake", models.IntegerField(default=0)),
                ("category", models.CharField(choices=[("classic", "Classic"), ("modern", "Modern")], default="classic", max_length=16)),
                ("selected_pattern", models.CharField(blank=True, default="", max_length=32)),
                ("classic_lines_target", models.PositiveIntegerField(default=1)),
                ("classic_line_types", models.JSONField(default=bingo.models._default_line_types)),
                ("allowed_late_calls", models.PositiveIntegerField(blank=True, null=True)),
                ("state", models.CharField(choices=[("idle", "Idle"), ("playing", "Playing"), ("paused", "Paused"), ("completed", "Completed")], default="idle", max_length=16)),
                ("draws", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("ended_at", models.DateTimeField(blank=True, null=True)),
                ("winner_index", models.IntegerField(blank=True, null=True)),
                ("card_set", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="games", to="bingo.cardset")),
            ],
        ),
        migrations.CreateModel(
            name="Selection",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("index", models.IntegerField()),
                ("disqualified", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("game", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="selections", to="bingo.game")),
            ],
            options={
                "unique_together": {("game", "index")},
            },
        ),
    ]
