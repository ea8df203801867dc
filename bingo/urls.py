from django.urls import path
from . import views

urlpatterns = [
    path('card/<int:index>/', views.card, name='card'),
    path('api/games', views.api_create_game, name='api_create_game'),
    path('api/games/<int:game_id>', views.api_game_state, name='api_game_state'),
    path('api/games/<int:game_id>/select', views.api_select, name='api_select'),
    path('api/games/<int:game_id>/draw', views.api_draw, name='api_draw'),
    path('api/games/<int:game_id>/check', views.api_check, name='api_check'),
    path('api/games/<int:game_id>/<str:action>', views.api_transition, name='api_transition'),
    path('api/cardsets', views.api_create_card_set, name='api_create_card_set'),
]
