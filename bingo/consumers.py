from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .gameplay import GameError, check_claim, group_name


class GameConsumer(AsyncJsonWebsocketConsumer):
    async def connect(self):
        self.game_id = int(self.scope['url_route']['kwargs']['game_id'])
        self.group_name = group_name(self.game_id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive_json(self, content, **kwargs):
        action = content.get('action')
        if action == 'check':
            await self.handle_check(content.get('index'))
        elif action == 'ping':
            await self.send_json({'type': 'pong'})
        else:
            await self.send_json({'type': 'error', 'reason': 'unknown_action'})

    @database_sync_to_async
    def _check(self, index: int):
        try:
            return check_claim(self.game_id, index).to_dict()
        except GameError as e:
            return {'ok': False, 'reason': e.reason}

    async def handle_check(self, index):
        try:
            index = int(index)
        except (TypeError, ValueError):
            await self.send_json({'type': 'check', 'ok': False, 'reason': 'missing_index'})
            return
        result = await self._check(index)
        # The winner broadcast reaches everyone in the group; the claimer also gets the full verdict
        await self.send_json({'type': 'check', **result})
        if not result.get('ok') and result.get('reason') in ('not_bingo', 'too_late', 'not_achieved'):
            await self.send_json({'type': 'disqualified', 'index': index, 'reason': result.get('reason')})

    async def call_drawn(self, event):
        await self.send_json({
            'type': 'call',
            'letter': event.get('letter'),
            'number': event.get('number'),
            'count': event.get('count'),
        })

    async def announce_winner(self, event):
        await self.send_json({
            'type': 'winner',
            'index': event.get('index'),
            'units': event.get('units'),
            'mask': event.get('mask'),
        })

    async def game_state(self, event):
        await self.send_json({
            'type': 'state',
            'state': event.get('state'),
            'reason': event.get('reason'),
        })
