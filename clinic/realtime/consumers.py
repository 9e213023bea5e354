import json

from channels.generic.websocket import AsyncWebsocketConsumer
from django.contrib.auth.models import AnonymousUser

from clinic.services.scheduling import UPDATES_GROUP


class ScheduleUpdatesConsumer(AsyncWebsocketConsumer):
    """Pushes ``schedule.changed`` events to connected roster screens.

    Same audience as the REST roster: any authenticated, active user.
    Anonymous sockets are closed with 4001 before joining the group.
    """

    async def connect(self):
        user = self.scope.get("user") or AnonymousUser()
        if not user.is_authenticated or not user.is_active:
            await self.close(code=4001)
            return
        await self.channel_layer.group_add(UPDATES_GROUP, self.channel_name)
        self.joined = True
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        if getattr(self, "joined", False):
            await self.channel_layer.group_discard(UPDATES_GROUP, self.channel_name)

    async def schedule_changed(self, event):
        # event: {"type": "schedule.changed", "action": "created", "shift": {...}}
        await self.send(json.dumps(event))
