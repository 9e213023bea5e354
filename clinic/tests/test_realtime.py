"""
Roster update WebSocket: who may subscribe, and what subscribers receive.

Socket tests use transactional databases because the Channels auth
middleware looks users up from another thread.
"""
import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from rest_framework.authtoken.models import Token

from carepoint.asgi import application
from clinic.services.scheduling import UPDATES_GROUP


def open_socket(path):
    async def run():
        communicator = WebsocketCommunicator(application, path)
        connected, code = await communicator.connect()
        if connected:
            await communicator.disconnect()
        return connected, code
    return async_to_sync(run)()


@pytest.mark.django_db(transaction=True)
def test_anonymous_socket_is_closed_with_4001():
    connected, code = open_socket('/ws/schedules/')
    assert not connected
    assert code == 4001


@pytest.mark.django_db(transaction=True)
def test_unknown_or_inactive_token_is_closed(patient_user):
    assert open_socket('/ws/schedules/?token=not-a-real-key') == (False, 4001)

    token = Token.objects.create(user=patient_user)
    patient_user.is_active = False
    patient_user.save(update_fields=['is_active'])
    assert open_socket(f'/ws/schedules/?token={token.key}') == (False, 4001)


@pytest.mark.django_db(transaction=True)
def test_token_socket_receives_schedule_changes(admin_user):
    token = Token.objects.create(user=admin_user)
    event = {
        'type': 'schedule.changed',
        'action': 'created',
        'shift': {'id': 1, 'staffId': 7, 'shiftDate': '2024-06-03', 'startTime': '09:00', 'endTime': '10:00'},
    }

    async def run():
        communicator = WebsocketCommunicator(application, f'/ws/schedules/?token={token.key}')
        connected, _ = await communicator.connect()
        assert connected
        welcome = await communicator.receive_json_from()
        await get_channel_layer().group_send(UPDATES_GROUP, event)
        received = await communicator.receive_json_from()
        await communicator.disconnect()
        return welcome, received

    welcome, received = async_to_sync(run)()
    assert welcome['type'] == 'welcome'
    assert received == event
