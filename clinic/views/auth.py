"""
Authentication and registration views.

Login hands out both a legacy DRF token and a SimpleJWT pair so either
``Authorization: Token ...`` or ``Authorization: Bearer ...`` works
against the rest of the API.  The role is always read from the account;
a role sent by the client is ignored.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from clinic.models import User
from clinic.permissions import IsAdminRole
from clinic.serializers.auth import LoginSerializer, RegisterDoctorSerializer, RegisterPatientSerializer
from clinic.services import accounts
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)


def serialize_user(user: User) -> dict:
    data = {
        'id': user.id,
        'username': user.username,
        'name': user.get_full_name() or user.username,
        'email': user.email,
        'role': user.role,
    }
    doctor = getattr(user, 'doctor_profile', None)
    if doctor is not None:
        data['doctorId'] = doctor.code
    return data


def _issue_tokens(user: User) -> dict:
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return {
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    user = authenticate(request, username=username, password=s.validated_data['password'])
    if not user:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'username': username, 'ip': request.META.get('REMOTE_ADDR')})
        logger.info('Failed login for %s', username)
        return Response({'ok': False, 'error': {'code': 'invalid_credentials',
                                                'message': 'Invalid username or password'}},
                        status=status.HTTP_400_BAD_REQUEST)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    return Response({'ok': True, **_issue_tokens(user), 'role': user.role, 'user': serialize_user(user)})

# ScopedRateThrottle reads throttle_scope from the generated view class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def register_patient(request):
    s = RegisterPatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, _profile = accounts.register_patient(**s.validated_data)
    return Response({'ok': True, 'message': 'Patient registered successfully', 'user': serialize_user(user)},
                    status=status.HTTP_201_CREATED)

register_patient.cls.throttle_scope = 'register'


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def register_doctor(request):
    s = RegisterDoctorSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, profile = accounts.register_doctor(request.user, **s.validated_data)
    return Response({'ok': True, 'message': 'Doctor registered successfully', 'user': serialize_user(user),
                     'doctorId': profile.code}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    return Response({'ok': True, 'user': serialize_user(request.user)})


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    resp = TokenRefreshView.as_view()(request._request)
    data = dict(resp.data)
    if 'access' in data:
        data['jwt_access'] = data.pop('access')
    if 'refresh' in data:
        data['jwt_refresh'] = data.pop('refresh')
    return Response(data, status=resp.status_code)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or every outstanding one of the caller."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            return Response({'ok': False, 'error': {'code': 'token_not_valid', 'message': str(e)}},
                            status=status.HTTP_400_BAD_REQUEST)
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})
