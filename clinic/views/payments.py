from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import Payment
from clinic.permissions import IsAdminRole
from clinic.serializers.billing import PaymentCreateSerializer, PaymentVerifySerializer
from clinic.services import payments as payment_service


def serialize_payment(p: Payment) -> dict:
    return {
        'transactionId': str(p.transaction_id),
        'userId': p.user_id,
        'amount': str(p.amount),
        'method': p.method,
        'status': p.status,
        'details': p.details or {},
        'createdAt': p.created_at.isoformat() if p.created_at else None,
    }


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_payment(request):
    s = PaymentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    payment = payment_service.process_payment(request.user, s.validated_data['method'], s.validated_data['details'])
    return Response({
        'ok': True,
        'message': 'Payment processed successfully',
        'data': {
            'transactionId': str(payment.transaction_id),
            'status': payment.status,
            'amount': str(payment.amount),
            'method': payment.method,
        },
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_payments(request):
    qs = Payment.objects.filter(user=request.user).order_by('-created_at', '-id')
    return Response({'ok': True, 'data': [serialize_payment(p) for p in qs]})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def verify_payment(request):
    """Finalise a pending cash payment as Processed or Failed."""
    s = PaymentVerifySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    payment = get_object_or_404(Payment, transaction_id=s.validated_data['transactionId'])
    payment_service.verify_cash_payment(payment, s.validated_data['finalStatus'], actor=request.user)
    return Response({'ok': True, 'data': serialize_payment(payment)})
