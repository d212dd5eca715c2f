"""
API Views for the current user's identity.
Token issuance lives outside this service; requests arrive already authenticated.
"""
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .serializers import CurrentUserSerializer


@api_view(['GET'])
def current_user(request):
    """
    Return the authenticated user with role and linked employee id.

    GET /core/accounts/me/
    """
    serializer = CurrentUserSerializer(request.user)
    return Response(serializer.data, status=status.HTTP_200_OK)
