import logging
from rest_framework_simplejwt.views import TokenObtainPairView

from .serializers import CustomTokenObtainPairSerializer

logger = logging.getLogger(__name__)


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Issues an access/refresh token pair for an administrator account.

    The login response carries the user's details, including `is_staff`,
    so a client can tell whether the admin endpoints are open to it.
    """
    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        logger.info("Issued tokens for %s", request.data.get('username'))
        return response
