"""DRF authentication backed by the bearer tokens from ``tokens``."""

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from apps.common.errors import Unauthorized

from .models import User
from .tokens import ACCESS, decode_token


class BearerTokenAuthentication(BaseAuthentication):
    """Authenticate ``Authorization: Bearer <token>`` requests.

    Requests without the header stay anonymous so permission classes decide
    whether the endpoint is public. A malformed, expired or refresh-type
    token, or a token for a missing or inactive account, is rejected with
    401 and a ``WWW-Authenticate`` challenge.
    """

    keyword = "Bearer"

    def authenticate(self, request):
        parts = get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword.lower().encode():
            return None
        if len(parts) != 2:
            raise exceptions.AuthenticationFailed("Invalid bearer header")

        try:
            claims = decode_token(parts[1].decode("latin-1"), ACCESS)
        except Unauthorized as e:
            raise exceptions.AuthenticationFailed(e.message) from e

        user = User.objects.filter(pk=int(claims["sub"])).first()
        if user is None or not user.is_active:
            raise exceptions.AuthenticationFailed("Account is inactive or does not exist")
        return (user, claims)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
