"""
Bearer-token authentication for the API
"""
import logging

from drf_spectacular.extensions import OpenApiAuthenticationExtension
from drf_spectacular.plumbing import build_bearer_security_scheme_object
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

from apps.accounts.models import User
from apps.accounts.tokens import decode_token
from apps.core.exceptions import AuthenticationException

logger = logging.getLogger(__name__)


class JWTAuthentication(BaseAuthentication):
    """
    Authenticate requests carrying `Authorization: Bearer <token>`.

    Requests without the header stay anonymous; a bad token is rejected.
    """
    keyword = b'bearer'

    def authenticate(self, request):
        header = get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword:
            return None
        if len(header) != 2:
            raise AuthenticationFailed("Invalid token header")

        try:
            payload = decode_token(header[1].decode())
        except (AuthenticationException, UnicodeError) as e:
            raise AuthenticationFailed(getattr(e, 'message', "Invalid token"))

        user = User.objects.filter(pk=payload['id']).first()
        if user is None or not user.is_active:
            raise AuthenticationFailed("User not found or inactive")
        return user, payload

    def authenticate_header(self, request):
        return 'Bearer'


class JWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = 'api.authentication.JWTAuthentication'
    name = 'BearerAuth'

    def get_security_definition(self, auto_schema):
        return build_bearer_security_scheme_object(
            header_name='Authorization',
            token_prefix='Bearer',
            bearer_format='JWT',
        )
