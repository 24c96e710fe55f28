from django.contrib.auth import get_user_model
from rest_framework import exceptions, serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .utils import display_name_for, get_role_for_user, normalize_email

User = get_user_model()


class PosTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Login with username or email; the response carries the operator role."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = get_role_for_user(user)
        return token

    def validate(self, attrs):
        username = attrs.get(self.username_field)
        if username and "@" in username:
            matches = User.objects.filter(email__iexact=normalize_email(username))
            if matches.count() > 1:
                raise exceptions.AuthenticationFailed(
                    "Several accounts use this email. Sign in with your username.",
                    code="email_not_unique",
                )
            user_by_email = matches.first()
            if user_by_email:
                attrs[self.username_field] = user_by_email.username

        data = super().validate(attrs)
        data.update(
            {
                "user": {
                    "id": self.user.id,
                    "username": self.user.username,
                    "email": self.user.email,
                    "role": get_role_for_user(self.user),
                    "display_name": display_name_for(self.user),
                },
            }
        )
        return data


class MeSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField(allow_blank=True, required=False)
    role = serializers.SerializerMethodField()
    display_name = serializers.SerializerMethodField()

    def get_role(self, obj):
        return get_role_for_user(obj)

    def get_display_name(self, obj):
        return display_name_for(obj)


class CashierSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField(allow_blank=True, required=False)
    display_name = serializers.SerializerMethodField()

    def get_display_name(self, obj):
        return display_name_for(obj)
