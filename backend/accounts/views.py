from django.contrib.auth import get_user_model
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .models import UserProfile
from .permissions import AdminPermission
from .serializers import CashierSerializer, MeSerializer, PosTokenObtainPairSerializer
from .utils import get_role_for_user

User = get_user_model()


class LoginView(TokenObtainPairView):
    serializer_class = PosTokenObtainPairSerializer
    permission_classes = [permissions.AllowAny]


class RefreshView(TokenRefreshView):
    permission_classes = [permissions.AllowAny]


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)


class CashierListView(APIView):
    permission_classes = [permissions.IsAuthenticated, AdminPermission]

    def get(self, request):
        users = User.objects.filter(is_active=True).select_related("profile").order_by("username")
        cashiers = [user for user in users if get_role_for_user(user) == UserProfile.ROLE_CASHIER]
        return Response(CashierSerializer(cashiers, many=True).data)
