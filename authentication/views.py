from rest_framework import generics, permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView
from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiExample

from .models import CustomUser
from .permissions import IsManager, actor_for_user
from .serializers import LoginSerializer, ProfileSerializer, UserSerializer


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Staff login. Returns JWT tokens together with the user's role and the
    lifecycle actor (kitchen or staff) the account acts as.
    """
    serializer_class = LoginSerializer

    @extend_schema(
        summary="Staff Login with JWT Token",
        request=LoginSerializer,
        examples=[
            OpenApiExample(
                'Kitchen Login',
                value={"email": "kitchen@kalyekafe.ph", "password": "SecurePassword123!"}
            ),
        ],
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class StaffListCreateView(generics.ListCreateAPIView):
    """
    get: List staff accounts
    post: Create a staff account (managers only)
    """
    queryset = CustomUser.objects.all().order_by('email')
    serializer_class = UserSerializer
    permission_classes = [IsManager]


class StaffDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = CustomUser.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsManager]


class MyProfileView(generics.RetrieveUpdateAPIView):
    serializer_class = ProfileSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user


@extend_schema(summary="Current account role and actor")
@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def my_role(request):
    return Response({
        'role': request.user.role,
        'actor': actor_for_user(request.user).value,
        'is_back_office': request.user.is_back_office,
        'is_kitchen': request.user.is_kitchen,
    })


@extend_schema(summary="Health check")
@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health_check(request):
    return Response({'status': 'ok', 'time': timezone.now()})
