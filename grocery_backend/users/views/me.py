# users/views/me.py

from drf_spectacular.utils import extend_schema
from rest_framework import serializers
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import effective_capabilities_for


class MeSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    email = serializers.EmailField()
    displayName = serializers.CharField(source="display_name")
    phone = serializers.CharField()
    role = serializers.CharField()
    capabilities = serializers.SerializerMethodField()

    def get_capabilities(self, user) -> list[str]:
        request = self.context.get("request")
        return sorted(effective_capabilities_for(request, user))


class MeView(APIView):
    """
    Storefront clients use `capabilities` to decide which back-office
    screens to show; the API still checks them on every call.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = MeSerializer

    @extend_schema(
        responses={200: MeSerializer},
        description="Current user profile, role and effective capabilities",
    )
    def get(self, request):
        return Response(MeSerializer(request.user, context={"request": request}).data)
