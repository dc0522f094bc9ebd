from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole
from common.responses import success_response
from services import order_management
from services.exceptions import OrderValidationError
from services.geocoding import resolve_coordinates
from services.proofs import proof_url
from .models import DeliveryPricing
from .serializers import DeliveryPricingSerializer


class DeliveryPricingView(APIView):
    """
    GET: Fare table currently in force (any signed-in user).
    PUT: Admins publish a new fare table; older ones are kept.
    """

    def get_permissions(self):
        if self.request.method == "PUT":
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def get(self, request):
        pricing = DeliveryPricing.current()
        data = DeliveryPricingSerializer(pricing).data if pricing else None
        return success_response(pricing=data)

    def put(self, request):
        serializer = DeliveryPricingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        pricing = serializer.save(created_by=request.user)
        return success_response("Pricing updated", pricing=DeliveryPricingSerializer(pricing).data)


class ResolveMapLinkView(APIView):
    """
    GET ?url=...: Coordinates behind a map link.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        url = (request.query_params.get("url") or "").strip()
        if not url:
            raise OrderValidationError("url is required")

        coords = resolve_coordinates(url)
        if coords is None:
            raise OrderValidationError("Could not read coordinates from this link")
        return success_response(**coords.as_dict())


class OrderProofsView(APIView):
    """
    GET: Pickup and delivery evidence for an order the caller is part of.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id: int):
        refs = order_management.get_order_proofs(request.user, order_id)
        return success_response(
            pickup=[{"ref": ref, "url": proof_url(ref)} for ref in refs["pickup"]],
            delivery=[{"ref": ref, "url": proof_url(ref)} for ref in refs["delivery"]],
        )
