from django.urls import path

from .views import DeliveryPricingView, ResolveMapLinkView, OrderProofsView

urlpatterns = [
    path("pricing/", DeliveryPricingView.as_view(), name="delivery-pricing"),
    path("utils/resolve-map/", ResolveMapLinkView.as_view(), name="resolve-map"),
    path("orders/<int:order_id>/proofs/", OrderProofsView.as_view(), name="order-proofs"),
]
