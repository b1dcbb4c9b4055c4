from django.urls import path
from . import views

urlpatterns = [
    path('discounts', views.active_discounts, name='discount-list'),
    path('discounts/active', views.active_discounts, name='discount-active'),
    path('discounts/coupon/<str:coupon_code>', views.discount_by_coupon, name='discount-coupon'),
    path('discounts/<str:discount_id>/increment-usage', views.increment_usage, name='discount-increment-usage'),
]
