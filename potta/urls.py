from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from rest_framework import permissions
from django.conf import settings

# Setup Swagger schema view
schema_view = get_schema_view(
    openapi.Info(
        title=settings.POTTA_API['TITLE'],
        default_version=f"v{settings.POTTA_API['VERSION']}",
        description=settings.POTTA_API['DESCRIPTION'],
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('api/', include('inventory.urls')),
    path('api/', include('tables.urls')),
    path('api/', include('floorplans.urls')),
    path('api/', include('staff.urls')),
    path('api/', include('orders.urls')),
    path('api/', include('taxes.urls')),
    path('api/', include('discounts.urls')),
    path('api/', include('operations.urls')),
    path('api/', include('customers.urls')),
    path('api/', include('sync.urls')),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
]
