from django.urls import path
from . import views

urlpatterns = [
    path('sync/info', views.sync_info, name='sync-info'),
    path('sync/health', views.sync_health, name='sync-health'),

    path('menu/items', views.menu_items, name='menu-items'),
    path('menu/categories', views.menu_categories, name='menu-categories'),
    path('menu/bundles', views.menu_bundles, name='menu-bundles'),
    path('menu/variations', views.menu_variations, name='menu-variations'),
    path('menu/sync', views.menu_sync, name='menu-sync'),

    path('health', views.health, name='health'),
    path('health/detailed', views.health_detailed, name='health-detailed'),
    path('health/database', views.health_database, name='health-database'),

    path('network/qr-string', views.network_qr_string, name='network-qr-string'),
]
