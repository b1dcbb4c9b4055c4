from django.urls import path
from . import views

urlpatterns = [
    path('tables', views.TableListView.as_view(), name='table-list'),
    path('tables/available', views.AvailableTableListView.as_view(), name='table-available'),
    path('tables/summary', views.table_summary, name='table-summary'),
    path('tables/seats/<str:seat_id>/status', views.update_seat_status, name='seat-status'),
    path('tables/<str:table_id>/seats', views.table_seats, name='table-seats'),
    path('tables/<str:table_id>/status', views.update_table_status, name='table-status'),
    path('tables/<str:table_id>', views.TableDetailView.as_view(), name='table-detail'),
]
