from django.urls import path
from . import views

urlpatterns = [
    path('orders', views.create_order, name='order-create'),
    path('orders/waiting', views.WaitingTransactionListView.as_view(), name='waiting-list'),
    path('orders/waiting/<str:transaction_id>/status', views.update_transaction_status, name='waiting-status'),
    path('orders/waiting/<str:transaction_id>', views.WaitingTransactionDetailView.as_view(), name='waiting-detail'),
    path('orders/pending', views.PendingTransactionListView.as_view(), name='order-pending'),
    path('orders/statistics', views.order_statistics, name='order-statistics'),
    path('orders/staff-summary', views.staff_order_summary, name='order-staff-summary'),
    path('orders/table-summary', views.table_order_summary, name='order-table-summary'),
    path('orders/table/<str:table_id>', views.TableTransactionListView.as_view(), name='order-by-table'),
    path('orders/customer/<str:customer_id>', views.CustomerTransactionListView.as_view(), name='order-by-customer'),
]
