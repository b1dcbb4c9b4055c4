from django.urls import path
from . import views

urlpatterns = [
    path('customers', views.CustomerListView.as_view(), name='customer-list'),
    path('customers/search', views.search_customers, name='customer-search'),
    path('customers/statistics', views.customer_statistics, name='customer-statistics'),
    path('customers/<str:customer_id>', views.CustomerDetailView.as_view(), name='customer-detail'),
]
