from django.urls import path
from . import views

urlpatterns = [
    path('taxes', views.TaxListView.as_view(), name='tax-list'),
    path('taxes/calculate', views.calculate_tax, name='tax-calculate'),
    path('taxes/breakdown', views.tax_breakdown_view, name='tax-breakdown'),
    path('taxes/<str:tax_id>', views.TaxDetailView.as_view(), name='tax-detail'),
]
