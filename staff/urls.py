from django.urls import path
from . import views

urlpatterns = [
    path('staff', views.StaffListView.as_view(), name='staff-list'),
    path('staff/login', views.staff_login, name='staff-login'),
    path('staff/codes', views.StaffCodeListView.as_view(), name='staff-codes'),
    path('staff/validate-code', views.validate_code, name='staff-validate-code'),
    path('staff/<int:staff_id>/qr-data', views.staff_qr_data, name='staff-qr-data'),
]
