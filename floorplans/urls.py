from django.urls import path
from . import views

urlpatterns = [
    path('floorplans', views.FloorPlanListView.as_view(), name='floorplan-list'),
    path('floorplans/<str:floor_plan_id>', views.FloorPlanDetailView.as_view(), name='floorplan-detail'),
]
