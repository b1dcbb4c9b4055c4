from django.db.models import Count
from rest_framework import generics

from core.mixins import EnvelopeMixin
from .models import FloorPlan
from .serializers import FloorPlanListSerializer, FloorPlanDetailSerializer


class FloorPlanListView(EnvelopeMixin, generics.ListAPIView):
    """List active floor plans with their element counts"""
    queryset = FloorPlan.objects.filter(is_active=True).annotate(element_count=Count('elements')).order_by('floor_number')
    serializer_class = FloorPlanListSerializer
    list_message = 'Floor plans retrieved successfully'


class FloorPlanDetailView(EnvelopeMixin, generics.RetrieveAPIView):
    """Canvas settings and elements of one floor plan, tables embedded"""
    queryset = FloorPlan.objects.all()
    serializer_class = FloorPlanDetailSerializer
    lookup_field = 'floor_plan_id'
    not_found_error = 'Floor plan not found'
    retrieve_message = 'Floor plan retrieved successfully'
