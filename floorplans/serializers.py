from rest_framework import serializers

from tables.models import Table
from .models import FloorPlan, FloorPlanElement


class FloorPlanTableInfoSerializer(serializers.ModelSerializer):
    display_name = serializers.ReadOnlyField()
    is_available = serializers.ReadOnlyField()
    is_occupied = serializers.ReadOnlyField()

    class Meta:
        model = Table
        fields = [
            'table_id', 'table_name', 'table_number', 'display_name', 'capacity',
            'status', 'size', 'shape', 'is_available', 'is_occupied',
        ]


class FloorPlanElementSerializer(serializers.ModelSerializer):
    floor_plan_id = serializers.CharField(read_only=True)
    is_table = serializers.ReadOnlyField()
    is_clickable = serializers.ReadOnlyField()
    table_info = serializers.SerializerMethodField()

    class Meta:
        model = FloorPlanElement
        fields = [
            'floor_plan_element_id', 'floor_plan_id', 'element_id', 'table_id', 'element_type',
            'x_position', 'y_position', 'width', 'height', 'rotation', 'z_index',
            'custom_color', 'custom_label', 'is_locked', 'created_date', 'modified_date',
            'is_table', 'is_clickable', 'table_info',
        ]

    def get_table_info(self, obj):
        # active tables are looked up once per floor plan by the parent serializer
        table = self.context.get('tables', {}).get(obj.table_id)
        if table is None:
            return None
        return FloorPlanTableInfoSerializer(table).data


class FloorPlanListSerializer(serializers.ModelSerializer):
    display_name = serializers.ReadOnlyField()
    element_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = FloorPlan
        fields = [
            'floor_plan_id', 'floor_name', 'floor_number', 'display_name', 'is_active',
            'element_count', 'created_date', 'modified_date',
        ]


class FloorPlanDetailSerializer(serializers.ModelSerializer):
    display_name = serializers.ReadOnlyField()
    elements = serializers.SerializerMethodField()

    class Meta:
        model = FloorPlan
        fields = [
            'floor_plan_id', 'floor_name', 'floor_number', 'display_name', 'is_active',
            'canvas_width', 'canvas_height', 'grid_spacing', 'created_date', 'modified_date',
            'elements',
        ]

    def get_elements(self, obj):
        elements = list(obj.elements.order_by('z_index', 'created_date'))
        table_ids = {element.table_id for element in elements if element.table_id}
        tables = {
            table.table_id: table
            for table in Table.objects.filter(table_id__in=table_ids, is_active=True)
        }
        return FloorPlanElementSerializer(elements, many=True, context={'tables': tables}).data
