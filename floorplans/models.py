from django.db import models


class FloorPlan(models.Model):
    floor_plan_id = models.CharField(primary_key=True, max_length=50, db_column='floorPlanId')
    floor_name = models.CharField(max_length=100, db_column='floorName')
    floor_number = models.IntegerField(default=1, db_column='floorNumber')
    is_active = models.BooleanField(default=True, db_column='isActive')
    canvas_width = models.FloatField(default=1200, db_column='canvasWidth')
    canvas_height = models.FloatField(default=800, db_column='canvasHeight')
    grid_spacing = models.IntegerField(default=20, db_column='gridSpacing')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')

    @property
    def display_name(self):
        return f"{self.floor_name} (Floor {self.floor_number})"

    def __str__(self):
        return self.display_name

    class Meta:
        managed = False
        db_table = 'FloorPlans'
        ordering = ['floor_number']


class FloorPlanElement(models.Model):
    floor_plan_element_id = models.CharField(primary_key=True, max_length=50, db_column='floorPlanElementId')
    floor_plan = models.ForeignKey(
        FloorPlan, on_delete=models.DO_NOTHING, db_constraint=False,
        db_column='floorPlanId', related_name='elements'
    )
    element_id = models.CharField(max_length=50, null=True, blank=True, db_column='elementId')
    table_id = models.CharField(max_length=50, null=True, blank=True, db_column='tableId')
    element_type = models.CharField(max_length=50, db_column='elementType')
    x_position = models.FloatField(default=0, db_column='xPosition')
    y_position = models.FloatField(default=0, db_column='yPosition')
    width = models.FloatField(default=0, db_column='width')
    height = models.FloatField(default=0, db_column='height')
    rotation = models.FloatField(default=0, db_column='rotation')
    z_index = models.IntegerField(default=0, db_column='zIndex')
    custom_color = models.CharField(max_length=20, null=True, blank=True, db_column='customColor')
    custom_label = models.CharField(max_length=100, null=True, blank=True, db_column='customLabel')
    is_locked = models.BooleanField(default=False, db_column='isLocked')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')

    @property
    def is_table(self):
        return bool(self.table_id)

    @property
    def is_clickable(self):
        return self.is_table and not self.is_locked

    def __str__(self):
        return f"{self.element_type} on {self.floor_plan_id}"

    class Meta:
        managed = False
        db_table = 'FloorPlanElements'
        ordering = ['z_index', 'created_date']
