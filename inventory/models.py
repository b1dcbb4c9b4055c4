import json

from django.db import models

from core.formatting import format_currency


# Tables below belong to the desktop POS application; the API never migrates them.


class Category(models.Model):
    category_id = models.CharField(primary_key=True, max_length=50, db_column='categoryId')
    category_name = models.CharField(max_length=100, db_column='categoryName')
    description = models.TextField(null=True, blank=True, db_column='description')
    is_active = models.BooleanField(default=True, db_column='isActive')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')

    def __str__(self):
        return str(self.category_name)

    class Meta:
        managed = False
        db_table = 'Categories'
        ordering = ['category_name']
        verbose_name_plural = "Categories"


class Product(models.Model):
    product_id = models.CharField(primary_key=True, max_length=50, db_column='productId')
    name = models.CharField(max_length=255, db_column='name')
    sku = models.CharField(max_length=100, null=True, blank=True, db_column='sku')
    type = models.CharField(max_length=50, null=True, blank=True, db_column='type')
    description = models.TextField(null=True, blank=True, db_column='description')
    cost = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='cost')
    sales_price = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='salesPrice')
    image_path = models.CharField(max_length=500, null=True, blank=True, db_column='imagePath')
    inventory_on_hand = models.IntegerField(default=0, db_column='inventoryOnHand')
    reorder_point = models.IntegerField(default=0, db_column='reorderPoint')
    status = models.BooleanField(default=True, db_column='status')
    taxable = models.BooleanField(default=False, db_column='taxable')
    tax_id = models.CharField(max_length=50, null=True, blank=True, db_column='taxId')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')
    unit_of_measure = models.CharField(max_length=50, null=True, blank=True, db_column='unitOfMeasure')
    # JSON array of category names/ids written by the desktop app
    categories = models.TextField(null=True, blank=True, db_column='categories')
    category_id = models.CharField(max_length=50, null=True, blank=True, db_column='categoryId')
    has_variations = models.BooleanField(default=False, db_column='hasVariations')
    variation_count = models.IntegerField(default=0, db_column='variationCount')
    is_ingredient = models.BooleanField(default=False, db_column='isIngredient')
    cost_per_unit = models.DecimalField(max_digits=18, decimal_places=4, default=0, db_column='costPerUnit')
    purchase_unit = models.CharField(max_length=50, null=True, blank=True, db_column='purchaseUnit')
    recipe_unit = models.CharField(max_length=50, null=True, blank=True, db_column='recipeUnit')
    conversion_factor = models.DecimalField(max_digits=18, decimal_places=4, default=1, db_column='conversionFactor')
    purchase_mode = models.CharField(max_length=50, default='Standard', db_column='purchaseMode')

    @property
    def category_list(self):
        if not self.categories:
            return []
        try:
            parsed = json.loads(self.categories)
        except (TypeError, ValueError):
            return [part.strip() for part in self.categories.split(',') if part.strip()]
        if isinstance(parsed, list):
            return [str(entry) for entry in parsed]
        return [str(parsed)]

    @property
    def is_low_stock(self):
        return self.reorder_point > 0 and self.inventory_on_hand < self.reorder_point

    @property
    def stock_info(self):
        if self.inventory_on_hand <= 0:
            return "Out of stock"
        if self.is_low_stock:
            return f"Low stock ({self.inventory_on_hand})"
        return f"In stock ({self.inventory_on_hand})"

    @property
    def formatted_price(self):
        return format_currency(self.sales_price)

    @property
    def status_display(self):
        return "Active" if self.status else "Inactive"

    @property
    def categories_display(self):
        return ", ".join(self.category_list) or "Uncategorized"

    def __str__(self):
        return self.name

    class Meta:
        managed = False
        db_table = 'Products'
        ordering = ['name']


class ProductVariation(models.Model):
    variation_id = models.CharField(primary_key=True, max_length=50, db_column='variationId')
    parent_product = models.ForeignKey(
        Product, on_delete=models.DO_NOTHING, db_constraint=False,
        db_column='parentProductId', related_name='variations'
    )
    sku = models.CharField(max_length=100, null=True, blank=True, db_column='sku')
    name = models.CharField(max_length=255, db_column='name')
    cost = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='cost')
    sales_price = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='salesPrice')
    inventory_on_hand = models.IntegerField(default=0, db_column='inventoryOnHand')
    reorder_point = models.IntegerField(default=0, db_column='reorderPoint')
    image_path = models.CharField(max_length=500, null=True, blank=True, db_column='imagePath')
    status = models.BooleanField(default=True, db_column='status')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')

    @property
    def full_display_name(self):
        return f"{self.parent_product.name} - {self.name}"

    def __str__(self):
        return self.name

    class Meta:
        managed = False
        db_table = 'ProductVariations'
        ordering = ['name']


class ProductAttribute(models.Model):
    attribute_id = models.CharField(primary_key=True, max_length=50, db_column='attributeId')
    product = models.ForeignKey(
        Product, on_delete=models.DO_NOTHING, db_constraint=False,
        db_column='productId', related_name='attributes'
    )
    attribute_name = models.CharField(max_length=100, db_column='attributeName')

    def __str__(self):
        return self.attribute_name

    class Meta:
        managed = False
        db_table = 'ProductAttributes'
        ordering = ['attribute_name']


class ProductAttributeValue(models.Model):
    value_id = models.CharField(primary_key=True, max_length=50, db_column='valueId')
    attribute = models.ForeignKey(
        ProductAttribute, on_delete=models.DO_NOTHING, db_constraint=False,
        db_column='attributeId', related_name='values'
    )
    value_name = models.CharField(max_length=100, db_column='valueName')

    def __str__(self):
        return self.value_name

    class Meta:
        managed = False
        db_table = 'ProductAttributeValues'
        ordering = ['value_name']


class BundleItem(models.Model):
    STRUCTURE_CHOICES = [
        ("Assembly", "Assembly"),
        ("Bundle", "Bundle"),
    ]

    bundle_id = models.CharField(primary_key=True, max_length=50, db_column='bundleId')
    name = models.CharField(max_length=255, db_column='name')
    sku = models.CharField(max_length=100, null=True, blank=True, db_column='sku')
    structure = models.CharField(max_length=50, default='Assembly', choices=STRUCTURE_CHOICES, db_column='structure')
    description = models.TextField(null=True, blank=True, db_column='description')
    cost = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='cost')
    sales_price = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='salesPrice')
    image_path = models.CharField(max_length=500, null=True, blank=True, db_column='imagePath')
    inventory_on_hand = models.IntegerField(default=0, db_column='inventoryOnHand')
    reorder_point = models.IntegerField(default=0, db_column='reorderPoint')
    status = models.BooleanField(default=True, db_column='status')
    taxable = models.BooleanField(default=False, db_column='taxable')
    tax_id = models.CharField(max_length=50, null=True, blank=True, db_column='taxId')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')
    is_recipe = models.BooleanField(default=False, db_column='isRecipe')
    serving_size = models.IntegerField(default=1, db_column='servingSize')
    preparation_time = models.IntegerField(null=True, blank=True, db_column='preparationTime')
    cooking_instructions = models.TextField(null=True, blank=True, db_column='cookingInstructions')

    @property
    def type(self):
        return "Recipe" if self.is_recipe else "Bundle"

    @property
    def formatted_price(self):
        return format_currency(self.sales_price)

    @property
    def status_display(self):
        return "Active" if self.status else "Inactive"

    def __str__(self):
        return self.name

    class Meta:
        managed = False
        db_table = 'BundleItems'
        ordering = ['name']


class BundleComponent(models.Model):
    pk = models.CompositePrimaryKey('bundle_id', 'product_id')
    bundle_id = models.CharField(max_length=50, db_column='bundleId')
    product_id = models.CharField(max_length=50, db_column='productId')
    quantity = models.DecimalField(max_digits=18, decimal_places=4, default=1, db_column='quantity')
    recipe_unit = models.CharField(max_length=50, null=True, blank=True, db_column='recipeUnit')

    def __str__(self):
        return f"{self.bundle_id} <- {self.quantity} x {self.product_id}"

    class Meta:
        managed = False
        db_table = 'BundleComponents'


class Modifier(models.Model):
    modifier_id = models.CharField(primary_key=True, max_length=50, db_column='modifierId')
    modifier_name = models.CharField(max_length=255, db_column='modifierName')
    price_change = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='priceChange')
    description = models.TextField(null=True, blank=True, db_column='description')
    recipe_id = models.CharField(max_length=50, null=True, blank=True, db_column='recipeId')
    is_active = models.BooleanField(default=True, db_column='isActive')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')

    @property
    def formatted_price_change(self):
        sign = '+' if self.price_change >= 0 else '-'
        return f"{sign}{format_currency(abs(self.price_change))}"

    def __str__(self):
        return self.modifier_name

    class Meta:
        managed = False
        db_table = 'Modifiers'
        ordering = ['modifier_name']


class ProductUnitPricing(models.Model):
    """A package a product (or one of its variations) can be sold in, e.g. a crate of 24"""
    pricing_id = models.CharField(primary_key=True, max_length=50, db_column='pricingId')
    product_id = models.CharField(max_length=50, null=True, blank=True, db_column='productId')
    variation_id = models.CharField(max_length=50, null=True, blank=True, db_column='variationId')
    package_name = models.CharField(max_length=100, db_column='packageName')
    units_per_package = models.IntegerField(default=1, db_column='unitsPerPackage')
    package_price = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='packagePrice')
    is_default = models.BooleanField(default=False, db_column='isDefault')
    is_active = models.BooleanField(default=True, db_column='isActive')
    sort_order = models.IntegerField(default=0, db_column='sortOrder')

    def __str__(self):
        return f"{self.package_name} ({self.units_per_package})"

    class Meta:
        managed = False
        db_table = 'ProductUnitPricing'
        ordering = ['sort_order', 'units_per_package']
