from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Q
from rest_framework import serializers

from core.formatting import format_currency, to_decimal
from .models import (
    Category, Product, ProductVariation, ProductAttribute, ProductAttributeValue,
    BundleItem, BundleComponent, Modifier, ProductUnitPricing,
)


class CategorySerializer(serializers.ModelSerializer):
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['category_id', 'category_name', 'description', 'is_active', 'created_date', 'item_count']

    def get_item_count(self, obj):
        return Product.objects.filter(
            Q(category_id=obj.category_id) | Q(categories__icontains=obj.category_id)
        ).count()


class ProductVariationSerializer(serializers.ModelSerializer):
    parent_product_id = serializers.CharField(source='parent_product.product_id', read_only=True)
    full_display_name = serializers.ReadOnlyField()
    formatted_price = serializers.SerializerMethodField()

    class Meta:
        model = ProductVariation
        fields = [
            'variation_id', 'parent_product_id', 'sku', 'name', 'full_display_name',
            'cost', 'sales_price', 'formatted_price', 'inventory_on_hand', 'reorder_point',
            'image_path', 'status', 'created_date', 'modified_date',
        ]

    def get_formatted_price(self, obj):
        return format_currency(obj.sales_price)


class ProductSerializer(serializers.ModelSerializer):
    category_list = serializers.ReadOnlyField()
    is_low_stock = serializers.ReadOnlyField()
    stock_info = serializers.ReadOnlyField()
    formatted_price = serializers.ReadOnlyField()
    status_display = serializers.ReadOnlyField()
    categories_display = serializers.ReadOnlyField()

    class Meta:
        model = Product
        fields = [
            'product_id', 'name', 'sku', 'type', 'description', 'cost', 'sales_price',
            'image_path', 'inventory_on_hand', 'reorder_point', 'status', 'taxable', 'tax_id',
            'created_date', 'modified_date', 'unit_of_measure', 'category_id', 'category_list',
            'has_variations', 'variation_count', 'is_ingredient', 'cost_per_unit',
            'purchase_unit', 'recipe_unit', 'conversion_factor', 'purchase_mode',
            'is_low_stock', 'stock_info', 'formatted_price', 'status_display', 'categories_display',
        ]


class ProductDetailSerializer(ProductSerializer):
    variations = serializers.SerializerMethodField()

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ['variations']

    def get_variations(self, obj):
        if not obj.has_variations:
            return []
        variations = obj.variations.filter(status=True).select_related('parent_product')
        return ProductVariationSerializer(variations, many=True).data


class ProductAttributeValueSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductAttributeValue
        fields = ['value_id', 'value_name']


class ProductAttributeSerializer(serializers.ModelSerializer):
    values = ProductAttributeValueSerializer(many=True, read_only=True)

    class Meta:
        model = ProductAttribute
        fields = ['attribute_id', 'attribute_name', 'values']


class BundleComponentSerializer(serializers.ModelSerializer):
    product_name = serializers.SerializerMethodField()
    unit_price = serializers.SerializerMethodField()
    total_price = serializers.SerializerMethodField()

    class Meta:
        model = BundleComponent
        fields = ['bundle_id', 'product_id', 'product_name', 'quantity', 'recipe_unit', 'unit_price', 'total_price']

    def _product(self, obj):
        products = self.context.get('products', {})
        return products.get(obj.product_id)

    def get_product_name(self, obj):
        product = self._product(obj)
        return product.name if product else None

    def get_unit_price(self, obj):
        product = self._product(obj)
        return product.sales_price if product else Decimal('0')

    def get_total_price(self, obj):
        return self.get_unit_price(obj) * obj.quantity


class BundleItemSerializer(serializers.ModelSerializer):
    type = serializers.ReadOnlyField()
    formatted_price = serializers.ReadOnlyField()
    status_display = serializers.ReadOnlyField()

    class Meta:
        model = BundleItem
        fields = [
            'bundle_id', 'name', 'sku', 'structure', 'type', 'description', 'cost', 'sales_price',
            'formatted_price', 'image_path', 'inventory_on_hand', 'reorder_point', 'status',
            'status_display', 'taxable', 'tax_id', 'created_date', 'modified_date', 'is_recipe',
            'serving_size', 'preparation_time', 'cooking_instructions',
        ]


class BundleDetailSerializer(BundleItemSerializer):
    components = serializers.SerializerMethodField()

    class Meta(BundleItemSerializer.Meta):
        fields = BundleItemSerializer.Meta.fields + ['components']

    def get_components(self, obj):
        components = list(BundleComponent.objects.filter(bundle_id=obj.bundle_id))
        products = Product.objects.in_bulk([component.product_id for component in components])
        return BundleComponentSerializer(components, many=True, context={'products': products}).data


class ModifierSerializer(serializers.ModelSerializer):
    formatted_price_change = serializers.ReadOnlyField()

    class Meta:
        model = Modifier
        fields = [
            'modifier_id', 'modifier_name', 'price_change', 'formatted_price_change',
            'description', 'recipe_id', 'is_active', 'created_date',
        ]


class ProductUnitPricingSerializer(serializers.ModelSerializer):
    """Package option; ``base_price`` (price of a single unit) comes from the context"""
    price_per_unit = serializers.SerializerMethodField()
    discount_percentage = serializers.SerializerMethodField()
    formatted_price = serializers.SerializerMethodField()

    class Meta:
        model = ProductUnitPricing
        fields = [
            'pricing_id', 'product_id', 'variation_id', 'package_name', 'units_per_package',
            'package_price', 'formatted_price', 'price_per_unit', 'discount_percentage',
            'is_default', 'is_active', 'sort_order',
        ]

    def get_price_per_unit(self, obj):
        if obj.units_per_package <= 0:
            return obj.package_price
        return (obj.package_price / obj.units_per_package).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    def get_discount_percentage(self, obj):
        base_price = to_decimal(self.context.get('base_price'))
        if base_price <= 0 or obj.units_per_package <= 0:
            return Decimal('0')
        per_unit = obj.package_price / obj.units_per_package
        percentage = (1 - per_unit / base_price) * 100
        return percentage.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    def get_formatted_price(self, obj):
        return format_currency(obj.package_price)


class ItemSerializer(serializers.Serializer):
    """Common shape for products and bundles in the merged item lists"""
    id = serializers.SerializerMethodField()
    item_type = serializers.SerializerMethodField()
    name = serializers.CharField()
    sku = serializers.CharField(allow_null=True)
    type = serializers.SerializerMethodField()
    description = serializers.CharField(allow_null=True)
    cost = serializers.DecimalField(max_digits=18, decimal_places=2)
    sales_price = serializers.DecimalField(max_digits=18, decimal_places=2)
    formatted_price = serializers.CharField()
    image_path = serializers.CharField(allow_null=True)
    inventory_on_hand = serializers.IntegerField()
    reorder_point = serializers.IntegerField()
    status = serializers.BooleanField()
    taxable = serializers.BooleanField()
    tax_id = serializers.CharField(allow_null=True)
    categories = serializers.SerializerMethodField()
    created_date = serializers.DateTimeField(allow_null=True)
    modified_date = serializers.DateTimeField(allow_null=True)

    def get_id(self, obj):
        return obj.pk

    def get_item_type(self, obj):
        return 'Bundle' if isinstance(obj, BundleItem) else 'Product'

    def get_type(self, obj):
        if isinstance(obj, BundleItem):
            return obj.type
        return obj.type or 'Product'

    def get_categories(self, obj):
        return getattr(obj, 'category_list', [])
