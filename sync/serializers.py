from rest_framework import serializers

from inventory.models import Category, Product


class MenuItemSerializer(serializers.ModelSerializer):
    """Compact product shape for the mobile menu cache"""
    categories = serializers.ReadOnlyField(source='category_list')
    is_active = serializers.BooleanField(source='status', read_only=True)

    class Meta:
        model = Product
        fields = [
            'product_id', 'name', 'sku', 'type', 'categories', 'description', 'cost',
            'sales_price', 'image_path', 'inventory_on_hand', 'taxable', 'tax_id',
            'is_active', 'has_variations', 'variation_count',
        ]


class MenuCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['category_id', 'category_name', 'description', 'is_active']
