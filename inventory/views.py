from collections import Counter
from decimal import Decimal

from django.db.models import DecimalField, F, Q, Max, Sum
from django.shortcuts import get_object_or_404
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics
from rest_framework.decorators import api_view

from core.exceptions import ResourceNotFound
from core.mixins import EnvelopeMixin
from core.pagination import normalize_paging, paginate
from core.responses import api_response
from .models import (
    Category, Product, ProductVariation, ProductAttribute, BundleItem, Modifier, ProductUnitPricing,
)
from .serializers import (
    CategorySerializer, ProductSerializer, ProductDetailSerializer, ProductVariationSerializer,
    ProductAttributeSerializer, BundleItemSerializer, BundleDetailSerializer, ModifierSerializer,
    ProductUnitPricingSerializer, ItemSerializer,
)

STOCK_VALUE = DecimalField(max_digits=18, decimal_places=2)


def _sorted_items(products, bundles):
    return sorted(list(products) + list(bundles), key=lambda item: (item.name or '').lower())


# =============== ITEMS (PRODUCTS + BUNDLES) ===============

@swagger_auto_schema(
    method='get',
    operation_description="List all active products and bundles sorted by name",
)
@api_view(['GET'])
def item_list(request):
    """All sellable items: active products and active bundles"""
    items = _sorted_items(
        Product.objects.filter(status=True),
        BundleItem.objects.filter(status=True),
    )
    return api_response(ItemSerializer(items, many=True).data, f"Retrieved {len(items)} items")


@swagger_auto_schema(
    method='get',
    operation_description="Get an item by id (products are checked before bundles)",
)
@api_view(['GET'])
def item_detail(request, item_id):
    item = Product.objects.filter(product_id=item_id).first()
    if item is None:
        item = BundleItem.objects.filter(bundle_id=item_id).first()
    if item is None:
        raise ResourceNotFound('Item not found', f"No item found with ID: {item_id}")
    return api_response(ItemSerializer(item).data, 'Item retrieved successfully')


@swagger_auto_schema(
    method='get',
    operation_description="Search active products (ingredients excluded) and bundles",
    manual_parameters=[
        openapi.Parameter('search_term', openapi.IN_QUERY, description="Matched against name, sku, description, categories", type=openapi.TYPE_STRING),
        openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        openapi.Parameter('page_size', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
    ]
)
@api_view(['GET'])
def search_items(request):
    term = request.GET.get('search_term', '').strip()
    page, page_size = normalize_paging(request.GET.get('page', 1), request.GET.get('page_size', 50))

    products = Product.objects.filter(status=True, is_ingredient=False)
    bundles = BundleItem.objects.filter(status=True)
    if term:
        products = products.filter(
            Q(name__icontains=term) |
            Q(sku__icontains=term) |
            Q(description__icontains=term) |
            Q(categories__icontains=term)
        )
        bundles = bundles.filter(
            Q(name__icontains=term) |
            Q(sku__icontains=term) |
            Q(description__icontains=term)
        )

    result = paginate(_sorted_items(products, bundles), page, page_size)
    result['items'] = ItemSerializer(result['items'], many=True).data
    result['search_term'] = term
    return api_response(result, f"Found {result['total_count']} items")


@swagger_auto_schema(
    method='get',
    operation_description="Inventory statistics over products, bundles and variations",
)
@api_view(['GET'])
def item_statistics(request):
    products = Product.objects.all()
    bundles = BundleItem.objects.all()

    product_value = products.aggregate(value=Sum(F('inventory_on_hand') * F('cost'), output_field=STOCK_VALUE))['value'] or Decimal('0')
    bundle_value = bundles.aggregate(value=Sum(F('inventory_on_hand') * F('cost'), output_field=STOCK_VALUE))['value'] or Decimal('0')

    last_dates = [
        products.aggregate(last=Max('created_date'))['last'],
        bundles.aggregate(last=Max('created_date'))['last'],
    ]
    last_dates = [moment for moment in last_dates if moment is not None]

    category_counts = Counter()
    for product in products.only('categories', 'category_id'):
        names = product.category_list or ([product.category_id] if product.category_id else [])
        category_counts.update(set(names))
    most_popular = None
    if category_counts:
        # highest count first, then alphabetical
        most_popular = sorted(category_counts.items(), key=lambda entry: (-entry[1], entry[0]))[0][0]

    active_products = products.filter(status=True).count()
    active_bundles = bundles.filter(status=True).count()
    data = {
        'total_products': products.count(),
        'active_products': active_products,
        'inactive_products': products.filter(status=False).count(),
        'products_with_variations': products.filter(has_variations=True).count(),
        'low_stock_items': products.filter(reorder_point__gt=0, inventory_on_hand__lt=F('reorder_point')).count(),
        'ingredients_count': products.filter(is_ingredient=True).count(),
        'total_bundles': bundles.filter(is_recipe=False).count(),
        'total_recipes': bundles.filter(is_recipe=True).count(),
        'active_items': active_products + active_bundles,
        'inactive_items': products.filter(status=False).count() + bundles.filter(status=False).count(),
        'inventory_value': product_value + bundle_value,
        'total_variations': ProductVariation.objects.filter(status=True).count(),
        'last_item_created': max(last_dates) if last_dates else None,
        'most_popular_category': most_popular,
    }
    return api_response(data, 'Item statistics retrieved successfully')


# =============== PRODUCTS ===============

class ProductListView(EnvelopeMixin, generics.ListAPIView):
    """List active, non-ingredient products"""
    queryset = Product.objects.filter(status=True, is_ingredient=False).order_by('name')
    serializer_class = ProductSerializer
    filterset_fields = ['taxable', 'has_variations', 'category_id']
    list_message = 'Products retrieved successfully'


class ProductDetailView(EnvelopeMixin, generics.RetrieveAPIView):
    """Get a product with its variations embedded"""
    queryset = Product.objects.all()
    serializer_class = ProductDetailSerializer
    lookup_field = 'product_id'
    not_found_error = 'Product not found'
    retrieve_message = 'Product retrieved successfully'


@swagger_auto_schema(
    method='get',
    operation_description="Active products whose categoryId matches or whose categories list contains the id",
)
@api_view(['GET'])
def products_by_category(request, category_id):
    candidates = Product.objects.filter(status=True).filter(
        Q(category_id=category_id) | Q(categories__icontains=category_id)
    ).order_by('name')
    products = [
        product for product in candidates
        if product.category_id == category_id or category_id in product.category_list
    ]
    return api_response(
        ProductSerializer(products, many=True).data,
        f"Retrieved {len(products)} products in category",
    )


@swagger_auto_schema(
    method='get',
    operation_description="Products below their reorder point, most depleted first",
)
@api_view(['GET'])
def low_stock_products(request):
    products = list(Product.objects.filter(reorder_point__gt=0, inventory_on_hand__lt=F('reorder_point')))
    products.sort(key=lambda product: (product.inventory_on_hand / product.reorder_point, product.name))
    return api_response(
        ProductSerializer(products, many=True).data,
        f"Retrieved {len(products)} low stock products",
    )


@swagger_auto_schema(
    method='get',
    operation_description="Attributes (with values) and variations of a product",
)
@api_view(['GET'])
def product_variations(request, product_id):
    product = Product.objects.filter(product_id=product_id).first()
    if product is None:
        raise ResourceNotFound('Product not found', f"No product found with ID: {product_id}")

    attributes = ProductAttribute.objects.filter(product=product).prefetch_related('values')
    variations = ProductVariation.objects.filter(parent_product=product).select_related('parent_product')
    return api_response({
        'product_id': product.product_id,
        'product_name': product.name,
        'attributes': ProductAttributeSerializer(attributes, many=True).data,
        'variations': ProductVariationSerializer(variations, many=True).data,
    }, 'Product variations retrieved successfully')


class VariationDetailView(EnvelopeMixin, generics.RetrieveAPIView):
    queryset = ProductVariation.objects.select_related('parent_product')
    serializer_class = ProductVariationSerializer
    lookup_field = 'variation_id'
    not_found_error = 'Variation not found'
    retrieve_message = 'Variation retrieved successfully'


# =============== BUNDLES & RECIPES ===============

class BundleListView(EnvelopeMixin, generics.ListAPIView):
    """List active bundles and recipes"""
    queryset = BundleItem.objects.filter(status=True).order_by('name')
    serializer_class = BundleItemSerializer
    filterset_fields = ['is_recipe', 'structure']
    list_message = 'Bundles retrieved successfully'


class BundleDetailView(EnvelopeMixin, generics.RetrieveAPIView):
    """Get a bundle with its priced components"""
    queryset = BundleItem.objects.all()
    serializer_class = BundleDetailSerializer
    lookup_field = 'bundle_id'
    not_found_error = 'Bundle not found'
    retrieve_message = 'Bundle retrieved successfully'


class RecipeListView(EnvelopeMixin, generics.ListAPIView):
    queryset = BundleItem.objects.filter(status=True, is_recipe=True).order_by('name')
    serializer_class = BundleItemSerializer
    list_message = 'Recipes retrieved successfully'


# =============== CATEGORIES & MODIFIERS ===============

class CategoryListView(EnvelopeMixin, generics.ListAPIView):
    queryset = Category.objects.filter(is_active=True)
    serializer_class = CategorySerializer
    list_message = 'Categories retrieved successfully'


class CategoryDetailView(EnvelopeMixin, generics.RetrieveAPIView):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    lookup_field = 'category_id'
    not_found_error = 'Category not found'
    retrieve_message = 'Category retrieved successfully'


class ModifierListView(EnvelopeMixin, generics.ListAPIView):
    queryset = Modifier.objects.filter(is_active=True)
    serializer_class = ModifierSerializer
    list_message = 'Modifiers retrieved successfully'


class ModifierDetailView(EnvelopeMixin, generics.RetrieveAPIView):
    queryset = Modifier.objects.filter(is_active=True)
    serializer_class = ModifierSerializer
    lookup_field = 'modifier_id'
    not_found_error = 'Modifier not found'
    retrieve_message = 'Modifier retrieved successfully'


# =============== UNIT PRICING ===============

def _unit_pricing_response(options, base_price, owner_name):
    serializer = ProductUnitPricingSerializer(options, many=True, context={'base_price': base_price})
    return api_response({
        'name': owner_name,
        'base_price': base_price,
        'options': serializer.data,
    }, f"Retrieved {len(serializer.data)} pricing options")


@swagger_auto_schema(
    method='get',
    operation_description="Package pricing options for a product",
)
@api_view(['GET'])
def product_unit_pricing(request, product_id):
    product = get_object_or_404(Product, product_id=product_id)
    options = ProductUnitPricing.objects.filter(product_id=product_id, variation_id__isnull=True, is_active=True)
    return _unit_pricing_response(options, product.sales_price, product.name)


@swagger_auto_schema(
    method='get',
    operation_description="Package pricing options for a product variation",
)
@api_view(['GET'])
def variation_unit_pricing(request, variation_id):
    variation = get_object_or_404(ProductVariation.objects.select_related('parent_product'), variation_id=variation_id)
    options = ProductUnitPricing.objects.filter(variation_id=variation_id, is_active=True)
    return _unit_pricing_response(options, variation.sales_price, variation.full_display_name)
