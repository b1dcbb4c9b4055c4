from django.urls import path
from . import views

urlpatterns = [
    # Items
    path('items', views.item_list, name='item-list'),
    path('items/search', views.search_items, name='item-search'),
    path('items/statistics', views.item_statistics, name='item-statistics'),

    # Products
    path('items/products', views.ProductListView.as_view(), name='product-list'),
    path('items/products/low-stock', views.low_stock_products, name='product-low-stock'),
    path('items/products/category/<str:category_id>', views.products_by_category, name='product-by-category'),
    path('items/products/<str:product_id>/variations', views.product_variations, name='product-variations'),
    path('items/products/<str:product_id>/unit-pricing', views.product_unit_pricing, name='product-unit-pricing'),
    path('items/products/<str:product_id>', views.ProductDetailView.as_view(), name='product-detail'),

    # Variations
    path('items/variations/<str:variation_id>/unit-pricing', views.variation_unit_pricing, name='variation-unit-pricing'),
    path('items/variations/<str:variation_id>', views.VariationDetailView.as_view(), name='variation-detail'),

    # Bundles & recipes
    path('items/bundles', views.BundleListView.as_view(), name='bundle-list'),
    path('items/bundles/<str:bundle_id>', views.BundleDetailView.as_view(), name='bundle-detail'),
    path('items/recipes', views.RecipeListView.as_view(), name='recipe-list'),

    # Categories & modifiers
    path('items/categories', views.CategoryListView.as_view(), name='category-list'),
    path('items/categories/<str:category_id>', views.CategoryDetailView.as_view(), name='category-detail'),
    path('items/modifiers', views.ModifierListView.as_view(), name='modifier-list'),
    path('items/modifiers/<str:modifier_id>', views.ModifierDetailView.as_view(), name='modifier-detail'),

    path('items/<str:item_id>', views.item_detail, name='item-detail'),
]
