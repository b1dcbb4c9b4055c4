from django.urls import path
from . import views

urlpatterns = [
    path('restaurant-operations/add-notes', views.add_notes, name='add-notes'),
    path('restaurant-operations/transfer-server', views.transfer_server, name='transfer-server'),
    path('restaurant-operations/shift-handover', views.shift_handover, name='shift-handover'),
    path('restaurant-operations/move-order', views.move_order, name='move-order'),

    path('restaurant-operations/print-bill', views.print_bill, name='print-bill'),
    path('restaurant-operations/print-bill/table', views.print_bill_for_table, name='print-bill-table'),
    path('restaurant-operations/print-bill/pending', views.pending_print_bills, name='print-bill-pending'),
    path('restaurant-operations/print-bill/<str:request_id>/complete', views.complete_print_bill, name='print-bill-complete'),
    path('restaurant-operations/print-bill/<str:request_id>', views.cancel_print_bill, name='print-bill-cancel'),

    path('restaurant-operations/pay-entire-bill', views.pay_entire_bill, name='pay-entire-bill'),
    path('restaurant-operations/pay-entire-bill/pending', views.pending_pay_entire_bills, name='pay-entire-bill-pending'),
    path('restaurant-operations/pay-entire-bill/<str:request_id>/complete', views.complete_pay_entire_bill, name='pay-entire-bill-complete'),
    path('restaurant-operations/pay-entire-bill/<str:request_id>', views.cancel_pay_entire_bill, name='pay-entire-bill-cancel'),

    path('restaurant-operations/refire-to-kitchen', views.refire_to_kitchen, name='refire-to-kitchen'),
    path('restaurant-operations/combine-orders', views.combine_orders, name='combine-orders'),
    path('restaurant-operations/remove-taxes-and-fees', views.remove_taxes_and_fees, name='remove-taxes-and-fees'),
]
