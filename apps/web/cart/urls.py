"""
Cart URL routes.
"""

from django.urls import path

from . import views

app_name = "cart"

urlpatterns = [
    path("", views.cart_detail, name="detail"),
    path("add/", views.add, name="add"),
    path("item/<int:item_id>/", views.update_item, name="update_item"),
    path("item/<int:item_id>/remove/", views.remove_item, name="remove_item"),
    path("clear/", views.clear, name="clear"),
]
