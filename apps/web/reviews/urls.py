"""
Review URL routes.
"""

from django.urls import path

from . import views

app_name = "reviews"

urlpatterns = [
    path("restaurants/<int:restaurant_id>/reviews/", views.for_restaurant, name="for_restaurant"),
    path("restaurants/<int:restaurant_id>/reviews/create/", views.create, name="create"),
    path(
        "restaurants/<int:restaurant_id>/reviews/mine/delete/",
        views.delete_mine,
        name="delete_mine",
    ),
    path("reviews/<str:review_id>/edit/", views.edit, name="edit"),
    path("reviews/<str:review_id>/delete/", views.delete, name="delete"),
    path("profile/reviews/", views.my_reviews, name="my"),
]
