from django.urls import path
from . import views

urlpatterns = [
    path("linktrail", views.linktrail_api, name="api-linktrail"),
    path("siteconfig", views.siteconfig_api, name="api-siteconfig"),
]
