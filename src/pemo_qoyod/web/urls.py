"""
URL configuration for the sync trigger endpoint.
"""

from django.urls import path

from . import views

urlpatterns = [
    path("api/sync-invoices", views.sync_invoices, name="sync_invoices"),
]
