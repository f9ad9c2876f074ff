"""
URL configuration for license ledger endpoints.
"""

from django.urls import path

from api.licenses import views

app_name = "licenses"

urlpatterns = [
    path("list", views.ListLicensesView.as_view(), name="list-licenses"),
    path("stats", views.LicenseStatsView.as_view(), name="license-stats"),
    path("add", views.AddLicenseView.as_view(), name="add-license"),
    path("add-multiple", views.AddLicensesView.as_view(), name="add-licenses"),
    path("import", views.ImportLicensesView.as_view(), name="import-licenses"),
    path("remove", views.RemoveLicenseView.as_view(), name="remove-license"),
    path("resend", views.ResendLicenseEmailView.as_view(), name="resend-license-email"),
    path("update-email", views.UpdateLicenseEmailView.as_view(), name="update-license-email"),
    path("activate", views.ActivateLicenseView.as_view(), name="activate-license"),
    path("verify", views.VerifyLicenseView.as_view(), name="verify-license"),
    path("export", views.ExportLicensesView.as_view(), name="export-licenses"),
    path("email-status", views.EmailStatusView.as_view(), name="sync-email-statuses"),
    path("purchase", views.PurchaseLicensesView.as_view(), name="purchase-licenses"),
]
