from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    # DJANGO ADMIN (CRUD FOR VOLUNTEERS / TASKS / LEDGERS)
    path("admin/", admin.site.urls),

    # CRON TRIGGERS (SECRET-GATED)
    path("", include("notifications.urls")),
]

admin.site.site_header = "Volunteer Hub Administration"
admin.site.site_title = "Volunteer Hub Admin"
