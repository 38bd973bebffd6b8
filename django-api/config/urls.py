from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("ticketing.urls")),
    path("api/", include("fundraising.urls")),
    path("api/", include("fees.urls")),
]
