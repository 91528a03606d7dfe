from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "FoodHub Admin"
admin.site.site_title = "FoodHub Admin Portal"
admin.site.index_title = "Platform administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('api.urls')),
]
