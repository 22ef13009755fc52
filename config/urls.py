from django.urls import include, path

from medinfo.views import HealthView

urlpatterns = [
    path('health', HealthView.as_view(), name='health'),
    path('api/', include('medinfo.urls')),
]
