from django.urls import path

from . import views

urlpatterns = [
    path('auth/check', views.AuthCheckView.as_view(), name='auth-check'),

    path('users/', views.UserListView.as_view(), name='user-list'),
    path('users/create', views.UserCreateView.as_view(), name='user-create'),
    path('users/login', views.UserLoginView.as_view(), name='user-login'),
    path('users/profile', views.UserProfileView.as_view(), name='user-profile'),

    path('doctors/', views.DoctorListView.as_view(), name='doctor-list'),
    path('doctors/create', views.DoctorCreateView.as_view(), name='doctor-create'),
    path('doctors/login', views.DoctorLoginView.as_view(), name='doctor-login'),
    path('doctors/profile', views.DoctorProfileView.as_view(), name='doctor-profile'),
    path('doctors/prescriptions-with-items', views.DoctorPrescriptionsWithItemsView.as_view(),
         name='doctor-prescriptions-with-items'),
    path('doctors/<int:doctor_id>/', views.DoctorDetailView.as_view(), name='doctor-detail'),

    path('prescriptions/', views.UserPrescriptionListView.as_view(), name='prescription-list'),
    path('prescriptions/create', views.PrescriptionCreateView.as_view(), name='prescription-create'),
    path('prescriptions/with-items', views.UserPrescriptionsWithItemsView.as_view(),
         name='prescription-with-items'),
    path('prescriptions/<int:prescription_id>/', views.PrescriptionDetailView.as_view(),
         name='prescription-detail'),
    path('prescriptions/<int:prescription_id>/seen', views.PrescriptionSeenView.as_view(),
         name='prescription-seen'),

    path('items/', views.PrescriptionItemListView.as_view(), name='item-list'),
    path('items/create', views.ItemCreateView.as_view(), name='item-create'),
    path('items/<int:item_id>/', views.ItemDetailView.as_view(), name='item-detail'),
    path('items/<int:item_id>/doc-reason', views.ItemDocReasonView.as_view(), name='item-doc-reason'),
]
