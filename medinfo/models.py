from django.db import models


class User(models.Model):
    name = models.CharField(max_length=200, blank=True, default='')
    phn_number = models.CharField(max_length=30, blank=True, default='', db_column='phnNumber')
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'users'


class Doctor(models.Model):
    name = models.CharField(max_length=200, blank=True, default='')
    phn_number = models.CharField(max_length=30, blank=True, default='', db_column='phnNumber')
    speciality = models.CharField(max_length=100, blank=True, default='')
    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=255)
    accuracy = models.FloatField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'doctors'


class Prescription(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='prescriptions', db_column='userId')
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='prescriptions', db_column='docId')
    symptoms = models.TextField(blank=True, default='')
    # 上传成功之前为空
    link = models.TextField(blank=True, default='')
    seen_by_patient = models.BooleanField(default=False, db_column='seenByPatient')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'prescriptions'
        ordering = ['-created_at', '-id']


class Item(models.Model):
    TYPE_TEST = 'test'
    TYPE_MEDICINE = 'med'
    TYPE_CHOICES = [
        (TYPE_TEST, 'Test'),
        (TYPE_MEDICINE, 'Medicine'),
    ]

    prescription = models.ForeignKey(Prescription, on_delete=models.CASCADE, related_name='items', db_column='presId')
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    ai_reasons = models.TextField(blank=True, default='', db_column='aiReasons')
    doc_reason = models.TextField(blank=True, default='', db_column='docReason')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'items'
        ordering = ['id']
