import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, default='', max_length=200)),
                ('phn_number', models.CharField(blank=True, db_column='phnNumber', default='', max_length=30)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('password', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'users',
            },
        ),
        migrations.CreateModel(
            name='Doctor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, default='', max_length=200)),
                ('phn_number', models.CharField(blank=True, db_column='phnNumber', default='', max_length=30)),
                ('speciality', models.CharField(blank=True, default='', max_length=100)),
                ('username', models.CharField(max_length=150, unique=True)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('password', models.CharField(max_length=255)),
                ('accuracy', models.FloatField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'doctors',
            },
        ),
        migrations.CreateModel(
            name='Prescription',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('symptoms', models.TextField(blank=True, default='')),
                ('link', models.TextField(blank=True, default='')),
                ('seen_by_patient', models.BooleanField(db_column='seenByPatient', default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('doctor', models.ForeignKey(db_column='docId', on_delete=django.db.models.deletion.CASCADE, related_name='prescriptions', to='medinfo.doctor')),
                ('user', models.ForeignKey(db_column='userId', on_delete=django.db.models.deletion.CASCADE, related_name='prescriptions', to='medinfo.user')),
            ],
            options={
                'db_table': 'prescriptions',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('type', models.CharField(choices=[('test', 'Test'), ('med', 'Medicine')], max_length=10)),
                ('ai_reasons', models.TextField(blank=True, db_column='aiReasons', default='')),
                ('doc_reason', models.TextField(blank=True, db_column='docReason', default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('prescription', models.ForeignKey(db_column='presId', on_delete=django.db.models.deletion.CASCADE, related_name='items', to='medinfo.prescription')),
            ],
            options={
                'db_table': 'items',
                'ordering': ['id'],
            },
        ),
    ]
