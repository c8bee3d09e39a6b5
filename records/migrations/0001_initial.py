from django.db import migrations, models

import records.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100)),
                ('apellido', models.CharField(max_length=100)),
                ('numero_historia_clinica', models.CharField(max_length=50, unique=True)),
                ('dni', models.CharField(max_length=20, unique=True)),
                ('telefono', models.CharField(max_length=32)),
                ('email', models.CharField(blank=True, default='', max_length=254)),
                ('fecha_nacimiento', models.DateField(blank=True, null=True)),
                ('historia_clinica', models.JSONField(default=records.models.default_clinical_history)),
                ('imagenes', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
    ]
