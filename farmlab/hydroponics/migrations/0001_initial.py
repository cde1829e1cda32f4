import django.db.models.deletion
import farmlab.hydroponics.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='BarleyPlate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('plate_number', models.CharField(max_length=50)),
                ('start_date', models.DateField()),
                ('expected_harvest_date', models.DateField()),
                ('actual_harvest_date', models.DateField(blank=True, null=True)),
                ('seed_weight', models.DecimalField(decimal_places=3, help_text='Seed weight in kilograms', max_digits=8)),
                ('plate_units', models.PositiveIntegerField(default=1)),
                ('status', models.CharField(choices=[('growing', 'Growing'), ('ready', 'Ready'), ('harvested', 'Harvested')], default='growing', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('farm_id', models.CharField(default=farmlab.hydroponics.models.default_farm_id, max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='barley_plates', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'hydroponic_barley',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['farm_id', 'status'], name='hydroponic__farm_id_7e2d4a_idx')],
                'constraints': [models.UniqueConstraint(fields=('farm_id', 'plate_number'), name='unique_plate_per_farm')],
            },
        ),
    ]
