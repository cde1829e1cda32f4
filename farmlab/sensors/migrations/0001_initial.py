from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='SensorReading',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('station_id', models.CharField(max_length=100)),
                ('recorded_at', models.DateTimeField()),
                ('air_temp_c', models.FloatField(blank=True, null=True)),
                ('air_humidity_percent', models.FloatField(blank=True, null=True)),
                ('water_temp_c', models.FloatField(blank=True, null=True)),
                ('water_tds_ppm', models.FloatField(blank=True, null=True)),
                ('gas_ppm', models.FloatField(blank=True, null=True)),
                ('extra', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'sensor_readings',
                'ordering': ['station_id', 'recorded_at'],
                'indexes': [models.Index(fields=['station_id', 'recorded_at'], name='sensor_read_station_4b8e2f_idx'), models.Index(fields=['recorded_at'], name='sensor_read_recorde_c61a9d_idx')],
            },
        ),
    ]
