from django.db import models

from .timeseries import METRICS


class SensorReading(models.Model):
    """One telemetry sample published by a sensor station"""
    station_id = models.CharField(max_length=100)
    recorded_at = models.DateTimeField()
    air_temp_c = models.FloatField(null=True, blank=True)
    air_humidity_percent = models.FloatField(null=True, blank=True)
    water_temp_c = models.FloatField(null=True, blank=True)
    water_tds_ppm = models.FloatField(null=True, blank=True)
    gas_ppm = models.FloatField(null=True, blank=True)
    extra = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'sensor_readings'
        ordering = ['station_id', 'recorded_at']
        indexes = [
            models.Index(fields=['station_id', 'recorded_at'], name='sensor_read_station_4b8e2f_idx'),
            models.Index(fields=['recorded_at'], name='sensor_read_recorde_c61a9d_idx'),
        ]

    def __str__(self):
        return f"{self.station_id} @ {self.recorded_at.isoformat()}"

    def to_record(self):
        record = {
            'station_id': self.station_id,
            'timestamp': int(self.recorded_at.timestamp()),
            'datetime': self.recorded_at.isoformat(),
        }
        record.update({metric: getattr(self, metric) for metric in METRICS})
        return record
