from rest_framework import serializers
from .models import SensorReading


class SensorReadingSerializer(serializers.ModelSerializer):
    class Meta:
        model = SensorReading
        fields = [
            'id', 'station_id', 'recorded_at', 'air_temp_c', 'air_humidity_percent',
            'water_temp_c', 'water_tds_ppm', 'gas_ppm', 'extra', 'created_at'
        ]
        read_only_fields = ['created_at']

    def validate_station_id(self, value):
        value = value.strip().lower()
        if not value.startswith('sensorstation'):
            raise serializers.ValidationError("Station id must start with 'sensorstation'.")
        return value

    def validate_air_humidity_percent(self, value):
        if value is not None and not 0 <= value <= 100:
            raise serializers.ValidationError('Humidity must be between 0 and 100.')
        return value


class MicroclimateQuerySerializer(serializers.Serializer):
    ti = serializers.FloatField(help_text="Inside temperature (°C)")
    hi = serializers.FloatField(help_text="Inside relative humidity (%)")
    to = serializers.FloatField(help_text="Outside temperature (°C)")
    ho = serializers.FloatField(help_text="Outside relative humidity (%)")

    def _validate_humidity(self, value):
        if not 0 < value <= 100:
            raise serializers.ValidationError('Humidity must be greater than 0 and at most 100.')
        return value

    def validate_hi(self, value):
        return self._validate_humidity(value)

    def validate_ho(self, value):
        return self._validate_humidity(value)
