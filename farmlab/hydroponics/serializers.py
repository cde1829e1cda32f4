from rest_framework import serializers
from .models import BarleyPlate


class BarleyPlateSerializer(serializers.ModelSerializer):
    days_growing = serializers.SerializerMethodField()
    days_until_harvest = serializers.SerializerMethodField()
    is_ready_for_harvest = serializers.SerializerMethodField()
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = BarleyPlate
        fields = [
            'id', 'plate_number', 'farm_id', 'start_date', 'expected_harvest_date',
            'actual_harvest_date', 'seed_weight', 'plate_units', 'status', 'notes',
            'days_growing', 'days_until_harvest', 'is_ready_for_harvest',
            'created_by', 'created_by_username', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']
        # Duplicate plate numbers are answered with 409 by the views
        validators = []

    def get_days_growing(self, obj):
        return obj.days_growing()

    def get_days_until_harvest(self, obj):
        return obj.days_until_harvest()

    def get_is_ready_for_harvest(self, obj):
        return obj.is_ready_for_harvest()

    def validate_seed_weight(self, value):
        if value <= 0:
            raise serializers.ValidationError('Seed weight must be greater than zero.')
        return value

    def validate_plate_units(self, value):
        if value <= 0:
            raise serializers.ValidationError('Plate units must be greater than zero.')
        return value

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        expected = attrs.get('expected_harvest_date', getattr(self.instance, 'expected_harvest_date', None))
        if start and expected and expected < start:
            raise serializers.ValidationError({'expected_harvest_date': 'Expected harvest date cannot be before the start date.'})
        return attrs

    def create(self, validated_data):
        status = validated_data.pop('status', 'growing')
        harvest_date = validated_data.pop('actual_harvest_date', None)
        plate = BarleyPlate(**validated_data)
        plate.apply_status(status, harvest_date)
        plate.save()
        return plate

    def update(self, instance, validated_data):
        status = validated_data.pop('status', None)
        harvest_date = validated_data.pop('actual_harvest_date', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if status is not None:
            instance.apply_status(status, harvest_date)
        elif harvest_date is not None and instance.status == 'harvested':
            instance.actual_harvest_date = harvest_date
        instance.save()
        return instance
