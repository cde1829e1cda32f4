from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('category', models.CharField(choices=[('animal_feed', 'Animal Feed'), ('animal_medicine', 'Animal Medicine'), ('plant_seeds', 'Plant Seeds'), ('plant_seedlings', 'Plant Seedlings'), ('plant_nutrition', 'Plant Nutrition'), ('plant_medicine', 'Plant Medicine')], max_length=30)),
                ('description', models.TextField(blank=True)),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('kilogram_quantity', models.DecimalField(blank=True, decimal_places=3, help_text='Deprecated, use kg_per_unit', max_digits=10, null=True)),
                ('kg_per_unit', models.DecimalField(blank=True, decimal_places=3, help_text='Kilograms per unit/package', max_digits=10, null=True)),
                ('unit_count', models.PositiveIntegerField(blank=True, null=True)),
                ('unit_price', models.DecimalField(blank=True, decimal_places=4, help_text='Price per kilogram', max_digits=12, null=True)),
                ('total', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('unit', models.CharField(blank=True, max_length=50)),
                ('amount_per_unit', models.DecimalField(blank=True, decimal_places=3, max_digits=10, null=True)),
                ('good_for', models.JSONField(blank=True, default=list)),
                ('usage_description', models.TextField(blank=True)),
                ('seed_type', models.CharField(blank=True, max_length=100)),
                ('planting_instructions', models.TextField(blank=True)),
                ('harvest_time', models.CharField(blank=True, max_length=100)),
                ('growth_conditions', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'products',
                'ordering': ['name'],
                'constraints': [models.UniqueConstraint(fields=('name', 'category'), name='unique_product_name_category')],
            },
        ),
    ]
