import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ContactMessage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.EmailField(max_length=254)),
                ('subject', models.CharField(max_length=200)),
                ('message', models.TextField(max_length=2000)),
                ('phone', models.CharField(blank=True, max_length=30)),
                ('status', models.CharField(choices=[('new', 'New'), ('read', 'Read'), ('responded', 'Responded'), ('resolved', 'Resolved')], default='new', max_length=20)),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High')], default='medium', max_length=10)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'contact_messages',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['email', '-created_at'], name='contact_mes_email_2f6b1d_idx'),
                    models.Index(fields=['status', 'priority', '-created_at'], name='contact_mes_status_8a3e5c_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='WaitlistEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_type', models.CharField(max_length=100)),
                ('farm_size', models.CharField(blank=True, max_length=100)),
                ('tech_experience', models.CharField(max_length=100)),
                ('interests', models.JSONField(blank=True, default=list)),
                ('expectations', models.JSONField(blank=True, default=list)),
                ('name', models.CharField(max_length=255)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('location', models.CharField(max_length=255)),
                ('organization', models.CharField(blank=True, max_length=255)),
                ('role', models.CharField(blank=True, max_length=255)),
                ('experience', models.TextField(blank=True)),
                ('challenges', models.TextField(blank=True)),
                ('goals', models.TextField(blank=True)),
                ('ip_address', models.CharField(default='unknown', max_length=100)),
                ('user_agent', models.TextField(default='unknown')),
                ('source', models.CharField(default='immersive_waitlist', max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'waitlist',
                'ordering': ['-created_at'],
                'verbose_name_plural': 'waitlist entries',
            },
        ),
        migrations.CreateModel(
            name='RegistrationResponse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('roles', models.JSONField(default=list)),
                ('country', models.CharField(blank=True, max_length=100)),
                ('answers', models.JSONField(default=dict)),
                ('submitted_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registration_responses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'registration_responses',
                'ordering': ['-submitted_at'],
            },
        ),
    ]
